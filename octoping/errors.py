from octoping.constants import EXIT_PROTOCOL, EXIT_REPORT, EXIT_TRANSPORT


class OctopingError(Exception):
    """Base class for all fatal measurement errors."""

    exit_code = 1


class TransportError(OctopingError):
    """Socket level failure (bind, send, receive or wait)."""

    exit_code = EXIT_TRANSPORT

    def __init__(self, operation, cause):
        self.operation = operation
        self.errno = getattr(cause, 'errno', None)
        OctopingError.__init__(self, "%s failed: %s (errno=%s)" % (operation, cause, self.errno))


class ProtocolViolation(OctopingError):
    """An echo referenced a probe that was never sent."""

    exit_code = EXIT_PROTOCOL

    def __init__(self, sequence, next_sequence):
        self.sequence = sequence
        self.next_sequence = next_sequence
        OctopingError.__init__(
            self, "received number %d while next number to send is %d" % (sequence, next_sequence))


class ReportError(OctopingError):
    """A report record could not be written."""

    exit_code = EXIT_REPORT
