import click
from collections import namedtuple

from octoping.errors import ReportError


HEADER = "number, sent, received, echo, rtt, up_t, down_t, phase"

ReportRecord = namedtuple(
    'ReportRecord', ['number', 'sent', 'received', 'echo', 'rtt', 'up_t', 'down_t', 'phase'])


def echo_record(echo, echo_received_at, sample, phase, start_time):
    """Record of an echoed probe, times relative to start_time."""
    if sample is None:
        rtt, up_t, down_t = 0, 0, 0
    else:
        rtt, up_t, down_t, phase = sample
    return ReportRecord(
        echo.sequence,
        echo.sent_at - start_time,
        echo.remote_received_at - start_time,
        echo_received_at - start_time,
        rtt, up_t, down_t,
        phase if phase is not None else 0)


def loss_record(probe, start_time):
    """Record of a probe never echoed: only the send time is known."""
    return ReportRecord(probe.sequence, probe.sent_at - start_time, 0, 0, 0, 0, 0, 0)


class ReportWriter:
    """
    CSV report, one line per resolved probe. Write failures raise
    ReportError.
    """

    def __init__(self, stream, closing=True):
        self.stream = stream
        self.closing = closing
        self.count = 0

    @classmethod
    def open(cls, filename):
        """Open filename for writing, '-' meaning stdout."""
        try:
            return cls(click.open_file(filename, 'w'), closing=filename != '-')
        except OSError as e:
            raise ReportError("cannot open %s: %s" % (filename, e))

    def _write(self, line):
        try:
            click.echo(line, file=self.stream)
        except (OSError, ValueError) as e:
            raise ReportError("cannot write report line %r: %s" % (line, e))

    def write_header(self):
        self._write(HEADER)

    def emit(self, record):
        self._write(",".join("%d" % value for value in record))
        self.count += 1

    def flush(self):
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            raise ReportError("cannot flush report: %s" % e)

    def close(self):
        if not self.closing:
            self.flush()
            return
        try:
            self.stream.close()
        except (OSError, ValueError) as e:
            raise ReportError("cannot close report: %s" % e)
