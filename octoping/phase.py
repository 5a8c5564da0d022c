from collections import namedtuple


DelaySample = namedtuple('DelaySample', ['rtt', 'up_t', 'down_t', 'phase'])


class PhaseEstimator:
    """
    Splits round-trip times into uplink and downlink delays without
    synchronized clocks.

    The midpoint between local send and receive time is taken as the local
    time at which the reflector handled the probe, so ``remote_received_at -
    middle`` is a sample of the clock phase (remote minus local). Only
    samples whose rtt is within 1/8 of the best rtt seen move the phase, with
    a weight of 1/8, as slower round-trips carry queuing delay.
    """

    def __init__(self):
        self.phase = None
        self.min_rtt = None

    def update(self, sent_at, remote_received_at, echo_received_at):
        """
        Feed one echo (all times in usec). Returns a DelaySample, or None if
        the echo came back before it was sent according to the local clock.
        """
        if sent_at >= echo_received_at:
            return None

        rtt = echo_received_at - sent_at
        middle = (echo_received_at + sent_at) // 2

        if self.phase is None:
            self.phase = remote_received_at - middle
            self.min_rtt = rtt
        else:
            if rtt < self.min_rtt:
                self.min_rtt = rtt
            if rtt < self.min_rtt + self.min_rtt // 8:
                self.phase = (7 * self.phase + remote_received_at - middle) // 8

        up_t = (remote_received_at - self.phase) - sent_at
        down_t = rtt - up_t
        if up_t < 0 or down_t < 0:
            # clock jump or stale phase: restart from this sample
            self.phase = remote_received_at - middle
            up_t = rtt // 2
            down_t = rtt - up_t

        return DelaySample(rtt, up_t, down_t, self.phase)
