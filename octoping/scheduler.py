import enum
import logging

import click

from octoping.constants import CAPACITY, GRACE_PERIOD, REPORT_PERIOD
from octoping.errors import ProtocolViolation
from octoping.packet import encode_probe, decode_echo
from octoping.phase import PhaseEstimator
from octoping.report import echo_record, loss_record
from octoping.statistics import SessionStatistics
from octoping.window import ProbeWindow

logger = logging.getLogger(__name__)


class RunState(enum.Enum):
    WARMUP = "warmup"
    ACTIVE_SEND_RECV = "active"
    DRAIN_WAIT = "drain-wait"
    FINALIZING = "finalizing"
    DONE = "done"


class ProbeScheduler:
    """
    Measurement loop of the sender.

    Each iteration either sends the next probe, if it is due, or waits on the
    transport until the next send time for an echo. Probes are sent every
    ``interval`` usec during ``duration`` usec, then echoes are still
    accepted for GRACE_PERIOD usec. At the end every probe still outstanding
    is reported as lost.

    The transport must provide ``send(data)`` and ``receive(timeout)``, the
    latter returning one datagram or None after at most ``timeout`` usec.
    ``clock`` returns the current time in usec.
    """

    def __init__(self, transport, sink, clock, interval, duration, capacity=CAPACITY, progress=False):
        self.transport = transport
        self.sink = sink
        self.clock = clock
        self.interval = interval
        self.duration = duration
        self.progress = progress

        self.window = ProbeWindow(capacity)
        self.estimator = PhaseEstimator()
        self.stats = SessionStatistics()

        self.sequence = 0
        self.start_time = None
        self.state = RunState.WARMUP
        self.succeeded = None
        self.running = True

    def set_state(self, state):
        logger.info("run state %s -> %s", self.state.value, state.value)
        self.state = state

    def stop(self):
        """Finish early: the outstanding probes are still reported."""
        self.running = False

    def run(self):
        self.start_time = self.clock()
        next_send_time = self.start_time
        end_send_time = self.start_time + self.duration
        end_wait_time = end_send_time + GRACE_PERIOD
        report_time = self.start_time + REPORT_PERIOD

        try:
            self.sink.write_header()
            self.set_state(RunState.ACTIVE_SEND_RECV)

            t = self.start_time
            while self.running and t < end_wait_time:
                if t >= report_time:
                    self.sink.flush()
                    if self.progress:
                        click.echo(".", nl=False)
                    report_time += REPORT_PERIOD

                if t >= next_send_time:
                    self.send_probe(t)
                    while next_send_time <= t:
                        next_send_time += self.interval
                    if next_send_time > end_send_time:
                        logger.info("Sent %d probes, wait for late echoes", self.sequence)
                        next_send_time = end_wait_time
                        self.set_state(RunState.DRAIN_WAIT)
                else:
                    data = self.transport.receive(next_send_time - t)
                    if data is not None:
                        self.receive_echo(data, self.clock())
                t = self.clock()

            if self.progress:
                click.echo("")
            self.set_state(RunState.FINALIZING)
            for probe in self.window.drain():
                self.report_loss(probe)
            self.sink.flush()
        except Exception:
            self.succeeded = False
            self.set_state(RunState.DONE)
            raise

        self.succeeded = True
        self.set_state(RunState.DONE)

    def send_probe(self, t):
        self.transport.send(encode_probe(self.sequence, t))
        evicted = self.window.register(self.sequence, t)
        if evicted is not None:
            self.report_loss(evicted)
        self.sequence += 1

    def receive_echo(self, data, echo_received_at):
        echo = decode_echo(data)
        if echo is None:
            logger.debug("ignore short datagram (%d bytes)", len(data))
            return

        if echo.sequence >= self.sequence:
            raise ProtocolViolation(echo.sequence, self.sequence)

        sample = self.estimator.update(echo.sent_at, echo.remote_received_at, echo_received_at)
        if sample is None:
            logger.warning("echo %d received before it was sent (sent_at=%d, received=%d)",
                           echo.sequence, echo.sent_at, echo_received_at)
        resolved = self.window.resolve(echo.sequence)
        if not resolved:
            logger.debug("echo %d does not match an outstanding probe", echo.sequence)

        record = echo_record(echo, echo_received_at, sample, self.estimator.phase, self.start_time)
        self.sink.emit(record)
        if resolved and sample is not None:
            self.stats.add(record)
        logger.debug("echo %d rtt=%d up=%d down=%d phase=%d",
                     record.number, record.rtt, record.up_t, record.down_t, record.phase)

    def report_loss(self, probe):
        record = loss_record(probe, self.start_time)
        self.sink.emit(record)
        self.stats.add_loss(record)
        logger.debug("probe %d lost", probe.sequence)
