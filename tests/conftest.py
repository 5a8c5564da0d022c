"""
Pytest configuration and fixtures for octoping tests.

The scheduler is exercised against an in-memory network: a virtual clock in
microseconds that only moves forward when the scheduler waits, and a
loopback transport that reflects every probe after a fixed uplink and
downlink delay.
"""

import heapq
import io
import sys
from pathlib import Path

import pytest

# Add the repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from octoping.errors import ReportError  # noqa: E402
from octoping.packet import decode_probe, encode_probe, reflect  # noqa: E402


START_TIME = 1_700_000_000_000_000


class VirtualClock:

    def __init__(self, start=START_TIME):
        self.t = start

    def __call__(self):
        return self.t


class LoopbackNetwork:
    """Transport double reflecting probes on a virtual clock."""

    def __init__(self, clock, up=2000, down=3000, offset=0):
        self.clock = clock
        self.up = up
        self.down = down
        self.offset = offset
        self.drop = set()
        self.duplicate = set()
        self.rewrite = {}
        self.stalls = {}
        self.send_error = None
        self.sent = []
        self.queue = []
        self._order = 0

    def inject(self, arrival, data):
        heapq.heappush(self.queue, (arrival, self._order, data))
        self._order += 1

    def send(self, data):
        if self.send_error is not None:
            raise self.send_error
        probe = decode_probe(data)
        self.sent.append(probe)
        if probe.sequence in self.drop:
            return

        echo = reflect(data, self.clock.t + self.up + self.offset)
        if probe.sequence in self.rewrite:
            echo = encode_probe(self.rewrite[probe.sequence], probe.sent_at) + echo[16:]
        arrival = self.clock.t + self.up + self.down
        self.inject(arrival, echo)
        if probe.sequence in self.duplicate:
            self.inject(arrival + 1000, echo)

    def receive(self, timeout):
        stall = self.stalls.pop(len(self.sent), 0)
        if stall:
            self.clock.t += stall
            return None

        deadline = self.clock.t + timeout
        if self.queue and self.queue[0][0] <= deadline:
            arrival, _, data = heapq.heappop(self.queue)
            self.clock.t = max(self.clock.t, arrival)
            return data
        self.clock.t = deadline
        return None


class ListSink:
    """Report sink keeping records in memory."""

    def __init__(self, on_emit=None, fail_after=None):
        self.header = False
        self.records = []
        self.flushes = 0
        self.on_emit = on_emit
        self.fail_after = fail_after

    def write_header(self):
        self.header = True

    def emit(self, record):
        if self.fail_after is not None and len(self.records) >= self.fail_after:
            raise ReportError("disk full")
        self.records.append(record)
        if self.on_emit is not None:
            self.on_emit(record)

    def flush(self):
        self.flushes += 1

    def close(self):
        pass

    @property
    def numbers(self):
        return [record.number for record in self.records]

    @property
    def losses(self):
        return [record for record in self.records if record.echo == 0 and record.rtt == 0]


class FullDiskStream(io.StringIO):
    """Report stream accepting lines but failing the first time it is closed."""

    failed = False

    def close(self):
        if not self.failed:
            self.failed = True
            raise OSError(28, "No space left on device")
        io.StringIO.close(self)


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def network(clock):
    return LoopbackNetwork(clock)


@pytest.fixture
def sink():
    return ListSink()


@pytest.fixture
def make_scheduler(network, sink, clock):
    """Build a ProbeScheduler wired to the loopback network."""
    from octoping.scheduler import ProbeScheduler

    def factory(interval=10000, duration=100000, **kwargs):
        kwargs.setdefault('sink', sink)
        return ProbeScheduler(network, kwargs.pop('sink'), clock, interval, duration, **kwargs)
    return factory
