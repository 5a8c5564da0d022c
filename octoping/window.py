import logging

from octoping.constants import CAPACITY
from octoping.packet import Probe

logger = logging.getLogger(__name__)


class ProbeWindow:
    """
    Fixed size record of the outstanding probes.

    Slot ``sequence % capacity`` holds the send time of the probe occupying
    it, or None. ``basis`` is the first sequence number of the current
    round of slots. A probe is lost when its slot is reused by a newer probe
    before the echo came back, or when it is still outstanding at the end of
    the run. There is no time-out inside the window.
    """

    def __init__(self, capacity=CAPACITY):
        self.capacity = capacity
        self.slots = [None] * capacity
        self.basis = 0
        self.next_sequence = 0

    def __len__(self):
        return sum(1 for sent_at in self.slots if sent_at is not None)

    def register(self, sequence, sent_at):
        """
        Record a probe that was just sent. Sequences must be registered in
        order. Returns the Probe evicted from the slot, if any, which must be
        reported as lost.
        """
        if sequence >= self.basis + self.capacity:
            self.basis = (sequence // self.capacity) * self.capacity

        index = sequence - self.basis
        evicted = None
        if self.slots[index] is not None:
            evicted = Probe(sequence - self.capacity, self.slots[index])
            logger.debug("slot %d reused by %d, probe %d lost", index, sequence, evicted.sequence)

        self.slots[index] = sent_at
        self.next_sequence = sequence + 1
        return evicted

    def _index(self, sequence):
        if self.basis <= sequence < self.basis + self.capacity:
            return sequence - self.basis
        if self.basis - self.capacity <= sequence < self.basis:
            # sent just before the last basis advance
            return sequence + self.capacity - self.basis
        return None

    def resolve(self, sequence):
        """
        Clear the slot of an echoed probe. Returns True if an outstanding
        probe was cleared, False for untracked, already resolved or evicted
        sequences.
        """
        if sequence >= self.next_sequence or self.next_sequence - sequence > self.capacity:
            # not sent yet, or the slot belongs to a newer probe
            return False
        index = self._index(sequence)
        if index is None or self.slots[index] is None:
            return False
        self.slots[index] = None
        return True

    def outstanding(self):
        """Probes not yet resolved, ordered by sequence."""
        probes = []
        for index, sent_at in enumerate(self.slots):
            if sent_at is None:
                continue
            sequence = self.basis + index
            if sequence >= self.next_sequence:
                sequence -= self.capacity
            probes.append(Probe(sequence, sent_at))
        probes.sort()
        return probes

    def drain(self):
        """Empty the window, returning every outstanding probe as lost."""
        lost = self.outstanding()
        self.slots = [None] * self.capacity
        return lost
