"""
Wire codec of the probe and echo datagrams.

    probe (sender -> reflector), 16 bytes:
        [0:8)   sequence
        [8:16)  sent_at, usec on the sender clock
    echo (reflector -> sender), 24 bytes:
        [0:16)  the probe, unmodified
        [16:24) remote_received_at, usec on the reflector clock

All fields are unsigned 64bit big-endian integers.
"""

import struct
from collections import namedtuple

from octoping.constants import PROBE_FORMAT, ECHO_FORMAT, PROBE_SIZE, ECHO_SIZE


Probe = namedtuple('Probe', ['sequence', 'sent_at'])
Echo = namedtuple('Echo', ['sequence', 'sent_at', 'remote_received_at'])


def encode_probe(sequence, sent_at):
    return struct.pack(PROBE_FORMAT, sequence, sent_at)


def decode_probe(data):
    """Return the Probe carried by data, or None if data is too short."""
    if len(data) < PROBE_SIZE:
        return None
    return Probe(*struct.unpack(PROBE_FORMAT, data[:PROBE_SIZE]))


def decode_echo(data):
    """Return the Echo carried by data, or None if data is too short."""
    if len(data) < ECHO_SIZE:
        return None
    return Echo(*struct.unpack(ECHO_FORMAT, data[:ECHO_SIZE]))


def reflect(data, received_at):
    """
    Build the echo of a probe: the first 16 bytes received followed by the
    reflector's receive time. Datagrams shorter than a probe get no echo.
    """
    if len(data) < PROBE_SIZE:
        return None
    return data[:PROBE_SIZE] + struct.pack('!Q', received_at)
