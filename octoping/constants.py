# Default UDP port of the reflector: first 4 hex digits of md5("octoping")
OCTOPING_PORT = 0xc389

# Wire layout (big-endian 64bit integers)
PROBE_FORMAT = '!QQ'        # sequence, sent_at
ECHO_FORMAT = '!QQQ'        # sequence, sent_at, remote_received_at
PROBE_SIZE = 16
ECHO_SIZE = 24
RECV_BUFFER = 9216

# Probe tracking
CAPACITY = 1024             # slots in the pending probe window
GRACE_PERIOD = 3000000      # usec to keep listening after the last probe
REPORT_PERIOD = 1000000     # usec between report flushes / progress dots
POLL_INTERVAL = 500000      # usec between checks of the running flag of an idle reflector

USEC = 1000000
MSEC = 1000

# CLI defaults
INTERVAL_DEFAULT = 100      # msec
DURATION_DEFAULT = 10       # seconds
TOS_DEFAULT = 0
TTL_DEFAULT = 64
DSCP_DEFAULT = 'be'

# Exit status of a session, one per fatal error class
EXIT_TRANSPORT = 1
EXIT_REPORT = 3
EXIT_PROTOCOL = 4

DSCP_MAP = {
    'be': 0,
    'cp1': 1, 'cp2': 2, 'cp3': 3, 'cp4': 4, 'cp5': 5, 'cp6': 6, 'cp7': 7,
    'cs1': 8,
    'af11': 10, 'af12': 12, 'af13': 14,
    'cs2': 16,
    'af21': 18, 'af22': 20, 'af23': 22,
    'cs3': 24,
    'af31': 26, 'af32': 28, 'af33': 30,
    'cs4': 32,
    'af41': 34, 'af42': 36, 'af43': 38,
    'cs5': 40,
    'ef': 46,
    'cs6': 48,
    'cs7': 56,
}
