import time

from octoping.constants import OCTOPING_PORT, USEC


def parse_addr(addr, port=OCTOPING_PORT):
    """ Parse IP addresses and ports.
        Works with:
            IPv6 address with and without port;
            IPv4 address with and without port.
    """
    if addr == '':
        # no address given (default: any IPv4)
        return "", port, 0
    elif ']:' in addr:
        # IPv6 address with port
        ip, port = addr.rsplit(':', 1)
        return ip.strip('[]'), int(port), 6
    elif ']' in addr:
        # IPv6 address without port
        return addr.strip('[]'), port, 6
    elif addr.count(':') > 1:
        # IPv6 address without port
        return addr, port, 6
    elif ':' in addr:
        # IPv4 address with port
        ip, port = addr.split(':')
        return ip, int(port), 4
    else:
        # IPv4 address without port
        return addr, port, 4


def now():
    """Wall clock in microseconds."""
    return time.time_ns() // 1000


def format_time(us):
    if abs(us) > 60 * USEC:
        return "%7.1fmin" % float(us / (60 * USEC))
    if abs(us) > 10 * USEC:
        return "%7.1fsec" % float(us / USEC)
    if abs(us) > USEC:
        return "%7.2fsec" % float(us / USEC)
    if abs(us) > 1000:
        return "%8.2fms" % (us / 1000)
    return "%8dus" % int(us)
