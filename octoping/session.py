import binascii
import select
import socket
import threading

from octoping.constants import RECV_BUFFER, USEC
from octoping.errors import TransportError

import logging
logger = logging.getLogger(__name__)


class udpSession(threading.Thread):

    def __init__(self, addr="", port=0, tos=0, ttl=64, ipversion=4):
        threading.Thread.__init__(self)
        if ipversion == 6:
            self.bind6(addr, port, tos, ttl)
        else:
            self.bind(addr, port, tos, ttl)
        self.running = True
        self.exit_code = 0

    def bind(self, addr, port, tos, ttl):
        logger.debug(
            "bind(addr=%s, port=%d, tos=%d, ttl=%d)", addr, port, tos, ttl)
        self.socket = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_TOS, tos)
            self.socket.setsockopt(socket.IPPROTO_IP, socket.IP_TTL, ttl)
            self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.socket.bind((addr, port))
        except OSError as e:
            self.socket.close()
            raise TransportError("bind %s:%d" % (addr, port), e)

    def bind6(self, addr, port, tos, ttl):
        logger.debug(
            "bind6(addr=%s, port=%d, tos=%d, ttl=%d)", addr, port, tos, ttl)
        self.socket = socket.socket(
            socket.AF_INET6, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        try:
            self.socket.setsockopt(socket.IPPROTO_IPV6, socket.IPV6_TCLASS, tos)
            self.socket.setsockopt(
                socket.IPPROTO_IPV6, socket.IPV6_UNICAST_HOPS, ttl)
            self.socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self.socket.bind((addr, port))
        except OSError as e:
            self.socket.close()
            raise TransportError("bind [%s]:%d" % (addr, port), e)

    def sendto(self, data, address):
        logger.debug("transmit: %s", binascii.hexlify(data))
        try:
            self.socket.sendto(data, address)
        except OSError as e:
            raise TransportError("sendto %s" % (address,), e)

    def recvfrom(self):
        try:
            data, address = self.socket.recvfrom(RECV_BUFFER)
        except OSError as e:
            raise TransportError("recvfrom", e)
        logger.debug("received: %s", binascii.hexlify(data))
        return data, address

    def wait(self, timeout):
        """Wait at most timeout usec for a datagram, True if one is ready."""
        try:
            readable, _, _ = select.select([self.socket], [], [], float(timeout) / USEC)
        except (OSError, ValueError) as e:
            raise TransportError("select", e)
        return bool(readable)

    def stop(self, signum=None, frame=None):
        logger.info("Stop %s", self.name)
        self.running = False

    def close(self):
        self.socket.close()
