import logging

from octoping.constants import OCTOPING_PORT, POLL_INTERVAL
from octoping.errors import TransportError
from octoping.packet import reflect
from octoping.session import udpSession
from octoping.utils import parse_addr, now

logger = logging.getLogger(__name__)


class SessionReflector(udpSession):
    """Timestamps and echoes every probe, without any per sender state."""

    def __init__(self, near_end, tos=0, ttl=64):
        addr, port, ipversion = parse_addr(near_end, OCTOPING_PORT)
        udpSession.__init__(self, addr, port, tos, ttl, ipversion)
        self.reflected = 0

    def handle(self, data, address, received_at):
        reply = reflect(data, received_at)
        if reply is None:
            logger.debug("ignore short datagram from %s (%d bytes)", address[0], len(data))
            return False
        self.sendto(reply, address)
        self.reflected += 1
        return True

    def run(self):
        logger.info("Octoping waiting for probes on port %d", self.socket.getsockname()[1])
        try:
            while self.running:
                if not self.wait(POLL_INTERVAL):
                    continue
                data, address = self.recvfrom()
                self.handle(data, address, now())
        except TransportError as e:
            logger.critical("*** %s", e)
            self.exit_code = e.exit_code
        finally:
            self.close()

        logger.info("Reflector stopped after %d echoes", self.reflected)
