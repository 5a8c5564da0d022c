import logging

from octoping.constants import OCTOPING_PORT, MSEC, USEC
from octoping.errors import OctopingError
from octoping.scheduler import ProbeScheduler
from octoping.session import udpSession
from octoping.utils import parse_addr, now

logger = logging.getLogger(__name__)


class SessionSender(udpSession):
    """
    Sends probes to a reflector and writes one report record per probe.
    Implements the transport used by the ProbeScheduler.
    """

    def __init__(self, near_end, far_end, interval, duration, report, tos=0, ttl=64,
                 progress=False, summary=True, summary_err=False):
        # get Address, UDP port, IP version from near_end/far_end attributes
        sip, spt, sipv = parse_addr(near_end, 0)
        rip, rpt, ripv = parse_addr(far_end, OCTOPING_PORT)

        ipversion = 6 if (sipv == 6) or (ripv == 6) else 4
        udpSession.__init__(self, sip, spt, tos, ttl, ipversion)

        self.remote_addr = rip
        self.remote_port = rpt
        self.report = report
        self.summary = summary
        self.summary_err = summary_err
        self.scheduler = ProbeScheduler(
            self, report, now,
            interval=interval * MSEC,
            duration=duration * USEC,
            progress=progress)

    def send(self, data):
        self.sendto(data, (self.remote_addr, self.remote_port))

    def receive(self, timeout):
        if not self.wait(timeout):
            return None
        data, address = self.recvfrom()
        return data

    def stop(self, signum=None, frame=None):
        udpSession.stop(self, signum, frame)
        self.scheduler.stop()

    def run(self):
        logger.info("Will send probes to %s:%d", self.remote_addr, self.remote_port)
        try:
            self.scheduler.run()
        except OctopingError as e:
            self.abort(e)
        finally:
            self.close()
            try:
                self.report.close()
            except OctopingError as e:
                self.abort(e)

        if self.summary:
            self.stats_dump()
        logger.info("Session sender stopped")

    def abort(self, error):
        """Log a fatal error, the first one decides the exit status."""
        logger.critical("*** %s", error)
        if not self.exit_code:
            self.exit_code = error.exit_code

    def stats_dump(self):
        self.scheduler.stats.dump(self.scheduler.sequence, err=self.summary_err)
