#!/usr/bin/env python3

from octoping.constants import DSCP_MAP, INTERVAL_DEFAULT, DURATION_DEFAULT, TTL_DEFAULT, TOS_DEFAULT, DSCP_DEFAULT, OCTOPING_PORT
from octoping.errors import OctopingError
from octoping.report import ReportWriter
from octoping.sessionreflector import SessionReflector
from octoping.sessionsender import SessionSender

import click
import click_log
import signal
import time
import functools

from logging.handlers import TimedRotatingFileHandler


import logging
logger = logging.getLogger("octoping")
click_logger = click_log.basic_config(logger)


class HexParamType(click.ParamType):
    name = 'hex'

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value, 16)
        except (ValueError, UnicodeError):
            self.fail('%s is not valid hexadecimal' % value, param, ctx)

    def __repr__(self):
        return 'HEX'


class AliasedGroup(click.Group):

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        matches = [x for x in self.list_commands(ctx)
                   if x.startswith(cmd_name)]
        if not matches:
            return None
        elif len(matches) == 1:
            return click.Group.get_command(self, ctx, matches[0])
        ctx.fail('Please be more specific \n%s' % '\n'.join(sorted(matches)))


def ip_options(func):
    @click.option("--tos", metavar="<type-of-service>", default=hex(TOS_DEFAULT), type=HexParamType(), help='IP TOS value in hex format. ex.: 0x88')
    @click.option("--dscp", metavar="<dscp-value>", type=click.Choice(list(DSCP_MAP.keys())), default=DSCP_DEFAULT, help='IP DSCP value, overrides --tos')
    @click.option("--ttl", metavar="<time-to-live>", default=TTL_DEFAULT, type=click.IntRange(1, 255), help='[1..255]')
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        return func(*args, **kwargs)
    return wrapper


def type_of_service(tos, dscp):
    if dscp != DSCP_DEFAULT:
        return DSCP_MAP[dscp] << 2
    return tos


def run_session(session):
    session.daemon = True
    session.start()

    signal.signal(signal.SIGINT, session.stop)

    while session.is_alive():
        time.sleep(0.1)
    return session.exit_code


@click.group(cls=AliasedGroup)
@click_log.simple_verbosity_option(logger)
@click.option("-q", "--quiet", "quiet", is_flag=True)
@click.option("-l", "--logfile", "logfile", type=click.Path())
def cli(quiet, logfile):
    """Measure round-trip time, uplink/downlink delay and loss of a network
       path with UDP probes echoed by an octoping reflector."""

    loglevel = logger.level
    if quiet:
        logger.setLevel(logging.CRITICAL)

    if loglevel >= logging.DEBUG and logfile:
        file_handler = TimedRotatingFileHandler(
            filename=logfile, when='midnight', backupCount=31)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        file_handler.setLevel(loglevel)
        click_logger.addHandler(file_handler)


@cli.command('sender')
@click.argument('far_end', metavar='remote-ip:port')
@click.option('-n', '--near-end', metavar='local-ip:port', default=":0", help="Local address and source port")
@click.option('-i', '--interval', metavar='msec', default=INTERVAL_DEFAULT, type=click.IntRange(1, None), help="Time between probes")
@click.option('-d', '--duration', metavar='seconds', default=DURATION_DEFAULT, type=click.IntRange(1, None), help="Time during which probes are sent")
@click.option('-o', '--output', metavar='file', default='-', type=click.Path(dir_okay=False, allow_dash=True), help="Report file, '-' for stdout")
@click.option('--summary/--no-summary', default=True, help="Print delay and loss statistics at the end")
@ip_options
@click.pass_context
def sender(ctx, far_end, near_end, interval, duration, output, summary, tos, dscp, ttl):
    """Send probes to a reflector and report every probe."""
    try:
        report = ReportWriter.open(output)
    except OctopingError as e:
        logger.critical("*** %s", e)
        ctx.exit(e.exit_code)

    try:
        session = SessionSender(
            near_end, far_end, interval, duration, report,
            tos=type_of_service(tos, dscp), ttl=ttl,
            progress=output != '-', summary=summary, summary_err=output == '-')
    except OctopingError as e:
        report.close()
        logger.critical("*** %s", e)
        ctx.exit(e.exit_code)
    session.name = "octoping_sender"
    ctx.exit(run_session(session))


@cli.command('reflector')
@click.argument('near_end', metavar='local-ip:port', default=":%d" % OCTOPING_PORT)
@ip_options
@click.pass_context
def reflector(ctx, near_end, tos, dscp, ttl):
    """Echo probes back to their sender with a receive timestamp."""
    try:
        session = SessionReflector(near_end, tos=type_of_service(tos, dscp), ttl=ttl)
    except OctopingError as e:
        logger.critical("*** %s", e)
        ctx.exit(e.exit_code)
    session.name = "octoping_reflector"
    ctx.exit(run_session(session))


def main():
    cli(auto_envvar_prefix='OCTOPING')


if __name__ == "__main__":
    main()
