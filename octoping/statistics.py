import click

from octoping.utils import format_time


class DelayStatistics:
    """Min, max, average and RFC1889 jitter of one delay series, in usec."""

    def __init__(self):
        self.count = 0
        self.min = None
        self.max = None
        self.total = 0
        self.jitter = 0
        self.last = None

    def add(self, delay):
        if self.count == 0:
            self.min = self.max = delay
        else:
            self.min = min(self.min, delay)
            self.max = max(self.max, delay)
            variation = abs(delay - self.last)
            if self.count == 1:
                self.jitter = variation
            else:
                self.jitter += (variation - self.jitter) / 16
        self.total += delay
        self.last = delay
        self.count += 1

    @property
    def avg(self):
        return self.total / self.count

    def columns(self):
        return "%s  %s  %s  %s" % (
            format_time(self.min),
            format_time(self.max),
            format_time(self.avg),
            format_time(self.jitter))


class SessionStatistics:
    """Delay and loss summary of a sender run."""

    def __init__(self):
        self.up = DelayStatistics()
        self.down = DelayStatistics()
        self.rtt = DelayStatistics()
        self.lost = 0

    @property
    def count(self):
        """Probes whose first echo came back in time."""
        return self.rtt.count

    def add(self, record):
        self.up.add(record.up_t)
        self.down.add(record.down_t)
        self.rtt.add(record.rtt)

    def add_loss(self, record):
        self.lost += 1

    def loss_ratio(self, total):
        if total == 0:
            return 0.0
        return float(self.lost) / total

    def dump(self, total, err=False):
        click.echo(
            "===============================================================================", err=err)
        click.echo(
            "Direction         Min         Max         Avg          Jitter     Loss", err=err)
        click.echo(
            "-------------------------------------------------------------------------------", err=err)
        if self.count > 0:
            click.echo("  Uplink:      %s" % self.up.columns(), err=err)
            click.echo("  Downlink:    %s" % self.down.columns(), err=err)
            click.echo("  Roundtrip:   %s    %5.1f%%" % (
                self.rtt.columns(), 100 * self.loss_ratio(total)), err=err)
        else:
            click.echo("  NO STATS AVAILABLE (100% loss)", err=True)
        click.echo(
            "-------------------------------------------------------------------------------", err=err)
        click.echo(
            "  %d probes sent, %d echoed, %d lost       Jitter Algorithm [RFC1889]" % (
                total, self.count, self.lost), err=err)
        click.echo(
            "===============================================================================", err=err)
