"""
Unit tests for report records, the CSV writer and the summary statistics.
"""

import io

import pytest

from octoping.errors import ReportError
from octoping.packet import Echo, Probe
from octoping.phase import DelaySample
from octoping.report import HEADER, ReportRecord, ReportWriter, echo_record, loss_record
from octoping.statistics import SessionStatistics

from conftest import FullDiskStream


START = 1_000_000


class TestRecords:

    def test_echo_record_relative_times(self):
        echo = Echo(5, START + 10, START + 60)
        record = echo_record(echo, START + 110, DelaySample(100, 50, 50, 0), 0, START)

        assert record == ReportRecord(5, 10, 60, 110, 100, 50, 50, 0)

    def test_echo_record_without_sample(self):
        echo = Echo(5, START + 200, START + 60)
        record = echo_record(echo, START + 110, None, None, START)

        assert record == ReportRecord(5, 200, 60, 110, 0, 0, 0, 0)

    def test_echo_record_without_sample_keeps_phase(self):
        echo = Echo(5, START + 200, START + 60)
        record = echo_record(echo, START + 110, None, -42, START)
        assert record.phase == -42

    def test_loss_record(self):
        record = loss_record(Probe(3, START + 30000), START)
        assert record == ReportRecord(3, 30000, 0, 0, 0, 0, 0, 0)


class TestReportWriter:

    def test_header_and_lines(self):
        stream = io.StringIO()
        writer = ReportWriter(stream)
        writer.write_header()
        writer.emit(ReportRecord(5, 0, 50, 100, 100, 50, 50, 0))
        writer.emit(ReportRecord(6, 10, 0, 0, 0, 0, 0, 0))
        writer.emit(ReportRecord(7, 20, 70, 120, 100, 60, 40, -10))

        assert stream.getvalue().splitlines() == [
            HEADER,
            "5,0,50,100,100,50,50,0",
            "6,10,0,0,0,0,0,0",
            "7,20,70,120,100,60,40,-10",
        ]
        assert writer.count == 3

    def test_header_names(self):
        assert HEADER == "number, sent, received, echo, rtt, up_t, down_t, phase"

    def test_write_failure_is_fatal(self):
        stream = io.StringIO()
        writer = ReportWriter(stream)
        stream.close()

        with pytest.raises(ReportError):
            writer.emit(ReportRecord(1, 0, 0, 0, 0, 0, 0, 0))
        with pytest.raises(ReportError):
            writer.flush()

    def test_close_failure_is_fatal(self):
        writer = ReportWriter(FullDiskStream())
        writer.write_header()

        with pytest.raises(ReportError) as excinfo:
            writer.close()
        assert "No space left" in str(excinfo.value)

    def test_close_keeps_stdout_open(self):
        stream = io.StringIO()
        ReportWriter(stream, closing=False).close()
        assert not stream.closed

    def test_open_file(self, tmp_path):
        path = tmp_path / "report.csv"
        writer = ReportWriter.open(str(path))
        writer.write_header()
        writer.emit(ReportRecord(0, 0, 1, 2, 2, 1, 1, 0))
        writer.close()

        assert path.read_text().splitlines() == [HEADER, "0,0,1,2,2,1,1,0"]

    def test_open_failure(self, tmp_path):
        with pytest.raises(ReportError):
            ReportWriter.open(str(tmp_path / "missing" / "report.csv"))


class TestSessionStatistics:

    def test_min_max_jitter(self):
        stats = SessionStatistics()
        stats.add(ReportRecord(0, 0, 0, 0, 1000, 400, 600, 0))
        stats.add(ReportRecord(1, 0, 0, 0, 3000, 1400, 1600, 0))
        stats.add(ReportRecord(2, 0, 0, 0, 2000, 900, 1100, 0))

        assert stats.count == 3
        assert (stats.rtt.min, stats.rtt.max, stats.rtt.avg) == (1000, 3000, 2000)
        assert (stats.up.min, stats.up.max) == (400, 1400)
        assert (stats.down.min, stats.down.max) == (600, 1600)
        # RFC1889: first difference, then smoothed by 1/16
        assert stats.rtt.jitter == 2000 + (1000 - 2000) / 16
        assert stats.up.jitter == 1000 + (500 - 1000) / 16

    def test_loss_ratio(self):
        stats = SessionStatistics()
        stats.add(ReportRecord(0, 0, 0, 0, 1000, 500, 500, 0))
        stats.add_loss(ReportRecord(1, 0, 0, 0, 0, 0, 0, 0))

        assert stats.lost == 1
        assert stats.loss_ratio(4) == 0.25
        assert SessionStatistics().loss_ratio(0) == 0.0

    def test_dump(self, capsys):
        stats = SessionStatistics()
        stats.add(ReportRecord(0, 0, 0, 0, 5000, 2500, 2500, 0))
        stats.add_loss(ReportRecord(1, 0, 0, 0, 0, 0, 0, 0))
        stats.dump(2)

        out = capsys.readouterr().out
        assert "Roundtrip" in out
        assert "Uplink" in out
        assert "Downlink" in out
        assert " 50.0%" in out
        assert "2 probes sent, 1 echoed, 1 lost" in out

    def test_dump_without_echo(self, capsys):
        stats = SessionStatistics()
        stats.dump(3)

        captured = capsys.readouterr()
        assert "NO STATS AVAILABLE (100% loss)" in captured.err
