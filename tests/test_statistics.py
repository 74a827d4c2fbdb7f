"""Tests for rolling statistics aggregation."""

from __future__ import annotations

from datetime import timedelta

from aisreporter.models.endpoint import EndpointStatistics, ReportStatistics, ReportTypeStats
from aisreporter.services import statistics
from tests.conftest import NOW


def _result(count: int, nbytes: int) -> ReportStatistics:
    return ReportStatistics(self_count=count, self_bytes=nbytes)


class TestUpdate:
    def test_totals_and_timestamp(self):
        stats = ReportTypeStats()
        result = ReportStatistics(self_count=1, self_bytes=50, others_count=2, others_bytes=90)
        statistics.update(stats, result, 0, NOW)
        assert stats.last_report_timestamp == NOW
        assert stats.total_reports_transmitted == 3
        assert stats.total_bytes_transmitted == 140
        assert stats.reports_in_last_hour[0] == 3
        assert stats.bytes_in_last_day[0] == 140

    def test_empty_result_still_stamps_time(self):
        stats = ReportTypeStats()
        statistics.update(stats, ReportStatistics(), 0, NOW)
        assert stats.last_report_timestamp == NOW
        assert stats.total_reports_transmitted == 0

    def test_tick_zero_does_not_rotate(self):
        stats = ReportTypeStats()
        statistics.update(stats, _result(1, 10), 0, NOW)
        assert stats.reports_in_last_hour[0] == 1
        assert stats.reports_in_last_day[0] == 1

    def test_totals_monotonic_and_window_bounded(self):
        stats = ReportTypeStats()
        previous = 0
        for tick in range(1, 200):
            statistics.update(stats, _result(tick % 3, 10), tick, NOW + timedelta(minutes=tick))
            assert stats.total_reports_transmitted >= previous
            assert sum(stats.reports_in_last_hour) <= stats.total_reports_transmitted
            previous = stats.total_reports_transmitted


class TestRotation:
    def test_hour_window_rotates_every_sixty_ticks(self):
        stats = ReportTypeStats()
        for tick in range(1, 60):
            statistics.update(stats, _result(2, 0), tick, NOW)
        window = stats.reports_in_last_hour
        assert sum(window) == 118
        assert window[0] == 118

        statistics.update(stats, _result(2, 0), 60, NOW)
        assert len(window) == 60
        assert window[0] == 0
        assert window[1] == 120
        assert sum(window) == 120

    def test_day_window_rotates_every_twenty_four_ticks(self):
        stats = ReportTypeStats()
        for tick in range(1, 25):
            statistics.update(stats, _result(1, 5), tick, NOW)
        assert len(stats.bytes_in_last_day) == 24
        assert stats.bytes_in_last_day[0] == 0
        assert stats.bytes_in_last_day[1] == 120

    def test_oldest_bucket_dropped(self):
        stats = ReportTypeStats()
        statistics.update(stats, _result(7, 0), 1, NOW)
        for tick in range(24, 24 * 25, 24):
            statistics.update(stats, _result(0, 0), tick, NOW)
        assert sum(stats.reports_in_last_day) == 0
        assert stats.total_reports_transmitted == 7

    def test_advance_rotates_without_recording(self):
        stats = ReportTypeStats()
        statistics.update(stats, _result(4, 40), 1, NOW)
        statistics.advance(stats, 24)
        assert stats.reports_in_last_day[0] == 0
        assert stats.reports_in_last_day[1] == 4
        assert stats.reports_in_last_hour[0] == 4
        assert stats.total_reports_transmitted == 4
        assert stats.last_report_timestamp == NOW


class TestEndpointBytes:
    def test_record_endpoint_bytes(self):
        endpoint_stats = EndpointStatistics(started=NOW)
        statistics.record_endpoint_bytes(endpoint_stats, 81)
        statistics.record_endpoint_bytes(endpoint_stats, 19)
        assert endpoint_stats.total_bytes_transmitted == 100
