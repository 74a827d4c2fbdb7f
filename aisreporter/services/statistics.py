"""
Rolling statistics aggregation.

Windows are natural-period buckets: values accumulate in slot 0, and every
len(window) ticks the window shifts by one bucket (fresh zero slot in front,
oldest bucket dropped). Sums over a window therefore approximate the last
len(window) periods of len(window) ticks, not an exact sliding sum.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Deque, Iterable, Optional

from aisreporter.models.endpoint import EndpointStatistics, ReportStatistics, ReportTypeStats


def update(
    stats: ReportTypeStats,
    result: ReportStatistics,
    tick_counter: int,
    now: Optional[datetime] = None,
) -> None:
    stats.last_report_timestamp = now or datetime.now(timezone.utc)
    stats.total_reports_transmitted += result.count
    stats.total_bytes_transmitted += result.bytes
    update_vector(stats.reports_in_last_hour, tick_counter, result.count)
    update_vector(stats.bytes_in_last_hour, tick_counter, result.bytes)
    update_vector(stats.reports_in_last_day, tick_counter, result.count)
    update_vector(stats.bytes_in_last_day, tick_counter, result.bytes)


def advance(stats: ReportTypeStats, tick_counter: int) -> None:
    """Rotate windows on a tick where this report type produced nothing."""
    for vector in _windows(stats):
        update_vector(vector, tick_counter, 0)


def record_endpoint_bytes(statistics: EndpointStatistics, nbytes: int) -> None:
    statistics.total_bytes_transmitted += nbytes


def update_vector(vector: Deque[int], tick_counter: int, value: int) -> None:
    vector[0] += value
    if tick_counter and tick_counter % vector.maxlen == 0:
        vector.appendleft(0)


def _windows(stats: ReportTypeStats) -> Iterable[Deque[int]]:
    return (
        stats.reports_in_last_hour,
        stats.bytes_in_last_hour,
        stats.reports_in_last_day,
        stats.bytes_in_last_day,
    )
