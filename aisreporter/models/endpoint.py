"""
Canonical endpoint schedule and per-endpoint statistics.

Built once by the normalizer; statistics are mutated only by the scheduler.
"""
from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, Dict, Optional, Tuple

HOUR_WINDOW_SIZE = 60
DAY_WINDOW_SIZE = 24


class VesselClass(str, enum.Enum):
    SELF = "self"
    OTHERS = "others"


class ReportType(str, enum.Enum):
    POSITION = "position"
    STATIC = "static"


@dataclass(frozen=True)
class OwnVessel:
    """Identity of the reporting installation's own vessel."""

    mmsi: Optional[str]
    ais_class: str = "B"

    def is_self(self, mmsi: Optional[str]) -> bool:
        return self.mmsi is not None and mmsi == self.mmsi


@dataclass(frozen=True)
class VesselClassConfig:
    expiry_interval: float
    position_update_intervals: Tuple[int, ...]
    static_update_intervals: Tuple[int, ...]
    update_interval_index_path: Optional[str] = None


def _window(size: int) -> Deque[int]:
    return deque([0] * size, maxlen=size)


@dataclass
class ReportTypeStats:
    """Totals plus rolling windows for one report type. Slot 0 is the current bucket."""

    last_report_timestamp: Optional[datetime] = None
    total_reports_transmitted: int = 0
    total_bytes_transmitted: int = 0
    reports_in_last_hour: Deque[int] = field(default_factory=lambda: _window(HOUR_WINDOW_SIZE))
    bytes_in_last_hour: Deque[int] = field(default_factory=lambda: _window(HOUR_WINDOW_SIZE))
    reports_in_last_day: Deque[int] = field(default_factory=lambda: _window(DAY_WINDOW_SIZE))
    bytes_in_last_day: Deque[int] = field(default_factory=lambda: _window(DAY_WINDOW_SIZE))


@dataclass
class EndpointStatistics:
    started: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    total_bytes_transmitted: int = 0
    position: ReportTypeStats = field(default_factory=ReportTypeStats)
    static: ReportTypeStats = field(default_factory=ReportTypeStats)

    def for_type(self, report_type: ReportType) -> ReportTypeStats:
        return self.position if report_type is ReportType.POSITION else self.static


@dataclass
class Endpoint:
    name: str
    address: str
    port: int
    classes: Dict[VesselClass, VesselClassConfig]
    statistics: EndpointStatistics = field(default_factory=EndpointStatistics)

    def config_for(self, vessel_class: VesselClass) -> VesselClassConfig:
        return self.classes[vessel_class]


@dataclass
class ReportStatistics:
    """Result of one generator call, split by vessel class."""

    self_count: int = 0
    self_bytes: int = 0
    others_count: int = 0
    others_bytes: int = 0

    @property
    def count(self) -> int:
        return self.self_count + self.others_count

    @property
    def bytes(self) -> int:
        return self.self_bytes + self.others_bytes

    def add(self, vessel_class: VesselClass, nbytes: int) -> None:
        if vessel_class is VesselClass.SELF:
            self.self_count += 1
            self.self_bytes += nbytes
        else:
            self.others_count += 1
            self.others_bytes += nbytes
