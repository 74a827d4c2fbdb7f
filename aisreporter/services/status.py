"""
Read-only status projection over endpoint statistics, plus the reporter's
human-readable status line (default status and most recent activity).
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from aisreporter.models.endpoint import Endpoint, ReportTypeStats

logger = logging.getLogger("ais.status")


def _iso(ts: Optional[datetime]) -> str:
    return ts.isoformat() if ts is not None else "never"


def report_type_status(stats: ReportTypeStats) -> Dict[str, Any]:
    return {
        "last_report_time": _iso(stats.last_report_timestamp),
        "total_reports_transmitted": stats.total_reports_transmitted,
        "total_bytes_transmitted": stats.total_bytes_transmitted,
        "reports_transmitted_in_last_hour": sum(stats.reports_in_last_hour),
        "bytes_transmitted_in_last_hour": sum(stats.bytes_in_last_hour),
        "reports_transmitted_in_last_day": sum(stats.reports_in_last_day),
        "bytes_transmitted_in_last_day": sum(stats.bytes_in_last_day),
    }


class StatusProvider:
    def __init__(self, endpoints: Iterable[Endpoint] = ()):
        self._endpoints: List[Endpoint] = list(endpoints)
        self._default_status = "started"
        self._status: Optional[str] = None

    def set_endpoints(self, endpoints: Iterable[Endpoint]) -> None:
        self._endpoints = list(endpoints)

    def set_default_status(self, message: str) -> None:
        logger.info("%s", message)
        self._default_status = message
        self._status = None

    def set_status(self, message: str) -> None:
        logger.debug("%s", message)
        self._status = message

    @property
    def default_status(self) -> str:
        return self._default_status

    @property
    def message(self) -> str:
        return self._status or self._default_status

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Status of every endpoint keyed by endpoint name."""
        out: Dict[str, Dict[str, Any]] = {}
        for endpoint in self._endpoints:
            statistics = endpoint.statistics
            out[endpoint.name] = {
                "address": endpoint.address,
                "port": endpoint.port,
                "started": _iso(statistics.started),
                "total_bytes_transmitted": statistics.total_bytes_transmitted,
                "position": report_type_status(statistics.position),
                "static": report_type_status(statistics.static),
            }
        return out


def reporting_message(endpoints: List[Endpoint]) -> str:
    names = ", ".join(f"'{e.name}'" for e in endpoints)
    plural = "" if len(endpoints) == 1 else "s"
    return f"Reporting to {len(endpoints)} endpoint{plural} ({names})"
