"""
Heartbeat scheduler.

One timer drives all reporting. On every tick each endpoint is examined in
turn: for each vessel class the active update intervals are selected (by
the optional index path on the own vessel), and a report type fires for a
class when its interval is nonzero and divides the tick counter. Each
generator is called at most once per endpoint per tick with both class
flags. The tick counter advances once all endpoints have been processed.
"""
from __future__ import annotations

import asyncio
import enum
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence, Tuple

from aisreporter.models.endpoint import Endpoint, ReportType, VesselClass, VesselClassConfig
from aisreporter.services import statistics
from aisreporter.services.interfaces import VesselSource
from aisreporter.services.reports import ReportGenerator
from aisreporter.services.status import StatusProvider, reporting_message

logger = logging.getLogger("ais.scheduler")

DEFAULT_HEARTBEAT_INTERVAL = 60.0


class SchedulerState(str, enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


def fires(interval: int, tick: int) -> bool:
    return interval != 0 and tick % interval == 0


def active_interval(intervals: Sequence[int], index: int) -> int:
    """Interval at index, clamped to the last configured slot."""
    return intervals[max(0, min(index, len(intervals) - 1))]


def resolve_index(config: VesselClassConfig, source: VesselSource) -> int:
    if not config.update_interval_index_path:
        return 0
    return _as_index(source.self_value(f"{config.update_interval_index_path}.value"))


def _as_index(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return max(value, 0)
    if isinstance(value, float) and value.is_integer():
        return max(int(value), 0)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value)
    return 0


class ReportScheduler:
    def __init__(
        self,
        endpoints: List[Endpoint],
        generator: ReportGenerator,
        source: VesselSource,
        status: StatusProvider,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
    ):
        self._endpoints = endpoints
        self._generator = generator
        self._source = source
        self._status = status
        self._heartbeat_interval = heartbeat_interval
        self._state = SchedulerState.IDLE
        self._tick_counter = 0
        self._task: Optional[asyncio.Task[Any]] = None

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def tick_counter(self) -> int:
        return self._tick_counter

    @property
    def endpoints(self) -> List[Endpoint]:
        return self._endpoints

    async def start(self) -> None:
        if self._state is SchedulerState.RUNNING:
            return
        if not self._endpoints:
            self._status.set_default_status("Stopped: no configured endpoints")
            logger.warning("no configured endpoints; heartbeat not started")
            return
        self._status.set_default_status(reporting_message(self._endpoints))
        self._state = SchedulerState.RUNNING
        self._task = asyncio.create_task(self._heartbeat_loop(), name="ais-heartbeat")
        logger.info(
            "AIS reporter started — %d endpoint(s), heartbeat %.0fs",
            len(self._endpoints),
            self._heartbeat_interval,
        )

    async def stop(self) -> None:
        if self._state is not SchedulerState.RUNNING:
            return
        self._state = SchedulerState.STOPPED
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        self._status.set_default_status("Stopped")
        logger.info("AIS reporter stopped after %d tick(s)", self._tick_counter)

    async def _heartbeat_loop(self) -> None:
        while self._state is SchedulerState.RUNNING:
            await asyncio.sleep(self._heartbeat_interval)
            self.tick()

    def tick(self, now: Optional[datetime] = None) -> None:
        """Process every endpoint once, then advance the tick counter."""
        now = now or datetime.now(timezone.utc)
        tick = self._tick_counter
        logger.debug("tick %d", tick)
        try:
            for endpoint in self._endpoints:
                try:
                    self._report_endpoint(endpoint, tick, now)
                except Exception as exc:
                    logger.warning(
                        "endpoint '%s' skipped on tick %d (%s: %s)",
                        endpoint.name,
                        tick,
                        type(exc).__name__,
                        exc,
                    )
        finally:
            self._tick_counter += 1

    def active_intervals(self, endpoint: Endpoint, vessel_class: VesselClass) -> Tuple[int, int]:
        """(position, static) intervals currently selected for a vessel class."""
        config = endpoint.config_for(vessel_class)
        index = resolve_index(config, self._source)
        return (
            active_interval(config.position_update_intervals, index),
            active_interval(config.static_update_intervals, index),
        )

    def _report_endpoint(self, endpoint: Endpoint, tick: int, now: datetime) -> None:
        mv_pui, mv_sui = self.active_intervals(endpoint, VesselClass.SELF)
        ov_pui, ov_sui = self.active_intervals(endpoint, VesselClass.OTHERS)
        logger.debug(
            "%s: self pui=%d sui=%d, others pui=%d sui=%d",
            endpoint.name,
            mv_pui,
            mv_sui,
            ov_pui,
            ov_sui,
        )
        self._report(endpoint, ReportType.POSITION, fires(mv_pui, tick), fires(ov_pui, tick), tick, now)
        self._report(endpoint, ReportType.STATIC, fires(mv_sui, tick), fires(ov_sui, tick), tick, now)

    def _report(
        self,
        endpoint: Endpoint,
        report_type: ReportType,
        report_self: bool,
        report_others: bool,
        tick: int,
        now: datetime,
    ) -> None:
        stats = endpoint.statistics.for_type(report_type)
        if not (report_self or report_others):
            statistics.advance(stats, tick)
            return
        if report_type is ReportType.POSITION:
            self._status.set_status(f"sending position report to endpoint '{endpoint.name}'")
            result = self._generator.generate_position(endpoint, report_self, report_others, now)
        else:
            self._status.set_status(f"sending static data report to endpoint '{endpoint.name}'")
            result = self._generator.generate_static(endpoint, report_self, report_others, now)
        statistics.update(stats, result, tick, now)
        statistics.record_endpoint_bytes(endpoint.statistics, result.bytes)
        logger.debug(
            "%s: %d %s report(s), %d bytes", endpoint.name, result.count, report_type.value, result.bytes
        )
