"""
AIS reporter worker.

- Loads and normalizes reporter options into endpoint schedules.
- Keeps an in-memory vessel registry current from the Signal K stream.
- Runs the heartbeat scheduler that sends AIS reports to UDP endpoints.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from aisreporter.core.config import load_options, settings
from aisreporter.core.errors import ConfigError
from aisreporter.services.encoder import PyaisSentenceEncoder
from aisreporter.services.normalizer import normalize
from aisreporter.services.registry import VesselRegistry
from aisreporter.services.reports import ReportGenerator
from aisreporter.services.status import StatusProvider
from aisreporter.services.transmitter import UdpTransmitter
from worker.ingest import SignalKIngest
from worker.scheduler import ReportScheduler

logger = logging.getLogger("ais.worker")


class ReporterWorker:
    def __init__(
        self,
        status: Optional[StatusProvider] = None,
        options: Optional[Dict[str, Any]] = None,
        registry: Optional[VesselRegistry] = None,
    ):
        self.status = status or StatusProvider()
        self.registry = registry or VesselRegistry()
        self._options = options
        self._transmitter = UdpTransmitter()
        self._ingest = SignalKIngest(self.registry, settings.SIGNALK_WS_URL)
        self.scheduler: Optional[ReportScheduler] = None

    async def start(self) -> None:
        try:
            options = self._options if self._options is not None else load_options()
            own, endpoints = normalize(options, self.registry)
        except ConfigError as exc:
            self.status.set_default_status("Stopped: configuration error")
            logger.error("configuration error: %s", exc)
            return
        logger.debug("using %d endpoint(s): %s", len(endpoints), [e.name for e in endpoints])
        self.status.set_endpoints(endpoints)
        self.registry.retention = max(
            (c.expiry_interval for e in endpoints for c in e.classes.values()),
            default=None,
        )

        generator = ReportGenerator(
            source=self.registry,
            encoder=PyaisSentenceEncoder(),
            transmitter=self._transmitter,
            own=own,
        )
        self.scheduler = ReportScheduler(
            endpoints,
            generator,
            self.registry,
            self.status,
            heartbeat_interval=settings.HEARTBEAT_INTERVAL_SEC,
        )
        if endpoints:
            self._transmitter.open()
            await self._ingest.start()
        await self.scheduler.start()

    async def stop(self) -> None:
        if self.scheduler is not None:
            await self.scheduler.stop()
        await self._ingest.stop()
        self._transmitter.close()
        logger.info("AIS reporter worker stopped")


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def run_worker() -> None:
    setup_logging()
    worker = ReporterWorker()
    await worker.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except asyncio.CancelledError:
        pass
    finally:
        await worker.stop()


def main() -> None:
    asyncio.run(run_worker())


if __name__ == "__main__":
    main()
