"""
Signal K stream ingest.

- Connects to the Signal K WebSocket stream and applies hello/delta messages
  to the vessel registry.
- Reconnects with exponential backoff (capped at 60s).
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import websockets

from aisreporter.services.registry import VesselRegistry

logger = logging.getLogger("ais.ingest")


class SignalKStreamError(Exception):
    """Raised when the Signal K server reports an error on the stream."""


def _extract_stream_error(msg: Any) -> Optional[str]:
    if not isinstance(msg, dict):
        return None
    err = msg.get("error") or msg.get("errorMessage")
    if isinstance(err, str):
        err = err.strip()
        return err or None
    return None


class SignalKIngest:
    def __init__(self, registry: VesselRegistry, url: str):
        self._registry = registry
        self._url = url
        self._running = False
        self._task: Optional[asyncio.Task[Any]] = None
        self.stats: Dict[str, Any] = {
            "status": "stopped",
            "received": 0,
            "applied": 0,
            "errors": 0,
        }

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._connect_loop(), name="signalk-ws")
        logger.info("Signal K ingest started — %s", self._url)

    async def stop(self) -> None:
        self._running = False
        if self._task is not None:
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
            self._task = None
        self.stats["status"] = "stopped"
        logger.info("Signal K ingest stopped")

    async def _connect_loop(self) -> None:
        delay = 1
        while self._running:
            try:
                await self._stream()
                delay = 1
            except asyncio.CancelledError:
                break
            except Exception as exc:
                self.stats["errors"] += 1
                self.stats["status"] = f"reconnecting ({exc})"
                logger.warning("Signal K stream error: %s — retry in %ds", exc, delay)
                await asyncio.sleep(delay)
                delay = min(delay * 2, 60)

    async def _stream(self) -> None:
        async with websockets.connect(self._url, ping_interval=20, ping_timeout=30) as ws:
            self.stats["status"] = "streaming"
            logger.info("Signal K stream connected — %s", self._url)
            async for raw in ws:
                if not self._running:
                    break
                self.handle(raw)

    def handle(self, raw: str | bytes) -> None:
        """Apply one raw stream message; malformed messages are counted and dropped."""
        self.stats["received"] += 1
        try:
            msg = json.loads(raw)
        except (TypeError, ValueError) as exc:
            self.stats["errors"] += 1
            logger.debug("unparseable Signal K message: %s", exc)
            return
        stream_error = _extract_stream_error(msg)
        if stream_error:
            raise SignalKStreamError(stream_error)
        if isinstance(msg, dict):
            self.stats["applied"] += self._registry.apply(msg)
