"""
In-memory Signal K vessel registry.

Holds one tree per vessel context, updated from Signal K hello and delta
messages. Leaves are stored as {"value": ..., "timestamp": ...}; values
delivered on the empty path (name, mmsi, ...) are merged into the tree root.

With a retention age set, vessels not heard from within that age are
dropped; the own vessel is never dropped.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping, Optional

from aisreporter.models.vessel import VesselRecord, get_path, parse_timestamp

logger = logging.getLogger("ais.registry")

_MMSI_URN = re.compile(r"urn:mrn:imo:mmsi:(\d+)$")
_VESSELS = "vessels."


class VesselRegistry:
    def __init__(self, retention: Optional[float] = None):
        self._vessels: Dict[str, Dict[str, Any]] = {}
        self._last_seen: Dict[str, datetime] = {}
        self._records: Dict[str, VesselRecord] = {}
        self._self_context: Optional[str] = None
        self.retention = retention

    # ── ingest ────────────────────────────────────────────────

    def apply(self, message: Mapping[str, Any], now: Optional[datetime] = None) -> int:
        """Apply a hello or delta message; returns the number of values stored."""
        if "self" in message and "updates" not in message:
            self.set_self(str(message["self"]))
            return 0
        raw_context = message.get("context")
        if raw_context and raw_context != "vessels.self":
            context = _strip(str(raw_context))
        else:
            context = self._self_context
        if context is None:
            return 0
        received = now or datetime.now(timezone.utc)
        applied = 0
        for update in message.get("updates") or []:
            timestamp = update.get("timestamp")
            for item in update.get("values") or []:
                path = item.get("path")
                if path is None:
                    continue
                self._store(context, path, item.get("value"), timestamp)
                applied += 1
            if applied:
                self._touch(context, parse_timestamp(timestamp) or received)
        return applied

    def set_self(self, context: str) -> None:
        stripped = _strip(context if context.startswith(_VESSELS) else _VESSELS + context)
        if stripped is None:
            return
        self._self_context = stripped
        self._tree(stripped)
        logger.info("own vessel context: %s", stripped)

    def _tree(self, context: str) -> Dict[str, Any]:
        tree = self._vessels.get(context)
        if tree is None:
            tree = {}
            match = _MMSI_URN.search(context)
            if match:
                tree["mmsi"] = match.group(1)
            self._vessels[context] = tree
        return tree

    def _store(self, context: str, path: str, value: Any, timestamp: Optional[str]) -> None:
        tree = self._tree(context)
        self._records.pop(context, None)
        if path == "":
            if isinstance(value, Mapping):
                tree.update(value)
            return
        node = tree
        parts = path.split(".")
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = {"value": value, "timestamp": timestamp}

    def _touch(self, context: str, seen: datetime) -> None:
        previous = self._last_seen.get(context)
        if previous is None or seen > previous:
            self._last_seen[context] = seen

    def prune(self, now: Optional[datetime] = None) -> int:
        """Drop vessels not heard from within the retention age; returns the number dropped."""
        if self.retention is None:
            return 0
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(seconds=self.retention)
        stale = [
            context
            for context, seen in self._last_seen.items()
            if seen < cutoff and context != self._self_context
        ]
        for context in stale:
            self._vessels.pop(context, None)
            self._records.pop(context, None)
            del self._last_seen[context]
        if stale:
            logger.debug("dropped %d stale vessel(s)", len(stale))
        return len(stale)

    # ── VesselSource ──────────────────────────────────────────

    def list_vessels(self, now: Optional[datetime] = None) -> List[VesselRecord]:
        self.prune(now)
        records = []
        for context, tree in list(self._vessels.items()):
            record = self._records.get(context)
            if record is None:
                record = self._records[context] = VesselRecord.from_signalk(tree)
            records.append(record)
        return records

    def self_value(self, path: str) -> Optional[Any]:
        if self._self_context is None:
            return None
        return get_path(self._vessels.get(self._self_context, {}), path)

    @property
    def self_context(self) -> Optional[str]:
        return self._self_context

    def __len__(self) -> int:
        return len(self._vessels)


def _strip(context: str) -> Optional[str]:
    """Registry key for a vessels.* context; None for other context roots."""
    if not context.startswith(_VESSELS):
        return None
    return context[len(_VESSELS):]
