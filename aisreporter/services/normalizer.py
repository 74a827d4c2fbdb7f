"""
Build canonical endpoint schedules from raw reporter options.

Global and default properties are consolidated so that every leaf lives on
an endpoint. For each leaf the first definition found wins, searching:
endpoint class block → endpoint → global class block → global options.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from aisreporter.core.errors import ConfigError
from aisreporter.models.endpoint import (
    Endpoint,
    EndpointStatistics,
    OwnVessel,
    VesselClass,
    VesselClassConfig,
)
from aisreporter.services.interfaces import VesselSource

logger = logging.getLogger("ais.config")

DEFAULT_MY_AIS_CLASS = "B"
DEFAULT_POSITION_UPDATE_INTERVAL = 5
DEFAULT_STATIC_UPDATE_INTERVAL = 15
DEFAULT_EXPIRY_INTERVAL = 900

CLASS_BLOCKS: Dict[VesselClass, str] = {
    VesselClass.SELF: "myVessel",
    VesselClass.OTHERS: "otherVessels",
}
ADDRESS_KEYS = ("ipAddress", "ipaddress", "address")


def normalize(
    options: Mapping[str, Any],
    source: Optional[VesselSource] = None,
    now: Optional[datetime] = None,
) -> Tuple[OwnVessel, List[Endpoint]]:
    """Return own vessel identity and the canonical endpoint list. Raises ConfigError."""
    started = now or datetime.now(timezone.utc)
    own = _own_vessel(options, source)
    raw_endpoints = options.get("endpoints") or []
    if not isinstance(raw_endpoints, list):
        raise ConfigError("'endpoints' must be a list")

    endpoints: List[Endpoint] = []
    for option in raw_endpoints:
        if not isinstance(option, Mapping):
            raise ConfigError("endpoint definition must be an object")
        address = _first(option, ADDRESS_KEYS)
        if not address:
            raise ConfigError("endpoint has missing 'ipAddress' property")
        port = option.get("port")
        if not port:
            raise ConfigError(f"endpoint '{address}' has missing 'port' property")
        if not isinstance(port, int) or isinstance(port, bool) or not 0 < port < 65536:
            raise ConfigError(f"endpoint '{address}' has invalid port {port!r}")
        name = option.get("name") or address
        endpoints.append(
            Endpoint(
                name=name,
                address=address,
                port=port,
                classes={vc: _class_config(options, option, vc, name) for vc in VesselClass},
                statistics=EndpointStatistics(started=started),
            )
        )
    logger.debug("normalized %d endpoint(s), own vessel %s", len(endpoints), own)
    return own, endpoints


def _own_vessel(options: Mapping[str, Any], source: Optional[VesselSource]) -> OwnVessel:
    mmsi = options.get("myMmsi")
    ais_class = options.get("myAisClass")
    if source is not None:
        if mmsi is None:
            mmsi = source.self_value("mmsi")
        if ais_class is None:
            ais_class = source.self_value("sensors.ais.class.value")
    return OwnVessel(
        mmsi=str(mmsi) if mmsi is not None else None,
        ais_class=str(ais_class or DEFAULT_MY_AIS_CLASS),
    )


def _class_config(
    options: Mapping[str, Any],
    option: Mapping[str, Any],
    vessel_class: VesselClass,
    endpoint_name: str,
) -> VesselClassConfig:
    block = CLASS_BLOCKS[vessel_class]
    chain = [option.get(block) or {}, option, options.get(block) or {}, options]

    expiry = get_option(chain, "expiryInterval", DEFAULT_EXPIRY_INTERVAL)
    if not isinstance(expiry, (int, float)) or isinstance(expiry, bool) or expiry < 0:
        raise ConfigError(f"endpoint '{endpoint_name}': invalid expiryInterval {expiry!r}")

    where = f"endpoint '{endpoint_name}' ({vessel_class.value})"
    positions = _intervals(
        get_option_array(chain, "positionUpdateInterval", [DEFAULT_POSITION_UPDATE_INTERVAL]),
        "positionUpdateInterval",
        where,
    )
    statics = _intervals(
        get_option_array(chain, "staticUpdateInterval", [DEFAULT_STATIC_UPDATE_INTERVAL]),
        "staticUpdateInterval",
        where,
    )
    index_path = get_option(chain, "updateIntervalIndexPath", None)
    if index_path is not None and not isinstance(index_path, str):
        raise ConfigError(f"{where}: updateIntervalIndexPath must be a string")

    return VesselClassConfig(
        expiry_interval=expiry,
        position_update_intervals=positions,
        static_update_intervals=_no_faster_than(statics, positions),
        update_interval_index_path=index_path or None,
    )


def get_option(objects: Sequence[Mapping[str, Any]], name: str, fallback: Any) -> Any:
    for obj in objects:
        value = obj.get(name)
        if value is not None:
            return value
    return fallback


def get_option_array(objects: Sequence[Mapping[str, Any]], name: str, fallback: List[Any]) -> List[Any]:
    value = get_option(objects, name, None)
    if value is None:
        return fallback
    return list(value) if isinstance(value, (list, tuple)) else [value]


def _intervals(values: List[Any], name: str, where: str) -> Tuple[int, ...]:
    if not values:
        raise ConfigError(f"{where}: {name} must not be empty")
    for v in values:
        if not isinstance(v, int) or isinstance(v, bool) or v < 0:
            raise ConfigError(f"{where}: {name} values must be non-negative integers, got {v!r}")
    return tuple(values)


def _no_faster_than(statics: Tuple[int, ...], positions: Tuple[int, ...]) -> Tuple[int, ...]:
    """Raise static intervals so static never fires more often than position at any index."""
    out = list(statics)
    for i in range(max(len(statics), len(positions))):
        p = positions[min(i, len(positions) - 1)]
        s_idx = min(i, len(out) - 1)
        if p > 0 and 0 < out[s_idx] < p:
            out[s_idx] = p
    return tuple(out)


def _first(option: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        if option.get(key):
            return option[key]
    return None
