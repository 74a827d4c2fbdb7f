"""
Typed view of one vessel in the Signal K registry.

Every slot is optional; absence means the registry never received that path.
Records are built once per vessel per report and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Fix:
    latitude: float
    longitude: float
    timestamp: Optional[datetime]


@dataclass(frozen=True)
class VesselRecord:
    mmsi: Optional[str] = None
    name: Optional[str] = None
    callsign: Optional[str] = None
    ais_class: Optional[str] = None
    position: Optional[Fix] = None
    # navigation, SI units as delivered by Signal K
    course_over_ground: Optional[float] = None
    speed_over_ground: Optional[float] = None
    heading_true: Optional[float] = None
    rate_of_turn: Optional[float] = None
    special_maneuver: Optional[str] = None
    destination: Optional[str] = None
    # design / sensors, metres
    ship_type: Optional[int] = None
    length_overall: Optional[float] = None
    beam: Optional[float] = None
    draft_maximum: Optional[float] = None
    gps_from_bow: Optional[float] = None
    gps_from_center: Optional[float] = None

    @classmethod
    def from_signalk(cls, tree: Mapping[str, Any]) -> "VesselRecord":
        """Build a record from a Signal K vessel tree (leaves are {"value", "timestamp"})."""
        position = None
        lat = get_path(tree, "navigation.position.value.latitude")
        lon = get_path(tree, "navigation.position.value.longitude")
        if _is_number(lat) and _is_number(lon):
            position = Fix(
                latitude=float(lat),
                longitude=float(lon),
                timestamp=parse_timestamp(get_path(tree, "navigation.position.timestamp")),
            )
        ship_type = get_path(tree, "design.aisShipType.value.id")
        mmsi = tree.get("mmsi")
        return cls(
            mmsi=str(mmsi) if mmsi is not None else None,
            name=_str(tree.get("name")),
            callsign=_str(get_path(tree, "communication.callsignVhf.value")),
            ais_class=_str(get_path(tree, "sensors.ais.class.value")),
            position=position,
            course_over_ground=_num(get_path(tree, "navigation.courseOverGroundTrue.value")),
            speed_over_ground=_num(get_path(tree, "navigation.speedOverGround.value")),
            heading_true=_num(get_path(tree, "navigation.headingTrue.value")),
            rate_of_turn=_num(get_path(tree, "navigation.rateOfTurn.value")),
            special_maneuver=_str(get_path(tree, "navigation.specialManeuver.value")),
            destination=_str(get_path(tree, "navigation.destination.commonName.value")),
            ship_type=int(ship_type) if _is_number(ship_type) else None,
            length_overall=_num(get_path(tree, "design.length.value.overall")),
            beam=_num(get_path(tree, "design.beam.value")),
            draft_maximum=_num(get_path(tree, "design.draft.value.maximum")),
            gps_from_bow=_num(get_path(tree, "sensors.gps.fromBow.value")),
            gps_from_center=_num(get_path(tree, "sensors.gps.fromCenter.value")),
        )


def parse_timestamp(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return raw if raw.tzinfo else raw.replace(tzinfo=timezone.utc)
    if not isinstance(raw, str) or not raw:
        return None
    try:
        ts = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def get_path(tree: Mapping[str, Any], path: str, default: Any = None) -> Any:
    node: Any = tree
    for part in path.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return default
        node = node[part]
    return node


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _num(v: Any) -> Optional[float]:
    return float(v) if _is_number(v) else None


def _str(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None
