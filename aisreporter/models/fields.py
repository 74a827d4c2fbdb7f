"""Encoder input records. Units are the AIS wire units (degrees, knots, metres)."""
from __future__ import annotations

from dataclasses import dataclass

HEADING_UNAVAILABLE = 511
ROT_UNAVAILABLE = -128
MANEUVER_UNAVAILABLE = 0


@dataclass(frozen=True)
class PositionFields:
    mmsi: int
    msg_type: int
    lat: float
    lon: float
    cog: float = 0.0
    sog: float = 0.0
    heading: int = HEADING_UNAVAILABLE
    rot: float = ROT_UNAVAILABLE
    maneuver: int = MANEUVER_UNAVAILABLE
    accuracy: int = 0
    repeat: int = 3
    own: bool = False


@dataclass(frozen=True)
class StaticFields:
    mmsi: int
    shipname: str = ""
    callsign: str = ""
    ship_type: int = 0
    destination: str = ""
    to_bow: int = 0
    to_stern: int = 0
    to_port: int = 0
    to_starboard: int = 0
    draught: float = 0.0
    repeat: int = 3
    own: bool = False
