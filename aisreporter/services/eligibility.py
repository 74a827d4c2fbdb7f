"""Vessel eligibility by class membership and position fix freshness."""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from aisreporter.models.endpoint import VesselClass
from aisreporter.models.vessel import VesselRecord


def classify(vessel: VesselRecord, own_mmsi: Optional[str]) -> VesselClass:
    if own_mmsi is not None and vessel.mmsi == own_mmsi:
        return VesselClass.SELF
    return VesselClass.OTHERS


def is_eligible(
    vessel: VesselRecord,
    vessel_class: VesselClass,
    expiry_interval: float,
    now: datetime,
    own_mmsi: Optional[str],
) -> bool:
    """True when the vessel is in vessel_class and its fix is at most expiry_interval seconds old."""
    if classify(vessel, own_mmsi) is not vessel_class:
        return False
    if vessel.position is None or vessel.position.timestamp is None:
        return False
    age = (now - vessel.position.timestamp).total_seconds()
    return age <= expiry_interval
