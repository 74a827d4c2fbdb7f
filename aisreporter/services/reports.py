"""
Position and static data report generation for one endpoint.

Vessels come from the VesselSource, are filtered by class and fix age,
encoded through the SentenceEncoder and handed to the Transmitter. An
encode failure only skips that vessel; source and transport errors
propagate to the scheduler, which skips the endpoint for the tick.
"""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Iterator, Optional, Tuple

from aisreporter.core.errors import EncodeError
from aisreporter.models.endpoint import Endpoint, OwnVessel, ReportStatistics, VesselClass
from aisreporter.models.fields import (
    HEADING_UNAVAILABLE,
    MANEUVER_UNAVAILABLE,
    ROT_UNAVAILABLE,
    PositionFields,
    StaticFields,
)
from aisreporter.models.vessel import VesselRecord
from aisreporter.services.eligibility import classify, is_eligible
from aisreporter.services.interfaces import SentenceEncoder, Transmitter, VesselSource

logger = logging.getLogger("ais.reports")

DEFAULT_AIS_CLASS = "B"
MPS_TO_KNOTS = 1.9438444924574
MAX_ROT_DEG_PER_MIN = 708.0

SPECIAL_MANEUVER: dict[str, int] = {
    "not available": 0,
    "not engaged": 1,
    "engaged": 2,
}


def rads_to_deg(radians: float) -> float:
    return radians * 180 / math.pi


def mps_to_kn(mps: float) -> float:
    return MPS_TO_KNOTS * mps


def decode_smi(label: Optional[str]) -> int:
    if label is None:
        return MANEUVER_UNAVAILABLE
    return SPECIAL_MANEUVER.get(label, MANEUVER_UNAVAILABLE)


def _mmsi(vessel: VesselRecord) -> int:
    if vessel.mmsi is None or not vessel.mmsi.isdigit():
        raise EncodeError(f"vessel has no usable MMSI ({vessel.mmsi!r})")
    return int(vessel.mmsi)


def _dimension(value: float, limit: int) -> int:
    return min(max(int(round(value)), 0), limit)


def position_fields(vessel: VesselRecord, ais_class: str, own: bool) -> PositionFields:
    if vessel.position is None:
        raise EncodeError(f"vessel '{vessel.mmsi}' has no position")
    heading = HEADING_UNAVAILABLE
    if vessel.heading_true is not None:
        heading = int(round(rads_to_deg(vessel.heading_true))) % 360
    rot: float = ROT_UNAVAILABLE
    if vessel.rate_of_turn is not None:
        deg_per_min = rads_to_deg(vessel.rate_of_turn) * 60
        rot = max(-MAX_ROT_DEG_PER_MIN, min(MAX_ROT_DEG_PER_MIN, deg_per_min))
    return PositionFields(
        mmsi=_mmsi(vessel),
        msg_type=1 if ais_class == "A" else 18,
        lat=vessel.position.latitude,
        lon=vessel.position.longitude,
        cog=rads_to_deg(vessel.course_over_ground or 0.0) % 360,
        sog=mps_to_kn(vessel.speed_over_ground or 0.0),
        heading=heading,
        rot=rot,
        maneuver=decode_smi(vessel.special_maneuver),
        own=own,
    )


def static_fields(vessel: VesselRecord, own: bool) -> StaticFields:
    from_bow = vessel.gps_from_bow or 0.0
    from_center = vessel.gps_from_center or 0.0
    length = vessel.length_overall or 0.0
    beam = vessel.beam or 0.0
    return StaticFields(
        mmsi=_mmsi(vessel),
        shipname=vessel.name or "",
        callsign=vessel.callsign or "",
        ship_type=vessel.ship_type or 0,
        destination=vessel.destination or "",
        to_bow=_dimension(from_bow, 511),
        to_stern=_dimension(length - from_bow, 511),
        to_port=_dimension(beam / 2 + from_center, 63),
        to_starboard=_dimension(beam / 2 - from_center, 63),
        draught=max(vessel.draft_maximum or 0.0, 0.0),
        own=own,
    )


class ReportGenerator:
    def __init__(
        self,
        source: VesselSource,
        encoder: SentenceEncoder,
        transmitter: Transmitter,
        own: OwnVessel,
    ):
        self._source = source
        self._encoder = encoder
        self._transmitter = transmitter
        self.own = own

    def generate_position(
        self,
        endpoint: Endpoint,
        report_self: bool,
        report_others: bool,
        now: Optional[datetime] = None,
    ) -> ReportStatistics:
        logger.debug(
            "generate_position(%s, self=%s, others=%s)", endpoint.name, report_self, report_others
        )
        stats = ReportStatistics()
        for vessel, vessel_class, ais_class in self._candidates(
            endpoint, report_self, report_others, now
        ):
            try:
                fields = position_fields(vessel, ais_class, vessel_class is VesselClass.SELF)
                sentence = self._encoder.encode_position(fields)
            except EncodeError as exc:
                logger.debug(
                    "skipping position report for vessel '%s' to endpoint '%s' (%s)",
                    vessel.mmsi,
                    endpoint.name,
                    exc,
                )
                continue
            stats.add(vessel_class, self._send(endpoint, sentence))
        return stats

    def generate_static(
        self,
        endpoint: Endpoint,
        report_self: bool,
        report_others: bool,
        now: Optional[datetime] = None,
    ) -> ReportStatistics:
        logger.debug(
            "generate_static(%s, self=%s, others=%s)", endpoint.name, report_self, report_others
        )
        stats = ReportStatistics()
        for vessel, vessel_class, ais_class in self._candidates(
            endpoint, report_self, report_others, now
        ):
            if ais_class not in ("A", "B"):
                continue
            try:
                fields = static_fields(vessel, vessel_class is VesselClass.SELF)
                if ais_class == "A":
                    sentences: Tuple[str, ...] = (self._encoder.encode_static(fields),)
                else:
                    # both parts must encode before either is sent
                    part_a = self._encoder.encode_static_part_a(fields)
                    part_b = self._encoder.encode_static_part_b(fields)
                    sentences = (part_a, part_b)
            except EncodeError as exc:
                logger.debug(
                    "skipping static data report for vessel '%s' to endpoint '%s' (%s)",
                    vessel.mmsi,
                    endpoint.name,
                    exc,
                )
                continue
            nbytes = sum(self._send(endpoint, s) for s in sentences)
            stats.add(vessel_class, nbytes)
        return stats

    def own_mmsi(self) -> Optional[str]:
        if self.own.mmsi is not None:
            return self.own.mmsi
        mmsi = self._source.self_value("mmsi")
        return str(mmsi) if mmsi is not None else None

    def _candidates(
        self,
        endpoint: Endpoint,
        report_self: bool,
        report_others: bool,
        now: Optional[datetime],
    ) -> Iterator[Tuple[VesselRecord, VesselClass, str]]:
        """Eligible vessels with their class and transceiver type."""
        now = now or datetime.now(timezone.utc)
        own_mmsi = self.own_mmsi()
        for vessel in self._source.list_vessels():
            vessel_class = classify(vessel, own_mmsi)
            if vessel_class is VesselClass.SELF and not report_self:
                continue
            if vessel_class is VesselClass.OTHERS and not report_others:
                continue
            expiry = endpoint.config_for(vessel_class).expiry_interval
            if not is_eligible(vessel, vessel_class, expiry, now, own_mmsi):
                continue
            if vessel_class is VesselClass.SELF:
                ais_class = self.own.ais_class
            else:
                ais_class = vessel.ais_class or DEFAULT_AIS_CLASS
            yield vessel, vessel_class, ais_class

    def _send(self, endpoint: Endpoint, sentence: str) -> int:
        logger.debug("sending '%s' to endpoint '%s'", sentence, endpoint.name)
        return self._transmitter.send(
            (sentence + "\n").encode("ascii"), endpoint.address, endpoint.port
        )
