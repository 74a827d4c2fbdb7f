"""
AIS sentence encoding using pyais.

Own vessel reports are !AIVDO sentences, all others !AIVDM. Messages that
need more than one fragment (type 5) are returned as one string with the
fragments separated by newlines.
"""
from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from pyais.encode import encode_dict

from aisreporter.core.errors import EncodeError
from aisreporter.models.fields import PositionFields, StaticFields

TALKER_ID = "AI"
MAX_MMSI = 999_999_999
MAX_SOG_KNOTS = 102.2

# six-bit text field widths, in characters
SHIPNAME_CHARS = 20
CALLSIGN_CHARS = 7
DESTINATION_CHARS = 20


class PyaisSentenceEncoder:
    def __init__(self, radio_channel: str = "A"):
        self._radio_channel = radio_channel

    def encode_position(self, fields: PositionFields) -> str:
        _check_mmsi(fields.mmsi)
        if not -90.0 <= fields.lat <= 90.0 or not -180.0 <= fields.lon <= 180.0:
            raise EncodeError(f"position {fields.lat},{fields.lon} out of range for {fields.mmsi}")
        if fields.msg_type not in (1, 18):
            raise EncodeError(f"unsupported position message type {fields.msg_type}")
        data: Dict[str, Any] = {
            "type": fields.msg_type,
            "repeat": fields.repeat,
            "mmsi": fields.mmsi,
            "accuracy": fields.accuracy,
            "lat": fields.lat,
            "lon": fields.lon,
            "course": round(fields.cog, 1),
            "speed": round(min(fields.sog, MAX_SOG_KNOTS), 1),
            "heading": fields.heading,
            "second": 60,
        }
        if fields.msg_type == 1:
            data.update(turn=fields.rot, maneuver=fields.maneuver)
        else:
            data.update(cs=1)
        return self._encode(data, fields.own)

    def encode_static(self, fields: StaticFields) -> str:
        """Type 5 static and voyage related data (class A)."""
        _check_mmsi(fields.mmsi)
        data = _static_data(fields)
        data.update(
            type=5,
            epfd=1,
            month=0,
            day=0,
            hour=24,
            minute=60,
            draught=round(fields.draught, 1),
            destination=_text(fields.destination, DESTINATION_CHARS),
        )
        return self._encode(data, fields.own)

    def encode_static_part_a(self, fields: StaticFields) -> str:
        """Type 24 part A: ship name (class B)."""
        _check_mmsi(fields.mmsi)
        return self._encode(
            {
                "type": 24,
                "partno": 0,
                "repeat": fields.repeat,
                "mmsi": fields.mmsi,
                "shipname": _text(fields.shipname, SHIPNAME_CHARS),
            },
            fields.own,
        )

    def encode_static_part_b(self, fields: StaticFields) -> str:
        """Type 24 part B: ship type, call sign and dimensions (class B)."""
        _check_mmsi(fields.mmsi)
        data = _static_data(fields)
        data.update(type=24, partno=1)
        data.pop("shipname")
        return self._encode(data, fields.own)

    def _encode(self, data: Dict[str, Any], own: bool) -> str:
        sentence_type = "VDO" if own else "VDM"
        try:
            fragments = encode_dict(
                data,
                talker_id=TALKER_ID,
                sentence_type=sentence_type,
                radio_channel=self._radio_channel,
            )
        except Exception as exc:
            raise EncodeError(f"type {data.get('type')} encode failed for {data.get('mmsi')} ({exc})") from exc
        if not fragments:
            raise EncodeError(f"type {data.get('type')} encode produced no sentence")
        return "\n".join(fragments)


def _check_mmsi(mmsi: int) -> None:
    if not 0 < mmsi <= MAX_MMSI:
        raise EncodeError(f"invalid MMSI {mmsi}")


def _static_data(fields: StaticFields) -> Dict[str, Any]:
    data = asdict(fields)
    data.pop("own")
    data.pop("draught")
    data.pop("destination")
    data["shipname"] = _text(fields.shipname, SHIPNAME_CHARS)
    data["callsign"] = _text(fields.callsign, CALLSIGN_CHARS)
    return data


def _text(value: str, width: int) -> str:
    return value.upper()[:width]
