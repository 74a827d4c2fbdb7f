"""Pytest fixtures and collaborator fakes for reporter tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from aisreporter.core.errors import EncodeError
from aisreporter.models.endpoint import (
    Endpoint,
    EndpointStatistics,
    OwnVessel,
    VesselClass,
    VesselClassConfig,
)
from aisreporter.models.fields import PositionFields, StaticFields
from aisreporter.models.vessel import Fix, VesselRecord
from aisreporter.services.reports import ReportGenerator

OWN_MMSI = "244000001"
NOW = datetime(2024, 12, 6, 11, 0, 0, tzinfo=timezone.utc)


class FakeSource:
    def __init__(self, vessels: Iterable[VesselRecord] = (), self_values: Optional[Dict[str, Any]] = None):
        self.vessels: List[VesselRecord] = list(vessels)
        self.self_values: Dict[str, Any] = dict(self_values or {})
        self.error: Optional[Exception] = None

    def list_vessels(self) -> Sequence[VesselRecord]:
        if self.error is not None:
            raise self.error
        return list(self.vessels)

    def self_value(self, path: str) -> Optional[Any]:
        return self.self_values.get(path)


class FakeEncoder:
    """Returns deterministic sentences; methods named in `fail` raise EncodeError."""

    def __init__(self, fail: Iterable[str] = ()):
        self.fail = set(fail)
        self.calls: List[Tuple[str, Any]] = []

    def _encode(self, kind: str, fields: Any) -> str:
        self.calls.append((kind, fields))
        if kind in self.fail:
            raise EncodeError(f"{kind} failed")
        return f"!AIVDM,{kind},{fields.mmsi}"

    def encode_position(self, fields: PositionFields) -> str:
        return self._encode("position", fields)

    def encode_static(self, fields: StaticFields) -> str:
        return self._encode("static", fields)

    def encode_static_part_a(self, fields: StaticFields) -> str:
        return self._encode("part_a", fields)

    def encode_static_part_b(self, fields: StaticFields) -> str:
        return self._encode("part_b", fields)


class FakeTransmitter:
    def __init__(self):
        self.sent: List[Tuple[bytes, str, int]] = []

    def send(self, data: bytes, address: str, port: int) -> int:
        self.sent.append((data, address, port))
        return len(data)


def make_vessel(
    mmsi: str = OWN_MMSI,
    age: Optional[float] = 0,
    ais_class: Optional[str] = None,
    **kwargs: Any,
) -> VesselRecord:
    position = None
    if age is not None:
        position = Fix(latitude=52.37, longitude=4.89, timestamp=NOW - timedelta(seconds=age))
    return VesselRecord(mmsi=mmsi, ais_class=ais_class, position=position, **kwargs)


def class_config(
    position: Sequence[int] = (1,),
    static: Sequence[int] = (1,),
    expiry: int = 900,
    index_path: Optional[str] = None,
) -> VesselClassConfig:
    return VesselClassConfig(
        expiry_interval=expiry,
        position_update_intervals=tuple(position),
        static_update_intervals=tuple(static),
        update_interval_index_path=index_path,
    )


def make_endpoint(
    name: str = "local",
    my_vessel: Optional[VesselClassConfig] = None,
    other_vessels: Optional[VesselClassConfig] = None,
) -> Endpoint:
    return Endpoint(
        name=name,
        address="127.0.0.1",
        port=12345,
        classes={
            VesselClass.SELF: my_vessel or class_config(),
            VesselClass.OTHERS: other_vessels or class_config(),
        },
        statistics=EndpointStatistics(started=NOW),
    )


@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def encoder():
    return FakeEncoder()


@pytest.fixture
def transmitter():
    return FakeTransmitter()


@pytest.fixture
def own():
    return OwnVessel(mmsi=OWN_MMSI, ais_class="B")


@pytest.fixture
def generator(source, encoder, transmitter, own):
    return ReportGenerator(source=source, encoder=encoder, transmitter=transmitter, own=own)
