"""
Collaborator protocols used by the report generators and the scheduler.

Concrete implementations: VesselRegistry, PyaisSentenceEncoder, UdpTransmitter.
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, Sequence

from aisreporter.models.fields import PositionFields, StaticFields
from aisreporter.models.vessel import VesselRecord


class VesselSource(Protocol):
    def list_vessels(self) -> Sequence[VesselRecord]:
        """All known vessels, own vessel included. Raises SourceError when unreadable."""
        ...

    def self_value(self, path: str) -> Optional[Any]:
        """Current value at a dotted path on the own vessel, or None."""
        ...


class SentenceEncoder(Protocol):
    """Each method returns an NMEA sentence (fragments joined by newline) or raises EncodeError."""

    def encode_position(self, fields: PositionFields) -> str: ...

    def encode_static(self, fields: StaticFields) -> str: ...

    def encode_static_part_a(self, fields: StaticFields) -> str: ...

    def encode_static_part_b(self, fields: StaticFields) -> str: ...


class Transmitter(Protocol):
    def send(self, data: bytes, address: str, port: int) -> int:
        """Fire-and-forget send; returns bytes handed to the network."""
        ...
