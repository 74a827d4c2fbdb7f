"""Tests for the Signal K vessel registry and VesselRecord mapping."""

from __future__ import annotations

from datetime import datetime, timezone

from aisreporter.models.vessel import VesselRecord, parse_timestamp
from aisreporter.services.registry import VesselRegistry
from tests.conftest import NOW

SELF_CONTEXT = "vessels.urn:mrn:imo:mmsi:244000001"
OTHER_CONTEXT = "vessels.urn:mrn:imo:mmsi:244000099"


def _delta(context, path, value, timestamp="2024-12-06T11:00:00.000Z"):
    message = {"updates": [{"timestamp": timestamp, "values": [{"path": path, "value": value}]}]}
    if context is not None:
        message["context"] = context
    return message


class TestApply:
    def test_hello_sets_self(self):
        registry = VesselRegistry()
        registry.apply({"name": "signalk-server", "version": "2.0", "self": SELF_CONTEXT})
        assert registry.self_context == "urn:mrn:imo:mmsi:244000001"
        assert registry.self_value("mmsi") == "244000001"

    def test_hello_without_vessels_prefix(self):
        registry = VesselRegistry()
        registry.apply({"self": "urn:mrn:imo:mmsi:244000001"})
        assert registry.self_value("mmsi") == "244000001"

    def test_delta_stores_leaf_with_timestamp(self):
        registry = VesselRegistry()
        applied = registry.apply(
            _delta(OTHER_CONTEXT, "navigation.position", {"latitude": 52.1, "longitude": 4.2})
        )
        assert applied == 1
        [vessel] = registry.list_vessels()
        assert vessel.mmsi == "244000099"
        assert vessel.position.latitude == 52.1
        assert vessel.position.timestamp == datetime(2024, 12, 6, 11, 0, tzinfo=timezone.utc)

    def test_empty_path_merges_into_root(self):
        registry = VesselRegistry()
        registry.apply(_delta(OTHER_CONTEXT, "", {"name": "Sea Breeze"}))
        [vessel] = registry.list_vessels()
        assert vessel.name == "Sea Breeze"

    def test_delta_without_context_goes_to_self(self):
        registry = VesselRegistry()
        registry.apply({"self": SELF_CONTEXT})
        registry.apply(_delta(None, "plugins.mode", 1))
        assert registry.self_value("plugins.mode.value") == 1

    def test_delta_without_context_ignored_before_hello(self):
        registry = VesselRegistry()
        assert registry.apply(_delta(None, "plugins.mode", 1)) == 0
        assert len(registry) == 0

    def test_non_vessel_contexts_ignored(self):
        registry = VesselRegistry()
        registry.apply(_delta("atons.urn:mrn:imo:mmsi:992441234", "navigation.position", {}))
        assert len(registry) == 0

    def test_later_value_replaces_earlier(self):
        registry = VesselRegistry()
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0))
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 2.5))
        [vessel] = registry.list_vessels()
        assert vessel.speed_over_ground == 2.5

    def test_self_value_unknown_self(self):
        assert VesselRegistry().self_value("mmsi") is None


class TestVesselRecord:
    def test_from_signalk_tree(self):
        tree = {
            "mmsi": "244000099",
            "name": "Sea Breeze",
            "communication": {"callsignVhf": {"value": "PD1234"}},
            "navigation": {
                "position": {
                    "value": {"latitude": 52.1, "longitude": 4.2},
                    "timestamp": "2024-12-06T11:00:00Z",
                },
                "courseOverGroundTrue": {"value": 1.0},
                "speedOverGround": {"value": 3.0},
                "headingTrue": {"value": 1.1},
                "rateOfTurn": {"value": 0.01},
                "specialManeuver": {"value": "not engaged"},
                "destination": {"commonName": {"value": "Harlingen"}},
            },
            "design": {
                "aisShipType": {"value": {"id": 36, "name": "Sailing"}},
                "length": {"value": {"overall": 12.0}},
                "beam": {"value": 4.0},
                "draft": {"value": {"maximum": 1.8}},
            },
            "sensors": {
                "ais": {"class": {"value": "A"}},
                "gps": {"fromBow": {"value": 3.0}, "fromCenter": {"value": 0.5}},
            },
        }
        record = VesselRecord.from_signalk(tree)
        assert record.mmsi == "244000099"
        assert record.callsign == "PD1234"
        assert record.ais_class == "A"
        assert record.course_over_ground == 1.0
        assert record.special_maneuver == "not engaged"
        assert record.destination == "Harlingen"
        assert record.ship_type == 36
        assert record.length_overall == 12.0
        assert record.draft_maximum == 1.8
        assert record.gps_from_center == 0.5

    def test_missing_fields_are_none(self):
        record = VesselRecord.from_signalk({"mmsi": "244000099"})
        assert record.position is None
        assert record.heading_true is None
        assert record.ship_type is None

    def test_malformed_position_is_absent(self):
        tree = {"navigation": {"position": {"value": {"latitude": "52", "longitude": 4.2}}}}
        assert VesselRecord.from_signalk(tree).position is None

    def test_parse_timestamp(self):
        assert parse_timestamp("2024-12-06T11:00:00.000Z") == datetime(
            2024, 12, 6, 11, 0, tzinfo=timezone.utc
        )
        assert parse_timestamp("yesterday") is None
        assert parse_timestamp(None) is None


class TestRetention:
    def test_stale_vessel_dropped(self):
        registry = VesselRegistry(retention=900)
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0, "2024-12-06T10:00:00Z"))
        registry.apply(
            _delta("vessels.urn:mrn:imo:mmsi:244000100", "navigation.speedOverGround", 1.0)
        )
        vessels = registry.list_vessels(NOW)
        assert [v.mmsi for v in vessels] == ["244000100"]
        assert len(registry) == 1

    def test_vessel_at_retention_age_kept(self):
        registry = VesselRegistry(retention=900)
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0, "2024-12-06T10:45:00Z"))
        assert registry.prune(NOW) == 0
        assert len(registry) == 1

    def test_newer_update_refreshes_vessel(self):
        registry = VesselRegistry(retention=900)
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0, "2024-12-06T09:00:00Z"))
        registry.apply(_delta(OTHER_CONTEXT, "navigation.headingTrue", 1.0, "2024-12-06T10:59:00Z"))
        assert registry.prune(NOW) == 0

    def test_own_vessel_never_dropped(self):
        registry = VesselRegistry(retention=900)
        registry.apply({"self": SELF_CONTEXT})
        registry.apply(_delta(SELF_CONTEXT, "navigation.speedOverGround", 1.0, "2024-01-01T00:00:00Z"))
        assert registry.prune(NOW) == 0
        assert registry.self_value("mmsi") == "244000001"

    def test_without_retention_nothing_dropped(self):
        registry = VesselRegistry()
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0, "2020-01-01T00:00:00Z"))
        assert registry.prune(NOW) == 0
        assert len(registry.list_vessels(NOW)) == 1

    def test_record_rebuilt_only_after_update(self):
        registry = VesselRegistry()
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 1.0))
        [first] = registry.list_vessels(NOW)
        [again] = registry.list_vessels(NOW)
        assert again is first
        registry.apply(_delta(OTHER_CONTEXT, "navigation.speedOverGround", 2.0))
        [updated] = registry.list_vessels(NOW)
        assert updated.speed_over_ground == 2.0
