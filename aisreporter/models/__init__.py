from aisreporter.models.endpoint import (
    Endpoint,
    EndpointStatistics,
    OwnVessel,
    ReportStatistics,
    ReportType,
    ReportTypeStats,
    VesselClass,
    VesselClassConfig,
)
from aisreporter.models.fields import PositionFields, StaticFields
from aisreporter.models.vessel import Fix, VesselRecord

__all__ = [
    "Endpoint",
    "EndpointStatistics",
    "Fix",
    "OwnVessel",
    "PositionFields",
    "ReportStatistics",
    "ReportType",
    "ReportTypeStats",
    "StaticFields",
    "VesselClass",
    "VesselClassConfig",
    "VesselRecord",
]
