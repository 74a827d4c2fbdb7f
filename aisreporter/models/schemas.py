"""Status API response schemas."""
from typing import Dict

from pydantic import BaseModel, RootModel


class ReportTypeStatusOut(BaseModel):
    """Totals and window sums for one report type."""
    last_report_time: str = "never"
    total_reports_transmitted: int = 0
    total_bytes_transmitted: int = 0
    reports_transmitted_in_last_hour: int = 0
    bytes_transmitted_in_last_hour: int = 0
    reports_transmitted_in_last_day: int = 0
    bytes_transmitted_in_last_day: int = 0


class EndpointStatusOut(BaseModel):
    address: str
    port: int
    started: str
    total_bytes_transmitted: int = 0
    position: ReportTypeStatusOut
    static: ReportTypeStatusOut


class StatusOut(RootModel[Dict[str, EndpointStatusOut]]):
    """Endpoint status keyed by endpoint name."""


class HealthOut(BaseModel):
    status: str
    message: str = ""
