"""
Shared in-memory reporter state (status provider, scheduler).

Set at app lifespan start; read by API routes.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from aisreporter.services.status import StatusProvider

if TYPE_CHECKING:
    from worker.scheduler import ReportScheduler

_status_provider: Optional[StatusProvider] = None
_scheduler: Optional["ReportScheduler"] = None


def set_status_provider(p: Optional[StatusProvider]) -> None:
    global _status_provider
    _status_provider = p


def get_status_provider() -> StatusProvider:
    if _status_provider is None:
        raise RuntimeError("Reporter state not initialized")
    return _status_provider


def set_scheduler(s: Optional["ReportScheduler"]) -> None:
    global _scheduler
    _scheduler = s


def get_scheduler() -> Optional["ReportScheduler"]:
    return _scheduler
