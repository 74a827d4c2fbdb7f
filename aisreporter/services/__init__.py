from aisreporter.services.status import StatusProvider
from aisreporter.services.reporter_state import (
    get_scheduler,
    get_status_provider,
    set_scheduler,
    set_status_provider,
)

__all__ = [
    "StatusProvider",
    "get_scheduler",
    "get_status_provider",
    "set_scheduler",
    "set_status_provider",
]
