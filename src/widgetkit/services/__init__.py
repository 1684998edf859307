"""Service layer exports.

Responsibilities:
 - EventBus publish/subscribe core (chart events are emitted here)
 - ErrorHandlingService (default error sink for widgets)
 - SettingsService (runtime defaults)
"""

from .event_bus import ChartEvent, Event, EventBus, Subscription  # noqa: F401
from .error_handling_service import ErrorHandlingService, ErrorRecord  # noqa: F401
from .settings_service import SettingsService  # noqa: F401

__all__ = [
    "ChartEvent",
    "Event",
    "EventBus",
    "Subscription",
    "ErrorHandlingService",
    "ErrorRecord",
    "SettingsService",
]
