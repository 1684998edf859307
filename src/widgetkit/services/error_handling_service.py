"""Widget error handling service.

Default error sink handed to widgets that are constructed without a
caller-supplied handler. Widgets report failures with a *context* string
naming the operation that failed (``reconfigure``, ``handle_pointer``,
``render`` ...); the service:

 - keeps a ring buffer (default capacity 20) of structured ``ErrorRecord``
 - aggregates repeated failures (same type + context + message) so a broken
   frame repeated at 60 fps shows up once with a count
 - logs each failure through the standard ``logging`` module
 - publishes ``ChartEvent.ERROR`` on the supplied ``EventBus``

The service never re-raises and never terminates the host process; whether
the failing operation propagates is decided by the caller.
"""

from __future__ import annotations

import logging
import traceback
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List

from .event_bus import ChartEvent

__all__ = [
    "ErrorRecord",
    "DedupEntry",
    "ErrorHandlingService",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorRecord:
    """Structured capture of a widget failure.

    Attributes
    ----------
    context: str
        Operation in which the failure occurred.
    component: str
        Widget name reporting the failure (e.g. ``"Chart"``).
    exc_type: type
        Exception class.
    exc_value: BaseException
        Exception instance.
    traceback_str: str
        Formatted traceback text (empty when the exception was never raised).
    timestamp: float
        POSIX timestamp when handled.
    iso_time: str
        ISO 8601 timestamp (UTC).
    """

    context: str
    component: str
    exc_type: type
    exc_value: BaseException
    traceback_str: str
    timestamp: float
    iso_time: str

    def summary(self, max_len: int = 120) -> str:
        msg = f"[{self.component}:{self.context}] {self.exc_type.__name__}: {self.exc_value}"
        return msg if len(msg) <= max_len else msg[: max_len - 3] + "..."


@dataclass
class DedupEntry:
    key: str
    first: ErrorRecord
    count: int
    last_timestamp: float


class ErrorHandlingService:
    """Callable error sink: ``service(error, context)``.

    Usage
    -----
    bus = EventBus()
    handler = ErrorHandlingService(event_bus=bus)
    engine = ChartEngine(spec, event_bus=bus, error_handler=handler)
    """

    def __init__(
        self,
        *,
        capacity: int = 20,
        logger: logging.Logger | None = None,
        event_bus: Any | None = None,
        component: str = "Chart",
    ) -> None:
        self._capacity = max(1, capacity)
        self._errors: Deque[ErrorRecord] = deque(maxlen=self._capacity)
        self._logger = logger or log
        self._event_bus = event_bus  # expected subset: .publish(name, payload)
        self._component = component
        self._dedup: Dict[str, DedupEntry] = {}

    def __call__(self, error: BaseException, context: str) -> ErrorRecord:
        return self.handle(error, context)

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------
    def handle(self, error: BaseException, context: str) -> ErrorRecord:
        trace_text = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        now = datetime.now(timezone.utc)
        record = ErrorRecord(
            context=context,
            component=self._component,
            exc_type=type(error),
            exc_value=error,
            traceback_str=trace_text if error.__traceback__ is not None else "",
            timestamp=now.timestamp(),
            iso_time=now.isoformat().replace("+00:00", "Z"),
        )
        self._errors.append(record)
        key = f"{record.exc_type.__name__}|{context}|{error}"
        entry = self._dedup.get(key)
        if entry is None:
            self._dedup[key] = DedupEntry(
                key=key, first=record, count=1, last_timestamp=record.timestamp
            )
            self._logger.error("%s error in %s: %s", self._component, context, error)
        else:
            entry.count += 1
            entry.last_timestamp = record.timestamp
            self._logger.debug(
                "%s error in %s repeated (%d): %s", self._component, context, entry.count, error
            )
        if self._event_bus is not None:
            self._event_bus.publish(
                ChartEvent.ERROR,
                {
                    "error": error,
                    "context": context,
                    "component": self._component,
                    "type": record.exc_type.__name__,
                    "message": str(error),
                    "iso_time": record.iso_time,
                },
            )
        return record

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def recent_errors(self) -> List[ErrorRecord]:
        return list(self._errors)

    def dedup_entries(self) -> List[DedupEntry]:
        """Aggregated groups in first-seen order."""
        return list(self._dedup.values())

    def clear(self) -> None:
        self._errors.clear()
        self._dedup.clear()
