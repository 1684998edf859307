"""Chart event channel.

Engines publish interaction outcomes here and host code listens; neither side
holds a reference to the other. Channels are keyed by the ``ChartEvent``
string value, so ``"dataPointSelect"`` and ``ChartEvent.DATA_POINT_SELECT``
address the same listeners.

Delivery is synchronous: ``publish`` returns after every listener ran, while
the pointer or key event that caused it is still being handled. A listener
that raises is logged and recorded in ``failures``; the remaining listeners
still receive the event.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Deque, Dict, List, Optional, Protocol, Tuple

__all__ = [
    "ChartEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]

log = logging.getLogger(__name__)


class ChartEvent(str, Enum):
    DATA_POINT_HOVER = "dataPointHover"  # {"element", "position"}
    DATA_POINT_SELECT = "dataPointSelect"  # {"element", "selected"}
    SELECTION_CLEARED = "selectionCleared"  # no payload
    ERROR = "error"  # ErrorHandlingService payload dict
    ANIMATION_COMPLETE = "animationComplete"  # no payload


@dataclass(frozen=True)
class Event:
    name: str
    payload: Any
    timestamp: float


class EventHandler(Protocol):
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass(eq=False)
class Subscription:
    """Handle returned by ``EventBus.subscribe``; ``cancel`` detaches it."""

    channel: str
    handler: EventHandler
    once: bool = False
    _bus: Optional["EventBus"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        return self._bus is not None

    def cancel(self) -> None:
        bus, self._bus = self._bus, None
        if bus is not None:
            bus._detach(self)


def _channel(name: str | ChartEvent) -> str:
    return name.value if isinstance(name, ChartEvent) else str(name)


class EventBus:
    def __init__(self, *, failure_capacity: int = 50) -> None:
        self._lock = RLock()
        self._channels: Dict[str, List[Subscription]] = {}
        self._failures: Deque[Tuple[Event, BaseException]] = deque(maxlen=failure_capacity)

    def subscribe(
        self, name: str | ChartEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        sub = Subscription(_channel(name), handler, once, self)
        with self._lock:
            self._channels.setdefault(sub.channel, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.cancel()

    def clear(self) -> None:
        """Detach every listener and forget recorded failures."""
        with self._lock:
            subs = [s for bucket in self._channels.values() for s in bucket]
            self._failures.clear()
        for sub in subs:
            sub.cancel()

    def publish(self, name: str | ChartEvent, payload: Any = None) -> Event:
        event = Event(_channel(name), payload, perf_counter())
        with self._lock:
            listeners = tuple(self._channels.get(event.name, ()))
        for sub in listeners:
            # a listener earlier in this dispatch may have cancelled this one
            if not sub.active:
                continue
            if sub.once:
                sub.cancel()
            try:
                sub.handler(event)
            except Exception as exc:  # noqa: BLE001 - isolate listener failures
                log.exception("Listener for %s failed", event.name)
                with self._lock:
                    self._failures.append((event, exc))
        return event

    @property
    def failures(self) -> List[Tuple[Event, BaseException]]:
        with self._lock:
            return list(self._failures)

    def _detach(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._channels.get(sub.channel, [])
            remaining = [s for s in bucket if s is not sub]
            if remaining:
                self._channels[sub.channel] = remaining
            else:
                self._channels.pop(sub.channel, None)
