"""Event bus primitives and the event-backed advertiser."""
from __future__ import annotations

import datetime as _dt
import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Set

from profilecallee.model import ProfileDescriptor


def utc_now() -> str:
    """Return the current UTC time formatted as an ISO 8601 string."""

    return _dt.datetime.now(_dt.timezone.utc).isoformat()


@dataclass
class Event:
    """Simple event structure stored in the event bus."""

    ts: str
    level: str
    msg: str
    action: str | None = None
    target_ids: List[str] = field(default_factory=list)
    extras: dict | None = None


@dataclass
class EventBus:
    """Append-only in-memory event bus."""

    events: List[Event] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def emit(
        self,
        *,
        level: str,
        msg: str,
        action: str | None = None,
        target_ids: Iterable[str] | None = None,
        extras: dict | None = None,
    ) -> Event:
        """Create and store a new :class:`Event`."""

        event = Event(
            ts=utc_now(),
            level=level,
            msg=msg,
            action=action,
            target_ids=list(target_ids or []),
            extras=extras,
        )
        with self._lock:
            self.events.append(event)
        return event

    def history(self) -> Iterable[Event]:
        """Return the chronological event history."""

        with self._lock:
            return tuple(self.events)


@dataclass
class EventBusAdvertiser:
    """Advertiser that records publish/withdraw notifications as events."""

    bus: EventBus = field(default_factory=EventBus)
    _advertised: Set[str] = field(default_factory=set, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def publish(self, descriptor: ProfileDescriptor) -> None:
        with self._lock:
            self._advertised.add(descriptor.operation_id)
        self.bus.emit(
            level="info",
            msg=f"Published operation '{descriptor.operation_id}'",
            action="publish",
            target_ids=[descriptor.operation_id],
            extras=dict(descriptor.metadata) or None,
        )

    def withdraw(self, descriptor: ProfileDescriptor) -> None:
        with self._lock:
            self._advertised.discard(descriptor.operation_id)
        self.bus.emit(
            level="info",
            msg=f"Withdrew operation '{descriptor.operation_id}'",
            action="withdraw",
            target_ids=[descriptor.operation_id],
        )

    def advertised(self) -> Set[str]:
        """Return the operation ids currently advertised."""

        with self._lock:
            return set(self._advertised)
