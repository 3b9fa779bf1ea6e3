"""Thread-safe mapping from operation identifiers to service handlers.

Every mutation follows the same order: the mapping is updated while holding
the registry lock, the lock is released, and only then is the advertiser
notified. Lookups take the same lock, so a concurrent reader either sees the
mapping before or after a mutation, never halfway through it. A second
mutation lock is held across the whole update-then-notify sequence so that
notifications reach the advertiser in the order the mutations were committed.
Lookups never take it, so a slow advertiser does not stall dispatch.

Handlers are remembered by the id they were registered under. ``remove``
uses that id rather than calling ``describe()`` again, so a handler whose
descriptor changed after registration still removes its own entry.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .errors import InvalidProfileError
from .model import Advertiser, Handler, ProfileDescriptor

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Entry:
    handler: Handler
    descriptor: ProfileDescriptor


class _SilentAdvertiser:
    def publish(self, descriptor: ProfileDescriptor) -> None:
        LOGGER.debug("No advertiser configured; not publishing '%s'", descriptor.operation_id)

    def withdraw(self, descriptor: ProfileDescriptor) -> None:
        LOGGER.debug("No advertiser configured; not withdrawing '%s'", descriptor.operation_id)


@dataclass
class ProfileRegistry:
    """Source of truth for which operations are currently routable."""

    advertiser: Advertiser = field(default_factory=_SilentAdvertiser)
    _entries: Dict[str, _Entry] = field(default_factory=dict, init=False, repr=False)
    _owners: Dict[int, str] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _mutation_lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def add(self, handler: Handler) -> None:
        """Register ``handler`` under the operation id it describes.

        An existing entry for the same id is replaced. If ``handler`` itself was
        registered earlier under a different id, that entry is dropped and its
        descriptor withdrawn.
        """

        descriptor = handler.describe()
        operation_id = getattr(descriptor, "operation_id", None)
        if not isinstance(operation_id, str) or not operation_id:
            raise InvalidProfileError(handler, operation_id)

        entry = _Entry(handler=handler, descriptor=descriptor)
        moved: Optional[_Entry] = None
        with self._mutation_lock:
            with self._lock:
                previous = self._entries.get(operation_id)
                if previous is not None:
                    self._owners.pop(id(previous.handler), None)
                old_id = self._owners.get(id(handler))
                if old_id is not None and old_id != operation_id:
                    moved = self._entries.pop(old_id, None)
                self._entries[operation_id] = entry
                self._owners[id(handler)] = operation_id

            if previous is not None and previous.handler is not handler:
                LOGGER.warning(
                    "Operation '%s' was already registered to %r; replacing it with %r",
                    operation_id,
                    previous.handler,
                    handler,
                )
            if moved is not None:
                LOGGER.info("Handler %r moved from '%s' to '%s'", handler, moved.descriptor.operation_id, operation_id)
                self.advertiser.withdraw(moved.descriptor)
            LOGGER.info("Registered operation '%s'", operation_id)
            self.advertiser.publish(descriptor)

    def add_all(self, handlers: Iterable[Handler]) -> None:
        """Register each handler in ``handlers`` in order."""

        for handler in handlers:
            self.add(handler)

    def remove(self, handler: Handler) -> bool:
        """Unregister ``handler``; return ``False`` if it was not registered."""

        with self._mutation_lock:
            with self._lock:
                operation_id = self._owners.pop(id(handler), None)
                entry = self._entries.pop(operation_id, None) if operation_id is not None else None

            if entry is None:
                LOGGER.debug("Ignoring removal of unregistered handler %r", handler)
                return False
            LOGGER.info("Removed operation '%s'", operation_id)
            self.advertiser.withdraw(entry.descriptor)
            return True

    def lookup(self, operation_id: str) -> Optional[Handler]:
        """Return the handler registered under ``operation_id`` or ``None``."""

        with self._lock:
            entry = self._entries.get(operation_id)
        return entry.handler if entry is not None else None

    def operations(self) -> List[str]:
        """Return a sorted snapshot of the registered operation ids."""

        with self._lock:
            return sorted(self._entries)

    def descriptors(self) -> List[ProfileDescriptor]:
        """Return the descriptors of all registered handlers."""

        with self._lock:
            entries = list(self._entries.values())
        return [entry.descriptor for entry in entries]

    def clear(self) -> None:
        """Drop every entry and withdraw the corresponding descriptors."""

        with self._mutation_lock:
            with self._lock:
                entries = list(self._entries.values())
                self._entries.clear()
                self._owners.clear()
            for entry in entries:
                self.advertiser.withdraw(entry.descriptor)

    def __contains__(self, operation_id: object) -> bool:
        with self._lock:
            return operation_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
