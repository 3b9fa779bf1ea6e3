"""Public API surface for profilecallee."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from profilecallee.config import CalleeSettings, load_settings
from profilecallee.dispatcher import CallDispatcher
from profilecallee.model import Advertiser, Call, Handler, Response
from profilecallee.obs.events import EventBus, EventBusAdvertiser
from profilecallee.registry import ProfileRegistry

LOGGER = logging.getLogger(__name__)


@dataclass
class ServiceCallee:
    """Container wiring the registry, dispatcher and advertiser together.

    The owning middleware constructs one callee with the handlers it starts
    with and later calls :meth:`add_handler` / :meth:`remove_handler` as
    plugins come and go. Incoming calls go through :meth:`handle_call`.
    """

    initial_handlers: Sequence[Handler] = ()
    settings: CalleeSettings = field(default_factory=load_settings)
    event_bus: EventBus = field(default_factory=EventBus)
    advertiser: Advertiser | None = None
    registry: ProfileRegistry | None = None
    dispatcher: CallDispatcher | None = None

    def __post_init__(self) -> None:
        self._apply_log_level(self.settings.log_level)
        if self.advertiser is None:
            if self.registry is not None:
                self.advertiser = self.registry.advertiser
            else:
                self.advertiser = EventBusAdvertiser(bus=self.event_bus)
        if self.registry is None:
            self.registry = ProfileRegistry(advertiser=self.advertiser)
        if self.dispatcher is None:
            self.dispatcher = CallDispatcher(
                registry=self.registry,
                error_output=self.settings.error_output,
            )
        self.registry.add_all(self.initial_handlers)

    def add_handler(self, handler: Handler) -> None:
        """Make ``handler`` routable and advertise it."""

        self.registry.add(handler)

    def remove_handler(self, handler: Handler) -> bool:
        """Stop routing to ``handler`` and withdraw its advertisement."""

        return self.registry.remove(handler)

    def handle_call(self, call: Optional[Call]) -> Response:
        return self.dispatcher.handle_call(call)

    def operations(self) -> List[str]:
        return self.registry.operations()

    def communication_channel_broken(self) -> None:
        """Called by the middleware when its bus connection drops."""

        LOGGER.warning("Communication channel broken; %d operation(s) remain registered", len(self.registry))
        self.event_bus.emit(level="warning", msg="Communication channel broken", action="channel_broken")

    def close(self) -> None:
        """Unregister every handler."""

        self.registry.clear()

    @staticmethod
    def _apply_log_level(level_name: str | None) -> None:
        if not level_name:
            return
        level = logging.getLevelName(level_name)
        if isinstance(level, int):
            logging.getLogger("profilecallee").setLevel(level)
        else:
            LOGGER.warning("Ignoring unknown log level %r", level_name)


_CALLEE = ServiceCallee()


def handle_call(call: Optional[Call]) -> Response:
    """Entry point exposed to the transport layer."""

    return _CALLEE.handle_call(call)
