"""Observability helpers for profilecallee."""

from .events import Event, EventBus, EventBusAdvertiser

__all__ = ["Event", "EventBus", "EventBusAdvertiser"]
