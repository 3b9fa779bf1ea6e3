"""Call routing for registered service handlers."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .model import CORRUPT_CALL, INVALID_CALL, SERVICE_SPECIFIC_ERROR, Call, Response
from .registry import ProfileRegistry

LOGGER = logging.getLogger(__name__)


@dataclass
class CallDispatcher:
    """Route calls to the handler registered for their operation id.

    Every call produces exactly one :class:`Response`. Malformed calls yield
    ``"Corrupt call"``, calls for unknown operations yield ``"Invalid call"``
    and anything returned by a matched handler is passed through untouched.
    """

    registry: ProfileRegistry = field(default_factory=ProfileRegistry)
    error_output: str = SERVICE_SPECIFIC_ERROR

    def handle_call(self, call: Optional[Call]) -> Response:
        """Dispatch ``call`` and return the handler's response."""

        if call is None:
            LOGGER.warning("Rejecting absent call")
            return self._failure(CORRUPT_CALL)

        operation_id = getattr(call, "operation_id", None)
        if not isinstance(operation_id, str) or not operation_id:
            LOGGER.warning("Rejecting call without operation id: %r", call)
            return self._failure(CORRUPT_CALL)

        handler = self.registry.lookup(operation_id)
        if handler is None:
            LOGGER.warning("Rejecting call for unknown operation '%s'", operation_id)
            return self._failure(INVALID_CALL)

        LOGGER.debug("Dispatching '%s' to %r", operation_id, handler)
        try:
            return handler.handle_call(call)
        except Exception as exc:
            LOGGER.exception("Handler for '%s' raised instead of responding", operation_id)
            return self._failure(str(exc) or exc.__class__.__name__)

    def _failure(self, message: str) -> Response:
        return Response.failure(message, output_name=self.error_output)
