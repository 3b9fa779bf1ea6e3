"""Handler backed by a plain Python callable."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from .model import Call, ProfileDescriptor, Response


@dataclass
class FunctionHandler:
    """Expose ``func`` as the handler for ``operation_id``."""

    operation_id: str
    func: Callable[[Call], Response]
    metadata: Dict[str, Any] = field(default_factory=dict)

    def describe(self) -> ProfileDescriptor:
        return ProfileDescriptor(operation_id=self.operation_id, metadata=dict(self.metadata))

    def handle_call(self, call: Call) -> Response:
        return self.func(call)
