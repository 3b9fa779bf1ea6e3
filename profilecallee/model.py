"""Call, response and descriptor types shared by the registry and dispatcher."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Optional, Protocol, Tuple

CORRUPT_CALL = "Corrupt call"
INVALID_CALL = "Invalid call"
SERVICE_SPECIFIC_ERROR = "error"

Output = Tuple[str, Any]


class CallStatus(str, Enum):
    """Outcome reported by a :class:`Response`."""

    SUCCESS = "success"
    SERVICE_SPECIFIC_FAILURE = "service_specific_failure"


@dataclass(frozen=True)
class ProfileDescriptor:
    """Advertised description of a single routable operation."""

    operation_id: str
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass
class Call:
    """Incoming request addressed to an operation.

    ``payload`` is opaque at this layer and is only interpreted by the handler
    the call is routed to.
    """

    operation_id: Optional[str] = None
    payload: Any = None


@dataclass
class Response:
    """Result of handling a :class:`Call`."""

    status: CallStatus
    outputs: List[Output] = field(default_factory=list)

    @classmethod
    def success(cls, *outputs: Output) -> "Response":
        return cls(status=CallStatus.SUCCESS, outputs=list(outputs))

    @classmethod
    def failure(cls, message: str, *, output_name: str = SERVICE_SPECIFIC_ERROR) -> "Response":
        """Return a service specific failure carrying ``message``."""

        return cls(
            status=CallStatus.SERVICE_SPECIFIC_FAILURE,
            outputs=[(output_name, message)],
        )

    @property
    def is_success(self) -> bool:
        return self.status is CallStatus.SUCCESS

    def add_output(self, name: str, value: Any) -> None:
        """Append an output, preserving insertion order."""

        self.outputs.append((name, value))

    def output(self, name: str, default: Any = None) -> Any:
        """Return the first output value stored under ``name``."""

        for key, value in self.outputs:
            if key == name:
                return value
        return default


class Handler(Protocol):
    """Capability implemented by every routable service handler."""

    def describe(self) -> ProfileDescriptor:  # pragma: no cover - interface
        ...

    def handle_call(self, call: Call) -> Response:  # pragma: no cover - interface
        ...


class Advertiser(Protocol):
    """External collaborator told when operations become (un)available."""

    def publish(self, descriptor: ProfileDescriptor) -> None:  # pragma: no cover - interface
        ...

    def withdraw(self, descriptor: ProfileDescriptor) -> None:  # pragma: no cover - interface
        ...


__all__ = [
    "Advertiser",
    "CORRUPT_CALL",
    "Call",
    "CallStatus",
    "Handler",
    "INVALID_CALL",
    "Output",
    "ProfileDescriptor",
    "Response",
    "SERVICE_SPECIFIC_ERROR",
]
