"""profilecallee package initialization.

Registers service handlers under operation identifiers and routes incoming
calls to them.
"""

from .api import ServiceCallee, handle_call
from .dispatcher import CallDispatcher
from .errors import InvalidProfileError, ProfileCalleeError
from .handlers import FunctionHandler
from .model import Call, CallStatus, ProfileDescriptor, Response
from .registry import ProfileRegistry

__all__ = [
    "Call",
    "CallDispatcher",
    "CallStatus",
    "FunctionHandler",
    "InvalidProfileError",
    "ProfileCalleeError",
    "ProfileDescriptor",
    "ProfileRegistry",
    "Response",
    "ServiceCallee",
    "handle_call",
]
