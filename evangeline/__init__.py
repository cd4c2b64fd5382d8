"""evangeline: an async Python SDK for Eludris bots."""

from evangeline.bot import Bot
from evangeline.cdn import CDNClient
from evangeline.config import ConnectionConfig
from evangeline.errors import (
    EmptyMessageError,
    EvangelineError,
    HttpRequestError,
    InvalidIdentityError,
    MalformedEventError,
    TransportError,
)
from evangeline.events import Closed, ErrorEvent, EventKind, GatewayEvent, MessageCreate, Ready
from evangeline.gateway import ConnectionState, GatewayConnection
from evangeline.models import FileData, Message, validate_identity
from evangeline.rest import RESTClient

__version__ = "0.1.0"
__all__ = [
    # Core
    "Bot",
    "GatewayConnection", "ConnectionState", "ConnectionConfig",
    # HTTP
    "RESTClient", "CDNClient",
    # Events
    "EventKind", "GatewayEvent", "Ready", "MessageCreate", "Closed", "ErrorEvent",
    # Models
    "Message", "FileData", "validate_identity",
    # Errors
    "EvangelineError", "InvalidIdentityError", "EmptyMessageError",
    "TransportError", "HttpRequestError", "MalformedEventError",
]
