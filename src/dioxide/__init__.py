"""
dioxide: JSON-over-HTTP RPC client.

Frames requests as JSON envelopes, posts them to a service endpoint,
decodes the replies and keeps per-endpoint call statistics.
"""

from dioxide.client import AsyncDioxide, Dioxide
from dioxide.codec import (
    RequestIdCounter,
    build_request,
    parse_response,
    serialize_request,
    serialize_response,
)
from dioxide.config import DioxideConfig, load_config
from dioxide.errors import (
    CallStateError,
    DioxideError,
    ProtocolError,
    ResponseDecodeFailure,
    TransportFailure,
)
from dioxide.models.envelope import RequestEnvelope, ResponseEnvelope
from dioxide.models.stats import CallStatsEntry
from dioxide.orchestrator import CallOrchestrator, CallState, RPCCall
from dioxide.stats import CallStats, call_key
from dioxide.transport import HttpTransport, Transport, TransportEvent

__version__ = "0.1.0"
__all__ = [
    "AsyncDioxide",
    "Dioxide",
    "RequestIdCounter",
    "build_request",
    "parse_response",
    "serialize_request",
    "serialize_response",
    "DioxideConfig",
    "load_config",
    "DioxideError",
    "ProtocolError",
    "TransportFailure",
    "ResponseDecodeFailure",
    "CallStateError",
    "RequestEnvelope",
    "ResponseEnvelope",
    "CallStatsEntry",
    "CallOrchestrator",
    "CallState",
    "RPCCall",
    "CallStats",
    "call_key",
    "HttpTransport",
    "Transport",
    "TransportEvent",
]
