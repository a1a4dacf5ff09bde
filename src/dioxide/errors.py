"""
Dioxide error types.
"""

from typing import Any, Optional

MISSING_REQUIRED_FIELD = "missing-required-field"
MALFORMED_JSON = "malformed-json"
INVALID_FIELD = "invalid-field"


class DioxideError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class ProtocolError(DioxideError):
    """Malformed or incomplete envelope. Raised at construction/parse time."""

    def __init__(self, kind: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("protocol_error", message, details)
        self.kind = kind


class TransportFailure(DioxideError):
    """Failure reported by the transport. `source` is passed through untouched."""

    def __init__(self, source: Any, message: str = "transport failure", code: str = "transport_error"):
        super().__init__(code, message)
        self.source = source


class ResponseDecodeFailure(TransportFailure):
    """Transport reported success but the body is not a valid response envelope."""

    def __init__(self, source: Any, cause: ProtocolError):
        super().__init__(source, f"undecodable response: {cause}", code="response_decode_error")
        self.cause = cause


class CallStateError(DioxideError):
    def __init__(self, message: str):
        super().__init__("call_state_error", message)
