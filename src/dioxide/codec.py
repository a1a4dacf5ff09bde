"""
Envelope construction, serialization and parsing.

Validation happens here, eagerly, so nothing downstream ever sees a
half-formed envelope.
"""

import json
import logging
import threading
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from dioxide.errors import INVALID_FIELD, MALFORMED_JSON, MISSING_REQUIRED_FIELD, ProtocolError
from dioxide.models.envelope import RequestEnvelope, ResponseEnvelope

logger = logging.getLogger("dioxide.codec")

REQUIRED_REQUEST_FIELDS = ("uri", "method")
REQUIRED_RESPONSE_FIELDS = ("request_id", "status_code", "message")


class RequestIdCounter:
    """Monotonic request id source. The first id issued is 1; never reset."""

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    @property
    def last(self) -> int:
        return self._last

    def next_id(self) -> int:
        with self._lock:
            self._last += 1
            return self._last


default_counter = RequestIdCounter()


def build_request(params: Mapping[str, Any], counter: Optional[RequestIdCounter] = None) -> RequestEnvelope:
    """Build a request from ``{uri, method, session_id?, device_id?, payload?}``.

    The id is allocated before validation, so a rejected request still
    consumes one.
    """
    request_id = (counter or default_counter).next_id()

    missing = [name for name in REQUIRED_REQUEST_FIELDS if params.get(name) is None]
    if missing:
        raise ProtocolError(
            MISSING_REQUIRED_FIELD,
            f"request is missing required field(s): {', '.join(missing)}",
            {"missing": missing},
        )

    try:
        return RequestEnvelope(
            request_id=request_id,
            uri=params["uri"],
            method=params["method"],
            device_id=params.get("device_id"),
            session_id=params.get("session_id"),
            payload=params.get("payload"),
        )
    except ValidationError as e:
        raise ProtocolError(INVALID_FIELD, f"invalid request: {e}", {"errors": e.errors()}) from e


def request_to_dict(request: RequestEnvelope) -> dict[str, Any]:
    # Absent optionals are omitted, never sent as null: the server treats them differently.
    data: dict[str, Any] = {
        "request_id": request.request_id,
        "uri": request.uri,
        "method": request.method,
    }
    for name in ("device_id", "session_id", "payload"):
        value = getattr(request, name)
        if value is not None:
            data[name] = value
    return data


def serialize_request(request: RequestEnvelope) -> str:
    try:
        return json.dumps(request_to_dict(request))
    except (TypeError, ValueError) as e:
        raise ProtocolError(INVALID_FIELD, f"request payload is not JSON serializable: {e}") from e


def parse_response(raw_text: str) -> ResponseEnvelope:
    """Parse a response body. Raises ProtocolError if it is not a complete envelope."""
    try:
        data = json.loads(raw_text)
    except (TypeError, ValueError) as e:
        raise ProtocolError(MALFORMED_JSON, f"response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        logger.debug("Rejected response: expected a JSON object, got %s", type(data).__name__)
        raise ProtocolError(MISSING_REQUIRED_FIELD, "response is not a JSON object")

    missing = [name for name in REQUIRED_RESPONSE_FIELDS if data.get(name) is None]
    if missing:
        logger.debug("Rejected response: missing %s", ", ".join(missing))
        raise ProtocolError(
            MISSING_REQUIRED_FIELD,
            f"response is missing required field(s): {', '.join(missing)}",
            {"missing": missing},
        )

    try:
        return ResponseEnvelope.model_validate(data)
    except ValidationError as e:
        logger.debug("Rejected response: invalid %s", ", ".join(".".join(map(str, err["loc"])) for err in e.errors()))
        raise ProtocolError(INVALID_FIELD, f"invalid response: {e}", {"errors": e.errors()}) from e


def response_to_dict(response: ResponseEnvelope) -> dict[str, Any]:
    data: dict[str, Any] = {
        "request_id": response.request_id,
        "status_code": response.status_code,
        "message": response.message,
    }
    if response.payload is not None:
        data["payload"] = response.payload
    return data


def serialize_response(response: ResponseEnvelope) -> str:
    return json.dumps(response_to_dict(response))
