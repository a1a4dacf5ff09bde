"""
Request / response envelopes exchanged with the RPC service.

Wire format:
  request:  {request_id, uri, method, device_id?, session_id?, payload?}
  response: {request_id, status_code, message, payload?}
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# Fixed once the request is built; session_id and payload stay writable until send.
READ_ONLY_REQUEST_FIELDS = frozenset({"request_id", "uri", "method", "device_id"})


class RequestEnvelope(BaseModel):
    """One outbound call.

    Mutating ``session_id``/``payload`` after the request was handed to the
    orchestrator has no defined effect; that is the caller's responsibility.
    """

    model_config = ConfigDict(validate_assignment=True)

    request_id: int
    uri: str = Field(min_length=1)
    method: str = Field(min_length=1)
    device_id: Optional[str] = None
    session_id: Optional[str] = None
    payload: Optional[Any] = None

    def __setattr__(self, name: str, value: Any) -> None:
        if name in READ_ONLY_REQUEST_FIELDS:
            raise AttributeError(f"RequestEnvelope.{name} is read-only")
        super().__setattr__(name, value)

    def set_session_id(self, session_id: Optional[str]) -> None:
        self.session_id = session_id

    def set_payload(self, payload: Any) -> None:
        self.payload = payload

    def to_json(self) -> str:
        from dioxide.codec import serialize_request
        return serialize_request(self)


class ResponseEnvelope(BaseModel):
    """One decoded reply. ``request_id`` is not checked against the request."""

    model_config = ConfigDict(frozen=True)

    request_id: StrictInt
    status_code: StrictInt
    message: StrictStr
    payload: Optional[Any] = None

    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    def to_json(self) -> str:
        from dioxide.codec import serialize_response
        return serialize_response(self)
