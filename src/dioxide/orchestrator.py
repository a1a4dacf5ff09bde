"""
Call orchestration: one request, one transport round trip, exactly one outcome.

Lifecycle of every call:

    CREATED -> DISPATCHED -> SUCCEEDED | FAILED

A transport success whose body is not a valid response envelope is a
failure. Both outcomes are recorded in the shared CallStats under the
request's ``uri#method`` key before the caller hears about them.

The response ``request_id`` is not compared with the request's id; callers
that care must check it themselves.
"""

import inspect
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Union

from dioxide.codec import parse_response, serialize_request
from dioxide.errors import CallStateError, ProtocolError, ResponseDecodeFailure, TransportFailure
from dioxide.models.envelope import RequestEnvelope, ResponseEnvelope
from dioxide.stats import CallStats, request_call_key
from dioxide.transport.base import Transport, TransportEvent, now_millis

logger = logging.getLogger("dioxide.orchestrator")

HTTP_METHOD = "POST"

SuccessHandler = Callable[[ResponseEnvelope], Union[None, Awaitable[None]]]
ErrorHandler = Callable[[Any], Union[None, Awaitable[None]]]


class CallState(str, Enum):
    CREATED = "created"
    DISPATCHED = "dispatched"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RPCCall:
    """State of a single call. Terminal states are final."""

    __slots__ = ("request", "state", "started_at", "completed_at", "response", "error")

    def __init__(self, request: RequestEnvelope):
        self.request = request
        self.state = CallState.CREATED
        self.started_at: Optional[float] = None
        self.completed_at: Optional[float] = None
        self.response: Optional[ResponseEnvelope] = None
        self.error: Optional[TransportFailure] = None

    @property
    def done(self) -> bool:
        return self.state in (CallState.SUCCEEDED, CallState.FAILED)

    @property
    def elapsed_millis(self) -> Optional[float]:
        if self.started_at is None or self.completed_at is None:
            return None
        return self.completed_at - self.started_at

    def mark_dispatched(self, started_at: float) -> None:
        self._expect(CallState.CREATED, CallState.DISPATCHED)
        self.started_at = started_at
        self.state = CallState.DISPATCHED

    def succeed(self, response: ResponseEnvelope, completed_at: float) -> None:
        self._expect(CallState.DISPATCHED, CallState.SUCCEEDED)
        self.response = response
        self.completed_at = completed_at
        self.state = CallState.SUCCEEDED

    def fail(self, error: TransportFailure, completed_at: float) -> None:
        self._expect(CallState.DISPATCHED, CallState.FAILED)
        self.error = error
        self.completed_at = completed_at
        self.state = CallState.FAILED

    def _expect(self, current: CallState, target: CallState) -> None:
        if self.state is not current:
            raise CallStateError(
                f"request {self.request.request_id}: cannot move from {self.state.value} to {target.value}"
            )

    def __repr__(self) -> str:
        return f"RPCCall(request_id={self.request.request_id!r}, state={self.state.value!r})"


class CallOrchestrator:
    def __init__(
        self,
        transport: Transport,
        service_url: str,
        stats: CallStats,
        debug: bool = False,
        clock: Callable[[], float] = now_millis,
    ):
        self._transport = transport
        self._service_url = service_url
        self._stats = stats
        self._debug = debug
        self._clock = clock

    @property
    def service_url(self) -> str:
        return self._service_url

    @property
    def stats(self) -> CallStats:
        return self._stats

    async def execute(self, request: RequestEnvelope) -> RPCCall:
        """Run one call to completion and return its terminal RPCCall."""
        rpc_call = RPCCall(request)
        body = serialize_request(request)

        rpc_call.mark_dispatched(self._clock())
        if self._debug:
            logger.info("RPC Endpoint: %s", self._service_url)
            logger.info(">> %s", body)

        event = await self._transport.send(HTTP_METHOD, self._service_url, body)

        if event.ok:
            try:
                response = parse_response(event.response_text)
            except ProtocolError as e:
                self._fail(rpc_call, event, ResponseDecodeFailure(event.source, e))
            else:
                rpc_call.succeed(response, event.completed_at)
                self._stats.record_success(request_call_key(request), rpc_call.elapsed_millis)
                if self._debug:
                    logger.info("<< %s", response.to_json())
        else:
            message = f"HTTP {event.status}" if event.status is not None else str(event.source)
            self._fail(rpc_call, event, TransportFailure(event.source, message))

        return rpc_call

    async def dispatch(self, request: RequestEnvelope, on_success: SuccessHandler, on_error: ErrorHandler) -> None:
        """Callback form: exactly one of the handlers is invoked, once.

        ``on_error`` receives the transport's failure source, never a
        partially decoded response.
        """
        rpc_call = await self.execute(request)
        if rpc_call.state is CallState.SUCCEEDED:
            result = on_success(rpc_call.response)
        else:
            result = on_error(rpc_call.error.source)
        if inspect.isawaitable(result):
            await result

    async def call(self, request: RequestEnvelope) -> ResponseEnvelope:
        """Awaitable form: returns the response or raises TransportFailure."""
        rpc_call = await self.execute(request)
        if rpc_call.state is CallState.FAILED:
            raise rpc_call.error
        return rpc_call.response

    def _fail(self, rpc_call: RPCCall, event: TransportEvent, error: TransportFailure) -> None:
        rpc_call.fail(error, event.completed_at)
        self._stats.record_error(request_call_key(rpc_call.request), rpc_call.elapsed_millis)
        if self._debug:
            logger.warning("Call %s failed, body is: %s", rpc_call.request.request_id, event.response_text)
            logger.warning("HTTP Status: %s", event.status)
            logger.warning("Event: %s", json.dumps({"ok": event.ok, "completed_at": event.completed_at, "error": str(error)}))
