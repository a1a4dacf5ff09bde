"""
AsyncDioxide / Dioxide: main client facades.
"""

import asyncio
from typing import Any, Optional

from dioxide.codec import RequestIdCounter, build_request
from dioxide.config import DioxideConfig, load_config
from dioxide.errors import DioxideError
from dioxide.models.envelope import RequestEnvelope, ResponseEnvelope
from dioxide.orchestrator import CallOrchestrator, ErrorHandler, RPCCall, SuccessHandler
from dioxide.stats import CallStats
from dioxide.transport.base import Transport
from dioxide.transport.http import HttpTransport


class AsyncDioxide:
    """Async RPC client (primary).

    Owns one request id counter and one CallStats for its whole lifetime.
    """

    def __init__(
        self,
        service_url: Optional[str] = None,
        debug: Optional[bool] = None,
        transport: Optional[Transport] = None,
        config: Optional[DioxideConfig] = None,
    ):
        config = config or load_config()
        url = service_url or config.service_url
        if not url:
            raise DioxideError("config_error", "service_url required. Pass it or run `dioxide config set-url`.")

        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpTransport()
        self.counter = RequestIdCounter()
        self.stats = CallStats()
        self.orchestrator = CallOrchestrator(
            self.transport,
            url,
            self.stats,
            debug=config.debug if debug is None else debug,
        )

    @property
    def service_url(self) -> str:
        return self.orchestrator.service_url

    def request(
        self,
        uri: str,
        method: str,
        *,
        payload: Any = None,
        session_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> RequestEnvelope:
        return build_request(
            {"uri": uri, "method": method, "payload": payload, "session_id": session_id, "device_id": device_id},
            counter=self.counter,
        )

    async def call(self, request: RequestEnvelope) -> ResponseEnvelope:
        return await self.orchestrator.call(request)

    async def dispatch(self, request: RequestEnvelope, on_success: SuccessHandler, on_error: ErrorHandler) -> None:
        await self.orchestrator.dispatch(request, on_success, on_error)

    async def execute(self, request: RequestEnvelope) -> RPCCall:
        return await self.orchestrator.execute(request)

    async def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpTransport):
            await self.transport.close()

    async def __aenter__(self) -> "AsyncDioxide":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()


class Dioxide:
    """Sync wrapper around AsyncDioxide. Runs the event loop internally."""

    def __init__(self, **kwargs: Any):
        self._async = AsyncDioxide(**kwargs)
        self._loop = asyncio.new_event_loop()

    def _run(self, coro: Any) -> Any:
        return self._loop.run_until_complete(coro)

    @property
    def stats(self) -> CallStats:
        return self._async.stats

    @property
    def service_url(self) -> str:
        return self._async.service_url

    def request(self, uri: str, method: str, **kwargs: Any) -> RequestEnvelope:
        return self._async.request(uri, method, **kwargs)

    def call(self, request: RequestEnvelope) -> ResponseEnvelope:
        return self._run(self._async.call(request))

    def dispatch(self, request: RequestEnvelope, on_success: SuccessHandler, on_error: ErrorHandler) -> None:
        self._run(self._async.dispatch(request, on_success, on_error))

    def execute(self, request: RequestEnvelope) -> RPCCall:
        return self._run(self._async.execute(request))

    def close(self) -> None:
        self._run(self._async.close())
        self._loop.close()
