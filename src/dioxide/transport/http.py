"""
httpx-backed transport.
"""

import logging
from typing import Callable, Optional

import httpx

from dioxide.transport.base import TransportEvent, now_millis

logger = logging.getLogger("dioxide.transport.http")

USER_AGENT = "dioxide/0.1.0"


class HttpTransport:
    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        clock: Callable[[], float] = now_millis,
    ):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
        self._clock = clock

    async def send(self, method: str, url: str, body: str) -> TransportEvent:
        try:
            resp = await self._client.request(
                method, url, content=body.encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.debug("%s %s failed: %s", method, url, e)
            return TransportEvent(ok=False, source=e, completed_at=self._clock())

        completed_at = self._clock()
        return TransportEvent(
            ok=resp.is_success,
            source=resp,
            response_text=resp.text,
            status=resp.status_code,
            completed_at=completed_at,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
