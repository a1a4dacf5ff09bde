"""
Transport contract consumed by the orchestrator.

A transport performs one POST and reports exactly one completion event:
``ok=True`` for a transport-level success (the RPC ``status_code`` inside
the body is a separate, application-level status), ``ok=False`` for a
network or HTTP failure.
"""

import time
from typing import Any, Optional, Protocol, runtime_checkable


def now_millis() -> float:
    return time.time() * 1000.0


class TransportEvent:
    __slots__ = ("ok", "source", "response_text", "status", "completed_at")

    def __init__(self, ok: bool, source: Any, completed_at: float,
                 response_text: Optional[str] = None, status: Optional[int] = None):
        self.ok = ok
        self.source = source
        self.response_text = response_text
        self.status = status
        self.completed_at = completed_at

    def __repr__(self) -> str:
        return f"TransportEvent(ok={self.ok!r}, status={self.status!r}, completed_at={self.completed_at!r})"


@runtime_checkable
class Transport(Protocol):
    async def send(self, method: str, url: str, body: str) -> TransportEvent:
        ...
