"""
Running per-endpoint call statistics.

Entries are keyed by ``uri#method``, created on first observation and kept
for the lifetime of the aggregator.
"""

import threading
from types import MappingProxyType
from typing import Mapping

from dioxide.models.envelope import RequestEnvelope
from dioxide.models.stats import CallStatsEntry


def call_key(uri: str, method: str) -> str:
    return f"{uri}#{method}"


def request_call_key(request: RequestEnvelope) -> str:
    return call_key(request.uri, request.method)


class CallStats:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, CallStatsEntry] = {}

    def _entry(self, key: str) -> CallStatsEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CallStatsEntry()
        return entry

    def record_success(self, key: str, elapsed_millis: float) -> None:
        with self._lock:
            entry = self._entry(key)
            entry.invocation_count += 1
            entry.success_count += 1
            entry.total_elapsed_millis += elapsed_millis

    def record_error(self, key: str, elapsed_millis: float) -> None:
        with self._lock:
            entry = self._entry(key)
            entry.invocation_count += 1
            entry.error_count += 1
            entry.total_elapsed_millis += elapsed_millis

    def snapshot(self) -> Mapping[str, CallStatsEntry]:
        """Read-only copy of every entry as of now."""
        with self._lock:
            copied = {key: entry.model_copy() for key, entry in self._entries.items()}
        return MappingProxyType(copied)

    def describe(self) -> str:
        lines = ["RPC Stats:"]
        for key, entry in sorted(self.snapshot().items()):
            lines.append(f"  {key}:")
            lines.append(f"    invocation count: {entry.invocation_count}")
            lines.append(f"    success count: {entry.success_count}")
            lines.append(f"    error count: {entry.error_count}")
            lines.append(f"    average millis: {entry.average_millis}")
        return "\n".join(lines) + "\n"

    def __len__(self) -> int:
        return len(self._entries)
