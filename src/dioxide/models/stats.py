"""
Per call-key statistics.
"""

from pydantic import BaseModel


class CallStatsEntry(BaseModel):
    invocation_count: int = 0
    success_count: int = 0
    error_count: int = 0
    total_elapsed_millis: float = 0

    @property
    def average_millis(self) -> float:
        if self.invocation_count == 0:
            return float("nan")
        return self.total_elapsed_millis / self.invocation_count
