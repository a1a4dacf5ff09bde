from dioxide.models.envelope import RequestEnvelope, ResponseEnvelope
from dioxide.models.stats import CallStatsEntry

__all__ = ["RequestEnvelope", "ResponseEnvelope", "CallStatsEntry"]
