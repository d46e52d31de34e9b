"""Usage source adapters."""

from usagegate.adapters.usage_source.http import HttpUsageSource
from usagegate.adapters.usage_source.in_memory import InMemoryUsageSource

__all__ = ["HttpUsageSource", "InMemoryUsageSource"]
