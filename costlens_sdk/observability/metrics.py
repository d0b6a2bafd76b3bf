from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass
class CallMetrics:
    """Outcome of one orchestrated call."""
    provider: str
    requested_model: str
    model: str
    latency_ms: int
    input_tokens: int = 0
    output_tokens: int = 0
    savings: float = 0.0
    cache_hit: bool = False
    error_class: Optional[str] = None


@dataclass
class CallStats:
    """In-process aggregates behind ``get_cost_analytics``."""
    total_requests: int = 0
    total_errors: int = 0
    cache_hits: int = 0
    total_savings: float = 0.0
    total_latency_ms: int = 0
    routed_calls: int = 0

    def record(self, metrics: CallMetrics) -> None:
        self.total_requests += 1
        if metrics.cache_hit:
            self.cache_hits += 1
            return
        if metrics.error_class:
            self.total_errors += 1
        else:
            self.total_savings += metrics.savings
            if metrics.model != metrics.requested_model:
                self.routed_calls += 1
        self.total_latency_ms += metrics.latency_ms

    def summary(self) -> Dict[str, float]:
        provider_calls = self.total_requests - self.cache_hits
        return {
            "cache_hit_rate": self.cache_hits / self.total_requests if self.total_requests else 0,
            "total_savings": self.total_savings,
            "average_latency": self.total_latency_ms / provider_calls if provider_calls else 0,
            "error_rate": self.total_errors / self.total_requests if self.total_requests else 0,
            "routed_calls": self.routed_calls,
        }
