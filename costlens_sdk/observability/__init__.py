"""Observability: structured logging and in-process call statistics."""

from .logging import CostLensLogger
from .metrics import CallMetrics, CallStats

__all__ = [
    "CostLensLogger",
    "CallMetrics",
    "CallStats",
]
