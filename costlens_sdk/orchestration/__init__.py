"""Call orchestration: the per-call pipeline, its hooks and its errors."""

from .errors import CostLimitExceeded, OrchestratorError
from .middleware import Middleware, MiddlewareChain
from .orchestrator import CallOrchestrator

__all__ = [
    "CallOrchestrator",
    "CostLimitExceeded",
    "Middleware",
    "MiddlewareChain",
    "OrchestratorError",
]
