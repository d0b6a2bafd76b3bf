"""
CostLens SDK - cost-aware wrapper for OpenAI and Anthropic clients.

Features:
- Heuristic cost estimation from a static price table
- Smart routing to cheaper models with a post-hoc quality gate
- In-process response cache with TTL and LRU eviction
- Retries with exponential backoff and model fallback chains
- Best-effort run tracking guarded by a circuit breaker
"""

__version__ = "0.1.0"

from .api.client import CostLensClient, WrappedAnthropic, WrappedOpenAI
from .config.settings import CostLensConfig
from .core.pricing.estimator import CostEstimator, estimate_cost, estimate_tokens
from .core.quality.detector import QualityDetector
from .core.routing.router import ModelRouter
from .models.conversation_types import ConversationMessage, TurnRole
from .models.generation import (
    CallOptions,
    ErrorContext,
    QualityAnalysis,
    RoutingDecision,
    SavingsEstimate,
    TrackRunData,
)
from .orchestration.errors import CostLimitExceeded, OrchestratorError
from .orchestration.middleware import Middleware

__all__ = [
    # Main client
    "CostLensClient",
    "CostLensConfig",
    "WrappedOpenAI",
    "WrappedAnthropic",

    # Estimation and routing
    "CostEstimator",
    "estimate_cost",
    "estimate_tokens",
    "ModelRouter",
    "QualityDetector",

    # Hooks and errors
    "Middleware",
    "OrchestratorError",
    "CostLimitExceeded",

    # Models
    "CallOptions",
    "ConversationMessage",
    "TurnRole",
    "ErrorContext",
    "QualityAnalysis",
    "RoutingDecision",
    "SavingsEstimate",
    "TrackRunData",
]
