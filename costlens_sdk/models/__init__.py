from .conversation_types import ConversationMessage, MessageLike, TurnRole
from .generation import (
    CallOptions,
    CompletionResult,
    ErrorContext,
    ProviderType,
    QualityAnalysis,
    QualityMetrics,
    ResponseShape,
    RoutingDecision,
    SavingsEstimate,
    TrackRunData,
)

__all__ = [
    "ConversationMessage",
    "MessageLike",
    "TurnRole",
    "CallOptions",
    "CompletionResult",
    "ErrorContext",
    "ProviderType",
    "QualityAnalysis",
    "QualityMetrics",
    "ResponseShape",
    "RoutingDecision",
    "SavingsEstimate",
    "TrackRunData",
]
