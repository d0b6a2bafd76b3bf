from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any, List
from enum import Enum


class ProviderType(str, Enum):
    """Providers whose calls can be wrapped."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class ResponseShape(str, Enum):
    """Known response layouts returned by provider SDKs."""
    OPENAI = "openai"        # choices[].message.content + prompt/completion tokens
    ANTHROPIC = "anthropic"  # content[].text + input/output tokens


class CompletionResult(BaseModel):
    """Canonical view of a provider response."""
    shape: ResponseShape
    text: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class RoutingDecision(BaseModel):
    """Outcome of the prompt-based routing heuristic."""
    should_route: bool
    target_model: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    reasoning: str


class QualityMetrics(BaseModel):
    completeness: float
    coherence: float
    relevance: float
    accuracy: float


class QualityAnalysis(BaseModel):
    quality_score: float
    metrics: QualityMetrics


class SavingsEstimate(BaseModel):
    """Estimated cost difference between the requested and recommended model."""
    current_cost: float
    optimized_cost: float
    savings: float
    savings_percentage: float
    recommended_model: str


class CallOptions(BaseModel):
    """
    Per-call options for a wrapped provider call.

    ``cache_ttl`` is in seconds. ``fallback_models`` replaces the default
    fallback chain for the requested model. ``max_cost`` overrides the
    configured cost limit for this call only.
    """
    prompt_id: Optional[str] = None
    cache_ttl: Optional[float] = Field(None, gt=0)
    fallback_models: Optional[List[str]] = None
    max_cost: Optional[float] = Field(None, ge=0)
    user_id: Optional[str] = None
    request_id: Optional[str] = None
    correlation_id: Optional[str] = None


class TrackRunData(BaseModel):
    """Run record posted to the tracking endpoint."""
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    provider: str
    model: str
    input: str
    output: str = ""
    tokens_used: int = Field(0, alias="tokensUsed")
    latency: int = 0
    success: bool = True
    prompt_id: Optional[str] = Field(None, alias="promptId")
    requested_model: Optional[str] = Field(None, alias="requestedModel")
    input_tokens: Optional[int] = Field(None, alias="inputTokens")
    output_tokens: Optional[int] = Field(None, alias="outputTokens")
    savings: Optional[float] = None
    error: Optional[str] = None
    request_id: Optional[str] = Field(None, alias="requestId")
    correlation_id: Optional[str] = Field(None, alias="correlationId")

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation (camelCase, unset fields dropped)."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ErrorContext(BaseModel):
    """Context handed to ``on_error`` middleware hooks."""
    provider: str
    model: str
    input: str
    latency_ms: int
    attempt: int
    max_retries: int
    user_id: Optional[str] = None
    prompt_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
