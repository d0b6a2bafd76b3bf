"""
Heuristic cost estimation.

Costs are estimated before a call is made, from character counts and the
static price table, never from provider-reported usage. Usage reported by
the provider is only reconciled afterwards, in run tracking.
"""

import math
from typing import Any, Dict, Optional, Sequence

from ...config.constants import (
    CHARS_PER_TOKEN,
    LAST_VERIFIED_PRICING,
    MESSAGE_OVERHEAD_TOKENS,
    OUTPUT_TO_INPUT_RATIO,
    PRICING_SOURCE_URLS,
)
from ...config.models import DEFAULT_PRICING, MODEL_PRICING, ModelPricing
from ..normalization.messages import joined_text
from .overrides import apply_pricing_overrides, load_pricing_overrides


def estimate_tokens(messages: Optional[Sequence[Any]], kind: str = "input") -> int:
    """
    Estimate prompt or response tokens for a conversation.

    Input: ~4 characters per token plus 4 tokens of role overhead per message.
    Output: 30% of the input estimate. Both are at least 1.
    """
    messages = messages or []
    content = joined_text(messages)

    tokens = math.ceil(len(content) / CHARS_PER_TOKEN)
    tokens += len(messages) * MESSAGE_OVERHEAD_TOKENS

    if kind == "output":
        tokens = math.ceil(tokens * OUTPUT_TO_INPUT_RATIO)

    return max(tokens, 1)


def get_model_pricing(model: str, table: Optional[Dict[str, ModelPricing]] = None) -> ModelPricing:
    """Price of the first table key contained in ``model``; defaults to $1/$1."""
    table = MODEL_PRICING if table is None else table
    for key, pricing in table.items():
        if key in model:
            return pricing
    return DEFAULT_PRICING


def estimate_cost(
    model: str,
    messages: Optional[Sequence[Any]],
    table: Optional[Dict[str, ModelPricing]] = None,
) -> float:
    """Estimated USD cost of sending ``messages`` to ``model``."""
    input_tokens = estimate_tokens(messages, "input")
    output_tokens = estimate_tokens(messages, "output")

    pricing = get_model_pricing(model, table)
    input_cost = (input_tokens / 1000000) * pricing.input
    output_cost = (output_tokens / 1000000) * pricing.output

    return input_cost + output_cost


class CostEstimator:
    """Cost estimator bound to one price table (built-ins plus env overrides)."""

    def __init__(self, pricing: Optional[Dict[str, ModelPricing]] = None):
        if pricing is None:
            pricing = apply_pricing_overrides(MODEL_PRICING, load_pricing_overrides())
        self.pricing = pricing

    def get_model_pricing(self, model: str) -> ModelPricing:
        return get_model_pricing(model, self.pricing)

    def estimate_cost(self, model: str, messages: Optional[Sequence[Any]]) -> float:
        return estimate_cost(model, messages, self.pricing)

    @staticmethod
    def validate_pricing() -> Dict[str, Any]:
        """Advisory on how current the built-in price table is."""
        return {
            "status": "unknown",
            "message": (
                "Pricing accuracy cannot be guaranteed due to rapid changes in AI model "
                "pricing. Please verify with official provider documentation."
            ),
            "last_updated": LAST_VERIFIED_PRICING,
            "recommendations": [f"Check {url}" for url in PRICING_SOURCE_URLS]
            + ["Override prices with COSTLENS_PRICING_OVERRIDES_JSON"],
        }
