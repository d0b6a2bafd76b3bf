"""
Static model tables.

Both tables are matched by substring: the first key (in declaration order)
contained in the model identifier wins, so more specific keys such as
``gpt-4o`` must precede ``gpt-4``.
"""

from typing import Dict, List

from pydantic import BaseModel, Field


class ModelPricing(BaseModel):
    """USD per 1M tokens."""
    input: float = Field(..., ge=0.0)
    output: float = Field(..., ge=0.0)


DEFAULT_PRICING = ModelPricing(input=1.0, output=1.0)

MODEL_PRICING: Dict[str, ModelPricing] = {
    # OpenAI
    "gpt-4o": ModelPricing(input=2.5, output=10.0),
    "gpt-4": ModelPricing(input=30.0, output=60.0),
    "gpt-4-turbo": ModelPricing(input=10.0, output=30.0),
    "gpt-3.5-turbo": ModelPricing(input=0.5, output=1.5),

    # Anthropic
    "claude-3.5-sonnet": ModelPricing(input=3.0, output=3.0),
    "claude-3-opus": ModelPricing(input=15.0, output=75.0),
    "claude-3-sonnet": ModelPricing(input=3.0, output=15.0),
    "claude-3-haiku": ModelPricing(input=0.25, output=1.25),

    # Google Gemini
    "gemini-1.5-flash": ModelPricing(input=1.0, output=1.0),
    "gemini-1.5-pro": ModelPricing(input=1.25, output=5.0),

    # DeepSeek
    "deepseek-v3": ModelPricing(input=0.28, output=0.42),
    "deepseek-r1": ModelPricing(input=0.28, output=0.42),
    "deepseek-chat": ModelPricing(input=0.28, output=0.42),
    "deepseek-reasoner": ModelPricing(input=0.28, output=0.42),
}

FALLBACK_CHAINS: Dict[str, List[str]] = {
    "gpt-4o": ["gpt-4-turbo", "claude-3.5-sonnet", "gpt-3.5-turbo"],
    "claude-3.5-sonnet": ["gpt-4o", "claude-3-sonnet", "gpt-3.5-turbo"],
    "gemini-1.5-flash": ["gemini-1.5-pro", "gpt-3.5-turbo", "claude-3-haiku"],

    "gpt-4": ["gpt-4o", "gpt-4-turbo", "gpt-3.5-turbo"],
    "gpt-4-turbo": ["gpt-4o", "gpt-4", "gpt-3.5-turbo"],
    "gpt-3.5-turbo": ["gpt-4o", "gemini-1.5-flash", "claude-3-haiku"],
    "claude-3-opus": ["claude-3.5-sonnet", "claude-3-sonnet", "gpt-4o"],
    "claude-3-sonnet": ["claude-3.5-sonnet", "claude-3-haiku", "gpt-3.5-turbo"],
    "claude-3-haiku": ["gpt-3.5-turbo", "gemini-1.5-flash", "claude-3-sonnet"],
    "gemini-1.5-pro": ["gemini-1.5-flash", "gpt-4o", "gpt-3.5-turbo"],
    "deepseek-v3": ["deepseek-chat", "deepseek-reasoner", "gemini-1.5-flash", "gpt-3.5-turbo"],
    "deepseek-r1": ["deepseek-chat", "deepseek-reasoner", "gemini-1.5-flash", "gpt-3.5-turbo"],
    "deepseek-chat": ["deepseek-reasoner", "deepseek-v3", "gemini-1.5-flash", "gpt-3.5-turbo"],
    "deepseek-reasoner": ["deepseek-chat", "deepseek-v3", "gemini-1.5-flash", "gpt-3.5-turbo"],
}

# Allowed downgrades per requested model (exact match)
MODEL_HIERARCHY: Dict[str, List[str]] = {
    "gpt-4": ["gpt-4o", "gpt-4-turbo", "gpt-3.5-turbo"],
    "gpt-4o": ["gpt-4-turbo", "gpt-3.5-turbo"],
    "gpt-4-turbo": ["gpt-3.5-turbo"],
    "claude-3-opus": ["claude-3.5-sonnet", "claude-3-sonnet", "claude-3-haiku"],
    "claude-3.5-sonnet": ["claude-3-sonnet", "claude-3-haiku"],
    "claude-3-sonnet": ["claude-3-haiku"],
}
