"""
Provider Adapters Layer

Thin bindings between the orchestrator and the provider SDK clients it
wraps. Each adapter performs one call; everything else happens in the
orchestrator.
"""

from .base import ProviderAdapter
from .openai.adapter import OpenAIProvider
from .anthropic.adapter import AnthropicProvider

__all__ = [
    "ProviderAdapter",
    "OpenAIProvider",
    "AnthropicProvider",
]
