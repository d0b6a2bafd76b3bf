"""
Public API Layer

All user-facing classes are exposed through this layer.
"""

from .client import CostLensClient, WrappedAnthropic, WrappedOpenAI

__all__ = ["CostLensClient", "WrappedAnthropic", "WrappedOpenAI"]
