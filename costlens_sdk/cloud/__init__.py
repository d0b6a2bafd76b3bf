"""Side channel to the CostLens backend: tracking, remote cache, prompt optimization."""

from .client import CloudClient
from .optimizer import PromptOptimizer
from .remote_cache import RemoteCache
from .tracking import RunTracker

__all__ = [
    "CloudClient",
    "PromptOptimizer",
    "RemoteCache",
    "RunTracker",
]
