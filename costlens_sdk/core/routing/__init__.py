"""Model routing: substitution policy for requested models."""

from .router import (
    ModelRouter,
    detect_task_type,
    estimate_complexity,
    provider_substitution,
    validate_model_consistency,
)

__all__ = [
    "ModelRouter",
    "detect_task_type",
    "estimate_complexity",
    "provider_substitution",
    "validate_model_consistency",
]
