from .estimator import CostEstimator, estimate_cost, estimate_tokens, get_model_pricing
from .overrides import apply_pricing_overrides, load_pricing_overrides

__all__ = [
    "CostEstimator",
    "estimate_cost",
    "estimate_tokens",
    "get_model_pricing",
    "apply_pricing_overrides",
    "load_pricing_overrides",
]
