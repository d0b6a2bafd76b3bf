from .models import DEFAULT_PRICING, FALLBACK_CHAINS, MODEL_HIERARCHY, MODEL_PRICING, ModelPricing
from .settings import CostLensConfig

__all__ = [
    "CostLensConfig",
    "ModelPricing",
    "DEFAULT_PRICING",
    "MODEL_PRICING",
    "FALLBACK_CHAINS",
    "MODEL_HIERARCHY",
]
