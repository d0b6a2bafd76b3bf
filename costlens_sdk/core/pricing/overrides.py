"""Pricing override functionality for the model price table."""

import os
import json
import logging
from typing import Any, Dict, Optional

from ...config.constants import PRICING_OVERRIDES_ENV_VAR
from ...config.models import ModelPricing

logger = logging.getLogger(__name__)


def validate_pricing_override(override: Any) -> bool:
    """
    Validate a single pricing override.

    Both ``input`` and ``output`` must be present and non-negative numbers.
    """
    if not isinstance(override, dict):
        return False
    for field in ("input", "output"):
        value = override.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            logger.warning(f"Invalid pricing value for {field}: {value}")
            return False
    return True


def load_pricing_overrides(raw: Optional[str] = None) -> Dict[str, ModelPricing]:
    """
    Load pricing overrides from a JSON string.

    Args:
        raw: JSON object mapping model keys to ``{"input", "output"}`` prices
            per 1M tokens. Defaults to the COSTLENS_PRICING_OVERRIDES_JSON
            environment variable.

    Returns:
        Dict mapping model keys to prices; empty when nothing valid is set
    """
    if raw is None:
        raw = os.getenv(PRICING_OVERRIDES_ENV_VAR)
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {PRICING_OVERRIDES_ENV_VAR}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"{PRICING_OVERRIDES_ENV_VAR} must be a JSON object")
        return {}

    overrides = {}
    for model_key, pricing in data.items():
        if not validate_pricing_override(pricing):
            logger.warning(f"Ignoring pricing override for {model_key}")
            continue
        overrides[model_key] = ModelPricing(input=pricing["input"], output=pricing["output"])
    if overrides:
        logger.info(f"Loaded pricing overrides for {len(overrides)} models")
    return overrides


def apply_pricing_overrides(
    table: Dict[str, ModelPricing],
    overrides: Dict[str, ModelPricing],
) -> Dict[str, ModelPricing]:
    """
    Return a new price table with overrides applied.

    Known keys keep their position; new keys are placed ahead of the
    built-in entries so that they win the first-substring match.
    """
    if not overrides:
        return dict(table)
    added = {key: value for key, value in overrides.items() if key not in table}
    merged = dict(added)
    for key, value in table.items():
        merged[key] = overrides.get(key, value)
    return merged
