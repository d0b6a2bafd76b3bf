"""
Usage normalization module.

Provider SDKs report token usage with different field names; these helpers
map them onto one shape so that tracking and analytics never need to know
which provider answered.
"""

from typing import Any, Dict, Optional


def usage_to_dict(usage: Any) -> Dict[str, Any]:
    """
    Convert a usage object (SDK model, plain object or dict) to a dict.

    Returns an empty dict when nothing usable is present.
    """
    if usage is None:
        return {}
    if isinstance(usage, dict):
        return usage
    if hasattr(usage, "model_dump"):
        try:
            dumped = usage.model_dump()
            if isinstance(dumped, dict):
                return dumped
        except Exception:
            pass
    result = {}
    for field in (
        "prompt_tokens", "completion_tokens", "total_tokens",
        "input_tokens", "output_tokens",
    ):
        value = getattr(usage, field, None)
        if isinstance(value, (int, float)):
            result[field] = value
    return result


def normalize_usage(
    usage_data: Optional[Dict[str, Any]],
    provider: str,
) -> Dict[str, int]:
    """
    Normalize usage data into the standard shape.

    {
        "prompt_tokens": int,
        "completion_tokens": int,
        "total_tokens": int
    }

    Args:
        usage_data: Raw usage data from the provider (optional)
        provider: "openai" or "anthropic"; anything else is matched by
            trying the common field names

    Returns:
        Dict with normalized usage data
    """
    normalized = {
        "prompt_tokens": 0,
        "completion_tokens": 0,
        "total_tokens": 0,
    }
    if not usage_data:
        return normalized

    if provider == "openai":
        normalized["prompt_tokens"] = usage_data.get("prompt_tokens") or 0
        normalized["completion_tokens"] = usage_data.get("completion_tokens") or 0
        normalized["total_tokens"] = usage_data.get("total_tokens") or 0

    elif provider == "anthropic":
        # Anthropic uses input_tokens/output_tokens and reports no total
        normalized["prompt_tokens"] = usage_data.get("input_tokens") or 0
        normalized["completion_tokens"] = usage_data.get("output_tokens") or 0
        normalized["total_tokens"] = usage_data.get("total_tokens") or 0

    else:
        for prompt_field in ["prompt_tokens", "input_tokens"]:
            if usage_data.get(prompt_field):
                normalized["prompt_tokens"] = usage_data[prompt_field]
                break
        for completion_field in ["completion_tokens", "output_tokens"]:
            if usage_data.get(completion_field):
                normalized["completion_tokens"] = usage_data[completion_field]
                break
        normalized["total_tokens"] = usage_data.get("total_tokens") or 0

    try:
        normalized = {key: int(value) for key, value in normalized.items()}
    except (TypeError, ValueError):
        return {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}

    if normalized["total_tokens"] == 0:
        normalized["total_tokens"] = normalized["prompt_tokens"] + normalized["completion_tokens"]

    return normalized
