"""Normalization of messages, usage and provider responses."""

from .messages import (
    content_text,
    joined_text,
    message_role,
    messages_json,
    messages_to_dicts,
)
from .responses import detect_shape, extract_completion, extract_stream_delta
from .usage import normalize_usage, usage_to_dict

__all__ = [
    "content_text",
    "joined_text",
    "message_role",
    "messages_json",
    "messages_to_dicts",
    "detect_shape",
    "extract_completion",
    "extract_stream_delta",
    "normalize_usage",
    "usage_to_dict",
]
