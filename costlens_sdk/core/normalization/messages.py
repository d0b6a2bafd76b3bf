"""Helpers for reading messages regardless of how the caller built them."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence


def _read(message: Any, key: str) -> Any:
    if isinstance(message, dict):
        return message.get(key)
    return getattr(message, key, None)


def message_role(message: Any) -> Optional[str]:
    role = _read(message, "role")
    # TurnRole is a str enum
    return getattr(role, "value", role)


def message_content(message: Any) -> Any:
    return _read(message, "content")


def content_text(message: Any) -> str:
    """Message content as text; structured content is rendered as JSON."""
    content = message_content(message)
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content, default=str)


def message_to_dict(message: Any) -> Dict[str, Any]:
    """Plain ``{"role", "content"}`` dict for a message (extra dict keys kept)."""
    result = {"role": message_role(message), "content": message_content(message)}
    if isinstance(message, dict):
        for key, value in message.items():
            result.setdefault(key, value)
    return result


def messages_to_dicts(messages: Optional[Sequence[Any]]) -> List[Dict[str, Any]]:
    return [message_to_dict(m) for m in messages or []]


def joined_text(messages: Optional[Sequence[Any]]) -> str:
    """All message contents joined by a single space."""
    return " ".join(content_text(m) for m in messages or [])


def messages_json(messages: Optional[Sequence[Any]]) -> str:
    """JSON rendering of the conversation, as recorded in run tracking."""
    return json.dumps(messages_to_dicts(messages), separators=(",", ":"), default=str)
