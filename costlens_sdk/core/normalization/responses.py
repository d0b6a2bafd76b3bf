"""
Response extraction for the supported provider response layouts.

Responses arrive either as SDK objects or as plain dicts (test doubles,
remote-cache payloads). ``extract_completion`` turns both layouts into a
``CompletionResult`` before the orchestrator looks at them.
"""

from __future__ import annotations

from typing import Any, Optional

from ...models.generation import CompletionResult, ResponseShape
from .usage import normalize_usage, usage_to_dict


def _field(obj: Any, name: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def detect_shape(response: Any, default: Optional[ResponseShape] = None) -> Optional[ResponseShape]:
    """Identify the response layout, or return ``default`` if neither matches."""
    if isinstance(_field(response, "choices"), (list, tuple)):
        return ResponseShape.OPENAI
    if isinstance(_field(response, "content"), (list, tuple)):
        return ResponseShape.ANTHROPIC
    return default


def extract_openai_text(response: Any) -> str:
    """Text of the first choice of a chat completion."""
    choices = _field(response, "choices") or []
    if not choices:
        return ""
    content = _field(_field(choices[0], "message"), "content")
    return content if isinstance(content, str) else ""


def extract_anthropic_text(response: Any) -> str:
    """Concatenated text blocks of a messages response."""
    text_content = ""
    for block in _field(response, "content") or []:
        if _field(block, "type") == "text":
            text_piece = _field(block, "text")
            if isinstance(text_piece, str):
                text_content += text_piece
    return text_content


def extract_completion(response: Any, provider: Optional[str] = None) -> CompletionResult:
    """
    Build the canonical view of a provider response.

    Args:
        response: OpenAI-shaped or Anthropic-shaped response
        provider: Name of the wrapped provider; decides the layout when the
            response itself is ambiguous (e.g. empty)

    Returns:
        CompletionResult with text and token counts (zeros when unreported)
    """
    fallback = ResponseShape.ANTHROPIC if provider == "anthropic" else ResponseShape.OPENAI
    shape = detect_shape(response, default=fallback)

    if shape == ResponseShape.ANTHROPIC:
        text = extract_anthropic_text(response)
    else:
        text = extract_openai_text(response)

    usage = normalize_usage(usage_to_dict(_field(response, "usage")), shape.value)
    return CompletionResult(
        shape=shape,
        text=text,
        input_tokens=usage["prompt_tokens"],
        output_tokens=usage["completion_tokens"],
        total_tokens=usage["total_tokens"],
    )


def extract_stream_delta(chunk: Any) -> str:
    """Text delta carried by one chat-completion stream chunk."""
    choices = _field(chunk, "choices") or []
    if not choices:
        return ""
    content = _field(_field(choices[0], "delta"), "content")
    return content if isinstance(content, str) else ""
