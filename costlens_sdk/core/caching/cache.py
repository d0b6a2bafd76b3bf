"""
In-process response cache with per-entry TTL and LRU eviction.

Entries expire lazily when read. When the cache is full, the 20% of
entries least recently accessed are purged before a new one is inserted.
"""

from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from ...config.constants import (
    CACHE_EVICTION_FRACTION,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_TEMPERATURE,
)
from ..normalization.messages import message_content, message_role


def make_cache_key(provider: str, params: Mapping[str, Any]) -> str:
    """
    Fingerprint of a request.

    Covers the model, the messages (order kept, string content trimmed),
    temperature (0.7 when unset) and max_tokens. JSON keys are sorted so
    that the key does not depend on field order.

    An explicit ``temperature=0`` stays 0.0 and so never shares a key with
    an unset temperature.
    """
    messages = params.get("messages")
    normalized_messages = None
    if messages is not None:
        normalized_messages = []
        for message in messages:
            content = message_content(message)
            normalized_messages.append({
                "role": message_role(message),
                "content": content.strip() if isinstance(content, str) else content,
            })

    temperature = params.get("temperature")
    normalized = {
        "model": params.get("model"),
        "messages": normalized_messages,
        "temperature": DEFAULT_TEMPERATURE if temperature is None else temperature,
        "max_tokens": params.get("max_tokens"),
    }
    return f"{provider}:{json.dumps(normalized, sort_keys=True, separators=(',', ':'), default=str)}"


@dataclass
class CacheEntry:
    result: Any
    stored_at: float
    ttl: float
    last_accessed: float


class ResponseCache:
    """
    Size-bounded TTL cache.

    Not thread-safe; mutations never await, so concurrent asyncio tasks on
    one event loop can share an instance.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        default_ttl: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Cached value for ``key``, or None on a miss (expired entries are dropped)."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        now = self._clock()
        if now - entry.stored_at > entry.ttl:
            del self._entries[key]
            return None

        entry.last_accessed = now
        return entry.result

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store ``value``; ``ttl`` in seconds, defaulting to ``default_ttl``."""
        if len(self._entries) >= self.max_entries:
            self._evict()

        now = self._clock()
        self._entries[key] = CacheEntry(
            result=value,
            stored_at=now,
            ttl=self.default_ttl if ttl is None else ttl,
            last_accessed=now,
        )

    def _evict(self) -> None:
        to_remove = max(1, math.floor(self.max_entries * CACHE_EVICTION_FRACTION))
        oldest = sorted(self._entries.items(), key=lambda item: item[1].last_accessed)
        for key, _ in oldest[:to_remove]:
            del self._entries[key]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
