"""Unit tests for the in-process response cache."""

import pytest

from costlens_sdk.core.caching.cache import ResponseCache, make_cache_key
from costlens_sdk.models.conversation_types import ConversationMessage, TurnRole


pytestmark = pytest.mark.unit


def params(content="Hello", **extra):
    return {"model": "gpt-4", "messages": [{"role": "user", "content": content}], **extra}


class TestCacheKey:

    def test_identical_requests_share_key(self):
        assert make_cache_key("openai", params()) == make_cache_key("openai", params())

    def test_provider_is_part_of_key(self):
        assert make_cache_key("openai", params()) != make_cache_key("anthropic", params())
        assert make_cache_key("openai", params()).startswith("openai:")

    def test_content_is_trimmed(self):
        assert make_cache_key("openai", params("  Hello \n")) == make_cache_key("openai", params("Hello"))

    def test_default_temperature(self):
        assert make_cache_key("openai", params()) == make_cache_key("openai", params(temperature=0.7))
        assert make_cache_key("openai", params(temperature=0.0)) != make_cache_key("openai", params())

    def test_max_tokens_changes_key(self):
        assert make_cache_key("openai", params(max_tokens=10)) != make_cache_key("openai", params(max_tokens=20))

    def test_unrelated_params_ignored(self):
        assert make_cache_key("openai", params(user="alice")) == make_cache_key("openai", params())

    def test_field_order_does_not_matter(self):
        a = {"model": "gpt-4", "max_tokens": 5, "messages": [{"role": "user", "content": "x"}]}
        b = {"messages": [{"content": "x", "role": "user"}], "max_tokens": 5, "model": "gpt-4"}
        assert make_cache_key("openai", a) == make_cache_key("openai", b)

    def test_message_models_and_dicts_match(self):
        model_params = {
            "model": "gpt-4",
            "messages": [ConversationMessage(role=TurnRole.USER, content="Hello")],
        }
        assert make_cache_key("openai", model_params) == make_cache_key("openai", params())


class TestResponseCache:

    def test_miss_then_hit(self, clock):
        cache = ResponseCache(clock=clock)
        assert cache.get("k") is None
        cache.set("k", {"v": 1})
        assert cache.get("k") == {"v": 1}

    def test_entry_expires_after_ttl(self, clock):
        cache = ResponseCache(default_ttl=60, clock=clock)
        cache.set("k", "value")
        clock.advance(60)
        assert cache.get("k") == "value"
        clock.advance(1)
        assert cache.get("k") is None
        assert "k" not in cache

    def test_per_entry_ttl(self, clock):
        cache = ResponseCache(default_ttl=3600, clock=clock)
        cache.set("short", 1, ttl=5)
        cache.set("long", 2)
        clock.advance(10)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_eviction_drops_least_recently_accessed(self, clock):
        cache = ResponseCache(max_entries=5, clock=clock)
        for i in range(5):
            cache.set(f"k{i}", i)
            clock.advance(1)
        # touch k0 so that k1 becomes the oldest
        cache.get("k0")
        clock.advance(1)

        cache.set("k5", 5)

        # floor(5 * 0.2) == 1 entry evicted
        assert len(cache) == 5
        assert "k1" not in cache
        assert "k0" in cache
        assert "k5" in cache

    def test_eviction_batch_is_twenty_percent(self, clock):
        cache = ResponseCache(max_entries=10, clock=clock)
        for i in range(10):
            cache.set(f"k{i}", i)
            clock.advance(1)
        cache.set("new", 0)
        assert len(cache) == 9
        assert "k0" not in cache and "k1" not in cache

    def test_small_cache_still_evicts(self, clock):
        cache = ResponseCache(max_entries=2, clock=clock)
        cache.set("a", 1)
        clock.advance(1)
        cache.set("b", 2)
        clock.advance(1)
        cache.set("c", 3)
        assert len(cache) == 2
        assert "a" not in cache

    def test_clear(self):
        cache = ResponseCache()
        cache.set("a", 1)
        cache.clear()
        assert len(cache) == 0
