"""Unit tests for model selection."""

import pytest
from unittest.mock import AsyncMock, Mock

from costlens_sdk.core.routing.router import (
    ModelRouter,
    detect_task_type,
    estimate_complexity,
    provider_substitution,
    validate_model_consistency,
)
from costlens_sdk.observability.logging import CostLensLogger


pytestmark = pytest.mark.unit


def user(content):
    return [{"role": "user", "content": content}]


# ~140 characters without any task keyword
MEDIUM_PROMPT = "Tell me about the emperors of Rome. " * 4
LONG_CODING_PROMPT = "Please review this code carefully. " * 20


class TestComplexityBuckets:

    def test_short_single_message_is_simple(self):
        assert estimate_complexity(user("Hi")) == "simple"

    def test_system_prompt_is_never_simple(self):
        messages = [{"role": "system", "content": "Be brief"}, {"role": "user", "content": "Hi"}]
        assert estimate_complexity(messages) == "medium"

    def test_medium_length(self):
        assert estimate_complexity(user(MEDIUM_PROMPT)) == "medium"

    def test_many_messages_are_complex(self):
        assert estimate_complexity([{"role": "user", "content": "ok"}] * 6) == "complex"

    def test_long_prompt_is_complex(self):
        assert estimate_complexity(user("x" * 600)) == "complex"

    def test_task_detection(self):
        assert detect_task_type(user("debug this algorithm")) == ["coding"]
        assert detect_task_type(user("translate and calculate")) == ["translation", "math"]
        assert detect_task_type(user(MEDIUM_PROMPT)) == []


class TestProviderSubstitution:

    @pytest.mark.parametrize("requested,complexity,tasks,expected", [
        ("gpt-4", "simple", [], "gpt-3.5-turbo"),
        ("gpt-4o", "simple", [], "gpt-3.5-turbo"),
        ("gpt-4", "medium", [], "gpt-4o"),
        ("gpt-4-turbo", "medium", [], None),
        ("gpt-4-turbo", "complex", ["coding"], "claude-3.5-sonnet"),
        ("gpt-3.5-turbo", "simple", [], None),
        ("claude-3-opus", "simple", [], "claude-3-haiku"),
        ("claude-3-opus", "medium", [], "claude-3.5-sonnet"),
        ("claude-3-sonnet", "simple", [], "claude-3-haiku"),
        ("claude-3-sonnet", "medium", [], None),
        ("gemini-1.5-pro", "simple", [], None),
    ])
    def test_rules(self, requested, complexity, tasks, expected):
        assert provider_substitution(requested, complexity, tasks) == expected


class TestModelRouter:

    @pytest.fixture
    def router(self):
        return ModelRouter(log=CostLensLogger("router", "silent"))

    @pytest.mark.asyncio
    async def test_simple_prompt_downgrades_gpt4(self, router):
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_medium_prompt_moves_gpt4_to_gpt4o(self, router):
        assert await router.select_optimal_model("gpt-4", user(MEDIUM_PROMPT)) == "gpt-4o"

    @pytest.mark.asyncio
    async def test_coding_prompt_moves_to_sonnet(self, router):
        assert await router.select_optimal_model("gpt-4", user(LONG_CODING_PROMPT)) == "claude-3.5-sonnet"

    @pytest.mark.asyncio
    async def test_vision_models_are_never_routed(self, router):
        assert await router.select_optimal_model("gpt-4-vision-preview", user("Hi")) == "gpt-4-vision-preview"

    @pytest.mark.asyncio
    async def test_cross_provider_routing(self, router):
        # no substitution rule for gemini; the quality detector routes the simple prompt
        assert await router.select_optimal_model("gemini-1.5-pro", user("Hi")) == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_critical_prompt_keeps_model(self, router):
        assert await router.select_optimal_model("gemini-1.5-pro", user("a medical question")) == "gemini-1.5-pro"

    @pytest.mark.asyncio
    async def test_disabled_routing_returns_requested(self):
        router = ModelRouter(smart_routing=False)
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "gpt-4"

    @pytest.mark.asyncio
    async def test_sync_policy_wins(self):
        policy = Mock(return_value="my-model")
        router = ModelRouter(routing_policy=policy)
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "my-model"
        policy.assert_called_once_with("gpt-4", user("Hi"))

    @pytest.mark.asyncio
    async def test_async_policy_wins(self):
        router = ModelRouter(routing_policy=AsyncMock(return_value="my-model"))
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "my-model"

    @pytest.mark.asyncio
    async def test_policy_returning_none_falls_through(self):
        router = ModelRouter(routing_policy=Mock(return_value=None))
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_policy_error_is_not_fatal(self):
        router = ModelRouter(
            routing_policy=Mock(side_effect=RuntimeError("boom")),
            log=CostLensLogger("router", "silent"),
        )
        assert await router.select_optimal_model("gpt-4", user("Hi")) == "gpt-3.5-turbo"


class TestModelConsistency:

    def test_same_model(self):
        assert validate_model_consistency("gpt-4", "gpt-4")

    def test_allowed_downgrade(self):
        assert validate_model_consistency("gpt-4", "gpt-3.5-turbo")
        assert validate_model_consistency("claude-3-opus", "claude-3-haiku")

    def test_disallowed_switch(self):
        assert not validate_model_consistency("gpt-3.5-turbo", "gpt-4")
        assert not validate_model_consistency("gpt-4", "claude-3-haiku")
