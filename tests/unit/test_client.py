"""Unit tests for CostLensClient and the wrapped provider clients."""

import pytest
from unittest.mock import AsyncMock, Mock

from costlens_sdk import CostLensClient
from costlens_sdk.config.settings import CostLensConfig
from costlens_sdk.models.generation import CallOptions
from costlens_sdk.orchestration.errors import CostLimitExceeded
from helpers.mock_exceptions import MockBadRequestError
from helpers.responses import anthropic_response, openai_response

pytestmark = pytest.mark.unit


BASE_URL = "https://api.costlens.test"


@pytest.fixture
def client(instant_config):
    return CostLensClient(instant_config)


@pytest.fixture
def cloud_client(cloud_config, http_client):
    return CostLensClient(cloud_config, http_client=http_client)


class TestConstruction:

    def test_instant_mode_by_default(self):
        assert CostLensClient().instant_mode

    def test_overrides_build_config(self):
        client = CostLensClient(api_key="cl-123", cache_max_entries=10)
        assert not client.instant_mode
        assert client.config.cache_max_entries == 10

    def test_overrides_apply_on_top_of_config(self, cloud_config):
        client = CostLensClient(cloud_config, enable_cache=False)
        assert client.config.enable_cache is False
        assert client.config.api_key == "cl-test-key"

    def test_constructor_ignores_environment(self, monkeypatch):
        monkeypatch.setenv("COSTLENS_API_KEY", "cl-from-env")
        assert CostLensClient().instant_mode

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COSTLENS_API_KEY", "cl-from-env")
        monkeypatch.setenv("COSTLENS_BASE_URL", BASE_URL)
        client = CostLensClient.from_env(log_level="silent")
        assert client.config.api_key == "cl-from-env"
        assert client.config.base_url == BASE_URL

    def test_instances_do_not_share_cache(self, instant_config):
        first = CostLensClient(instant_config)
        second = CostLensClient(instant_config)
        assert first.orchestrator.cache is not second.orchestrator.cache
        assert first.orchestrator.breaker is not second.orchestrator.breaker


class TestWrappedOpenAI:

    @pytest.mark.asyncio
    async def test_create_goes_through_sdk_client(self, client, mock_openai_client):
        openai = client.wrap_openai(mock_openai_client)

        result = await openai.chat.completions.create(
            model="gpt-4o", messages=[{"role": "user", "content": "Hi"}], max_tokens=20
        )

        assert result["choices"][0]["message"]["content"] == "Test response"
        kwargs = mock_openai_client.chat.completions.create.await_args.kwargs
        assert kwargs["max_tokens"] == 20
        assert kwargs["messages"] == [{"role": "user", "content": "Hi"}]

    @pytest.mark.asyncio
    async def test_simple_gpt4_prompt_is_routed(self, instant_config, mock_openai_client):
        client = CostLensClient(instant_config, quality_validator=lambda text, prompt: 0.95)
        openai = client.wrap_openai(mock_openai_client)

        await openai.chat.completions.create(model="gpt-4", messages=[{"role": "user", "content": "Hi"}])

        assert mock_openai_client.chat.completions.create.await_args.kwargs["model"] == "gpt-3.5-turbo"

    @pytest.mark.asyncio
    async def test_options_as_dict(self, client, mock_openai_client):
        openai = client.wrap_openai(mock_openai_client)

        with pytest.raises(CostLimitExceeded):
            await openai.chat.completions.create(
                options={"max_cost": 0.0},
                model="gpt-4o",
                messages=[{"role": "user", "content": "Hi"}],
            )

        mock_openai_client.chat.completions.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_options_as_model(self, client, mock_openai_client):
        openai = client.wrap_openai(mock_openai_client)
        options = CallOptions(cache_ttl=30)

        for _ in range(2):
            await openai.chat.completions.create(
                options=options, model="gpt-4o", messages=[{"role": "user", "content": "Hi"}]
            )

        # routed answer rejected by the quality gate, then re-issued; the repeat is a cache hit
        models = [c.kwargs["model"] for c in mock_openai_client.chat.completions.create.await_args_list]
        assert models == ["gpt-3.5-turbo", "gpt-4o"]

    @pytest.mark.asyncio
    async def test_stream(self, client, mock_openai_client):
        openai = client.wrap_openai(mock_openai_client)

        stream = await openai.chat.completions.stream(
            model="gpt-4o", messages=[{"role": "user", "content": "Hi"}]
        )
        texts = [chunk.choices[0].delta.content async for chunk in stream]

        assert texts == ["Test", " response", " streaming", None]
        assert mock_openai_client.chat.completions.create.await_args.kwargs["stream"] is True

    @pytest.mark.asyncio
    async def test_client_error_propagates_unchanged(self, client):
        sdk = Mock()
        error = MockBadRequestError()
        sdk.chat.completions.create = AsyncMock(side_effect=error)
        openai = client.wrap_openai(sdk)

        with pytest.raises(MockBadRequestError) as exc_info:
            await openai.chat.completions.create(model="gpt-4o", messages=[{"role": "user", "content": "Hi"}])

        assert exc_info.value is error
        assert sdk.chat.completions.create.await_count == 1


class TestWrappedAnthropic:

    @pytest.mark.asyncio
    async def test_create(self, client, mock_anthropic_client):
        anthropic = client.wrap_anthropic(mock_anthropic_client)

        result = await anthropic.messages.create(
            model="claude-3-haiku", max_tokens=100, messages=[{"role": "user", "content": "Hi"}]
        )

        assert result["content"][0]["text"] == "Test response"
        assert mock_anthropic_client.messages.create.await_args.kwargs["max_tokens"] == 100

    @pytest.mark.asyncio
    async def test_opus_simple_prompt_routed_to_haiku(self, instant_config, mock_anthropic_client):
        client = CostLensClient(instant_config, quality_validator=lambda text, prompt: 1.0)
        anthropic = client.wrap_anthropic(mock_anthropic_client)

        await anthropic.messages.create(model="claude-3-opus", messages=[{"role": "user", "content": "Hi"}])

        assert mock_anthropic_client.messages.create.await_args.kwargs["model"] == "claude-3-haiku"


class TestHelpers:

    @pytest.mark.asyncio
    async def test_calculate_savings(self, client):
        savings = await client.calculate_savings("gpt-4", [{"role": "user", "content": "Hi"}])
        assert savings.recommended_model == "gpt-3.5-turbo"
        assert savings.savings == pytest.approx(0.00027 - 0.0000055)
        assert savings.savings_percentage == pytest.approx(97.96, abs=0.01)

    @pytest.mark.asyncio
    async def test_calculate_savings_unrouted(self, instant_config):
        client = CostLensClient(instant_config, smart_routing=False)
        savings = await client.calculate_savings("gpt-4", [{"role": "user", "content": "Hi"}])
        assert savings.recommended_model == "gpt-4"
        assert savings.savings == 0
        assert savings.savings_percentage == 0

    def test_estimate_cost(self, client):
        assert client.estimate_cost("gpt-4", [{"role": "user", "content": "Hi"}]) == pytest.approx(0.00027)

    def test_validate_model_consistency(self):
        assert CostLensClient.validate_model_consistency("gpt-4", "gpt-4")
        assert CostLensClient.validate_model_consistency("gpt-4", "gpt-3.5-turbo")
        assert not CostLensClient.validate_model_consistency("gpt-3.5-turbo", "gpt-4")

    def test_validate_pricing(self, client):
        advisory = client.validate_pricing()
        assert advisory["last_updated"] == "January 2025"
        assert advisory["recommendations"]

    @pytest.mark.asyncio
    async def test_analytics_and_clear_cache(self, client, mock_openai_client):
        openai = client.wrap_openai(mock_openai_client)
        params = dict(model="gpt-4o", messages=[{"role": "user", "content": "Hi"}])

        await openai.chat.completions.create(**params)
        await openai.chat.completions.create(**params)
        assert client.get_cost_analytics()["cache_hit_rate"] == pytest.approx(0.5)

        client.clear_cache()
        await openai.chat.completions.create(**params)
        assert mock_openai_client.chat.completions.create.await_count == 4


class TestManualTracking:

    @pytest.mark.asyncio
    async def test_track_openai(self, cloud_client, backend):
        params = {"model": "gpt-4o", "messages": [{"role": "user", "content": "Hi"}]}

        ok = await cloud_client.track_openai(params, openai_response("done"), latency=120, prompt_id="p-9")

        assert ok is True
        payload = backend.payloads("/integrations/run")[0]
        assert payload["model"] == "gpt-4o"
        assert payload["output"] == "done"
        assert payload["latency"] == 120
        assert payload["tokensUsed"] == 15
        assert payload["promptId"] == "p-9"

    @pytest.mark.asyncio
    async def test_track_anthropic(self, cloud_client, backend):
        params = {"model": "claude-3-haiku", "messages": [{"role": "user", "content": "Hi"}]}

        await cloud_client.track_anthropic(params, anthropic_response("ok", 3, 4), latency=80)

        payload = backend.payloads("/integrations/run")[0]
        assert payload["provider"] == "anthropic"
        assert payload["tokensUsed"] == 7

    @pytest.mark.asyncio
    async def test_track_error(self, cloud_client, backend):
        await cloud_client.track_error("openai", "gpt-4", "[]", RuntimeError("boom"), 15)

        payload = backend.payloads("/integrations/run")[0]
        assert payload["success"] is False
        assert payload["error"] == "boom"

    @pytest.mark.asyncio
    async def test_tracking_is_noop_in_instant_mode(self, backend, http_client):
        client = CostLensClient(CostLensConfig(log_level="silent"), http_client=http_client)
        ok = await client.track_error("openai", "gpt-4", "[]", RuntimeError("boom"), 15)
        assert ok is False
        assert backend.requests == []


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_async_context_manager_closes_owned_client(self, cloud_config):
        async with CostLensClient(cloud_config) as client:
            http = client.orchestrator.cloud._client()
        assert http.is_closed

    @pytest.mark.asyncio
    async def test_injected_http_client_left_open(self, cloud_config, http_client):
        async with CostLensClient(cloud_config, http_client=http_client):
            pass
        assert not http_client.is_closed
