"""Shared pytest fixtures for CostLens SDK tests."""

import pytest
from unittest.mock import AsyncMock

from costlens_sdk.config.settings import CostLensConfig
from costlens_sdk.models.conversation_types import ConversationMessage, TurnRole
from helpers.responses import FakeBackend, FakeClock, openai_response
from helpers.streaming_mocks import create_openai_stream


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: tests across the whole client")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials and overrides out of the tests."""
    for name in ("COSTLENS_API_KEY", "COSTLENS_BASE_URL", "COSTLENS_PRICING_OVERRIDES_JSON"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def http_client(backend):
    return backend.client()


@pytest.fixture
def instant_config():
    """No API key, no backoff delay."""
    return CostLensConfig(backoff_base_delay=0.0, log_level="silent")


@pytest.fixture
def cloud_config():
    """API key set; remote cache and routing check off so only tracking hits the backend."""
    return CostLensConfig(
        api_key="cl-test-key",
        base_url="https://api.costlens.test",
        backoff_base_delay=0.0,
        enable_remote_cache=False,
        check_remote_routing=False,
        log_level="silent",
    )


@pytest.fixture
def simple_messages():
    return [{"role": "user", "content": "Hi"}]


@pytest.fixture
def sample_conversation_messages():
    """Sample conversation messages."""
    return [
        ConversationMessage(role=TurnRole.SYSTEM, content="You are a helpful assistant."),
        ConversationMessage(role=TurnRole.USER, content="What is the weather like?"),
        ConversationMessage(role=TurnRole.ASSISTANT, content="I don't have access to real-time weather data."),
    ]


@pytest.fixture
def mock_openai_client():
    """Mock AsyncOpenAI client."""
    client = AsyncMock()
    completion = openai_response("Test response")

    async def create_response(**kwargs):
        if kwargs.get("stream"):
            return create_openai_stream(["Test", " response", " streaming"])
        return completion

    client.chat.completions.create = AsyncMock(side_effect=create_response)
    return client


@pytest.fixture
def mock_anthropic_client():
    """Mock AsyncAnthropic client."""
    client = AsyncMock()
    client.messages.create = AsyncMock(return_value={
        "content": [{"type": "text", "text": "Test response"}],
        "usage": {"input_tokens": 10, "output_tokens": 5},
    })
    return client
