"""Tests for client configuration, pricing overrides and structured logging."""

import logging

import pytest
from pydantic import ValidationError

from costlens_sdk.config.constants import DEFAULT_BASE_URL
from costlens_sdk.config.models import MODEL_PRICING, ModelPricing
from costlens_sdk.config.settings import CostLensConfig
from costlens_sdk.core.pricing.overrides import (
    apply_pricing_overrides,
    load_pricing_overrides,
    validate_pricing_override,
)
from costlens_sdk.observability.logging import CostLensLogger


pytestmark = pytest.mark.unit


class TestCostLensConfig:

    def test_defaults(self):
        config = CostLensConfig()
        assert config.instant_mode
        assert config.base_url == DEFAULT_BASE_URL
        assert config.enable_cache is True
        assert config.cache_max_entries == 1000
        assert config.default_cache_ttl == 3600
        assert config.max_retries == 3
        assert config.smart_routing is True
        assert config.auto_optimize is False
        assert config.cost_limit is None
        assert config.log_level == "warn"

    def test_blank_api_key_means_instant_mode(self):
        assert CostLensConfig(api_key="   ").instant_mode
        assert not CostLensConfig(api_key=" cl-1 ").instant_mode
        assert CostLensConfig(api_key=" cl-1 ").api_key == "cl-1"

    def test_base_url_trailing_slash(self):
        assert CostLensConfig(base_url="https://example.test/").base_url == "https://example.test"

    def test_log_level_aliases(self):
        assert CostLensConfig(log_level="WARNING").log_level == "warn"
        with pytest.raises(ValidationError):
            CostLensConfig(log_level="verbose")

    @pytest.mark.parametrize("field,value", [
        ("max_retries", 0),
        ("cache_max_entries", 0),
        ("default_cache_ttl", 0),
        ("cost_limit", -1),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(ValidationError):
            CostLensConfig(**{field: value})

    def test_callables_accepted(self):
        config = CostLensConfig(routing_policy=lambda m, msgs: None, quality_validator=lambda t, p: 1.0)
        assert config.routing_policy("gpt-4", []) is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("COSTLENS_API_KEY", "cl-env")
        config = CostLensConfig.from_env(smart_routing=False)
        assert config.api_key == "cl-env"
        assert config.smart_routing is False

    def test_from_env_without_variables(self):
        assert CostLensConfig.from_env().instant_mode


class TestPricingOverrides:

    def test_validation(self):
        assert validate_pricing_override({"input": 1, "output": 2.5})
        assert not validate_pricing_override({"input": -1, "output": 2})
        assert not validate_pricing_override({"input": 1})
        assert not validate_pricing_override({"input": True, "output": 1})
        assert not validate_pricing_override([1, 2])

    def test_load_from_env(self, monkeypatch):
        monkeypatch.setenv("COSTLENS_PRICING_OVERRIDES_JSON", '{"gpt-4o": {"input": 1.0, "output": 2.0}}')
        assert load_pricing_overrides() == {"gpt-4o": ModelPricing(input=1.0, output=2.0)}

    def test_invalid_json_ignored(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert load_pricing_overrides("{not json") == {}
        assert "COSTLENS_PRICING_OVERRIDES_JSON" in caplog.text

    def test_invalid_entries_skipped(self):
        overrides = load_pricing_overrides('{"a": {"input": 1, "output": 1}, "b": {"input": "x"}}')
        assert list(overrides) == ["a"]

    def test_existing_keys_keep_position(self):
        merged = apply_pricing_overrides(MODEL_PRICING, {"gpt-4": ModelPricing(input=1, output=1)})
        assert list(merged) == list(MODEL_PRICING)
        assert merged["gpt-4"].input == 1
        assert MODEL_PRICING["gpt-4"].input == 30.0

    def test_new_keys_come_first(self):
        merged = apply_pricing_overrides(MODEL_PRICING, {"my-model": ModelPricing(input=1, output=1)})
        assert list(merged)[0] == "my-model"


class TestCostLensLogger:

    def test_structured_format(self, caplog):
        log = CostLensLogger("router", "info")
        with caplog.at_level(logging.INFO, logger="costlens_sdk.router"):
            log.info("Smart routing: gpt-4 -> gpt-4o", request_id="r1", skipped=None)
        assert caplog.records[0].getMessage() == "[component=router request_id=r1] Smart routing: gpt-4 -> gpt-4o"

    def test_level_filter(self, caplog):
        log = CostLensLogger("tracking", "error")
        with caplog.at_level(logging.DEBUG, logger="costlens_sdk.tracking"):
            log.info("hidden")
            log.warning("hidden too")
            log.error("shown", error=RuntimeError("boom"))
        assert [r.levelno for r in caplog.records] == [logging.ERROR]
        assert "error_type=RuntimeError error_msg=boom" in caplog.text

    def test_silent(self, caplog):
        log = CostLensLogger("cache", "silent")
        with caplog.at_level(logging.DEBUG, logger="costlens_sdk.cache"):
            log.debug("x")
            log.error("y")
        assert caplog.records == []

    def test_child_shares_level(self):
        child = CostLensLogger("orchestrator", "info").child("cloud")
        assert (child.component, child.level) == ("cloud", "info")
        assert child.logger.name == "costlens_sdk.cloud"
