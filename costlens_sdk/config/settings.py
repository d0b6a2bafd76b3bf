"""Client configuration."""

import os
from typing import Any, Awaitable, Callable, List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    API_KEY_ENV_VAR,
    BASE_URL_ENV_VAR,
    CIRCUIT_BREAKER_THRESHOLD,
    CIRCUIT_BREAKER_TIMEOUT_SECONDS,
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    TRACKING_TIMEOUT_SECONDS,
)

LOG_LEVELS = ("silent", "error", "warn", "info")

RoutingPolicy = Callable[[str, List[Any]], Union[Optional[str], Awaitable[Optional[str]]]]
QualityValidator = Callable[[str, str], Union[float, Awaitable[float]]]


class CostLensConfig(BaseModel):
    """
    Configuration for a CostLens client.

    Validated once at construction. Without an ``api_key`` the client runs in
    instant mode: routing, cost estimation and the in-process cache work, but
    nothing is sent to the CostLens backend.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL

    # Cache
    enable_cache: bool = True
    enable_remote_cache: bool = True
    cache_max_entries: int = Field(default=DEFAULT_CACHE_MAX_ENTRIES, ge=1)
    default_cache_ttl: float = Field(default=DEFAULT_CACHE_TTL_SECONDS, gt=0)

    # Retries and fallback
    max_retries: int = Field(default=3, ge=1)
    backoff_base_delay: float = Field(default=1.0, ge=0)
    auto_fallback: bool = True

    # Routing and cost control
    smart_routing: bool = True
    check_remote_routing: bool = True
    auto_optimize: bool = False
    cost_limit: Optional[float] = Field(default=None, ge=0)
    routing_policy: Optional[RoutingPolicy] = None
    quality_validator: Optional[QualityValidator] = None

    # Hooks
    middleware: List[Any] = Field(default_factory=list)

    # Side channel
    tracking_timeout: float = Field(default=TRACKING_TIMEOUT_SECONDS, gt=0)
    circuit_breaker_threshold: int = Field(default=CIRCUIT_BREAKER_THRESHOLD, ge=1)
    circuit_breaker_timeout: float = Field(default=CIRCUIT_BREAKER_TIMEOUT_SECONDS, ge=0)

    log_level: str = "warn"

    @field_validator("api_key")
    def validate_api_key(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    @field_validator("base_url")
    def validate_base_url(cls, v):
        return v.rstrip("/")

    @field_validator("log_level")
    def validate_log_level(cls, v):
        v = v.lower()
        if v == "warning":
            v = "warn"
        if v not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @property
    def instant_mode(self) -> bool:
        """True when no account credential is configured."""
        return self.api_key is None

    @classmethod
    def from_env(cls, **overrides: Any) -> "CostLensConfig":
        """Build a config from COSTLENS_* environment variables (``.env`` is honoured)."""
        load_dotenv()
        values = {}
        api_key = os.getenv(API_KEY_ENV_VAR)
        if api_key:
            values["api_key"] = api_key
        base_url = os.getenv(BASE_URL_ENV_VAR)
        if base_url:
            values["base_url"] = base_url
        values.update(overrides)
        return cls(**values)
