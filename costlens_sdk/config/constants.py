"""
Pricing metadata and fixed tuning values.

Prices themselves live in costlens_sdk/config/models.py.
"""

# Pricing metadata (for auditability)
LAST_VERIFIED_PRICING = "January 2025"

# Official pricing documentation sources
PRICING_SOURCE_URLS = (
    "https://openai.com/pricing",
    "https://www.anthropic.com/pricing",
    "https://ai.google.dev/pricing",
    "https://api-docs.deepseek.com/quick_start/pricing",
)

# Environment variables
API_KEY_ENV_VAR = "COSTLENS_API_KEY"
BASE_URL_ENV_VAR = "COSTLENS_BASE_URL"
PRICING_OVERRIDES_ENV_VAR = "COSTLENS_PRICING_OVERRIDES_JSON"

DEFAULT_BASE_URL = "https://api.costlens.dev"

# Token estimation heuristics
CHARS_PER_TOKEN = 4
MESSAGE_OVERHEAD_TOKENS = 4
OUTPUT_TO_INPUT_RATIO = 0.3

# Cache
DEFAULT_CACHE_TTL_SECONDS = 3600.0
DEFAULT_CACHE_MAX_ENTRIES = 1000
CACHE_EVICTION_FRACTION = 0.2
DEFAULT_TEMPERATURE = 0.7

# Quality gate: routed responses scoring below this are redone on the requested model
QUALITY_GATE_THRESHOLD = 0.7

# Cross-provider routing via the quality heuristic
ROUTING_QUALITY_THRESHOLD = 0.8
ROUTING_MIN_CONFIDENCE = 0.8

# Side channel
TRACKING_TIMEOUT_SECONDS = 5.0
CIRCUIT_BREAKER_THRESHOLD = 5
CIRCUIT_BREAKER_TIMEOUT_SECONDS = 60.0
