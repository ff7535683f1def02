"""
Configuration for SEO Outline Writer
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except (ValueError, TypeError):
        return default


# API Keys - Must be set via environment variables
SERPAPI_KEY = os.getenv("SERPAPI_KEY", "")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

# LLM Provider preference: "openai" or "claude" (falls back to whichever key is set)
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-20250514")
LLM_MAX_TOKENS = _int_env("LLM_MAX_TOKENS", 8192)
LLM_TIMEOUT = _float_env("LLM_TIMEOUT", 120.0)

# SERP Configuration
SERPAPI_URL = os.getenv("SERPAPI_URL", "https://serpapi.com/search.json")
SERP_LANGUAGE = os.getenv("SERP_LANGUAGE", "ja")
SERP_RESULTS_COUNT = _int_env("SERP_RESULTS_COUNT", 10)
SERP_TIMEOUT = _float_env("SERP_TIMEOUT", 30.0)
MAX_SEARCH_RESULTS = 10  # Results kept after normalization

# Language the outline and article are written in
CONTENT_LANGUAGE = os.getenv("CONTENT_LANGUAGE", "Japanese")

# Editor behaviour
SEARCH_DEBOUNCE_SECONDS = _float_env("SEARCH_DEBOUNCE_SECONDS", 0.6)
OUTLINE_SUCCESS_CLEAR_SECONDS = _float_env("OUTLINE_SUCCESS_CLEAR_SECONDS", 0.9)

# Word count targets
DEFAULT_TARGET_WORDS = _int_env("DEFAULT_TARGET_WORDS", 4500)
DEFAULT_REQUEST_TARGET_WORDS = 3000  # Used by the API when a request omits targetWords
MIN_TARGET_WORDS = 200

# Article defaults
DEFAULT_TONE = os.getenv("DEFAULT_TONE", "polite and easy to follow, written for practitioners")
DEFAULT_AUDIENCE = os.getenv("DEFAULT_AUDIENCE", "search users (beginner to intermediate)")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS
cors_origins_str = os.getenv("ALLOWED_ORIGINS", "*")
if cors_origins_str.strip() == "*":
    ALLOWED_ORIGINS = ["*"]
else:
    ALLOWED_ORIGINS = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
    if not ALLOWED_ORIGINS:
        ALLOWED_ORIGINS = ["*"]
