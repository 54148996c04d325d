"""
Environment variable loading for ChangeSim.

- OPENAI_API_KEY: key for the OpenAI-compatible chat completions API
- OPENAI_BASE_URL: API base URL (default: https://api.openai.com/v1)
- CHANGESIM_MODEL / CHANGESIM_TEMPERATURE / CHANGESIM_MAX_OUTPUT_TOKENS
- CHANGESIM_DB_URL / DATABASE_URL / CHANGESIM_DB_PATH: run store location
- API_TOKEN: bearer token for external API callers (unset = open)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is changesim/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_OUTPUT_TOKENS = 1500
DEFAULT_LLM_TIMEOUT_SEC = 60.0
DEFAULT_DB_PATH = "changesim.db"

_TRUTHY = ("1", "true", "yes", "on")


def load_changesim_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def _get_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def _get_float(name: str, default: float) -> float:
    raw = _get_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_int(name: str, default: int) -> int:
    raw = _get_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_openai_api_key() -> str:
    """Return OPENAI_API_KEY, or empty string when not configured."""
    load_changesim_env()
    return _get_str("OPENAI_API_KEY")


def get_openai_base_url() -> str:
    load_changesim_env()
    return _get_str("OPENAI_BASE_URL", DEFAULT_OPENAI_BASE_URL).rstrip("/")


def get_model() -> str:
    load_changesim_env()
    return _get_str("CHANGESIM_MODEL", DEFAULT_MODEL)


def get_temperature() -> float:
    load_changesim_env()
    return _get_float("CHANGESIM_TEMPERATURE", DEFAULT_TEMPERATURE)


def get_max_output_tokens() -> int:
    load_changesim_env()
    return _get_int("CHANGESIM_MAX_OUTPUT_TOKENS", DEFAULT_MAX_OUTPUT_TOKENS)


def get_llm_timeout_sec() -> float:
    load_changesim_env()
    return _get_float("CHANGESIM_LLM_TIMEOUT_SEC", DEFAULT_LLM_TIMEOUT_SEC)


def get_database_url() -> str:
    """
    Resolve the run store URL.
    Order: CHANGESIM_DB_URL > DATABASE_URL > sqlite file at CHANGESIM_DB_PATH (default changesim.db).
    """
    load_changesim_env()
    url = _get_str("CHANGESIM_DB_URL") or _get_str("DATABASE_URL")
    if url:
        return url
    path = _get_str("CHANGESIM_DB_PATH", DEFAULT_DB_PATH)
    return f"sqlite:///{path}"


def get_api_token() -> str:
    """Return API_TOKEN; empty means every caller is allowed."""
    load_changesim_env()
    return _get_str("API_TOKEN")


def show_debug_logs() -> bool:
    """Return True when SHOW_DEBUG_LOGS is set to a truthy value."""
    load_changesim_env()
    return _get_str("SHOW_DEBUG_LOGS").lower() in _TRUTHY
