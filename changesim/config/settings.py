"""
Application settings and constants.

Settings are read once from the environment (see env.py) into a frozen
dataclass. Constants below are fixed per release and are not environment-driven.
"""

from __future__ import annotations

import functools
import os
from dataclasses import dataclass

from changesim.config import env

# Prompt version for tracking prompt iterations; part of the cache key
PROMPT_VERSION = "v0.3"
# Process identifier stored on every run
PROCESS_NAME = "changesim_impact_analysis_v1"

CACHE_STATUS_HIT = "hit"
CACHE_STATUS_RACE = "race"
CACHE_STATUS_MISS = "miss"
CACHE_STATUS_NEW_SESSION = "session"

ANALYSIS_STATUS_COMPLETE = "complete"

AGENT_TYPE_SINGLE = "single-agent"

SESSION_COOKIE_NAME = "changesim_impact_analysis_session"
# Matches the run store session_id column width
SESSION_ID_MAX_LENGTH = 64


@dataclass(frozen=True)
class Settings:
    """Typed runtime settings for the LLM client, run store and API server."""

    openai_api_key: str
    openai_base_url: str
    model: str
    temperature: float
    max_output_tokens: int
    llm_timeout_sec: float
    api_token: str
    api_host: str
    api_port: int
    show_debug_logs: bool


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the current application settings (cached).

    Call get_settings.cache_clear() after changing environment variables in tests.
    """
    env.load_changesim_env()
    return Settings(
        openai_api_key=env.get_openai_api_key(),
        openai_base_url=env.get_openai_base_url(),
        model=env.get_model(),
        temperature=env.get_temperature(),
        max_output_tokens=env.get_max_output_tokens(),
        llm_timeout_sec=env.get_llm_timeout_sec(),
        api_token=env.get_api_token(),
        api_host=(os.getenv("API_HOST") or "0.0.0.0").strip(),
        api_port=int((os.getenv("API_PORT") or "8000").strip() or "8000"),
        show_debug_logs=env.show_debug_logs(),
    )
