"""
Language-model client for impact analysis.

Calls an OpenAI-compatible /chat/completions endpoint over httpx in JSON mode
and validates the reply against ImpactAnalysisResult. Failures are mapped to
the AI error taxonomy in core.exceptions; no retries here.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from changesim.analysis.prompts import IMPACT_ANALYSIS_SYSTEM_PROMPT, build_user_prompt
from changesim.analysis.schemas import ImpactAnalysisResult
from changesim.config import Settings
from changesim.core.exceptions import (
    AIRateLimitError,
    AIResponseFormatError,
    AIServiceUnavailableError,
    ConfigurationError,
)
from changesim.logging import get_logger

logger = get_logger(__name__)


@dataclass
class LLMResponse:
    """Validated model output plus usage for cost tracking."""

    result: ImpactAnalysisResult
    model: str
    input_tokens: int | None = None
    output_tokens: int | None = None


class LLMClient:
    """Thin synchronous client; one httpx.Client per instance."""

    def __init__(self, settings: Settings, *, http_client: httpx.Client | None = None) -> None:
        self._settings = settings
        self._http = http_client or httpx.Client(timeout=settings.llm_timeout_sec)

    @property
    def model(self) -> str:
        return self._settings.model

    def close(self) -> None:
        self._http.close()

    def analyze(self, role: str, change_description: str, context: Any = None) -> LLMResponse:
        """Run one impact analysis completion and return the validated result."""
        if not self._settings.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured")

        payload = {
            "model": self._settings.model,
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_output_tokens,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": IMPACT_ANALYSIS_SYSTEM_PROMPT},
                {"role": "user", "content": build_user_prompt(role, change_description, context)},
            ],
        }
        url = f"{self._settings.openai_base_url}/chat/completions"
        headers = {"Authorization": f"Bearer {self._settings.openai_api_key}"}

        try:
            resp = self._http.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("llm_request_failed", error=str(e), model=self._settings.model)
            raise AIServiceUnavailableError(str(e)) from e

        if resp.status_code == 429:
            logger.warning("llm_rate_limited", model=self._settings.model)
            raise AIRateLimitError(f"rate limit (429): {resp.text[:200]}")
        if resp.status_code >= 500:
            logger.error("llm_server_error", status_code=resp.status_code, model=self._settings.model)
            raise AIServiceUnavailableError(f"service unavailable ({resp.status_code})")
        if resp.status_code >= 400:
            logger.error("llm_client_error", status_code=resp.status_code, body=resp.text[:200])
            raise AIServiceUnavailableError(f"api service error ({resp.status_code})")

        try:
            body = resp.json()
        except ValueError as e:
            logger.error("llm_response_not_json", status_code=resp.status_code, body=resp.text[:200])
            raise AIResponseFormatError(f"parse error: {e}") from e
        try:
            content = body["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise AIResponseFormatError("response format: missing choices[0].message.content") from e

        result = parse_result(content)
        usage = body.get("usage") or {}
        logger.info(
            "llm_analysis_completed",
            model=body.get("model") or self._settings.model,
            input_tokens=usage.get("prompt_tokens"),
            output_tokens=usage.get("completion_tokens"),
        )
        return LLMResponse(
            result=result,
            model=self._settings.model,
            input_tokens=usage.get("prompt_tokens"),
            output_tokens=usage.get("completion_tokens"),
        )


def parse_result(content: str | dict[str, Any]) -> ImpactAnalysisResult:
    """Parse and validate model content; raises AIResponseFormatError."""
    if isinstance(content, str):
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise AIResponseFormatError(f"parse error: {e}") from e
    else:
        data = content
    try:
        return ImpactAnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.warning("llm_schema_validation_failed", errors=e.error_count())
        raise AIResponseFormatError(f"schema validation failed: {e.error_count()} errors") from e
