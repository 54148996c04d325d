"""
Application-level exceptions.

Domain errors carry an HTTP status and a user-facing message so the API layer
can map them without string matching. The risk engine itself never raises for
well-formed input; these cover the LLM call, configuration and the run store.
"""

from __future__ import annotations


class ChangeSimError(Exception):
    """Base class for ChangeSim errors."""

    status_code: int = 500
    public_message: str = "Failed to analyze impact. Please try again."


class ConfigurationError(ChangeSimError):
    """Required setting is missing or invalid (e.g. OPENAI_API_KEY)."""


class AIServiceError(ChangeSimError):
    """Language-model call failed."""

    status_code = 502
    public_message = "AI service temporarily unavailable. Please try again."


class AIRateLimitError(AIServiceError):
    status_code = 429
    public_message = "AI service rate limit exceeded. Please try again in a few moments."


class AIResponseFormatError(AIServiceError):
    """Model returned content that is not JSON or does not match the result schema."""

    status_code = 502
    public_message = "AI response format validation failed. Please try again."


class AIServiceUnavailableError(AIServiceError):
    status_code = 502
    public_message = "AI service temporarily unavailable. Please try again."


class DuplicateRunError(ChangeSimError):
    """A run with the same (session_id, input_hash) already exists."""

    def __init__(self, session_id: str | None, input_hash: str | None) -> None:
        super().__init__(f"Run already exists for session={session_id} input_hash={input_hash}")
        self.session_id = session_id
        self.input_hash = input_hash
