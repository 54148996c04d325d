"""
Deterministic input hash for session-scoped caching.

Same role, description, context, model and prompt version -> same hash,
regardless of surrounding whitespace.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


def _canonical_context(context: Any) -> str:
    if context is None or context == "":
        return ""
    if isinstance(context, str):
        return context.strip()
    return json.dumps(context, separators=(",", ":"), ensure_ascii=False)


def make_input_hash(
    role: str,
    change_description: str,
    context: Any,
    model: str,
    prompt_version: str,
) -> str:
    """Return the SHA-256 hex digest of the canonical request payload."""
    canonical = json.dumps(
        {
            "role": role.strip(),
            "changeDescription": change_description.strip(),
            "context": _canonical_context(context),
            "model": model,
            "promptVersion": prompt_version,
        },
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
