"""
Decision trace bounds.

The trace is a short list of human-readable reasoning steps returned with
every analysis. It must hold 3-5 entries once finalized, including when a
system note (e.g. the organization guardrail explanation) is appended.
None of these functions mutate their input.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

MAX_DECISION_TRACE_LENGTH = 5
MIN_DECISION_TRACE_LENGTH = 3

ORG_CAP_GUARDRAIL_NOTE = "Risk level adjusted downward due to organizational scope guardrail"


@dataclass(frozen=True)
class TraceValidation:
    valid: bool
    reason: str | None = None


def bound_trace(trace: Sequence[str], max_length: int = MAX_DECISION_TRACE_LENGTH) -> list[str]:
    """Return the first max_length entries as a new list (earliest entries kept)."""
    return list(trace[:max_length])


def append_with_bound(
    trace: Sequence[str],
    note: str,
    max_length: int = MAX_DECISION_TRACE_LENGTH,
) -> list[str]:
    """
    Append a system note without exceeding max_length.

    Keeps the first max_length - 1 original entries, then the note, so the
    note is always the last element. With max_length=1 the result is [note].
    """
    kept = list(trace[: max(max_length - 1, 0)])
    return bound_trace([*kept, note], max_length)


def validate_trace(
    trace: Sequence[str],
    min_length: int = MIN_DECISION_TRACE_LENGTH,
    max_length: int = MAX_DECISION_TRACE_LENGTH,
) -> TraceValidation:
    """Check trace length against [min_length, max_length]; reports, never raises."""
    n = len(trace)
    if n < min_length:
        return TraceValidation(
            valid=False,
            reason=(
                f"Decision trace must have at least {min_length} items, got {n} "
                f"({min_length - n} too few)"
            ),
        )
    if n > max_length:
        return TraceValidation(
            valid=False,
            reason=(
                f"Decision trace must have at most {max_length} items, got {n} "
                f"({n - max_length} too many)"
            ),
        )
    return TraceValidation(valid=True)
