"""
Normalize raw risk-scoring strings from the model into risk engine enums.

The model's schema uses "individual" where the engine uses "single". Any other
unrecognized value falls back to a documented safe default and logs a warning,
so a malformed category never reaches the classifier:

  scope -> single, severity -> moderate, human_impact -> none,
  time_sensitivity -> long_term
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, TypeVar

from changesim.logging import get_logger
from changesim.risk_engine.ranks import (
    HumanImpact,
    RiskAssessmentInput,
    Scope,
    Severity,
    TimeSensitivity,
)

logger = get_logger(__name__)

DEFAULT_SCOPE = Scope.SINGLE
DEFAULT_SEVERITY = Severity.MODERATE
DEFAULT_HUMAN_IMPACT = HumanImpact.NONE
DEFAULT_TIME_SENSITIVITY = TimeSensitivity.LONG_TERM

# Legacy / schema synonyms
SCOPE_SYNONYMS = {"individual": Scope.SINGLE}

_E = TypeVar("_E", bound=Enum)


def _clean(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower() if value is not None else ""


def _normalize(
    field_name: str,
    enum_cls: type[_E],
    value: Any,
    default: _E,
    synonyms: Mapping[str, _E] | None = None,
) -> _E:
    raw = _clean(value)
    if synonyms and raw in synonyms:
        return synonyms[raw]
    try:
        return enum_cls(raw)
    except ValueError:
        logger.warning(
            "risk_enum_fallback",
            field=field_name,
            value=str(value)[:64] if value is not None else None,
            default=default.value,
        )
        return default


def normalize_scope(value: Any) -> Scope:
    return _normalize("scope", Scope, value, DEFAULT_SCOPE, SCOPE_SYNONYMS)


def normalize_severity(value: Any) -> Severity:
    return _normalize("severity", Severity, value, DEFAULT_SEVERITY)


def normalize_human_impact(value: Any) -> HumanImpact:
    return _normalize("human_impact", HumanImpact, value, DEFAULT_HUMAN_IMPACT)


def normalize_time_sensitivity(value: Any) -> TimeSensitivity:
    return _normalize("time_sensitivity", TimeSensitivity, value, DEFAULT_TIME_SENSITIVITY)


def normalize_risk_scoring(risk_scoring: Mapping[str, Any]) -> RiskAssessmentInput:
    """
    Normalize a {scope, severity, human_impact, time_sensitivity} mapping.

    Missing keys are treated like unrecognized values (default + warning).
    """
    return RiskAssessmentInput(
        scope=normalize_scope(risk_scoring.get("scope")),
        severity=normalize_severity(risk_scoring.get("severity")),
        human_impact=normalize_human_impact(risk_scoring.get("human_impact")),
        time_sensitivity=normalize_time_sensitivity(risk_scoring.get("time_sensitivity")),
    )


def _is_member(enum_cls: type[Enum], value: Any) -> bool:
    return isinstance(value, str) and value in {m.value for m in enum_cls}


def is_valid_scope(value: Any) -> bool:
    return _is_member(Scope, value)


def is_valid_severity(value: Any) -> bool:
    return _is_member(Severity, value)


def is_valid_human_impact(value: Any) -> bool:
    return _is_member(HumanImpact, value)


def is_valid_time_sensitivity(value: Any) -> bool:
    return _is_member(TimeSensitivity, value)
