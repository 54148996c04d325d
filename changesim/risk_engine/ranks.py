"""
Ordinal risk dimensions and their rank tables.

Each dimension is a closed str Enum; each has a fixed 0-based rank table,
monotonic with real-world breadth / severity. Rules compare integer ranks,
never enum values. Tables are read-only mappings built once at import.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, TypeVar


class Scope(str, Enum):
    SINGLE = "single"
    TEAM = "team"
    ORGANIZATION = "organization"
    NATIONAL = "national"
    GLOBAL = "global"


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"
    CATASTROPHIC = "catastrophic"


class HumanImpact(str, Enum):
    NONE = "none"
    LIMITED = "limited"
    SIGNIFICANT = "significant"
    MASS_CASUALTY = "mass_casualty"


class TimeSensitivity(str, Enum):
    LONG_TERM = "long_term"
    SHORT_TERM = "short_term"
    IMMEDIATE = "immediate"
    CRITICAL = "critical"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


SCOPE_RANK: Mapping[Scope, int] = MappingProxyType({
    Scope.SINGLE: 0,
    Scope.TEAM: 1,
    Scope.ORGANIZATION: 2,
    Scope.NATIONAL: 3,
    Scope.GLOBAL: 4,
})

SEVERITY_RANK: Mapping[Severity, int] = MappingProxyType({
    Severity.MINOR: 0,
    Severity.MODERATE: 1,
    Severity.MAJOR: 2,
    Severity.CATASTROPHIC: 3,
})

HUMAN_IMPACT_RANK: Mapping[HumanImpact, int] = MappingProxyType({
    HumanImpact.NONE: 0,
    HumanImpact.LIMITED: 1,
    HumanImpact.SIGNIFICANT: 2,
    HumanImpact.MASS_CASUALTY: 3,
})

TIME_SENSITIVITY_RANK: Mapping[TimeSensitivity, int] = MappingProxyType({
    TimeSensitivity.LONG_TERM: 0,
    TimeSensitivity.SHORT_TERM: 1,
    TimeSensitivity.IMMEDIATE: 2,
    TimeSensitivity.CRITICAL: 3,
})

RISK_LEVEL_RANK: Mapping[RiskLevel, int] = MappingProxyType({
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.CRITICAL: 3,
})

_E = TypeVar("_E", bound=Enum)


def _coerce(enum_cls: type[_E], value: _E | str) -> _E:
    """Accept a member or its exact value; anything else is a programming error."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(
            f"{value!r} is not a valid {enum_cls.__name__} (expected one of: {allowed})"
        ) from None


def scope_rank(value: Scope | str) -> int:
    return SCOPE_RANK[_coerce(Scope, value)]


def severity_rank(value: Severity | str) -> int:
    return SEVERITY_RANK[_coerce(Severity, value)]


def human_impact_rank(value: HumanImpact | str) -> int:
    return HUMAN_IMPACT_RANK[_coerce(HumanImpact, value)]


def time_sensitivity_rank(value: TimeSensitivity | str) -> int:
    return TIME_SENSITIVITY_RANK[_coerce(TimeSensitivity, value)]


def risk_level_rank(value: RiskLevel | str) -> int:
    return RISK_LEVEL_RANK[_coerce(RiskLevel, value)]


@dataclass(frozen=True)
class RiskAssessmentInput:
    """The four already-normalized dimensions; the sole input to classification."""

    scope: Scope
    severity: Severity
    human_impact: HumanImpact
    time_sensitivity: TimeSensitivity

    def to_dict(self) -> dict[str, str]:
        return {
            "scope": self.scope.value,
            "severity": self.severity.value,
            "human_impact": self.human_impact.value,
            "time_sensitivity": self.time_sensitivity.value,
        }
