"""
Risk classifier: ordered rule cascade over the four dimension ranks.

Rules are evaluated strictly in the order below; the first match decides the
level and nothing after it is consulted. Reordering changes behavior.

  1. Critical escalations (catastrophic, mass casualty, national+ with
     major/significant, time-critical with major+).
  2. Hard caps: single-person guardrail (low or medium), then the
     organization cap (medium, org_cap_triggered=True).
  3. High fallbacks (national+, major with urgency or significant impact,
     two or more major factors).
  4. Medium/low fallbacks; medium is the default.

Pure and total over valid inputs; no I/O, no shared mutable state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from changesim.risk_engine.ranks import (
    HumanImpact,
    RiskAssessmentInput,
    RiskLevel,
    Scope,
    Severity,
    TimeSensitivity,
    human_impact_rank,
    scope_rank,
    severity_rank,
    time_sensitivity_rank,
)

# Rank thresholds used by the cascade
_SINGLE = 0
_TEAM = 1
_ORGANIZATION = 2
_NATIONAL = 3
_MODERATE = 1
_MAJOR = 2
_CATASTROPHIC = 3
_NONE = 0
_LIMITED = 1
_SIGNIFICANT = 2
_MASS_CASUALTY = 3
_SHORT_TERM = 1
_IMMEDIATE = 2
_TIME_CRITICAL = 3

# Rule identifiers (for logs and run metadata)
RULE_CRITICAL_CATASTROPHIC = "critical_catastrophic_severity"
RULE_CRITICAL_MASS_CASUALTY = "critical_mass_casualty"
RULE_CRITICAL_NATIONAL_SCOPE = "critical_national_scope"
RULE_CRITICAL_TIME = "critical_time_sensitivity"
RULE_SINGLE_SCOPE_CAP = "single_scope_cap"
RULE_ORG_CAP = "org_cap"
RULE_HIGH_NATIONAL_SCOPE = "high_national_scope"
RULE_HIGH_MAJOR_SEVERITY = "high_major_severity"
RULE_HIGH_MAJOR_FACTORS = "high_major_factors"
RULE_MEDIUM_ONE_FACTOR = "medium_one_major_factor"
RULE_LOW_NARROW_MILD = "low_narrow_mild"
RULE_MEDIUM_DEFAULT = "medium_default"


@dataclass(frozen=True)
class RiskClassification:
    """
    Result of classify().

    org_cap_triggered is True only when the organization-scope guardrail,
    rather than the general cascade, decided the level.
    """

    level: RiskLevel
    org_cap_triggered: bool = False
    rule: str = RULE_MEDIUM_DEFAULT
    """Identifier of the rule that fired; informational only."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level.value,
            "org_cap_triggered": self.org_cap_triggered,
            "rule": self.rule,
        }


def _result(level: RiskLevel, rule: str, *, org_cap: bool = False) -> RiskClassification:
    return RiskClassification(level=level, org_cap_triggered=org_cap, rule=rule)


def classify(
    scope: Scope | str,
    severity: Severity | str,
    human_impact: HumanImpact | str,
    time_sensitivity: TimeSensitivity | str,
) -> RiskClassification:
    """
    Classify a change into low / medium / high / critical.

    Inputs must already be normalized (see normalize.py); a non-member value
    raises ValueError from the rank mapper.
    """
    s = scope_rank(scope)
    sev = severity_rank(severity)
    h = human_impact_rank(human_impact)
    t = time_sensitivity_rank(time_sensitivity)

    # ---- Critical escalations ----
    if sev == _CATASTROPHIC:
        return _result(RiskLevel.CRITICAL, RULE_CRITICAL_CATASTROPHIC)
    if h == _MASS_CASUALTY:
        return _result(RiskLevel.CRITICAL, RULE_CRITICAL_MASS_CASUALTY)
    if s >= _NATIONAL and (sev >= _MAJOR or h >= _SIGNIFICANT):
        return _result(RiskLevel.CRITICAL, RULE_CRITICAL_NATIONAL_SCOPE)
    if t == _TIME_CRITICAL and sev >= _MAJOR:
        return _result(RiskLevel.CRITICAL, RULE_CRITICAL_TIME)

    # ---- Hard caps ----
    if s == _SINGLE and h < _MASS_CASUALTY:
        qualifies_for_low = sev <= _MODERATE and h == _NONE and t <= _SHORT_TERM
        level = RiskLevel.LOW if qualifies_for_low else RiskLevel.MEDIUM
        return _result(level, RULE_SINGLE_SCOPE_CAP)
    if s == _ORGANIZATION and h <= _LIMITED and t <= _SHORT_TERM and sev <= _MAJOR:
        return _result(RiskLevel.MEDIUM, RULE_ORG_CAP, org_cap=True)

    # ---- High fallbacks ----
    major_factors = (
        (1 if s >= _ORGANIZATION else 0)
        + (1 if sev >= _MAJOR else 0)
        + (1 if h >= _SIGNIFICANT else 0)
        + (1 if t >= _IMMEDIATE else 0)
    )
    if s >= _NATIONAL:
        return _result(RiskLevel.HIGH, RULE_HIGH_NATIONAL_SCOPE)
    if sev == _MAJOR and (t >= _IMMEDIATE or h >= _SIGNIFICANT):
        return _result(RiskLevel.HIGH, RULE_HIGH_MAJOR_SEVERITY)
    if major_factors >= 2:
        return _result(RiskLevel.HIGH, RULE_HIGH_MAJOR_FACTORS)

    # ---- Medium / low ----
    if major_factors == 1:
        return _result(RiskLevel.MEDIUM, RULE_MEDIUM_ONE_FACTOR)
    if s <= _TEAM and sev <= _MODERATE and h <= _LIMITED:
        return _result(RiskLevel.LOW, RULE_LOW_NARROW_MILD)
    return _result(RiskLevel.MEDIUM, RULE_MEDIUM_DEFAULT)


def classify_input(assessment: RiskAssessmentInput) -> RiskClassification:
    """classify() over a RiskAssessmentInput."""
    return classify(
        assessment.scope,
        assessment.severity,
        assessment.human_impact,
        assessment.time_sensitivity,
    )
