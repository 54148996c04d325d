"""
Risk engine package: deterministic classification of change risk.

Maps the four ordinal risk dimensions (scope, severity, human impact, time
sensitivity) to a risk level through an ordered rule cascade, and keeps the
accompanying decision trace within its length bounds. Pure functions only;
no I/O and no shared mutable state.
"""

from changesim.risk_engine.ranks import (
    HumanImpact,
    RiskAssessmentInput,
    RiskLevel,
    Scope,
    Severity,
    TimeSensitivity,
    human_impact_rank,
    risk_level_rank,
    scope_rank,
    severity_rank,
    time_sensitivity_rank,
)
from changesim.risk_engine.classifier import (
    RiskClassification,
    classify,
    classify_input,
)
from changesim.risk_engine.decision_trace import (
    MAX_DECISION_TRACE_LENGTH,
    MIN_DECISION_TRACE_LENGTH,
    ORG_CAP_GUARDRAIL_NOTE,
    TraceValidation,
    append_with_bound,
    bound_trace,
    validate_trace,
)
from changesim.risk_engine.normalize import (
    normalize_human_impact,
    normalize_risk_scoring,
    normalize_scope,
    normalize_severity,
    normalize_time_sensitivity,
)

__all__ = [
    "HumanImpact",
    "RiskAssessmentInput",
    "RiskLevel",
    "Scope",
    "Severity",
    "TimeSensitivity",
    "human_impact_rank",
    "risk_level_rank",
    "scope_rank",
    "severity_rank",
    "time_sensitivity_rank",
    "RiskClassification",
    "classify",
    "classify_input",
    "MAX_DECISION_TRACE_LENGTH",
    "MIN_DECISION_TRACE_LENGTH",
    "ORG_CAP_GUARDRAIL_NOTE",
    "TraceValidation",
    "append_with_bound",
    "bound_trace",
    "validate_trace",
    "normalize_human_impact",
    "normalize_risk_scoring",
    "normalize_scope",
    "normalize_severity",
    "normalize_time_sensitivity",
]
