"""
Pytest tests for risk scoring normalization (changesim.risk_engine.normalize).
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from changesim.risk_engine.normalize import (
    is_valid_human_impact,
    is_valid_scope,
    is_valid_severity,
    is_valid_time_sensitivity,
    normalize_human_impact,
    normalize_risk_scoring,
    normalize_scope,
    normalize_severity,
    normalize_time_sensitivity,
)
from changesim.risk_engine.ranks import HumanImpact, Scope, Severity, TimeSensitivity


def test_individual_maps_to_single():
    assert normalize_scope("individual") == Scope.SINGLE


@pytest.mark.parametrize("value", ["team", "organization", "national", "global", "single"])
def test_valid_scopes_pass_through(value):
    assert normalize_scope(value) == Scope(value)


def test_whitespace_and_case_are_tolerated():
    assert normalize_scope("  Organization ") == Scope.ORGANIZATION
    assert normalize_severity("MAJOR") == Severity.MAJOR


@pytest.mark.parametrize(
    "fn,default",
    [
        (normalize_scope, Scope.SINGLE),
        (normalize_severity, Severity.MODERATE),
        (normalize_human_impact, HumanImpact.NONE),
        (normalize_time_sensitivity, TimeSensitivity.LONG_TERM),
    ],
)
@pytest.mark.parametrize("bad", ["unknown", "", None, 42])
def test_unknown_values_fall_back_to_default(fn, default, bad):
    assert fn(bad) == default


def test_fallback_logs_warning():
    with patch("changesim.risk_engine.normalize.logger") as logger:
        normalize_severity("apocalyptic")
    logger.warning.assert_called_once()
    args, kwargs = logger.warning.call_args
    assert args[0] == "risk_enum_fallback"
    assert kwargs["field"] == "severity"
    assert kwargs["default"] == "moderate"

def test_normalize_risk_scoring():
    a = normalize_risk_scoring({
        "scope": "individual",
        "severity": "major",
        "human_impact": "limited",
        "time_sensitivity": "immediate",
    })
    assert a.scope == Scope.SINGLE
    assert a.severity == Severity.MAJOR
    assert a.human_impact == HumanImpact.LIMITED
    assert a.time_sensitivity == TimeSensitivity.IMMEDIATE


def test_normalize_risk_scoring_missing_keys():
    a = normalize_risk_scoring({})
    assert a.to_dict() == {
        "scope": "single",
        "severity": "moderate",
        "human_impact": "none",
        "time_sensitivity": "long_term",
    }


def test_validity_predicates():
    assert is_valid_scope("single") is True
    assert is_valid_scope("individual") is False
    assert is_valid_severity("catastrophic") is True
    assert is_valid_severity(3) is False
    assert is_valid_human_impact("mass_casualty") is True
    assert is_valid_time_sensitivity("soon") is False
