"""
Pytest tests for the run store (changesim.database.runs).

Uses a temporary SQLite DB via the run_store fixture.
"""

from __future__ import annotations

import pytest

from changesim.core.exceptions import DuplicateRunError


def _fields(session_id="sess-1", input_hash="a" * 64, **overrides):
    fields = {
        "process": "changesim_impact_analysis_v1",
        "role": "HR Manager",
        "change_description": "Return to office",
        "context": None,
        "analysis_summary": "### Predicted Impacts",
        "risk_level": "medium",
        "risk_rationale": "Capped at organization level",
        "risk_factors": ["Pushback"],
        "risk_scoring": {
            "scope": "organization",
            "severity": "major",
            "human_impact": "limited",
            "time_sensitivity": "short_term",
        },
        "decision_trace": ["one", "two", "three"],
        "sources": [{"title": "a", "url": "https://a"}, {"title": "b", "url": "https://b"}],
        "meta": {"agent_type": "single-agent"},
        "session_id": session_id,
        "input_hash": input_hash,
    }
    fields.update(overrides)
    return fields


def test_insert_and_find(run_store):
    run_id = run_store.insert_run(_fields())
    assert len(run_id) == 36

    row = run_store.find_cached_run("sess-1", "a" * 64)
    assert row is not None
    assert row["run_id"] == run_id
    assert row["risk_scoring"]["scope"] == "organization"
    assert row["decision_trace"] == ["one", "two", "three"]
    assert row["created_at"].endswith("+00:00")


def test_find_missing_returns_none(run_store):
    run_store.insert_run(_fields())
    assert run_store.find_cached_run("sess-2", "a" * 64) is None
    assert run_store.find_cached_run("sess-1", "b" * 64) is None


def test_duplicate_session_and_hash_raises(run_store):
    run_store.insert_run(_fields())
    with pytest.raises(DuplicateRunError) as exc_info:
        run_store.insert_run(_fields(role="Other"))
    assert exc_info.value.session_id == "sess-1"
    assert len(run_store.list_runs()) == 1


def test_same_hash_in_other_session_is_allowed(run_store):
    run_store.insert_run(_fields(session_id="sess-1"))
    run_store.insert_run(_fields(session_id="sess-2"))
    assert len(run_store.list_runs()) == 2


def test_list_runs_newest_first_and_filtered(run_store):
    first = run_store.insert_run(_fields(input_hash="1" * 64))
    second = run_store.insert_run(_fields(input_hash="2" * 64))
    other = run_store.insert_run(_fields(session_id="sess-2", input_hash="3" * 64))

    assert [r["run_id"] for r in run_store.list_runs()] == [other, second, first]
    assert [r["run_id"] for r in run_store.list_runs(session_id="sess-1")] == [second, first]
    assert len(run_store.list_runs(limit=1)) == 1
