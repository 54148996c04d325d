"""
Pytest fixtures for ChangeSim tests. Uses a temporary SQLite run store and a fake LLM client.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from changesim.analysis.llm_client import LLMResponse, parse_result

SAMPLE_RESULT: dict[str, Any] = {
    "analysis_summary": "### Predicted Impacts\n- **Operational Continuity**: Short disruption.\n\n### Risk Factors\n- **Adoption**: Slow uptake. Offer training.",
    "risk_level": "high",
    "risk_rationale": "Company-wide policy change with limited wellbeing impact.",
    "risk_factors": ["Employee pushback", "Commute costs"],
    "risk_scoring": {
        "scope": "organization",
        "severity": "major",
        "human_impact": "limited",
        "time_sensitivity": "short_term",
    },
    "decision_trace": [
        "Identified organization-wide scope",
        "Assessed severity as major",
        "Human impact limited to stress",
        "Timeline is short term",
        "Applied risk scoring rules",
    ],
    "sources": [
        {"title": "Return to office research", "url": "https://example.org/rto"},
        {"title": "Change management guide", "url": "https://example.org/change"},
    ],
}


def make_result(**overrides: Any) -> dict[str, Any]:
    """Copy of SAMPLE_RESULT with top-level keys (or risk_scoring keys) replaced."""
    data = copy.deepcopy(SAMPLE_RESULT)
    scoring = overrides.pop("risk_scoring", None)
    if scoring:
        data["risk_scoring"].update(scoring)
    data.update(overrides)
    return data


class FakeLLMClient:
    """Stands in for LLMClient: returns queued results and records calls."""

    def __init__(self, result: dict[str, Any] | None = None, model: str = "gpt-4o-mini") -> None:
        self.model = model
        self.result = result or make_result()
        self.calls: list[tuple[str, str, Any]] = []
        self.error: Exception | None = None

    def analyze(self, role: str, change_description: str, context: Any = None) -> LLMResponse:
        self.calls.append((role, change_description, context))
        if self.error is not None:
            raise self.error
        return LLMResponse(
            result=parse_result(self.result),
            model=self.model,
            input_tokens=1200,
            output_tokens=400,
        )


@pytest.fixture
def settings(monkeypatch):
    """Settings with a fixed model and no API token."""
    monkeypatch.delenv("API_TOKEN", raising=False)
    monkeypatch.delenv("SHOW_DEBUG_LOGS", raising=False)
    monkeypatch.setenv("CHANGESIM_MODEL", "gpt-4o-mini")
    from changesim.config import get_settings

    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def run_store(tmp_path, monkeypatch):
    """
    Point the run store at a temporary SQLite DB and create tables.
    Resets the engine cache so each test gets a fresh DB. Unset DATABASE_URL so we use SQLite.
    """
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("CHANGESIM_DB_URL", raising=False)
    monkeypatch.setenv("CHANGESIM_DB_PATH", str(tmp_path / "changesim.db"))

    from changesim.database import runs

    runs.reset_engine_for_test()
    runs.init_db()
    yield runs
    runs.reset_engine_for_test()


@pytest.fixture
def fake_llm():
    return FakeLLMClient()


@pytest.fixture
def tracker():
    from changesim.analysis.cost_tracker import CostTracker

    return CostTracker()


@pytest.fixture
def service(fake_llm, settings, run_store, tracker):
    from changesim.analysis.service import ImpactAnalysisService

    return ImpactAnalysisService(fake_llm, settings, tracker=tracker)


@pytest.fixture
def client(service):
    """FastAPI TestClient with the analysis service replaced by one using the fake LLM."""
    from fastapi.testclient import TestClient

    from changesim.api_server.server import app, get_service

    app.dependency_overrides[get_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()
