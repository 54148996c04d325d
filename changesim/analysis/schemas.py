"""
Request and result models for impact analysis (pydantic).

ImpactAnalysisResult is the contract the model must satisfy. risk_scoring is
kept as raw strings and normalized by the risk engine afterwards, and the
decision trace length is bounded by the service rather than rejected here.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RiskLevelLiteral = Literal["low", "medium", "high", "critical"]


class ImpactAnalysisRequest(BaseModel):
    """POST /api/impact-analysis body."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    change_description: str = Field(
        ..., alias="changeDescription", min_length=1, description="Change description is required"
    )
    role: str = Field(..., min_length=1, description="Role is required")
    context: Any = Field(None, description="Optional free-form context (string or JSON)")
    force_fresh: bool = Field(False, alias="forceFresh", description="Skip the session cache")


class RiskScoring(BaseModel):
    """Raw risk dimensions as returned by the model (see risk_engine.normalize)."""

    scope: str
    severity: str
    human_impact: str
    time_sensitivity: str


class Source(BaseModel):
    title: str
    url: str


class ImpactAnalysisResult(BaseModel):
    """Impact analysis returned to clients and persisted per run."""

    analysis_summary: str
    risk_level: RiskLevelLiteral
    risk_rationale: str = Field(..., min_length=1)
    risk_factors: list[str] = Field(..., min_length=1, max_length=4)
    risk_scoring: RiskScoring
    decision_trace: list[str] = Field(default_factory=list)
    sources: list[Source] = Field(..., min_length=2)
    meta: dict[str, Any] | None = None
