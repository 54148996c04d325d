"""
SQLAlchemy models for the run store.

One row per completed analysis. (session_id, input_hash) is unique so two
concurrent identical requests in one session cannot both be recorded; the
loser re-reads the winner's row.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

from changesim.config.settings import SESSION_ID_MAX_LENGTH

Base = declarative_base()


def _new_run_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ImpactAnalysisRun(Base):
    """Persisted analysis: request, model output after risk mapping, and run metadata."""

    __tablename__ = "changesim_impact_analysis_runs"
    __table_args__ = (
        UniqueConstraint("session_id", "input_hash", name="uq_runs_session_input"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    run_id = Column(String(36), unique=True, nullable=False, default=_new_run_id)
    process = Column(String(128), nullable=False)

    role = Column(Text, nullable=False)
    change_description = Column(Text, nullable=False)
    context = Column(Text, nullable=True)  # string, or JSON-encoded structured context

    analysis_summary = Column(Text, nullable=False)
    risk_level = Column(String(16), nullable=False, index=True)
    risk_rationale = Column(Text, nullable=False)
    risk_factors = Column(JSON, nullable=False)
    risk_scoring = Column(JSON, nullable=False)
    decision_trace = Column(JSON, nullable=False)
    sources = Column(JSON, nullable=False)
    meta = Column(JSON, nullable=False)

    session_id = Column(String(SESSION_ID_MAX_LENGTH), nullable=True, index=True)
    input_hash = Column(String(64), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    def to_dict(self) -> dict[str, Any]:
        created = self.created_at
        if created is not None and created.tzinfo is None:
            # SQLite drops tzinfo; values are written in UTC
            created = created.replace(tzinfo=timezone.utc)
        return {
            "run_id": self.run_id,
            "process": self.process,
            "role": self.role,
            "change_description": self.change_description,
            "context": self.context,
            "analysis_summary": self.analysis_summary,
            "risk_level": self.risk_level,
            "risk_rationale": self.risk_rationale,
            "risk_factors": self.risk_factors or [],
            "risk_scoring": self.risk_scoring or {},
            "decision_trace": self.decision_trace or [],
            "sources": self.sources or [],
            "meta": self.meta or {},
            "session_id": self.session_id,
            "input_hash": self.input_hash,
            "created_at": created.isoformat() if created else None,
        }
