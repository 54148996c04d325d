"""
Impact analysis service: cache lookup, model call, deterministic risk mapping, persistence.

Flow per request:
  1. Hash the inputs (role, description, context, model, prompt version).
  2. Existing session and not force_fresh: return the cached run if any (hit).
  3. Call the model, normalize its risk scoring and re-classify with the
     risk engine; the engine's level replaces the model's.
  4. Organization cap fired: append the guardrail note to the decision trace.
     The trace is always bounded and validated before it leaves this module.
  5. Persist the run. A unique-key collision means a concurrent identical
     request won; its row is returned instead (race).

Cache lookups and persistence failures are logged and never fail the request.
Model errors propagate as AIServiceError subclasses for the API layer to map.
"""

from __future__ import annotations

import json
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from changesim.analysis.cost_tracker import CostTracker, cost_tracker
from changesim.analysis.hashing import make_input_hash
from changesim.analysis.llm_client import LLMClient
from changesim.analysis.schemas import ImpactAnalysisRequest
from changesim.config import Settings
from changesim.config.settings import (
    AGENT_TYPE_SINGLE,
    ANALYSIS_STATUS_COMPLETE,
    CACHE_STATUS_HIT,
    CACHE_STATUS_MISS,
    CACHE_STATUS_NEW_SESSION,
    CACHE_STATUS_RACE,
    PROCESS_NAME,
    PROMPT_VERSION,
)
from changesim.core.exceptions import DuplicateRunError
from changesim.database import runs
from changesim.logging.logger import bind_run
from changesim.risk_engine import (
    ORG_CAP_GUARDRAIL_NOTE,
    append_with_bound,
    bound_trace,
    classify_input,
    normalize_risk_scoring,
    validate_trace,
)


@dataclass
class AnalysisOutcome:
    """Response body plus the values echoed in X-ChangeSim-* headers."""

    result: dict[str, Any]
    cache_status: str
    model: str
    agent_type: str = AGENT_TYPE_SINGLE
    prompt_version: str = PROMPT_VERSION

    def headers(self) -> dict[str, str]:
        return {
            "X-ChangeSim-Cache": self.cache_status,
            "X-ChangeSim-Prompt-Version": self.prompt_version,
            "X-ChangeSim-Model": self.model,
            "X-ChangeSim-Agent-Type": self.agent_type,
        }


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _context_for_storage(context: Any) -> str | None:
    if context is None or context == "":
        return None
    if isinstance(context, str):
        return context
    return json.dumps(context, ensure_ascii=False)


def _fallback_run_id() -> str:
    return f"ia_{int(time.time() * 1000)}_{uuid.uuid4().hex[:7]}"


def result_from_row(row: dict[str, Any], cache_status: str) -> dict[str, Any]:
    """Rebuild the client-facing result from a stored run; no session or hash fields."""
    stored_meta = row.get("meta") or {}
    return {
        "analysis_summary": row["analysis_summary"],
        "risk_level": row["risk_level"],
        "risk_rationale": row.get("risk_rationale") or "Cached analysis result",
        "risk_factors": row.get("risk_factors") or [],
        "risk_scoring": row.get("risk_scoring") or {},
        "decision_trace": row.get("decision_trace") or [],
        "sources": row.get("sources") or [],
        "meta": {
            "timestamp": row.get("created_at"),
            "status": ANALYSIS_STATUS_COMPLETE,
            "run_id": row["run_id"],
            "role": row["role"],
            "change_description": row["change_description"],
            "context": row.get("context"),
            "_cache": cache_status,
            "agent_type": stored_meta.get("agent_type") or AGENT_TYPE_SINGLE,
        },
    }


class ImpactAnalysisService:
    """Stateless per request; safe to share across FastAPI worker threads."""

    def __init__(
        self,
        llm: LLMClient,
        settings: Settings,
        *,
        tracker: CostTracker | None = None,
    ) -> None:
        self._llm = llm
        self._settings = settings
        self._tracker = tracker or cost_tracker

    @property
    def model(self) -> str:
        return self._llm.model

    def analyze(
        self,
        request: ImpactAnalysisRequest,
        session_id: str,
        is_new_session: bool,
    ) -> AnalysisOutcome:
        model = self._llm.model
        input_hash = make_input_hash(
            request.role,
            request.change_description,
            request.context,
            model,
            PROMPT_VERSION,
        )
        log = bind_run(session_id, input_hash)
        if self._settings.show_debug_logs:
            log.info(
                "impact_analysis_request",
                role=request.role,
                force_fresh=request.force_fresh,
                is_new_session=is_new_session,
            )

        if not request.force_fresh and not is_new_session:
            cached = self._lookup(session_id, input_hash, log)
            if cached is not None:
                log.info("impact_analysis_cache_hit", run_id=cached["run_id"])
                return AnalysisOutcome(
                    result=result_from_row(cached, CACHE_STATUS_HIT),
                    cache_status=CACHE_STATUS_HIT,
                    model=model,
                    agent_type=(cached.get("meta") or {}).get("agent_type") or AGENT_TYPE_SINGLE,
                )

        response = self._llm.analyze(request.role, request.change_description, request.context)
        self._tracker.track_usage(
            "impact_analysis", response.model, response.input_tokens, response.output_tokens
        )

        result = response.result
        assessment = normalize_risk_scoring(result.risk_scoring.model_dump())
        classification = classify_input(assessment)

        trace = list(result.decision_trace)
        if classification.org_cap_triggered:
            trace = append_with_bound(trace, ORG_CAP_GUARDRAIL_NOTE)
        trace = bound_trace(trace)
        validation = validate_trace(trace)
        if not validation.valid:
            log.warning("decision_trace_out_of_bounds", reason=validation.reason)

        log.info(
            "risk_classified",
            model_risk_level=result.risk_level,
            risk_level=classification.level.value,
            rule=classification.rule,
            org_cap_triggered=classification.org_cap_triggered,
            **assessment.to_dict(),
        )
        result = result.model_copy(
            update={"risk_level": classification.level.value, "decision_trace": trace}
        )

        cache_status = CACHE_STATUS_NEW_SESSION if is_new_session else CACHE_STATUS_MISS
        run_meta: dict[str, Any] = {
            "model": model,
            "temperature": self._settings.temperature,
            "input_tokens": response.input_tokens,
            "output_tokens": response.output_tokens,
            "prompt_version": PROMPT_VERSION,
            "timestamp": _now_iso(),
            "status": ANALYSIS_STATUS_COMPLETE,
            "_cache": cache_status,
            "agent_type": AGENT_TYPE_SINGLE,
            "risk_rule": classification.rule,
            "org_cap_triggered": classification.org_cap_triggered,
        }
        fields = {
            "process": PROCESS_NAME,
            "role": request.role,
            "change_description": request.change_description,
            "context": _context_for_storage(request.context),
            "analysis_summary": result.analysis_summary,
            "risk_level": result.risk_level,
            "risk_rationale": result.risk_rationale,
            "risk_factors": list(result.risk_factors),
            "risk_scoring": result.risk_scoring.model_dump(),
            "decision_trace": list(result.decision_trace),
            "sources": [s.model_dump() for s in result.sources],
            "meta": run_meta,
            "session_id": session_id,
            "input_hash": input_hash,
        }

        run_id: str | None = None
        try:
            run_id = runs.insert_run(fields)
        except DuplicateRunError:
            raced = self._lookup(session_id, input_hash, log)
            if raced is not None:
                log.info("impact_analysis_race_recovered", run_id=raced["run_id"])
                return AnalysisOutcome(
                    result=result_from_row(raced, CACHE_STATUS_RACE),
                    cache_status=CACHE_STATUS_RACE,
                    model=model,
                )
        except Exception as e:
            log.exception("run_store_insert_failed", error=str(e))

        meta = {
            **(result.meta or {}),
            "timestamp": _now_iso(),
            "status": ANALYSIS_STATUS_COMPLETE,
            "run_id": run_id or _fallback_run_id(),
            "role": request.role,
            "change_description": request.change_description,
            "context": request.context,
            "_cache": cache_status,
            "agent_type": AGENT_TYPE_SINGLE,
        }
        body = result.model_dump()
        body["meta"] = meta
        log.info("impact_analysis_completed", run_id=meta["run_id"], cache_status=cache_status)
        return AnalysisOutcome(result=body, cache_status=cache_status, model=model)

    def _lookup(self, session_id: str, input_hash: str, log: Any) -> dict[str, Any] | None:
        try:
            return runs.find_cached_run(session_id, input_hash)
        except Exception as e:
            log.error("run_store_lookup_failed", error=str(e))
            return None
