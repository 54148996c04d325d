"""
In-memory LLM cost tracking.

Per-day cost and token totals, kept until process restart. Logs every tracked
request and an alert event the first time daily spend crosses each threshold.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from changesim.logging import get_logger

logger = get_logger(__name__)

# USD per 1K tokens
MODEL_PRICING: dict[str, dict[str, float]] = {
    "gpt-4o-mini": {"input": 0.00015, "output": 0.0006},
    "text-embedding-ada-002": {"input": 0.0001, "output": 0.0},
}

DAILY_COST_ALERT_THRESHOLDS = (5.0, 10.0)


def _today() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def calculate_cost(input_tokens: int, output_tokens: int, model: str) -> float:
    """Estimated USD cost; unknown models cost 0 and log a warning."""
    pricing = MODEL_PRICING.get(model)
    if pricing is None:
        logger.warning("cost_unknown_model_pricing", model=model)
        return 0.0
    return (input_tokens / 1000.0) * pricing["input"] + (output_tokens / 1000.0) * pricing["output"]


@dataclass
class CostTracker:
    """Thread-safe per-day totals."""

    daily_costs: dict[str, float] = field(default_factory=dict)
    daily_tokens: dict[str, int] = field(default_factory=dict)
    request_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def track_usage(
        self,
        operation: str,
        model: str,
        input_tokens: int | None,
        output_tokens: int | None,
        *,
        day: str | None = None,
    ) -> float:
        """Record one request; returns its estimated cost."""
        in_tok = int(input_tokens or 0)
        out_tok = int(output_tokens or 0)
        cost = calculate_cost(in_tok, out_tok, model)
        day = day or _today()
        with self._lock:
            previous = self.daily_costs.get(day, 0.0)
            current = previous + cost
            self.daily_costs[day] = current
            self.daily_tokens[day] = self.daily_tokens.get(day, 0) + in_tok + out_tok
            self.request_count += 1

        logger.info(
            "llm_cost_tracked",
            operation=operation,
            model=model,
            cost_usd=round(cost, 6),
            total_tokens=in_tok + out_tok,
            daily_cost_usd=round(current, 4),
        )
        for threshold in DAILY_COST_ALERT_THRESHOLDS:
            if previous <= threshold < current:
                logger.error("llm_cost_alert", threshold_usd=threshold, daily_cost_usd=round(current, 4))
        return cost

    def get_daily_cost(self, day: str | None = None) -> float:
        with self._lock:
            return self.daily_costs.get(day or _today(), 0.0)

    def get_stats(self, day: str | None = None) -> dict[str, Any]:
        day = day or _today()
        with self._lock:
            daily_cost = self.daily_costs.get(day, 0.0)
            daily_tokens = self.daily_tokens.get(day, 0)
            count = self.request_count
        return {
            "date": day,
            "daily_cost": round(daily_cost, 6),
            "daily_tokens": daily_tokens,
            "request_count": count,
            "avg_cost_per_request": round(daily_cost / count, 6) if count else 0.0,
        }


cost_tracker = CostTracker()
