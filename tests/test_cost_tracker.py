"""
Pytest tests for in-memory LLM cost tracking (changesim.analysis.cost_tracker).
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from changesim.analysis.cost_tracker import CostTracker, calculate_cost


def test_calculate_cost_known_model():
    # 1000 input * 0.00015/1K + 2000 output * 0.0006/1K
    assert calculate_cost(1000, 2000, "gpt-4o-mini") == pytest.approx(0.00015 + 0.0012)


def test_calculate_cost_unknown_model_is_zero():
    assert calculate_cost(1000, 1000, "mystery-model") == 0.0


def test_track_usage_accumulates_per_day():
    tracker = CostTracker()
    tracker.track_usage("impact_analysis", "gpt-4o-mini", 1000, 1000, day="2026-01-01")
    tracker.track_usage("impact_analysis", "gpt-4o-mini", 1000, None, day="2026-01-01")
    tracker.track_usage("impact_analysis", "gpt-4o-mini", 1000, 0, day="2026-01-02")

    stats = tracker.get_stats(day="2026-01-01")
    assert stats["daily_tokens"] == 3000
    assert stats["daily_cost"] == pytest.approx(0.00015 * 2 + 0.0006, abs=1e-6)
    assert stats["request_count"] == 3
    assert tracker.get_daily_cost("2026-01-02") == pytest.approx(0.00015)


def test_empty_tracker_stats():
    stats = CostTracker().get_stats(day="2026-01-01")
    assert stats["daily_cost"] == 0.0
    assert stats["request_count"] == 0
    assert stats["avg_cost_per_request"] == 0.0


def test_alert_logged_once_when_threshold_crossed():
    tracker = CostTracker(daily_costs={"2026-01-01": 4.99})
    with patch("changesim.analysis.cost_tracker.logger") as logger:
        # 100K output tokens = $0.06
        tracker.track_usage("impact_analysis", "gpt-4o-mini", 0, 100_000, day="2026-01-01")
        tracker.track_usage("impact_analysis", "gpt-4o-mini", 0, 100_000, day="2026-01-01")
    alerts = [c for c in logger.error.call_args_list if c.args[0] == "llm_cost_alert"]
    assert len(alerts) == 1
    assert alerts[0].kwargs["threshold_usd"] == 5.0
