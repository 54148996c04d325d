"""
Prompt text for the impact analysis model call.

Bump PROMPT_VERSION in config.settings whenever this text changes; the
version is part of the cache key.
"""

from __future__ import annotations

import json
from typing import Any

IMPACT_ANALYSIS_SYSTEM_PROMPT = """You are a senior impact-analysis assistant.
Output only valid JSON matching the schema. No extra text. No chain-of-thought.
Return JSON inside a single top-level {} with no markdown fences. Never invent URLs or facts.

Schema

type ImpactAnalysisResult = {
  analysis_summary: string;            // Markdown with "### Predicted Impacts" and "### Risk Factors" sections
  risk_level: "low" | "medium" | "high" | "critical";
  risk_rationale: string;              // REQUIRED, <= 60 words
  risk_factors: string[];              // 1-4 concise items, each <= 20 words
  risk_scoring: {
    scope: "individual"|"team"|"organization"|"national"|"global";
    severity: "minor"|"moderate"|"major"|"catastrophic";
    human_impact: "none"|"limited"|"significant"|"mass_casualty";
    time_sensitivity: "long_term"|"short_term"|"immediate"|"critical";
  };
  decision_trace: string[];            // 3-5 short steps, each <= 16 words
  sources: { title: string; url: string }[]; // 2-4 items; always include valid URLs
}

Scope guidelines (classify conservatively):
- individual: affects one person's specific work or role
- team: affects a single department or group
- organization: affects multiple departments or core company-wide operations
- national/global: affects an industry, a country, or worldwide systems

Human impact guidelines:
- none: no impact on employee wellbeing or safety
- limited: minor stress, inconvenience, temporary discomfort
- significant: lasting harm to wellbeing, livelihood or safety for many people
- mass_casualty: loss of life or widespread physical harm
"""


def build_user_prompt(role: str, change_description: str, context: Any = None) -> str:
    """User message for one analysis request."""
    lines = [
        "Analyze the impact of this organizational change:",
        "",
        f"Role: {role}",
        f"Change Description: {change_description}",
    ]
    if context:
        lines.append(f"Additional Context: {json.dumps(context, ensure_ascii=False)}")
    lines.extend(["", "Return only valid JSON matching the ImpactAnalysisResult schema."])
    return "\n".join(lines)
