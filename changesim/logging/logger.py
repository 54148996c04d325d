"""
Structured logging for ChangeSim.

Every line is one JSON object with an ISO timestamp, level, logger name and a
snake_case event_type. The events worth grepping for:

  impact_analysis_cache_hit / impact_analysis_completed   one per request
  risk_classified        model level vs engine level, rule, org_cap_triggered
  risk_enum_fallback     model returned a value outside a risk dimension
  decision_trace_out_of_bounds   trace still short after bounding
  llm_cost_tracked / llm_cost_alert   per-request spend and daily thresholds
  run_store_*            inserts, duplicates, lookup failures

Request-scoped lines come from bind_run(), which carries session_id and a
12-character input_hash prefix so a cache hit can be tied to its original run.

LOG_LEVEL sets the threshold; LOG_FORMAT=console switches to a readable
renderer for local runs. No changesim imports here (imported by everything).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)
LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

INPUT_HASH_PREFIX_LEN = 12


def _event_to_event_type(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _renderer() -> Any:
    if LOG_FORMAT == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty(), event_key="event_type")


def configure_structlog() -> None:
    """Configure structlog once; later calls replace the configuration."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _event_to_event_type,
            _renderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Module logger; use as get_logger(__name__).

        logger.info("risk_classified", risk_level="medium", rule="org_cap")
    """
    return structlog.get_logger(name).bind(logger=name)


def bind_run(session_id: str, input_hash: str) -> structlog.BoundLogger:
    """Logger for one analysis request (session and input hash prefix bound)."""
    return get_logger("changesim.analysis").bind(
        session_id=session_id,
        input_hash=input_hash[:INPUT_HASH_PREFIX_LEN],
    )
