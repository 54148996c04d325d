"""
Structured logging for ChangeSim.

JSON logs with timestamp, event_type and key/value context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from changesim.logging.logger import get_logger

__all__ = ["get_logger"]
