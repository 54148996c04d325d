"""
Run store: persisted impact analysis runs and the session-scoped cache.

SQLAlchemy-backed; SQLite by default, PostgreSQL via CHANGESIM_DB_URL / DATABASE_URL.
"""

from changesim.database.models import Base, ImpactAnalysisRun
from changesim.database.runs import (
    find_cached_run,
    init_db,
    insert_run,
    list_runs,
    reset_engine_for_test,
)

__all__ = [
    "Base",
    "ImpactAnalysisRun",
    "find_cached_run",
    "init_db",
    "insert_run",
    "list_runs",
    "reset_engine_for_test",
]
