"""
Run store operations: insert, cache lookup, listing.

Engine and session factory are created lazily and cached per process. Each
operation uses its own session (commit on success, rollback on error).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from changesim.config.env import get_database_url
from changesim.core.exceptions import DuplicateRunError
from changesim.database.models import Base, ImpactAnalysisRun
from changesim.logging import get_logger

logger = get_logger(__name__)

_engine = None
_SessionLocal: sessionmaker | None = None


def _safe_url(url: str) -> str:
    """Strip credentials and query string for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]


def _get_engine():
    """Create or return the cached engine."""
    global _engine
    if _engine is None:
        url = get_database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        logger.info("run_store_engine", url=_safe_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=_get_engine()
        )
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def reset_engine_for_test() -> None:
    """Drop the cached engine so the next call re-reads the database URL."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def init_db() -> None:
    """Create run store tables if they do not exist. Safe to call on every startup."""
    try:
        Base.metadata.create_all(bind=_get_engine())
        logger.info("run_store_init_db", url=_safe_url(get_database_url()))
    except Exception as e:
        logger.exception("run_store_init_db_failed", error=str(e))
        raise


def insert_run(fields: dict[str, Any]) -> str:
    """
    Insert one run and return its run_id.

    Raises DuplicateRunError when (session_id, input_hash) already exists.
    """
    try:
        with _session_scope() as session:
            run = ImpactAnalysisRun(**fields)
            session.add(run)
            session.flush()
            run_id = run.run_id
    except IntegrityError as e:
        logger.info(
            "run_store_duplicate",
            session_id=fields.get("session_id"),
            input_hash=(fields.get("input_hash") or "")[:12],
        )
        raise DuplicateRunError(fields.get("session_id"), fields.get("input_hash")) from e
    logger.info("run_store_inserted", run_id=run_id, risk_level=fields.get("risk_level"))
    return run_id


def find_cached_run(session_id: str, input_hash: str) -> dict[str, Any] | None:
    """Return the newest run for (session_id, input_hash) as a dict, or None."""
    with _session_scope() as session:
        row = (
            session.query(ImpactAnalysisRun)
            .filter(
                ImpactAnalysisRun.session_id == session_id,
                ImpactAnalysisRun.input_hash == input_hash,
            )
            .order_by(ImpactAnalysisRun.created_at.desc(), ImpactAnalysisRun.id.desc())
            .first()
        )
        return row.to_dict() if row else None


def list_runs(*, limit: int = 100, session_id: str | None = None) -> list[dict[str, Any]]:
    """Return runs newest first, optionally for one session."""
    with _session_scope() as session:
        query = session.query(ImpactAnalysisRun)
        if session_id is not None:
            query = query.filter(ImpactAnalysisRun.session_id == session_id)
        rows = (
            query.order_by(ImpactAnalysisRun.created_at.desc(), ImpactAnalysisRun.id.desc())
            .limit(limit)
            .all()
        )
        return [r.to_dict() for r in rows]
