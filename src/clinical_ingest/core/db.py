import logging
from contextlib import contextmanager
from typing import Iterator
from sqlalchemy import create_engine, inspect, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from clinical_ingest.core.config import get_database_url
from clinical_ingest.models.tables import Base

log = logging.getLogger(__name__)

def get_engine(url: str | None = None) -> Engine:
    try:
        return create_engine(url or get_database_url(), echo=False, future=True)
    except SQLAlchemyError as e:
        log.error("Failed to create engine: %s", e)
        raise

def create_tables(engine: Engine | None = None) -> Engine:
    """Create missing tables (idempotent)."""
    engine = engine or get_engine()
    insp = inspect(engine)
    existing = set(insp.get_table_names())
    expected = set(Base.metadata.tables.keys())

    if expected.issubset(existing):
        log.info("All tables exist. Skipping creation.")
        return engine

    missing = sorted(expected - existing)
    log.info("Creating tables: %s", ", ".join(missing))
    Base.metadata.create_all(engine)
    log.info("Tables created.")
    return engine

@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Store handle for one run. Writes are committed per call by the caller;
    anything left uncommitted is rolled back and the session is always closed."""
    session = Session(engine)
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        log.debug("Store session closed")

def table_counts(engine: Engine) -> dict[str, int]:
    """Row count per known table that exists in the database."""
    existing = set(inspect(engine).get_table_names())
    counts = {}
    with engine.connect() as conn:
        for name, table in Base.metadata.tables.items():
            if name in existing:
                counts[name] = conn.execute(select(func.count()).select_from(table)).scalar_one()
    return counts
