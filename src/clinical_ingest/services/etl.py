"""
ETL service - one reconciliation run from the raw CSV sources into the store
"""
from __future__ import annotations
import logging
from pathlib import Path
from clinical_ingest.core.config import RAW_DIR, LOGS_DIR, SOURCE_FILES, REPORT_FILE
from clinical_ingest.core.db import get_engine, create_tables, session_scope
from clinical_ingest.extract.read_records import open_sources
from clinical_ingest.services.orchestrator import Orchestrator
from clinical_ingest.services.report import ReconciliationReport
from clinical_ingest.transforms.rejects import RejectLog

log = logging.getLogger(__name__)

def run_etl(
    raw_dir: str | Path = RAW_DIR,
    database_url: str | None = None,
    logs_dir: str | Path = LOGS_DIR,
) -> ReconciliationReport:
    """Execute the complete ingest and return its report"""
    engine = create_tables(get_engine(database_url))
    sources = open_sources(raw_dir, SOURCE_FILES)
    rejects = RejectLog()
    try:
        with session_scope(engine) as session:
            report = Orchestrator(session, reject_log=rejects).run(sources)
    except Exception as e:
        log.error(f"Ingest failed: {e}", exc_info=True)
        raise
    finally:
        rejects.write(logs_dir)
        engine.dispose()

    Path(logs_dir).mkdir(parents=True, exist_ok=True)
    report.to_frame().to_csv(Path(logs_dir) / REPORT_FILE, index=False)
    log.info(f"Ingest complete: {report.lines()}")
    return report
