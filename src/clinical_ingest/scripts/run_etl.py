"""
CLI wrapper for the clinical records ingest.
Run with:
    python -m clinical_ingest.scripts.run_etl [--data-dir DIR] [--database-url URL]
"""
import argparse
import logging
import sys
from pathlib import Path
from sqlalchemy.exc import SQLAlchemyError
from clinical_ingest.core.config import DATA_DIR, LOG_LEVEL
from clinical_ingest.core.errors import IngestError
from clinical_ingest.core.logging_setup import setup_logging
from clinical_ingest.services.etl import run_etl

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Reconcile clinical CSV sources into the store")
    parser.add_argument("--data-dir", type=Path, default=DATA_DIR, help="directory holding raw/ and logs/")
    parser.add_argument("--database-url", default=None, help="overrides DATABASE_URL / DB_* settings")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args(argv)

    logs_dir = args.data_dir / "logs"
    setup_logging(args.log_level, logs_dir=logs_dir)
    log = logging.getLogger(__name__)

    log.info("Starting clinical records ingest")
    try:
        report = run_etl(args.data_dir / "raw", args.database_url, logs_dir)
    except (IngestError, SQLAlchemyError, ValueError) as e:
        log.error("Ingest aborted: %s", e)
        return 1

    for line in report.lines():
        print(line)
    return 0

if __name__ == "__main__":
    sys.exit(main())
