import logging
import logging.handlers
from pathlib import Path
from clinical_ingest.core.config import LOGS_DIR, LOG_LEVEL

DEFAULT_FMT = "%(asctime)s - %(levelname)-5s - %(message)s"
DATE_FMT = "%Y-%m-%d %H:%M:%S"

def reset_logging() -> None:
    """Detach and close the handlers added by setup_logging."""
    root = logging.getLogger()
    for h in getattr(setup_logging, "_handlers", []):
        root.removeHandler(h)
        h.close()
    setup_logging._handlers = []
    setup_logging._configured = None

def setup_logging(level: str = LOG_LEVEL, file_name: str = "ingest.log", logs_dir: Path = LOGS_DIR) -> None:
    target = Path(logs_dir) / file_name
    if getattr(setup_logging, "_configured", None) == target:
        return  # prevent double-config
    reset_logging()
    Path(logs_dir).mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level.upper())

    # Console
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT))
    root.addHandler(ch)

    # Rotating file
    fh = logging.handlers.RotatingFileHandler(
        target, maxBytes=2_000_000, backupCount=3, encoding="utf-8"
    )
    fh.setFormatter(logging.Formatter(DEFAULT_FMT, datefmt=DATE_FMT))
    root.addHandler(fh)

    setup_logging._handlers = [ch, fh]
    setup_logging._configured = target
