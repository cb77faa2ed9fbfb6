"""
Collect dropped rows per entity type and write them out as CSV with the reason.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from pathlib import Path
import pandas as pd
from clinical_ingest.core.config import SOURCE_FILES, REJECTS_SUFFIX

log = logging.getLogger(__name__)

class RejectLog:
    def __init__(self):
        self._rows: dict[str, list[dict]] = defaultdict(list)

    def add(self, entity_type: str, record: dict, reason: str) -> None:
        self._rows[entity_type].append({**record, "reject_reason": reason})

    def write(self, logs_dir: str | Path) -> list[Path]:
        """One <source>_rejects.csv per entity type that dropped anything."""
        written = []
        for entity_type, rows in self._rows.items():
            if not rows:
                continue
            Path(logs_dir).mkdir(parents=True, exist_ok=True)
            stem = Path(SOURCE_FILES.get(entity_type, entity_type.lower())).stem
            out = Path(logs_dir) / f"{stem}{REJECTS_SUFFIX}"
            pd.DataFrame(rows).to_csv(out, index=False)
            log.info("Logged rejects: %s (%d rows)", out, len(rows))
            written.append(out)
        return written
