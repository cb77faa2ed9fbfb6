"""
Read a comma-separated source into field-named row records:
- Header names come from the first line
- Blank lines are skipped
- Short rows are padded with "" and surplus cells are ignored
- Every value is trimmed; no other validation happens here
"""

from __future__ import annotations
import csv
import logging
from pathlib import Path
from typing import Iterator
from clinical_ingest.core.errors import SourceAccessError

log = logging.getLogger(__name__)

Record = dict[str, str]

def _clean(s) -> str:
    return str(s).strip() if s is not None else ""

def read_records(path: str | Path) -> Iterator[Record]:
    """Yield one record per non-blank data line of the file at `path`."""
    path = Path(path)
    try:
        fh = open(path, "r", newline="", encoding="utf-8-sig")
    except OSError as e:
        raise SourceAccessError(f"Cannot open source {path}: {e}") from e

    with fh:
        try:
            reader = csv.reader(fh)
            headers = None
            for line in reader:
                if not any(_clean(c) for c in line):
                    continue
                if headers is None:
                    headers = [_clean(h) for h in line]
                    continue
                yield {
                    h: (_clean(line[i]) if i < len(line) else "")
                    for i, h in enumerate(headers)
                }
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise SourceAccessError(f"Cannot read source {path}: {e}") from e

class RecordSource:
    """Restartable record sequence; every iteration re-reads the file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def __iter__(self) -> Iterator[Record]:
        log.info("Reading %s", self.path)
        return read_records(self.path)

    def __repr__(self) -> str:
        return f"RecordSource({str(self.path)!r})"

def open_sources(raw_dir: str | Path, files: dict[str, str]) -> dict[str, RecordSource]:
    """Map each entity type to a source under `raw_dir`. Files are only opened when iterated."""
    return {entity: RecordSource(Path(raw_dir) / name) for entity, name in files.items()}
