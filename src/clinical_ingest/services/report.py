"""
Per-entity-type insert/update tallies for one ingest run.
"""

from __future__ import annotations
import pandas as pd

STAGE_ORDER = ["Patient", "Doctor", "Visit", "Diagnosis", "Medication", "LabResult", "Observation"]

class ReconciliationReport:
    def __init__(self, entity_types: list[str] = STAGE_ORDER):
        self.entity_types = list(entity_types)
        self._inserted = {t: 0 for t in self.entity_types}
        self._updated = {t: 0 for t in self.entity_types}
        self._dropped = {t: 0 for t in self.entity_types}

    def tally(self, entity_type: str, created: bool) -> None:
        counts = self._inserted if created else self._updated
        counts[entity_type] += 1

    def drop(self, entity_type: str) -> None:
        """Dropped rows are kept apart from the summary lines."""
        self._dropped[entity_type] += 1

    def inserted(self, entity_type: str) -> int:
        return self._inserted[entity_type]

    def updated(self, entity_type: str) -> int:
        return self._updated[entity_type]

    def dropped(self, entity_type: str) -> int:
        return self._dropped[entity_type]

    def lines(self) -> list[str]:
        return [
            f"{t} inserted: {self._inserted[t]}, updated: {self._updated[t]}"
            for t in self.entity_types
        ]

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "entity_type": self.entity_types,
                "inserted": [self._inserted[t] for t in self.entity_types],
                "updated": [self._updated[t] for t in self.entity_types],
                "dropped": [self._dropped[t] for t in self.entity_types],
            }
        )

    def __str__(self) -> str:
        return "\n".join(self.lines())
