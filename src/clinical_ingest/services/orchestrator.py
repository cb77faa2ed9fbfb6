"""
Drive every entity type through the upsert engine in dependency order.

Stages run one after another and rows run one at a time in source order:
the upsert is a read-then-write against the store, so two rows with the
same natural key must never be in flight together.
"""

from __future__ import annotations
import logging
from typing import Iterable, Mapping
from sqlalchemy.orm import Session
from clinical_ingest.core.errors import RowRejected
from clinical_ingest.load.identity import IdentityResolver
from clinical_ingest.load.upsert import UpsertEngine
from clinical_ingest.services.report import ReconciliationReport, STAGE_ORDER
from clinical_ingest.transforms.rejects import RejectLog
from clinical_ingest.transforms.rows import ROW_TYPES, SourceRow

log = logging.getLogger(__name__)

class Orchestrator:
    def __init__(
        self,
        session: Session,
        resolver: IdentityResolver | None = None,
        reject_log: RejectLog | None = None,
    ):
        self.engine = UpsertEngine(session)
        self.resolver = resolver or IdentityResolver()
        self.reject_log = reject_log

    def run(self, sources: Mapping[str, Iterable[dict]]) -> ReconciliationReport:
        report = ReconciliationReport()
        for entity_type in STAGE_ORDER:
            source = sources.get(entity_type)
            if source is None:
                log.warning("%s: no source given, skipping stage", entity_type)
                continue
            self.run_stage(entity_type, source, report)
        return report

    def run_stage(self, entity_type: str, records: Iterable[dict], report: ReconciliationReport) -> None:
        log.info("%s: stage started", entity_type)
        row_type = ROW_TYPES[entity_type]
        for record in records:
            try:
                row = row_type.from_record(record)
                self._ingest(row, report)
            except RowRejected as e:
                self._reject(entity_type, record, e.reason, report)

        dropped = report.dropped(entity_type)
        log.info(
            "%s: inserted=%d, updated=%d, dropped=%d, legacy ids mapped=%d",
            entity_type, report.inserted(entity_type), report.updated(entity_type), dropped,
            self.resolver.known(entity_type),
        )
        if dropped:
            log.warning("%s: %d rows dropped", entity_type, dropped)

    def resolve_references(self, row: SourceRow) -> dict[str, str]:
        refs = {}
        for column, (parent, legacy_id) in row.references().items():
            assigned = self.resolver.resolve(parent, legacy_id)
            if assigned is None:
                raise RowRejected(f"UNRESOLVED_{column.upper()}: {legacy_id!r}")
            refs[column] = assigned
        return refs

    def _ingest(self, row: SourceRow, report: ReconciliationReport) -> None:
        refs = self.resolve_references(row)
        assigned_id, created = self.engine.upsert(
            row.ENTITY,
            row.natural_key(refs),
            row.create_fields(refs),
            row.update_fields(),
            assigned_id=row.assigned_id(),
        )
        self.resolver.record(row.ENTITY, row.legacy_id, assigned_id)
        report.tally(row.ENTITY, created)

    def _reject(self, entity_type: str, record: dict, reason: str, report: ReconciliationReport) -> None:
        log.debug("%s: dropped row (%s): %s", entity_type, reason, record)
        report.drop(entity_type)
        if self.reject_log is not None:
            self.reject_log.add(entity_type, record, reason)
