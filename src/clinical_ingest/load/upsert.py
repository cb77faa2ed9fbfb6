"""
Create-or-update by natural key.
- Exact match on every natural-key column (None matches NULL)
- Match: rewrite the update fields in place
- Miss: insert natural key + create fields
Every call commits on its own.
"""

from __future__ import annotations
import logging
from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from clinical_ingest.models.tables import ENTITY_MODELS

log = logging.getLogger(__name__)

def _primary_key(model) -> str:
    return inspect(model).primary_key[0].key

class UpsertEngine:
    def __init__(self, session: Session, models: dict | None = None):
        self.session = session
        self.models = models or ENTITY_MODELS

    def find(self, entity_type: str, natural_key: dict):
        model = self.models[entity_type]
        stmt = select(model).filter_by(**natural_key).limit(1)
        return self.session.execute(stmt).scalars().first()

    def upsert(
        self,
        entity_type: str,
        natural_key: dict,
        create_fields: dict | None = None,
        update_fields: dict | None = None,
        assigned_id: str | None = None,
    ) -> tuple[str, bool]:
        """Return (store id, was_created). `assigned_id` is used verbatim as the id of a new record."""
        model = self.models[entity_type]
        pk = _primary_key(model)
        try:
            existing = self.find(entity_type, natural_key)
            if existing is not None:
                for col, value in (update_fields or {}).items():
                    setattr(existing, col, value)
                self.session.commit()
                return getattr(existing, pk), False

            values = {**(create_fields or {}), **natural_key}
            if assigned_id:
                values[pk] = assigned_id
            obj = model(**values)
            self.session.add(obj)
            self.session.flush()
            new_id = getattr(obj, pk)
            self.session.commit()
            return new_id, True
        except SQLAlchemyError as e:
            self.session.rollback()
            log.error("%s upsert failed for %s: %s", entity_type, natural_key, e, exc_info=True)
            raise
