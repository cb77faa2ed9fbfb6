"""
Run-scoped lookup of source (legacy) identifiers to store-assigned identifiers.
"""

from __future__ import annotations
import logging
from collections import defaultdict

log = logging.getLogger(__name__)

class IdentityResolver:
    """One mapping per entity type. Nothing here is persisted."""

    def __init__(self):
        self._maps: dict[str, dict[str, str]] = defaultdict(dict)

    def record(self, entity_type: str, legacy_id: str | None, assigned_id: str) -> None:
        if not legacy_id:
            return
        previous = self._maps[entity_type].get(legacy_id)
        if previous is not None and previous != assigned_id:
            log.debug("%s legacy id %s remapped %s -> %s", entity_type, legacy_id, previous, assigned_id)
        self._maps[entity_type][legacy_id] = assigned_id

    def resolve(self, entity_type: str, legacy_id: str | None) -> str | None:
        """Assigned id, or None when the reference is unresolvable."""
        if not legacy_id:
            return None
        return self._maps.get(entity_type, {}).get(legacy_id)

    def known(self, entity_type: str) -> int:
        return len(self._maps.get(entity_type, {}))
