"""
Merge candidate records into the catalog.

A merge is two steps:
1. Insert or update the primary record, then persist
2. For each connection that resolves to another record, add the reverse
   edge if missing and persist (one hop only)
"""
import copy
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from ..storage.models import Academic, NoveltyTile, same_work
from ..storage.store import PersistentStore
from ..query.query_engine import QueryEngine

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of add_or_update. Truthy iff the merge succeeded."""
    success: bool
    reason: str = ''
    key: str = ''
    created: bool = False
    reciprocal_updates: List[str] = field(default_factory=list)

    def __bool__(self):
        return self.success

    @classmethod
    def failure(cls, reason: str, key: str = '') -> "MergeResult":
        return cls(success=False, reason=reason, key=key)


class MergeEngine:
    """Reconciles candidate Academics with the persistent store."""

    def __init__(self, store: PersistentStore, query_engine: Optional[QueryEngine] = None):
        self.store = store
        self.query = query_engine or QueryEngine(store)

    def add_or_update(self, candidate: Optional[Academic]) -> MergeResult:
        """Merge a candidate record and propagate reciprocal connections."""
        if candidate is None or not candidate.name or not candidate.name.strip():
            logger.error("Cannot add academic without a name")
            return MergeResult.failure("missing name")

        key = candidate.key
        with self.store.lock:
            existing = self.store.academics.get(key)
            created = existing is None
            if created:
                self.store.academics[key] = candidate.copy()
            else:
                self._merge_into(existing, candidate)

            if not self.store.save():
                logger.error("Failed to persist academic: %s", candidate.name)
                return MergeResult.failure("persist failed", key=key)

            if created:
                self.store.add_novelty_tile(NoveltyTile.create(
                    title=f"New Academic: {candidate.name}",
                    content=f"{candidate.name} has been added to the database.",
                    type='academic'
                ))

            updates = self._propagate_reciprocal(key, candidate)

        logger.info("Successfully %s academic: %s", 'added' if created else 'updated', candidate.name)
        return MergeResult(success=True, key=key, created=created, reciprocal_updates=updates)

    @staticmethod
    def _merge_into(existing: Academic, candidate: Academic):
        """Field-level merge; only bio is ever overwritten."""
        if candidate.bio and candidate.bio != existing.bio:
            existing.bio = candidate.bio

        for category, values in candidate.taxonomies.items():
            current = existing.taxonomies.setdefault(category, [])
            for value in values:
                if value not in current:
                    current.append(value)

        for paper in candidate.papers:
            if not any(same_work(p, paper) for p in existing.papers):
                existing.papers.append(copy.deepcopy(paper))

        for event in candidate.events:
            if not any(same_work(e, event) for e in existing.events):
                existing.events.append(copy.deepcopy(event))

        for connection in candidate.connections:
            if connection not in existing.connections:
                existing.connections.append(connection)

    def _propagate_reciprocal(self, key: str, candidate: Academic) -> List[str]:
        """Add the candidate's name to each resolved connection, one hop."""
        updated = []
        for connection in candidate.connections:
            target = self.query.get_academic(connection)
            if target is None or target.key == key:
                continue
            if candidate.name in target.connections:
                continue

            target.connections.append(candidate.name)
            if not self.store.save():
                logger.error("Failed to persist reciprocal connection %s -> %s",
                             target.name, candidate.name)
                continue

            updated.append(target.name)
            self.store.add_novelty_tile(NoveltyTile.create(
                title=f"New Connection: {target.name} → {candidate.name}",
                content=f"A connection between {target.name} and {candidate.name} has been established.",
                type='connection'
            ))
        return updated
