"""
Read-side queries over the catalog.
"""
from typing import Dict, List, Optional

from ..config import TAXONOMY_FIELDS
from ..storage.models import Academic, normalize_name_key
from ..storage.store import PersistentStore


class QueryEngine:
    """Name lookup and taxonomy filtering over a PersistentStore."""

    def __init__(self, store: PersistentStore):
        self.store = store

    def get_academic(self, name: str) -> Optional[Academic]:
        """Resolve a name to a record.

        Tries, in order: normalized key, case-insensitive exact name, then
        case-insensitive substring in either direction.
        """
        if not name:
            return None

        academics = self.store.academics
        key = normalize_name_key(name)
        if key in academics:
            return academics[key]

        lower_name = name.lower()
        for academic in academics.values():
            if academic.name.lower() == lower_name:
                return academic

        for academic in academics.values():
            candidate = academic.name.lower()
            if lower_name in candidate or candidate in lower_name:
                return academic

        return None

    def get_all_academics(self) -> List[Academic]:
        return list(self.store.academics.values())

    def search_academics(self, criteria: Optional[Dict[str, str]] = None) -> List[Academic]:
        """Filter academics by name and taxonomy criteria.

        All given criteria must match. A taxonomy criterion matches when any of
        the record's values contains it or is contained by it. When a name is
        given, exact matches rank first, then earlier match positions, then
        alphabetical order.
        """
        criteria = criteria or {}
        name_query = (criteria.get('name') or '').lower()
        taxonomy_criteria = {
            field: criteria[field].lower()
            for field in TAXONOMY_FIELDS
            if criteria.get(field)
        }

        results = []
        for academic in self.store.academics.values():
            if name_query and name_query not in academic.name.lower():
                continue
            if all(self._taxonomy_matches(academic, field, value)
                   for field, value in taxonomy_criteria.items()):
                results.append(academic)

        if name_query:
            results.sort(key=lambda a: (
                a.name.lower() != name_query,
                a.name.lower().find(name_query),
                a.name.casefold()
            ))

        return results

    @staticmethod
    def _taxonomy_matches(academic: Academic, field: str, criterion: str) -> bool:
        values = academic.taxonomies.get(field)
        if not values:
            return False
        return any(criterion in v.lower() or v.lower() in criterion for v in values)

    def get_academics_by_connection(self, name: str) -> List[Academic]:
        """Records whose connections list this exact name."""
        if not name:
            return []
        return [a for a in self.store.academics.values() if name in a.connections]
