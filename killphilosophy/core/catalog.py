"""
Main academic catalog interface.

Provides a unified interface for:
- Adding and merging academic records
- Name and taxonomy queries
- Deep-search enrichment
- Favorites, pending submissions and the novelty log
- Export, import and clearing
"""
import json
import logging
from concurrent.futures import Future
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import DATA_DIR, SEED_DATASET, AUTOSAVE_INTERVAL
from .enrichment.orchestrator import EnrichmentOrchestrator, EnrichmentResult
from .enrichment.providers import TextProvider, create_provider
from .merge.merge_engine import MergeEngine, MergeResult
from .query.query_engine import QueryEngine
from .storage.backend import KeyValueBackend
from .storage.models import Academic, NoveltyTile, PendingSubmission, utc_now_iso
from .storage.store import PersistentStore, AutoSaver, parse_academics
from ..visualization.graph_exporter import GraphExporter

logger = logging.getLogger(__name__)


class AcademicCatalog:
    """Main interface for the academic catalog."""

    def __init__(
        self,
        catalog_name: str = "default",
        backend: Optional[KeyValueBackend] = None,
        provider: Optional[TextProvider] = None,
        seed_source: Optional[str] = SEED_DATASET,
        background_seed: bool = True,
        autosave: bool = True
    ):
        """Open (or create) a catalog.

        Args:
            catalog_name: Name of the catalog (used for storage paths)
            backend: Key-value backend; defaults to SQLite under DATA_DIR
            provider: Text provider for deep searches; created on first use
            seed_source: Seed dataset path or URL used while the catalog is empty
            background_seed: Fetch the seed dataset on a worker thread
            autosave: Persist every collection on a fixed interval until close()
        """
        self.catalog_name = catalog_name

        if backend is None:
            self.catalog_dir = Path(DATA_DIR) / catalog_name
            self.catalog_dir.mkdir(parents=True, exist_ok=True)
            backend = KeyValueBackend(str(self.catalog_dir / "catalog.db"))
        else:
            self.catalog_dir = None

        # Initialize components around one shared store
        self.store = PersistentStore(backend)
        self.query_engine = QueryEngine(self.store)
        self.merge_engine = MergeEngine(self.store, self.query_engine)
        self.exporter = GraphExporter(self.store)
        self._provider = provider
        self._orchestrator: Optional[EnrichmentOrchestrator] = None
        self._autosaver: Optional[AutoSaver] = None

        self.seed_future: Optional[Future] = self.store.initialize(seed_source, background=background_seed)
        if autosave:
            self.start_autosave()

    def wait_for_seed(self, timeout: Optional[float] = None) -> bool:
        """Block until the background seed load finishes."""
        if self.seed_future is None:
            return False
        return bool(self.seed_future.result(timeout=timeout))

    # ==================== Records ====================

    def add_or_update_academic(self, academic: Union[Academic, Dict[str, Any]]) -> MergeResult:
        """Add a new academic or merge into the existing record."""
        if isinstance(academic, dict):
            academic = Academic.from_dict(academic)
        return self.merge_engine.add_or_update(academic)

    def get_academic(self, name: str) -> Optional[Academic]:
        return self.query_engine.get_academic(name)

    def get_all_academics(self) -> List[Academic]:
        return self.query_engine.get_all_academics()

    def search_academics(self, criteria: Optional[Dict[str, str]] = None) -> List[Academic]:
        """Filter academics by name and taxonomy fields."""
        return self.query_engine.search_academics(criteria)

    def get_academics_by_connection(self, name: str) -> List[Academic]:
        return self.query_engine.get_academics_by_connection(name)

    def get_network_data(self) -> Dict[str, List[Dict[str, Any]]]:
        return self.exporter.get_network_data()

    # ==================== Enrichment ====================

    @property
    def orchestrator(self) -> EnrichmentOrchestrator:
        if self._orchestrator is None:
            provider = self._provider or create_provider()
            self._orchestrator = EnrichmentOrchestrator(self.merge_engine, provider)
        return self._orchestrator

    def deep_search(self, query: str = '', **options) -> EnrichmentResult:
        """Run a deep search. Raises ProviderError on transport failure."""
        return self.orchestrator.search(query, **options)

    def enrich_database(self, candidate: Optional[Academic]) -> bool:
        return self.orchestrator.enrich_database(candidate)

    # ==================== Taxonomy ====================

    def get_taxonomy_category(self, category: str) -> List[str]:
        return list(self.store.taxonomy_categories.get(category, []))

    def get_all_taxonomy_categories(self) -> Dict[str, List[str]]:
        return {k: list(v) for k, v in self.store.taxonomy_categories.items()}

    # ==================== Favorites ====================

    def add_favorite(self, academic_name: str) -> bool:
        return self.store.add_favorite(academic_name)

    def remove_favorite(self, academic_name: str) -> bool:
        return self.store.remove_favorite(academic_name)

    def get_favorites(self) -> List[str]:
        return list(self.store.favorites)

    # ==================== Pending Submissions ====================

    def add_pending_submission(self, submission: Union[PendingSubmission, Dict[str, Any]]) -> bool:
        if isinstance(submission, dict):
            submission = PendingSubmission.from_dict(submission)
        return self.store.add_pending_submission(submission)

    def get_pending_submissions(self) -> List[PendingSubmission]:
        return list(self.store.pending_submissions)

    def remove_pending_submission(self, index: int) -> bool:
        return self.store.remove_pending_submission(index)

    # ==================== Novelty Tiles ====================

    def add_novelty_tile(self, title: str, content: str = '', type: str = 'system') -> bool:
        return self.store.add_novelty_tile(NoveltyTile.create(title=title, content=content, type=type))

    def get_recent_novelty_tiles(self, limit: int = 10) -> List[NoveltyTile]:
        return self.store.get_recent_novelty_tiles(limit)

    # ==================== Statistics and Export ====================

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        return self.exporter.get_stats()

    def export_to_json(self) -> Optional[str]:
        """Serialize the academics and taxonomy vocabulary."""
        try:
            data = {
                "academics": {k: a.to_dict() for k, a in self.store.academics.items()},
                "taxonomyCategories": self.get_all_taxonomy_categories(),
                "exportDate": utc_now_iso()
            }
            return json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Error exporting database: %s", e)
            return None

    def import_from_json(self, json_data: str) -> bool:
        """Replace the catalog with an export; the previous one is kept on failure."""
        try:
            imported = json.loads(json_data)
        except (TypeError, json.JSONDecodeError) as e:
            logger.error("Error importing database: %s", e)
            return False

        if not isinstance(imported, dict) or not isinstance(imported.get('academics'), dict):
            logger.error("Invalid import data: academics missing or invalid")
            return False

        try:
            academics = parse_academics(imported['academics'])
        except ValueError as e:
            logger.error("Error importing database: %s", e)
            return False

        if not self.store.replace_academics(academics):
            logger.error("Import failed: could not save to store")
            return False

        categories = imported.get('taxonomyCategories')
        if isinstance(categories, dict):
            self.store.taxonomy_categories = {
                str(k): [str(v) for v in values]
                for k, values in categories.items() if isinstance(values, list)
            }

        count = len(imported['academics'])
        self.add_novelty_tile(
            title='Database Import',
            content=f"Database imported with {count} academics.",
            type='system'
        )
        logger.info("Database imported with %d academics", count)
        return True

    def clear_database(self) -> bool:
        """Remove every record, keeping a pre-clear backup of the academics."""
        return self.store.clear()

    # ==================== Lifecycle ====================

    def start_autosave(self, interval: float = AUTOSAVE_INTERVAL):
        if self._autosaver is None:
            self._autosaver = AutoSaver(self.store, interval)
            self._autosaver.start()

    def stop_autosave(self):
        if self._autosaver is not None:
            self._autosaver.stop()
            self._autosaver = None

    def save(self) -> bool:
        return self.store.save()

    def close(self):
        """Stop background work, persist and close the store."""
        self.stop_autosave()
        if self.seed_future is not None:
            self.seed_future.cancel()
        self.store.save()
        self.store.close()
