"""
Persistent store for the academic catalog.

Holds the in-memory collections (academics, novelty tiles, favorites, pending
submissions) and persists them through a KeyValueBackend.

Write discipline:
1. Copy the currently persisted academics value to the backup slot
2. Write every collection
3. Read academics back and parse it; restore from backup if that fails
4. On a quota error, trim novelty tiles once and retry the academics write
"""
import json
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict, List, Optional

from .backend import KeyValueBackend
from .models import (
    Academic, NoveltyTile, PendingSubmission, Paper, Event,
    normalize_name_key, most_recent_tiles
)
from .seed import fetch_seed_dataset
from ..config import (
    ACADEMICS_KEY, NOVELTY_TILES_KEY, FAVORITES_KEY, PENDING_SUBMISSIONS_KEY,
    ACADEMICS_BACKUP_KEY, PRE_CLEAR_BACKUP_KEY, AUTOSAVE_INTERVAL,
    MAX_NOVELTY_TILES, PERSISTED_NOVELTY_TILES, TRIMMED_NOVELTY_TILES,
    DEFAULT_TAXONOMY_CATEGORIES
)
from ..exceptions import QuotaExceededError

logger = logging.getLogger(__name__)


def parse_academics(data: Any) -> Dict[str, Academic]:
    """Convert a {key: record} mapping into Academic objects.

    Records are re-keyed by their normalized name; records without a name are
    dropped. Raises ValueError if data is not a mapping.
    """
    if not isinstance(data, dict):
        raise ValueError("academics collection is not a JSON object")

    academics = {}
    for stored_key, record in data.items():
        if not isinstance(record, dict):
            logger.warning("Skipping academic '%s': not an object", stored_key)
            continue
        academic = Academic.from_dict(record)
        if not academic.name:
            logger.warning("Skipping academic '%s': missing name", stored_key)
            continue
        key = academic.key
        if key in academics:
            logger.warning("Skipping duplicate academic key '%s'", key)
            continue
        academics[key] = academic
    return academics


def placeholder_academic() -> Academic:
    """Sample record installed when nothing could be loaded."""
    return Academic(
        name="Sample Academic",
        bio="This is a sample academic entry.",
        taxonomies={
            "discipline": ["Philosophy"],
            "tradition": ["Critical Theory"],
            "era": ["Contemporary"],
            "methodology": ["Textual Analysis"],
            "theme": ["Power"]
        },
        papers=[Paper(title="Sample Paper", year=2020)],
        events=[Event(title="Sample Event", year=2021, location="Virtual Conference")],
        connections=["Jacques Derrida", "Michel Foucault"]
    )


class PersistentStore:
    """In-memory catalog collections backed by a bounded key-value store."""

    def __init__(self, backend: KeyValueBackend):
        self.backend = backend
        self.academics: Dict[str, Academic] = {}
        self.novelty_tiles: List[NoveltyTile] = []
        self.favorites: List[str] = []
        self.pending_submissions: List[PendingSubmission] = []
        self.taxonomy_categories: Dict[str, List[str]] = {
            k: list(v) for k, v in DEFAULT_TAXONOMY_CATEGORIES.items()
        }

        # Serializes the caller, the auto-save timer and the seed loader
        self.lock = threading.RLock()
        self._executor: Optional[ThreadPoolExecutor] = None

    # ==================== Serialization ====================

    def _serialize_academics(self) -> str:
        return json.dumps({k: a.to_dict() for k, a in self.academics.items()}, ensure_ascii=False)

    def _serialize_tiles(self, tiles: List[NoveltyTile]) -> str:
        return json.dumps([t.to_dict() for t in tiles], ensure_ascii=False)

    # ==================== Write Path ====================

    def save(self) -> bool:
        """Persist all collections. Returns True if the catalog is durable."""
        with self.lock:
            try:
                self._create_backup()
                self._write_all()
            except QuotaExceededError as e:
                logger.warning("Store quota exceeded (%s), attempting to free space", e)
                return self._recover_from_quota()

            if not self._verify_academics():
                self._restore_from_backup()
                return False
            return True

    def _write_all(self):
        self.backend.set(ACADEMICS_KEY, self._serialize_academics())
        recent = most_recent_tiles(self.novelty_tiles, PERSISTED_NOVELTY_TILES)
        self.backend.set(NOVELTY_TILES_KEY, self._serialize_tiles(recent))
        self.backend.set(FAVORITES_KEY, json.dumps(self.favorites, ensure_ascii=False))
        self.backend.set(
            PENDING_SUBMISSIONS_KEY,
            json.dumps([s.to_dict() for s in self.pending_submissions], ensure_ascii=False)
        )

    def _create_backup(self):
        """Copy the persisted academics value into the single backup slot."""
        current = self.backend.get(ACADEMICS_KEY)
        if current is not None:
            self.backend.set(ACADEMICS_BACKUP_KEY, current)

    def _verify_academics(self) -> bool:
        """Read academics back and confirm it parses to an object."""
        saved = self.backend.get(ACADEMICS_KEY)
        if saved is None:
            logger.error("Verification failed: academics not saved")
            return False
        try:
            parsed = json.loads(saved)
        except json.JSONDecodeError as e:
            logger.error("Verification failed: academics not parseable: %s", e)
            return False
        if not isinstance(parsed, dict):
            logger.error("Verification failed: academics is not an object")
            return False
        return True

    def _restore_from_backup(self) -> bool:
        """Reinstate the backup slot in both memory and the primary slot."""
        backup = self.backend.get(ACADEMICS_BACKUP_KEY)
        if backup is None:
            logger.error("No backup found to restore, resetting academics")
            self.backend.remove(ACADEMICS_KEY)
            self.academics = {}
            return False

        try:
            self.academics = parse_academics(json.loads(backup))
            self.backend.set(ACADEMICS_KEY, backup)
        except (ValueError, QuotaExceededError) as e:
            logger.error("Error restoring from backup: %s", e)
            return False

        logger.info("Database restored from backup")
        return True

    def _recover_from_quota(self) -> bool:
        """Trim novelty tiles and retry the academics write once."""
        try:
            if len(self.novelty_tiles) > TRIMMED_NOVELTY_TILES:
                logger.warning("Trimming novelty tiles to save space")
                self.novelty_tiles = most_recent_tiles(self.novelty_tiles, TRIMMED_NOVELTY_TILES)
                self.backend.set(NOVELTY_TILES_KEY, self._serialize_tiles(self.novelty_tiles))

            self.backend.set(ACADEMICS_KEY, self._serialize_academics())
        except QuotaExceededError as e:
            logger.error("Error in fallback save operation: %s", e)
            self._reload_durable_academics()
            return False

        if not self._verify_academics():
            self._restore_from_backup()
            return False

        logger.info("Successfully saved academics after freeing space")
        return True

    def _reload_durable_academics(self):
        """Bring memory back in line with the last durable academics value."""
        saved = self.backend.get(ACADEMICS_KEY)
        if saved is None:
            self.academics = {}
            return
        try:
            self.academics = parse_academics(json.loads(saved))
        except ValueError as e:
            logger.error("Durable academics unreadable, restoring backup: %s", e)
            self._restore_from_backup()

    # ==================== Load Path ====================

    def load(self) -> bool:
        """Load every collection independently.

        Returns True if at least one academic was loaded.
        """
        with self.lock:
            loaded = False

            academics = self._load_collection(ACADEMICS_KEY, parse_academics)
            if academics:
                self.academics = academics
                logger.info("Loaded %d academics from store", len(academics))
                loaded = True

            tiles = self._load_collection(NOVELTY_TILES_KEY, self._parse_tiles)
            if tiles is not None:
                self.novelty_tiles = tiles
                logger.debug("Loaded %d novelty tiles from store", len(tiles))

            favorites = self._load_collection(FAVORITES_KEY, self._parse_favorites)
            if favorites is not None:
                self.favorites = favorites

            pending = self._load_collection(PENDING_SUBMISSIONS_KEY, self._parse_submissions)
            if pending is not None:
                self.pending_submissions = pending

            return loaded

    def _load_collection(self, key: str, parser):
        raw = self.backend.get(key)
        if raw is None:
            return None
        try:
            return parser(json.loads(raw))
        except (ValueError, TypeError, AttributeError) as e:
            logger.error("Error parsing %s from store: %s", key, e)
            return None

    @staticmethod
    def _parse_tiles(data: Any) -> List[NoveltyTile]:
        if not isinstance(data, list):
            raise ValueError("novelty tiles is not a list")
        return [NoveltyTile.from_dict(t) for t in data if isinstance(t, dict)]

    @staticmethod
    def _parse_favorites(data: Any) -> List[str]:
        if not isinstance(data, list):
            raise ValueError("favorites is not a list")
        return [str(f) for f in data]

    @staticmethod
    def _parse_submissions(data: Any) -> List[PendingSubmission]:
        if not isinstance(data, list):
            raise ValueError("pending submissions is not a list")
        return [PendingSubmission.from_dict(s) for s in data if isinstance(s, dict)]

    # ==================== Bootstrap ====================

    def initialize(self, seed_source: Optional[str] = None, background: bool = True) -> Optional[Future]:
        """Load persisted state, falling back to a placeholder and seed dataset.

        Returns the seed-loading future when the seed is fetched in the
        background, else None.
        """
        if not self.load():
            logger.info("Initializing store with default data...")
            with self.lock:
                placeholder = placeholder_academic()
                self.academics = {placeholder.key: placeholder}
                self.save()

        # A catalog holding at most the placeholder is still waiting for its seed
        if not seed_source or len(self.academics) > 1:
            return None
        if not background:
            self.load_seed(seed_source)
            return None

        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="seed")
        return self._executor.submit(self.load_seed, seed_source)

    def load_seed(self, seed_source: str) -> bool:
        """Replace the catalog with the seed dataset if it is non-empty."""
        try:
            data = fetch_seed_dataset(seed_source)
            academics = parse_academics(data)
        except Exception as e:
            logger.info("Could not load seed dataset %s: %s", seed_source, e)
            return False

        if not academics:
            logger.info("Seed dataset %s is empty, keeping default data", seed_source)
            return False

        with self.lock:
            self.academics = academics
            saved = self.save()
            logger.info("Loaded %d academics from %s", len(academics), seed_source)
            self.add_novelty_tile(NoveltyTile.create(
                title='Database Loaded',
                content=f"{len(academics)} academics loaded from source data.",
                type='system'
            ))
        return saved

    # ==================== Novelty Tiles ====================

    def add_novelty_tile(self, tile: NoveltyTile) -> bool:
        """Prepend a novelty tile and persist."""
        if tile is None or not tile.title:
            logger.error("Cannot add novelty tile without a title")
            return False

        with self.lock:
            self.novelty_tiles.insert(0, tile)
            if len(self.novelty_tiles) > MAX_NOVELTY_TILES:
                self.novelty_tiles = self.novelty_tiles[:MAX_NOVELTY_TILES]
            self.save()
        logger.debug("Added novelty tile: %s", tile.title)
        return True

    def get_recent_novelty_tiles(self, limit: int = 10) -> List[NoveltyTile]:
        return most_recent_tiles(self.novelty_tiles, limit)

    # ==================== Favorites ====================

    def add_favorite(self, academic_name: str) -> bool:
        if not academic_name:
            return False
        with self.lock:
            if academic_name not in self.favorites:
                self.favorites.append(academic_name)
                self.save()
                logger.info("Added %s to favorites", academic_name)
        return True

    def remove_favorite(self, academic_name: str) -> bool:
        if not academic_name:
            return False
        with self.lock:
            if academic_name in self.favorites:
                self.favorites.remove(academic_name)
                self.save()
                logger.info("Removed %s from favorites", academic_name)
        return True

    # ==================== Pending Submissions ====================

    def add_pending_submission(self, submission: PendingSubmission) -> bool:
        if submission is None or not submission.academic_name or not submission.type:
            logger.error("Invalid submission data")
            return False
        with self.lock:
            self.pending_submissions.append(submission)
            self.save()
        return True

    def remove_pending_submission(self, index: int) -> bool:
        if index < 0 or index >= len(self.pending_submissions):
            logger.error("Invalid submission index %d", index)
            return False
        with self.lock:
            del self.pending_submissions[index]
            self.save()
        return True

    # ==================== Bulk Operations ====================

    def replace_academics(self, academics: Dict[str, Academic]) -> bool:
        """Swap in a whole catalog, keeping the previous one if saving fails."""
        with self.lock:
            previous = self.academics
            self.academics = academics
            if not self.save():
                self.academics = previous
                logger.error("Replacing catalog failed: could not save to store")
                return False
            return True

    def clear(self) -> bool:
        """Drop every collection, keeping a pre-clear copy of the academics."""
        with self.lock:
            try:
                self.backend.set(PRE_CLEAR_BACKUP_KEY, self._serialize_academics())
            except QuotaExceededError as e:
                logger.error("Error writing pre-clear backup: %s", e)
                return False

            self.academics = {}
            self.novelty_tiles = []
            self.favorites = []
            self.pending_submissions = []
            self.save()
        logger.info("Database cleared successfully")
        return True

    def find_key(self, name: str) -> Optional[str]:
        key = normalize_name_key(name)
        return key if key in self.academics else None

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self.backend.close()


class AutoSaver:
    """Persists the store on a fixed interval, regardless of changes."""

    def __init__(self, store: PersistentStore, interval: float = AUTOSAVE_INTERVAL):
        self.store = store
        self.interval = interval
        self._timer: Optional[threading.Timer] = None
        self._stopped = threading.Event()

    def start(self):
        self._stopped.clear()
        self._schedule()

    def _schedule(self):
        if self._stopped.is_set():
            return
        self._timer = threading.Timer(self.interval, self._run)
        self._timer.daemon = True
        self._timer.start()

    def _run(self):
        logger.debug("Auto-saving store")
        self.store.save()
        self._schedule()

    def stop(self):
        self._stopped.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
