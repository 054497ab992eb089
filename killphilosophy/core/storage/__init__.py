from .backend import KeyValueBackend
from .models import Academic, Paper, Event, NoveltyTile, PendingSubmission, normalize_name_key
from .store import PersistentStore, AutoSaver

__all__ = [
    "KeyValueBackend", "Academic", "Paper", "Event", "NoveltyTile",
    "PendingSubmission", "normalize_name_key", "PersistentStore", "AutoSaver"
]
