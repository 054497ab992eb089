"""
Data models for the academic catalog.
"""
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from datetime import datetime, timezone
import copy
import re


def normalize_name_key(name: str) -> str:
    """Normalize a display name into a catalog key.

    "Michel Foucault" -> "michel-foucault"
    """
    if not name:
        return ''
    key = re.sub(r'\s+', '-', name.lower())
    # ASCII word chars only, so keys match seed datasets built in the browser
    return re.sub(r'[^\w-]', '', key, flags=re.ASCII)


def utc_now_iso() -> str:
    """Current time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def _coerce_year(value: Any) -> int:
    """Years are ints; 0 means absent."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    text = str(value).strip()
    if text.isdigit():
        return int(text)
    return 0


def _string_list(values: Any) -> List[str]:
    if not isinstance(values, list):
        return []
    return [str(v) for v in values if v is not None]


@dataclass
class Paper:
    """A publication attributed to an academic."""
    title: str
    year: int = 0
    coauthors: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Paper":
        return cls(
            title=str(data.get('title') or ''),
            year=_coerce_year(data.get('year')),
            coauthors=_string_list(data.get('coauthors'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "year": self.year,
            "coauthors": list(self.coauthors)
        }


@dataclass
class Event:
    """A lecture, appointment or other dated appearance."""
    title: str
    year: int = 0
    location: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            title=str(data.get('title') or ''),
            year=_coerce_year(data.get('year')),
            location=str(data.get('location') or '')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "year": self.year,
            "location": self.location
        }


def same_work(a, b) -> bool:
    """Dedup rule shared by papers and events.

    Titles compare case-insensitively; years must be equal unless either
    side has no year.
    """
    if a.title.lower() != b.title.lower():
        return False
    return not a.year or not b.year or a.year == b.year


@dataclass
class Academic:
    """Represents a single academic record in the catalog."""
    name: str
    bio: str = ''
    taxonomies: Dict[str, List[str]] = field(default_factory=dict)
    papers: List[Paper] = field(default_factory=list)
    events: List[Event] = field(default_factory=list)
    connections: List[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return normalize_name_key(self.name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Academic":
        """Build an Academic from its JSON shape, tolerating missing fields."""
        taxonomies = {}
        raw_taxonomies = data.get('taxonomies')
        if isinstance(raw_taxonomies, dict):
            for category, values in raw_taxonomies.items():
                if isinstance(values, str):
                    values = [values]
                taxonomies[str(category)] = _string_list(values)

        return cls(
            name=str(data.get('name') or '').strip(),
            bio=str(data.get('bio') or ''),
            taxonomies=taxonomies,
            papers=[Paper.from_dict(p) for p in data.get('papers') or [] if isinstance(p, dict)],
            events=[Event.from_dict(e) for e in data.get('events') or [] if isinstance(e, dict)],
            connections=_string_list(data.get('connections'))
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "bio": self.bio,
            "taxonomies": {k: list(v) for k, v in self.taxonomies.items()},
            "papers": [p.to_dict() for p in self.papers],
            "events": [e.to_dict() for e in self.events],
            "connections": list(self.connections)
        }

    def copy(self) -> "Academic":
        return copy.deepcopy(self)

    def first_discipline(self) -> Optional[str]:
        disciplines = self.taxonomies.get('discipline') or []
        return disciplines[0] if disciplines else None


@dataclass
class NoveltyTile:
    """An entry in the "what's new" log."""
    title: str
    content: str = ''
    date: str = field(default_factory=utc_now_iso)
    type: str = 'system'  # academic, connection, system

    @classmethod
    def create(cls, title: str, content: str, type: str = 'system') -> "NoveltyTile":
        return cls(title=title, content=content, date=utc_now_iso(), type=type)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NoveltyTile":
        return cls(
            title=str(data.get('title') or ''),
            content=str(data.get('content') or ''),
            date=str(data.get('date') or utc_now_iso()),
            type=str(data.get('type') or 'system')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "date": self.date,
            "type": self.type
        }

    def sort_key(self) -> datetime:
        """Parsed date for newest-first ordering; unparsable dates sort last."""
        try:
            parsed = datetime.fromisoformat(self.date.replace('Z', '+00:00'))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed


def most_recent_tiles(tiles: List[NoveltyTile], limit: int) -> List[NoveltyTile]:
    """Tiles sorted newest first, truncated to limit."""
    return sorted(tiles, key=lambda t: t.sort_key(), reverse=True)[:limit]


@dataclass
class PendingSubmission:
    """A user-contributed change queued for review."""
    academic_name: str
    type: str
    payload: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingSubmission":
        payload = {k: v for k, v in data.items() if k not in ('academicName', 'type')}
        return cls(
            academic_name=str(data.get('academicName') or ''),
            type=str(data.get('type') or ''),
            payload=payload
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.payload)
        data["academicName"] = self.academic_name
        data["type"] = self.type
        return data
