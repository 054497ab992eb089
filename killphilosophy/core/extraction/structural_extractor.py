"""
Heading-based extraction for generated academic profiles.

Each field is described by an ordered list of label patterns. The first
pattern whose capture is non-empty wins and its capture is handed to the
field's setter:
- Name (labelled, bold, or first line without a colon)
- Bio / Biography / About / Background
- Papers / Publications / Major Works
- Events / Key Dates / Timeline
- Connections / Influences / Related Academics
- Taxonomies / Categories / Classifications
"""
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Pattern

from ..config import TAXONOMY_FIELDS
from ..storage.models import Academic, Paper, Event

# Every label that can open a section; captures stop at the next one
_SECTION_LABELS = (
    r'Name|Bio(?:graphy)?|About|Background|Papers|Publications|Major Works|'
    r'Events|Key Dates|Timeline|Connections|Influences|Related Academics|'
    r'Taxonomies|Categories|Classifications'
)

# Section body: lazily up to the next label, a blank line, or the end
_BODY = rf'([\s\S]*?)(?=(?:^|\s)(?:\*\*)?(?:{_SECTION_LABELS}):|\n\s*\n|\Z)'

# Lines continuing a bio, until a blank line or a line opening a section
_BIO_BODY = rf'([^\n]+(?:\n(?!\s*(?:\*\*)?(?:{_SECTION_LABELS})\b[^\n:]*:).+)*)'

_BULLET_SPLIT = re.compile(r'\n\s*[-*•]\s*')
_LEADING_BULLET = re.compile(r'^[-*•]\s*')
_BULLET_LINE = re.compile(r'^\s*[-*•]\s', re.MULTILINE)
_YEAR_PATTERNS = [re.compile(r'\((\d{4})\)'), re.compile(r',\s*(\d{4})')]
_COAUTHORS = re.compile(r'\bwith\s+([^.]+)', re.IGNORECASE)
_COAUTHOR_SPLIT = re.compile(r',|\sand\s')
_LOCATION = re.compile(r',\s*([^,\d]+)$')
_ORDINAL = re.compile(r'^\d+\.\s*')
_TAXONOMY_LINE = re.compile(
    rf'^[-*•\s]*({"|".join(TAXONOMY_FIELDS)})s?[:\s*]+(.+)', re.IGNORECASE
)


@dataclass
class ExtractionRule:
    """Label variants for one field, and how to apply the captured text."""
    field: str
    patterns: List[Pattern]
    setter: Callable[[Academic, str], None]


def first_match(patterns: List[Pattern], text: str) -> Optional[str]:
    """Capture of the first pattern that matches with non-empty content."""
    for pattern in patterns:
        match = pattern.search(text)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return None


def _split_items(body: str) -> List[str]:
    """Split a section body on bullet boundaries."""
    items = []
    for item in _BULLET_SPLIT.split(body):
        item = _LEADING_BULLET.sub('', item.strip()).strip('* ')
        if item:
            items.append(item)
    return items


def parse_year(item: str) -> int:
    """Year from "(YYYY)" or ", YYYY", else 0."""
    for pattern in _YEAR_PATTERNS:
        match = pattern.search(item)
        if match:
            return int(match.group(1))
    return 0


def strip_year(item: str) -> str:
    item = re.sub(r'\(\d{4}\)', '', item, count=1)
    item = re.sub(r',\s*\d{4}', '', item, count=1)
    return re.sub(r'\s{2,}', ' ', item).strip()


class StructuralExtractor:
    """Extract an Academic from labelled sections of free text."""

    NAME_PATTERNS = [
        r'Name:\s*([^\n]+)',
        r'\*\*Name:\*\*\s*([^\n]+)',
        r'^([^:\n]+)$',  # First line without a colon
    ]

    BIO_PATTERNS = [
        rf'Bio(?:graphy)?:[ \t]*{_BIO_BODY}',
        rf'\*\*Bio(?:graphy)?:\*\*[ \t]*{_BIO_BODY}',
        rf'^(?:About|Background):[ \t]*{_BIO_BODY}',
    ]

    PAPER_PATTERNS = [
        rf'Papers(?:\s*/\s*Publications)?:\s*{_BODY}',
        rf'Publications:\s*{_BODY}',
        rf'Major Works:\s*{_BODY}',
    ]

    EVENT_PATTERNS = [
        rf'Events:\s*{_BODY}',
        rf'Key Dates:\s*{_BODY}',
        rf'Timeline:\s*{_BODY}',
    ]

    CONNECTION_PATTERNS = [
        rf'Connections:\s*{_BODY}',
        rf'Influences:\s*{_BODY}',
        rf'Related Academics:\s*{_BODY}',
    ]

    TAXONOMY_PATTERNS = [
        rf'Taxonomies:\s*{_BODY}',
        rf'Categories:\s*{_BODY}',
        rf'Classifications:\s*{_BODY}',
    ]

    def __init__(self):
        def compile_all(patterns):
            return [re.compile(p, re.IGNORECASE | re.MULTILINE) for p in patterns]

        self.name_rule = ExtractionRule('name', compile_all(self.NAME_PATTERNS), self._set_name)
        self.rules = [
            ExtractionRule('bio', compile_all(self.BIO_PATTERNS), self._set_bio),
            ExtractionRule('papers', compile_all(self.PAPER_PATTERNS), self._set_papers),
            ExtractionRule('connections', compile_all(self.CONNECTION_PATTERNS), self._set_connections),
            ExtractionRule('taxonomies', compile_all(self.TAXONOMY_PATTERNS), self._set_taxonomies),
            ExtractionRule('events', compile_all(self.EVENT_PATTERNS), self._set_events),
        ]

    def extract(self, text: str) -> Optional[Academic]:
        """Extract an Academic, or None if no name can be found."""
        academic = Academic(name='')
        captured = first_match(self.name_rule.patterns, text)
        if not captured:
            return None
        self.name_rule.setter(academic, captured)

        for rule in self.rules:
            captured = first_match(rule.patterns, text)
            if captured:
                rule.setter(academic, captured)

        return academic if academic.name else None

    # ==================== Field Setters ====================

    @staticmethod
    def _set_name(academic: Academic, captured: str):
        academic.name = captured.strip().strip('*').strip()

    @staticmethod
    def _set_bio(academic: Academic, captured: str):
        academic.bio = re.sub(r'\n\s*', ' ', captured.strip('* '))

    @staticmethod
    def _set_papers(academic: Academic, captured: str):
        for item in _split_items(captured):
            if item.startswith('Publications:'):
                continue
            year = parse_year(item)
            title = strip_year(item)

            coauthors = []
            match = _COAUTHORS.search(title)
            if match:
                coauthors = [c.strip() for c in _COAUTHOR_SPLIT.split(match.group(1)) if c.strip()]
                title = _COAUTHORS.sub('', title, count=1).strip()

            academic.papers.append(Paper(title=title, year=year, coauthors=coauthors))

    @staticmethod
    def _set_events(academic: Academic, captured: str):
        for item in _split_items(captured):
            if item.startswith('Events:'):
                continue
            year = parse_year(item)

            match = _LOCATION.search(item)
            location = match.group(1).strip() if match else ''

            title = strip_year(item)
            if location:
                title = re.sub(rf',\s*{re.escape(location)}$', '', title).strip()

            academic.events.append(Event(title=title, year=year, location=location))

    @staticmethod
    def _set_connections(academic: Academic, captured: str):
        if _BULLET_LINE.search(captured) or captured.startswith(('-', '*', '•')):
            items = _split_items(captured)
        else:
            items = [c.strip() for c in re.split(r',\s*', captured)]

        for item in items:
            if not item or item.startswith('Connections:'):
                continue
            name = _ORDINAL.sub('', item).strip()
            if name and name not in academic.connections:
                academic.connections.append(name)

    @staticmethod
    def _set_taxonomies(academic: Academic, captured: str):
        for line in captured.split('\n'):
            match = _TAXONOMY_LINE.search(line)
            if not match:
                continue
            category = match.group(1).lower()
            values = academic.taxonomies.setdefault(category, [])
            for value in re.split(r',\s*', match.group(2)):
                value = value.strip()
                if value and value not in values:
                    values.append(value)
