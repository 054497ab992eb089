"""
Entity extraction from generated text.

Two passes:
1. Fenced JSON block - taken verbatim when it parses to an object with a name
2. Heading-based parsing of labelled sections (see StructuralExtractor)
"""
import json
import logging
import re
from typing import Optional

from ..storage.models import Academic
from .structural_extractor import StructuralExtractor

logger = logging.getLogger(__name__)

_FENCED_BLOCK = re.compile(r'```(?:json)?\s*([\s\S]*?)```')


class AcademicExtractor:
    """Turn a generated academic profile into a candidate Academic."""

    def __init__(self, structural: Optional[StructuralExtractor] = None):
        self.structural = structural or StructuralExtractor()

    def extract(self, text: str) -> Optional[Academic]:
        """Extract a candidate record, or None when the text names no academic."""
        if not text:
            return None

        academic = self._extract_json(text)
        if academic:
            return academic

        academic = self.structural.extract(text)
        if academic:
            logger.debug("Extracted '%s' from section headings", academic.name)
        return academic

    def _extract_json(self, text: str) -> Optional[Academic]:
        """Parse the first fenced block as a JSON record."""
        match = _FENCED_BLOCK.search(text)
        if not match:
            return None

        try:
            data = json.loads(match.group(1).strip())
        except json.JSONDecodeError as e:
            logger.warning("Error parsing JSON block from result: %s", e)
            return None

        if not isinstance(data, dict):
            return None
        academic = Academic.from_dict(data)
        if not academic.name:
            return None

        logger.debug("Extracted '%s' from JSON block", academic.name)
        return academic
