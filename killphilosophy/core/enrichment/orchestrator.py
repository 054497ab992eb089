"""
Deep search orchestration.

Pipeline:
1. Build the prompt from the query and search options
2. Stream generated text from the provider
3. Extract a candidate Academic from the text
4. On confirmation, merge the candidate into the catalog
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..extraction.academic_extractor import AcademicExtractor
from ..merge.merge_engine import MergeEngine
from ..storage.models import Academic, NoveltyTile
from .prompt import build_prompt
from .providers import TextProvider, create_provider

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentResult:
    """Generated text and the record extracted from it, if any."""
    text: str
    candidate: Optional[Academic] = None
    prompt: str = ''


class EnrichmentOrchestrator:
    """Runs deep searches and feeds their results into the catalog."""

    def __init__(
        self,
        merge_engine: MergeEngine,
        provider: Optional[TextProvider] = None,
        extractor: Optional[AcademicExtractor] = None
    ):
        self.merge = merge_engine
        self.provider = provider or create_provider()
        self.extractor = extractor or AcademicExtractor()

    def search(
        self,
        query: str = '',
        depth: str = 'medium',
        filters: Optional[Dict[str, bool]] = None,
        academic_name1: Optional[str] = None,
        academic_name2: Optional[str] = None,
        stream: bool = True,
        on_chunk: Optional[Callable[[str], None]] = None
    ) -> EnrichmentResult:
        """Run a deep search and extract a candidate record.

        Raises ProviderError when the provider cannot be reached.
        """
        prompt = build_prompt(query, depth, filters, academic_name1, academic_name2)
        logger.info("Running deep search via %s (depth=%s)", self.provider.name, depth)

        text = self.provider.generate(prompt, stream=stream, on_chunk=on_chunk)
        candidate = self.extractor.extract(text)
        if candidate:
            logger.info("Extracted candidate record: %s", candidate.name)
        else:
            logger.info("No academic record found in search result")

        return EnrichmentResult(text=text, candidate=candidate, prompt=prompt)

    def enrich_database(self, candidate: Optional[Academic]) -> bool:
        """Merge a confirmed candidate and log the enrichment."""
        if candidate is None or not candidate.name:
            logger.error("Invalid academic data for database enrichment")
            return False

        result = self.merge.add_or_update(candidate)
        if not result:
            logger.error("Failed to enrich database with %s: %s", candidate.name, result.reason)
            return False

        self.merge.store.add_novelty_tile(NoveltyTile.create(
            title=f"Database Enriched: {candidate.name}",
            content=f"New information about {candidate.name} has been added to the database from DeepSearch.",
            type='academic'
        ))
        logger.info("Database enriched with information about %s", candidate.name)
        return True
