"""
Core Academic Catalog SDK

This module provides the core functionality for storing, querying and
enriching the catalog of academics. It is designed to be used as a
standalone library; the command-line tools are thin wrappers around it.

Usage:
    from killphilosophy.core import AcademicCatalog

    catalog = AcademicCatalog("my_catalog")
    catalog.add_or_update_academic({"name": "Michel Foucault"})
    results = catalog.search_academics({"tradition": "post-structuralism"})
"""

from .catalog import AcademicCatalog
from .config import DATA_DIR, DEEPSEARCH_MODEL, TAXONOMY_FIELDS
from .exceptions import CatalogError, QuotaExceededError, ProviderError

__all__ = [
    'AcademicCatalog',
    'DATA_DIR',
    'DEEPSEARCH_MODEL',
    'TAXONOMY_FIELDS',
    'CatalogError',
    'QuotaExceededError',
    'ProviderError',
]
