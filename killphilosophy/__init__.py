"""
KillPhilosophy Academic Catalog

This package provides tools for cataloguing academics, searching them by
name and taxonomy, enriching records from a deep-search text provider, and
exporting the connection graph for visualization.

Architecture:
    killphilosophy/core/           - Core SDK (storage, extraction, merge, query, enrichment)
    killphilosophy/cli/            - Command-line tools
    killphilosophy/visualization/  - Graph visualization export
    killphilosophy/utils/          - Logging setup

Usage:
    from killphilosophy import AcademicCatalog
    catalog = AcademicCatalog("my_catalog")
"""

from .core import AcademicCatalog
from .core.config import DATA_DIR, TAXONOMY_FIELDS

__all__ = [
    'AcademicCatalog',
    'DATA_DIR',
    'TAXONOMY_FIELDS',
]
