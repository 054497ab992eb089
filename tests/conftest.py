"""
Shared fixtures for catalog tests.
"""
import json

import pytest

from killphilosophy.core.catalog import AcademicCatalog
from killphilosophy.core.enrichment.providers import TextProvider
from killphilosophy.core.storage.backend import KeyValueBackend
from killphilosophy.core.storage.store import PersistentStore


DERRIDA_TEXT = """Name: Jacques Derrida
Bio: French philosopher known for deconstruction.
Papers:
- Of Grammatology (1967)
- Writing and Difference, 1967
Connections:
- Michel Foucault
- Emmanuel Levinas
"""

SEED_ACADEMICS = {
    "michel-foucault": {
        "name": "Michel Foucault",
        "bio": "French historian of ideas.",
        "taxonomies": {
            "discipline": ["Philosophy", "History"],
            "tradition": ["Post-structuralism"],
            "era": ["20th Century"],
            "theme": ["Power", "Knowledge"]
        },
        "papers": [{"title": "Discipline and Punish", "year": 1975, "coauthors": []}],
        "events": [{"title": "Collège de France appointment", "year": 1970, "location": "Paris"}],
        "connections": ["Jacques Derrida", "Gilles Deleuze"]
    },
    "jacques-derrida": {
        "name": "Jacques Derrida",
        "bio": "Founder of deconstruction.",
        "taxonomies": {
            "discipline": ["Philosophy"],
            "tradition": ["Post-structuralism"],
            "methodology": ["Deconstruction"]
        },
        "papers": [{"title": "Of Grammatology", "year": 1967, "coauthors": []}],
        "events": [],
        "connections": ["Michel Foucault"]
    },
    "michel-henry": {
        "name": "Michel Henry",
        "bio": "Phenomenologist of life.",
        "taxonomies": {"discipline": ["Philosophy"], "tradition": ["Phenomenology"]},
        "papers": [],
        "events": [],
        "connections": []
    },
    "judith-butler": {
        "name": "Judith Butler",
        "bio": "Theorist of gender performativity.",
        "taxonomies": {
            "discipline": ["Gender Studies", "Philosophy"],
            "tradition": ["Post-structuralism"],
            "theme": ["Identity"]
        },
        "papers": [{"title": "Gender Trouble", "year": 1990, "coauthors": []}],
        "events": [],
        "connections": ["Michel Foucault"]
    }
}


class FakeProvider(TextProvider):
    """Provider returning canned chunks, recording the prompts it was sent."""

    name = 'fake'

    def __init__(self, chunks=None, error=None):
        self.chunks = list(chunks or [])
        self.error = error
        self.prompts = []

    def generate(self, prompt, stream=True, on_chunk=None):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        for chunk in self.chunks:
            if on_chunk:
                on_chunk(chunk)
        return ''.join(self.chunks)


@pytest.fixture
def backend():
    backend = KeyValueBackend(":memory:")
    yield backend
    backend.close()


@pytest.fixture
def store(backend):
    return PersistentStore(backend)


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "academics.json"
    path.write_text(json.dumps(SEED_ACADEMICS), encoding='utf-8')
    return str(path)


@pytest.fixture
def fake_provider():
    return FakeProvider(chunks=[DERRIDA_TEXT[:40], DERRIDA_TEXT[40:]])


@pytest.fixture
def catalog(fake_provider):
    """Empty catalog holding only the placeholder record."""
    catalog = AcademicCatalog(
        backend=KeyValueBackend(":memory:"),
        provider=fake_provider,
        seed_source=None,
        autosave=False
    )
    yield catalog
    catalog.close()


@pytest.fixture
def populated_catalog(fake_provider, seed_file):
    """Catalog bootstrapped from the seed dataset."""
    catalog = AcademicCatalog(
        backend=KeyValueBackend(":memory:"),
        provider=fake_provider,
        seed_source=seed_file,
        background_seed=False,
        autosave=False
    )
    yield catalog
    catalog.close()
