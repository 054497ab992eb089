"""
Tests for merging candidate records into the catalog.
"""
import pytest

from killphilosophy.core.exceptions import QuotaExceededError
from killphilosophy.core.merge import MergeEngine
from killphilosophy.core.storage.backend import KeyValueBackend
from killphilosophy.core.storage.models import Academic, Paper, Event
from killphilosophy.core.storage.store import PersistentStore


@pytest.fixture
def engine(store):
    return MergeEngine(store)


def _derrida(**overrides):
    data = dict(
        name="Jacques Derrida",
        bio="French philosopher.",
        taxonomies={"discipline": ["Philosophy"]},
        papers=[Paper("Of Grammatology", 1967)],
        connections=[]
    )
    data.update(overrides)
    return Academic(**data)


class TestInsert:

    def test_new_record_is_stored_by_key(self, engine, store):
        result = engine.add_or_update(_derrida())

        assert result
        assert result.created
        assert result.key == "jacques-derrida"
        assert store.academics["jacques-derrida"].name == "Jacques Derrida"
        assert store.novelty_tiles[0].title == "New Academic: Jacques Derrida"
        assert store.novelty_tiles[0].type == 'academic'

    def test_stored_record_is_a_copy(self, engine, store):
        candidate = _derrida()
        engine.add_or_update(candidate)
        candidate.connections.append("Somebody")
        assert store.academics["jacques-derrida"].connections == []

    @pytest.mark.parametrize("candidate", [None, Academic(name=""), Academic(name="   ")])
    def test_missing_name_rejected(self, engine, store, candidate):
        result = engine.add_or_update(candidate)
        assert not result
        assert result.reason == "missing name"
        assert store.academics == {}


class TestFieldMerge:

    def test_merge_is_idempotent(self, engine, store):
        engine.add_or_update(_derrida())
        before = store.academics["jacques-derrida"].to_dict()

        result = engine.add_or_update(_derrida())

        assert result
        assert not result.created
        assert store.academics["jacques-derrida"].to_dict() == before

    def test_duplicate_paper_by_case_insensitive_title(self, engine, store):
        engine.add_or_update(_derrida())
        engine.add_or_update(_derrida(papers=[Paper("of grammatology", 1967)]))

        papers = store.academics["jacques-derrida"].papers
        assert len(papers) == 1
        assert papers[0].title == "Of Grammatology"

    def test_same_title_other_year_is_kept(self, engine, store):
        engine.add_or_update(_derrida())
        engine.add_or_update(_derrida(papers=[Paper("Of Grammatology", 1976)]))
        assert len(store.academics["jacques-derrida"].papers) == 2

    def test_events_deduplicated(self, engine, store):
        engine.add_or_update(_derrida(events=[Event("Johns Hopkins lecture", 1966, "Baltimore")]))
        engine.add_or_update(_derrida(events=[Event("JOHNS HOPKINS LECTURE", 0)]))
        assert len(store.academics["jacques-derrida"].events) == 1

    def test_bio_only_replaced_when_given(self, engine, store):
        engine.add_or_update(_derrida())
        engine.add_or_update(_derrida(bio=""))
        assert store.academics["jacques-derrida"].bio == "French philosopher."

        engine.add_or_update(_derrida(bio="Founder of deconstruction."))
        assert store.academics["jacques-derrida"].bio == "Founder of deconstruction."

    def test_taxonomies_unioned(self, engine, store):
        engine.add_or_update(_derrida())
        engine.add_or_update(_derrida(taxonomies={
            "discipline": ["Philosophy", "Literary Theory"],
            "methodology": ["Deconstruction"]
        }))

        taxonomies = store.academics["jacques-derrida"].taxonomies
        assert taxonomies["discipline"] == ["Philosophy", "Literary Theory"]
        assert taxonomies["methodology"] == ["Deconstruction"]


class TestReciprocalConnections:

    def test_reverse_edge_added(self, engine, store):
        engine.add_or_update(_derrida())
        foucault = Academic(name="Michel Foucault", connections=["Jacques Derrida", "Gilles Deleuze"])

        result = engine.add_or_update(foucault)

        assert result.reciprocal_updates == ["Jacques Derrida"]
        assert store.academics["jacques-derrida"].connections == ["Michel Foucault"]
        titles = [t.title for t in store.novelty_tiles]
        assert "New Connection: Jacques Derrida → Michel Foucault" in titles
        # Unresolved names stay dangling
        assert "gilles-deleuze" not in store.academics

    def test_existing_reverse_edge_not_duplicated(self, engine, store):
        engine.add_or_update(_derrida(connections=["Michel Foucault"]))
        result = engine.add_or_update(Academic(name="Michel Foucault", connections=["Jacques Derrida"]))

        assert result.reciprocal_updates == []
        assert store.academics["jacques-derrida"].connections == ["Michel Foucault"]

    def test_one_hop_only(self, engine, store):
        engine.add_or_update(Academic(name="Edmund Husserl"))
        engine.add_or_update(Academic(name="Martin Heidegger"))
        engine.add_or_update(Academic(name="Hannah Arendt", connections=["Martin Heidegger"]))

        assert store.academics["martin-heidegger"].connections == ["Hannah Arendt"]
        assert store.academics["edmund-husserl"].connections == []

    def test_self_connection_ignored(self, engine, store):
        result = engine.add_or_update(_derrida(connections=["Jacques Derrida"]))
        assert result.reciprocal_updates == []
        assert store.academics["jacques-derrida"].connections == ["Jacques Derrida"]


class FullBackend(KeyValueBackend):
    """Backend that refuses every write once filled."""

    full = False

    def set(self, key, value):
        if self.full:
            raise QuotaExceededError(key, len(value), self.capacity_bytes)
        super().set(key, value)


class TestPersistFailure:

    def test_failed_save_reports_and_keeps_durable_state(self):
        store = PersistentStore(FullBackend(":memory:"))
        engine = MergeEngine(store)
        engine.add_or_update(_derrida())
        tiles_before = len(store.novelty_tiles)

        store.backend.full = True
        result = engine.add_or_update(Academic(name="Michel Foucault"))

        assert not result
        assert result.reason == "persist failed"
        assert set(store.academics) == {"jacques-derrida"}
        assert len(store.novelty_tiles) == tiles_before
        store.close()
