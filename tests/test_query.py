"""
Tests for name lookup and taxonomy search.
"""
import pytest

from killphilosophy.core.query import QueryEngine
from killphilosophy.core.storage.models import Academic


@pytest.fixture
def engine(store):
    for academic in [
        Academic(name="Michel Henry", taxonomies={"discipline": ["Philosophy"], "tradition": ["Phenomenology"]}),
        Academic(name="Michel Foucault", taxonomies={
            "discipline": ["Philosophy", "History"],
            "tradition": ["Post-structuralism"],
        }, connections=["Jacques Derrida"]),
        Academic(name="Foucault", taxonomies={"discipline": ["History"]}),
        Academic(name="Judith Butler", taxonomies={"discipline": ["Gender Studies"]},
                 connections=["Michel Foucault", "Jacques Derrida"]),
        Academic(name="Jacques Derrida", connections=["Michel Foucault"]),
    ]:
        store.academics[academic.key] = academic
    return QueryEngine(store)


def names(results):
    return [a.name for a in results]


class TestGetAcademic:

    def test_by_key(self, engine):
        assert engine.get_academic("michel-foucault").name == "Michel Foucault"

    def test_by_case_insensitive_name(self, engine):
        assert engine.get_academic("JUDITH BUTLER").name == "Judith Butler"

    def test_by_partial_name(self, engine):
        assert engine.get_academic("Butler").name == "Judith Butler"

    def test_query_containing_record_name(self, engine):
        assert engine.get_academic("Professor Judith Butler of Berkeley").name == "Judith Butler"

    def test_unknown(self, engine):
        assert engine.get_academic("Hannah Arendt") is None
        assert engine.get_academic("") is None


class TestSearch:

    def test_exact_name_ranks_first(self, engine):
        assert names(engine.search_academics({"name": "foucault"})) == ["Foucault", "Michel Foucault"]

    def test_full_name_query(self, engine):
        assert names(engine.search_academics({"name": "Michel Foucault"})) == ["Michel Foucault"]

    def test_position_then_alphabetical(self, engine):
        assert names(engine.search_academics({"name": "michel"})) == ["Michel Foucault", "Michel Henry"]

    def test_taxonomy_substring_either_direction(self, engine):
        # value contains criterion
        assert "Michel Foucault" in names(engine.search_academics({"tradition": "structural"}))
        # criterion contains value
        assert names(engine.search_academics({"tradition": "french phenomenology"})) == ["Michel Henry"]

    def test_criteria_combine(self, engine):
        results = engine.search_academics({"name": "michel", "discipline": "history"})
        assert names(results) == ["Michel Foucault"]

    def test_record_without_field_does_not_match(self, engine):
        assert "Jacques Derrida" not in names(engine.search_academics({"discipline": "philosophy"}))

    def test_unknown_criteria_ignored(self, engine):
        assert len(engine.search_academics({"favourite_colour": "blue"})) == 5

    def test_no_criteria_returns_everything(self, engine):
        assert len(engine.search_academics()) == 5


class TestConnections:

    def test_exact_name_membership(self, engine):
        assert names(engine.get_academics_by_connection("Michel Foucault")) == [
            "Judith Butler", "Jacques Derrida"
        ]

    def test_partial_name_does_not_match(self, engine):
        assert engine.get_academics_by_connection("Foucault") == []
