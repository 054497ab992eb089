"""
Tests for the command-line tools against a catalog in a temp data dir.
"""
import csv
import json

import pytest

from killphilosophy import AcademicCatalog
from killphilosophy.cli import enrich, export, query

from conftest import DERRIDA_TEXT, FakeProvider


@pytest.fixture
def catalog_name(tmp_path, monkeypatch, seed_file):
    monkeypatch.setattr('killphilosophy.core.catalog.DATA_DIR', tmp_path / "data")
    catalog = AcademicCatalog("cli", seed_source=seed_file, background_seed=False, autosave=False)
    catalog.close()
    return "cli"


class TestQueryCli:

    def test_search(self, catalog_name, capsys):
        assert query.main(["--catalog", catalog_name, "--search", "Michel"]) == 0
        out = capsys.readouterr().out
        assert "Search results (2 found)" in out
        assert out.index("Michel Foucault") < out.index("Michel Henry")

    def test_taxonomy_filter(self, catalog_name, capsys):
        query.main(["--catalog", catalog_name, "--discipline", "gender"])
        assert "[Gender Studies] Judith Butler" in capsys.readouterr().out

    def test_get(self, catalog_name, capsys):
        query.main(["--catalog", catalog_name, "--get", "derrida"])
        out = capsys.readouterr().out
        assert "Jacques Derrida" in out
        assert "Of Grammatology (1967)" in out

    def test_favorites_persist(self, catalog_name, capsys):
        query.main(["--catalog", catalog_name, "--add-favorite", "Michel Henry"])
        query.main(["--catalog", catalog_name, "--favorites"])
        assert "  - Michel Henry" in capsys.readouterr().out


class TestExportCli:

    def test_json_export(self, catalog_name, tmp_path):
        output = tmp_path / "catalog.json"
        assert export.main(["--catalog", catalog_name, "--output", str(output)]) == 0
        data = json.loads(output.read_text(encoding='utf-8'))
        assert len(data["academics"]) == 4

    def test_csv_connections_flag_dangling(self, catalog_name, tmp_path):
        output = tmp_path / "connections.csv"
        export.main(["--catalog", catalog_name, "--format", "csv-connections", "--output", str(output)])

        with open(output, newline='', encoding='utf-8') as f:
            rows = list(csv.DictReader(f))
        dangling = [r['target'] for r in rows if r['target_in_catalog'] == 'False']
        assert dangling == ["Gilles Deleuze"]

    def test_import_then_clear(self, catalog_name, tmp_path, capsys):
        source = tmp_path / "import.json"
        source.write_text(json.dumps({"academics": {"x": {"name": "Hannah Arendt"}}}), encoding='utf-8')

        assert export.main(["--catalog", catalog_name, "--import", str(source)]) == 0
        assert "Academics: 1" in capsys.readouterr().out

        assert export.main(["--catalog", catalog_name, "--clear"]) == 0
        assert "Catalog cleared" in capsys.readouterr().out

    def test_missing_import_file(self, catalog_name, tmp_path):
        assert export.main(["--catalog", catalog_name, "--import", str(tmp_path / "nope.json")]) == 1

    def test_nothing_to_do(self, capsys):
        assert export.main([]) == 1


def _paper_titles(catalog_name, academic_name):
    catalog = AcademicCatalog(catalog_name, seed_source=None, background_seed=False, autosave=False)
    try:
        return [p.title for p in catalog.get_academic(academic_name).papers]
    finally:
        catalog.close()


class TestEnrichCli:

    @pytest.fixture
    def provider(self, monkeypatch):
        provider = FakeProvider(chunks=[DERRIDA_TEXT])
        monkeypatch.setattr('killphilosophy.cli.enrich.create_provider', lambda name=None: provider)
        return provider

    def test_confirmed_with_yes(self, catalog_name, provider, capsys):
        code = enrich.main(["--catalog", catalog_name, "--academic", "Jacques Derrida", "--yes"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Name: Jacques Derrida" in out
        assert "Database enriched with information about Jacques Derrida" in out
        assert provider.prompts[0].startswith("Provide detailed information about Jacques Derrida")
        assert "Writing and Difference" in _paper_titles(catalog_name, "Jacques Derrida")

    def test_prompt_closed_saves_nothing(self, catalog_name, provider, monkeypatch, capsys):
        def closed_stdin(prompt=''):
            raise EOFError

        monkeypatch.setattr('builtins.input', closed_stdin)

        assert enrich.main(["--catalog", catalog_name, "--academic", "Jacques Derrida"]) == 0
        assert "Not saved." in capsys.readouterr().out
        assert _paper_titles(catalog_name, "Jacques Derrida") == ["Of Grammatology"]

    def test_no_query(self, capsys):
        assert enrich.main([]) == 1
