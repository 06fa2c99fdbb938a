import yaml
from conftest import FakeFetcher, term

from linkedart import cli
from linkedart.services.fetcher import AnalysisCancelled

URL = "https://example.org/object/1"
TITLE = "http://vocab.getty.edu/aat/300404670"
ARTIST = "https://example.org/person/1"

DOCUMENT = {
    "@context": "https://linked.art/ns/v1/linked-art.json",
    "id": URL,
    "type": "HumanMadeObject",
    "_label": "Still Life",
    "identified_by": [{"type": "Name", "content": "Still Life", "classified_as": [{"id": TITLE}]}],
    "produced_by": {"type": "Production", "carried_out_by": [{"id": ARTIST}]},
}


class CliFetcher(FakeFetcher):
    timeout = 1

    def cancel(self) -> None:
        pass


def _install(monkeypatch, fetcher) -> None:
    monkeypatch.setattr(cli, "HttpFetcher", lambda: fetcher)


def test_prints_fields_and_structure(monkeypatch, capsys) -> None:
    _install(monkeypatch, CliFetcher({URL: DOCUMENT, ARTIST: term("Jane Doe", ARTIST)}))

    assert cli.main([URL, "--depth", "2"]) == 0

    out = capsys.readouterr().out
    assert "Max recursion depth: 2" in out
    assert "Title: Still Life" in out
    assert "Creators: Jane Doe" in out
    assert "COMPLETE STRUCTURE" in out
    assert "Entity Type: HumanMadeObject" in out


def test_save_writes_parsed_tree_as_yaml(monkeypatch, tmp_path) -> None:
    _install(monkeypatch, CliFetcher({URL: DOCUMENT}))
    target = tmp_path / "tree.yaml"

    assert cli.main([URL, "--no-resolve", "--save", str(target)]) == 0

    saved = yaml.safe_load(target.read_text(encoding="utf-8"))
    assert saved["type"] == "entity"
    assert saved["id"] == URL
    assert saved["label"] == "Still Life"
    assert "@context" not in saved["properties"]


def test_fetch_failure_exits_with_error(monkeypatch, capsys) -> None:
    _install(monkeypatch, CliFetcher())

    assert cli.main([URL]) == cli.EXIT_ERROR
    assert f"Error fetching data from {URL}" in capsys.readouterr().err


def test_cancelled_run_exits_130(monkeypatch) -> None:
    class Cancelled(CliFetcher):
        def __call__(self, url, headers=None):
            raise AnalysisCancelled()

    _install(monkeypatch, Cancelled())

    assert cli.main([URL]) == cli.EXIT_CANCELLED == 130


def test_log_summary_without_flag(monkeypatch, capsys) -> None:
    # unresolvable creator produces a log message
    _install(monkeypatch, CliFetcher({URL: DOCUMENT}))

    assert cli.main([URL, "--no-resolve"]) == 0

    assert "issue(s) logged. Use --log to view details." in capsys.readouterr().out


def test_path_prints_a_single_value(monkeypatch, capsys) -> None:
    _install(monkeypatch, CliFetcher({URL: DOCUMENT}))

    assert cli.main([URL, "--no-resolve", "--path", "identified_by[0].content"]) == 0

    out = capsys.readouterr().out
    assert "PATH: identified_by[0].content" in out
    assert '"Still Life"' in out
    assert "COMPLETE STRUCTURE" not in out


def test_missing_path(monkeypatch, capsys) -> None:
    _install(monkeypatch, CliFetcher({URL: DOCUMENT}))

    assert cli.main([URL, "--no-resolve", "--path", "dimension[0]"]) == 0

    assert "(no value at this path)" in capsys.readouterr().out
