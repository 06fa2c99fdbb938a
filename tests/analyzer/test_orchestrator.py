from conftest import FakeFetcher, term

from linkedart.analyzer.orchestrator import analyze_document, analyze_url, parse_url
from linkedart.extractors.base import NOT_FOUND
from linkedart.extractors.production_extractor import MULTIPLE_CREATORS_MESSAGE
from linkedart.models.parsed import EntityNode
from linkedart.services.fetcher import AnalysisCancelled, MemoizedFetcher
from linkedart.utils.uris import NUMERIC_ID_MESSAGE

AAT = "http://vocab.getty.edu/aat/"
URL = "https://example.org/object/1"
TITLE = AAT + "300404670"
HEIGHT = AAT + "300055644"
CM = AAT + "300379098"
ARTIST = "https://example.org/person/1"
PAINTING = AAT + "300033618"


def _object(**extra):
    doc = {
        "@context": "https://linked.art/ns/v1/linked-art.json",
        "id": URL,
        "type": "HumanMadeObject",
        "_label": "Still Life",
        "identified_by": [{"type": "Name", "content": "Still Life", "classified_as": [{"id": TITLE}]}],
        "produced_by": {"type": "Production", "carried_out_by": [{"id": ARTIST, "type": "Person"}]},
        "dimension": [
            {"type": "Dimension", "value": 40, "classified_as": [{"id": HEIGHT}], "unit": {"id": CM}},
            {"type": "Dimension", "value": 55, "classified_as": [{"id": HEIGHT}], "unit": {"id": CM}, "member_of": []},
        ],
    }
    doc.update(extra)
    return doc


def _vocab(**documents):
    base = {
        ARTIST: term("Jane Doe", ARTIST),
        HEIGHT: term("height", HEIGHT),
        CM: term("centimeters", CM),
        PAINTING: term("paintings (visual works)", PAINTING),
    }
    base.update(documents)
    return FakeFetcher(base)


class Raising(FakeFetcher):
    def __init__(self, error: Exception) -> None:
        super().__init__()
        self.error = error

    def __call__(self, url, headers=None):
        self.calls.append((url, dict(headers or {})))
        raise self.error


# --------------------------------------------------
# analyze_document
# --------------------------------------------------

def test_human_made_object_runs_object_extractors() -> None:
    outcome = analyze_document(_object(), URL, _vocab())

    assert outcome["success"] is True
    assert outcome["entity_type"] == "Physical Object"

    results = outcome["results"]
    assert list(results)[:2] == ["Entity Type", "Entity ID"]
    assert results["Entity ID"] == [URL]
    assert results["Title"] == ["Still Life"]
    assert results["Creators"] == ["Jane Doe"]
    assert "CreatorsMessage" not in results
    assert results["Dimensions (Structured)"] == ["height: 40 centimeters; height: 55 centimeters"]
    assert results["IIIF Manifest"] == [NOT_FOUND]
    assert results["Primary Image"] == [NOT_FOUND]
    assert results["All Thumbnails"] == [NOT_FOUND]


def test_person_skips_object_extractors() -> None:
    place = "http://vocab.getty.edu/tgn/7008038"
    person = {"id": ARTIST, "type": "Person", "born_at": {"id": place}}

    results = analyze_document(person, ARTIST, _vocab(**{place: term("Paris", place)}))["results"]

    assert results["Entity Type"] == ["Person"]
    assert results["Birth Place"] == ["Paris"]
    assert "Creators" not in results
    assert "Dimensions (Structured)" not in results
    assert "Title" in results


def test_unknown_type_gets_generic_fields_only() -> None:
    results = analyze_document({"type": "Custom"}, URL, FakeFetcher())["results"]

    assert results["Entity Type"] == ["Custom"]
    assert results["Entity ID"] == [URL]
    assert results["Accession Number"] == [NOT_FOUND]
    assert "Creators" not in results


def test_non_object_document_fails() -> None:
    outcome = analyze_document(["not", "an", "entity"], URL, FakeFetcher())

    assert outcome["success"] is False
    assert outcome["results"] == {}


def test_multiple_creators_message_surfaces_in_results() -> None:
    other = "https://example.org/person/2"
    doc = _object(produced_by={"carried_out_by": [{"id": ARTIST}, {"id": other}]})

    results = analyze_document(doc, URL, _vocab(**{other: term("John Roe", other)}))["results"]

    assert results["CreatorsMessage"] == [MULTIPLE_CREATORS_MESSAGE]


# --------------------------------------------------
# analyze_url
# --------------------------------------------------

def test_analyze_url_fetches_root_and_memoizes_terms() -> None:
    fetcher = _vocab(**{URL: _object()})

    outcome = analyze_url(URL, fetcher)

    assert outcome["success"] is True
    assert outcome["url"] == URL
    assert fetcher.count(URL) == 1
    assert fetcher.count(CM) == 1
    assert fetcher.count(HEIGHT) == 1


def test_analyze_url_expands_numeric_ids() -> None:
    doc = _object(classified_as=[{"id": "aat:300033618", "classified_as": [{"id": "aat:300435443"}]}])
    fetcher = _vocab(**{URL: doc})

    outcome = analyze_url(URL, fetcher)

    assert outcome["results"]["Work Type (Classification)"] == ["paintings (visual works)"]
    assert NUMERIC_ID_MESSAGE in outcome["log_messages"]


def test_analyze_url_root_failure_is_fatal() -> None:
    outcome = analyze_url(URL, FakeFetcher())

    assert outcome == {
        "success": False,
        "error": f"Error fetching data from {URL}: HTTP 404: Error",
        "results": {},
        "log_messages": [],
    }


def test_analyze_url_cancelled() -> None:
    outcome = analyze_url(URL, Raising(AnalysisCancelled()))

    assert outcome["success"] is False
    assert outcome["cancelled"] is True
    assert outcome["error"] == "Request cancelled"


def test_analyze_url_unexpected_error_is_contained() -> None:
    outcome = analyze_url(URL, Raising(RuntimeError("boom")))

    assert outcome["success"] is False
    assert outcome["error"] == "boom"


# --------------------------------------------------
# parse_url
# --------------------------------------------------

def test_parse_url_builds_tree_and_stats() -> None:
    fetcher = _vocab(**{URL: _object()})

    outcome = parse_url(URL, fetcher, max_depth=2, resolve_references=False)

    assert outcome["success"] is True
    assert isinstance(outcome["parsed"], EntityNode)
    assert outcome["parsed"].label == "Still Life"
    assert "@context" not in outcome["parsed"].properties
    assert outcome["stats"]["type"] == "HumanMadeObject"
    assert fetcher.urls() == [URL]


def test_parse_url_failure() -> None:
    outcome = parse_url(URL, FakeFetcher())

    assert outcome["success"] is False
    assert outcome["error"].startswith(f"Error fetching data from {URL}")


# --------------------------------------------------
# MemoizedFetcher
# --------------------------------------------------

def test_memoized_fetcher_caches_successes_per_accept_header() -> None:
    inner = _vocab()
    memo = MemoizedFetcher(inner)

    memo(CM)
    memo(CM)
    memo(CM, {"Accept": "application/json"})
    memo("https://missing.example.org")
    memo("https://missing.example.org")

    assert inner.count(CM) == 2
    assert inner.count("https://missing.example.org") == 2
    assert memo.calls == 4


def test_list_valued_type_dispatches_on_first_type() -> None:
    outcome = analyze_document(_object(type=["HumanMadeObject"]), URL, _vocab())

    assert outcome["success"] is True
    assert outcome["entity_type"] == "Physical Object"
    assert outcome["results"]["Creators"] == ["Jane Doe"]


def test_parse_url_accepts_list_valued_type() -> None:
    fetcher = _vocab(**{URL: _object(type=["HumanMadeObject"])})

    outcome = parse_url(URL, fetcher, max_depth=1, resolve_references=False)

    assert outcome["success"] is True
    assert outcome["parsed"].entity_type == "HumanMadeObject"


def test_parse_url_lists_property_paths() -> None:
    fetcher = _vocab(**{URL: _object()})

    outcome = parse_url(URL, fetcher, max_depth=2, resolve_references=False)

    rows = {row["path"]: row for row in outcome["hierarchy"]}
    assert rows["identified_by"]["is_array"] is True
    assert rows["identified_by[0]"]["entity_type"] == "Name"
    assert "identified_by[0].content" in rows
