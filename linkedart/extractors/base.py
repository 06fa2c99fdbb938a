from typing import Any, Dict, Iterable, List, Optional

from linkedart.analyzer.vocab import PREFERRED, get_term
from linkedart.utils.graph import as_list

NOT_FOUND = "Not found"

AAT = "http://vocab.getty.edu/aat/"

ExtractionResult = Dict[str, List[str]]


def or_not_found(values: Iterable[Optional[str]]) -> List[str]:
    found = [v for v in values if v]
    return found if found else [NOT_FOUND]


def is_found(values: Optional[List[str]]) -> bool:
    return bool(values) and values[0] != NOT_FOUND


def resolve_ids(
    items: Any,
    data_field: str,
    fetcher,
    log_messages
) -> List[str]:
    """
    Preferred terms for every `{"id": ...}` in a property that may hold a
    single object or a list. Unresolvable ids are skipped.
    """
    terms = []

    for item in as_list(items):
        if isinstance(item, dict) and item.get("id"):
            term = get_term(item["id"], data_field, PREFERRED, fetcher, log_messages)
            if term:
                terms.append(term)

    return terms
