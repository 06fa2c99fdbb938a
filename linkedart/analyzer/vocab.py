import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, TypeVar

from linkedart.services.fetcher import FetchError

logger = logging.getLogger(__name__)

PREFERRED_TERM_URI = "http://vocab.getty.edu/aat/300404670"

PREFERRED = "preferred"
ALTERNATIVE = "alternative"

# Tried in this order: bare request, then JSON-LD, then plain JSON.
REQUEST_VARIANTS: Tuple[Dict[str, str], ...] = (
    {},
    {"Accept": "application/ld+json"},
    {"Accept": "application/json"},
)

T = TypeVar("T")
V = TypeVar("V")


@dataclass
class LabelFallback:
    """Term taken from the entity's own label instead of a preferred name."""
    label: str
    source: str


# --------------------------------------------------
# Retry combinator
# --------------------------------------------------

def try_in_order(
    variants: Iterable[V],
    attempt: Callable[[V], Optional[T]],
    is_acceptable: Callable[[Optional[T]], bool] = lambda result: result is not None
) -> Optional[T]:
    """
    Run `attempt` for each variant, stopping at the first acceptable result.
    """
    for variant in variants:
        result = attempt(variant)
        if is_acceptable(result):
            return result
    return None


# --------------------------------------------------
# Term extraction from a fetched vocabulary entity
# --------------------------------------------------

def _is_preferred_classification(classification: Any, include_equivalents: bool) -> bool:
    if not isinstance(classification, dict):
        return False

    if classification.get("id") == PREFERRED_TERM_URI:
        return True

    if include_equivalents:
        return any(
            isinstance(eq, dict) and eq.get("id") == PREFERRED_TERM_URI
            for eq in classification.get("equivalent") or []
        )

    return False


def extract_term(data: Any, term_type: str = PREFERRED):
    """
    Pull the preferred (or alternative) term out of a vocabulary entity.

    Returns the term, a LabelFallback when only the entity label is usable,
    or None.
    """
    if not isinstance(data, dict):
        return None

    identified_by = data.get("identified_by")

    if isinstance(identified_by, list):
        for item in identified_by:
            if not isinstance(item, dict):
                continue

            classified_as = item.get("classified_as") or []

            if term_type == PREFERRED:
                if any(_is_preferred_classification(ca, True) for ca in classified_as):
                    if item.get("content"):
                        return item["content"]
            else:
                if any(_is_preferred_classification(ca, False) for ca in classified_as):
                    alternatives = item.get("alternative") or []
                    if alternatives and isinstance(alternatives[0], dict) and alternatives[0].get("content"):
                        return alternatives[0]["content"]

    if term_type == PREFERRED:
        if data.get("label"):
            return LabelFallback(data["label"], "label")
        if data.get("_label"):
            return LabelFallback(data["_label"], "_label")

    return None


# --------------------------------------------------
# Public resolver
# --------------------------------------------------

def get_term(
    uri: str,
    data_field: str,
    term_type: str = PREFERRED,
    fetcher=None,
    log_messages=None
) -> Optional[str]:
    """
    Resolve a vocabulary URI to a display term.

    Never raises for network or data problems: every failure ends as None
    plus an entry in `log_messages`.
    """
    last_error = None

    def attempt(headers: Dict[str, str]):
        nonlocal last_error

        try:
            response = fetcher(uri, headers)
        except FetchError as e:
            last_error = str(e) or "Network error"
            return None

        if not response.ok:
            last_error = f"HTTP {response.status}"
            return None

        try:
            data = response.json()
        except FetchError as e:
            last_error = str(e)
            return None

        return extract_term(data, term_type)

    if not uri:
        return None

    term = try_in_order(REQUEST_VARIANTS, attempt)

    if isinstance(term, LabelFallback):
        log_messages.add(
            f'No preferred term found for {uri}. "{term.source}" retrieved instead.'
        )
        return term.label

    if term is not None:
        return term

    if last_error is None:
        last_error = f"No {term_type} term found for {uri}"

    if "returned HTML instead of JSON" in last_error:
        log_messages.add(
            f"Error retrieving {data_field} data: {uri} returned HTML instead of JSON (possible fallback page)"
        )
    else:
        log_messages.add(
            f"Error retrieving {data_field} data: All fetch attempts failed for {uri}. Last error: {last_error}"
        )

    logger.debug(f"No {term_type} term for {uri}: {last_error}")
    return None
