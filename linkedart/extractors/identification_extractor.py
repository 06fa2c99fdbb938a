import logging
from typing import Any, Dict

from linkedart.analyzer.vocab import PREFERRED, get_term
from linkedart.extractors.base import AAT, ExtractionResult, or_not_found
from linkedart.utils.graph import (
    as_list,
    find_classified_as,
    find_getty_uri,
    get_content_or_value,
)

logger = logging.getLogger(__name__)

NAME_URIS: Dict[str, str] = {
    "Title": AAT + "300404670",
    "Exhibited Title": AAT + "300417207",
    "Former Title": AAT + "300417203",
}

IDENTIFIER_URIS: Dict[str, str] = {
    "Accession Number": AAT + "300312355",
}

WORK_TYPE_URIS: Dict[str, str] = {
    "Work Type (Classification)": AAT + "300435443",
}


class IdentificationExtractor:
    """
    Names, identifiers and the work type classification.
    """

    # --------------------------------------------------
    # identified_by lookups
    # --------------------------------------------------

    @staticmethod
    def _lookup(data: Dict[str, Any], item_type: str, table: Dict[str, str], log_messages) -> ExtractionResult:
        results: ExtractionResult = {}
        identified_by = as_list(data.get("identified_by"))

        for field_name, uri in table.items():
            values = [
                get_content_or_value(item, field_name, log_messages)
                for item in identified_by
                if isinstance(item, dict)
                and item.get("type") == item_type
                and find_classified_as(item.get("classified_as"), [uri])
            ]
            results[field_name] = or_not_found(values)

        return results

    @staticmethod
    def extract_names(data, fetcher, log_messages) -> ExtractionResult:
        return IdentificationExtractor._lookup(data, "Name", NAME_URIS, log_messages)

    @staticmethod
    def extract_identifiers(data, fetcher, log_messages) -> ExtractionResult:
        return IdentificationExtractor._lookup(data, "Identifier", IDENTIFIER_URIS, log_messages)

    # --------------------------------------------------
    # classified_as lookup
    # --------------------------------------------------

    @staticmethod
    def extract_work_type(data, fetcher, log_messages) -> ExtractionResult:
        """
        Classifications that are themselves tagged as "type of work".
        """
        results: ExtractionResult = {}

        for field_name, uri in WORK_TYPE_URIS.items():
            terms = []

            for item in as_list(data.get("classified_as")):
                if not find_classified_as(item, [uri]):
                    continue

                getty_uri = find_getty_uri(item)
                if getty_uri:
                    terms.append(
                        get_term(getty_uri, field_name, PREFERRED, fetcher, log_messages)
                    )

            results[field_name] = or_not_found(terms)

        return results
