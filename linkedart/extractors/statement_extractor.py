import logging
from typing import Any, Dict, List, NamedTuple, Tuple

from linkedart.analyzer.vocab import ALTERNATIVE, get_term
from linkedart.extractors.base import AAT, ExtractionResult, or_not_found
from linkedart.utils.graph import as_list, find_classified_as, get_content_or_value

logger = logging.getLogger(__name__)


class StatementUris(NamedTuple):
    primary: str
    secondary: Tuple[str, ...] = ()


# Secondary URIs are legacy classifications still found in older data.
STATEMENT_URIS: Dict[str, StatementUris] = {
    "Credit Line": StatementUris(AAT + "300435418", (AAT + "300026687",)),
    "Dimensions Statement": StatementUris(AAT + "300435430", (AAT + "300266036",)),
    "Materials Statement": StatementUris(AAT + "300435429", (AAT + "300010358",)),
    "Citations": StatementUris(AAT + "300311705"),
    "Access Statement": StatementUris(AAT + "300133046"),
    "Description": StatementUris(AAT + "300435416", (AAT + "300080091",)),
    "Provenance Description": StatementUris(
        AAT + "300435438", (AAT + "300055863", AAT + "300444174")
    ),
    "Work Type (Statement)": StatementUris(AAT + "300435443"),
    "Social Media": StatementUris(AAT + "300312269"),
}


class StatementExtractor:

    @staticmethod
    def find_statements(data: Dict[str, Any], target_uri: str, log_messages) -> List[str]:
        statements = []

        for item in as_list(data.get("referred_to_by")):
            if not isinstance(item, dict) or item.get("type") != "LinguisticObject":
                continue
            if not find_classified_as(item.get("classified_as"), [target_uri]):
                continue

            text = get_content_or_value(item, "Statement", log_messages)
            if text:
                statements.append(text)

        return statements

    @staticmethod
    def extract_statements(data, fetcher, log_messages) -> ExtractionResult:
        """
        LinguisticObject statements from `referred_to_by`, falling back to
        legacy classification URIs in order when the primary finds nothing.
        """
        results: ExtractionResult = {}

        for field_name, uris in STATEMENT_URIS.items():
            statements = StatementExtractor.find_statements(data, uris.primary, log_messages)

            if not statements:
                for secondary_uri in uris.secondary:
                    statements = StatementExtractor.find_statements(data, secondary_uri, log_messages)
                    if not statements:
                        continue

                    primary_term = (
                        get_term(uris.primary, field_name, ALTERNATIVE, fetcher, log_messages)
                        or "Primary Term"
                    )
                    secondary_term = (
                        get_term(secondary_uri, field_name, ALTERNATIVE, fetcher, log_messages)
                        or "Secondary Term"
                    )
                    log_messages.add(
                        f'{field_name} not found using {uris.primary} ("{primary_term}"). '
                        f'{secondary_uri} ("{secondary_term}") used instead.'
                    )
                    logger.info(f"{field_name}: secondary classification {secondary_uri} used")
                    break

            results[field_name] = or_not_found(statements)

        return results
