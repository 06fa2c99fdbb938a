import logging
from typing import Dict

from linkedart.extractors.base import ExtractionResult, or_not_found, resolve_ids

logger = logging.getLogger(__name__)

REFERENCE_PROPERTIES: Dict[str, str] = {
    "current_location": "Location",
    "current_owner": "Owner",
    "member_of": "Set",
}


class ReferenceExtractor:

    @staticmethod
    def extract_references(data, fetcher, log_messages) -> ExtractionResult:
        """
        Current location, current owner and set membership, by preferred term.
        """
        results: ExtractionResult = {}

        for prop, field_name in REFERENCE_PROPERTIES.items():
            results[field_name] = or_not_found(
                resolve_ids(data.get(prop), field_name, fetcher, log_messages)
            )

        return results
