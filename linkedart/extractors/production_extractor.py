import logging
from typing import Any, Dict, List, Optional

from linkedart.analyzer.vocab import PREFERRED, get_term
from linkedart.extractors.base import NOT_FOUND, ExtractionResult, or_not_found
from linkedart.utils.graph import as_list, get_content_or_value, iterative_search
from linkedart.utils.timespan import format_timespan

logger = logging.getLogger(__name__)

MULTIPLE_CREATORS_MESSAGE = "Multiple creators found. Please verify."


class ProductionExtractor:
    """
    Creators and dates of the activity that brought the entity about.
    """

    @staticmethod
    def production_of(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        # DigitalObjects use created_by instead of produced_by
        for key in ("produced_by", "created_by"):
            if isinstance(data.get(key), dict):
                return data[key]
        return None

    # --------------------------------------------------
    # Creators
    # --------------------------------------------------

    @staticmethod
    def find_carried_out_by(production: Any) -> List[str]:
        """
        Actor ids from every carried_out_by in the production, parts included,
        in breadth-first discovery order.
        """
        actor_ids: List[str] = []

        def visit(node):
            if not isinstance(node, dict):
                return
            for actor in as_list(node.get("carried_out_by")):
                actor_id = actor.get("id") if isinstance(actor, dict) else None
                if actor_id and actor_id not in actor_ids:
                    actor_ids.append(actor_id)

        iterative_search(production, visit)
        return actor_ids

    @staticmethod
    def extract_creators(data, fetcher, log_messages) -> ExtractionResult:
        results: ExtractionResult = {}
        production = ProductionExtractor.production_of(data)

        if production is None:
            results["Creators"] = [NOT_FOUND]
            return results

        creators = [
            get_term(actor_id, "Creator", PREFERRED, fetcher, log_messages)
            for actor_id in ProductionExtractor.find_carried_out_by(production)
        ]
        results["Creators"] = or_not_found(creators)

        if len(results["Creators"]) > 1:
            results["CreatorsMessage"] = [MULTIPLE_CREATORS_MESSAGE]

        return results

    # --------------------------------------------------
    # Timespan
    # --------------------------------------------------

    @staticmethod
    def timespan_of(data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        production = ProductionExtractor.production_of(data)

        if production is not None and isinstance(production.get("timespan"), dict):
            return production["timespan"]

        if isinstance(data.get("timespan"), dict):
            return data["timespan"]

        return None

    @staticmethod
    def describe_timespan(timespan: Optional[Dict[str, Any]], log_messages) -> ExtractionResult:
        results: ExtractionResult = {
            "Timespan (Name)": [NOT_FOUND],
            "Timespan (Structured)": [NOT_FOUND],
        }

        if timespan is None:
            return results

        names = [
            get_content_or_value(item, "Timespan Display", log_messages)
            for item in as_list(timespan.get("identified_by"))
            if isinstance(item, dict) and item.get("type") == "Name"
        ]
        results["Timespan (Name)"] = or_not_found(names)

        begin = timespan.get("begin_of_the_begin")
        end = timespan.get("end_of_the_end")

        if begin or end:
            results["Timespan (Structured)"] = or_not_found([format_timespan(begin, end)])

        return results

    @staticmethod
    def extract_timespan(data, fetcher, log_messages) -> ExtractionResult:
        return ProductionExtractor.describe_timespan(
            ProductionExtractor.timespan_of(data), log_messages
        )
