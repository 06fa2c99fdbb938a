import logging
from typing import Any, Dict, List, Optional

from linkedart.extractors.base import ExtractionResult, is_found, resolve_ids
from linkedart.extractors.production_extractor import ProductionExtractor
from linkedart.utils.graph import as_list
from linkedart.utils.timespan import format_timespan

logger = logging.getLogger(__name__)


class ContextExtractor:
    """
    Type specific context for actors, places and activities: where people
    were born and died, who founded a group, where an activity happened.
    """

    @staticmethod
    def _places_of(data: Dict[str, Any], direct: str, activity: str) -> List[Any]:
        # born_at / died_at shorthand, or the took_place_at of born / died
        places = list(as_list(data.get(direct)))
        for event in as_list(data.get(activity)):
            if isinstance(event, dict):
                places += as_list(event.get("took_place_at"))
        return places

    @staticmethod
    def _date_of(data: Dict[str, Any], activity: str) -> Optional[str]:
        for event in as_list(data.get(activity)):
            timespan = event.get("timespan") if isinstance(event, dict) else None
            if isinstance(timespan, dict):
                formatted = format_timespan(
                    timespan.get("begin_of_the_begin"),
                    timespan.get("end_of_the_end")
                )
                if formatted:
                    return formatted
        return None

    # --------------------------------------------------
    # Person
    # --------------------------------------------------

    @staticmethod
    def extract_person(data, fetcher, log_messages) -> ExtractionResult:
        results: ExtractionResult = {}

        for field_name, direct, activity in (
            ("Birth Place", "born_at", "born"),
            ("Death Place", "died_at", "died"),
        ):
            places = resolve_ids(
                ContextExtractor._places_of(data, direct, activity),
                field_name, fetcher, log_messages
            )
            if places:
                results[field_name] = places

        for field_name, activity in (("Birth Date", "born"), ("Death Date", "died")):
            date = ContextExtractor._date_of(data, activity)
            if date:
                results[field_name] = [date]

        if data.get("timespan"):
            results.update(ProductionExtractor.extract_timespan(data, fetcher, log_messages))

        return results

    # --------------------------------------------------
    # Group
    # --------------------------------------------------

    @staticmethod
    def extract_group(data, fetcher, log_messages) -> ExtractionResult:
        results: ExtractionResult = {}

        if data.get("timespan"):
            results.update(ProductionExtractor.extract_timespan(data, fetcher, log_messages))

        founders = []
        for formation in as_list(data.get("formed_by")):
            actors = as_list(formation.get("carried_out_by")) if isinstance(formation, dict) else []
            if actors:
                founders.append(actors[0])

        founders = resolve_ids(founders, "Founder", fetcher, log_messages)
        if founders:
            results["Founded By"] = founders

        return results

    # --------------------------------------------------
    # Place
    # --------------------------------------------------

    @staticmethod
    def extract_place(data, fetcher, log_messages) -> ExtractionResult:
        parents = resolve_ids(data.get("part_of"), "Parent Place", fetcher, log_messages)
        return {"Part Of": parents} if parents else {}

    # --------------------------------------------------
    # Activity / Event
    # --------------------------------------------------

    @staticmethod
    def extract_activity(data, fetcher, log_messages, existing: Optional[ExtractionResult] = None) -> ExtractionResult:
        """
        `existing` holds results gathered so far; places are appended to an
        already found Location rather than replacing it.
        """
        results: ExtractionResult = {}

        if data.get("timespan"):
            results.update(ProductionExtractor.extract_timespan(data, fetcher, log_messages))

        participants = resolve_ids(data.get("carried_out_by"), "Participant", fetcher, log_messages)
        if participants:
            results["Participants"] = participants

        places = resolve_ids(data.get("took_place_at"), "Location", fetcher, log_messages)
        if places:
            location = (existing or {}).get("Location")
            previous = location if is_found(location) else []
            results["Location"] = previous + places

        return results
