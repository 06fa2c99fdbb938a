import logging
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from linkedart.analyzer.vocab import PREFERRED, get_term
from linkedart.extractors.base import AAT, ExtractionResult, or_not_found
from linkedart.utils.graph import as_list, find_getty_uri

logger = logging.getLogger(__name__)

EXCLUDED_DIMENSION_URI = AAT + "300010269"


class DimensionStatement(NamedTuple):
    text: str
    group: str


class PhysicalExtractor:
    """
    Structured dimensions and materials of a physical object.
    """

    # --------------------------------------------------
    # Dimensions
    # --------------------------------------------------

    @staticmethod
    def is_excluded(dimension: Dict[str, Any]) -> bool:
        return any(
            find_getty_uri(classification) == EXCLUDED_DIMENSION_URI
            for classification in as_list(dimension.get("classified_as"))
        )

    @staticmethod
    def _labels(dimension: Dict[str, Any], fetcher, log_messages) -> Tuple[Optional[str], Optional[str]]:
        classified_as = as_list(dimension.get("classified_as"))
        unit = dimension.get("unit")

        dimension_uri = find_getty_uri(classified_as)
        unit_uri = find_getty_uri(unit) if unit else None

        dimension_label = (
            get_term(dimension_uri, "Dimension", PREFERRED, fetcher, log_messages)
            if dimension_uri else None
        )
        unit_label = (
            get_term(unit_uri, "Unit", PREFERRED, fetcher, log_messages)
            if unit_uri else None
        )

        if not dimension_label:
            source = dimension_uri or ", ".join(
                str(item.get("id")) for item in classified_as if isinstance(item, dict)
            )
            log_messages.add(f"Unable to retrieve dimension type from {source}")

        if not unit_label:
            source = unit_uri or (unit.get("id") if isinstance(unit, dict) else None) or "unknown unit"
            log_messages.add(f"Unable to retrieve dimension unit from {source}")

        return dimension_label, unit_label

    @staticmethod
    def _additional_classification(dimension: Dict[str, Any], fetcher, log_messages) -> str:
        """
        Group label for dimensions without a member_of set: the first
        assignment's classification, else the second classified_as entry.
        """
        additional_uri = None
        assigned_by = dimension.get("assigned_by")

        if isinstance(assigned_by, list):
            for assignment in assigned_by:
                classified_as = as_list(assignment.get("classified_as")) if isinstance(assignment, dict) else []
                if classified_as:
                    first = classified_as[0]
                    additional_uri = first.get("id") if isinstance(first, dict) else None
                    if not additional_uri:
                        log_messages.add(f"Unable to retrieve additional classification label from {additional_uri}")
                        return ""
                    break
        else:
            classified_as = as_list(dimension.get("classified_as"))
            if len(classified_as) > 1 and isinstance(classified_as[1], dict):
                additional_uri = classified_as[1].get("id")

        if not additional_uri:
            return ""

        label = get_term(additional_uri, "Additional Classification", PREFERRED, fetcher, log_messages)
        if not label:
            log_messages.add(f"Unable to retrieve additional classification label from {additional_uri}")

        return label or ""

    @staticmethod
    def _set_label(dimension: Dict[str, Any], fetcher, log_messages) -> str:
        for member in dimension.get("member_of") or []:
            if not isinstance(member, dict) or not member.get("id"):
                continue
            label = get_term(member["id"], "Set Label", PREFERRED, fetcher, log_messages)
            if label:
                return label
        return ""

    @staticmethod
    def process_dimension(dimension: Any, fetcher, log_messages) -> Optional[DimensionStatement]:
        if not isinstance(dimension, dict) or PhysicalExtractor.is_excluded(dimension):
            return None

        dimension_label, unit_label = PhysicalExtractor._labels(dimension, fetcher, log_messages)
        has_set = isinstance(dimension.get("member_of"), list)

        if has_set:
            group = None
        else:
            group = PhysicalExtractor._additional_classification(dimension, fetcher, log_messages)

        value = dimension.get("value")
        if value in (None, "", 0) or not dimension_label or not unit_label:
            return None

        if has_set:
            group = PhysicalExtractor._set_label(dimension, fetcher, log_messages)

        return DimensionStatement(f"{dimension_label}: {value} {unit_label}", group)

    @staticmethod
    def extract_dimensions(data, fetcher, log_messages) -> ExtractionResult:
        """
        One line per group: "{group}: {dim}; {dim}" (no prefix for the
        unnamed group), groups in first-seen order.
        """
        groups: Dict[str, List[str]] = {}

        dimensions = data.get("dimension")
        if isinstance(dimensions, list):
            for dimension in dimensions:
                statement = PhysicalExtractor.process_dimension(dimension, fetcher, log_messages)
                if statement is not None:
                    groups.setdefault(statement.group, []).append(statement.text)

        lines = [
            f"{group + ': ' if group else ''}{'; '.join(statements)}"
            for group, statements in groups.items()
        ]

        return {"Dimensions (Structured)": or_not_found(lines)}

    # --------------------------------------------------
    # Materials
    # --------------------------------------------------

    @staticmethod
    def extract_materials(data, fetcher, log_messages) -> ExtractionResult:
        materials = []

        for material in as_list(data.get("made_of")):
            material_uri = find_getty_uri(material)
            if material_uri:
                materials.append(
                    get_term(material_uri, "Materials", PREFERRED, fetcher, log_messages)
                )

        joined = ", ".join(m for m in materials if m)
        return {"Materials (Structured)": or_not_found([joined])}
