from collections import deque
from typing import Any, Callable, Dict, List, Optional, Sequence

GETTY_VOCAB_HOST = "vocab.getty.edu"

FRIENDLY_TYPE_NAMES: Dict[str, str] = {
    "HumanMadeObject": "Physical Object",
    "DigitalObject": "Digital Object",
    "Person": "Person",
    "Group": "Group/Organization",
    "Place": "Place",
    "VisualItem": "Visual Work",
    "LinguisticObject": "Textual Work",
    "PropositionalObject": "Abstract Work",
    "Set": "Set/Collection",
    "Activity": "Activity",
    "Event": "Event",
    "Type": "Concept/Type",
    "TimeSpan": "Time Span",
    "Name": "Name",
    "Identifier": "Identifier",
    "Dimension": "Dimension",
    "Material": "Material",
    "Language": "Language",
    "MeasurementUnit": "Measurement Unit",
    "Currency": "Currency",
    "Right": "Right",
}


# --------------------------------------------------
# Small helpers
# --------------------------------------------------

def as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def get_label(obj: Any) -> Optional[str]:
    if not isinstance(obj, dict):
        return None
    return obj.get("_label") or obj.get("label") or obj.get("name") or None


def type_name(value: Any) -> Optional[str]:
    """
    `type` as a display string. JSON-LD allows a list of types.
    """
    if isinstance(value, list):
        return ", ".join(str(item) for item in value if item) or None
    if value is None or value == "":
        return None
    return str(value)


def primary_type(value: Any) -> Optional[str]:
    for item in as_list(value):
        if isinstance(item, str) and item:
            return item
    return None


def get_friendly_type_name(entity_type: Any) -> Optional[str]:
    if isinstance(entity_type, list):
        names = [get_friendly_type_name(item) for item in entity_type]
        return ", ".join(name for name in names if name) or None
    if not isinstance(entity_type, str):
        return type_name(entity_type)
    return FRIENDLY_TYPE_NAMES.get(entity_type, entity_type)


def detect_entity_type(data: Any) -> Dict[str, str]:
    data = data if isinstance(data, dict) else {}
    entity_type = type_name(data.get("type")) or "Unknown"

    return {
        "type": entity_type,
        "label": data.get("_label") or "Unnamed",
        "friendly_name": get_friendly_type_name(data.get("type")) or "Unknown",
    }


def get_content_or_value(item: Any, data_field: str, log_messages=None) -> Optional[str]:
    """
    `content` is the current Linked Art property; older data carries `value`.
    """
    if not isinstance(item, dict):
        return None

    if item.get("content"):
        return item["content"]

    if item.get("value"):
        if log_messages is not None:
            log_messages.add(
                f'{data_field} could not be retrieved using the "content" attribute. '
                f'"value" attribute retrieved instead.'
            )
        return item["value"]

    return None


# --------------------------------------------------
# Searches
# --------------------------------------------------

def iterative_search(root: Any, callback: Callable[[Any], None]):
    """
    Breadth-first walk calling `callback` on every dict and list,
    root included. Primitive leaves are skipped.
    """
    queue = deque([root])

    while queue:
        current = queue.popleft()

        if isinstance(current, dict):
            callback(current)
            queue.extend(current.values())
        elif isinstance(current, list):
            callback(current)
            queue.extend(current)


def find_classified_as(obj: Any, target_uris: Sequence[str]) -> Optional[Dict[str, Any]]:
    """
    First object (self or reachable through classified_as/equivalent)
    carrying one of `target_uris` as a direct string value.
    """
    if isinstance(obj, list):
        for item in obj:
            result = find_classified_as(item, target_uris)
            if result is not None:
                return result

    elif isinstance(obj, dict):
        for key, value in obj.items():
            if isinstance(value, str) and value in target_uris:
                return obj
            if key in ("classified_as", "equivalent"):
                result = find_classified_as(value, target_uris)
                if result is not None:
                    return result

    return None


def find_getty_uri(obj: Any) -> Optional[str]:
    if isinstance(obj, list):
        for item in obj:
            found = find_getty_uri(item)
            if found:
                return found

    elif isinstance(obj, dict):
        for value in obj.values():
            if isinstance(value, str) and GETTY_VOCAB_HOST in value:
                return value
            found = find_getty_uri(value)
            if found:
                return found

    return None
