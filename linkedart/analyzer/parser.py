"""
Complete Linked Art entity parser.

Walks ALL properties of an entity regardless of their names. What to do
with a value is decided by its shape (literal, array, simple object,
reference, complex entity), never by the property it sits under.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from linkedart.analyzer.vocab import PREFERRED, get_term
from linkedart.models.parsed import (
    ArrayNode,
    EntityNode,
    LiteralNode,
    NullNode,
    ParsedNode,
    VisitedSet,
)
from linkedart.services.fetcher import FetchError
from linkedart.utils.graph import GETTY_VOCAB_HOST, get_friendly_type_name, get_label, type_name

logger = logging.getLogger(__name__)

SKIP_PROPERTIES = {"@context"}

SIMPLE_KEYS = {
    "id", "type", "_label", "label", "name",
    "classified_as", "equivalent",
}

MAX_SIMPLE_KEYS = 5


# --------------------------------------------------
# Shape predicates
# --------------------------------------------------

def is_simple_object(value: Any) -> bool:
    """
    Reference-like object: at most five keys, all of them metadata keys,
    with no non-empty arrays and only simple objects nested inside.
    """
    if not isinstance(value, dict):
        return False

    if len(value) > MAX_SIMPLE_KEYS:
        return False

    for key, val in value.items():
        if key not in SIMPLE_KEYS:
            return False
        if isinstance(val, list) and val:
            return False
        if isinstance(val, dict) and not is_simple_object(val):
            return False

    return True


def needs_recursion(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, list):
        return True
    if isinstance(value, dict):
        return not is_simple_object(value)
    return False


def should_resolve_reference(value: Any) -> bool:
    """A simple object with an id but nothing to display."""
    if not isinstance(value, dict):
        return False

    has_label = bool(value.get("_label") or value.get("label") or value.get("name"))
    entity_id = value.get("id")
    return isinstance(entity_id, str) and bool(entity_id) and is_simple_object(value) and not has_label


# --------------------------------------------------
# Parser
# --------------------------------------------------

def _resolve_reference(entity_id: str, fetcher, log_messages) -> Optional[Any]:
    try:
        response = fetcher(entity_id)
        if not response.ok:
            log_messages.add(f"Failed to resolve reference {entity_id}: HTTP {response.status}")
            return None
        return response.json()
    except FetchError as e:
        log_messages.add(f"Failed to resolve reference {entity_id}: {e}")
        return None


def parse_entity(
    entity: Any,
    fetcher,
    log_messages,
    resolve_references: bool = True,
    max_depth: int = 3,
    current_depth: int = 0,
    visited: Optional[VisitedSet] = None
) -> ParsedNode:
    """
    Parse any JSON value into a ParsedNode tree.

    Arrays do not consume depth and neither does following a reference;
    each step into an object property costs one level. `visited` gates
    reference fetches so each id is fetched at most once per run.
    """
    if visited is None:
        visited = VisitedSet()

    options = dict(
        resolve_references=resolve_references,
        max_depth=max_depth,
        visited=visited,
    )

    if entity is None:
        return NullNode()

    if isinstance(entity, (str, int, float, bool)):
        return LiteralNode(entity)

    if isinstance(entity, list):
        return ArrayNode(tuple(
            parse_entity(item, fetcher, log_messages, current_depth=current_depth, **options)
            for item in entity
        ))

    if not isinstance(entity, dict):
        return LiteralNode(entity)

    entity_id = entity.get("id")
    raw_type = entity.get("type")
    entity_type = type_name(raw_type) or "Unknown"
    friendly_type = get_friendly_type_name(raw_type) or entity_type
    label = get_label(entity)

    if resolve_references and should_resolve_reference(entity) and visited.claim(entity_id):
        logger.debug(f"Resolving reference {entity_id} at depth {current_depth}")
        full_data = _resolve_reference(entity_id, fetcher, log_messages)
        if full_data is not None:
            return parse_entity(full_data, fetcher, log_messages, current_depth=current_depth, **options)

    if current_depth >= max_depth:
        return EntityNode(
            id=entity_id,
            entity_type=entity_type,
            friendly_type=friendly_type,
            label=label,
            truncated=True,
        )

    properties: Dict[str, ParsedNode] = {}

    for key, value in entity.items():
        if key in SKIP_PROPERTIES:
            continue

        if value is None:
            properties[key] = NullNode()
        elif needs_recursion(value):
            properties[key] = parse_entity(
                value, fetcher, log_messages, current_depth=current_depth + 1, **options
            )
        else:
            properties[key] = LiteralNode(value)

    getty_term = None

    if (
        resolve_references
        and entity_type == "Type"
        and isinstance(entity_id, str)
        and GETTY_VOCAB_HOST in entity_id
    ):
        getty_term = get_term(entity_id, entity_type, PREFERRED, fetcher, log_messages)

    return EntityNode(
        id=entity_id,
        entity_type=entity_type,
        friendly_type=friendly_type,
        label=label,
        properties=properties,
        getty_term=getty_term,
    )


# --------------------------------------------------
# Rendering & inspection
# --------------------------------------------------

def format_parsed_entity(parsed: Optional[ParsedNode], indent: int = 0) -> str:
    prefix = "  " * indent

    if parsed is None:
        return f"{prefix}[null]"

    if isinstance(parsed, LiteralNode):
        return f"{prefix}{json.dumps(parsed.value, ensure_ascii=False, default=str)}"

    if isinstance(parsed, NullNode):
        return f"{prefix}null"

    if isinstance(parsed, ArrayNode):
        if not parsed.items:
            return f"{prefix}[]"
        lines = [f"{prefix}["]
        lines += [format_parsed_entity(item, indent + 1) for item in parsed.items]
        lines.append(f"{prefix}]")
        return "\n".join(lines)

    lines = [f"{prefix}[{parsed.friendly_type or parsed.entity_type}] {parsed.label or '(unnamed)'}"]

    if parsed.id:
        lines.append(f"{prefix}  ID: {parsed.id}")
    if parsed.getty_term:
        lines.append(f"{prefix}  Getty Term: {parsed.getty_term}")
    if parsed.truncated:
        lines.append(f"{prefix}  [... truncated by depth limit]")

    for key in sorted(parsed.properties):
        lines.append(f"{prefix}  {key}:")
        lines.append(format_parsed_entity(parsed.properties[key], indent + 2))

    return "\n".join(lines)


def _tree_depth(node: ParsedNode, depth: int = 0) -> int:
    if isinstance(node, EntityNode):
        children = node.properties.values()
    elif isinstance(node, ArrayNode):
        children = node.items
    else:
        return depth

    return max((_tree_depth(child, depth + 1) for child in children), default=depth)


def _is_external(node: ParsedNode) -> bool:
    return isinstance(node, EntityNode) and bool(node.id) and str(node.id).startswith("http")


def get_parsed_entity_stats(parsed: ParsedNode) -> Optional[Dict[str, Any]]:
    if not isinstance(parsed, EntityNode):
        return None

    stats = {
        "type": parsed.entity_type,
        "label": parsed.label,
        "id": parsed.id,
        "property_count": len(parsed.properties),
        "property_names": sorted(parsed.properties),
        "has_references": False,
        "nested_entity_count": 0,
        "array_count": 0,
        "literal_count": 0,
        "max_depth": _tree_depth(parsed),
    }

    for value in parsed.properties.values():
        if isinstance(value, EntityNode):
            nested = [value]
        elif isinstance(value, ArrayNode):
            stats["array_count"] += 1
            nested = [item for item in value.items if isinstance(item, EntityNode)]
        else:
            if isinstance(value, LiteralNode):
                stats["literal_count"] += 1
            nested = []

        stats["nested_entity_count"] += len(nested)
        if any(_is_external(item) for item in nested):
            stats["has_references"] = True

    return stats


def _hierarchy_row(key: str, path: str, node: ParsedNode) -> Dict[str, Any]:
    return {
        "key": key,
        "path": path,
        "type": node.type,
        "entity_type": getattr(node, "entity_type", None),
        "label": getattr(node, "label", None),
        "id": getattr(node, "id", None),
        "is_array": isinstance(node, ArrayNode),
        "array_length": len(node.items) if isinstance(node, ArrayNode) else 0,
        "has_children": isinstance(node, (EntityNode, ArrayNode)),
        "truncated": getattr(node, "truncated", False),
    }


def get_entity_hierarchy(parsed: ParsedNode, path: str = "", max_depth: int = 10) -> List[Dict[str, Any]]:
    """
    Flatten the tree into rows of property paths for tree display.
    """
    if not isinstance(parsed, EntityNode) or max_depth <= 0:
        return []

    rows: List[Dict[str, Any]] = []

    for key, value in parsed.properties.items():
        current_path = f"{path}.{key}" if path else key
        rows.append(_hierarchy_row(key, current_path, value))

        if isinstance(value, EntityNode):
            rows += get_entity_hierarchy(value, current_path, max_depth - 1)

        elif isinstance(value, ArrayNode):
            for index, item in enumerate(value.items):
                item_path = f"{current_path}[{index}]"
                rows.append(_hierarchy_row(f"[{index}]", item_path, item))
                if isinstance(item, EntityNode):
                    rows += get_entity_hierarchy(item, item_path, max_depth - 1)

    return rows


def get_property_by_path(parsed: ParsedNode, path: str) -> Optional[ParsedNode]:
    """
    get_property_by_path(tree, "identified_by[0].content")
    """
    current = parsed

    for part in filter(None, re.split(r"[.\[\]]+", path)):
        if current is None:
            return None

        if part.isdigit():
            if not isinstance(current, ArrayNode):
                return None
            index = int(part)
            current = current.items[index] if index < len(current.items) else None
        else:
            if not isinstance(current, EntityNode):
                return None
            current = current.properties.get(part)

    return current
