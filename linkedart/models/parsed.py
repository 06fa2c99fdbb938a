import threading
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Set, Tuple, Union


@dataclass(frozen=True)
class LiteralNode:
    value: Any
    type: ClassVar[str] = "literal"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class NullNode:
    type: ClassVar[str] = "null"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type}


@dataclass(frozen=True)
class ArrayNode:
    items: Tuple["ParsedNode", ...] = ()
    type: ClassVar[str] = "array"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "items": [item.to_dict() for item in self.items]}


@dataclass(frozen=True)
class EntityNode:
    entity_type: str
    friendly_type: Optional[str]
    id: Optional[str] = None
    label: Optional[str] = None
    properties: Dict[str, "ParsedNode"] = field(default_factory=dict)
    truncated: bool = False
    getty_term: Optional[str] = None
    type: ClassVar[str] = "entity"

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "type": self.type,
            "id": self.id,
            "entityType": self.entity_type,
            "friendlyType": self.friendly_type,
            "label": self.label,
            "properties": {
                key: value.to_dict() for key, value in self.properties.items()
            },
        }

        if self.truncated:
            data["_truncated"] = True
        if self.getty_term:
            data["gettyTerm"] = self.getty_term

        return data


ParsedNode = Union[LiteralNode, NullNode, ArrayNode, EntityNode]


class VisitedSet:
    """
    Entity ids already dereferenced during one parse run.

    `claim()` is the atomic check-and-insert that gates every reference
    fetch, so concurrent branches never fetch the same id twice.
    """

    def __init__(self, ids=None):
        self._ids: Set[str] = set(ids or ())
        self._lock = threading.Lock()

    def claim(self, entity_id: str) -> bool:
        with self._lock:
            if entity_id in self._ids:
                return False
            self._ids.add(entity_id)
            return True

    def __contains__(self, entity_id) -> bool:
        with self._lock:
            return entity_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
