"""
Projection of entity maps onto a declarative schema.

Every node either projects fully or is absent. Absence is a value
(``ABSENT``), not an exception, and travels upward only when a required key
is missing or an array ends up empty; the parent of an absent optional field
simply omits that key.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

from .entities import RawEntity
from .schema import ArrayNode, ObjectNode, PrimitiveNode, SchemaNode

logger = logging.getLogger(__name__)

DropReason = Literal["missing_required", "empty_object", "empty_array", "unsupported_value"]

PRIMITIVE_TYPES = (str, bool, int, float)
MENTION_KEYS = ("mentionText", "mention_text")


class _Absent:
    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()


@dataclass(frozen=True)
class DroppedSubtree:
    path: str
    reason: DropReason
    missing_keys: Tuple[str, ...] = ()


@dataclass
class ProjectionReport:
    """Projection result together with every subtree dropped on the way."""

    value: Any
    dropped: List[DroppedSubtree] = field(default_factory=list)

    @property
    def present(self) -> bool:
        return self.value is not ABSENT


def is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def mention_text(value: Any) -> Optional[str]:
    """Mention text carried by an entity or an entity-shaped mapping, if any."""
    if isinstance(value, RawEntity):
        text = value.mention_text
    elif is_mapping(value):
        text = next((value[k] for k in MENTION_KEYS if k in value), None)
    else:
        return None
    return text if isinstance(text, str) else None


class SchemaProjector:
    """
    Projects values onto a fixed schema.

    ``project`` is the lenient baseline: it returns the projected value or
    ``ABSENT``. ``project_with_report`` returns the same value plus a record
    of each dropped subtree and why it was dropped.
    """

    def __init__(self, schema: SchemaNode):
        self.schema = schema

    def project(self, value: Any) -> Any:
        return _project(self.schema, value, "$", None)

    def project_with_report(self, value: Any) -> ProjectionReport:
        dropped: List[DroppedSubtree] = []
        result = _project(self.schema, value, "$", dropped)
        return ProjectionReport(value=result, dropped=dropped)


def project(schema: SchemaNode, value: Any) -> Any:
    return _project(schema, value, "$", None)


def project_with_report(schema: SchemaNode, value: Any) -> ProjectionReport:
    return SchemaProjector(schema).project_with_report(value)


def _drop(
    dropped: Optional[List[DroppedSubtree]],
    path: str,
    reason: DropReason,
    missing_keys: Sequence[str] = (),
) -> Any:
    logger.debug("Dropping %s (%s)", path, reason)
    if dropped is not None:
        dropped.append(DroppedSubtree(path=path, reason=reason, missing_keys=tuple(missing_keys)))
    return ABSENT


def _project(schema: SchemaNode, value: Any, path: str, dropped: Optional[List[DroppedSubtree]]) -> Any:
    if isinstance(schema, ObjectNode):
        return _project_object(schema, value, path, dropped)
    if isinstance(schema, ArrayNode):
        return _project_array(schema, value, path, dropped)
    if isinstance(schema, PrimitiveNode):
        return _project_primitive(value, path, dropped)
    raise TypeError(f"Unknown schema node type: {type(schema).__name__}")


def _project_object(
    schema: ObjectNode, value: Any, path: str, dropped: Optional[List[DroppedSubtree]]
) -> Any:
    if value is None:
        return ABSENT

    result: Dict[str, Any] = {}
    if is_collection(value):
        # First writer wins: a key filled from an earlier source is never
        # looked up in later ones. Drops from a failed attempt are only
        # reported when no later source fills the key.
        failed: Dict[str, List[DroppedSubtree]] = {}
        for source in value:
            if not is_mapping(source):
                continue
            for key, child in schema.properties.items():
                if key in result:
                    continue
                attempt: Optional[List[DroppedSubtree]] = [] if dropped is not None else None
                projected = _project(child, source.get(key), f"{path}.{key}", attempt)
                if projected is not ABSENT:
                    result[key] = projected
                    if dropped is not None and attempt:
                        dropped.extend(attempt)
                elif attempt:
                    failed.setdefault(key, []).extend(attempt)
        if dropped is not None:
            for key, attempts in failed.items():
                if key not in result:
                    dropped.extend(attempts)
    elif is_mapping(value):
        for key, child in schema.properties.items():
            projected = _project(child, value.get(key), f"{path}.{key}", dropped)
            if projected is not ABSENT:
                result[key] = projected
    else:
        return _drop(dropped, path, "unsupported_value")

    missing = sorted(key for key in schema.required if key not in result)
    if missing:
        return _drop(dropped, path, "missing_required", missing)
    if not result:
        return _drop(dropped, path, "empty_object")
    return result


def _project_array(
    schema: ArrayNode, value: Any, path: str, dropped: Optional[List[DroppedSubtree]]
) -> Any:
    if value is None:
        return ABSENT

    if is_collection(value):
        candidates = value
    elif is_mapping(value) or isinstance(value, RawEntity):
        candidates = (value,)
    else:
        return _drop(dropped, path, "unsupported_value")

    items = []
    for index, candidate in enumerate(candidates):
        projected = _project(schema.item, candidate, f"{path}[{index}]", dropped)
        if projected is not ABSENT:
            items.append(projected)
    if not items:
        return _drop(dropped, path, "empty_array")
    return items


def _project_primitive(value: Any, path: str, dropped: Optional[List[DroppedSubtree]]) -> Any:
    if value is None:
        return ABSENT
    if isinstance(value, PRIMITIVE_TYPES):
        return value
    text = mention_text(value)
    if text is not None:
        return text
    return _drop(dropped, path, "unsupported_value")
