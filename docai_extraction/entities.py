from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class RawEntity(BaseModel):
    """
    A typed record as returned by Document AI.

    Only the type tag, the mention text and the nested properties matter for
    projection; every other field of the response (confidence, page anchors,
    normalized values) is ignored.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", coerce_numbers_to_str=True
    )

    type: Optional[Any] = None
    mention_text: Optional[str] = Field(default=None, alias="mentionText")
    properties: Tuple["RawEntity", ...] = ()

    @field_validator("properties", mode="before")
    @classmethod
    def validate_properties(cls, value: Any) -> Any:
        return () if value is None else value

    @property
    def type_tag(self) -> Optional[str]:
        """The type tag when it is usable as a map key, otherwise None."""
        if isinstance(self.type, str) and self.type:
            return self.type
        return None


RawEntity.model_rebuild()


@dataclass(frozen=True)
class Single:
    value: Any


@dataclass(frozen=True)
class Many:
    values: Tuple[Any, ...]


Slot = Union[Single, Many]


class EntityMap(Mapping):
    """
    Immutable map from entity type tag to the value(s) derived for it.

    Reading a key returns the bare derived value for a type seen once and a
    tuple of derived values, in source order, for a type seen more than once.
    Use ``slot`` to get at the ``Single``/``Many`` distinction directly.
    """

    __slots__ = ("_slots",)

    def __init__(self, slots: Mapping[str, Slot] | None = None):
        self._slots: Dict[str, Slot] = dict(slots or {})

    def slot(self, key: str) -> Slot:
        return self._slots[key]

    def __getitem__(self, key: str) -> Any:
        slot = self._slots[key]
        if isinstance(slot, Many):
            return slot.values
        return slot.value

    def __iter__(self) -> Iterator[str]:
        return iter(self._slots)

    def __len__(self) -> int:
        return len(self._slots)

    def __repr__(self) -> str:
        return f"EntityMap({dict(self)!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-compatible view: sub-maps become dicts, entities their mention text."""
        return {key: _plain(value) for key, value in self.items()}


def _plain(value: Any) -> Any:
    if isinstance(value, EntityMap):
        return value.to_dict()
    if isinstance(value, tuple):
        return [_plain(v) for v in value]
    if isinstance(value, RawEntity):
        return value.mention_text
    return value


@dataclass
class EntityMapBuilder:
    """Accumulates derived values per type tag and finalizes into an EntityMap once."""

    _slots: Dict[str, Slot] = field(default_factory=dict, init=False)
    _finalized: bool = field(default=False, init=False)

    def add(self, key: str, value: Any) -> None:
        if self._finalized:
            raise RuntimeError("EntityMapBuilder already finalized")
        existing = self._slots.get(key)
        if existing is None:
            self._slots[key] = Single(value)
        elif isinstance(existing, Single):
            self._slots[key] = Many((existing.value, value))
        else:
            self._slots[key] = Many(existing.values + (value,))

    def build(self) -> EntityMap:
        self._finalized = True
        return EntityMap(self._slots)


@dataclass
class _Frame:
    pending: Iterator[RawEntity]
    builder: EntityMapBuilder
    parent: Optional[EntityMapBuilder] = None
    key: Optional[str] = None


_DONE = object()


def build_entity_map(entities: Iterable[RawEntity]) -> EntityMap:
    """
    Fold a (possibly nested) entity list into an EntityMap.

    Entities without a usable type tag are skipped together with their
    properties. An entity with properties contributes the map built from them,
    a leaf entity contributes itself. The traversal keeps its own work stack,
    so entity depth is not limited by the interpreter's recursion limit.
    """
    root = EntityMapBuilder()
    stack: List[_Frame] = [_Frame(pending=iter(entities), builder=root)]
    skipped = 0

    while stack:
        frame = stack[-1]
        entity = next(frame.pending, _DONE)
        if entity is _DONE:
            stack.pop()
            if frame.parent is not None and frame.key is not None:
                frame.parent.add(frame.key, frame.builder.build())
            continue

        key = entity.type_tag
        if key is None:
            skipped += 1
            continue
        if entity.properties:
            stack.append(
                _Frame(
                    pending=iter(entity.properties),
                    builder=EntityMapBuilder(),
                    parent=frame.builder,
                    key=key,
                )
            )
        else:
            frame.builder.add(key, entity)

    if skipped:
        logger.debug("Skipped %d entities without a type tag", skipped)
    return root.build()
