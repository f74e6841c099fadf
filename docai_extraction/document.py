from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, ValidationError

from .entities import RawEntity
from .errors import DocumentLoadError

logger = logging.getLogger(__name__)


class DocumentPayload(BaseModel):
    """The ``document`` object of a Document AI process response."""

    model_config = ConfigDict(extra="ignore")

    entities: List[Any] = []
    text: Optional[str] = None


class ProcessResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    document: DocumentPayload


@dataclass
class _Pending:
    items: Iterator[Any]
    children: List[RawEntity] = field(default_factory=list)
    entity: Optional[RawEntity] = None
    parent: Optional[List[RawEntity]] = None


_DONE = object()


def _shallow_entity(item: Any, *, source: str | None) -> tuple[RawEntity, List[Any]]:
    if not isinstance(item, dict):
        raise DocumentLoadError(f"Entity must be a JSON object, got {type(item).__name__}", source=source)
    nested = item.get("properties") or []
    if not isinstance(nested, list):
        raise DocumentLoadError("Entity 'properties' must be a list", source=source)
    return RawEntity.model_validate({**item, "properties": ()}), nested


def _parse_entity_list(items: List[Any], *, source: str | None) -> List[RawEntity]:
    # One level is validated at a time; nesting is tracked on an explicit stack.
    root: List[RawEntity] = []
    stack: List[_Pending] = [_Pending(items=iter(items), children=root)]
    while stack:
        frame = stack[-1]
        item = next(frame.items, _DONE)
        if item is _DONE:
            stack.pop()
            if frame.entity is not None and frame.parent is not None:
                frame.parent.append(frame.entity.model_copy(update={"properties": tuple(frame.children)}))
            continue

        entity, nested = _shallow_entity(item, source=source)
        if nested:
            stack.append(_Pending(items=iter(nested), entity=entity, parent=frame.children))
        else:
            frame.children.append(entity)
    return root


def parse_entities(payload: Any, *, source: str | None = None) -> List[RawEntity]:
    """
    Extract the entity list from a decoded Document AI response.

    Accepts a full process response (``{"document": {...}}``), a bare document
    (``{"entities": [...]}``) or a bare list of entities. Entity nesting depth
    is not limited.
    """
    try:
        if isinstance(payload, list):
            return _parse_entity_list(payload, source=source)
        if isinstance(payload, dict) and "document" in payload:
            items = ProcessResponse.model_validate(payload).document.entities
            return _parse_entity_list(items, source=source)
        if isinstance(payload, dict):
            return _parse_entity_list(DocumentPayload.model_validate(payload).entities, source=source)
    except ValidationError as exc:
        raise DocumentLoadError(f"Malformed Document AI response: {exc}", source=source) from exc
    raise DocumentLoadError(
        f"Expected a JSON object or list, got {type(payload).__name__}", source=source
    )


def load_entities(path: Path) -> List[RawEntity]:
    """
    Read a Document AI response JSON file and return its entities.

    JSON decoding itself is bounded by the interpreter's recursion limit, so
    files nested beyond it are reported as DocumentLoadError.
    """
    path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, RecursionError) as exc:
        raise DocumentLoadError(f"Could not read {path}: {exc}", source=str(path)) from exc
    entities = parse_entities(payload, source=str(path))
    logger.debug("Loaded %d top-level entities from %s", len(entities), path.name)
    return entities
