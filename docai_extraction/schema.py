from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Literal, Mapping, Optional, Union, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .errors import SchemaError

PrimitiveKind = Literal["STRING", "NUMBER", "BOOLEAN"]

PRIMITIVE_KINDS = ("STRING", "NUMBER", "BOOLEAN")
NODE_TYPES = ("OBJECT", "ARRAY") + PRIMITIVE_KINDS

DEFAULT_MAX_SCHEMA_DEPTH = 64


@dataclass(frozen=True)
class PrimitiveNode:
    """Leaf of the schema tree. The kind is informational; values are never coerced."""

    kind: PrimitiveKind
    description: Optional[str] = None
    enum: Optional[tuple[str, ...]] = None
    pattern: Optional[str] = None
    format: Optional[str] = None


@dataclass(frozen=True)
class ArrayNode:
    item: "SchemaNode"
    description: Optional[str] = None


@dataclass(frozen=True)
class ObjectNode:
    properties: Mapping[str, "SchemaNode"]
    required: FrozenSet[str] = field(default_factory=frozenset)
    description: Optional[str] = None


SchemaNode = Union[ObjectNode, ArrayNode, PrimitiveNode]


class SchemaDescription(BaseModel):
    """JSON-facing description of a schema node, as written in schema files."""

    model_config = ConfigDict(extra="ignore")

    type: str
    description: Optional[str] = None
    properties: Optional[Dict[str, "SchemaDescription"]] = None
    required: List[str] = Field(default_factory=list)
    items: Optional["SchemaDescription"] = None
    enum: Optional[List[str]] = None
    pattern: Optional[str] = None
    format: Optional[str] = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in NODE_TYPES:
            raise ValueError(f"Unsupported schema type '{value}', expected one of {', '.join(NODE_TYPES)}")
        return normalized

    @model_validator(mode="after")
    def validate_shape(self) -> "SchemaDescription":
        if self.type == "OBJECT":
            if self.properties is None:
                raise ValueError("OBJECT schema requires 'properties'")
            unknown = [key for key in self.required if key not in self.properties]
            if unknown:
                raise ValueError(f"Required keys not declared in properties: {', '.join(unknown)}")
        elif self.type == "ARRAY":
            if self.items is None:
                raise ValueError("ARRAY schema requires 'items'")
        return self


SchemaDescription.model_rebuild()


def parse_schema(
    description: Mapping[str, Any] | SchemaDescription,
    *,
    max_depth: int = DEFAULT_MAX_SCHEMA_DEPTH,
) -> SchemaNode:
    """
    Turn a JSON-style schema description into schema nodes.

    Raises SchemaError when the description is malformed or nested deeper
    than ``max_depth``.
    """
    if isinstance(description, SchemaDescription):
        validated = description
    else:
        try:
            validated = SchemaDescription.model_validate(description)
        except ValidationError as exc:
            raise SchemaError(f"Invalid schema description: {exc}", details={"errors": exc.errors()}) from exc
    return _to_node(validated, path="$", depth=0, max_depth=max_depth)


def _to_node(desc: SchemaDescription, *, path: str, depth: int, max_depth: int) -> SchemaNode:
    if depth > max_depth:
        raise SchemaError(f"Schema nested deeper than {max_depth} levels", path=path)

    if desc.type == "OBJECT":
        properties = {
            key: _to_node(child, path=f"{path}.{key}", depth=depth + 1, max_depth=max_depth)
            for key, child in (desc.properties or {}).items()
        }
        return ObjectNode(
            properties=properties,
            required=frozenset(desc.required),
            description=desc.description,
        )
    if desc.type == "ARRAY":
        return ArrayNode(
            item=_to_node(
                cast(SchemaDescription, desc.items), path=f"{path}[]", depth=depth + 1, max_depth=max_depth
            ),
            description=desc.description,
        )
    return PrimitiveNode(
        kind=desc.type,  # type: ignore[arg-type]
        description=desc.description,
        enum=tuple(desc.enum) if desc.enum else None,
        pattern=desc.pattern,
        format=desc.format,
    )


def load_schema(path: Path, *, max_depth: int = DEFAULT_MAX_SCHEMA_DEPTH) -> SchemaNode:
    """Read a schema description from a JSON file."""
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise SchemaError(f"Could not read schema file {path}: {exc}", source=str(path)) from exc
    if not isinstance(raw, dict):
        raise SchemaError(f"Schema file {path} must contain a JSON object", source=str(path))
    return parse_schema(raw, max_depth=max_depth)
