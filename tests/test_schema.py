"""Tests for schema description parsing."""

import json

import pytest

from docai_extraction.errors import SchemaError
from docai_extraction.schema import ArrayNode, ObjectNode, PrimitiveNode, load_schema, parse_schema
from docai_extraction.transcript_schema import TRANSCRIPT_SCHEMA, transcript_schema


def test_parse_nested_schema():
    node = parse_schema(
        {
            "type": "OBJECT",
            "properties": {
                "name": {"type": "string", "description": "Full name"},
                "tags": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
            "required": ["name"],
        }
    )

    assert isinstance(node, ObjectNode)
    assert node.required == frozenset({"name"})
    assert node.properties["name"] == PrimitiveNode("STRING", description="Full name")
    assert isinstance(node.properties["tags"], ArrayNode)
    assert node.properties["tags"].item.kind == "STRING"


def test_transcript_schema_parses():
    node = transcript_schema()

    assert node.required == frozenset({"studentInfo", "institutionInfo", "terms"})
    courses = node.properties["terms"].item.properties["courses"]
    assert courses.item.required == frozenset({"courseCode", "courseTitle", "grade"})
    status = node.properties["verification"].properties["verificationStatus"]
    assert "verified" in status.enum


@pytest.mark.parametrize(
    "description",
    [
        {"type": "DATE"},
        {"type": "OBJECT"},
        {"type": "ARRAY"},
        {"type": "OBJECT", "properties": {"a": {"type": "STRING"}}, "required": ["b"]},
        {"properties": {}},
        {"type": "OBJECT", "properties": {"a": {"type": "MAP"}}},
    ],
)
def test_invalid_descriptions_raise(description):
    with pytest.raises(SchemaError):
        parse_schema(description)


def test_depth_limit():
    description = {"type": "STRING"}
    for _ in range(5):
        description = {"type": "ARRAY", "items": description}

    assert isinstance(parse_schema(description, max_depth=5), ArrayNode)
    with pytest.raises(SchemaError) as excinfo:
        parse_schema(description, max_depth=4)
    assert excinfo.value.path == "$[][][][][]"


def test_load_schema_from_file(tmp_path):
    path = tmp_path / "schema.json"
    path.write_text(json.dumps(TRANSCRIPT_SCHEMA), encoding="utf-8")

    assert load_schema(path) == transcript_schema()


def test_load_schema_rejects_bad_files(tmp_path):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listed = tmp_path / "list.json"
    listed.write_text("[]", encoding="utf-8")

    with pytest.raises(SchemaError):
        load_schema(broken)
    with pytest.raises(SchemaError):
        load_schema(listed)
    with pytest.raises(SchemaError):
        load_schema(tmp_path / "missing.json")
