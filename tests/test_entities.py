"""Tests for folding entity lists into entity maps."""

import pytest

from docai_extraction.entities import (
    EntityMap,
    EntityMapBuilder,
    Many,
    RawEntity,
    Single,
    build_entity_map,
)


def test_single_entity_sets_scalar(entity):
    alice = entity("name", "Alice")
    result = build_entity_map([alice])

    assert isinstance(result.slot("name"), Single)
    assert result["name"] is alice


def test_repeated_type_accumulates_in_source_order(entity):
    a, b, c = entity("course", "A"), entity("course", "B"), entity("course", "C")

    two = build_entity_map([a, b])
    assert isinstance(two.slot("course"), Many)
    assert two["course"] == (a, b)

    three = build_entity_map([a, b, c])
    assert three["course"] == (a, b, c)


def test_entities_without_type_tag_are_skipped(entity):
    result = build_entity_map(
        [
            entity(None, "untyped"),
            entity("", "empty"),
            RawEntity(type=42, mention_text="numeric"),
            entity(None, None, entity("name", "hidden")),
            entity("name", "kept"),
        ]
    )

    assert list(result) == ["name"]
    assert result["name"].mention_text == "kept"


def test_nested_properties_become_sub_maps(entity):
    term = entity(
        "terms",
        None,
        entity("termType", "Fall"),
        entity("courses", None, entity("courseCode", "CS1")),
        entity("courses", None, entity("courseCode", "CS2")),
    )
    result = build_entity_map([term])

    terms = result["terms"]
    assert isinstance(terms, EntityMap)
    assert terms["termType"].mention_text == "Fall"
    codes = [course["courseCode"].mention_text for course in terms["courses"]]
    assert codes == ["CS1", "CS2"]


def test_empty_properties_keep_entity_as_leaf(entity):
    raw = RawEntity.model_validate({"type": "grade", "mentionText": "A", "properties": []})
    result = build_entity_map([raw])

    assert result["grade"] is raw


def test_input_is_not_mutated(entity):
    entities = [entity("name", "Alice"), entity("name", "Bob")]
    snapshot = list(entities)
    build_entity_map(entities)

    assert entities == snapshot


def test_deep_entity_chain_does_not_exhaust_stack():
    depth = 5000
    node = RawEntity(type="level", mention_text="bottom")
    for _ in range(depth):
        node = RawEntity(type="level", properties=(node,))

    result = build_entity_map([node])

    levels = 0
    current = result
    while isinstance(current["level"], EntityMap):
        current = current["level"]
        levels += 1
    assert levels == depth
    assert current["level"].mention_text == "bottom"


def test_builder_rejects_additions_after_build():
    builder = EntityMapBuilder()
    builder.add("name", "x")
    builder.build()

    with pytest.raises(RuntimeError):
        builder.add("name", "y")


def test_to_dict_gives_plain_view(entity):
    result = build_entity_map(
        [
            entity("name", "Alice"),
            entity("course", None, entity("code", "A1")),
            entity("course", None, entity("code", "B2")),
        ]
    )

    assert result.to_dict() == {
        "name": "Alice",
        "course": [{"code": "A1"}, {"code": "B2"}],
    }


def test_raw_entity_accepts_document_ai_fields():
    raw = RawEntity.model_validate(
        {
            "type": "gpa",
            "mentionText": 3.9,
            "confidence": 0.88,
            "pageAnchor": {"pageRefs": [{"page": "0"}]},
            "properties": None,
        }
    )

    assert raw.type_tag == "gpa"
    assert raw.mention_text == "3.9"
    assert raw.properties == ()
