import json

import pytest

from docai_extraction.entities import RawEntity


def leaf(type_, text):
    return {"type": type_, "mentionText": text, "confidence": 0.97}


def group(type_, *properties):
    return {"type": type_, "mentionText": "", "properties": list(properties)}


TRANSCRIPT_RESPONSE = {
    "document": {
        "text": "OFFICIAL TRANSCRIPT ...",
        "entities": [
            group(
                "documentInfo",
                leaf("documentType", "transcript"),
                leaf("isOfficial", "true"),
            ),
            group(
                "studentInfo",
                leaf("firstName", "Ada"),
                leaf("lastName", "Lovelace"),
                group("address_info", leaf("city", "London")),
            ),
            group(
                "institutionInfo",
                leaf("name", "University of London"),
                group(
                    "institutionAdderss",
                    leaf("street", "Malet Street"),
                    leaf("city", "London"),
                    leaf("country", "United Kingdom"),
                ),
            ),
            group(
                "terms",
                leaf("termType", "Fall"),
                leaf("termYear", "1833"),
                group(
                    "courses",
                    leaf("courseCode", "MATH101"),
                    leaf("courseTitle", "Analysis"),
                    leaf("grade", "A"),
                ),
                group(
                    "courses",
                    leaf("courseCode", "MATH102"),
                    leaf("courseTitle", "Algebra"),
                ),
            ),
            group(
                "terms",
                leaf("termType", "Spring"),
                leaf("termYear", "1834"),
                group(
                    "courses",
                    leaf("courseCode", "ENG100"),
                    leaf("grade", "B"),
                ),
            ),
            {"mentionText": "no type tag", "properties": [leaf("name", "ignored")]},
        ],
    }
}


@pytest.fixture
def transcript_response():
    return json.loads(json.dumps(TRANSCRIPT_RESPONSE))


@pytest.fixture
def write_response(tmp_path):
    """Write a payload to a JSON file under tmp_path and return its path."""

    def _write(name, payload):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def entity():
    def _entity(type_=None, text=None, *properties):
        return RawEntity(type=type_, mention_text=text, properties=tuple(properties))

    return _entity
