"""
Default academic transcript schema.

Keys match the entity type labels of the transcript Document AI processor.
``enum``/``pattern``/``format`` entries are descriptive only and are not
enforced during projection.
"""

from __future__ import annotations

from typing import Any, Dict

from .schema import SchemaNode, parse_schema


def _string(**extra: Any) -> Dict[str, Any]:
    return {"type": "STRING", **extra}


def _number() -> Dict[str, Any]:
    return {"type": "NUMBER"}


def _address() -> Dict[str, Any]:
    return {
        "type": "OBJECT",
        "required": ["city", "country"],
        "properties": {
            "street": _string(),
            "street2": _string(),
            "city": _string(),
            "state": _string(),
            "postalCode": _string(pattern=r"^[A-Z0-9-\s]{3,10}$"),
            "country": _string(),
        },
    }


TRANSCRIPT_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "documentInfo": {
            "type": "OBJECT",
            "properties": {
                "schemaVersion": _string(),
                "documentType": _string(),
                "documentPurpose": _string(),
                "isOfficial": {
                    "type": "BOOLEAN",
                    "description": "Whether this is marked as an official or unofficial transcript",
                },
                "issueDate": _string(),
                "validUntil": _string(),
                "language": _string(),
                "registrar": _string(),
                "registrarTitle": _string(),
                "documentId": _string(),
            },
            "required": ["documentType"],
        },
        "verification": {
            "type": "OBJECT",
            "description": "Authentication metadata",
            "properties": {
                "verificationStatus": _string(
                    enum=["pending", "verified", "rejected", "suspected", "unknown"]
                ),
                "verificationMethod": _string(
                    enum=[
                        "digital_signature", "email_institution", "blockchain",
                        "official_website", "third_party_service", "paper_seal",
                        "watermark", "hologram", "secure_paper", "manual_review",
                        "registrar_confirmation", "other",
                    ]
                ),
                "securityFeatures": {
                    "type": "ARRAY",
                    "items": {
                        "type": "OBJECT",
                        "properties": {
                            "type": _string(
                                enum=[
                                    "watermark", "hologram", "seal", "signature",
                                    "secure_paper", "qr_code", "barcode", "other",
                                ]
                            ),
                            "verified": {"type": "BOOLEAN"},
                            "notes": _string(),
                        },
                    },
                },
                "verificationDate": _string(format="date-time"),
                "verificationNotes": _string(),
                "blockchainTxId": _string(),
                "verificationCode": _string(),
                "verifierName": _string(),
                "verifierTitle": _string(),
                "verifierInstitution": _string(),
            },
        },
        "studentInfo": {
            "type": "OBJECT",
            "properties": {
                "id": _string(),
                "firstName": _string(),
                "middleName": _string(),
                "lastName": _string(),
                "preferredName": _string(),
                "address_info": _address(),
                "email": _string(),
            },
            "required": ["firstName", "lastName"],
        },
        "institutionInfo": {
            "type": "OBJECT",
            "properties": {
                "institutionAdderss": _address(),
                "name": _string(),
                "scale": _string(),
                "gradingSystem": {
                    "type": "OBJECT",
                    "properties": {
                        "scale": _string(),
                        "gpaCalculation": _string(),
                        "academicStandingPolicy": _string(),
                    },
                },
            },
            "required": ["name"],
        },
        "academicInfo": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "level": _string(),
                    "degrees": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "degreeName": _string(),
                                "degreeType": _string(),
                                "major": {"type": "ARRAY", "items": _string()},
                                "minor": {"type": "ARRAY", "items": _string()},
                                "conferralDate": _string(),
                                "gpa": _number(),
                            },
                        },
                    },
                },
                "required": ["degrees"],
            },
        },
        "terms": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "termId": _string(),
                    "term": _string(),
                    "termType": _string(),
                    "termYear": _number(),
                    "startDate": _string(),
                    "endDate": _string(),
                    "academicStanding": _string(),
                    "termGpa": _number(),
                    "termCreditsAttempted": _number(),
                    "termCreditsEarned": _number(),
                    "termGradePoints": _number(),
                    "courses": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "courseCode": _string(),
                                "courseTitle": _string(),
                                "grade": _string(),
                                "gradePoints": _number(),
                                "creditsAttempted": _number(),
                                "creditsEarned": _number(),
                                "courseLevel": _string(),
                                "repeatCode": _string(),
                                "deliveryMode": _string(),
                                "gradingBasis": _string(),
                            },
                            "required": ["courseCode", "courseTitle", "grade"],
                        },
                    },
                },
                "required": ["termType", "termYear", "courses"],
            },
        },
        "cumulativeSummary": {
            "type": "OBJECT",
            "properties": {
                "overallGPA": _number(),
                "totalCreditsAttempted": _number(),
                "totalCreditsEarned": _number(),
                "totalGPACredits": _number(),
                "totalGradePoints": _number(),
                "totalCreditsTransferred": _number(),
                "classRank": {
                    "type": "OBJECT",
                    "properties": {
                        "rank": _number(),
                        "outOf": _number(),
                    },
                },
            },
        },
        "transferCredits": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "institutionName": _string(),
                    "term": _string(),
                    "transferGPA": _number(),
                    "totalCredits": _number(),
                    "transferredCourses": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {
                                "originalCourse": {
                                    "type": "OBJECT",
                                    "properties": {
                                        "courseCode": _string(),
                                        "courseTitle": _string(),
                                        "grade": _string(),
                                        "credits": _number(),
                                    },
                                    "required": ["courseCode", "courseTitle"],
                                },
                            },
                        },
                    },
                },
            },
        },
    },
    "required": ["studentInfo", "institutionInfo", "terms"],
}


def transcript_schema() -> SchemaNode:
    return parse_schema(TRANSCRIPT_SCHEMA)
