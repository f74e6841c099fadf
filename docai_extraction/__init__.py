"""
docai_extraction projects Document AI entity lists onto a caller-defined schema.

The layout separates entity folding, schema parsing, projection and the
per-document orchestration around them.
"""

__all__ = [
    "entities",
    "schema",
    "projector",
    "document",
    "orchestrator",
]
