from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Literal, Sequence

import pandas as pd

from .document import load_entities
from .entities import build_entity_map
from .projector import ABSENT, DroppedSubtree, SchemaProjector
from .schema import SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class DocumentResult:
    document: Path
    status: Literal["ok", "empty", "error"]
    data: Any = None
    error: str | None = None
    dropped: List[DroppedSubtree] = field(default_factory=list)


class ExtractionOrchestrator:
    """
    Runs load -> entity map -> projection for each Document AI response.

    One failing document never aborts the batch; it is recorded as an error
    result instead.
    """

    def __init__(self, schema: SchemaNode, *, strict: bool = False):
        self.projector = SchemaProjector(schema)
        self.strict = strict

    def process_document(self, path: Path) -> DocumentResult:
        entities = load_entities(path)
        entity_map = build_entity_map(entities)
        logger.info("Built entity map with %d keys for %s", len(entity_map), path.name)

        dropped: List[DroppedSubtree] = []
        if self.strict:
            report = self.projector.project_with_report(entity_map)
            value, dropped = report.value, report.dropped
            for drop in dropped:
                logger.warning(
                    "%s: dropped %s (%s%s)",
                    path.name,
                    drop.path,
                    drop.reason,
                    f": {', '.join(drop.missing_keys)}" if drop.missing_keys else "",
                )
        else:
            value = self.projector.project(entity_map)

        if value is ABSENT:
            return DocumentResult(document=path, status="empty", dropped=dropped)
        return DocumentResult(document=path, status="ok", data=value, dropped=dropped)

    def process(self, files: Sequence[Path]) -> List[DocumentResult]:
        """
        Project every file against the schema.
        """
        results: List[DocumentResult] = []
        for file_path in files:
            path = Path(file_path)
            try:
                logger.info("Projecting %s", path.name)
                results.append(self.process_document(path))
            except Exception as exc:
                logger.exception("Projection failed for %s", path.name)
                results.append(DocumentResult(document=path, status="error", error=str(exc)))
        return results

    def write_json(self, results: Sequence[DocumentResult], output_dir: Path) -> List[Path]:
        """
        Write each projected document to ``<output_dir>/<stem>.json``.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for res in results:
            if res.data is None:
                continue
            target = output_dir / f"{res.document.stem}.json"
            target.write_text(json.dumps(res.data, indent=2, ensure_ascii=False), encoding="utf-8")
            written.append(target)
        logger.info("Wrote %d documents to %s", len(written), output_dir)
        return written

    def to_dataframe(self, results: Sequence[DocumentResult]) -> pd.DataFrame:
        """
        Convert results into a flat DataFrame.

        Columns: document_name, status, error, dropped, <dotted field paths...>
        Nested objects are flattened; arrays are kept as JSON text.
        """
        rows: List[dict[str, Any]] = []
        for res in results:
            row: dict[str, Any] = {
                "document_name": res.document.name,
                "status": res.status,
                "error": res.error,
                "dropped": len(res.dropped),
            }
            if isinstance(res.data, dict):
                flat = pd.json_normalize(res.data, sep=".").to_dict(orient="records")[0]
                row.update(
                    {
                        key: json.dumps(val, ensure_ascii=False) if isinstance(val, list) else val
                        for key, val in flat.items()
                    }
                )
            elif res.data is not None:
                row["data"] = json.dumps(res.data, ensure_ascii=False)
            rows.append(row)
        return pd.DataFrame(rows)

    def to_excel(self, results: Sequence[DocumentResult], output_path: Path) -> None:
        """
        Write results to an Excel file with sheet 'extractions'.
        """
        df = self.to_dataframe(results)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing results to %s", output_path)
        with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name="extractions", index=False)
