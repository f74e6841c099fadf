import logging
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
import typer

from docai_extraction.errors import SchemaError
from docai_extraction.orchestrator import ExtractionOrchestrator
from docai_extraction.schema import load_schema
from docai_extraction.transcript_schema import transcript_schema

load_dotenv()


app = typer.Typer(add_completion=False)


@app.command()
def project(
    files: List[Path],
    schema_path: Optional[Path] = typer.Option(
        None,
        "--schema",
        "-s",
        envvar="DOCAI_SCHEMA",
        help="JSON schema description (defaults to the bundled transcript schema)",
    ),
    output: Path = typer.Option(
        Path("extractions.xlsx"),
        "--output",
        "-o",
        envvar="DOCAI_OUTPUT",
        help="Output Excel summary path; projected JSON documents go next to it",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Report every dropped subtree and the required keys it was missing",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="DOCAI_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    ),
):
    """
    Project Document AI responses onto a schema and write the results.
    """
    log_path = output.with_suffix(".log")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(log_path),
        ],
    )
    logger = logging.getLogger(__name__)
    logger.info("Logging to %s", log_path)

    try:
        schema = load_schema(schema_path) if schema_path else transcript_schema()
    except SchemaError as exc:
        typer.echo(f"Invalid schema: {exc}", err=True)
        raise typer.Exit(code=2)

    orchestrator = ExtractionOrchestrator(schema, strict=strict)
    results = orchestrator.process(files)
    orchestrator.write_json(results, output.parent / f"{output.stem}_documents")
    orchestrator.to_excel(results, output)
    for result in results:
        typer.echo(f"{result.document.name}: {result.status} ({result.error or 'ok'})")
    typer.echo(f"Wrote results to {output}")


def main():
    app()


if __name__ == "__main__":
    main()
