"""CLI interface for the advisor document engine."""

import asyncio
import json
from pathlib import Path

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ....adapters.extractors import get_default_extractors
from ....adapters.outbound.memory_repository import InMemoryDocumentRepository
from ....adapters.outbound.token_estimator import WordRatioTokenEstimator
from ....common.exception_handler import format_exception_json
from ....common.utils import format_file_size, normalize_text
from ....config.logging import get_logger, setup_logging
from ....config.settings import settings
from ....core.domain import UploadedFile
from ....core.domain.exceptions import AdvisorDocsError
from ....core.services import (
    ContextAssemblyService,
    DocumentIngestionService,
    DocumentNormalizer,
    IngestionOutcome,
)

app = typer.Typer(
    name="advisor-docs",
    help="Inspect documents and preview the context an advisor would receive",
    add_completion=False,
)

console = Console(legacy_windows=False)
logger = get_logger("cli")

CLI_ADVISOR_ID = "cli-advisor"
CLI_USER_ID = "cli-user"


def handle_cli_error(exc: Exception) -> None:
    """Display an error with its code; full JSON details when DEBUG is set."""
    error_data = format_exception_json(exc, include_trace=settings.debug)

    if settings.debug:
        console.print(
            Panel(
                json.dumps(error_data, indent=2, default=str),
                title="[bold red]Error Details[/]",
                border_style="red",
            )
        )
        return

    error_code = error_data["error"].get("code", "UNKNOWN")
    console.print(f"\n[red]Error [{error_code}]:[/] {error_data['error']['message']}")
    console.print(f"[dim]Type: {error_data['error']['type']}[/]")
    console.print("[dim]Set DEBUG=true for full details[/]")


def _read_upload(path: Path) -> UploadedFile:
    return UploadedFile(filename=path.name, content=path.read_bytes())


def _build_normalizer() -> DocumentNormalizer:
    return DocumentNormalizer(get_default_extractors(), settings)


def _print_outcomes(outcomes: list[IngestionOutcome]) -> None:
    for outcome in outcomes:
        if outcome.ok:
            flag = " [yellow](degraded)[/]" if outcome.document.metadata.degraded else ""
            console.print(f"[green]Stored[/] {outcome.filename}{flag}")
        else:
            console.print(f"[red]Rejected[/] {outcome.filename}: {outcome.error.message}")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs")) -> None:
    setup_logging("DEBUG" if verbose else "WARNING", json_format=settings.log_json)


@app.command()
def inspect(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    show_chunks: bool = typer.Option(True, "--chunks/--no-chunks", help="List the chunks"),
) -> None:
    """Normalize one file and show its metadata and chunks."""
    try:
        processed = asyncio.run(_build_normalizer().process(_read_upload(file)))
    except AdvisorDocsError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    metadata = processed.metadata
    table = Table(title=file.name, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Type", metadata.doc_type.label)
    table.add_row("Title", metadata.title)
    table.add_row("Size", format_file_size(metadata.size))
    table.add_row("Words", str(metadata.word_count))
    for label, value in (
        ("Pages", metadata.pages),
        ("Slides", metadata.slides),
        ("Sheets", metadata.sheets),
        ("Author", metadata.author),
    ):
        if value is not None:
            table.add_row(label, str(value))
    table.add_row("Chunks", str(len(processed.chunks)))
    if metadata.degraded:
        table.add_row("Status", "[yellow]degraded (placeholder text stored)[/]")
    console.print(table)

    for warning in metadata.extraction_warnings:
        console.print(f"[yellow]Warning:[/] {warning}")

    if show_chunks:
        for index, chunk in enumerate(processed.chunks):
            console.print(
                Panel(chunk, title=f"Chunk {index} ({len(chunk)} chars)", border_style="dim")
            )


@app.command()
def context(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    message: list[str] = typer.Option(
        [], "--message", "-m", help="Conversation message; repeat for history"
    ),
    max_tokens: int | None = typer.Option(
        None, "--max-tokens", min=1, help="Token budget override"
    ),
) -> None:
    """Ingest files into a fresh repository and print the prompt section."""
    repository = InMemoryDocumentRepository()
    ingestion = DocumentIngestionService(_build_normalizer(), repository)
    uploads = [_read_upload(path) for path in files]

    try:
        outcomes = asyncio.run(ingestion.ingest_batch(uploads, CLI_ADVISOR_ID, CLI_USER_ID))
    except AdvisorDocsError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)

    _print_outcomes(outcomes)

    service = ContextAssemblyService(repository, WordRatioTokenEstimator(), settings)
    documents = repository.list_by_advisor(CLI_ADVISOR_ID)
    references = service.parse_references(message[-1], documents) if message else []
    bundle = service.get_context(
        CLI_ADVISOR_ID,
        message,
        [reference.id for reference in references],
        max_tokens=max_tokens,
    )

    formatted = service.format_for_prompt(bundle)
    if not formatted:
        console.print("[dim]No relevant excerpts; the documents section would be omitted.[/]")
        return
    console.print(formatted, markup=False, highlight=False)
    console.print(
        f"[bold]{len(bundle.chunks)} chunks, {bundle.total_tokens}/{bundle.max_tokens} tokens[/]"
    )


@app.command()
def search(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    query: str = typer.Option(..., "--query", "-q", help="Free text query"),
) -> None:
    """Ingest files and run a keyword search over them."""
    repository = InMemoryDocumentRepository()
    ingestion = DocumentIngestionService(_build_normalizer(), repository)
    uploads = [_read_upload(path) for path in files]

    try:
        outcomes = asyncio.run(ingestion.ingest_batch(uploads, CLI_ADVISOR_ID, CLI_USER_ID))
    except AdvisorDocsError as exc:
        handle_cli_error(exc)
        raise typer.Exit(1)
    _print_outcomes([outcome for outcome in outcomes if not outcome.ok])

    results = repository.search(query)
    if not results:
        console.print("[dim]No matches.[/]")
        return

    table = Table(title=f"Results for {query!r}")
    table.add_column("Document", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("First match")
    for result in results:
        excerpt = normalize_text(result.matched_chunks[0])[:80] if result.matched_chunks else ""
        table.add_row(result.document.filename, f"{result.score:g}", excerpt)
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(8000, help="Bind port"),
) -> None:
    """Run the HTTP API with uvicorn."""
    logger.info(f"Serving advisor document API on {host}:{port}")
    uvicorn.run("advisor_docs.adapters.inbound.api.main:app", host=host, port=port)


if __name__ == "__main__":
    app()
