"""CLI entry point for the business card digitizer."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from card_digitizer.config import Settings, get_settings
from card_digitizer.extractor.base import Extractor
from card_digitizer.extractor.ollama import OllamaExtractor
from card_digitizer.extractor.openai import OpenAIExtractor
from card_digitizer.models.record import FIELD_NAMES, CardRecord, ScanResult
from card_digitizer.scanner import CardScanner
from card_digitizer.sink.airtable import AirtableSink
from card_digitizer.text_parser import normalize_record

app = typer.Typer(
    name="cardscan",
    help="Digitize business cards and save them to Airtable.",
    add_completion=False,
)
console = Console()

FIELD_LABELS = {
    "name": "Name",
    "title": "Title",
    "company": "Company",
    "phone": "Phone",
    "email": "Email",
    "website": "Website",
    "address": "Address",
    "industry": "Industry",
    "notes": "Notes",
}


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show progress logging"),
    ] = False,
):
    """Digitize business cards and save them to Airtable."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def scan(
    image_path: Annotated[
        Path,
        typer.Argument(
            help="Path to the business card image",
            exists=True,
            readable=True,
        ),
    ],
    extractor: Annotated[
        str,
        typer.Option(
            "--extractor",
            "-e",
            help="Extractor backend: openai[:<model>] or ollama[:<model>]",
        ),
    ] = "openai",
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output raw JSON instead of formatted output",
        ),
    ] = False,
    review: Annotated[
        bool,
        typer.Option(
            "--review",
            "-r",
            help="Review and edit every field before continuing",
        ),
    ] = False,
    save: Annotated[
        bool,
        typer.Option(
            "--save",
            "-s",
            help="Save the record to Airtable",
        ),
    ] = False,
):
    """Extract contact information from a business card photo."""
    settings = get_settings()
    try:
        scanner = CardScanner(extractor=create_extractor(extractor, settings))
        result = scanner.scan(image_path)
        record = result.record

        if review:
            _print_formatted(record, result)
            record = review_record(record)

        if output_json:
            print(result.model_copy(update={"record": record}).model_dump_json(indent=2))
        elif not review:
            _print_formatted(record, result)

        if save:
            _save(record, settings)

    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("parse-text")
def parse_text(
    text_file: Annotated[
        str,
        typer.Argument(help="Text file with the card transcript, or - for stdin"),
    ] = "-",
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output raw JSON instead of formatted output",
        ),
    ] = False,
):
    """Run the heuristic field parser on already transcribed card text."""
    if text_file == "-":
        text = sys.stdin.read()
    else:
        path = Path(text_file)
        if not path.is_file():
            console.print(f"[red]Error:[/red] Text file not found: {path}")
            raise typer.Exit(1)
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            console.print(f"[red]Error:[/red] Text file is not valid UTF-8: {path} ({e.reason})")
            raise typer.Exit(1)

    record = CardScanner().parse_text(text)

    if output_json:
        print(record.model_dump_json(indent=2))
    else:
        _print_formatted(record)


@app.command("save")
def save_record(
    record_file: Annotated[
        Path,
        typer.Argument(
            help="JSON file with a card record (as printed by scan --json or parse-text --json)",
            exists=True,
            readable=True,
        ),
    ],
):
    """Save a card record from a JSON file to Airtable."""
    try:
        record = load_record(record_file)
        _save(record, get_settings())
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("check-store")
def check_store():
    """Test the Airtable connection."""
    try:
        sink = _create_sink(get_settings())
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if not sink.check():
        console.print(f"[red]Error:[/red] Cannot reach {sink.name}. Run with -v for details.")
        raise typer.Exit(1)
    console.print(f"[green]OK:[/green] {sink.name} is reachable")


@app.command()
def version():
    """Show version information."""
    from card_digitizer import __version__

    console.print(f"cardscan version {__version__}")


def create_extractor(extractor_spec: str, settings: Settings) -> Extractor:
    """Create extractor instance from a "backend[:model]" string."""
    if ":" in extractor_spec:
        backend, model = extractor_spec.split(":", 1)
    else:
        backend = extractor_spec
        model = None

    if backend == "openai":
        return OpenAIExtractor(
            api_key=settings.openai_api_key,
            model=model or settings.openai_model,
            base_url=settings.openai_base_url,
            timeout=settings.request_timeout,
        )
    if backend == "ollama":
        return OllamaExtractor(
            model=model or settings.ollama_model,
            base_url=settings.ollama_url,
            timeout=settings.request_timeout,
        )
    raise ValueError(
        f"Unknown extractor backend: {backend}. Use 'openai:<model>' or 'ollama:<model>'"
    )


def load_record(path: Path) -> CardRecord:
    """Read a record from JSON; accepts a bare record or a scan result."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("record"), dict):
        data = data["record"]
    try:
        return CardRecord.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid card record in {path}: {e}") from e


def review_record(record: CardRecord) -> CardRecord:
    """Prompt for each field, keeping the current value as default."""
    console.print("[bold]Review fields[/bold] [dim](Enter keeps the value, '-' clears it)[/dim]")
    values = {}
    for field_name in FIELD_NAMES:
        current = getattr(record, field_name) or ""
        answer = Prompt.ask(FIELD_LABELS[field_name], default=current, console=console)
        values[field_name] = None if answer.strip() == "-" else answer
    return normalize_record(CardRecord(**values))


def _create_sink(settings: Settings) -> AirtableSink:
    return AirtableSink(
        api_key=settings.airtable_api_key,
        base_id=settings.airtable_base_id,
        table_name=settings.airtable_table_name,
        timeout=settings.request_timeout,
    )


def _save(record: CardRecord, settings: Settings) -> None:
    scanner = CardScanner(sink=_create_sink(settings))
    record_id = scanner.save(record)
    console.print(f"[green]Saved:[/green] {record.name} ({record_id})")


def _print_formatted(record: CardRecord, result: ScanResult | None = None):
    """Print formatted card record."""
    console.print()

    if record.is_empty():
        console.print("[yellow]No fields detected.[/yellow]")
    else:
        table = Table(show_header=False, box=None)
        table.add_column("Field", style="dim")
        table.add_column("Value")
        for field_name in FIELD_NAMES:
            value = getattr(record, field_name)
            if value:
                table.add_row(FIELD_LABELS[field_name], value)
        console.print(table)

    if result is not None:
        if result.used_fallback:
            rprint(Panel(result.raw_text, title="Model reply (parsed heuristically)", border_style="yellow"))
        if result.metadata:
            console.print()
            console.print(
                f"[dim]Processed in {result.metadata.processing_time_ms:.0f}ms "
                f"(Extractor: {result.metadata.extractor_backend})[/dim]"
            )

    console.print()


if __name__ == "__main__":
    app()
