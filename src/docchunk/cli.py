"""CLI interface for docchunk.

Typer-based command-line interface with Rich output formatting.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from docchunk import __version__
from docchunk.chunk.batch import batched
from docchunk.config import CONFIG_FILE, default_config, load_config, save_config
from docchunk.exceptions import DocchunkError
from docchunk.ingest import is_url
from docchunk.pipeline import DocumentChunker

__all__ = ["app"]

app = typer.Typer(
    name="docchunk",
    help="Split documents into word-bounded passages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


@app.command()
def version() -> None:
    """Show docchunk version."""
    console.print(f"docchunk {__version__}")


@app.command()
def chunk(
    source: Annotated[str, typer.Argument(help="File path or http(s) URL")],
    max_words: Annotated[
        int | None,
        typer.Option("--max-words", "-m", help="Maximum words per chunk"),
    ] = None,
    granularity: Annotated[
        str | None,
        typer.Option("--granularity", "-g", help="word, sentence, paragraph or page"),
    ] = None,
    parts: Annotated[
        int | None,
        typer.Option("--parts", "-p", help="Group chunks N at a time"),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to a docchunk.toml"),
    ] = None,
    reader: Annotated[
        str,
        typer.Option("--type", "-t", help="Reader override (text, pdf, docx, html)"),
    ] = "",
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format (text, json)"),
    ] = "text",
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Chunk a document and print the passages."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if fmt not in ("text", "json"):
        console.print(f"[red]Unknown output format:[/red] {escape(fmt)}")
        raise typer.Exit(code=1)

    try:
        config = load_config(config_path) if config_path is not None else default_config()
        if max_words is not None:
            config.chunk.max_words = max_words
        if granularity is not None:
            config.chunk.granularity = granularity
        config.chunker_config()

        chunker = DocumentChunker(config, reader_name=reader)
        if is_url(source):
            chunks = chunker.extract_chunks_from_url(source)
        else:
            chunks = chunker.extract_chunks(Path(source).resolve())

        groups = batched(chunks, parts) if parts is not None else None
    except DocchunkError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    if fmt == "json":
        payload = groups if groups is not None else chunks
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    if groups is not None:
        for part_index, group in enumerate(groups, start=1):
            console.print(f"[bold]Part {part_index}[/bold] ({len(group)} chunks)")
            for text in group:
                console.print(escape(text), highlight=False)
                console.print()
    else:
        for index, text in enumerate(chunks, start=1):
            console.print(f"[dim]--- chunk {index} ---[/dim]")
            console.print(escape(text), highlight=False)

    console.print(f"\n[green]{len(chunks)} chunk(s)[/green]")


@app.command(name="init-config")
def init_config(
    path: Annotated[
        Path,
        typer.Argument(help="Where to write the config file"),
    ] = Path(CONFIG_FILE),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing file"),
    ] = False,
) -> None:
    """Write a config file with default values."""
    if path.exists() and not force:
        console.print(f"[yellow]{escape(str(path))} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(code=1)

    try:
        save_config(default_config(), path)
    except DocchunkError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1) from e

    console.print(f"[green]Wrote default config[/green] to {escape(str(path))}")
