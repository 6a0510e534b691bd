"""Command line interface for DocSeek."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from docseek.config import AppConfig
from docseek.exceptions import DocSeekError
from docseek.index.search import Searcher, format_results
from docseek.index.storage import CacheState, IndexCache
from docseek.utils.files import iter_paths_by_extension


console = Console()
app = typer.Typer(help="DocSeek - term frequency search over a directory of documents")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def _fail(exc: DocSeekError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {escape(exc.message)}", soft_wrap=True, highlight=False)
    return typer.Exit(code=1)


def _build_config(filetype: str) -> AppConfig:
    try:
        return AppConfig(filetype=filetype)
    except DocSeekError as exc:
        raise _fail(exc) from exc


@app.command()
def search(
    filetype: str = typer.Argument(..., help="Extension of the documents to index, e.g. pdf"),
    directory: Path = typer.Argument(
        ..., help="Directory holding the documents.", exists=True, file_okay=False, resolve_path=True
    ),
    query: str = typer.Argument(..., help="Single term to search for"),
    top_k: Optional[int] = typer.Option(None, "--top-k", min=1, help="Number of results to display"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rank the documents in DIRECTORY by how often they mention QUERY."""
    _setup_logging(verbose)
    config = _build_config(filetype)
    cache = IndexCache(config=config)
    candidates = iter_paths_by_extension(directory, config.filetype, exclude=config.snapshot_name)
    term = query.strip().lower()

    try:
        state, documents = cache.inspect(directory)
        if state is CacheState.FRESH:
            console.print(f"Searching for {term}", highlight=False, markup=False)
        else:
            console.print("Reindexing data", highlight=False)
            documents = cache.rebuild_for(state, directory, candidates)
    except DocSeekError as exc:
        raise _fail(exc) from exc

    results = Searcher(documents).search(term, top_k=top_k)
    if not results:
        console.print("[yellow]No documents indexed.[/yellow]")
        return

    for line in format_results(results):
        console.print(line, soft_wrap=True, highlight=False, markup=False)


@app.command()
def index(
    filetype: str = typer.Argument(..., help="Extension of the documents to index, e.g. pdf"),
    directory: Path = typer.Argument(
        ..., help="Directory holding the documents.", exists=True, file_okay=False, resolve_path=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Rebuild the index snapshot for DIRECTORY from scratch."""
    _setup_logging(verbose)
    config = _build_config(filetype)
    cache = IndexCache(config=config)
    candidates = iter_paths_by_extension(directory, config.filetype, exclude=config.snapshot_name)

    console.print(f"Indexing into [bold]{config.resolve_snapshot_path(directory)}[/bold]...")
    try:
        documents = cache.rebuild(directory, candidates)
    except DocSeekError as exc:
        raise _fail(exc) from exc

    console.print(f"Indexed: {len(documents)}")


@app.command()
def status(
    directory: Path = typer.Argument(
        ..., help="Directory holding the documents.", exists=True, file_okay=False, resolve_path=True
    ),
) -> None:
    """Report whether the index snapshot for DIRECTORY is absent, stale or fresh."""
    cache = IndexCache()
    store = cache.store_for(directory)
    try:
        state, documents = cache.inspect(directory)
    except DocSeekError as exc:
        raise _fail(exc) from exc

    console.print(f"Snapshot: {store.path}", soft_wrap=True, highlight=False, markup=False)
    console.print(f"State: {state.value}, documents: {len(documents)}", highlight=False)
