#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
MovieSearch - command-line batch driver and interactive search over movie plot summaries.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional, Tuple

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from MovieSearch.config import load_config
from MovieSearch.engine import MovieSearchEngine, MovieSearchIndex
from MovieSearch.loader import load_queries, load_summaries
from MovieSearch.metadata import IdentityTitleResolver, MetadataTitleResolver, TitleResolver

log = logging.getLogger(__name__)


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Send log records through rich, DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


class MovieSearchCLI:
    """Loads the corpus, builds the index and runs queries for the command line."""

    def __init__(self, config: Optional[dict] = None, console: Optional[Console] = None):
        self.config = config or load_config()
        self.console = console or Console()
        self.documents: List[Tuple[str, str]] = []
        self.index: Optional[MovieSearchIndex] = None
        self.engine: Optional[MovieSearchEngine] = None
        self.resolver: TitleResolver = IdentityTitleResolver()
        self.documents_loaded = False

    def print_header(self):
        """Display the application header"""
        self.console.print(Panel(
            "[bold blue]MovieSearch[/bold blue] [yellow]Plot Summary Search[/yellow]",
            border_style="blue",
            subtitle="TF-IDF term ranking and cosine phrase ranking",
            width=80
        ))

    def load_documents(self, summaries_path: str) -> bool:
        """Load plot summaries from a tab separated file"""
        try:
            self.console.print(f"Loading summaries from: [cyan]{summaries_path}[/cyan]")
            self.documents = list(load_summaries(summaries_path))
        except OSError as e:
            self.console.print(f"[bold red]Error loading summaries:[/bold red] {e}")
            return False

        self.documents_loaded = True
        self.console.print(f"[green]Loaded [bold]{len(self.documents)}[/bold] summaries[/green]")
        return True

    def load_metadata(self, metadata_path: str) -> bool:
        """Load the movie metadata table used to turn document IDs into titles"""
        metadata_config = self.config.get("metadata", {})
        try:
            self.resolver = MetadataTitleResolver.from_tsv(
                metadata_path,
                id_column=int(metadata_config.get("id_column", 0)),
                title_column=int(metadata_config.get("title_column", 2)),
            )
        except OSError as e:
            self.console.print(f"[bold red]Error loading metadata:[/bold red] {e}")
            return False

        self.console.print(f"[green]Loaded [bold]{len(self.resolver)}[/bold] titles[/green]")
        return True

    def init_engine(self) -> bool:
        """Build the index over the loaded documents and create the search engine"""
        if not self.documents_loaded:
            self.console.print("[bold red]No documents loaded. Load summaries first.[/bold red]")
            return False

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Building index...", total=None)
            self.index = MovieSearchIndex(config=self.config)
            self.index.index_documents(self.documents)
            self.engine = MovieSearchEngine(self.index)
            progress.update(task, completed=True)

        self.console.print(
            f"[green]Indexed {self.index.document_count} documents, "
            f"{len(self.index.inverted_index)} distinct terms[/green]"
        )
        return True

    def search(self, query: str, top_k: Optional[int] = None) -> List[Tuple[str, float]]:
        """Run one query, returning ranked (doc_id, score) pairs; failures yield no results"""
        if not self.engine:
            self.console.print("[bold red]Search engine not initialized.[/bold red]")
            return []

        try:
            return self.engine.rank(query, top_k)
        except Exception:
            log.exception("Search failed for query %r", query)
            return []

    def display_results(self, query: str, results: List[Tuple[str, float]], elapsed: Optional[float] = None):
        """Display ranked results as a table"""
        if not results:
            self.console.print(f"[yellow]No results found for '{escape(query)}'.[/yellow]")
            return

        title = f"[bold]{escape(query)}[/bold]"
        if elapsed is not None:
            title += f" [dim]({elapsed * 1000:.1f} ms)[/dim]"

        table = Table(box=box.HEAVY_EDGE, show_header=True, header_style="bold magenta", title=title)
        table.add_column("#", style="dim", width=4)
        table.add_column("Doc ID", style="cyan")
        table.add_column("Title", style="bold")
        table.add_column("Score", style="yellow", justify="right")

        for i, (doc_id, score) in enumerate(results, 1):
            table.add_row(str(i), doc_id, self.resolver.resolve_title(doc_id) or "[dim]<unknown>[/dim]",
                          f"{score:.4f}")

        self.console.print(table)

    def format_plain(self, query: str, results: List[Tuple[str, float]]) -> str:
        """One ``query: title, title`` line, titles missing from the metadata are left out"""
        titles = self.resolver.resolve_titles(doc_id for doc_id, _ in results)
        return f"{query}: {', '.join(titles)}"

    def run_batch(self, queries: List[str], top_k: Optional[int] = None, plain: bool = False):
        """Run every query in order and render its results"""
        outcomes = []
        for query in queries:
            start = time.perf_counter()
            results = self.search(query, top_k)
            elapsed = time.perf_counter() - start
            outcomes.append((query, results))

            if plain:
                self.console.print(self.format_plain(query, results), markup=False, highlight=False)
                self.console.print()
            else:
                self.display_results(query, results, elapsed)
        return outcomes

    def interactive_mode(self, top_k: Optional[int] = None):
        """Prompt for queries until the user quits"""
        self.console.rule("[bold blue]MovieSearch[/bold blue]")
        self.console.print("[dim]Enter a word or a phrase, 'quit' to exit.[/dim]")
        while True:
            try:
                query = self.console.input("\n[bold cyan]Search: [/bold cyan]")
            except EOFError:
                break

            if query.strip().lower() in ("quit", "exit"):
                break
            if not query.strip():
                self.console.print("[bold red]Empty query. Please try again.[/bold red]")
                continue

            start = time.perf_counter()
            results = self.search(query, top_k)
            self.display_results(query, results, time.perf_counter() - start)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='MovieSearch - TF-IDF and cosine similarity search over plot summaries'
    )
    parser.add_argument('--summaries', required=True,
                        help='Plot summaries file, one "<id>\\t<text>" per line')
    parser.add_argument('--metadata', help='Movie metadata TSV used to resolve titles')
    parser.add_argument('--queries', help='File with one query per line')
    parser.add_argument('--query', action='append', default=[],
                        help='Query to run (can be repeated)')
    parser.add_argument('--top', type=int, help='Number of results per query')
    parser.add_argument('--workers', type=int, help='Threads used to tokenize documents')
    parser.add_argument('--config', help='Path to a config.json overriding the defaults')
    parser.add_argument('--plain', action='store_true',
                        help='Print "query: title, title" lines instead of tables')
    parser.add_argument('--interactive', action='store_true', help='Prompt for queries')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    """Main entry point for the command line"""
    args = build_parser().parse_args(argv)

    console = console or Console()
    configure_logging(args.verbose)

    config = load_config(args.config)
    if args.workers is not None:
        config.setdefault("indexing", {})["workers"] = args.workers

    cli = MovieSearchCLI(config=config, console=console)
    if not args.plain:
        cli.print_header()

    if not cli.load_documents(args.summaries):
        return 1
    if args.metadata and not cli.load_metadata(args.metadata):
        return 1
    if not cli.init_engine():
        return 1

    queries = list(args.query)
    if args.queries:
        try:
            queries.extend(load_queries(args.queries))
        except OSError as e:
            console.print(f"[bold red]Error loading queries:[/bold red] {e}")
            return 1

    if queries:
        cli.run_batch(queries, top_k=args.top, plain=args.plain)

    # A query source that turned out empty is not a request to prompt
    if args.interactive or not (args.query or args.queries):
        cli.interactive_mode(top_k=args.top)

    return 0


if __name__ == "__main__":
    sys.exit(main())
