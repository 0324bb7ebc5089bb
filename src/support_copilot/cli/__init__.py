"""CLI entry point for the support copilot."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.table import Table

from support_copilot import __version__
from support_copilot.cli_services import (
    EXIT_ERROR,
    EXIT_INVALID_ARG,
    EXIT_SUCCESS,
    CLIContext,
    _escape_rich,
    configure_logging,
    console,
    error_console,
    get_cli_services,
    require_initialized,
)
from support_copilot.config import DATA_DIR_NAME
from support_copilot.exceptions import (
    InvalidInputError,
    NotFoundError,
    SupportCopilotError,
)
from support_copilot.models import SearchResult, TicketSolutionBundle
from support_copilot.tickets import JsonTicketRepository

app = typer.Typer(
    name="sc",
    help="Documentation retrieval and solution suggestions for support tickets",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

SNIPPET_LENGTH = 200


@contextmanager
def _report_errors(action: str) -> Generator[None, None, None]:
    """Map domain errors raised inside the block to CLI exit codes."""
    try:
        yield
    except (InvalidInputError, NotFoundError) as e:
        error_console.print(f"[red]Error {action}:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_INVALID_ARG)
    except SupportCopilotError as e:
        error_console.print(f"[red]Error {action}:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)


def _get_data_dir_from_context(ctx: typer.Context) -> Path | None:
    if isinstance(ctx.obj, CLIContext):
        return ctx.obj.data_dir
    return None


def _print_results(results: list[SearchResult]) -> None:
    for i, result in enumerate(results, 1):
        document = result.document
        pages = (
            f"p. {result.chunk.start_page}"
            if result.chunk.start_page == result.chunk.end_page
            else f"pp. {result.chunk.start_page}-{result.chunk.end_page}"
        )
        console.print(
            f"\n[bold]{i}.[/bold] {_escape_rich(document.title)} "
            f"[dim]({pages}, {result.relevance.value})[/dim] Score: {result.score:.3f}"
        )
        snippet = _escape_rich(result.chunk.text[:SNIPPET_LENGTH])
        console.print(f"   {snippet}...")


def _print_bundle(bundle: TicketSolutionBundle) -> None:
    console.print(
        f"[bold]Suggested solutions for ticket {_escape_rich(bundle.ticket_id)}[/bold] "
        f"(confidence {bundle.confidence:.2f})"
    )
    for i, solution in enumerate(bundle.solutions, 1):
        console.print(
            f"\n[bold]{i}. {_escape_rich(solution.title)}[/bold] "
            f"[dim]confidence {solution.confidence:.2f}[/dim]"
        )
        console.print(f"   {_escape_rich(solution.description)}")
        for step_number, step in enumerate(solution.steps, 1):
            console.print(f"   {step_number}) {_escape_rich(step)}")
        if solution.references:
            refs = ", ".join(solution.references)
            console.print(f"   [dim]References: {_escape_rich(refs)}[/dim]")

    if bundle.document_sources:
        console.print("\n[bold]Sources[/bold]")
        _print_results(bundle.document_sources)
    else:
        console.print("\n[yellow]No matching documentation found[/yellow]")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    data_dir: str | None = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Data directory. Default: .support_copilot in current directory. "
        "Set SUPPORT_COPILOT_DATA_DIR env var to avoid passing this option.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging, including provider fallbacks",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        help="Show version information",
        is_flag=True,
    ),
):
    """sc - Support copilot.

    Index product documentation and suggest solutions for support tickets.
    """
    if version:
        console.print(f"sc version {__version__}")
        raise typer.Exit(code=EXIT_SUCCESS)

    configure_logging(verbose)

    resolved_data_dir: Path | None = None
    if data_dir:
        # Check for null bytes (common path injection)
        if "\0" in data_dir:
            error_console.print(
                "[red]Error: Invalid --data-dir path (contains null byte):[/red] "
                f"{_escape_rich(data_dir)}"
            )
            raise typer.Exit(code=EXIT_ERROR)

        try:
            resolved_data_dir = Path(data_dir).expanduser()
            resolved_data_dir.resolve()
        except (OSError, ValueError) as e:
            error_console.print(
                f"[red]Error: Invalid --data-dir path:[/red] {_escape_rich(data_dir)}"
            )
            error_console.print(f"[dim]{e}[/dim]")
            raise typer.Exit(code=EXIT_ERROR)

    ctx.obj = CLIContext(data_dir=resolved_data_dir, verbose=verbose)

    if ctx.invoked_subcommand is None:
        console.print("[bold]Support Copilot[/bold] - Documentation search for support tickets")
        console.print("Use --help for usage information")
        raise typer.Exit(code=EXIT_SUCCESS)


@app.command()
def init(
    ctx: typer.Context,
    path: str = typer.Option(
        ".",
        "--path",
        "-p",
        help="Directory to initialize (default: current directory)",
    ),
) -> None:
    """Initialize a data directory for indexed documents and uploads."""
    init_path = Path(path).resolve()
    if not init_path.is_dir():
        error_console.print(f"[red]Error: Path is not a directory: {_escape_rich(path)}[/red]")
        raise typer.Exit(code=EXIT_INVALID_ARG)

    data_dir = _get_data_dir_from_context(ctx) or init_path / DATA_DIR_NAME
    if data_dir.exists():
        error_console.print(f"[yellow]Already initialized at {_escape_rich(str(data_dir))}[/yellow]")
        raise typer.Exit(code=EXIT_ERROR)

    try:
        data_dir.mkdir(parents=True)
    except OSError as e:
        error_console.print(f"[red]Error: Cannot create directory:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)

    console.print(f"[green]Initialized support copilot at {_escape_rich(str(data_dir))}[/green]")
    console.print("[dim]You can now use 'sc index PATH' to add documentation[/dim]")


@app.command()
def index(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or directory of .pdf, .md and .txt documents"),
) -> None:
    """Index a documentation file or directory."""
    index_path = Path(path)
    if not index_path.exists():
        error_console.print(f"[red]Error: Path does not exist: {_escape_rich(path)}[/red]")
        raise typer.Exit(code=EXIT_INVALID_ARG)

    with get_cli_services(ctx) as factory, _report_errors("indexing"):
        report = factory.create_index_service().ingest(index_path)

    for warning in report.warnings:
        error_console.print(f"[yellow]Warning:[/yellow] {_escape_rich(warning)}")
    if report.skipped:
        console.print(f"[dim]Skipped {len(report.skipped)} unsupported file(s)[/dim]")
    console.print(f"[green]Indexed {report.count} document(s)[/green]")


@app.command()
def upload(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="Document to upload (.pdf, .md or .txt)"),
) -> None:
    """Copy a document into the uploads directory and index it."""
    file_path = Path(file)
    if not file_path.is_file():
        error_console.print(f"[red]Error: File does not exist: {_escape_rich(file)}[/red]")
        raise typer.Exit(code=EXIT_INVALID_ARG)

    try:
        payload = file_path.read_bytes()
    except OSError as e:
        error_console.print(f"[red]Error reading file:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)

    with get_cli_services(ctx) as factory, _report_errors("uploading"):
        document = factory.create_index_service().upload_document(file_path.name, payload)

    console.print(
        f"[green]Uploaded {_escape_rich(document.title)}[/green] "
        f"({len(document.chunks)} chunk(s), id {document.id})"
    )
    if document.tags:
        console.print(f"[dim]Tags: {', '.join(document.tags)}[/dim]")


@app.command()
def search(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Search query text"),
    top_k: int = typer.Option(
        5,
        "--top-k",
        "-k",
        help="Number of results to return (default: 5)",
    ),
    min_score: float = typer.Option(
        0.3,
        "--min-score",
        help="Minimum cosine similarity (default: 0.3)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print results as JSON"),
) -> None:
    """Search indexed documentation with semantic similarity."""
    if top_k <= 0:
        error_console.print(f"[red]Error:[/red] --top-k must be a positive integer, got {top_k}")
        raise typer.Exit(code=EXIT_INVALID_ARG)

    with get_cli_services(ctx) as factory, _report_errors("during search"):
        results = factory.create_query_service().search(query, top_k=top_k, min_score=min_score)

    if as_json:
        # Use built-in print to avoid Rich markup interpretation
        print("[" + ",".join(result.model_dump_json(exclude={"document": {"content"}}) for result in results) + "]")
        return

    if not results:
        console.print("[yellow]No results found[/yellow]")
        return

    console.print(f"[bold]Search results for:[/bold] {_escape_rich(query)}")
    _print_results(results)


@app.command()
def solve(
    ctx: typer.Context,
    ticket_id: str = typer.Argument(..., help="Ticket id to solve"),
    tickets: str = typer.Option(
        ...,
        "--tickets",
        "-t",
        help="JSON file with the tickets (a list, or an object with a 'tickets' list)",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the solution bundle as JSON"),
) -> None:
    """Suggest solutions for a ticket from the indexed documentation."""
    with get_cli_services(ctx) as factory, _report_errors("solving ticket"):
        repository = JsonTicketRepository(tickets)
        bundle = factory.create_solution_service(repository).get_ticket_solutions(ticket_id)

    if as_json:
        print(bundle.model_dump_json(indent=2, exclude={"document_sources": {"__all__": {"document": {"content"}}}}))
        return

    _print_bundle(bundle)


@app.command()
def stats(ctx: typer.Context) -> None:
    """Show indexing statistics and storage info."""
    config = require_initialized(ctx)

    with get_cli_services(ctx) as factory, _report_errors("getting stats"):
        index_stats = factory.create_index_service().stats()

    table = Table(title="Support Copilot Statistics", show_header=False)
    table.add_row("Documents", str(index_stats.indexed_documents))
    table.add_row("Chunks", str(index_stats.indexed_chunks))
    table.add_row("Status", index_stats.status)
    table.add_row("Data directory", _escape_rich(str(config.data_dir)))
    table.add_row("Embedding providers", ", ".join(config.embedding_providers) or "hash")
    table.add_row("Generation providers", ", ".join(config.generation_providers) or "templates")
    console.print(table)


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
