"""CLI service layer for the support copilot.

Provides consolidated service abstractions for CLI commands: data directory
resolution, config loading and validation, logging setup and factory
creation.
"""
from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from support_copilot.config import SupportCopilotConfig, get_config
from support_copilot.exceptions import ConfigError, StoreError
from support_copilot.services import ServiceFactory, get_service_factory

# Exit codes
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_INVALID_ARG = 2

console = Console(stderr=False)  # stdout for normal output
error_console = Console(stderr=True)  # stderr for errors and logs


def _escape_rich(text: str) -> str:
    """Escape brackets to prevent Rich markup interpretation."""
    return text.replace("[", "\\[").replace("]", "\\]")


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False, markup=False)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


class CLIContext:
    """Invocation-scoped context for CLI state."""

    def __init__(self, data_dir: Path | None = None, verbose: bool = False):
        self.data_dir = data_dir
        self.verbose = verbose


class CLIServiceError(Exception):
    """Base exception for CLI service errors."""

    pass


class DataDirNotInitializedError(CLIServiceError):
    """Raised when the data directory has not been initialized."""

    pass


class ServiceInitError(CLIServiceError):
    """Raised when service initialization fails."""

    pass


class CLIServiceContext:
    """Invocation-scoped context for CLI services.

    Encapsulates:
    - Data directory resolution from Typer context
    - Config loading and validation
    - Service factory creation
    """

    def __init__(self, ctx: typer.Context):
        self._ctx = ctx
        self._config: SupportCopilotConfig | None = None
        self._service_factory: ServiceFactory | None = None

    @property
    def data_dir(self) -> Path | None:
        """Get data directory from CLI context."""
        if self._ctx.obj is not None and isinstance(self._ctx.obj, CLIContext):
            return self._ctx.obj.data_dir
        return None

    def get_config(self) -> SupportCopilotConfig:
        """Load and return config, validating the data directory exists.

        Raises:
            DataDirNotInitializedError: If the data directory is missing
            ConfigError: If config cannot be loaded
        """
        if self._config is None:
            self._config = get_config(data_dir=self.data_dir)

        if not self._config.data_dir.exists():
            raise DataDirNotInitializedError(
                f"Data directory not initialized at {self._config.data_dir}"
            )

        return self._config

    def get_service_factory(self) -> ServiceFactory:
        """Get or create service factory.

        Raises:
            DataDirNotInitializedError: If the data directory is missing
            ServiceInitError: If the document store cannot be opened
        """
        if self._service_factory is None:
            config = self.get_config()
            try:
                factory = get_service_factory(config=config)
                factory.create_vector_store()
            except StoreError as e:
                raise ServiceInitError(str(e)) from e
            self._service_factory = factory

        return self._service_factory


def _exit_not_initialized(message: str | None = None) -> None:
    error_console.print("[red]Error: Data directory not initialized[/red]")
    if message:
        console.print(f"[dim]{_escape_rich(message)}[/dim]")
    else:
        console.print("[dim]Run 'sc init' first to initialize the data directory[/dim]")
    raise typer.Exit(code=EXIT_ERROR)


@contextmanager
def get_cli_services(ctx: typer.Context) -> Generator[ServiceFactory, None, None]:
    """Context manager yielding a ServiceFactory with automatic cleanup.

    Usage:
        with get_cli_services(ctx) as factory:
            results = factory.create_query_service().search("vpn drops")

    Raises:
        typer.Exit: If services cannot be initialized
    """
    svc = CLIServiceContext(ctx)

    try:
        svc.get_config()
    except DataDirNotInitializedError:
        _exit_not_initialized()
    except ConfigError as e:
        _exit_not_initialized(str(e))

    try:
        factory = svc.get_service_factory()
    except ServiceInitError as e:
        error_console.print(f"[red]Error opening storage:[/red] {_escape_rich(str(e))}")
        raise typer.Exit(code=EXIT_ERROR)

    try:
        yield factory
    finally:
        factory.close()


def require_initialized(ctx: typer.Context) -> SupportCopilotConfig:
    """Validate that the data directory is initialized, returning config.

    Raises:
        typer.Exit: If not initialized
    """
    svc = CLIServiceContext(ctx)
    try:
        return svc.get_config()
    except DataDirNotInitializedError:
        _exit_not_initialized()
    except ConfigError as e:
        _exit_not_initialized(str(e))
