"""Decorators for bundlefs CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console

from bundlefs.errors import (
    AlreadyExistsError,
    ArchiveAccessError,
    NotADirectoryError,
    NotFoundError,
    PathFormatError,
    ResourceError,
    ResourceResolutionError,
)

logger = logging.getLogger(__name__)
console = Console()


def handle_resource_errors(func: Callable) -> Callable:
    """
    Decorator to turn resource errors into CLI messages and exit codes.

    Centralizes error handling for:
    - NotFoundError / NotADirectoryError: bad target path
    - PathFormatError: malformed path
    - ArchiveAccessError / ResourceResolutionError: unusable bundle
    - Other ResourceError: I/O failures
    - General exceptions: unexpected errors (logged with traceback)
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except NotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] Not found: {e}")
            raise typer.Exit(code=1)
        except NotADirectoryError as e:
            console.print(f"[bold red]Error:[/bold red] Not a folder: {e}")
            raise typer.Exit(code=1)
        except AlreadyExistsError as e:
            console.print(f"[bold red]Error:[/bold red] Already exists: {e}")
            raise typer.Exit(code=1)
        except PathFormatError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid path: {e}")
            raise typer.Exit(code=1)
        except (ArchiveAccessError, ResourceResolutionError) as e:
            console.print(f"[bold red]Error:[/bold red] Bundle problem: {e}")
            if e.cause is not None:
                console.print(f"[dim]Caused by: {e.cause!r}[/dim]")
            raise typer.Exit(code=1)
        except ResourceError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper
