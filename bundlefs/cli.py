import logging
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.traceback import install

from . import fileops
from .config import load_config
from .decorators import console as error_console
from .decorators import handle_resource_errors
from .errors import PathFormatError
from .explorer import ResourceExplorer
from .paths import base_name, file_extension, file_name, normalize
from .resolver import InArchive

# Initialize Rich Traceback for better error messages
install(show_locals=False)

console = Console()

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger("bundlefs")

app = typer.Typer(help="Browse resources in folders and ZIP bundles")

ROOT_OPTION_HELP = "Search root (folder or ZIP archive). Repeatable; overrides configured roots"


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    bundlefs - uniform access to resources on disk and inside archive bundles.
    """
    cli_settings = load_config().cli
    if not cli_settings.color:
        console.no_color = True
        error_console.no_color = True
    if verbose or cli_settings.verbose:
        logger.setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


def _explorer(
    roots: Optional[List[str]],
    package: Optional[str],
    prefix: Optional[str],
) -> ResourceExplorer:
    """Build an explorer from the saved config plus command-line overrides."""
    settings = load_config().explorer
    if roots:
        settings.search_roots = list(roots)
    if package is not None:
        settings.package = package or None
    if prefix is not None:
        settings.resource_prefix = prefix
    return ResourceExplorer.from_config(settings)


@app.command(name="ls")
@handle_resource_errors
def list_command(
    path: str = typer.Argument("", help="Resource folder (relative to the resource prefix)"),
    recursive: bool = typer.Option(False, "--recursive", "-R", help="Include nested folders"),
    roots: Optional[List[str]] = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
    package: Optional[str] = typer.Option(None, "--package", "-p", help="Look resources up in this package"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Resource namespace prefix"),
):
    """List files in a resource folder."""
    explorer = _explorer(roots, package, prefix)
    files = sorted(explorer.list_resources(path, recursive=recursive))

    if not files:
        console.print("[yellow]No files found.[/yellow]")
        return
    for name in files:
        console.print(name, markup=False, highlight=False)


@app.command()
@handle_resource_errors
def cat(
    path: str = typer.Argument(..., help="Resource file (relative to the resource prefix)"),
    binary: bool = typer.Option(False, "--binary", "-b", help="Write raw bytes"),
    roots: Optional[List[str]] = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
    package: Optional[str] = typer.Option(None, "--package", "-p", help="Look resources up in this package"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Resource namespace prefix"),
):
    """Print the content of a resource."""
    explorer = _explorer(roots, package, prefix)
    content = explorer.read_resource(path, binary=binary)
    typer.echo(content, nl=False)


@app.command()
@handle_resource_errors
def locate(
    path: str = typer.Argument(..., help="Resource path (relative to the resource prefix)"),
    roots: Optional[List[str]] = typer.Option(None, "--root", "-r", help=ROOT_OPTION_HELP),
    package: Optional[str] = typer.Option(None, "--package", "-p", help="Look resources up in this package"),
    prefix: Optional[str] = typer.Option(None, "--prefix", help="Resource namespace prefix"),
):
    """Show where a resource is stored."""
    explorer = _explorer(roots, package, prefix)
    location = explorer.locate(path)

    if isinstance(location, InArchive):
        console.print("[bold cyan]In archive[/bold cyan]")
        console.print(f"  Archive: {location.archive_path}", markup=False, highlight=False)
        console.print(f"  Entry:   {location.entry_path}", markup=False, highlight=False)
    else:
        console.print("[bold cyan]On disk[/bold cyan]")
        console.print(f"  Path: {location.path}", markup=False, highlight=False)


@app.command(name="normalize")
def normalize_command(
    path: str = typer.Argument(..., help="Path to normalize"),
):
    """Print the normalized form of a path."""
    typer.echo(normalize(path))


@app.command()
def name(
    path: str = typer.Argument(..., help="File path"),
):
    """Show file name, extension and base name of a path."""
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Part")
    table.add_column("Value")

    table.add_row("File name", file_name(path))
    try:
        table.add_row("Extension", file_extension(path))
        table.add_row("Base name", base_name(path))
    except PathFormatError:
        table.add_row("Extension", "[dim]none[/dim]")
        table.add_row("Base name", "[dim]none[/dim]")

    console.print(table)


@app.command(name="open")
@handle_resource_errors
def open_command(
    path: str = typer.Argument(..., help="File to open"),
):
    """Open a file with its default application."""
    fileops.open_file(path)
    console.print(f"[green]Opened {path}[/green]")


@app.command()
@handle_resource_errors
def compress(
    source: str = typer.Argument(..., help="File to compress"),
    target: Optional[str] = typer.Argument(None, help="Output file (default: SOURCE.gz)"),
):
    """Gzip a file and remove the original."""
    target = target or f"{source}.gz"
    fileops.compress_file(source, target)
    console.print(f"[green]✓ Compressed {source} -> {target}[/green]")


@app.command()
@handle_resource_errors
def mtime(
    path: str = typer.Argument(..., help="File path"),
):
    """Show the last modification time of a file."""
    millis = fileops.last_modified(path)
    stamp = datetime.fromtimestamp(millis / 1000).isoformat(timespec="seconds")
    console.print(f"{millis} ({stamp})", markup=False, highlight=False)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    set_prefix: Optional[str] = typer.Option(None, "--prefix", help="Set resource namespace prefix"),
    add_roots: Optional[List[str]] = typer.Option(None, "--add-root", help="Append a search root"),
    clear_roots: bool = typer.Option(False, "--clear-roots", help="Remove all search roots"),
    set_package: Optional[str] = typer.Option(None, "--package", help="Set package for resource lookup (empty to unset)"),
    set_follow: Optional[bool] = typer.Option(None, "--follow-symlinks/--no-follow-symlinks", help="Descend into symlinked folders"),
    set_max_depth: Optional[int] = typer.Option(None, "--max-depth", help="Depth limit for recursive listings (0 for none)"),
    set_encoding: Optional[str] = typer.Option(None, "--encoding", help="Text encoding for reads"),
    set_verbose: Optional[bool] = typer.Option(None, "--cli-verbose/--no-cli-verbose", help="Enable verbose output by default"),
    set_color: Optional[bool] = typer.Option(None, "--cli-color/--no-cli-color", help="Enable colored output by default"),
):
    """
    View or edit bundlefs configuration.

    Configuration is stored at ~/.config/bundlefs/config.json (or ~/.bundlefs/config.json).

    Examples:
        # Show current configuration
        bundlefs config --show

        # Search a zipapp first, then the source tree
        bundlefs config --add-root dist/app.pyz --add-root src

        # Use a different resource namespace
        bundlefs config --prefix data/
    """
    from bundlefs.config import ensure_config_exists, get_config_path, update_config

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    has_settings = any([
        set_prefix is not None, add_roots, clear_roots, set_package is not None,
        set_follow is not None, set_max_depth is not None, set_encoding is not None,
        set_verbose is not None, set_color is not None,
    ])

    if show or not has_settings:
        cfg = load_config()
        config_path = get_config_path()

        console.print("\n[bold]bundlefs Configuration[/bold]")
        console.print(f"[dim]Location: {config_path}[/dim]\n")

        console.print("[bold cyan]Explorer Settings:[/bold cyan]")
        console.print(f"  Prefix:          {cfg.explorer.resource_prefix}")
        if cfg.explorer.search_roots:
            console.print("  Search roots:")
            for root in cfg.explorer.search_roots:
                console.print(f"    • {root}")
        else:
            console.print("  Search roots:    [dim]not set[/dim]")
        console.print(f"  Package:         {cfg.explorer.package or '[dim]not set[/dim]'}")
        console.print(f"  Follow symlinks: {cfg.explorer.follow_symlinks}")
        console.print(f"  Max depth:       {cfg.explorer.max_depth or '[dim]unlimited[/dim]'}")
        console.print(f"  Encoding:        {cfg.explorer.encoding}")

        console.print("\n[bold cyan]CLI Settings:[/bold cyan]")
        console.print(f"  Verbose:         {cfg.cli.verbose}")
        console.print(f"  Color:           {cfg.cli.color}")
        console.print(f"\n[dim]Or edit directly: {config_path}[/dim]\n")
        return

    changes = []
    if set_prefix is not None:
        changes.append(f"Prefix: {set_prefix}")
    if clear_roots:
        changes.append("Search roots: cleared")
    for root in add_roots or []:
        changes.append(f"Search root added: {root}")
    if set_package is not None:
        changes.append(f"Package: {set_package or 'unset'}")
    if set_follow is not None:
        changes.append(f"Follow symlinks: {set_follow}")
    if set_max_depth is not None:
        changes.append(f"Max depth: {set_max_depth or 'unlimited'}")
    if set_encoding is not None:
        changes.append(f"Encoding: {set_encoding}")
    if set_verbose is not None:
        changes.append(f"CLI verbose: {set_verbose}")
    if set_color is not None:
        changes.append(f"CLI color: {set_color}")

    console.print("[blue]Updating configuration:[/blue]")
    for change in changes:
        console.print(f"  • {change}")

    update_config(
        resource_prefix=set_prefix,
        add_search_roots=add_roots,
        clear_search_roots=clear_roots,
        package=set_package,
        follow_symlinks=set_follow,
        max_depth=set_max_depth,
        encoding=set_encoding,
        cli_verbose=set_verbose,
        cli_color=set_color,
    )
    console.print("[green]✓ Configuration updated![/green]")


if __name__ == "__main__":
    app()
