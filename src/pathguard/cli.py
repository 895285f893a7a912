import logging
import os
from collections.abc import Callable
from typing import TypeVar

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from pathguard.core.config import Config, get_config
from pathguard.core.errors import PathSecurityError
from pathguard.core.project import PROVIDERS, get_project_dir
from pathguard.utils.names import validate_project_name
from pathguard.utils.paths import safe_join, validate_and_sanitize_path
from pathguard.utils.safe_io import safe_file_exists, safe_read_file

app = typer.Typer(
    name="pathguard",
    help="pathguard - validate untrusted paths against allowed directories",
    add_completion=False,
)

console = Console(soft_wrap=True)

T = TypeVar("T")


def _configure_logging(config: Config, verbose: bool) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file, encoding="utf-8"))
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def _guard(action: Callable[[], T]) -> T:
    """Run *action*, turning a violation into a red message and exit code 1."""
    try:
        return action()
    except PathSecurityError as e:
        console.print(f"[red]Rejected ({e.kind.value}): {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    _configure_logging(get_config(), verbose)


@app.command()
def check(
    path: str = typer.Argument(..., help="Untrusted path to validate"),
    base: str | None = typer.Option(None, "--base", "-b", help="Restrict to this directory"),
    no_follow: bool = typer.Option(False, "--no-follow", help="Do not resolve symlinks"),
) -> None:
    """Validate a path against the allowed roots and print its canonical form."""
    config = get_config()
    result = _guard(
        lambda: validate_and_sanitize_path(
            path,
            base,
            roots=config.allowed_roots_value(),
            follow_links=config.follow_symlinks and not no_follow,
            max_rounds=config.max_decode_rounds,
        )
    )
    console.print(f"[green]OK[/green] {escape(result)}", highlight=False)


@app.command()
def join(
    base: str = typer.Argument(..., help="Absolute base directory"),
    relative: str = typer.Argument(..., help="Untrusted relative path"),
) -> None:
    """Join a relative path under a base directory."""
    result = _guard(lambda: safe_join(base, relative, max_rounds=get_config().max_decode_rounds))
    console.print(f"[green]OK[/green] {escape(result)}", highlight=False)


@app.command()
def name(project_name: str = typer.Argument(..., help="Project name to validate")) -> None:
    """Validate a bare project name."""
    result = _guard(lambda: validate_project_name(project_name))
    console.print(f"[green]OK[/green] {escape(result)}", highlight=False)


@app.command()
def project(
    project_name: str = typer.Argument(..., help="Project name"),
    provider: str = typer.Option("claude", "--provider", help=f"One of: {', '.join(PROVIDERS)}"),
) -> None:
    """Print the directory of a named project."""
    if provider not in PROVIDERS:
        console.print(f"[red]Unknown provider: {escape(provider)}[/red]")
        raise typer.Exit(1)
    result = _guard(lambda: get_project_dir(project_name, provider, get_config()))
    console.print(escape(result), highlight=False)


@app.command()
def exists(
    path: str = typer.Argument(..., help="Path to check"),
    base: str | None = typer.Option(None, "--base", "-b", help="Restrict to this directory"),
) -> None:
    """Report whether a validated path exists."""
    config = get_config()
    found = _guard(
        lambda: safe_file_exists(
            path, base, roots=config.allowed_roots_value(), follow_links=config.follow_symlinks
        )
    )
    if found:
        console.print(f"[green]exists[/green] {escape(path)}", highlight=False)
    else:
        console.print(f"[yellow]missing[/yellow] {escape(path)}", highlight=False)


@app.command()
def read(
    path: str = typer.Argument(..., help="File to read"),
    base: str | None = typer.Option(None, "--base", "-b", help="Restrict to this directory"),
    encoding: str = typer.Option("utf-8", "--encoding", help="Text encoding"),
) -> None:
    """Print a file after validating its path."""
    config = get_config()
    try:
        content = _guard(
            lambda: safe_read_file(
                path,
                base,
                encoding=encoding,
                roots=config.allowed_roots_value(),
                follow_links=config.follow_symlinks,
            )
        )
    except (OSError, UnicodeDecodeError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(1)
    console.print(content, markup=False, highlight=False, end="")


@app.command()
def roots() -> None:
    """List the configured allowed roots."""
    table = Table(title="Allowed Roots")
    table.add_column("Root", style="cyan")
    table.add_column("Exists")
    for root in get_config().allowed_roots_value():
        table.add_row(root, "yes" if os.path.isdir(root) else "no")
    console.print(table)


@app.command()
def version() -> None:
    """Show pathguard version."""
    from pathguard import __version__

    console.print(f"[bold]pathguard[/bold] version {__version__}")


if __name__ == "__main__":
    app()
