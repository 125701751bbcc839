"""Main CLI entry point for snapvcs."""

import json
import logging
from pathlib import Path
from typing import List, NoReturn, Optional

import typer
from rich.console import Console
from rich.panel import Panel

from snapvcs.constants import EXIT_FAILURE
from snapvcs.core.log import LOG_ORDERS
from snapvcs.errors import SnapVCSError
from snapvcs.repository import Repository

console = Console()
err_console = Console(stderr=True)
app = typer.Typer(
    name="snapvcs",
    help="Minimal content-addressed version control",
    add_completion=False,
)


def _fail(error: Exception) -> NoReturn:
    err_console.print(f"[bold red]Error:[/bold red] {error}", highlight=False, soft_wrap=True)
    raise typer.Exit(EXIT_FAILURE)


def _open_repo() -> Repository:
    try:
        return Repository.discover(Path.cwd())
    except SnapVCSError as e:
        err_console.print(f"[bold red]Error:[/bold red] {e}", highlight=False, soft_wrap=True)
        err_console.print(
            "\nRun [bold]snapvcs init[/bold] to initialize a repository",
            style="yellow",
        )
        raise typer.Exit(EXIT_FAILURE)


@app.callback()
def main_callback(
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug logging",
    ),
) -> None:
    """Minimal content-addressed version control."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


@app.command()
def version() -> None:
    """Show snapvcs version."""
    from snapvcs import __version__
    typer.echo(f"snapvcs version {__version__}")


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite existing .snapvcs/ directory (dangerous!)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress output except errors",
    ),
) -> None:
    """Initialize a snapvcs repository in the current directory."""
    workspace_root = Path.cwd()
    try:
        repo = Repository.init(workspace_root, force=force)
    except SnapVCSError as e:
        _fail(e)

    if not quiet:
        message = f"""[bold green]✓[/bold green] Initialized empty repository

[dim]Repository root:[/dim] {repo.workspace_root}
[dim]Storage location:[/dim] {repo.repo_dir}

[bold]Next steps:[/bold]
  1. Set your identity: [cyan]snapvcs config <username> <email>[/cyan]
  2. Stage files: [cyan]snapvcs add <file>[/cyan]
  3. Commit: [cyan]snapvcs commit -m "Initial commit"[/cyan]
"""
        console.print(Panel(message, border_style="green", title="snapvcs"))


@app.command()
def config(
    username: str = typer.Argument(..., help="Author name recorded on commits"),
    email: str = typer.Argument(..., help="Author email recorded on commits"),
) -> None:
    """Set the author identity used for commits."""
    repo = _open_repo()
    try:
        repo.set_config(username, email)
    except (SnapVCSError, ValueError) as e:
        _fail(e)
    console.print(f"Config set successfully: {username} {email}", highlight=False)


@app.command()
def add(
    paths: List[str] = typer.Argument(..., help="Files or directories to add"),
) -> None:
    """Add files to the staging area."""
    repo = _open_repo()
    cwd = Path.cwd()
    try:
        stats = repo.add([cwd / p for p in paths])
    except SnapVCSError as e:
        _fail(e)

    for path_str in stats["added"]:
        console.print(f"  [green]+[/green] {path_str}", highlight=False)
    for path_str in stats["updated"]:
        console.print(f"  [yellow]*[/yellow] {path_str}", highlight=False)

    total = len(stats["added"]) + len(stats["updated"])
    if total > 0:
        console.print(f"[bold green]>[/bold green] {total} file(s) added to index")
    elif stats["unchanged"]:
        console.print("[dim]Nothing new to stage (content unchanged)[/dim]")
    else:
        console.print("[yellow]No files found to add[/yellow]")


@app.command()
def status(
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the classification as JSON",
    ),
) -> None:
    """Show working tree status against the index."""
    repo = _open_repo()
    try:
        if as_json:
            typer.echo(json.dumps(repo.status_dict(), indent=2))
        else:
            typer.echo(repo.status(), nl=False)
    except SnapVCSError as e:
        _fail(e)


@app.command()
def commit(
    message: Optional[str] = typer.Option(
        None,
        "--message",
        "-m",
        help="Commit message (required)",
    ),
) -> None:
    """Record a commit on the branch."""
    if not message:
        err_console.print("[bold red]Error:[/bold red] Commit message is required")
        err_console.print(
            "  Use [bold]-m \"your message\"[/bold] to provide a commit message",
            style="yellow",
        )
        raise typer.Exit(EXIT_FAILURE)

    repo = _open_repo()
    try:
        commit_hash = repo.commit(message)
        branch = repo.refs.current_branch()
    except (SnapVCSError, ValueError) as e:
        _fail(e)
    console.print(f"Committed to {branch}: {commit_hash}", highlight=False)


@app.command()
def diff() -> None:
    """Show untracked files as new-file diffs."""
    repo = _open_repo()
    try:
        typer.echo(repo.diff(), nl=False)
    except SnapVCSError as e:
        _fail(e)


@app.command()
def log(
    order: str = typer.Option(
        "storage",
        "--order",
        help=f"Commit order: {', '.join(LOG_ORDERS)}",
    ),
    max_count: Optional[int] = typer.Option(
        None,
        "--max-count",
        "-n",
        min=0,
        help="Limit number of commits to show",
    ),
) -> None:
    """Show commit history."""
    repo = _open_repo()
    try:
        output = repo.log(order=order, max_count=max_count)
    except (SnapVCSError, ValueError) as e:
        _fail(e)

    if not output:
        console.print("[dim]No commits yet[/dim]")
        return
    typer.echo(output, nl=False)


app.command("logs", hidden=True)(log)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
