#!/usr/bin/env python3
"""
Jotter CLI.

Operator commands for the Jotter backend.
Built with Typer for type-safe commands and Rich for formatted output.

Usage:
    python cli.py --help                          # Show help

    # Server management
    python cli.py server start                    # Start FastAPI server
    python cli.py server start --reload           # Start with auto-reload

    # Database migrations
    python cli.py db current                      # Show current revision
    python cli.py db upgrade                      # Upgrade to latest
    python cli.py db downgrade -r -1              # Roll back one revision

    # Users
    python cli.py users create alice alice@example.com --first-name Alice --last-name Liddell
    python cli.py users token alice               # Issue a new access token

Options:
    --verbose, -v     Enable verbose output
    --debug           Enable debug mode (detailed logging)
    --help            Show help message
"""

import sys
from pathlib import Path

import typer
from rich.console import Console

# Add project root to path for absolute imports
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


def _validate_project_root() -> None:
    """Validate that we're running from the project root."""
    if not (project_root / ".project_root").exists():
        console.print("[red]Error: .project_root not found. Run from project root.[/red]")
        raise typer.Exit(1)


from jotter.cli.commands import db_app, server_app, users_app

app = typer.Typer(
    name="cli",
    help="Jotter CLI - server management, database migrations, and user provisioning.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

app.add_typer(server_app, name="server")
app.add_typer(db_app, name="db")
app.add_typer(users_app, name="users")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output (INFO level logging)",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        "-d",
        help="Enable debug mode (DEBUG level logging)",
    ),
) -> None:
    """
    Jotter CLI.

    Server management, database migrations, and user provisioning.
    """
    _validate_project_root()

    if debug:
        from jotter.backend.core.logging import setup_logging
        setup_logging(level="DEBUG", format_type="console")
        console.print("[dim]Debug mode enabled[/dim]")
    elif verbose:
        from jotter.backend.core.logging import setup_logging
        setup_logging(level="INFO", format_type="console")


if __name__ == "__main__":
    app()
