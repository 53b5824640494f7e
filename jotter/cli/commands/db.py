"""
Schema migrations.

Thin wrappers over the Alembic CLI; the migration environment resolves the
database URL the same way the API does.
"""

import subprocess
import sys
from pathlib import Path

import typer
from rich.console import Console

app = typer.Typer(help="Apply or inspect schema migrations")
console = Console()

PROJECT_ROOT = Path(__file__).resolve().parents[3]
ALEMBIC_INI = PROJECT_ROOT / "jotter" / "backend" / "migrations" / "alembic.ini"


def alembic(*args: str) -> None:
    """Run `alembic -c <ini> *args`, exiting with Alembic's code on failure."""
    if not ALEMBIC_INI.is_file():
        console.print(f"[red]Missing {ALEMBIC_INI.relative_to(PROJECT_ROOT)}[/red]")
        raise typer.Exit(1)

    completed = subprocess.run(
        [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), *args],
        cwd=PROJECT_ROOT,
    )
    if completed.returncode:
        console.print(f"[red]alembic {args[0]} failed[/red]")
        raise typer.Exit(completed.returncode)


@app.command()
def upgrade(
    revision: str = typer.Option("head", "--revision", "-r", help="Revision to upgrade to"),
) -> None:
    """Migrate forward, to the newest revision unless told otherwise."""
    console.print(f"Upgrading schema to [bold]{revision}[/bold]")
    alembic("upgrade", revision)
    console.print("[green]Schema upgraded[/green]")


@app.command()
def downgrade(
    revision: str = typer.Option(..., "--revision", "-r", help="Revision to downgrade to, e.g. -1 or base"),
) -> None:
    """Migrate backward. The target revision is required."""
    console.print(f"Downgrading schema to [bold]{revision}[/bold]")
    alembic("downgrade", revision)
    console.print("[green]Schema downgraded[/green]")


@app.command()
def current() -> None:
    """Print the revision the database is at."""
    alembic("current")
