"""
User Commands.

Provision users and issue API access tokens. Sign-up and login are
handled outside this service, so this is how accounts get created.
"""

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from jotter.backend.core.logging import get_logger, log_with_source

app = typer.Typer(help="User provisioning commands")
console = Console()
logger = get_logger(__name__)


async def _create_user(
    username: str,
    email: str,
    first_name: str,
    last_name: str,
    avatar: str | None,
) -> tuple[str, str]:
    from jotter.backend.core.database import dispose_engine, get_session_factory
    from jotter.backend.core.exceptions import ConflictError
    from jotter.backend.core.security import create_access_token
    from jotter.backend.repositories.user import UserRepository

    try:
        async with get_session_factory()() as session:
            repo = UserRepository(session)
            if await repo.username_or_email_taken(username, email):
                raise ConflictError("Username or email already registered")
            user = await repo.create(
                username=username,
                email=email,
                first_name=first_name,
                last_name=last_name,
                avatar=avatar,
            )
            await session.commit()
            return user.id, create_access_token(user.id)
    finally:
        await dispose_engine()


async def _issue_token(username: str) -> tuple[str, str]:
    from jotter.backend.core.database import dispose_engine, get_session_factory
    from jotter.backend.core.exceptions import NotFoundError
    from jotter.backend.core.security import create_access_token
    from jotter.backend.repositories.user import UserRepository

    try:
        async with get_session_factory()() as session:
            user = await UserRepository(session).get_by_username(username)
            if user is None:
                raise NotFoundError(f"User {username!r} not found")
            return user.id, create_access_token(user.id)
    finally:
        await dispose_engine()


def _print_token(user_id: str, token: str) -> None:
    table = Table(show_header=False)
    table.add_row("User ID", user_id)
    table.add_row("Access token", token)
    console.print(table)


@app.command()
def create(
    username: str = typer.Argument(..., help="Unique username"),
    email: str = typer.Argument(..., help="Unique email address"),
    first_name: str = typer.Option(..., "--first-name", help="First name"),
    last_name: str = typer.Option(..., "--last-name", help="Last name"),
    avatar: str = typer.Option(None, "--avatar", help="Avatar URL"),
) -> None:
    """
    Create a user and print an access token.

    Examples:
        cli.py users create alice alice@example.com --first-name Alice --last-name Liddell
    """
    from jotter.backend.core.exceptions import ApplicationError

    try:
        user_id, token = asyncio.run(
            _create_user(username, email, first_name, last_name, avatar)
        )
    except ApplicationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    log_with_source(logger, "cli", "info", "User created", user_id=user_id)
    _print_token(user_id, token)


@app.command()
def token(
    username: str = typer.Argument(..., help="Username to issue a token for"),
) -> None:
    """
    Issue a new access token for an existing user.

    Examples:
        cli.py users token alice
    """
    from jotter.backend.core.exceptions import ApplicationError

    try:
        user_id, access_token = asyncio.run(_issue_token(username))
    except ApplicationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1)

    _print_token(user_id, access_token)
