"""
CLI Commands.

Organized by domain/feature area.
"""

from jotter.cli.commands.db import app as db_app
from jotter.cli.commands.server import app as server_app
from jotter.cli.commands.users import app as users_app

__all__ = [
    "db_app",
    "server_app",
    "users_app",
]
