"""
Command-Line Interface.

Operator commands built with Typer and Rich: run the API server,
apply migrations, and provision users.

Usage:
    python cli.py --help
    python cli.py server start --reload
    python cli.py db upgrade
    python cli.py users create alice alice@example.com --first-name Alice --last-name Liddell
"""
