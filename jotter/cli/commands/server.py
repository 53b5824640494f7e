"""
API server.

Runs uvicorn in a child process so `--reload` behaves exactly as it does
when uvicorn is started by hand.
"""

import subprocess
import sys

import typer
from rich.console import Console

app = typer.Typer(help="Run the API server")
console = Console()

ASGI_APP = "jotter.backend.main:app"


def _get_server_settings() -> tuple[str, int]:
    """Configured (host, port) from application.yaml."""
    from jotter.backend.core.config import get_app_config

    try:
        server = get_app_config().application.server
    except (FileNotFoundError, RuntimeError, ValueError) as e:
        console.print(f"[red]Configuration could not be loaded:[/red] {e}")
        raise typer.Exit(1) from e
    return server.host, server.port


def uvicorn_command(host: str, port: int, reload: bool) -> list[str]:
    cmd = [sys.executable, "-m", "uvicorn", ASGI_APP, "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    return cmd


@app.command()
def start(
    host: str = typer.Option(None, "--host", "-h", help="Bind address (default: application.yaml)"),
    port: int = typer.Option(None, "--port", "-p", help="Bind port (default: application.yaml)"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Restart on code changes"),
) -> None:
    """
    Serve the API.

        cli.py server start
        cli.py server start --reload --port 8080
    """
    configured_host, configured_port = _get_server_settings()
    host = host or configured_host
    port = port or configured_port

    console.print(f"Serving on [bold]http://{host}:{port}[/bold] (Ctrl+C to stop)")
    try:
        subprocess.run(uvicorn_command(host, port, reload), check=True)
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/dim]")
    except subprocess.CalledProcessError as e:
        console.print(f"[red]uvicorn exited with code {e.returncode}[/red]")
        raise typer.Exit(e.returncode) from e
