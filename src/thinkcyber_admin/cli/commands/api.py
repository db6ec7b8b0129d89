"""
CLI commands for running the admin gateway.

The gateway only ever binds to 127.0.0.1. It forwards the caller's bearer
token, or the configured ``API_TOKEN``, to the content backend, so it is
reached through the admin frontend or a reverse proxy on the same host.
"""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console

from thinkcyber_admin.config.settings import settings

console = Console()

APP_PATH = "thinkcyber_admin.api.main:app"
LOOPBACK_HOST = "127.0.0.1"
DEFAULT_PORT = 8080

# uvicorn options keyed by the --production flag
RUN_MODES: dict[bool, dict[str, Any]] = {
    False: {"reload": True, "log_level": "info"},
    True: {"workers": 2, "log_level": "warning"},
}

api_app = typer.Typer(
    name="api",
    help="Gateway server commands",
    no_args_is_help=True,
)


@api_app.command()
def start(
    port: int = typer.Option(
        DEFAULT_PORT, "--port", "-p", help="Local port for the gateway"
    ),
    production: bool = typer.Option(
        False, "--production", help="Run two workers without auto-reload"
    ),
) -> None:
    """
    Serve the gateway on 127.0.0.1.

    Without ``--production`` a single process reloads on code changes and
    logs at info level. With it, two workers log at warning level. The
    backend address comes from ``API_BASE_URL``.

    Examples:
        thinkcyber-admin api start
        thinkcyber-admin api start -p 9000 --production
    """
    import uvicorn

    console.print(
        f"Gateway on [cyan]http://{LOOPBACK_HOST}:{port}[/cyan] "
        f"forwarding to [cyan]{settings.api_base_url}[/cyan]"
    )
    uvicorn.run(APP_PATH, host=LOOPBACK_HOST, port=port, **RUN_MODES[production])
