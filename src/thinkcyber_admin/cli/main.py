"""
Main CLI entry point for thinkcyber-admin.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from thinkcyber_admin import __version__
from thinkcyber_admin.cli.commands.api import api_app
from thinkcyber_admin.config.settings import configure_logging, settings
from thinkcyber_admin.exceptions import (
    EXIT_CODE_BACKEND_UNREACHABLE,
    EXIT_CODE_INVALID_ARGS,
    EXIT_CODE_VALIDATION_FAILED,
    ValidationError,
)
from thinkcyber_admin.services.backend_client import BackendClient, ForwardResult
from thinkcyber_admin.services.validation import RULE_SETS, validate

console = Console()

app = typer.Typer(
    name="thinkcyber-admin",
    help="Admin gateway for the ThinkCyber learning platform",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(api_app, name="api", help="Gateway server commands")

STATUS_ENDPOINT = "categories"


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]thinkcyber-admin[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


async def _check_backend() -> ForwardResult:
    client = BackendClient(
        settings.api_base_url,
        token=settings.api_token,
        timeout=settings.request_timeout,
    )
    return await client.get(STATUS_ENDPOINT, params={"page": 1, "limit": 1})


@app.command()
def status() -> None:
    """Show gateway configuration and check that the backend answers."""
    configure_logging()
    result = asyncio.run(_check_backend())

    token_line = (
        "[green]✓[/green] Default API token configured"
        if settings.has_api_token
        else "[yellow]![/yellow] No default API token; callers must send one"
    )
    if result.success:
        console.print(
            Panel(
                f"[green]✓[/green] Backend reachable at {settings.api_base_url}\n"
                f"{token_line}",
                title="Status",
                border_style="green",
            )
        )
        return

    console.print(
        Panel(
            f"[red]✗[/red] Backend at {settings.api_base_url} did not answer: "
            f"{result.error}\n{token_line}",
            title="Status",
            border_style="red",
        )
    )
    raise typer.Exit(code=EXIT_CODE_BACKEND_UNREACHABLE)


@app.command("validate")
def validate_file(
    entity: str = typer.Argument(
        ..., help="Entity name: category, subcategory, topic, terms, privacy, faq, homepage"
    ),
    file: Path = typer.Argument(..., help="JSON file holding the payload"),
    operation: str = typer.Option(
        "create", "--operation", "-o", help="create or update"
    ),
) -> None:
    """Run the payload validator over a JSON file."""
    if (entity, operation) not in RULE_SETS:
        console.print(
            f"[red]No validation rules for {entity}/{operation}[/red]"
        )
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[red]Cannot read {file}: {e}[/red]")
        raise typer.Exit(code=EXIT_CODE_INVALID_ARGS)

    try:
        validate(entity, operation, payload)
    except ValidationError as e:
        console.print(
            Panel(f"[red]{e.message}[/red]", title="Invalid", border_style="red")
        )
        if e.errors:
            table = Table(show_header=True, header_style="bold red")
            table.add_column("Field", style="cyan")
            table.add_column("Problems", style="white")
            for field_name, messages in e.errors.items():
                table.add_row(field_name, "; ".join(messages))
            console.print(table)
        raise typer.Exit(code=EXIT_CODE_VALIDATION_FAILED)

    console.print(
        Panel(
            f"[green]✓[/green] {file.name} is a valid {entity} {operation} payload",
            title="Valid",
            border_style="green",
        )
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
) -> None:
    """
    thinkcyber-admin - Admin gateway for the ThinkCyber learning platform.
    """
    if version:
        console.print(f"thinkcyber-admin v{__version__}")
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is None:
        console.print(
            "[yellow]Use 'thinkcyber-admin --help' for available commands[/yellow]"
        )
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
