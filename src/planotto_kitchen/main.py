"""
Planotto - CLI Entry Point.

Usage:
    planotto serve                 Start the assist API server
    planotto import-url URL        Import a recipe from a web page
    planotto import-photo FILE...  Import a recipe from photos
    planotto health                Check provider configuration
    planotto --help                Show help
"""

import asyncio
import base64
import json
import mimetypes
import os
from pathlib import Path

import httpx
import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="planotto",
    help="Planotto - recipe import and cooking assistant service.",
    add_completion=False,
)
console = Console()


def photo_data_url(path: Path) -> str:
    """Read an image file into a data: URL."""
    mime, _ = mimetypes.guess_type(path.name)
    if not mime or not mime.startswith("image/"):
        mime = "image/jpeg"
    encoded = base64.b64encode(path.read_bytes()).decode("ascii")
    return f"data:{mime};base64,{encoded}"


async def _run_action(action: str, payload: dict) -> dict:
    from planotto_kitchen.assist.actions import AssistAction, create_assist_service
    from planotto_kitchen.config import get_settings

    settings = get_settings()
    async with httpx.AsyncClient(
        timeout=settings.provider_timeout_seconds, follow_redirects=True
    ) as http_client:
        service = create_assist_service(settings, http_client=http_client)
        return await service.handle(AssistAction(action), payload)


def _print_result(result: dict, log_calls: bool) -> None:
    console.print_json(json.dumps(result, ensure_ascii=False))
    if log_calls:
        from planotto.llm.prompt_logger import get_session_log_dir

        log_dir = get_session_log_dir()
        if log_dir:
            console.print(f"\n[dim]Provider calls logged to: {log_dir}[/dim]")


def _enable_logging(log_calls: bool) -> None:
    if log_calls:
        from planotto.llm.prompt_logger import enable_call_logging

        enable_call_logging(True)


@app.command("import-url")
def import_url(
    url: str = typer.Argument(..., help="Recipe page URL"),
    product: list[str] = typer.Option([], "--product", "-p", help="Known product name (repeatable)"),
    log_calls: bool = typer.Option(False, "--log-calls", "-l", help="Log provider calls to provider_logs/"),
) -> None:
    """Import a recipe from a web page and print the draft."""
    _enable_logging(log_calls)
    with console.status("Importing recipe..."):
        result = asyncio.run(_run_action("import_recipe_url", {"url": url, "knownProducts": product}))
    _print_result(result, log_calls)


@app.command("import-photo")
def import_photo(
    files: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="Photos, in page order"),
    product: list[str] = typer.Option([], "--product", "-p", help="Known product name (repeatable)"),
    log_calls: bool = typer.Option(False, "--log-calls", "-l", help="Log provider calls to provider_logs/"),
) -> None:
    """Import a recipe from one or more photos and print the draft."""
    _enable_logging(log_calls)
    payload = {
        "imageDataUrls": [photo_data_url(path) for path in files],
        "knownProducts": product,
    }
    with console.status(f"Recognizing {len(files)} photo(s)..."):
        result = asyncio.run(_run_action("import_recipe_photo", payload))
    _print_result(result, log_calls)


@app.command()
def health() -> None:
    """Check configuration and which providers are available."""
    from planotto_kitchen.config import get_settings

    console.print("\n[bold]Planotto Health Check[/bold]\n")

    try:
        settings = get_settings()
    except ValueError as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Make sure your .env file is valid.[/dim]")
        raise typer.Exit(1)

    console.print("[green]OK[/green] Configuration loaded")
    console.print(f"   Environment: {settings.planotto_env}")
    console.print(f"   Log level: {settings.log_level}\n")

    table = Table(title="Providers")
    table.add_column("Provider")
    table.add_column("Status")
    table.add_column("Without it")
    rows = [
        ("Completion / vision", bool(settings.openrouter_api_key), "heuristic hints and drafts"),
        ("OCR", bool(settings.fal_key), "vision import only"),
        ("Image generation", settings.fusionbrain_key_pair() is not None, "placeholder photos"),
    ]
    for name, configured, fallback in rows:
        status = "[green]configured[/green]" if configured else "[yellow]missing[/yellow]"
        table.add_row(name, status, fallback)
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from planotto import __version__

    console.print(f"Planotto version {__version__}")


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the assist API server."""
    import uvicorn

    # Hosting platforms set PORT
    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Planotto Assist[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "planotto_kitchen.web.app:app",
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
