"""CLI commands for PDF Craft."""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

import typer
from rich.console import Console
from rich.progress import BarColumn, DownloadColumn, Progress, TaskProgressColumn, TextColumn

from pdf_craft import __version__
from pdf_craft.client import PDFCraftClient
from pdf_craft.core.exceptions import PDFCraftException
from pdf_craft.core.logging import setup_logging
from pdf_craft.schemas import FormatType, LocalConversionOptions, UploadProgress
from pdf_craft.schemas.conversion_schemas import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_CHECK_INTERVAL_MS,
    DEFAULT_MAX_CHECK_INTERVAL_MS,
    DEFAULT_MAX_WAIT_MS,
)

app = typer.Typer(name="pdf-craft", help="PDF Craft conversion CLI")
console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


@app.callback()
def main(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(None, envvar="PDF_CRAFT_API_KEY", help="API key"),
    base_url: Optional[str] = typer.Option(None, envvar="PDF_CRAFT_BASE_URL", help="API base URL"),
    log_level: str = typer.Option("WARNING", help="Log level"),
    debug: bool = typer.Option(False, help="Human-readable log output"),
) -> None:
    """Convert PDFs with the PDF Craft service."""
    setup_logging(log_level=log_level, debug=debug)
    ctx.obj = {"api_key": api_key, "base_url": base_url}


def _run(ctx: typer.Context, operation: Callable[[PDFCraftClient], Awaitable[T]]) -> T:
    """Run an async operation with a client, exiting with code 1 on client errors."""

    async def runner() -> T:
        async with PDFCraftClient(**ctx.obj) as client:
            return await operation(client)

    try:
        return asyncio.run(runner())
    except PDFCraftException as e:
        err_console.print(f"[bold red]✗ {type(e).__name__}: {e.message}[/bold red]")
        raise typer.Exit(code=1) from e


class _ProgressReporter:
    """Feeds upload progress snapshots into a rich progress bar."""

    def __init__(self, progress: Progress, description: str) -> None:
        self._progress = progress
        self._description = description
        self._task: Optional[Any] = None

    def __call__(self, snapshot: UploadProgress) -> None:
        if self._task is None:
            self._task = self._progress.add_task(self._description, total=snapshot.total_bytes)
        self._progress.update(
            self._task,
            completed=snapshot.uploaded_bytes,
            description=f"{self._description} ({snapshot.current_part}/{snapshot.total_parts})",
        )


def _progress_bar() -> Progress:
    return Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        DownloadColumn(),
        console=console,
        transient=True,
    )


@app.command()
def version() -> None:
    """Show version."""
    console.print(f"[bold green]PDF Craft v{__version__}[/bold green]")


@app.command()
def upload(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="Local file to upload"),
    max_retries: Optional[int] = typer.Option(None, min=1, help="Attempts per part"),
) -> None:
    """Upload a local file and print its addressable location."""
    with _progress_bar() as progress:
        reporter = _ProgressReporter(progress, f"Uploading {path.name}")
        location = _run(
            ctx,
            lambda client: client.upload_file(path, progress_callback=reporter, max_retries=max_retries),
        )

    console.print(f"[green]✓ Uploaded:[/green] {location}")


@app.command()
def convert(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Local PDF path, or http(s):// / cache:// URL"),
    format_type: FormatType = typer.Option(FormatType.MARKDOWN, "--format", help="Output format"),
    model: Optional[str] = typer.Option(None, help="Conversion model"),
    wait: bool = typer.Option(True, "--wait/--no-wait", help="Wait for the download URL"),
    footnotes: bool = typer.Option(False, "--footnotes", help="Process footnotes"),
    max_wait_ms: int = typer.Option(DEFAULT_MAX_WAIT_MS, min=1, help="Total wait deadline"),
    check_interval_ms: int = typer.Option(DEFAULT_CHECK_INTERVAL_MS, min=1, help="Initial polling interval"),
    max_check_interval_ms: int = typer.Option(
        DEFAULT_MAX_CHECK_INTERVAL_MS, min=1, help="Polling interval ceiling"
    ),
    backoff_factor: float = typer.Option(
        DEFAULT_BACKOFF_FACTOR, min=1.0, help="Interval multiplier (1 fixed, 1.5 exponential, 2 aggressive)"
    ),
) -> None:
    """Convert a PDF and print the download URL (or session ID with --no-wait)."""
    with _progress_bar() as progress:
        try:
            options = LocalConversionOptions(
                format_type=format_type,
                model=model,
                wait=wait,
                includes_footnotes=footnotes,
                max_wait_ms=max_wait_ms,
                check_interval_ms=check_interval_ms,
                max_check_interval_ms=max_check_interval_ms,
                backoff_factor=backoff_factor,
                progress_callback=_ProgressReporter(progress, "Uploading"),
            )
        except ValueError as e:
            err_console.print(f"[bold red]✗ Invalid options: {e}[/bold red]")
            raise typer.Exit(code=1) from e

        result = _run(ctx, lambda client: client.convert_source(source, options))

    if wait:
        console.print(f"[green]✓ Download URL:[/green] {result}")
    else:
        console.print(f"[green]✓ Session ID:[/green] {result}")


@app.command()
def status(
    ctx: typer.Context,
    session_id: str = typer.Argument(..., help="Session ID returned by convert --no-wait"),
    format_type: FormatType = typer.Option(FormatType.MARKDOWN, "--format", help="Output format"),
) -> None:
    """Show the state of a conversion task."""
    result = _run(ctx, lambda client: client.get_conversion_result(session_id, format_type))

    console.print(f"[bold]State:[/bold] {result.state}")
    if result.data is not None and result.data.download_url:
        console.print(f"[green]Download URL:[/green] {result.data.download_url}")
    if result.error:
        console.print(f"[red]Error:[/red] {result.error}")


@app.command("batch-status")
def batch_status(
    ctx: typer.Context,
    batch_id: str = typer.Argument(..., help="Batch ID"),
) -> None:
    """Show progress of a batch."""
    detail = _run(ctx, lambda client: client.get_batch(batch_id))

    console.print(f"[bold]Batch {detail.id}:[/bold] {detail.status.value}")
    console.print(
        f"Progress: {detail.progress}% "
        f"({detail.completed_files}/{detail.total_files} done, {detail.failed_files} failed)"
    )


if __name__ == "__main__":
    app()
