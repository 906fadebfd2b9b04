"""hvbupload CLI - Main commands."""
import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, DownloadColumn
from rich.table import Table

app = typer.Typer(
    name="hvbupload",
    help="Client-side encrypted uploads to tus servers",
    add_completion=False
)
console = Console()

DEFAULT_CHUNK_SIZE = 1024 * 1024


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


@app.command()
def upload(
    file_path: Path = typer.Argument(..., help="Local file to upload", exists=True, dir_okay=False),
    base_url: str = typer.Option(..., "--base-url", "-u", envvar="HVB_BASE_URL", help="tus creation endpoint"),
    secret: str = typer.Option(
        None, "--secret", "-s", envvar="HVB_FILE_SECRET", help="Encryption passphrase"
    ),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", "-c", help="Plaintext bytes per chunk"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
):
    """Encrypt a file chunk by chunk and upload it."""
    from hvbupload import EncryptedUploader, UploadOptions, UploadError, setup_logging
    from hvbupload.core.upload.models import ChunkComplete

    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        setup_logging(logging.DEBUG)

    if not secret:
        secret = typer.prompt("Secret", hide_input=True)

    try:
        options = UploadOptions(base_url=base_url, file_secret=secret, read_chunk_size=chunk_size)
    except ValueError as e:
        console.print(f"[red]Invalid options: {e}[/red]")
        raise typer.Exit(2)

    async def do_upload():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Uploading {file_path.name}", total=None)

            def on_event(event):
                if isinstance(event, ChunkComplete):
                    progress.update(task, completed=event.bytes_accepted, total=event.bytes_total)

            return await EncryptedUploader(options).upload(file_path, listener=on_event)

    try:
        result = run_async(do_upload())
    except (UploadError, OSError, ValueError) as e:
        console.print(f"[red]Upload failed: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]Uploaded:[/green] {file_path.name}")
    console.print(f"URL: {result.upload_url}")
    console.print(f"Size: {result.file_size:,} bytes ({result.encrypted_size:,} encrypted, {result.chunks} chunks)")


@app.command()
def plan(
    file_path: Path = typer.Argument(..., help="Local file", exists=True, dir_okay=False),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", "-c", help="Plaintext bytes per chunk"),
):
    """Show how a file would be split into chunks."""
    from hvbupload.core.upload.strategies import plan_parts

    try:
        parts = plan_parts(file_path.stat().st_size, chunk_size)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    table = Table()
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Start", justify="right")
    table.add_column("End", justify="right")
    table.add_column("Size", justify="right")

    for part in parts:
        table.add_row(str(part.index), f"{part.start:,}", f"{part.end:,}", f"{part.size:,}")

    console.print(table)
    console.print(f"{len(parts)} chunk(s)")


def main():
    app()


if __name__ == "__main__":
    main()
