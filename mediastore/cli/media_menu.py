from __future__ import annotations

import mimetypes
from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from mediastore.errors import StorageError
from mediastore.models.upload import IncomingFile
from mediastore.services.media_service import MediaService
from mediastore.services.upload_service import UploadDispatcher

console = Console()


def _format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def upload_file_menu(dispatcher: UploadDispatcher) -> None:
    console.print()
    console.print("[bold]Upload File[/bold]", style="cyan")

    raw_path = questionary.path("File to upload:").ask()
    if not raw_path:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    path = Path(raw_path).expanduser()
    try:
        content = path.read_bytes()
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/red]")
        return

    incoming = IncomingFile(
        filename=path.name,
        content=content,
        content_type=mimetypes.guess_type(path.name)[0] or "",
    )
    try:
        descriptor = dispatcher.store(incoming, {"source": "cli"})
    except StorageError as e:
        console.print(f"[red]Upload failed ({type(e).__name__}): {e}[/red]")
        return

    console.print(f"[green bold]Uploaded as {descriptor.generated_name}[/green bold]")
    console.print(f"  Kind: {descriptor.resource_kind.value}")
    console.print(f"  URL:  {descriptor.url}")


def list_media_menu(media_service: MediaService) -> None:
    items = media_service.list_media()
    if not items:
        console.print("[yellow]No media files.[/yellow]")
        return

    table = Table(title="Media")
    table.add_column("#", style="dim")
    table.add_column("Filename")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("URL", style="dim")

    for i, item in enumerate(items, 1):
        table.add_row(
            str(i),
            item.filename,
            _format_size(item.size),
            item.modified_at.strftime("%Y-%m-%d %H:%M"),
            item.url,
        )

    console.print(table)


def delete_media_menu(media_service: MediaService) -> None:
    items = media_service.list_media()
    if not items:
        console.print("[yellow]No media files.[/yellow]")
        return

    choices = [item.filename for item in items] + ["Back"]
    filename = questionary.select("Select a file:", choices=choices).ask()
    if filename is None or filename == "Back":
        return

    if not questionary.confirm(f"Delete {filename}?", default=False).ask():
        console.print("[yellow]Cancelled.[/yellow]")
        return

    try:
        media_service.delete_media(filename)
    except StorageError as e:
        console.print(f"[red]Delete failed: {e}[/red]")
        return
    console.print(f"[green bold]Deleted {filename}.[/green bold]")
