from pathlib import Path

import questionary
from rich.console import Console

from mediastore.cli.media_menu import delete_media_menu, list_media_menu, upload_file_menu
from mediastore.services.media_service import MediaService
from mediastore.services.upload_service import UploadDispatcher
from mediastore.settings import settings
from mediastore.storage.factory import get_storage

console = Console()


def _build_services() -> tuple[UploadDispatcher, MediaService]:
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    return (
        UploadDispatcher(get_storage(settings)),
        MediaService(settings.upload_dir, url_prefix=settings.upload_url_prefix),
    )


def main_menu() -> None:
    dispatcher, media_service = _build_services()

    console.print()
    console.print(f"[bold]Media Uploads[/bold] (storage: {dispatcher.mode.value})", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Upload File",
                "List Media",
                "Delete Media",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "Upload File":
            upload_file_menu(dispatcher)
        elif choice == "List Media":
            list_media_menu(media_service)
        elif choice == "Delete Media":
            delete_media_menu(media_service)
