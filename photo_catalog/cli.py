#!/usr/bin/env python3
"""
Terminal menu for the photo catalog.

Usage:
    photo-catalog [--backend json|document] [--data-dir DIR] [--db-path FILE]
                  [--username NAME --password PASS] [--log-level LEVEL]

When a username is given the user is logged in first and photo operations
are limited to that user's photos.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Callable

from .application.services import AccessService, CatalogService, parse_photo_id
from .config import configure_logging
from .domain.models import AuthenticatedUser
from .infrastructure.storage import StorageError, create_store, get_store_config

logger = logging.getLogger(__name__)

MENU = """
----- Photo App Menu -----
1. Find Photo
2. Update Photo Details
3. Album Photo List
4. Tag Photo
5. Exit"""


class CatalogMenu:
    """Menu loop that marshals typed input into catalog operations.

    ``prompt`` and ``output`` default to ``input`` and ``print`` and are
    swapped out in tests.
    """

    def __init__(
        self,
        catalog: CatalogService,
        user: AuthenticatedUser = None,
        prompt: Callable[[str], str] = None,
        output: Callable[[str], None] = None
    ):
        self.catalog = catalog
        self.user = user
        self.prompt = prompt or input
        self.output = output or print

    @property
    def user_id(self):
        return self.user.id if self.user else None

    def _read_photo_id(self, question: str):
        photo_id = parse_photo_id(self.prompt(question))
        if photo_id is None:
            self.output("Invalid ID. Please enter a number.")
        return photo_id

    async def find_photo(self) -> None:
        self.output("\n--- Find a Photo ---")
        photo_id = self._read_photo_id("Enter the ID of the photo you want to find: ")
        if photo_id is None:
            return

        result = await self.catalog.resolve_photo_view(photo_id, user_id=self.user_id)
        if not result.success:
            self.output(result.message)
            return

        view = result.view
        self.output(f"\nFilename: {view.filename}")
        self.output(f"Title: {view.title}")
        self.output(f"Date: {view.date}")
        self.output(f"Albums: {', '.join(view.album_names)}")
        self.output(f"Tags: {', '.join(view.tags)}")
        if view.owner_name is not None:
            self.output(f"Owner: {view.owner_name}")

    async def update_photo(self) -> None:
        self.output("\n--- Update Photo Details ---")
        photo_id = self._read_photo_id("Enter the ID of the photo you want to update: ")
        if photo_id is None:
            return

        current = await self.catalog.get_photo_for_update(photo_id, user_id=self.user_id)
        if not current.success:
            self.output(current.message)
            return

        photo = current.photo
        self.output("Press Enter to keep the current value.")
        new_title = self.prompt(f"New title [{photo.title}]: ")
        new_description = self.prompt(f"New description [{photo.description}]: ")

        result = await self.catalog.update_photo_fields(
            photo_id, new_title, new_description, user_id=self.user_id
        )
        self.output(result.message)

    async def album_photo_list(self) -> None:
        self.output("\n--- List Photos in an Album ---")
        album_name = self.prompt("Enter the name of the album: ")

        result = await self.catalog.album_csv(album_name)
        if not result.success:
            self.output(result.message)
            return
        self.output("\n" + result.csv)

    async def tag_photo(self) -> None:
        self.output("\n--- Add a Tag to a Photo ---")
        photo_id = self._read_photo_id("Enter the ID of the photo to tag: ")
        if photo_id is None:
            return

        new_tag = self.prompt("Enter the new tag to add: ")
        result = await self.catalog.add_tag_to_photo(photo_id, new_tag, user_id=self.user_id)
        self.output(result.message)

    async def run(self) -> None:
        actions = {
            "1": self.find_photo,
            "2": self.update_photo,
            "3": self.album_photo_list,
            "4": self.tag_photo,
        }

        while True:
            self.output(MENU)
            selection = self.prompt("Your selection> ").strip()

            if selection == "5":
                self.output("Goodbye!")
                break

            action = actions.get(selection)
            if action is None:
                self.output("Invalid choice. Please enter a number between 1 and 5.")
                continue

            try:
                await action()
            except StorageError as e:
                logger.error("Storage failure: %s", e)
                self.output(f"Storage error: {e}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photo-catalog", description="Photo catalog menu")
    parser.add_argument("--backend", choices=["json", "document"], help="Storage backend")
    parser.add_argument("--data-dir", type=Path, help="Directory with photos/albums/users JSON")
    parser.add_argument("--db-path", type=Path, help="SQLite file for the document store")
    parser.add_argument("--username", help="Log in as this user")
    parser.add_argument("--password", default="", help="Password for --username")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WARNING)")
    return parser


async def run_menu(args: argparse.Namespace) -> int:
    config = get_store_config(args.backend)
    if args.data_dir is not None:
        config.data_dir = args.data_dir
    if args.db_path is not None:
        config.database_path = args.db_path

    try:
        async with create_store(config) as store:
            access = AccessService(store)
            user = None
            if args.username:
                login = await access.authenticate(args.username, args.password)
                if not login.success:
                    print(login.message)
                    return 1
                user = login.user
                print(f"Logged in as {user.username}")

            await CatalogMenu(CatalogService(store, access), user=user).run()
    except StorageError as e:
        print(f"Storage error: {e}")
        return 1
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level or "WARNING")
    try:
        return asyncio.run(run_menu(args))
    except (KeyboardInterrupt, EOFError):
        print("\nGoodbye!")
        return 0


if __name__ == "__main__":
    sys.exit(main())
