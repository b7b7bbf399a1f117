# src/homefs/services/file_service.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import logging
import mimetypes
import os
import shutil
import stat
from pathlib import Path
from typing import Any, AsyncIterator, List, NamedTuple

import aiofiles
import aiofiles.os

from ..core import constants
from ..core.exceptions import (AccessDeniedError, FileOperationError,
                               InvalidRequestError, ItemNotFoundError)
from ..core.models import Entry
from ..core.validators import validate_filename
from . import path_guard
from .directory_lister import list_directory
from .search_walker import SearchWalker, wrap_search_term

log = logging.getLogger(__name__)


class Download(NamedTuple):
    path: Path
    media_type: str
    size: int
    handle: Any


def get_unique_path(path: Path) -> Path:
    """
    Appends ' (1)', ' (2)', ... to the full name until nothing exists there.
    'a.txt' becomes 'a.txt (1)', matching what clients already expect.
    """
    if not os.path.lexists(path):
        return path
    counter = 1
    while True:
        candidate = path.with_name(f"{path.name} ({counter})")
        if not os.path.lexists(candidate):
            return candidate
        counter += 1


def _remove(path: Path):
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class FileSystemService:
    """Listing, transfers, item management and search below one home directory."""

    def __init__(self, home_path: Path, search_pacing: float = constants.SEARCH_PACING_MS / 1000):
        self.home_path = Path(home_path)
        self.walker = SearchWalker(self.home_path, pacing_delay=search_pacing)

    def resolve(self, user_path: str | None) -> Path:
        return path_guard.resolve(self.home_path, user_path)

    def _is_home(self, path: Path) -> bool:
        return os.path.normpath(str(path)) == os.path.normpath(str(self.home_path))

    async def list_items(self, user_path: str | None) -> List[Entry]:
        target = self.resolve(user_path)
        directories, files = await asyncio.to_thread(list_directory, self.home_path, target)
        return [*directories, *files]

    async def save_upload(self, user_path: str | None, filename: str | None,
                          chunks: AsyncIterator[bytes]) -> str:
        """Writes an uploaded file into a directory and returns the stored name."""
        target_dir = self.resolve(user_path)
        safe_filename = validate_filename(filename)
        if not await asyncio.to_thread(target_dir.is_dir):
            raise ItemNotFoundError("Upload folder is not found")

        final_path = await asyncio.to_thread(get_unique_path, target_dir / safe_filename)
        bytes_written = 0
        try:
            async with aiofiles.open(final_path, "xb") as f:
                async for chunk in chunks:
                    if chunk:
                        await f.write(chunk)
                        bytes_written += len(chunk)
        except PermissionError:
            log.warning(f"Access denied writing upload to {final_path}")
            await asyncio.to_thread(final_path.unlink, missing_ok=True)
            raise AccessDeniedError("Access denied")
        except OSError as e:
            log.error(f"Error writing upload {final_path}: {e}")
            await asyncio.to_thread(final_path.unlink, missing_ok=True)
            raise FileOperationError("Internal server error: could not save file")

        if bytes_written == 0:
            await asyncio.to_thread(final_path.unlink, missing_ok=True)
            raise InvalidRequestError("No file uploaded or file is empty")

        log.info(f"Upload completed: {final_path.name} ({bytes_written} bytes)")
        return final_path.name

    async def open_download(self, user_path: str | None) -> Download:
        """
        Opens a file for streaming. All errors surface here, before any
        response headers are sent; the caller owns the returned handle.
        """
        file_path = self.resolve(user_path)
        try:
            st = await aiofiles.os.stat(file_path)
            if not stat.S_ISREG(st.st_mode):
                raise ItemNotFoundError("File not found")
            handle = await aiofiles.open(file_path, "rb")
        except (FileNotFoundError, NotADirectoryError):
            raise ItemNotFoundError("File not found")
        except PermissionError:
            log.warning(f"Access denied opening {file_path} for download")
            raise AccessDeniedError("Access denied")
        except OSError as e:
            log.error(f"Failed to open '{file_path}' for download: {e}")
            raise FileOperationError("Internal server error: could not read file")

        media_type, _ = mimetypes.guess_type(file_path.name)
        return Download(file_path, media_type or constants.DEFAULT_CONTENT_TYPE, st.st_size, handle)

    async def iter_file(self, handle) -> AsyncIterator[bytes]:
        """Streams an opened download and closes it when done."""
        try:
            while chunk := await handle.read(constants.DOWNLOAD_CHUNK_SIZE):
                yield chunk
        finally:
            await handle.close()

    async def delete_item(self, user_path: str | None):
        target = self.resolve(user_path)
        if self._is_home(target):
            raise AccessDeniedError("The home directory cannot be deleted")
        if not await asyncio.to_thread(os.path.lexists, target):
            raise ItemNotFoundError("Specified path not found")
        try:
            await asyncio.to_thread(_remove, target)
        except PermissionError:
            log.warning(f"Access denied deleting {target}")
            raise AccessDeniedError("Access denied")
        except OSError as e:
            log.error(f"Failed to delete item '{target}': {e}")
            raise FileOperationError("Internal server error: could not delete item")
        log.info(f"Deleted {target}")

    async def move_item(self, old_path: str | None, new_path: str | None, force: bool = False) -> str:
        """
        Moves a file or directory. An occupied destination is reported, not
        replaced, unless `force` is set.
        """
        source = self.resolve(old_path)
        if self._is_home(source):
            raise AccessDeniedError("The home directory cannot be moved")
        if not await asyncio.to_thread(os.path.lexists, source):
            raise ItemNotFoundError("Specified old path not found")
        destination = self.resolve(new_path)
        if self._is_home(destination):
            raise AccessDeniedError("Access denied")

        if await asyncio.to_thread(os.path.lexists, destination):
            if not force:
                return f"{new_path} already exists"
            if os.path.normpath(str(source)) == os.path.normpath(str(destination)):
                return "Item moved"
            if path_guard.is_within_root(str(destination), str(source)):
                raise FileOperationError("Internal server error: cannot replace a folder with its own content")

        def _move():
            if force and os.path.lexists(destination):
                _remove(destination)
            shutil.move(str(source), str(destination))

        try:
            await asyncio.to_thread(_move)
        except PermissionError:
            log.warning(f"Access denied moving {source} to {destination}")
            raise AccessDeniedError("Access denied")
        except (OSError, shutil.Error) as e:
            log.error(f"Failed to move '{source}' to '{destination}': {e}")
            raise FileOperationError("Internal server error: could not move item")
        log.info(f"Moved {source} to {destination}")
        return "Item moved"

    async def copy_item(self, old_path: str | None, new_path: str | None, force: bool = False) -> str:
        """Copies a single file. Directories are not copied."""
        source = self.resolve(old_path)
        if not await asyncio.to_thread(source.is_file):
            raise ItemNotFoundError("Specified old path not found")
        destination = self.resolve(new_path)

        if await asyncio.to_thread(os.path.lexists, destination):
            if not force:
                return f"{new_path} already exists"
            if await asyncio.to_thread(destination.is_dir):
                raise FileOperationError("Internal server error: destination is a folder")

        try:
            await asyncio.to_thread(shutil.copy2, str(source), str(destination))
        except shutil.SameFileError:
            return "Item copied"
        except PermissionError:
            log.warning(f"Access denied copying {source} to {destination}")
            raise AccessDeniedError("Access denied")
        except OSError as e:
            log.error(f"Failed to copy '{source}' to '{destination}': {e}")
            raise FileOperationError("Internal server error: could not copy file")
        log.info(f"Copied {source} to {destination}")
        return "Item copied"

    async def create_folder(self, user_path: str | None) -> str:
        """Creates a folder, renaming it 'name (n)' if the name is taken."""
        if not user_path or not user_path.strip("/\\ "):
            raise InvalidRequestError("Path not specified")
        target = self.resolve(user_path)

        def _create() -> Path:
            final_path = get_unique_path(target)
            final_path.mkdir(parents=True)
            return final_path

        try:
            final_path = await asyncio.to_thread(_create)
        except PermissionError:
            log.warning(f"Access denied creating folder {target}")
            raise AccessDeniedError("Access denied")
        except OSError as e:
            log.error(f"Failed to create folder '{target}': {e}")
            raise FileOperationError("Internal server error: could not create folder")
        log.info(f"Created folder {final_path}")
        return final_path.name

    def search(self, user_path: str | None, search_term: str | None,
               cancel_event: asyncio.Event) -> AsyncIterator[Entry]:
        """
        Starts a name search. Path validation happens here, before anything is
        streamed, so an escaping path is an ordinary 403.
        """
        start = self.resolve(user_path)
        pattern = wrap_search_term(search_term)
        log.info(f"Search started for {search_term!r} under {start}")
        return self.walker.search(start, pattern, cancel_event)
