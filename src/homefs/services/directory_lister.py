# src/homefs/services/directory_lister.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import logging
import os
import stat as _stat
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Tuple

from ..core import constants
from ..core.exceptions import AccessDeniedError, ItemNotFoundError
from ..core.models import DirectoryEntry, FileEntry
from .path_guard import to_relative

log = logging.getLogger(__name__)


def file_type(name: str) -> str:
    """Uppercase extension without the dot, e.g. 'report.txt' -> 'TXT'."""
    _, dot, extension = name.rpartition(".")
    if dot and extension:
        return extension.upper()
    return constants.UNTYPED_FILE


def _modified_at(st: os.stat_result) -> datetime:
    return datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)


def count_children(path: Path) -> int:
    """Number of immediate children. Raises PermissionError if unreadable."""
    with os.scandir(path) as it:
        return sum(1 for _ in it)


def build_file_entry(root: Path, path: Path, st: os.stat_result | None = None) -> FileEntry:
    st = st or path.stat()
    return FileEntry(
        name=path.name,
        path=to_relative(root, path),
        last_modified=_modified_at(st),
        size_in_bytes=st.st_size,
        type=file_type(path.name),
    )


def build_directory_entry(root: Path, path: Path, item_count: int) -> DirectoryEntry:
    return DirectoryEntry(
        name=path.name,
        path=to_relative(root, path),
        last_modified=_modified_at(path.stat()),
        item_count=item_count,
    )


def list_directory(root: Path, path: Path) -> Tuple[List[DirectoryEntry], List[FileEntry]]:
    """
    Blocking function listing the immediate children of `path`.

    Directories come first, then files, each group in enumeration order.
    A child directory that cannot be read is left out with a warning; an
    unreadable `path` itself raises AccessDeniedError. If `path` is a file,
    the listing is that single file.
    """
    try:
        st = path.stat()
    except FileNotFoundError:
        raise ItemNotFoundError("Specified path not found")
    except PermissionError:
        log.warning(f"Access denied to path: {path}")
        raise AccessDeniedError("Access denied to the specified path")

    if not _stat.S_ISDIR(st.st_mode):
        return [], [build_file_entry(root, path, st)]

    try:
        with os.scandir(path) as it:
            children = list(it)
    except PermissionError:
        log.warning(f"Access denied to folder: {path}")
        raise AccessDeniedError("Access denied to the specified path")
    except (FileNotFoundError, NotADirectoryError):
        raise ItemNotFoundError("Specified path not found")

    directories: List[DirectoryEntry] = []
    files: List[FileEntry] = []
    for entry in children:
        child = Path(entry.path)
        try:
            if entry.is_dir():
                directories.append(build_directory_entry(root, child, count_children(child)))
            else:
                files.append(build_file_entry(root, child))
        except PermissionError:
            log.warning(f"Access denied to item: {child}")
        except FileNotFoundError:
            # Removed between enumeration and stat, or a dangling symlink.
            log.debug(f"Item vanished while listing: {child}")
    return directories, files
