# src/homefs/services/search_walker.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import logging
import os
import re
from collections import deque
from pathlib import Path
from typing import AsyncIterator, Callable, List, Optional, Tuple

from ..core import constants
from ..core.models import DirectoryEntry, Entry, FileEntry
from .directory_lister import build_directory_entry, build_file_entry, count_children

log = logging.getLogger(__name__)

NameMatcher = Callable[[str], bool]
# (absolute path, entry if the name matched, is a symlink)
_Subdirectory = Tuple[Path, Optional[DirectoryEntry], bool]


def wrap_search_term(term: str | None) -> str:
    """A raw term 'foo' is searched as '*foo*', i.e. 'name contains foo'."""
    return f"*{term or ''}*"


def compile_name_pattern(pattern: str | None) -> NameMatcher:
    """
    Builds a case-insensitive matcher for bare entry names.

    '' and '*' match everything. A pattern with '*' is matched against the
    whole name, each run of '*' standing for any sequence of characters and
    everything else taken literally. A pattern without '*' is a substring test.
    """
    if not pattern or pattern == "*":
        return lambda name: True

    if "*" in pattern:
        literals = [re.escape(part) for part in re.split(r"\*+", pattern)]
        regex = re.compile(".*".join(literals), re.IGNORECASE | re.DOTALL)
        return lambda name: regex.fullmatch(name) is not None

    needle = pattern.casefold()
    return lambda name: needle in name.casefold()


class SearchWalker:
    """
    Breadth-first, cancellable name search below a start directory.

    Each call to search() owns its own queue, so one walker can serve any
    number of concurrent searches. Directory reads happen in a worker thread;
    the event loop only sees one await per directory plus one per match.
    """

    def __init__(self, root: Path, pacing_delay: float = constants.SEARCH_PACING_MS / 1000):
        self.root = root
        self.pacing_delay = pacing_delay

    def _item_count(self, path: Path) -> int:
        try:
            return count_children(path)
        except (PermissionError, FileNotFoundError):
            log.warning(f"Access denied to folder: {path}")
            return 0

    def _scan(self, directory: Path, matches: NameMatcher,
              cancel_event: asyncio.Event) -> Tuple[List[FileEntry], List[_Subdirectory]]:
        """
        Blocking read of one directory. Never raises for unreadable or vanished
        directories, and stops building entries once the search is cancelled.
        """
        try:
            with os.scandir(directory) as it:
                children = list(it)
        except PermissionError:
            log.warning(f"Access denied to folder: {directory}")
            return [], []
        except (FileNotFoundError, NotADirectoryError):
            log.warning(f"Directory not found: {directory}")
            return [], []

        files: List[FileEntry] = []
        subdirectories: List[_Subdirectory] = []
        for entry in children:
            if cancel_event.is_set():
                break
            child = Path(entry.path)
            try:
                if entry.is_dir():
                    match = None
                    if matches(entry.name):
                        match = build_directory_entry(self.root, child, self._item_count(child))
                    subdirectories.append((child, match, entry.is_symlink()))
                elif matches(entry.name):
                    files.append(build_file_entry(self.root, child))
            except FileNotFoundError:
                log.debug(f"Item vanished during search: {child}")
            except PermissionError:
                log.warning(f"Access denied to item: {child}")
        return files, subdirectories

    async def search(self, start: Path, pattern: str | None, cancel_event: asyncio.Event) -> AsyncIterator[Entry]:
        """
        Yields matching FileEntry/DirectoryEntry objects in BFS order: for each
        directory, its matching files first, then its matching subdirectories.

        Every subdirectory is queued whether or not it matched. Symlinked
        directories are reported but not descended into. The sequence simply
        ends when the tree is exhausted or `cancel_event` is set.
        """
        matches = compile_name_pattern(pattern)
        if not await asyncio.to_thread(os.path.isdir, start):
            log.info(f"Search start is not a directory, nothing to do: {start}")
            return

        queue = deque([start])
        visited = emitted = 0
        try:
            while queue and not cancel_event.is_set():
                directory = queue.popleft()
                visited += 1
                files, subdirectories = await asyncio.to_thread(self._scan, directory, matches, cancel_event)

                for entry in files:
                    if cancel_event.is_set():
                        return
                    emitted += 1
                    yield entry
                    await asyncio.sleep(self.pacing_delay)

                for path, entry, is_symlink in subdirectories:
                    if cancel_event.is_set():
                        return
                    if entry is not None:
                        emitted += 1
                        yield entry
                        await asyncio.sleep(self.pacing_delay)
                    if not is_symlink:
                        queue.append(path)
        finally:
            state = "cancelled" if cancel_event.is_set() else "finished"
            log.info(f"Search {pattern!r} under {start} {state}: {emitted} matches, {visited} folders visited")
