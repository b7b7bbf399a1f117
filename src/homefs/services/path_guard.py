# src/homefs/services/path_guard.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import logging
import os
from pathlib import Path

from ..core.exceptions import AccessDeniedError

log = logging.getLogger(__name__)


def _split_segments(user_path: str) -> list:
    return [part for part in user_path.replace("\\", "/").split("/") if part]


def resolve(root: Path, user_path: str | None) -> Path:
    """
    Resolves a home-relative path to an absolute one under `root`.

    Join semantics follow os.path.join, so an absolute user path replaces the
    root and is rejected. Any '..' segment is rejected outright, even if it
    would collapse back inside the root.
    """
    user_path = user_path or ""
    if "\0" in user_path:
        raise AccessDeniedError("Access denied")
    if ".." in _split_segments(user_path):
        log.warning(f"Rejected path with '..' segment: {user_path!r}")
        raise AccessDeniedError("Relative pathing ('..') is not allowed.")

    root_str = os.path.normpath(str(root))
    resolved_str = os.path.normpath(os.path.join(root_str, user_path))

    if not is_within_root(root_str, resolved_str):
        log.warning(f"Rejected path outside home directory: {user_path!r}")
        raise AccessDeniedError("Access denied")
    return Path(resolved_str)


def is_within_root(root_str: str, candidate_str: str) -> bool:
    # A bare prefix test would let "/srv/home2" pass for root "/srv/home".
    if candidate_str == root_str:
        return True
    prefix = root_str if root_str.endswith(os.sep) else root_str + os.sep
    return candidate_str.startswith(prefix)


def to_relative(root: Path, absolute_path: Path | str) -> str:
    """Renders an absolute path as '/a/b' relative to the root."""
    relative = os.path.relpath(str(absolute_path), str(root))
    if relative == ".":
        return "/"
    return "/" + relative.replace(os.sep, "/")
