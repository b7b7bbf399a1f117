# src/homefs/core/validators.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .exceptions import InvalidRequestError

MAX_FILENAME_LENGTH = 255
FORBIDDEN_FILENAME_CHARS = set('/\\\0')


def validate_filename(filename: str | None) -> str:
    """
    Returns a bare file name safe to join onto a directory.
    Browsers may send a full client-side path; only the last segment is kept.
    """
    if not filename:
        raise InvalidRequestError("Filename cannot be empty.")
    name = filename.replace("\\", "/").rsplit("/", 1)[-1].strip()
    if not name or name in (".", ".."):
        raise InvalidRequestError("Invalid filename.")
    if any(ch in FORBIDDEN_FILENAME_CHARS for ch in name):
        raise InvalidRequestError("Filename contains forbidden characters.")
    if len(name) > MAX_FILENAME_LENGTH:
        raise InvalidRequestError("Filename is too long.")
    return name
