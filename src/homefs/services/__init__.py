# src/homefs/services/__init__.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from .file_service import FileSystemService
from .search_walker import SearchWalker, compile_name_pattern

__all__ = [
    "FileSystemService",
    "SearchWalker",
    "compile_name_pattern",
]
