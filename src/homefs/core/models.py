# src/homefs/core/models.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Filesystem Snapshots ---
class FileEntry(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    path: str
    last_modified: datetime
    size_in_bytes: int = Field(..., ge=0)
    type: str


class DirectoryEntry(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    path: str
    last_modified: datetime
    item_count: int = Field(0, ge=0)


Entry = Union[DirectoryEntry, FileEntry]


# --- Request / Response Bodies ---
class MoveRequest(_CamelModel):
    old_path: str | None = None
    new_path: str | None = None
    force: bool = False


class MessageResponse(BaseModel):
    message: str


class NameResponse(BaseModel):
    name: str
