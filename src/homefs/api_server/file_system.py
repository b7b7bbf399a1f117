# src/homefs/api_server/file_system.py
"""
HomeFS - Remote File Explorer Server - File System API Module
Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU Affero General Public License as published
by the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
GNU Affero General Public License for more details.

You should have received a copy of the GNU Affero General Public License
along with this program. If not, see <https://www.gnu.org/licenses/>.
"""

import asyncio
import logging
from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, File, Query, Request, Response, UploadFile
from fastapi.responses import StreamingResponse

from ..core import constants
from ..core.exceptions import InvalidRequestError
from ..core.models import Entry, MessageResponse, MoveRequest, NameResponse
from ..core.utils import encode_filename_for_header
from ..services.file_service import FileSystemService
from .event_stream import SSE_HEADERS, EventStreamEmitter, SearchSessions

log = logging.getLogger(__name__)

# --- API Router ---
# Fixed segments (search, download, upload, ...) are registered before the
# catch-all listing route so they take precedence.
router = APIRouter()


def get_file_system_service(request: Request) -> FileSystemService:
    return request.app.state.file_system_service


def get_search_sessions(request: Request) -> SearchSessions:
    return request.app.state.search_sessions


# --- Search ---
@router.get("/search")
@router.get("/search/{path:path}")
async def search(
    request: Request,
    path: str = "",
    search_term: str = Query("", alias="searchTerm"),
    session_id: str | None = Query(None, alias="sessionId"),
    service: FileSystemService = Depends(get_file_system_service),
    sessions: SearchSessions = Depends(get_search_sessions),
):
    # A rejected path must not cancel the session's running search.
    cancel_event = asyncio.Event()
    results = service.search(path, search_term, cancel_event)
    sessions.begin(session_id, cancel_event)

    emitter = EventStreamEmitter(request, cancel_event)

    async def event_generator():
        try:
            async for event in emitter.relay(results):
                yield event
        finally:
            sessions.finish(session_id, cancel_event)

    return StreamingResponse(event_generator(), media_type="text/event-stream", headers=SSE_HEADERS)


# --- Transfers ---
@router.get("/download/{path:path}")
async def download_file(path: str, service: FileSystemService = Depends(get_file_system_service)):
    download = await service.open_download(path)
    headers = {
        "Content-Disposition": encode_filename_for_header(download.path.name),
        "Content-Length": str(download.size),
    }
    return StreamingResponse(service.iter_file(download.handle), media_type=download.media_type, headers=headers)


@router.post("/upload", response_model=NameResponse)
@router.post("/upload/{path:path}", response_model=NameResponse)
async def upload_file(
    path: str = "",
    file: UploadFile | None = File(None),
    service: FileSystemService = Depends(get_file_system_service),
):
    if file is None or not file.filename or file.size == 0:
        raise InvalidRequestError("No file uploaded or file is empty")

    async def read_chunks() -> AsyncIterator[bytes]:
        while chunk := await file.read(constants.UPLOAD_CHUNK_SIZE):
            yield chunk

    try:
        name = await service.save_upload(path, file.filename, read_chunks())
    finally:
        await file.close()
    return NameResponse(name=name)


# --- Item Management ---
@router.post("/move", response_model=MessageResponse)
async def move_item(payload: MoveRequest, service: FileSystemService = Depends(get_file_system_service)):
    message = await service.move_item(payload.old_path, payload.new_path, payload.force)
    return MessageResponse(message=message)


@router.post("/copy", response_model=MessageResponse)
async def copy_item(payload: MoveRequest, service: FileSystemService = Depends(get_file_system_service)):
    message = await service.copy_item(payload.old_path, payload.new_path, payload.force)
    return MessageResponse(message=message)


@router.post("/create", response_model=NameResponse)
@router.post("/create/{path:path}", response_model=NameResponse)
async def create_folder(path: str = "", service: FileSystemService = Depends(get_file_system_service)):
    name = await service.create_folder(path)
    return NameResponse(name=name)


@router.delete("", status_code=204)
@router.delete("/{path:path}", status_code=204)
async def delete_item(path: str = "", service: FileSystemService = Depends(get_file_system_service)):
    await service.delete_item(path)
    return Response(status_code=204)


# --- Browsing ---
@router.get("", response_model=List[Entry])
@router.get("/{path:path}", response_model=List[Entry])
async def list_items(path: str = "", service: FileSystemService = Depends(get_file_system_service)):
    return await service.list_items(path)
