# filename: src/homefs/api_server/api.py
"""
HomeFS - Remote File Explorer Server - Main API Module
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

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core import constants
from ..core.exceptions import HomeFSError
from ..core.version import __app_name__, __version__
from ..services.file_service import FileSystemService
from .event_stream import SearchSessions
from .file_system import router as file_system_router

log = logging.getLogger(__name__)


# --- FastAPI App Factory ---
def create_api_app(home_path: Path, search_pacing: float = constants.SEARCH_PACING_MS / 1000) -> FastAPI:
    app = FastAPI(title=f"{__app_name__} API", version=__version__)

    app.state.home_path = Path(home_path)
    app.state.file_system_service = FileSystemService(app.state.home_path, search_pacing=search_pacing)
    app.state.search_sessions = SearchSessions()

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(HomeFSError)
    async def homefs_error_handler(request: Request, exc: HomeFSError):
        if exc.status_code >= 500:
            log.error(f"{request.method} {request.url.path} failed: {exc.message}")
        else:
            log.debug(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    app.include_router(file_system_router, prefix="/filesystem")

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    log.info(f"{__app_name__} API serving {app.state.home_path}")
    return app
