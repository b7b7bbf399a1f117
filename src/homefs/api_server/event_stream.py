# src/homefs/api_server/event_stream.py
# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2025 AZHAR ZOUHIR / BYTEDz

import asyncio
import contextlib
import logging
from typing import AsyncIterator, Dict

from fastapi import Request
from pydantic import BaseModel

from ..core import constants

log = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def format_event(payload: str) -> str:
    return f"data: {payload}\n\n"


class SearchSessions:
    """
    Tracks the in-flight search of each client session, so that starting a
    new search cancels the previous one. Lives on app.state.
    """

    def __init__(self):
        self._active: Dict[str, asyncio.Event] = {}

    def begin(self, session_id: str | None, cancel_event: asyncio.Event | None = None) -> asyncio.Event:
        if cancel_event is None:
            cancel_event = asyncio.Event()
        if session_id:
            previous = self._active.get(session_id)
            if previous is not None:
                log.info(f"Cancelling superseded search for session {session_id}")
                previous.set()
            self._active[session_id] = cancel_event
        return cancel_event

    def finish(self, session_id: str | None, cancel_event: asyncio.Event):
        if session_id and self._active.get(session_id) is cancel_event:
            del self._active[session_id]

    def active_count(self) -> int:
        return len(self._active)


class EventStreamEmitter:
    """
    Relays search results to one SSE connection.

    Client disconnects are reported through the search's cancel event rather
    than by the walker polling the transport. The watcher and the relay's
    own teardown both set it, so the walk stops however the response ends.
    """

    def __init__(self, request: Request, cancel_event: asyncio.Event,
                 poll_interval: float = constants.DISCONNECT_POLL_INTERVAL):
        self.request = request
        self.cancel_event = cancel_event
        self.poll_interval = poll_interval
        self.disconnected = False
        self.watcher: asyncio.Task | None = None

    async def _watch_disconnect(self):
        while not self.cancel_event.is_set():
            if await self.request.is_disconnected():
                log.info("Search client disconnected")
                self.disconnected = True
                self.cancel_event.set()
                return
            await asyncio.sleep(self.poll_interval)

    async def relay(self, results: AsyncIterator[BaseModel]) -> AsyncIterator[str]:
        self.watcher = asyncio.create_task(self._watch_disconnect())
        try:
            async for result in results:
                yield format_event(result.model_dump_json(by_alias=True))
            if not self.disconnected:
                yield format_event(constants.SEARCH_END_SENTINEL)
        finally:
            self.cancel_event.set()
            self.watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self.watcher
            aclose = getattr(results, "aclose", None)
            if aclose is not None:
                await aclose()
