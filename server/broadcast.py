"""FakeSO: live update channel.

Every successful write is pushed to all connected WebSocket clients as
``{"event": name, "data": payload}``. Clients filter what they need.
"""

from __future__ import annotations

import logging

from fastapi import Request, WebSocket
from fastapi.encoders import jsonable_encoder

logger = logging.getLogger(__name__)

EVENTS = (
    "questionUpdate",
    "answerUpdate",
    "viewsUpdate",
    "voteUpdate",
    "commentUpdate",
    "threadUpdate",
    "messageUpdate",
    "messageLikeUpdate",
    "messageViewsUpdate",
    "accountUpdate",
    "forumUpdate",
)


class Broadcaster:
    """Fans events out to connected sockets. No acknowledgement, no retry."""

    def __init__(self):
        self._clients = set()

    @property
    def client_count(self) -> int:
        return len(self._clients)

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self._clients.add(websocket)
        logger.info("Socket connected (%d open)", len(self._clients))

    def disconnect(self, websocket: WebSocket) -> None:
        self._clients.discard(websocket)

    async def emit(self, event: str, data) -> None:
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event}")
        frame = {"event": event, "data": jsonable_encoder(data)}
        for websocket in list(self._clients):
            try:
                await websocket.send_json(frame)
            except Exception:
                logger.warning("Dropping socket after failed %s send", event)
                self.disconnect(websocket)


def get_broadcaster(request: Request) -> Broadcaster:
    return request.app.state.broadcaster
