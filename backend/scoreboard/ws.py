from __future__ import annotations

import json
import logging
from typing import Iterable

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from scoreboard.events import EventResult, Outbound, handle_event

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


class ConnectionManager:
    """
    Tracks connected controllers and displays. All of them observe the same
    single game, so a broadcast goes to every socket.
    """

    def __init__(self) -> None:
        self._clients: set[WebSocket] = set()

    async def connect(self, ws: WebSocket) -> None:
        await ws.accept()
        self._clients.add(ws)
        logger.info("client connected (%d total)", len(self._clients))

    def disconnect(self, ws: WebSocket) -> None:
        self._clients.discard(ws)
        logger.info("client disconnected (%d total)", len(self._clients))

    def count(self) -> int:
        return len(self._clients)

    async def send(self, ws: WebSocket, message: Outbound) -> None:
        await ws.send_json(message.frame())

    async def broadcast(self, messages: Iterable[Outbound]) -> None:
        for message in messages:
            frame = message.frame()
            for ws in list(self._clients):
                try:
                    await ws.send_json(frame)
                except (RuntimeError, WebSocketDisconnect) as e:
                    logger.warning("dropping client after failed send: %s", e)
                    self._clients.discard(ws)

    async def deliver(self, ws: WebSocket, result: EventResult) -> None:
        for message in result.replies:
            await self.send(ws, message)
        await self.broadcast(result.broadcasts)


@router.websocket("/ws")
async def scoreboard_socket(ws: WebSocket) -> None:
    store = ws.app.state.store
    hub: ConnectionManager = ws.app.state.hub

    await hub.connect(ws)
    try:
        while True:
            raw = await ws.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                frame = None
            if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
                await hub.send(ws, Outbound("actionError", {"message": "expected {\"event\": ..., \"data\": ...}"}))
                continue
            event = frame["event"]
            logger.debug("received %s", event)
            try:
                result = handle_event(store, event, frame.get("data"))
            except Exception:
                logger.exception("%s failed", event)
                result = EventResult().reply("actionError", {"message": f"Server error while handling {event}."})
            await hub.deliver(ws, result)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(ws)
