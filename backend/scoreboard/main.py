from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse

from scoreboard.config import Config, configure_logging
from scoreboard.routes import router as game_router
from scoreboard.store import InMemoryScoreboardStore, get_store
from scoreboard.ws import ConnectionManager, router as ws_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI):
    # the shared store reads DATA_DIR when built
    if app.state.store is None:
        app.state.store = get_store()
    yield


def create_app(store: InMemoryScoreboardStore | None = None) -> FastAPI:
    app = FastAPI(title="Darts Scoreboard", lifespan=_lifespan)
    app.state.store = store
    app.state.hub = ConnectionManager()

    @app.get("/", include_in_schema=False)
    def root(request: Request):
        # Browsers get Swagger UI; API clients keep the JSON index.
        accept = (request.headers.get("accept") or "").lower()
        if "text/html" in accept:
            return RedirectResponse(url="/docs")
        return {
            "name": "Darts Scoreboard",
            "docs": "/docs",
            "health": "/health",
            "websocket": "/ws",
            "endpoints": [
                "GET /game",
                "POST /game/start",
                "POST /game/killer",
                "POST /game/actions/{event}",
                "POST /game/undo",
                "DELETE /game",
                "GET /stats",
                "GET /players",
                "PUT /players",
            ],
        }

    @app.get("/health")
    def health(request: Request):
        return {"status": "ok", "clients": request.app.state.hub.count()}

    app.include_router(game_router)
    app.include_router(ws_router)
    return app


app = create_app()


def run() -> None:
    configure_logging(Config.LOG_LEVEL)
    logger.info("serving scoreboard on %s:%d", Config.HOST, Config.PORT)
    uvicorn.run(app, host=Config.HOST, port=Config.PORT, log_level=Config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
