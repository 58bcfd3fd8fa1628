from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Request
from pydantic import ValidationError

from scoreboard.engine import NoActiveGameError, ScoreboardError
from scoreboard.events import ACTION_EVENTS, Outbound, serialize_game
from scoreboard.messages import StartGameMessage, StartKillerGameMessage
from scoreboard.roster import RosterPlayer
from scoreboard.store import InMemoryScoreboardStore

router = APIRouter(tags=["game"])


def _store(request: Request) -> InMemoryScoreboardStore:
    return request.app.state.store


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, NoActiveGameError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, ValueError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=409, detail=str(e))


async def _publish(request: Request, stats_revision: int, *messages: Outbound) -> None:
    """Push an HTTP-driven change to every WebSocket observer."""
    store = _store(request)
    outgoing = list(messages)
    if store.stats.revision != stats_revision:
        outgoing.append(Outbound("statsUpdate", store.stats.as_dict()))
    await request.app.state.hub.broadcast(outgoing)


def _require_game(store: InMemoryScoreboardStore) -> dict[str, Any]:
    state = serialize_game(store)
    if state is None:
        raise HTTPException(status_code=404, detail="no game is active")
    return state


@router.get("/game")
def get_game_state(request: Request) -> dict[str, Any]:
    return _require_game(_store(request))


@router.post("/game/start")
async def start_game(req: StartGameMessage, request: Request) -> dict[str, Any]:
    store = _store(request)
    revision = store.stats.revision
    try:
        store.engine().start_game(req.mode_id, req.options.to_teams(), options=req.options.to_options())
    except ValueError as e:
        raise _http_error(e) from e
    state = serialize_game(store)
    await _publish(request, revision, Outbound("gameState", state))
    return state


@router.post("/game/killer")
async def start_killer_game(req: StartKillerGameMessage, request: Request) -> dict[str, Any]:
    store = _store(request)
    revision = store.stats.revision
    try:
        store.engine().start_killer_game([p.to_setup() for p in req.players])
    except ValueError as e:
        raise _http_error(e) from e
    state = serialize_game(store)
    await _publish(request, revision, Outbound("gameStateUpdate", state))
    return state


@router.post("/game/actions/{event}")
async def game_action(event: str, request: Request, payload: dict[str, Any] | None = Body(default=None)) -> dict[str, Any]:
    if event not in ACTION_EVENTS:
        raise HTTPException(status_code=404, detail=f"unknown action event {event!r}")
    mode, action, model = ACTION_EVENTS[event]
    store = _store(request)
    revision = store.stats.revision

    try:
        message = model.model_validate(payload or {})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False)) from e
    try:
        store.engine().apply(mode, action, **message.to_kwargs())
    except ScoreboardError as e:
        raise _http_error(e) from e

    state = serialize_game(store)
    await _publish(request, revision, Outbound("gameStateUpdate", state))
    return state


@router.post("/game/undo")
async def undo_last_action(request: Request) -> dict[str, Any]:
    store = _store(request)
    _require_game(store)
    revision = store.stats.revision
    if store.engine().undo() is None:
        raise HTTPException(status_code=409, detail="nothing to undo")
    state = serialize_game(store)
    await _publish(request, revision, Outbound("gameStateUpdate", state))
    return state


@router.delete("/game")
async def end_game(request: Request) -> dict:
    store = _store(request)
    ended = store.engine().end_game()
    if ended is not None:
        await _publish(request, store.stats.revision, Outbound("gameStateUpdate", None), Outbound("noGameActive"))
    return {"ended": ended is not None}


@router.get("/stats")
def get_stats(request: Request) -> dict:
    return _store(request).stats.as_dict()


@router.get("/players", response_model=list[RosterPlayer])
def list_players(request: Request) -> list[RosterPlayer]:
    return _store(request).roster.players()


@router.put("/players", response_model=list[RosterPlayer])
async def replace_players(players: list[RosterPlayer], request: Request) -> list[RosterPlayer]:
    store = _store(request)
    try:
        store.roster.replace(players)
    except OSError as e:
        raise HTTPException(status_code=500, detail="could not save player list") from e
    saved = store.roster.players()
    await _publish(
        request,
        store.stats.revision,
        Outbound("persistentPlayersList", [p.model_dump() for p in saved]),
    )
    return saved
