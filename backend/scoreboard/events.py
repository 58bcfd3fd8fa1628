"""
Maps controller/display events onto the engine and collaborators.

`handle_event` is synchronous and framework-free apart from JSON encoding: it
returns what should be sent back to the caller and what should be broadcast to
every connected client, and the transport does the sending.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, TypeAdapter, ValidationError

from scoreboard.engine import GameMode, GameStartError, NoActiveGameError, ScoreboardError
from scoreboard.messages import (
    AroundTheWorldHitMessage,
    CricketEndTurnMessage,
    CricketMarkMessage,
    EmptyMessage,
    FiveZeroOneTurnMessage,
    KillerBecomeKillerMessage,
    KillerChooseNumberMessage,
    KillerRemoveLifeMessage,
    ObjectiveActionMessage,
    ScoreMessage,
    StartGameMessage,
    StartKillerGameMessage,
    TurnMessage,
)
from scoreboard.roster import RosterPlayer
from scoreboard.store import InMemoryScoreboardStore

logger = logging.getLogger(__name__)

# wire event -> (mode, engine action, payload model)
ACTION_EVENTS: dict[str, tuple[GameMode, str, type[BaseModel]]] = {
    "cricketMark": (GameMode.CRICKET, "mark", CricketMarkMessage),
    "submitCricketScore": (GameMode.CRICKET, "submit_score", ScoreMessage),
    "cancelCricketKeypad": (GameMode.CRICKET, "cancel_entry", EmptyMessage),
    "cricketControllerEndTurn": (GameMode.CRICKET, "end_turn", CricketEndTurnMessage),
    "threeFFObjectiveAction": (GameMode.THREE_FF, "objective_action", ObjectiveActionMessage),
    "submitThreeFFScore": (GameMode.THREE_FF, "submit_score", ScoreMessage),
    "cancelThreeFFKeypad": (GameMode.THREE_FF, "cancel_entry", EmptyMessage),
    "fiveZeroOneTurnAction": (GameMode.FIVE_ZERO_ONE, "turn_action", FiveZeroOneTurnMessage),
    "submitFiveZeroOneScore": (GameMode.FIVE_ZERO_ONE, "submit_score", ScoreMessage),
    "cancelFiveZeroOneKeypad": (GameMode.FIVE_ZERO_ONE, "cancel_entry", EmptyMessage),
    "aroundTheWorldClientRequestsObjectiveModal": (GameMode.AROUND_THE_WORLD, "open_entry", TurnMessage),
    "aroundTheWorldTurnResult": (GameMode.AROUND_THE_WORLD, "report_hit", AroundTheWorldHitMessage),
    "aroundTheWorldCancelObjectiveEntry": (GameMode.AROUND_THE_WORLD, "cancel_entry", EmptyMessage),
    "beersRequestScoreEntry": (GameMode.BEERS, "open_entry", TurnMessage),
    "beersSubmitScore": (GameMode.BEERS, "submit_score", ScoreMessage),
    "beersCancelScoreEntry": (GameMode.BEERS, "cancel_entry", EmptyMessage),
    "beersAcknowledgeLetter": (GameMode.BEERS, "acknowledge_letter", EmptyMessage),
    "golfRequestScoreEntry": (GameMode.GOLF, "open_entry", TurnMessage),
    "golfSubmitScore": (GameMode.GOLF, "submit_score", ScoreMessage),
    "golfCancelScoreEntry": (GameMode.GOLF, "cancel_entry", EmptyMessage),
    "baseballRequestScoreEntry": (GameMode.BASEBALL, "open_entry", TurnMessage),
    "baseballSubmitInningScore": (GameMode.BASEBALL, "submit_score", ScoreMessage),
    "baseballCancelKeypad": (GameMode.BASEBALL, "cancel_entry", EmptyMessage),
    "killerChooseNumber": (GameMode.KILLER, "choose_number", KillerChooseNumberMessage),
    "killerBecomeKiller": (GameMode.KILLER, "become_killer", KillerBecomeKillerMessage),
    "killerRemoveLife": (GameMode.KILLER, "remove_life", KillerRemoveLifeMessage),
}

_ROSTER_LIST = TypeAdapter(list[RosterPlayer])


@dataclass(frozen=True)
class Outbound:
    event: str
    data: Any = None

    def frame(self) -> dict[str, Any]:
        return {"event": self.event, "data": jsonable_encoder(self.data)}


@dataclass
class EventResult:
    replies: list[Outbound] = field(default_factory=list)
    broadcasts: list[Outbound] = field(default_factory=list)

    def reply(self, event: str, data: Any = None) -> EventResult:
        self.replies.append(Outbound(event, data))
        return self

    def broadcast(self, event: str, data: Any = None) -> EventResult:
        self.broadcasts.append(Outbound(event, data))
        return self


def serialize_game(store: InMemoryScoreboardStore) -> dict[str, Any] | None:
    engine = store.engine()
    game = engine.game
    if game is None:
        return None
    state = jsonable_encoder(game)
    state["history_length"] = len(engine.history)
    state["can_undo"] = engine.can_undo
    return state


def handle_event(store: InMemoryScoreboardStore, event: str, data: Any = None) -> EventResult:
    stats_revision = store.stats.revision
    handler = _HANDLERS.get(event)
    if handler is not None:
        result = handler(store, data)
    elif event in ACTION_EVENTS:
        result = _game_action(store, event, data)
    else:
        logger.warning("unknown event %r", event)
        result = EventResult().reply("actionError", {"message": f"unknown event {event!r}"})

    if store.stats.revision != stats_revision:
        result.broadcast("statsUpdate", store.stats.as_dict())
    return result


def _payload(data: Any) -> dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _game_action(store: InMemoryScoreboardStore, event: str, data: Any) -> EventResult:
    mode, action, model = ACTION_EVENTS[event]
    result = EventResult()
    error_event = "killerError" if mode is GameMode.KILLER else "actionError"

    try:
        message = model.model_validate(_payload(data))
    except ValidationError as e:
        logger.warning("rejected %s: invalid payload: %s", event, e.errors(include_url=False))
        return result.reply(error_event, _error(store, mode, f"Invalid data for {event}."))

    try:
        store.engine().apply(mode, action, **message.to_kwargs())
    except NoActiveGameError:
        return result.reply("noGameActive")
    except ScoreboardError as e:
        logger.warning("rejected %s: %s", event, e)
        return result.reply(error_event, _error(store, mode, str(e)))
    except Exception:
        logger.exception("%s failed", event)
        return result.reply(error_event, _error(store, mode, f"Server error while handling {event}."))

    return result.broadcast("gameStateUpdate", serialize_game(store))


def _error(store: InMemoryScoreboardStore, mode: GameMode, message: str) -> Any:
    if mode is GameMode.KILLER:
        return message
    return {"message": message, "game": serialize_game(store)}


def _request_game_state(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    state = serialize_game(store)
    if state is None:
        return EventResult().reply("noGameActive")
    return EventResult().reply("gameState", state)


def _start_game(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    result = EventResult()
    try:
        message = StartGameMessage.model_validate(_payload(data))
        options = message.options.to_options()
        store.engine().start_game(message.mode_id, message.options.to_teams(), options=options)
    except (ValidationError, ValueError) as e:
        mode_id = _payload(data).get("modeId", "")
        logger.warning("could not start %s game: %s", mode_id, e)
        text = str(e) if isinstance(e, GameStartError) else f"Server failed to initialize {mode_id} game."
        return result.reply("gameStartError", text)
    return result.broadcast("gameState", serialize_game(store))


def _start_killer_game(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    result = EventResult()
    try:
        message = StartKillerGameMessage.model_validate(_payload(data))
        store.engine().start_killer_game([p.to_setup() for p in message.players])
    except (ValidationError, GameStartError) as e:
        logger.warning("could not start KILLER game: %s", e)
        return result.reply("gameStartError", "Cannot start Killer game: Invalid player data.")
    return result.broadcast("gameStateUpdate", serialize_game(store))


def _undo(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    if store.engine().undo() is None:
        return EventResult()
    return EventResult().broadcast("gameStateUpdate", serialize_game(store))


def _main_menu(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    store.engine().end_game()
    return EventResult().broadcast("gameStateUpdate", None).broadcast("noGameActive")


def _end_game(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    if store.engine().game is None:
        return EventResult()
    return _main_menu(store, data)


def _request_stats(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    return EventResult().reply("statsUpdate", store.stats.as_dict())


def _reset_session_stats(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    store.stats.reset_session()
    return EventResult()


def _reset_historical_stats(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    store.stats.reset_all()
    return EventResult()


def _show_stats_screen(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    return EventResult().broadcast("displayStatsScreen")


def _roster_list(store: InMemoryScoreboardStore) -> list[dict[str, Any]]:
    return [p.model_dump() for p in store.roster.players()]


def _get_roster(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    return EventResult().reply("persistentPlayersList", _roster_list(store))


def _update_roster(store: InMemoryScoreboardStore, data: Any) -> EventResult:
    result = EventResult()
    try:
        store.roster.replace(_ROSTER_LIST.validate_python(data))
    except ValidationError:
        return result.reply(
            "persistentPlayersUpdateStatus", {"success": False, "message": "Invalid list format received."}
        )
    except OSError as e:
        logger.error("could not save player list: %s", e)
        return result.reply("persistentPlayersUpdateStatus", {"success": False, "message": "Could not save list."})
    result.broadcast("persistentPlayersList", _roster_list(store))
    return result.reply("persistentPlayersUpdateStatus", {"success": True, "message": "Player list updated and saved."})


_HANDLERS = {
    "requestGameState": _request_game_state,
    "startGame": _start_game,
    "startKillerGame": _start_killer_game,
    "undoLastAction": _undo,
    "requestMainMenu": _main_menu,
    "endGame": _end_game,
    "requestStats": _request_stats,
    "resetSessionStats": _reset_session_stats,
    "resetHistoricalStats": _reset_historical_stats,
    "showStatsScreen": _show_stats_screen,
    "getPersistentPlayersList": _get_roster,
    "updatePersistentPlayersList": _update_roster,
}
