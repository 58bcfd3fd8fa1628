from __future__ import annotations

import logging
import random
import uuid
from typing import Any, Protocol, Sequence

from scoreboard.engine.errors import (
    GameOverError,
    GameStartError,
    InvalidActionError,
    NoActiveGameError,
    StaleActionError,
)
from scoreboard.engine.history import MAX_HISTORY_LENGTH, History
from scoreboard.engine.models import Game, GameMode, GameOptions, Participant, TeamSetup
from scoreboard.engine.modes import rules_for

logger = logging.getLogger(__name__)


class StatNotifier(Protocol):
    def record_win(self, game: Game) -> None: ...

    def revert_win(self, game: Game) -> None: ...


def build_participants(teams: Sequence[TeamSetup]) -> list[Participant]:
    if not teams:
        return [Participant(id=f"team_{uuid.uuid4().hex}", name="Team 1 (Default)", players=["Player 1"])]

    participants = []
    for i, team in enumerate(teams):
        name = team.name or f"Team {i + 1}"
        players = [p for p in team.players if p] or [name]
        participants.append(Participant(id=team.id or uuid.uuid4().hex, name=name, players=players))
    return participants


def parse_mode(mode_id: str | GameMode) -> GameMode:
    try:
        return GameMode(str(getattr(mode_id, "value", mode_id)).upper())
    except ValueError as e:
        raise GameStartError(f"unknown game mode {mode_id!r}") from e


class ScoreboardEngine:
    """
    Authoritative state for the one active scoreboard game.

    Every action runs against a snapshot of the live game; the snapshot replaces
    the live game only when the action succeeds, so a rejected action never
    leaves a half-applied state behind.

    This module intentionally contains no web/framework imports.
    """

    def __init__(
        self,
        *,
        notifier: StatNotifier | None = None,
        history_limit: int = MAX_HISTORY_LENGTH,
        rng: random.Random | None = None,
    ) -> None:
        self._notifier = notifier
        self._history = History(limit=history_limit)
        self._rng = rng or random.Random()
        self._game: Game | None = None

    @property
    def game(self) -> Game | None:
        return self._game

    @property
    def history(self) -> History:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._game is not None and self._history.can_undo

    def start_game(
        self,
        mode_id: str | GameMode,
        teams: Sequence[TeamSetup] = (),
        *,
        options: GameOptions | None = None,
    ) -> Game:
        mode = parse_mode(mode_id)
        if mode is GameMode.KILLER:
            raise GameStartError("For KILLER mode, please use the 'startKillerGame' event.")
        return self._start(mode, build_participants(teams), options or GameOptions())

    def start_killer_game(self, players: Sequence[TeamSetup]) -> Game:
        if not players:
            raise GameStartError("Cannot start Killer game: Invalid player data.")
        return self._start(GameMode.KILLER, build_participants(players), GameOptions())

    def _start(self, mode: GameMode, participants: list[Participant], options: GameOptions) -> Game:
        game = Game(id=str(uuid.uuid4()), mode=mode, participants=participants, options=options)
        rules_for(mode).initialize(game, options, self._rng)

        self._game = game
        self._history.clear()
        self._history.record(game)
        logger.info("started %s game %s with %d participants", mode.value, game.id, len(participants))
        return game

    def apply(
        self,
        mode: GameMode,
        action_name: str,
        /,
        *,
        participant_index: int | None = None,
        **payload: Any,
    ) -> Game:
        live = self._game
        if live is None:
            raise NoActiveGameError("no game is active")
        if live.mode is not mode:
            raise InvalidActionError(f"{action_name} is a {mode.value} action but the active game is {live.mode.value}")
        if live.game_over:
            raise GameOverError("game is already over")
        if participant_index is not None and participant_index != live.current_index:
            raise StaleActionError(
                f"participant {participant_index} does not hold the turn (current: {live.current_index})"
            )

        rules = rules_for(mode)
        handler = rules.actions.get(action_name)
        if handler is None:
            raise InvalidActionError(f"unknown {mode.value} action {action_name!r}")

        work = live.snapshot()
        handler(work, **payload)
        if not work.game_over:
            rules.evaluate(work)
        self._commit(work)
        return work

    def _commit(self, game: Game) -> None:
        concluded = game.game_over and not (self._game is not None and self._game.game_over)
        self._game = game
        self._history.record(game)

        if concluded:
            logger.info("game %s over, winner: %s (%s)", game.id, game.winner.name, game.winner.kind.value)
            if self._notifier is not None and game.winner.counts_for_stats:
                self._notifier.record_win(game)

    def undo(self) -> Game | None:
        """
        Roll back the most recent action. Returns None when there is nothing
        to undo.
        """
        if self._game is None or not self._history.can_undo:
            logger.info("undo requested with insufficient history")
            return None

        discarded, restored = self._history.rewind()
        if (
            discarded.game_over
            and not restored.game_over
            and discarded.winner is not None
            and discarded.winner.counts_for_stats
        ):
            logger.info("undoing a concluded game, reversing win for %s", discarded.winner.name)
            if self._notifier is not None:
                self._notifier.revert_win(discarded)

        self._game = restored
        logger.info("game %s rolled back; current participant %d", restored.id, restored.current_index)
        return restored

    def end_game(self) -> Game | None:
        ended = self._game
        if ended is not None:
            logger.info("game %s (%s) ended", ended.id, ended.mode.value)
        self._game = None
        self._history.clear()
        return ended
