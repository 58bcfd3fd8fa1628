from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from scoreboard.engine.models import Game

logger = logging.getLogger(__name__)

STATS_FILENAME = "stats.json"


class WinCounts(BaseModel):
    """Win tallies keyed by team name and by player name."""

    teams: dict[str, int] = Field(default_factory=dict)
    players: dict[str, int] = Field(default_factory=dict)

    def bump(self, category: str, name: str) -> None:
        counts: dict[str, int] = getattr(self, category)
        counts[name] = counts.get(name, 0) + 1

    def drop(self, category: str, name: str) -> None:
        counts: dict[str, int] = getattr(self, category)
        if not counts.get(name):
            return
        counts[name] = max(0, counts[name] - 1)
        if counts[name] == 0:
            del counts[name]


def _winner_names(game: Game) -> list[tuple[str, str]]:
    """(category, name) pairs credited by the game's winner."""
    winner = game.winner
    if winner is None or not winner.counts_for_stats:
        return []
    names = [("teams", winner.name)]
    team = game.participant_by_id(winner.id) if winner.id else None
    if team is not None:
        names.extend(("players", player) for player in team.players if player)
    return names


class WinStats:
    """
    Session and all-time win counters. Receives wins (and their reversal on
    undo) from the engine; only the all-time counts are written to disk.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._path = Path(data_dir) / STATS_FILENAME if data_dir else None
        self.session = WinCounts()
        self.historical = self._load()
        self.revision = 0

    def _load(self) -> WinCounts:
        if self._path is None or not self._path.exists():
            return WinCounts()
        try:
            raw = self._path.read_text(encoding="utf-8")
            return WinCounts.model_validate_json(raw) if raw.strip() else WinCounts()
        except (OSError, ValidationError) as e:
            logger.error("could not read %s, starting with empty stats: %s", self._path, e)
            return WinCounts()

    def _save(self) -> None:
        if self._path is None:
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(self.historical.model_dump_json(indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("could not write %s: %s", self._path, e)

    def _changed(self) -> None:
        self.revision += 1
        self._save()

    def record_win(self, game: Game) -> None:
        names = _winner_names(game)
        if not names:
            return
        for category, name in names:
            self.session.bump(category, name)
            self.historical.bump(category, name)
        logger.info("recorded win for %s", game.winner.name)
        self._changed()

    def revert_win(self, game: Game) -> None:
        names = _winner_names(game)
        if not names:
            return
        for category, name in names:
            self.session.drop(category, name)
            self.historical.drop(category, name)
        logger.info("reverted win for %s", game.winner.name)
        self._changed()

    def reset_session(self) -> None:
        self.session = WinCounts()
        self._changed()

    def reset_all(self) -> None:
        self.session = WinCounts()
        self.historical = WinCounts()
        self._changed()

    def as_dict(self) -> dict:
        return {
            "sessionStats": self.session.model_dump(),
            "historicalStats": self.historical.model_dump(),
        }
