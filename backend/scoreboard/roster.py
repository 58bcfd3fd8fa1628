from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

logger = logging.getLogger(__name__)

ROSTER_FILENAME = "persistent_players.json"


class RosterPlayer(BaseModel):
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)


_ROSTER = TypeAdapter(list[RosterPlayer])


class PlayerRoster:
    """
    The saved list of known players controllers pick teams from.
    """

    def __init__(self, data_dir: str | Path | None = None) -> None:
        self._path = Path(data_dir) / ROSTER_FILENAME if data_dir else None
        self._players = self._load()

    def _load(self) -> list[RosterPlayer]:
        if self._path is None or not self._path.exists():
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
            return _ROSTER.validate_json(raw) if raw.strip() else []
        except (OSError, ValidationError) as e:
            logger.error("could not read %s, starting with an empty roster: %s", self._path, e)
            return []

    def players(self) -> list[RosterPlayer]:
        return list(self._players)

    def replace(self, players: list[RosterPlayer]) -> None:
        self._players = list(players)
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(_ROSTER.dump_json(self._players, indent=2))
        logger.info("saved %d players to %s", len(self._players), self._path)
