from __future__ import annotations

from collections import deque

from scoreboard.engine.models import Game


MAX_HISTORY_LENGTH = 20


class History:
    """
    Bounded sequence of committed game snapshots, oldest evicted first.

    The tail is always a copy of the live game, so undo discards the tail and
    restores the entry before it (the state prior to the most recent action).
    """

    def __init__(self, *, limit: int = MAX_HISTORY_LENGTH) -> None:
        if limit < 2:
            raise ValueError("history limit must be >= 2")
        self._entries: deque[Game] = deque(maxlen=limit)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def limit(self) -> int:
        return self._entries.maxlen or MAX_HISTORY_LENGTH

    @property
    def can_undo(self) -> bool:
        return len(self._entries) >= 2

    def clear(self) -> None:
        self._entries.clear()

    def record(self, game: Game) -> None:
        self._entries.append(game.snapshot())

    def rewind(self) -> tuple[Game, Game]:
        """
        Drop the most recent snapshot. Returns (discarded, restored) where
        `restored` is a fresh copy the caller may mutate.
        """
        if not self.can_undo:
            raise RuntimeError("nothing to undo")
        discarded = self._entries.pop()
        return discarded, self._entries[-1].snapshot()
