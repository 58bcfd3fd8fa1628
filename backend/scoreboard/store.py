from __future__ import annotations

import random

from scoreboard.config import Config
from scoreboard.engine import ScoreboardEngine
from scoreboard.roster import PlayerRoster
from scoreboard.stats import WinStats


class InMemoryScoreboardStore:
    """
    Holds the single engine instance plus its collaborators (win stats and the
    player roster).
    """

    def __init__(self, config: type = Config, *, rng: random.Random | None = None) -> None:
        self.config = config
        self.stats = WinStats(config.DATA_DIR)
        self.roster = PlayerRoster(config.DATA_DIR)
        self._engine = ScoreboardEngine(
            notifier=self.stats,
            history_limit=config.MAX_HISTORY_LENGTH,
            rng=rng,
        )

    def engine(self) -> ScoreboardEngine:
        return self._engine


_STORE: InMemoryScoreboardStore | None = None


def get_store() -> InMemoryScoreboardStore:
    global _STORE
    if _STORE is None:
        _STORE = InMemoryScoreboardStore()
    return _STORE
