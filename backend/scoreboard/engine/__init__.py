from scoreboard.engine.engine import ScoreboardEngine, StatNotifier
from scoreboard.engine.errors import (
    GameOverError,
    GameStartError,
    InvalidActionError,
    NoActiveGameError,
    ScoreboardError,
    StaleActionError,
)
from scoreboard.engine.models import (
    BeersRule,
    Game,
    GameMode,
    GameOptions,
    Participant,
    PromptKind,
    TeamSetup,
    WinnerKind,
    WinnerRecord,
)

__all__ = [
    "BeersRule",
    "Game",
    "GameMode",
    "GameOptions",
    "GameOverError",
    "GameStartError",
    "InvalidActionError",
    "NoActiveGameError",
    "Participant",
    "PromptKind",
    "ScoreboardEngine",
    "ScoreboardError",
    "StaleActionError",
    "StatNotifier",
    "TeamSetup",
    "WinnerKind",
    "WinnerRecord",
]
