from __future__ import annotations


class ScoreboardError(Exception):
    """Base class for every error the engine raises."""


class NoActiveGameError(ScoreboardError, RuntimeError):
    pass


class GameOverError(ScoreboardError, RuntimeError):
    pass


class GameStartError(ScoreboardError, ValueError):
    pass


class InvalidActionError(ScoreboardError, ValueError):
    """
    The action cannot be applied in the current state (bad value, wrong prompt,
    unknown target). The live game is left untouched.
    """


class StaleActionError(ScoreboardError, PermissionError):
    """The action names a participant that does not hold the current turn."""
