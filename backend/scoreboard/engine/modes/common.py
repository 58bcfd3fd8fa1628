from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from scoreboard.engine.errors import InvalidActionError, StaleActionError
from scoreboard.engine.models import (
    Game,
    GameMode,
    GameOptions,
    Participant,
    Prompt,
    PromptKind,
    WinnerKind,
    WinnerRecord,
)

Initializer = Callable[[Game, GameOptions, random.Random], None]
Handler = Callable[..., None]
Evaluator = Callable[[Game], bool]


@dataclass(frozen=True)
class ModeRules:
    """
    Everything the engine needs to run one game mode.

    - initialize: builds per-team payloads, the game payload and the first prompt
    - actions: action name -> handler(game, **payload), mutating `game` in place
    - evaluate: decides completion; concludes the game and returns True when over
    """

    mode: GameMode
    initialize: Initializer
    actions: Mapping[str, Handler] = field(default_factory=dict)
    evaluate: Evaluator = lambda game: False


def require_prompt(game: Game, *kinds: PromptKind) -> Prompt:
    prompt = game.prompt
    if prompt is None or prompt.kind not in kinds:
        wanted = " or ".join(k.value for k in kinds)
        raise InvalidActionError(f"no {wanted} prompt is open")
    if prompt.participant_index != game.current_index:
        raise StaleActionError("prompt does not belong to the current participant")
    return prompt


def require_score(score: Any, *, low: int, high: int) -> int:
    if isinstance(score, bool) or not isinstance(score, int):
        raise InvalidActionError("score must be a whole number")
    if score < low or score > high:
        raise InvalidActionError(f"score must be between {low} and {high}")
    return score


def current_participant(game: Game) -> Participant:
    participant = game.current_participant
    if participant is None:
        raise InvalidActionError("no participant holds the turn")
    return participant


def prompt_current(game: Game, kind: PromptKind, **detail: Any) -> None:
    game.prompt = Prompt(
        kind=kind,
        participant_index=game.current_index,
        player_slot=game.current_slot,
        detail=detail,
    )


def rank_winner(
    participants: list[Participant],
    *,
    key: Callable[[Participant], int] = lambda p: p.score,
    lowest: bool = False,
) -> WinnerRecord:
    """
    Best participant by `key`; several sharing the best value produce a tie.
    """
    if not participants:
        return WinnerRecord(name="No Winner", kind=WinnerKind.NONE, score=0)

    values = [key(p) for p in participants]
    best = min(values) if lowest else max(values)
    leaders = [p for p, v in zip(participants, values) if v == best]

    if len(leaders) == 1:
        return WinnerRecord(name=leaders[0].name, kind=WinnerKind.TEAM, id=leaders[0].id, score=best)
    return tie_record(leaders, score=best)


def tie_record(leaders: list[Participant], *, score: int | str | None) -> WinnerRecord:
    names = " & ".join(p.name for p in leaders)
    return WinnerRecord(name=f"Tie ({names})", kind=WinnerKind.TIE, score=score)
