"""
Cricket: close 20..15, bull and the two specials (T, D) with three marks each.

Marks beyond the third score while any opponent still has the target open.
Numeric targets score their face value; the specials ask the controller for
the value actually thrown.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field

from scoreboard.engine.errors import InvalidActionError, StaleActionError
from scoreboard.engine.models import (
    MAX_VISIT_SCORE,
    Game,
    GameMode,
    GameOptions,
    LastScored,
    Objective,
    ObjectiveKind,
    ObjectiveStatus,
    PromptKind,
    WinnerKind,
    WinnerRecord,
)
from scoreboard.engine.modes.common import (
    ModeRules,
    current_participant,
    prompt_current,
    require_prompt,
    require_score,
    tie_record,
)
from scoreboard.engine.turns import TurnPolicy, advance_turn

MARKS_TO_CLOSE = 3

# (name, value); value None marks a special target scored by manual entry.
CRICKET_TARGETS: tuple[tuple[str, int | None], ...] = (
    ("B", 25),
    ("T", None),
    ("D", None),
    ("20", 20),
    ("19", 19),
    ("18", 18),
    ("17", 17),
    ("16", 16),
    ("15", 15),
)


@dataclass
class CricketCard:
    marks: dict[str, int] = field(default_factory=lambda: {name: 0 for name, _ in CRICKET_TARGETS})
    darts_this_turn: int = 0

    def has_closed(self, target: str) -> bool:
        return self.marks.get(target, 0) >= MARKS_TO_CLOSE

    def has_closed_all(self) -> bool:
        return all(self.has_closed(name) for name, _ in CRICKET_TARGETS)


@dataclass
class CricketState:
    objectives: list[Objective]

    def find(self, name: str) -> Objective | None:
        for obj in self.objectives:
            if obj.name == name:
                return obj
        return None


def _objectives() -> list[Objective]:
    return [
        Objective(
            id=f"cricket_{name}",
            name=name,
            kind=ObjectiveKind.NUMBER if value is not None else ObjectiveKind.SPECIAL,
            value=value,
        )
        for name, value in CRICKET_TARGETS
    ]


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.score = 0
        p.payload = CricketCard()
    game.payload = CricketState(objectives=_objectives())
    if advance_turn(game, TurnPolicy.SLOT_MAJOR):
        prompt_current(game, PromptKind.TURN_ACTION)


def mark(game: Game, *, objective_name: str) -> None:
    require_prompt(game, PromptKind.TURN_ACTION)
    state: CricketState = game.payload
    objective = state.find(objective_name)
    if objective is None:
        raise InvalidActionError(f"unknown cricket target {objective_name!r}")

    participant = current_participant(game)
    card: CricketCard = participant.payload
    card.marks[objective.name] += 1
    card.darts_this_turn += 1
    game.last_scored = None

    opponent_open = any(
        not p.payload.has_closed(objective.name) for p in game.participants if p.id != participant.id
    )
    if card.marks[objective.name] > MARKS_TO_CLOSE and opponent_open:
        if objective.kind is ObjectiveKind.NUMBER:
            participant.score += objective.value
            game.last_scored = LastScored(participant_id=participant.id, score=objective.value)
        else:
            prompt_current(game, PromptKind.SCORE_ENTRY, objective_name=objective.name)

    if all(p.payload.has_closed(objective.name) for p in game.participants):
        objective.status = ObjectiveStatus.CLOSED


def submit_score(game: Game, *, score: int) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    score = require_score(score, low=0, high=MAX_VISIT_SCORE)
    participant = current_participant(game)
    participant.score += score
    game.last_scored = LastScored(participant_id=participant.id, score=score)
    prompt_current(game, PromptKind.TURN_ACTION)


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    game.last_scored = None
    prompt_current(game, PromptKind.TURN_ACTION)


def end_turn(game: Game, *, participant_id: str) -> None:
    participant = current_participant(game)
    if participant.id != participant_id:
        raise StaleActionError(f"{participant_id} does not hold the turn")
    if game.prompt is not None and game.prompt.kind is PromptKind.SCORE_ENTRY:
        raise InvalidActionError("finish or cancel the score entry first")

    game.last_scored = None
    participant.payload.darts_this_turn = 0
    if evaluate(game):
        return
    if advance_turn(game, TurnPolicy.SLOT_MAJOR):
        current_participant(game).payload.darts_this_turn = 0
        prompt_current(game, PromptKind.TURN_ACTION)


def evaluate(game: Game) -> bool:
    """
    A team wins once it has closed everything and no team has outscored it.
    Two closers sharing that top score end the game as a tie.
    """
    closers = [p for p in game.participants if p.payload.has_closed_all()]
    if not closers:
        return False

    top = max(p.score for p in game.participants)
    leaders = [p for p in closers if p.score >= top]
    if not leaders:
        return False

    if len(leaders) == 1:
        winner = leaders[0]
        game.conclude(WinnerRecord(name=winner.name, kind=WinnerKind.TEAM, id=winner.id, score=winner.score))
    else:
        game.conclude(tie_record(leaders, score=top))
    return True


RULES = ModeRules(
    mode=GameMode.CRICKET,
    initialize=initialize,
    actions={
        "mark": mark,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
        "end_turn": end_turn,
    },
    evaluate=evaluate,
)
