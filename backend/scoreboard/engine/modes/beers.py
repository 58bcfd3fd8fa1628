"""
Beers: every posted score must beat the previous one (higher or lower, chosen
at game start). Failing earns the next letter of B-E-E-R-S; the full word
eliminates the team. Last team standing wins.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field

from scoreboard.engine.models import (
    MAX_VISIT_SCORE,
    BeersRule,
    Game,
    GameMode,
    GameOptions,
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
)
from scoreboard.engine.turns import TurnPolicy, advance_turn

PENALTY_WORD = ("B", "E", "E", "R", "S")


@dataclass
class BeersCard:
    letters: list[str] = field(default_factory=list)
    last_score: int | None = None


@dataclass
class BeersState:
    rule: BeersRule
    score_to_beat: int | None = None


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.payload = BeersCard()
    game.payload = BeersState(rule=options.beers_rule)
    _next_turn(game)


def _active(game: Game) -> list:
    return [p for p in game.participants if not p.is_eliminated]


def _next_turn(game: Game) -> None:
    if len(_active(game)) <= 1:
        # evaluate() ends the game
        game.prompt = None
        return
    if advance_turn(game, TurnPolicy.PARTICIPANT_MAJOR):
        prompt_current(game, PromptKind.TURN_ACTION)


def fails_to_beat(score: int, score_to_beat: int | None, rule: BeersRule) -> bool:
    if score_to_beat is None:
        return False
    if rule is BeersRule.HIGHER:
        return score <= score_to_beat
    return score >= score_to_beat


def open_entry(game: Game) -> None:
    require_prompt(game, PromptKind.TURN_ACTION)
    state: BeersState = game.payload
    prompt_current(game, PromptKind.SCORE_ENTRY, setting_initial_score=state.score_to_beat is None)


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    prompt_current(game, PromptKind.TURN_ACTION)


def submit_score(game: Game, *, score: int) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    score = require_score(score, low=0, high=MAX_VISIT_SCORE)
    state: BeersState = game.payload
    participant = current_participant(game)
    card: BeersCard = participant.payload

    card.last_score = score
    take_letter = fails_to_beat(score, state.score_to_beat, state.rule)
    state.score_to_beat = score

    if not take_letter:
        _next_turn(game)
        return

    letter = PENALTY_WORD[len(card.letters) % len(PENALTY_WORD)]
    card.letters.append(letter)
    participant.score = len(card.letters)
    if len(card.letters) >= len(PENALTY_WORD):
        participant.is_eliminated = True
    prompt_current(game, PromptKind.TAKE_LETTER, letter=letter)


def acknowledge_letter(game: Game) -> None:
    require_prompt(game, PromptKind.TAKE_LETTER)
    _next_turn(game)


def evaluate(game: Game) -> bool:
    active = _active(game)
    if len(active) > 1:
        return False
    if active:
        w = active[0]
        game.conclude(WinnerRecord(name=w.name, kind=WinnerKind.TEAM, id=w.id, score=len(w.payload.letters)))
    else:
        game.conclude(WinnerRecord(name="No Winner", kind=WinnerKind.NONE, score=0))
    return True


RULES = ModeRules(
    mode=GameMode.BEERS,
    initialize=initialize,
    actions={
        "open_entry": open_entry,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
        "acknowledge_letter": acknowledge_letter,
    },
    evaluate=evaluate,
)
