"""
Golf: one score (1-6) per team per hole, lowest total after the last hole wins.

The team with the best score on the previous hole has the honors and throws
first. Tied best scores leave the honors with the current holder when they
are among the tied teams, otherwise with the first of them.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from scoreboard.engine.models import Game, GameMode, GameOptions, PromptKind
from scoreboard.engine.modes.common import (
    ModeRules,
    current_participant,
    prompt_current,
    rank_winner,
    require_prompt,
    require_score,
)

logger = logging.getLogger(__name__)

MIN_STROKES = 1
MAX_STROKES = 6


@dataclass
class GolfCard:
    scores: list[int | None]

    @property
    def total(self) -> int:
        return sum(s for s in self.scores if s is not None)


@dataclass
class GolfState:
    num_holes: int
    current_hole: int = 1
    honors_index: int = 0
    turn_order: list[int] = field(default_factory=list)
    turn_position: int = 0

    @property
    def finished(self) -> bool:
        return self.current_hole > self.num_holes


def honors_for_hole(game: Game, state: GolfState) -> int:
    if state.current_hole <= 1:
        return 0

    prev = state.current_hole - 2
    best: int | None = None
    candidates: list[int] = []
    for index, p in enumerate(game.participants):
        score = p.payload.scores[prev]
        if score is None:
            continue
        if best is None or score < best:
            best = score
            candidates = [index]
        elif score == best:
            candidates.append(index)

    if not candidates:
        return state.honors_index
    if len(candidates) > 1 and state.honors_index in candidates:
        return state.honors_index
    return candidates[0]


def _set_turn_order(game: Game, state: GolfState) -> None:
    state.honors_index = honors_for_hole(game, state)
    state.turn_order = [state.honors_index] + [
        i for i in range(len(game.participants)) if i != state.honors_index
    ]
    state.turn_position = 0
    logger.info(
        "hole %d: honors to %s",
        state.current_hole,
        game.participants[state.honors_index].name,
    )


def _prompt_turn(game: Game) -> None:
    state: GolfState = game.payload
    game.current_index = state.turn_order[state.turn_position]
    game.current_slot = 0
    prompt_current(game, PromptKind.TURN_ACTION, hole=state.current_hole)


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.score = 0
        p.payload = GolfCard(scores=[None] * options.golf_holes)
    state = GolfState(num_holes=options.golf_holes)
    game.payload = state
    _set_turn_order(game, state)
    _prompt_turn(game)


def open_entry(game: Game) -> None:
    require_prompt(game, PromptKind.TURN_ACTION)
    state: GolfState = game.payload
    prompt_current(game, PromptKind.SCORE_ENTRY, hole=state.current_hole)


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    _prompt_turn(game)


def submit_score(game: Game, *, score: int) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    score = require_score(score, low=MIN_STROKES, high=MAX_STROKES)
    state: GolfState = game.payload
    participant = current_participant(game)
    card: GolfCard = participant.payload

    card.scores[state.current_hole - 1] = score
    participant.score = card.total

    state.turn_position += 1
    if state.turn_position >= len(state.turn_order):
        state.current_hole += 1
        if state.finished:
            # evaluate() ends the game
            game.prompt = None
            return
        _set_turn_order(game, state)
    _prompt_turn(game)


def evaluate(game: Game) -> bool:
    state: GolfState = game.payload
    if not state.finished:
        return False
    game.conclude(rank_winner(game.participants, lowest=True))
    return True


RULES = ModeRules(
    mode=GameMode.GOLF,
    initialize=initialize,
    actions={
        "open_entry": open_entry,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
    },
    evaluate=evaluate,
)
