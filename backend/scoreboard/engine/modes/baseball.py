"""
Baseball: each team posts one score per inning; highest total after the last
inning wins.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from scoreboard.engine.models import MAX_VISIT_SCORE, Game, GameMode, GameOptions, PromptKind
from scoreboard.engine.modes.common import (
    ModeRules,
    current_participant,
    prompt_current,
    rank_winner,
    require_prompt,
    require_score,
)


@dataclass
class BaseballCard:
    innings: list[int | None]

    @property
    def total(self) -> int:
        return sum(s for s in self.innings if s is not None)


@dataclass
class BaseballState:
    num_innings: int
    current_inning: int = 1

    @property
    def finished(self) -> bool:
        return self.current_inning > self.num_innings


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.score = 0
        p.payload = BaseballCard(innings=[None] * options.baseball_innings)
    game.payload = BaseballState(num_innings=options.baseball_innings)
    game.current_index = -1
    _next_turn(game)


def _next_turn(game: Game) -> None:
    state: BaseballState = game.payload
    nxt = game.current_index + 1
    if nxt >= len(game.participants):
        state.current_inning += 1
        nxt = 0
        if state.finished:
            # evaluate() ends the game
            game.prompt = None
            return
    game.current_index = nxt
    game.current_slot = 0
    prompt_current(game, PromptKind.TURN_ACTION, inning=state.current_inning)


def open_entry(game: Game) -> None:
    require_prompt(game, PromptKind.TURN_ACTION)
    state: BaseballState = game.payload
    prompt_current(game, PromptKind.SCORE_ENTRY, inning=state.current_inning)


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    state: BaseballState = game.payload
    prompt_current(game, PromptKind.TURN_ACTION, inning=state.current_inning)


def submit_score(game: Game, *, score: int) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    score = require_score(score, low=0, high=MAX_VISIT_SCORE)
    state: BaseballState = game.payload
    participant = current_participant(game)
    card: BaseballCard = participant.payload

    card.innings[state.current_inning - 1] = score
    participant.score = card.total
    _next_turn(game)


def evaluate(game: Game) -> bool:
    state: BaseballState = game.payload
    if not state.finished:
        return False
    game.conclude(rank_winner(game.participants))
    return True


RULES = ModeRules(
    mode=GameMode.BASEBALL,
    initialize=initialize,
    actions={
        "open_entry": open_entry,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
    },
    evaluate=evaluate,
)
