"""
501 countdown for teams. The controller posts one total per turn (0-180).

- Double-in: with the rule active, nothing is deducted until a team posts its
  first non-zero total (which the controller only reports after a double).
- Bust: going below zero, leaving exactly 1, or (double-out) leaving less
  than 2 without finishing reverts the team to its score at turn start.
  The same team keeps the prompt until the bust is acknowledged.
- Reaching exactly 0 wins.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from scoreboard.engine.errors import InvalidActionError
from scoreboard.engine.models import (
    MAX_VISIT_SCORE,
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

logger = logging.getLogger(__name__)

TURN_ACTIONS = ("score_counts", "no_score", "bust_acknowledged")


@dataclass
class CountdownCard:
    turn_start_score: int
    is_doubled_in: bool = False
    darts_this_turn: int = 0
    last_turn_score: int = 0


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.score = options.start_score
        p.payload = CountdownCard(turn_start_score=options.start_score)
    _next_turn(game)


def _next_turn(game: Game) -> None:
    finished = game.current_participant
    if finished is not None:
        finished.payload.darts_this_turn = 0
    if not advance_turn(game, TurnPolicy.SLOT_MAJOR):
        return
    nxt = current_participant(game)
    nxt.payload.turn_start_score = nxt.score
    game.message = None
    prompt_current(game, PromptKind.TURN_ACTION)


def is_bust(remaining: int, *, double_out: bool) -> bool:
    if remaining < 0 or remaining == 1:
        return True
    return double_out and remaining < 2 and remaining != 0


def turn_action(game: Game, *, action: str) -> None:
    prompt = require_prompt(game, PromptKind.TURN_ACTION)
    if action not in TURN_ACTIONS:
        raise InvalidActionError(f"unknown turn action {action!r}")
    if prompt.detail.get("bust") and action != "bust_acknowledged":
        raise InvalidActionError("acknowledge the bust first")
    participant = current_participant(game)

    if action == "score_counts":
        game.message = None
        prompt_current(game, PromptKind.SCORE_ENTRY)
    elif action == "no_score":
        participant.payload.darts_this_turn = 3
        participant.payload.last_turn_score = 0
        _next_turn(game)
    else:
        _next_turn(game)


def submit_score(game: Game, *, score: int) -> None:
    prompt = require_prompt(game, PromptKind.SCORE_ENTRY, PromptKind.TURN_ACTION)
    if prompt.detail.get("bust"):
        raise InvalidActionError("acknowledge the bust first")
    score = require_score(score, low=0, high=MAX_VISIT_SCORE)
    options = game.options
    participant = current_participant(game)
    card: CountdownCard = participant.payload

    if options.double_in and not card.is_doubled_in and score > 0:
        card.is_doubled_in = True
    if card.is_doubled_in or not options.double_in:
        participant.score -= score
    card.darts_this_turn += 3
    card.last_turn_score = score

    if participant.score == 0:
        # evaluate() records the win
        return

    if is_bust(participant.score, double_out=options.double_out):
        participant.score = card.turn_start_score
        game.message = f"BUST! {participant.name} reverts to {participant.score}."
        logger.info("bust for %s, reverted to %d", participant.name, participant.score)
        prompt_current(game, PromptKind.TURN_ACTION, bust=True)
        return

    _next_turn(game)


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    game.message = None
    prompt_current(game, PromptKind.TURN_ACTION)


def evaluate(game: Game) -> bool:
    for p in game.participants:
        if p.score == 0:
            game.conclude(WinnerRecord(name=p.name, kind=WinnerKind.TEAM, id=p.id, score=0))
            return True
    return False


RULES = ModeRules(
    mode=GameMode.FIVE_ZERO_ONE,
    initialize=initialize,
    actions={
        "turn_action": turn_action,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
    },
    evaluate=evaluate,
)
