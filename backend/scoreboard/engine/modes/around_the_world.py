"""
Around The World: hit 1..20 in order, then the single bull, then the double bull.

Reported values: 0 = miss, 1-20 = number hit, 25 = single bull, 50 = double bull.
A bull hit keeps the turn; anything else ends it.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field

from scoreboard.engine.errors import InvalidActionError
from scoreboard.engine.models import (
    Game,
    GameMode,
    GameOptions,
    Participant,
    PromptKind,
    WinnerKind,
    WinnerRecord,
)
from scoreboard.engine.modes.common import (
    ModeRules,
    current_participant,
    prompt_current,
    require_prompt,
    tie_record,
)
from scoreboard.engine.turns import TurnPolicy, advance_turn

NUMBERS_MAX = 20
TARGET_SINGLE_BULL = 21
TARGET_DOUBLE_BULL = 22
WON_VIA_BULL_CAP = 23
WON_VIA_DOUBLE_BULL = 24

REPORTED_MISS = 0
REPORTED_SINGLE_BULL = 25
REPORTED_DOUBLE_BULL = 50

MAX_BULL_HITS = 5


@dataclass
class AroundTheWorldCard:
    target: int = 1
    bull_hits: int = 0
    has_hit_bull: bool = False
    is_winner: bool = False
    hits_log: list[str] = field(default_factory=list)


def display_target(target: int) -> str:
    if 1 <= target <= NUMBERS_MAX:
        return str(target)
    if target == TARGET_SINGLE_BULL:
        return "SB"
    if target == TARGET_DOUBLE_BULL:
        return "DB"
    if target in (WON_VIA_BULL_CAP, WON_VIA_DOUBLE_BULL):
        return "WIN!"
    return "N/A"


def display_hit(value: int) -> str:
    if value == REPORTED_MISS:
        return "Miss"
    if value == REPORTED_SINGLE_BULL:
        return "SB"
    if value == REPORTED_DOUBLE_BULL:
        return "DB"
    return str(value)


def _skip(p: Participant) -> bool:
    return p.is_eliminated or p.payload.is_winner


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.payload = AroundTheWorldCard()
    _next_turn(game)


def _prompt_turn(game: Game) -> None:
    target = current_participant(game).payload.target
    prompt_current(game, PromptKind.TURN_ACTION, target=target, target_display=display_target(target))


def _next_turn(game: Game) -> None:
    if advance_turn(game, TurnPolicy.SLOT_MAJOR, skip=_skip):
        _prompt_turn(game)


def open_entry(game: Game) -> None:
    require_prompt(game, PromptKind.TURN_ACTION)
    target = current_participant(game).payload.target
    prompt_current(game, PromptKind.SCORE_ENTRY, target=target, target_display=display_target(target))


def cancel_entry(game: Game) -> None:
    require_prompt(game, PromptKind.SCORE_ENTRY)
    _prompt_turn(game)


def _apply_bull(card: AroundTheWorldCard, value: int) -> str:
    card.has_hit_bull = True
    card.bull_hits += 1

    if card.bull_hits >= MAX_BULL_HITS:
        card.is_winner = True
        card.target = WON_VIA_BULL_CAP
        return f"Hit Bull, reaching {card.bull_hits} bulls - Player Wins!"
    if value == REPORTED_DOUBLE_BULL and card.target >= TARGET_SINGLE_BULL:
        card.is_winner = True
        card.target = WON_VIA_DOUBLE_BULL
        return "Hit DB while qualified - Player Wins!"
    if card.target == TARGET_SINGLE_BULL:
        card.target = TARGET_DOUBLE_BULL
    return f"Hit {display_hit(value)}. Next: {display_target(card.target)}. (Bulls: {card.bull_hits})"


def _apply_number(card: AroundTheWorldCard, value: int) -> str:
    old = card.target
    if card.target <= NUMBERS_MAX and value >= card.target:
        card.target += 1
        if card.target > NUMBERS_MAX:
            card.target = TARGET_DOUBLE_BULL if card.has_hit_bull else TARGET_SINGLE_BULL
        return f"Hit {value}. Next: {display_target(card.target)}."
    return f"Hit {value} (Target: {display_target(old)}). No advance."


def report_hit(game: Game, *, reported_value: int) -> None:
    if isinstance(reported_value, bool) or not isinstance(reported_value, int):
        raise InvalidActionError(f"unsupported reported value {reported_value!r}")
    if reported_value == REPORTED_MISS:
        require_prompt(game, PromptKind.SCORE_ENTRY, PromptKind.TURN_ACTION)
    else:
        require_prompt(game, PromptKind.SCORE_ENTRY)

    is_bull = reported_value in (REPORTED_SINGLE_BULL, REPORTED_DOUBLE_BULL)
    is_number = 1 <= reported_value <= NUMBERS_MAX
    if not (is_bull or is_number or reported_value == REPORTED_MISS):
        raise InvalidActionError(f"unsupported reported value {reported_value!r}")

    card: AroundTheWorldCard = current_participant(game).payload
    if is_bull:
        entry = _apply_bull(card, reported_value)
    elif is_number:
        entry = _apply_number(card, reported_value)
    else:
        entry = f"Missed (Target: {display_target(card.target)})."
    card.hits_log.append(entry)

    if card.is_winner:
        # evaluate() records the win
        return
    if is_bull:
        _prompt_turn(game)
    else:
        _next_turn(game)


def evaluate(game: Game) -> bool:
    winners = [p for p in game.participants if p.payload.is_winner]
    if not winners:
        return False
    if len(winners) == 1:
        w = winners[0]
        game.conclude(
            WinnerRecord(name=w.name, kind=WinnerKind.TEAM, id=w.id, score=display_target(w.payload.target))
        )
    else:
        game.conclude(tie_record(winners, score="WIN!"))
    return True


RULES = ModeRules(
    mode=GameMode.AROUND_THE_WORLD,
    initialize=initialize,
    actions={
        "open_entry": open_entry,
        "report_hit": report_hit,
        "cancel_entry": cancel_entry,
    },
    evaluate=evaluate,
)
