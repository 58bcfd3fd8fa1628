"""
Killer: no turn order. Actions are keyed by the acting participant's id.

Every team first claims a unique number (1-20). Once all numbers are taken,
any team holding one may become a killer. Killers (or the controller device
acting on their behalf) remove lives; a team at zero lives is eliminated.
"""
from __future__ import annotations

import random
from dataclasses import dataclass

from scoreboard.engine.errors import InvalidActionError
from scoreboard.engine.models import Game, GameMode, GameOptions, Participant, WinnerKind, WinnerRecord
from scoreboard.engine.modes.common import ModeRules

LIVES_START = 3
NUMBERS = tuple(range(1, 21))
CONTROLLER_DEVICE_ACTION_ID = "CONTROLLER_DEVICE_ACTION"


@dataclass
class KillerCard:
    lives: int = LIVES_START
    number: int | None = None
    is_killer: bool = False


@dataclass
class KillerState:
    lives_start: int = LIVES_START
    numbers: tuple[int, ...] = NUMBERS


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.payload = KillerCard()
    game.payload = KillerState()
    game.current_index = -1
    game.prompt = None


def _find(game: Game, participant_id: str, what: str = "Player") -> Participant:
    participant = game.participant_by_id(participant_id)
    if participant is None:
        raise InvalidActionError(f"{what} not found.")
    return participant


def choose_number(game: Game, *, player_id: str, chosen_number: int) -> None:
    player = _find(game, player_id)
    card: KillerCard = player.payload
    if card.number is not None:
        raise InvalidActionError(f"You have already chosen number {card.number}.")
    if any(p.payload.number == chosen_number for p in game.participants):
        raise InvalidActionError(f"Number {chosen_number} is already taken.")
    if chosen_number not in NUMBERS:
        raise InvalidActionError(f"Invalid number {chosen_number}. Please choose from 1-20.")
    card.number = chosen_number


def become_killer(game: Game, *, player_id: str) -> None:
    player = _find(game, player_id)
    card: KillerCard = player.payload
    if card.number is None:
        raise InvalidActionError("You must choose a number first.")
    if card.is_killer:
        raise InvalidActionError(f"{player.name} is already a Killer.")
    if player.is_eliminated:
        raise InvalidActionError("Eliminated players cannot become killers.")
    if any(p.payload.number is None for p in game.participants):
        raise InvalidActionError("All players must choose a number before anyone can become a Killer.")
    card.is_killer = True


def _authorize(game: Game, from_player_id: str, target: Participant) -> None:
    if from_player_id == CONTROLLER_DEVICE_ACTION_ID:
        if not any(p.payload.is_killer and not p.is_eliminated for p in game.participants):
            raise InvalidActionError("Action requires an active killer in the game.")
        return

    attacker = _find(game, from_player_id, "Attacker player")
    if not attacker.payload.is_killer:
        raise InvalidActionError("Only Killers can remove lives.")
    if attacker.is_eliminated:
        raise InvalidActionError("Eliminated players cannot act.")
    if attacker.id == target.id:
        raise InvalidActionError("You cannot target yourself to remove a life.")


def remove_life(game: Game, *, from_player_id: str, target_player_id: str) -> None:
    target = _find(game, target_player_id, "Target player")
    if target.is_eliminated:
        raise InvalidActionError(f"{target.name} is already eliminated.")
    _authorize(game, from_player_id, target)

    card: KillerCard = target.payload
    card.lives -= 1
    if card.lives <= 0:
        target.is_eliminated = True
        card.is_killer = False


def evaluate(game: Game) -> bool:
    alive = [p for p in game.participants if not p.is_eliminated]
    if len(alive) == 1:
        w = alive[0]
        game.conclude(WinnerRecord(name=w.name, kind=WinnerKind.TEAM, id=w.id, score=w.payload.lives))
        return True
    if not alive:
        game.conclude(WinnerRecord(name="Draw - All players eliminated", kind=WinnerKind.TIE))
        return True
    return False


RULES = ModeRules(
    mode=GameMode.KILLER,
    initialize=initialize,
    actions={
        "choose_number": choose_number,
        "become_killer": become_killer,
        "remove_life": remove_life,
    },
    evaluate=evaluate,
)
