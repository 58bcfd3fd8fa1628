from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Sequence

from scoreboard.engine.models import Game, Participant, WinnerKind, WinnerRecord

logger = logging.getLogger(__name__)

SkipPredicate = Callable[[Participant], bool]


class TurnPolicy(str, Enum):
    # Slot 0 of every team throws before slot 1 of any team.
    SLOT_MAJOR = "slot_major"
    # A team's players all throw before the next team starts.
    PARTICIPANT_MAJOR = "participant_major"


@dataclass(frozen=True)
class TurnAdvance:
    """
    Outcome of a bounded turn search. Falsy when the search was exhausted.
    """

    found: bool
    participant_index: int = -1
    player_slot: int = 0
    attempts: int = 0

    def __bool__(self) -> bool:
        return self.found


def _is_eliminated(p: Participant) -> bool:
    return p.is_eliminated


def max_slots(participants: Sequence[Participant]) -> int:
    return max([1, *(len(p.players) for p in participants)])


def slot_major_bound(participants: Sequence[Participant]) -> int:
    return len(participants) * max_slots(participants) + 5


def participant_major_bound(participants: Sequence[Participant]) -> int:
    return len(participants) * (max_slots(participants) + 1) + 5


def next_slot_major(
    participants: Sequence[Participant],
    index: int,
    slot: int,
    *,
    skip: SkipPredicate = _is_eliminated,
) -> TurnAdvance:
    n = len(participants)
    if n == 0:
        return TurnAdvance(False)
    slots = max_slots(participants)
    bound = slot_major_bound(participants)

    for attempt in range(1, bound + 1):
        index += 1
        if index >= n:
            index = 0
            slot += 1
        if slot >= slots:
            slot = 0

        candidate = participants[index]
        if slot < len(candidate.players) and not skip(candidate):
            return TurnAdvance(True, index, slot, attempt)

    return TurnAdvance(False, attempts=bound)


def next_participant_major(
    participants: Sequence[Participant],
    index: int,
    slot: int,
    *,
    skip: SkipPredicate = _is_eliminated,
) -> TurnAdvance:
    n = len(participants)
    if n == 0:
        return TurnAdvance(False)
    bound = participant_major_bound(participants)

    for attempt in range(1, bound + 1):
        current = participants[index] if 0 <= index < n else None
        if current is not None and len(current.players) > slot + 1:
            slot += 1
        else:
            index = (index + 1) % n
            slot = 0

        candidate = participants[index]
        if slot < len(candidate.players) and not skip(candidate):
            return TurnAdvance(True, index, slot, attempt)

    return TurnAdvance(False, attempts=bound)


def advance_turn(
    game: Game,
    policy: TurnPolicy,
    *,
    skip: SkipPredicate = _is_eliminated,
) -> TurnAdvance:
    """
    Move the game's turn cursor to the next eligible (participant, slot).

    On exhaustion the game is concluded with an error-kind winner and the
    falsy result is returned; callers only need to stop.
    """
    if game.game_over or not game.participants:
        return TurnAdvance(False)

    search = next_slot_major if policy is TurnPolicy.SLOT_MAJOR else next_participant_major
    result = search(game.participants, game.current_index, game.current_slot, skip=skip)
    if not result:
        logger.error(
            "turn search exhausted after %d attempts (mode=%s); game is stuck",
            result.attempts,
            game.mode.value,
        )
        declare_stuck(game, "Error: could not determine next player.")
        return result

    game.current_index = result.participant_index
    game.current_slot = result.player_slot
    logger.debug(
        "turn advanced (mode=%s) to participant %d slot %d",
        game.mode.value,
        game.current_index,
        game.current_slot,
    )
    return result


def declare_stuck(game: Game, message: str) -> None:
    game.conclude(WinnerRecord(name="Error - No Next Turn", kind=WinnerKind.ERROR, score=0))
    game.message = message
