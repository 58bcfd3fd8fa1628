"""
3 Friendly Flights: one objective is active at a time and every player gets one
turn at it. Met -> enter the points scored. Missed -> the team's score is
halved (rounding up). When the turn comes back round to the player who opened
the objective, it closes and the next one activates.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field

from scoreboard.engine.errors import InvalidActionError
from scoreboard.engine.models import (
    MAX_VISIT_SCORE,
    Game,
    GameMode,
    GameOptions,
    Objective,
    ObjectiveKind,
    ObjectiveStatus,
    PromptKind,
)
from scoreboard.engine.modes.common import (
    ModeRules,
    current_participant,
    prompt_current,
    rank_winner,
    require_prompt,
    require_score,
)
from scoreboard.engine.turns import TurnPolicy, advance_turn

STATIC_OBJECTIVES = ("20", "19", "18", "17", "16", "15", "B")
SPECIAL_OBJECTIVE = "3FF"
HARD_SCORES = (61, 65, 69)

RANDOM_CHALLENGES: dict[str, str] = {
    "3C#": "Hit 3 Consecutive Numbers in one turn (Must call up or down).",
    "D": "Hit any Double.",
    "EOE": "Hit Even, Odd, Even numbers in sequence.",
    "OEO": "Hit Odd, Even, Odd numbers in sequence.",
    "ASC": "Hit all the same colour.",
    "3DC": "Hit 3 different Doubles or Trebles in one turn (e.g., D20, T10, D5).",
    "Holes": "Hit a hole in outside ring of numbers on the dartboard.",
    "T": "Hit any Triple.",
    "AS#": "Score the same number with all darts as your first dart thrown.",
    "B": "Hit a Bullseye (either single or double). Enter 25 or 50.",
    "Nines": "Achieve a score that ends in the number 9. Enter your total score for the turn.",
}

OBJECTIVE_ACTIONS = ("met", "missed")


@dataclass
class ThreeFFCard:
    just_halved: bool = False


@dataclass
class ThreeFFState:
    objectives: list[Objective] = field(default_factory=list)
    active_index: int = 0
    round_start_index: int = 0
    round_start_slot: int = 0

    @property
    def active(self) -> Objective | None:
        if 0 <= self.active_index < len(self.objectives):
            return self.objectives[self.active_index]
        return None

    @property
    def finished(self) -> bool:
        return self.active_index >= len(self.objectives)


def generate_objectives(rng: random.Random, *, random_challenges: int = 4) -> list[Objective]:
    """
    Static numbers in order, interleaved with a shuffled pool holding one "3FF",
    one hard score and `random_challenges` challenges drawn from the pool.
    """
    counter = 0

    def next_id() -> str:
        nonlocal counter
        objective_id = f"3ff_obj_{counter}"
        counter += 1
        return objective_id

    static = [
        Objective(
            id=next_id(),
            name=name,
            kind=ObjectiveKind.NUMBER,
            value=25 if name == "B" else int(name),
            description=f"Hit a {'Bullseye' if name == 'B' else name}.",
        )
        for name in STATIC_OBJECTIVES
    ]

    hard = rng.choice(HARD_SCORES)
    others = [
        Objective(
            id=next_id(),
            name=SPECIAL_OBJECTIVE,
            kind=ObjectiveKind.SPECIAL,
            description="Nice Grouping! (Flights must be touching, add up all darts with a score)",
        ),
        Objective(
            id=next_id(),
            name=str(hard),
            kind=ObjectiveKind.HARD_SCORE,
            value=hard,
            description=f"Achieve exactly {hard} points.",
        ),
    ]
    picks = rng.sample(list(RANDOM_CHALLENGES), min(random_challenges, len(RANDOM_CHALLENGES)))
    others.extend(
        Objective(id=next_id(), name=name, kind=ObjectiveKind.RANDOM_CHALLENGE, description=RANDOM_CHALLENGES[name])
        for name in picks
    )
    rng.shuffle(others)

    ordered: list[Objective] = []
    for i, obj in enumerate(static):
        ordered.append(obj)
        if i < len(others):
            ordered.append(others[i])
    ordered.extend(others[len(static):])
    return ordered


def _objective_detail(obj: Objective) -> dict:
    return {
        "objective_id": obj.id,
        "objective_name": obj.name,
        "objective_kind": obj.kind.value,
        "objective_description": obj.description,
    }


def _prompt_objective(game: Game) -> None:
    state: ThreeFFState = game.payload
    prompt_current(game, PromptKind.OBJECTIVE_CHECK, **_objective_detail(state.active))


def initialize(game: Game, options: GameOptions, rng: random.Random) -> None:
    for p in game.participants:
        p.score = 0
        p.payload = ThreeFFCard()
    game.payload = ThreeFFState(
        objectives=generate_objectives(rng, random_challenges=options.three_ff_random_challenges)
    )
    game.current_index = -1
    game.current_slot = 0
    if not advance_turn(game, TurnPolicy.SLOT_MAJOR):
        return
    game.payload.round_start_index = game.current_index
    game.payload.round_start_slot = game.current_slot
    _prompt_objective(game)


def _clear_halved(game: Game) -> None:
    for p in game.participants:
        p.payload.just_halved = False


def _next_turn(game: Game) -> None:
    state: ThreeFFState = game.payload
    if not advance_turn(game, TurnPolicy.SLOT_MAJOR):
        return

    if (game.current_index, game.current_slot) == (state.round_start_index, state.round_start_slot):
        state.active.status = ObjectiveStatus.CLOSED
        state.active_index += 1
        if state.finished:
            # evaluate() ends the game
            game.prompt = None
            return
        state.round_start_index = game.current_index
        state.round_start_slot = game.current_slot

    _prompt_objective(game)


def _require_active_objective(game: Game, prompt_detail: dict) -> Objective:
    state: ThreeFFState = game.payload
    active = state.active
    if active is None or prompt_detail.get("objective_id") != active.id:
        raise InvalidActionError("prompt does not match the active objective")
    return active


def objective_action(game: Game, *, action: str) -> None:
    prompt = require_prompt(game, PromptKind.OBJECTIVE_CHECK)
    if action not in OBJECTIVE_ACTIONS:
        raise InvalidActionError(f"unknown objective action {action!r}")
    objective = _require_active_objective(game, prompt.detail)
    _clear_halved(game)

    if action == "met":
        prompt_current(game, PromptKind.SCORE_ENTRY, **_objective_detail(objective))
        return

    participant = current_participant(game)
    participant.score = -(-participant.score // 2)
    participant.payload.just_halved = True
    _next_turn(game)


def submit_score(game: Game, *, score: int) -> None:
    prompt = require_prompt(game, PromptKind.SCORE_ENTRY)
    score = require_score(score, low=0, high=MAX_VISIT_SCORE)
    _require_active_objective(game, prompt.detail)
    _clear_halved(game)
    current_participant(game).score += score
    _next_turn(game)


def cancel_entry(game: Game) -> None:
    prompt = require_prompt(game, PromptKind.SCORE_ENTRY)
    _require_active_objective(game, prompt.detail)
    _clear_halved(game)
    _prompt_objective(game)


def evaluate(game: Game) -> bool:
    state: ThreeFFState = game.payload
    if not state.finished:
        return False
    game.conclude(rank_winner(game.participants))
    return True


RULES = ModeRules(
    mode=GameMode.THREE_FF,
    initialize=initialize,
    actions={
        "objective_action": objective_action,
        "submit_score": submit_score,
        "cancel_entry": cancel_entry,
    },
    evaluate=evaluate,
)
