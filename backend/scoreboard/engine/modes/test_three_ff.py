from __future__ import annotations

import random

import pytest

from scoreboard.engine import GameMode, GameOptions, InvalidActionError, PromptKind, ScoreboardEngine, TeamSetup
from scoreboard.engine.models import ObjectiveKind, ObjectiveStatus
from scoreboard.engine.modes.three_ff import HARD_SCORES, STATIC_OBJECTIVES, generate_objectives

MODE = GameMode.THREE_FF


def _start(*names: str, challenges: int = 4) -> ScoreboardEngine:
    engine = ScoreboardEngine(rng=random.Random(3))
    engine.start_game(
        MODE,
        [TeamSetup(id=n.lower(), name=n, players=(n,)) for n in names],
        options=GameOptions(three_ff_random_challenges=challenges),
    )
    return engine


def _met(engine: ScoreboardEngine, score: int) -> None:
    engine.apply(MODE, "objective_action", action="met")
    engine.apply(MODE, "submit_score", score=score)


def _missed(engine: ScoreboardEngine) -> None:
    engine.apply(MODE, "objective_action", action="missed")


def test_objective_list_shape() -> None:
    objectives = generate_objectives(random.Random(3))
    assert len(objectives) == len(STATIC_OBJECTIVES) + 2 + 4
    assert len({o.id for o in objectives}) == len(objectives)
    assert all(o.id.startswith("3ff_obj_") for o in objectives)

    numbers = [o.name for o in objectives if o.kind is ObjectiveKind.NUMBER]
    assert numbers == list(STATIC_OBJECTIVES)
    assert objectives[0].name == "20"
    assert objectives[1].kind is not ObjectiveKind.NUMBER

    assert [o.name for o in objectives if o.kind is ObjectiveKind.SPECIAL] == ["3FF"]
    hard = [o for o in objectives if o.kind is ObjectiveKind.HARD_SCORE]
    assert len(hard) == 1
    assert hard[0].value in HARD_SCORES
    assert len([o for o in objectives if o.kind is ObjectiveKind.RANDOM_CHALLENGE]) == 4


def test_objectives_are_reproducible_for_a_seed() -> None:
    first = [o.name for o in generate_objectives(random.Random(11))]
    second = [o.name for o in generate_objectives(random.Random(11))]
    assert first == second


def test_nine_target_game() -> None:
    objectives = generate_objectives(random.Random(3), random_challenges=0)
    assert len(objectives) == 9


def test_met_asks_for_points() -> None:
    engine = _start("A", "B")
    prompt = engine.game.prompt
    assert prompt.kind is PromptKind.OBJECTIVE_CHECK
    assert prompt.detail["objective_name"] == "20"

    with pytest.raises(InvalidActionError):
        engine.apply(MODE, "submit_score", score=20)

    engine.apply(MODE, "objective_action", action="met")
    assert engine.game.prompt.kind is PromptKind.SCORE_ENTRY
    engine.apply(MODE, "cancel_entry")
    assert engine.game.prompt.kind is PromptKind.OBJECTIVE_CHECK

    _met(engine, 40)
    assert engine.game.participants[0].score == 40
    assert engine.game.current_index == 1


def test_missed_halves_rounding_up_without_closing_mid_round() -> None:
    engine = _start("A", "B", "C")
    _met(engine, 15)
    _missed(engine)
    state = engine.game.payload
    assert state.active_index == 0
    assert state.objectives[0].status is ObjectiveStatus.OPEN
    assert engine.game.participants[1].payload.just_halved

    _missed(engine)  # C closes the round
    state = engine.game.payload
    assert state.objectives[0].status is ObjectiveStatus.CLOSED
    assert state.active_index == 1
    assert engine.game.current_index == 0
    assert engine.game.prompt.detail["objective_id"] == state.objectives[1].id

    _missed(engine)
    a, b, _ = engine.game.participants
    assert a.score == 8
    assert a.payload.just_halved
    assert not b.payload.just_halved


def test_halved_marker_clears_on_the_next_action() -> None:
    engine = _start("A", "B")
    _missed(engine)
    assert engine.game.participants[0].payload.just_halved

    engine.apply(MODE, "objective_action", action="met")
    engine.apply(MODE, "cancel_entry")
    assert not any(p.payload.just_halved for p in engine.game.participants)
    assert engine.game.prompt.kind is PromptKind.OBJECTIVE_CHECK


def test_unknown_objective_action() -> None:
    engine = _start("A")
    with pytest.raises(InvalidActionError):
        engine.apply(MODE, "objective_action", action="maybe")


def test_game_ends_after_the_last_objective() -> None:
    engine = _start("A", "B", challenges=0)
    for _ in range(9):
        _met(engine, 10)
        _missed(engine)
    game = engine.game
    assert game.game_over
    assert game.payload.finished
    assert all(o.status is ObjectiveStatus.CLOSED for o in game.payload.objectives)
    assert game.winner.name == "A"
