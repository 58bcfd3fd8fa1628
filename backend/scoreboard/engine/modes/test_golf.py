from __future__ import annotations

import random

import pytest

from scoreboard.engine import GameMode, GameOptions, InvalidActionError, ScoreboardEngine, TeamSetup, WinnerKind

MODE = GameMode.GOLF


def _start(*names: str, holes: int = 2) -> ScoreboardEngine:
    engine = ScoreboardEngine(rng=random.Random(1))
    engine.start_game(
        MODE,
        [TeamSetup(id=n.lower(), name=n, players=(n,)) for n in names],
        options=GameOptions(golf_holes=holes),
    )
    return engine


def _play_hole(engine: ScoreboardEngine, strokes: dict[str, int]) -> None:
    for _ in strokes:
        name = engine.game.current_participant.name
        engine.apply(MODE, "open_entry")
        engine.apply(MODE, "submit_score", score=strokes[name])


def test_best_hole_takes_the_honors() -> None:
    engine = _start("A", "B")
    assert engine.game.current_index == 0
    assert engine.game.prompt.detail["hole"] == 1

    _play_hole(engine, {"A": 4, "B": 3})
    assert engine.game.payload.current_hole == 2
    assert engine.game.current_index == 1
    assert engine.game.payload.turn_order == [1, 0]


def test_tied_best_keeps_the_honors_with_the_holder() -> None:
    engine = _start("A", "B", "C", holes=3)
    _play_hole(engine, {"A": 3, "B": 3, "C": 5})
    assert engine.game.payload.honors_index == 0

    _play_hole(engine, {"A": 4, "B": 2, "C": 2})
    assert engine.game.payload.honors_index == 1
    assert engine.game.payload.turn_order == [1, 0, 2]


def test_lowest_total_wins() -> None:
    engine = _start("A", "B")
    _play_hole(engine, {"A": 4, "B": 3})
    _play_hole(engine, {"A": 5, "B": 5})
    game = engine.game
    assert game.game_over
    assert game.winner.name == "B"
    assert game.winner.score == 8
    assert [p.score for p in game.participants] == [9, 8]


def test_equal_totals_tie() -> None:
    engine = _start("A", "B", holes=1)
    _play_hole(engine, {"A": 3, "B": 3})
    assert engine.game.winner.kind is WinnerKind.TIE


@pytest.mark.parametrize("strokes", [0, 7])
def test_strokes_must_be_one_to_six(strokes: int) -> None:
    engine = _start("A", "B")
    engine.apply(MODE, "open_entry")
    with pytest.raises(InvalidActionError):
        engine.apply(MODE, "submit_score", score=strokes)
