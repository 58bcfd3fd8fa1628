from __future__ import annotations

import random

import pytest

from scoreboard.engine import GameMode, InvalidActionError, ScoreboardEngine, TeamSetup, WinnerKind
from scoreboard.engine.modes import killer
from scoreboard.engine.modes.killer import CONTROLLER_DEVICE_ACTION_ID, LIVES_START

MODE = GameMode.KILLER


def _start(*ids: str) -> ScoreboardEngine:
    engine = ScoreboardEngine(rng=random.Random(1))
    engine.start_killer_game([TeamSetup(id=i, name=i.upper(), players=(i.upper(),)) for i in ids])
    return engine


def _card(engine: ScoreboardEngine, player_id: str):
    return engine.game.participant_by_id(player_id).payload


def _error(engine: ScoreboardEngine, action: str, **payload) -> str:
    with pytest.raises(InvalidActionError) as e:
        engine.apply(MODE, action, **payload)
    return str(e.value)


def test_killer_has_no_turn_order() -> None:
    engine = _start("a", "b")
    assert engine.game.current_index == -1
    assert engine.game.prompt is None
    assert _card(engine, "a").lives == LIVES_START


def test_number_selection_rules() -> None:
    engine = _start("a", "b")
    engine.apply(MODE, "choose_number", player_id="a", chosen_number=20)

    assert _error(engine, "choose_number", player_id="a", chosen_number=5) == "You have already chosen number 20."
    assert _error(engine, "choose_number", player_id="b", chosen_number=20) == "Number 20 is already taken."
    assert _error(engine, "choose_number", player_id="b", chosen_number=21) == "Invalid number 21. Please choose from 1-20."
    assert _error(engine, "choose_number", player_id="zz", chosen_number=3) == "Player not found."


def test_becoming_a_killer_needs_every_number_chosen() -> None:
    engine = _start("a", "b")
    assert _error(engine, "become_killer", player_id="a") == "You must choose a number first."
    engine.apply(MODE, "choose_number", player_id="a", chosen_number=1)
    assert (
        _error(engine, "become_killer", player_id="a")
        == "All players must choose a number before anyone can become a Killer."
    )
    engine.apply(MODE, "choose_number", player_id="b", chosen_number=2)
    engine.apply(MODE, "become_killer", player_id="a")
    assert _card(engine, "a").is_killer
    assert _error(engine, "become_killer", player_id="a") == "A is already a Killer."


def test_four_player_game_to_the_last_survivor() -> None:
    engine = _start("a", "b", "c", "d")
    for number, pid in enumerate("abcd", start=1):
        engine.apply(MODE, "choose_number", player_id=pid, chosen_number=number)

    assert (
        _error(engine, "remove_life", from_player_id=CONTROLLER_DEVICE_ACTION_ID, target_player_id="b")
        == "Action requires an active killer in the game."
    )
    engine.apply(MODE, "become_killer", player_id="a")

    assert _error(engine, "remove_life", from_player_id="b", target_player_id="c") == "Only Killers can remove lives."
    assert (
        _error(engine, "remove_life", from_player_id="a", target_player_id="a")
        == "You cannot target yourself to remove a life."
    )

    for _ in range(LIVES_START):
        engine.apply(MODE, "remove_life", from_player_id="a", target_player_id="b")
    assert engine.game.participant_by_id("b").is_eliminated
    assert _error(engine, "remove_life", from_player_id="a", target_player_id="b") == "B is already eliminated."

    for _ in range(LIVES_START):
        engine.apply(MODE, "remove_life", from_player_id=CONTROLLER_DEVICE_ACTION_ID, target_player_id="c")
    assert not engine.game.game_over

    for _ in range(LIVES_START):
        engine.apply(MODE, "remove_life", from_player_id="a", target_player_id="d")

    game = engine.game
    assert game.game_over
    assert game.winner.kind is WinnerKind.TEAM
    assert game.winner.name == "A"
    assert game.winner.score == LIVES_START


def test_everyone_eliminated_is_a_draw() -> None:
    engine = _start("a", "b")
    game = engine.game.snapshot()
    for p in game.participants:
        p.is_eliminated = True
    assert killer.evaluate(game)
    assert game.winner.kind is WinnerKind.TIE
    assert game.winner.name == "Draw - All players eliminated"
