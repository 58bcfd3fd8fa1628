from __future__ import annotations

import random

from scoreboard.config import Config
from scoreboard.events import ACTION_EVENTS, handle_event
from scoreboard.store import InMemoryScoreboardStore


class TestConfig(Config):
    __test__ = False

    DATA_DIR = None
    MAX_HISTORY_LENGTH = 20


def _store() -> InMemoryScoreboardStore:
    return InMemoryScoreboardStore(TestConfig, rng=random.Random(5))


def _events(messages) -> list[str]:
    return [m.event for m in messages]


def _start_baseball(store: InMemoryScoreboardStore, innings: int = 1) -> None:
    result = handle_event(
        store,
        "startGame",
        {
            "modeId": "BASEBALL",
            "options": {"names": [{"name": "A", "players": ["Ann"]}, {"name": "B"}], "baseballNumInnings": innings},
        },
    )
    assert _events(result.broadcasts) == ["gameState"]


def test_every_action_event_maps_to_a_known_action() -> None:
    from scoreboard.engine.modes import rules_for

    for event, (mode, action, _) in ACTION_EVENTS.items():
        assert action in rules_for(mode).actions, event


def test_request_state_without_a_game() -> None:
    result = handle_event(_store(), "requestGameState")
    assert _events(result.replies) == ["noGameActive"]
    assert result.broadcasts == []


def test_start_broadcasts_the_new_game() -> None:
    store = _store()
    _start_baseball(store)
    state = handle_event(store, "requestGameState").replies[0].data
    assert state["mode"] == "BASEBALL"
    assert [p["name"] for p in state["participants"]] == ["A", "B"]
    assert state["history_length"] == 1
    assert state["can_undo"] is False


def test_bad_start_replies_with_an_error() -> None:
    store = _store()
    result = handle_event(store, "startGame", {"modeId": "KILLER"})
    assert _events(result.replies) == ["gameStartError"]
    assert "startKillerGame" in result.replies[0].data

    result = handle_event(store, "startGame", {"modeId": "GOLF", "options": {"golfNumHoles": 0}})
    assert _events(result.replies) == ["gameStartError"]
    assert store.engine().game is None


def test_action_updates_everyone() -> None:
    store = _store()
    _start_baseball(store)
    result = handle_event(store, "baseballRequestScoreEntry", {"participantIndex": 0})
    assert _events(result.broadcasts) == ["gameStateUpdate"]
    assert result.broadcasts[0].data["prompt"]["kind"] == "score_entry"


def test_invalid_action_replies_with_unchanged_game() -> None:
    store = _store()
    _start_baseball(store)
    handle_event(store, "baseballRequestScoreEntry", {})
    before = handle_event(store, "requestGameState").replies[0].data

    for payload in ({"score": 181}, {"score": "lots"}, {}):
        result = handle_event(store, "baseballSubmitInningScore", payload)
        assert _events(result.replies) == ["actionError"]
        assert result.broadcasts == []
        assert result.replies[0].data["game"] == before


def test_five_zero_one_turn_over_events() -> None:
    store = _store()
    handle_event(
        store,
        "startGame",
        {"modeId": "FIVE_ZERO_ONE", "options": {"names": [{"name": "A"}, {"name": "B"}], "startScore": 50, "doubleIn": False}},
    )
    result = handle_event(store, "fiveZeroOneTurnAction", {"action": "score_counts", "participantIndex": 0})
    assert _events(result.broadcasts) == ["gameStateUpdate"]
    assert result.broadcasts[0].data["prompt"]["kind"] == "score_entry"

    result = handle_event(store, "submitFiveZeroOneScore", {"score": 20})
    state = result.broadcasts[0].data
    assert state["participants"][0]["score"] == 30
    assert state["current_index"] == 1

    result = handle_event(store, "fiveZeroOneTurnAction", {"action": "no_score"})
    assert _events(result.broadcasts) == ["gameStateUpdate"]
    assert result.broadcasts[0].data["current_index"] == 0

    result = handle_event(store, "fiveZeroOneTurnAction", {"action": "double_top"})
    assert _events(result.replies) == ["actionError"]


def test_three_ff_objective_over_events() -> None:
    store = _store()
    handle_event(store, "startGame", {"modeId": "THREE_FF", "options": {"names": [{"name": "A"}, {"name": "B"}]}})
    result = handle_event(store, "threeFFObjectiveAction", {"action": "met"})
    assert result.broadcasts[0].data["prompt"]["kind"] == "score_entry"

    result = handle_event(store, "submitThreeFFScore", {"score": 40})
    assert result.broadcasts[0].data["participants"][0]["score"] == 40

    result = handle_event(store, "threeFFObjectiveAction", {"action": "missed"})
    assert _events(result.broadcasts) == ["gameStateUpdate"]
    assert result.broadcasts[0].data["participants"][1]["payload"]["just_halved"] is True


def test_unexpected_failure_replies_instead_of_raising(monkeypatch) -> None:
    store = _store()
    _start_baseball(store)

    def explode(*args, **kwargs):
        raise TypeError("unexpected keyword")

    monkeypatch.setattr(store.engine(), "apply", explode)
    result = handle_event(store, "baseballRequestScoreEntry", {})
    assert _events(result.replies) == ["actionError"]
    assert result.replies[0].data["game"]["prompt"]["kind"] == "turn_action"
    assert result.broadcasts == []


def test_action_without_a_game() -> None:
    result = handle_event(_store(), "golfSubmitScore", {"score": 3})
    assert _events(result.replies) == ["noGameActive"]


def test_win_and_undo_push_stats() -> None:
    store = _store()
    _start_baseball(store)
    handle_event(store, "baseballRequestScoreEntry")
    handle_event(store, "baseballSubmitInningScore", {"score": 50})
    handle_event(store, "baseballRequestScoreEntry")
    result = handle_event(store, "baseballSubmitInningScore", {"score": 10})
    assert _events(result.broadcasts) == ["gameStateUpdate", "statsUpdate"]
    assert result.broadcasts[1].data["sessionStats"]["teams"] == {"A": 1}
    assert result.broadcasts[1].data["sessionStats"]["players"] == {"Ann": 1}

    result = handle_event(store, "undoLastAction")
    assert _events(result.broadcasts) == ["gameStateUpdate", "statsUpdate"]
    assert result.broadcasts[1].data["sessionStats"]["teams"] == {}


def test_undo_with_nothing_to_undo_is_silent() -> None:
    store = _store()
    _start_baseball(store)
    result = handle_event(store, "undoLastAction")
    assert result.replies == []
    assert result.broadcasts == []


def test_killer_errors_are_plain_messages() -> None:
    store = _store()
    result = handle_event(store, "startKillerGame", {"players": [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}]})
    assert _events(result.broadcasts) == ["gameStateUpdate"]

    result = handle_event(store, "killerBecomeKiller", {"playerId": "a"})
    assert _events(result.replies) == ["killerError"]
    assert result.replies[0].data == "You must choose a number first."

    result = handle_event(store, "killerChooseNumber", {"playerId": "a", "chosenNumber": 7})
    assert _events(result.broadcasts) == ["gameStateUpdate"]


def test_killer_start_needs_players() -> None:
    result = handle_event(_store(), "startKillerGame", {"players": []})
    assert _events(result.replies) == ["gameStartError"]


def test_main_menu_and_end_game() -> None:
    store = _store()
    assert handle_event(store, "endGame").broadcasts == []

    _start_baseball(store)
    result = handle_event(store, "requestMainMenu")
    assert _events(result.broadcasts) == ["gameStateUpdate", "noGameActive"]
    assert result.broadcasts[0].data is None
    assert store.engine().game is None


def test_stats_events() -> None:
    store = _store()
    assert _events(handle_event(store, "requestStats").replies) == ["statsUpdate"]
    assert _events(handle_event(store, "showStatsScreen").broadcasts) == ["displayStatsScreen"]
    assert _events(handle_event(store, "resetSessionStats").broadcasts) == ["statsUpdate"]
    assert _events(handle_event(store, "resetHistoricalStats").broadcasts) == ["statsUpdate"]


def test_roster_events() -> None:
    store = _store()
    result = handle_event(store, "updatePersistentPlayersList", [{"id": "p1", "name": "Ann"}])
    assert _events(result.broadcasts) == ["persistentPlayersList"]
    assert result.replies[0].data["success"] is True

    result = handle_event(store, "getPersistentPlayersList")
    assert result.replies[0].data == [{"id": "p1", "name": "Ann"}]

    result = handle_event(store, "updatePersistentPlayersList", {"not": "a list"})
    assert result.replies[0].event == "persistentPlayersUpdateStatus"
    assert result.replies[0].data["success"] is False
    assert result.broadcasts == []


def test_unknown_event() -> None:
    result = handle_event(_store(), "launchMissiles")
    assert _events(result.replies) == ["actionError"]


def test_frames_are_json_ready() -> None:
    store = _store()
    _start_baseball(store)
    frame = handle_event(store, "requestGameState").replies[0].frame()
    assert frame["event"] == "gameState"
    assert frame["data"]["options"]["beers_rule"] == "HIGHER"
