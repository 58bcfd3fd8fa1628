from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


MAX_VISIT_SCORE = 180


class GameMode(str, Enum):
    CRICKET = "CRICKET"
    FIVE_ZERO_ONE = "FIVE_ZERO_ONE"
    AROUND_THE_WORLD = "AROUND_THE_WORLD"
    BEERS = "BEERS"
    GOLF = "GOLF"
    BASEBALL = "BASEBALL"
    KILLER = "KILLER"
    THREE_FF = "THREE_FF"


class WinnerKind(str, Enum):
    TEAM = "team"
    TIE = "tie"
    NONE = "none"
    ERROR = "error"


class PromptKind(str, Enum):
    TURN_ACTION = "turn_action"
    SCORE_ENTRY = "score_entry"
    OBJECTIVE_CHECK = "objective_check"
    TAKE_LETTER = "take_letter"


class ObjectiveKind(str, Enum):
    NUMBER = "number"
    SPECIAL = "special"
    RANDOM_CHALLENGE = "random_challenge"
    HARD_SCORE = "hard_score"


class ObjectiveStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class BeersRule(str, Enum):
    HIGHER = "HIGHER"
    LOWER = "LOWER"


@dataclass(frozen=True)
class TeamSetup:
    """
    Setup data for one participant, as sent by a controller.

    Missing fields are filled in when the game is created.
    """

    id: str | None = None
    name: str | None = None
    players: tuple[str, ...] = ()


@dataclass(frozen=True)
class GameOptions:
    start_score: int = 501
    double_in: bool = True
    double_out: bool = False
    beers_rule: BeersRule = BeersRule.HIGHER
    golf_holes: int = 18
    baseball_innings: int = 9
    three_ff_random_challenges: int = 4

    def __post_init__(self) -> None:
        if self.start_score <= 1:
            raise ValueError("start_score must be > 1")
        if self.golf_holes <= 0:
            raise ValueError("golf_holes must be > 0")
        if self.baseball_innings <= 0:
            raise ValueError("baseball_innings must be > 0")
        if self.three_ff_random_challenges < 0:
            raise ValueError("three_ff_random_challenges must be >= 0")
        if not isinstance(self.beers_rule, BeersRule):
            object.__setattr__(self, "beers_rule", BeersRule(str(self.beers_rule).upper()))


@dataclass
class WinnerRecord:
    name: str
    kind: WinnerKind
    id: str | None = None
    score: int | str | None = None

    @property
    def counts_for_stats(self) -> bool:
        return self.kind is WinnerKind.TEAM and bool(self.name)


@dataclass
class Objective:
    id: str
    name: str
    kind: ObjectiveKind
    value: int | None = None
    description: str = ""
    status: ObjectiveStatus = ObjectiveStatus.OPEN


@dataclass
class Prompt:
    kind: PromptKind
    participant_index: int
    player_slot: int = 0
    detail: dict[str, Any] = field(default_factory=dict)


@dataclass
class LastScored:
    participant_id: str
    score: int


@dataclass
class Participant:
    """
    A team (1..N players). `payload` holds the active mode's per-team state.
    """

    id: str
    name: str
    players: list[str]
    score: int = 0
    is_eliminated: bool = False
    payload: Any = None


@dataclass
class Game:
    """
    The single active game. History is kept outside the game (see history.py),
    so a deep copy of this object is a complete snapshot.
    """

    id: str
    mode: GameMode
    participants: list[Participant]
    options: GameOptions
    payload: Any = None
    current_index: int = -1
    current_slot: int = 0
    prompt: Prompt | None = None
    game_over: bool = False
    winner: WinnerRecord | None = None
    message: str | None = None
    last_scored: LastScored | None = None

    @property
    def current_participant(self) -> Participant | None:
        if 0 <= self.current_index < len(self.participants):
            return self.participants[self.current_index]
        return None

    def participant_by_id(self, participant_id: str) -> Participant | None:
        for p in self.participants:
            if p.id == participant_id:
                return p
        return None

    def conclude(self, winner: WinnerRecord) -> None:
        self.game_over = True
        self.winner = winner
        self.prompt = None

    def snapshot(self) -> Game:
        return copy.deepcopy(self)
