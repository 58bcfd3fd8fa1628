"""
Inbound wire payloads. Field aliases keep the controllers' camelCase keys;
snake_case names are accepted as well.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from scoreboard.engine.models import BeersRule, GameOptions, TeamSetup


class Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_kwargs(self) -> dict[str, Any]:
        return self.model_dump()


class EmptyMessage(Message):
    pass


class TurnMessage(Message):
    """Base for actions that may name the participant holding the turn."""

    participant_index: int | None = Field(default=None, alias="participantIndex")

    def to_kwargs(self) -> dict[str, Any]:
        kwargs = self.model_dump()
        if kwargs.get("participant_index") is None:
            kwargs.pop("participant_index", None)
        return kwargs


class ScoreMessage(TurnMessage):
    score: StrictInt


class CricketMarkMessage(TurnMessage):
    participant_index: int = Field(..., alias="participantIndex")
    objective_name: str = Field(..., alias="objectiveName")


class CricketEndTurnMessage(Message):
    participant_id: str = Field(..., alias="participantId", min_length=1)


class ObjectiveActionMessage(TurnMessage):
    action: str = Field(..., description="met | missed")


class FiveZeroOneTurnMessage(TurnMessage):
    action: str = Field(..., description="score_counts | no_score | bust_acknowledged")


class AroundTheWorldHitMessage(TurnMessage):
    reported_value: StrictInt = Field(..., alias="reportedValue", description="0=miss, 1-20, 25=SB, 50=DB")


class KillerChooseNumberMessage(Message):
    player_id: str = Field(..., alias="playerId")
    chosen_number: StrictInt = Field(..., alias="chosenNumber")


class KillerBecomeKillerMessage(Message):
    player_id: str = Field(..., alias="playerId")


class KillerRemoveLifeMessage(Message):
    from_player_id: str = Field(..., alias="fromPlayerId")
    target_player_id: str = Field(..., alias="targetPlayerId")


class TeamMessage(Message):
    id: str | None = None
    name: str | None = Field(default=None, max_length=100)
    players: list[str] = Field(default_factory=list)

    def to_setup(self) -> TeamSetup:
        return TeamSetup(id=self.id, name=self.name, players=tuple(self.players))


class StartOptionsMessage(Message):
    names: list[TeamMessage] = Field(default_factory=list)
    start_score: int | None = Field(default=None, alias="startScore", gt=1)
    double_in: bool | None = Field(default=None, alias="doubleIn")
    double_out: bool | None = Field(default=None, alias="doubleOut")
    beers_rule: BeersRule | None = Field(default=None, alias="beersRule")
    golf_num_holes: int | None = Field(default=None, alias="golfNumHoles", gt=0)
    baseball_num_innings: int | None = Field(default=None, alias="baseballNumInnings", gt=0)
    three_ff_random_challenges: int | None = Field(default=None, alias="threeFFRandomChallenges", ge=0)

    def to_options(self) -> GameOptions:
        given = {
            "start_score": self.start_score,
            "double_in": self.double_in,
            "double_out": self.double_out,
            "beers_rule": self.beers_rule,
            "golf_holes": self.golf_num_holes,
            "baseball_innings": self.baseball_num_innings,
            "three_ff_random_challenges": self.three_ff_random_challenges,
        }
        return GameOptions(**{k: v for k, v in given.items() if v is not None})

    def to_teams(self) -> list[TeamSetup]:
        return [t.to_setup() for t in self.names]


class StartGameMessage(Message):
    mode_id: str = Field(..., alias="modeId")
    options: StartOptionsMessage = Field(default_factory=StartOptionsMessage)


class StartKillerGameMessage(Message):
    players: list[TeamMessage] = Field(..., min_length=1)
