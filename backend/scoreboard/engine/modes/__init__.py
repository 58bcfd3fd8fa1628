from __future__ import annotations

from scoreboard.engine.models import GameMode
from scoreboard.engine.modes import (
    around_the_world,
    baseball,
    beers,
    countdown,
    cricket,
    golf,
    killer,
    three_ff,
)
from scoreboard.engine.modes.common import ModeRules

MODE_RULES: dict[GameMode, ModeRules] = {
    rules.mode: rules
    for rules in (
        cricket.RULES,
        countdown.RULES,
        around_the_world.RULES,
        beers.RULES,
        golf.RULES,
        baseball.RULES,
        killer.RULES,
        three_ff.RULES,
    )
}


def rules_for(mode: GameMode) -> ModeRules:
    return MODE_RULES[mode]


__all__ = ["MODE_RULES", "ModeRules", "rules_for"]
