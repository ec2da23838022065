"""
Stat Engine — maps (current stats, action) to new stats.

Rules
-----
  | action | love | hunger | happiness |
  |--------|------|--------|-----------|
  | feed   |   0  |  +20   |    +5     |
  | cuddle |  +10 |   0    |   +15     |
  | love   |  +15 |   0    |   +10     |

Every field is clamped to STAT_MAX after the delta is added. Deltas are
never negative, so no field ever drops below its pre-action value.

Pure: no DB, no I/O. Unknown actions are rejected by the Activity Log
before they get here.
"""
from __future__ import annotations

from dataclasses import dataclass

from meowpair.models.activity import CatAction

STAT_MIN = 0
STAT_MAX = 100


@dataclass(frozen=True)
class CatStatValues:
    love: int
    hunger: int
    happiness: int

    def as_dict(self) -> dict[str, int]:
        return {"love": self.love, "hunger": self.hunger, "happiness": self.happiness}


SEED_STATS = CatStatValues(love=50, hunger=30, happiness=75)

STAT_DELTAS: dict[CatAction, CatStatValues] = {
    CatAction.feed:   CatStatValues(love=0,  hunger=20, happiness=5),
    CatAction.cuddle: CatStatValues(love=10, hunger=0,  happiness=15),
    CatAction.love:   CatStatValues(love=15, hunger=0,  happiness=10),
}


def _clamp(value: int) -> int:
    return max(STAT_MIN, min(STAT_MAX, value))


def apply_action(current: CatStatValues, action: CatAction | str) -> CatStatValues:
    """Return the stats after `action`. `current` is not modified."""
    delta = STAT_DELTAS[CatAction(action)]
    return CatStatValues(
        love=_clamp(current.love + delta.love),
        hunger=_clamp(current.hunger + delta.hunger),
        happiness=_clamp(current.happiness + delta.happiness),
    )
