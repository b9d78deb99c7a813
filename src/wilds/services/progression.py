"""XP, levelling and the hp growth that comes with it."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from wilds.domain.log import LogEntry, make_log_entry
from wilds.domain.state import WorldState

logger = logging.getLogger(__name__)

# XP thresholds for levels 1-5
XP_THRESHOLDS: tuple[int, ...] = (0, 10, 30, 60, 100)
MAX_LEVEL = len(XP_THRESHOLDS)
LEVEL_HP_BONUS = 5


@dataclass(frozen=True, slots=True)
class XpResult:
    state: WorldState
    levelled_up: bool
    levels_gained: int = 0


def level_for_xp(xp: int) -> int:
    """Return the highest level whose threshold ``xp`` has reached."""
    level = 1
    for index, threshold in enumerate(XP_THRESHOLDS):
        if xp >= threshold:
            level = index + 1
    return level


def next_level_xp(level: int) -> int | None:
    """Return the XP needed for the level after ``level``, or None at the cap."""
    if level < 1 or level >= MAX_LEVEL:
        return None
    return XP_THRESHOLDS[level]


def apply_xp(state: WorldState, amount: int, *, hp_per_level: int = LEVEL_HP_BONUS) -> XpResult:
    """Add ``amount`` XP, growing max hp and fully healing on level-up."""
    player = state.player
    new_xp = max(0, player.xp + amount)
    new_level = level_for_xp(new_xp)
    gained = new_level - player.level
    if gained <= 0:
        return XpResult(state=state.with_player(xp=new_xp, level=new_level), levelled_up=False)
    new_max_hp = player.max_hp + gained * hp_per_level
    return XpResult(
        state=state.with_player(xp=new_xp, level=new_level, max_hp=new_max_hp, hp=new_max_hp),
        levelled_up=True,
        levels_gained=gained,
    )


LEVEL_UP_TEXT = "You feel the Wilds settle differently around you. You have grown stronger."


def award_xp(
    state: WorldState, amount: int, *, hp_per_level: int = LEVEL_HP_BONUS
) -> Tuple[WorldState, List[LogEntry]]:
    """Apply XP and return the system line that reports it."""
    result = apply_xp(state, amount, hp_per_level=hp_per_level)
    if result.levelled_up:
        logger.debug("Level up to %s (xp=%s)", result.state.player.level, result.state.player.xp)
        return result.state, [make_log_entry("system", LEVEL_UP_TEXT, level=result.state.player.level)]
    return result.state, [make_log_entry("system", f"You gain {amount} XP.")]
