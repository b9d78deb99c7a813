"""Narrative text with variation, so the Wilds do not repeat themselves."""
from __future__ import annotations

from typing import Dict, Tuple

from wilds.core.rng import RNG
from wilds.core.types import ReputationTier

RUN_ENDED_TEXT = "Your journey has ended. Only a new run can carry the story further."
DEATH_TEXT = "Darkness closes in. The Wilds grow quiet around you, and your journey ends here."
SENSE_FALLBACK_TEXT = "You take in your surroundings, quiet and watchful."

NOTHING_TO_GATHER_LINES: Tuple[str, ...] = (
    "You search around, but there is nothing here you can safely gather.",
    "Nothing here calls to be collected. You move on.",
    "The place offers nothing for gathering. You leave it as you found it.",
)

_HIT_TEMPLATES: Tuple[str, ...] = (
    "You strike at {name}, dealing {damage} damage.",
    "Your blow lands; {name} shivers, taking {damage} damage.",
    "You press forward, and {name} recoils from {damage} points of harm.",
)

_RETALIATE_TEMPLATES: Tuple[str, ...] = (
    "{name} lashes out, dealing {damage} damage.",
    "{name}'s touch bites cold for {damage} damage.",
    "{name} strikes back, and you take {damage} damage.",
)

_ESCAPE_TEMPLATES: Tuple[str, ...] = (
    "You slip away from {name}, heart pounding.",
    "You retreat, and {name} lets you go.",
    "You break away, leaving {name} behind.",
)

_ESCAPE_FAIL_TEMPLATES: Tuple[str, ...] = (
    "You stumble; {name} catches you for {damage} damage.",
    "Your escape falters. {name} strikes as you turn, dealing {damage} damage.",
    "You try to flee, but {name} is faster. {damage} damage.",
)

# Neutral regard has no entry in either table.
_ENCOUNTER_FLAVOUR: Dict[ReputationTier, str] = {
    "revered": "{name} pauses, recognising the quiet care you've shown the Wilds.",
    "favour": "The Wilds seem to hold their breath around {name}, as if reluctant to strike you.",
    "uneasy": "The forest feels tense. {name} watches you with narrowed eyes.",
    "hostile": "The air bristles. {name} lunges as if the forest itself wants you gone.",
}

_RETALIATION_SUFFIX: Dict[ReputationTier, str] = {
    "revered": "Even now, it seems reluctant to hurt you.",
    "favour": "The blow lands softer than it might have.",
    "uneasy": "It strikes like something holding a grudge.",
    "hostile": "The forest seems to lend it strength.",
}

SPARED_TEXT = "Something moves at the edge of sight, then withdraws. The forest lets you pass."


def hit_line(rng: RNG, name: str, damage: int) -> str:
    return rng.choice(_HIT_TEMPLATES).format(name=name, damage=damage)


def retaliate_line(rng: RNG, name: str, damage: int) -> str:
    return rng.choice(_RETALIATE_TEMPLATES).format(name=name, damage=damage)


def escape_line(rng: RNG, name: str) -> str:
    return rng.choice(_ESCAPE_TEMPLATES).format(name=name)


def escape_fail_line(rng: RNG, name: str, damage: int) -> str:
    return rng.choice(_ESCAPE_FAIL_TEMPLATES).format(name=name, damage=damage)


def encounter_flavour(tier: ReputationTier, name: str) -> str | None:
    template = _ENCOUNTER_FLAVOUR.get(tier)
    return template.format(name=name) if template else None


def retaliation_suffix(tier: ReputationTier) -> str | None:
    return _RETALIATION_SUFFIX.get(tier)


def encounter_line(location_name: str, creature_name: str) -> str:
    return f"Something stirs in {location_name}. {creature_name} emerges."
