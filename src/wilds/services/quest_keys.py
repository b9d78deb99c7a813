"""Identifiers the engine itself relies on in the shipped content.

Content ids named here must exist in the content tables; looking them up is
allowed to fail loudly.
"""
from __future__ import annotations

from typing import Tuple

GROVE_QUEST_ID = "heal_the_grove"
GROVE_LOCATION_ID = "wilds"
# Either step counts as ritual-ready; the ritual does not distinguish them.
GROVE_READY_STEPS: Tuple[str, ...] = ("gather_ingredients", "perform_ritual")
GROVE_GATHER_STEP = "gather_ingredients"
GROVE_PERFORM_STEP = "perform_ritual"
GROVE_RETURN_STEP = "return_to_caretaker"
GROVE_DONE_STEP = "grove_healed"
GROVE_RITUAL_COSTS: Tuple[Tuple[str, int], ...] = (("forest_herb", 3), ("lake_water", 1))

ECHOES_QUEST_ID = "echoes_at_the_lake"
ECHOES_LOCATION_ID = "lake"
ECHOES_LISTEN_STEP = "listen_at_lake"
ECHOES_TELL_STEP = "tell_the_hermit"
ECHOES_DONE_STEP = "echoes_understood"

GLOW_QUEST_ID = "hermits_glow"
GLOW_LOCATION_ID = "deep_wilds"
GLOW_SEEK_STEP = "seek_the_glow"
GLOW_READY_STEPS: Tuple[str, ...] = ("found_glow", "commune_with_glow")
GLOW_DONE_STEP = "glow_communed"
GLOW_COMMUNE_COSTS: Tuple[Tuple[str, int], ...] = (("luminous_fragment", 2),)
GLOW_OFFERING_ITEM_ID = "luminous_fragment"
