"""Player record shared by combat, quests and progression."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .attributes import Attributes
from .status_effect import StatusEffect

BASE_WOUNDS = 3
BASE_FATIGUE = 3
STARTING_INVENTORY_SLOTS = 10


@dataclass(slots=True)
class Player:
    """Mutable player snapshot; ``wounds`` counts remaining health."""

    name: str
    level: int = 1
    xp: int = 0
    xp_to_next_level: int = 3
    attributes: Attributes = field(default_factory=Attributes)
    wounds: int = BASE_WOUNDS
    max_wounds: int = BASE_WOUNDS
    fatigue: int = 0
    max_fatigue: int = BASE_FATIGUE
    gold: int = 0
    inventory: List[str] = field(default_factory=list)
    inventory_slots: int = STARTING_INVENTORY_SLOTS
    status_effects: List[StatusEffect] = field(default_factory=list)
