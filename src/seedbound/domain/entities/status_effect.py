"""Timed status effects applied during combat."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal

StatusEffectKind = Literal["poison", "stun", "buff", "debuff"]


@dataclass(slots=True)
class StatusEffect:
    """A status effect that expires after ``duration`` combat turns."""

    id: str
    name: str
    duration: int
    effect: StatusEffectKind
    value: int = 0


def tick_status_effects(effects: List[StatusEffect]) -> List[StatusEffect]:
    """Decrement every duration and return only the effects still active."""
    remaining: List[StatusEffect] = []
    for effect in effects:
        effect.duration -= 1
        if effect.duration > 0:
            remaining.append(effect)
    return remaining
