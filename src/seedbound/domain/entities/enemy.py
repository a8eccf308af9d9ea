"""Enemy definitions and their in-combat counterparts."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .status_effect import StatusEffect

DEFAULT_ENEMY_WOUNDS = 3
DEFAULT_ENEMY_DEFENSE = 7


@dataclass(slots=True)
class EnemyStats:
    FUE: int = 0
    AGI: int = 0
    DEF: int = DEFAULT_ENEMY_DEFENSE
    Heridas: int = DEFAULT_ENEMY_WOUNDS


@dataclass(slots=True)
class LootTable:
    """Item ids grouped by drop tier."""

    common: Tuple[str, ...] = ()
    uncommon: Tuple[str, ...] = ()
    rare: Tuple[str, ...] = ()
    guaranteed: Tuple[str, ...] = ()


@dataclass(slots=True)
class EnemyDef:
    """Enemy as handed over by the catalog layer."""

    name: str
    stats: EnemyStats
    level: int = 1
    loot_table: LootTable | None = None
    id: str | None = None


@dataclass(slots=True)
class CombatEnemy:
    """Enemy taking part in a live encounter."""

    definition: EnemyDef
    current_wounds: int
    status_effects: List[StatusEffect] = field(default_factory=list)
    is_dead: bool = False

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def stats(self) -> EnemyStats:
        return self.definition.stats

    @property
    def level(self) -> int:
        return self.definition.level

    @classmethod
    def from_def(cls, definition: EnemyDef) -> "CombatEnemy":
        return cls(definition=definition, current_wounds=definition.stats.Heridas or DEFAULT_ENEMY_WOUNDS)
