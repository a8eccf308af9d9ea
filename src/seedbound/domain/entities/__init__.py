"""Runtime entity exports."""

from .attributes import MAX_ATTRIBUTE_VALUE, MIN_ATTRIBUTE_VALUE, Attributes
from .enemy import CombatEnemy, EnemyDef, EnemyStats, LootTable
from .player import Player
from .status_effect import StatusEffect, tick_status_effects

__all__ = [
    "Attributes",
    "CombatEnemy",
    "EnemyDef",
    "EnemyStats",
    "LootTable",
    "MAX_ATTRIBUTE_VALUE",
    "MIN_ATTRIBUTE_VALUE",
    "Player",
    "StatusEffect",
    "tick_status_effects",
]
