"""Factory for creating enemy definitions from catalog payloads."""
from __future__ import annotations

from typing import Any, Mapping, Tuple

from seedbound.domain.entities import EnemyDef, EnemyStats, LootTable
from seedbound.domain.entities.enemy import DEFAULT_ENEMY_DEFENSE, DEFAULT_ENEMY_WOUNDS
from seedbound.services.errors import FactoryError

_LOOT_TIERS = ("common", "uncommon", "rare", "guaranteed")


def create_enemy_def(payload: Mapping[str, Any]) -> EnemyDef:
    """Instantiate an enemy from ``{name, level, stats: {FUE, AGI, DEF, Heridas}, loot_table}``."""
    if not isinstance(payload, Mapping):
        raise FactoryError("Enemy payload must be an object.")
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise FactoryError("Enemy payload requires a non-empty 'name'.")

    level = payload.get("level", 1)
    if isinstance(level, bool) or not isinstance(level, int) or level < 1:
        raise FactoryError(f"Enemy '{name}' level must be a positive integer.")

    stats_raw = payload.get("stats") or {}
    if not isinstance(stats_raw, Mapping):
        raise FactoryError(f"Enemy '{name}' stats must be an object.")
    wounds = _stat(stats_raw, "Heridas", name, default=DEFAULT_ENEMY_WOUNDS)
    stats = EnemyStats(
        FUE=_stat(stats_raw, "FUE", name, default=0),
        AGI=_stat(stats_raw, "AGI", name, default=0),
        DEF=_stat(stats_raw, "DEF", name, default=DEFAULT_ENEMY_DEFENSE),
        Heridas=wounds if wounds > 0 else DEFAULT_ENEMY_WOUNDS,
    )

    enemy_id = payload.get("id")
    if enemy_id is not None and not isinstance(enemy_id, str):
        raise FactoryError(f"Enemy '{name}' id must be a string.")
    return EnemyDef(
        name=name,
        stats=stats,
        level=level,
        loot_table=_loot_table(payload.get("loot_table"), name),
        id=enemy_id,
    )


def _stat(stats: Mapping[str, Any], key: str, name: str, *, default: int) -> int:
    value = stats.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise FactoryError(f"Enemy '{name}' stat '{key}' must be an integer.")
    return value


def _loot_table(value: object, name: str) -> LootTable | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise FactoryError(f"Enemy '{name}' loot_table must be an object.")
    tiers: dict[str, Tuple[str, ...]] = {}
    for tier in _LOOT_TIERS:
        entries = value.get(tier) or []
        if not isinstance(entries, list) or not all(isinstance(item, str) for item in entries):
            raise FactoryError(f"Enemy '{name}' loot_table.{tier} must be a list of item ids.")
        tiers[tier] = tuple(entries)
    return LootTable(**tiers)
