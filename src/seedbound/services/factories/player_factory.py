"""Factory for building the player record from its wire snapshot."""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from seedbound.core.types import ATTRIBUTE_NAMES
from seedbound.domain.entities import MAX_ATTRIBUTE_VALUE, MIN_ATTRIBUTE_VALUE, Attributes, Player
from seedbound.domain.progression import MAX_LEVEL
from seedbound.services.errors import FactoryError


def create_player_from_payload(payload: Mapping[str, Any]) -> Player:
    """Instantiate a player from a camelCase snapshot (``xpToNextLevel``, ``maxWounds`` ...)."""
    if not isinstance(payload, Mapping):
        raise FactoryError("Player payload must be an object.")
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        raise FactoryError("Player payload requires a non-empty 'name'.")

    level = _int_field(payload, "level", default=1)
    if not 1 <= level <= MAX_LEVEL:
        raise FactoryError(f"Player level must be within 1..{MAX_LEVEL}; got {level}.")

    player = Player(
        name=name,
        level=level,
        xp=_int_field(payload, "xp", default=0),
        xp_to_next_level=_int_field(payload, "xpToNextLevel", default=3),
        attributes=_attributes(payload.get("attributes")),
        wounds=_int_field(payload, "wounds", default=3),
        max_wounds=_int_field(payload, "maxWounds", default=3),
        fatigue=_int_field(payload, "fatigue", default=0),
        max_fatigue=_int_field(payload, "maxFatigue", default=3),
        gold=_int_field(payload, "gold", default=0),
        inventory=_inventory(payload.get("inventory")),
        inventory_slots=_int_field(payload, "inventorySlots", default=10),
    )
    if player.xp < 0 or player.gold < 0:
        raise FactoryError("Player xp and gold cannot be negative.")
    if not 0 <= player.wounds <= player.max_wounds:
        raise FactoryError("Player wounds must be within 0..maxWounds.")
    return player


def player_to_payload(player: Player) -> Dict[str, Any]:
    """Inverse of :func:`create_player_from_payload`."""
    return {
        "name": player.name,
        "level": player.level,
        "xp": player.xp,
        "xpToNextLevel": player.xp_to_next_level,
        "attributes": player.attributes.to_dict(),
        "wounds": player.wounds,
        "maxWounds": player.max_wounds,
        "fatigue": player.fatigue,
        "maxFatigue": player.max_fatigue,
        "gold": player.gold,
        "inventory": list(player.inventory),
        "inventorySlots": player.inventory_slots,
    }


def _int_field(payload: Mapping[str, Any], key: str, *, default: int) -> int:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise FactoryError(f"Player field '{key}' must be an integer.")
    return value


def _attributes(value: object) -> Attributes:
    if value is None:
        return Attributes()
    if not isinstance(value, Mapping):
        raise FactoryError("Player 'attributes' must be an object.")
    attributes = Attributes()
    for name in ATTRIBUTE_NAMES:
        raw = value.get(name, 0)
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise FactoryError(f"Attribute '{name}' must be an integer.")
        if not MIN_ATTRIBUTE_VALUE <= raw <= MAX_ATTRIBUTE_VALUE:
            raise FactoryError(
                f"Attribute '{name}' must be within {MIN_ATTRIBUTE_VALUE}..{MAX_ATTRIBUTE_VALUE}; got {raw}."
            )
        attributes.set(name, raw)
    return attributes


def _inventory(value: object) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise FactoryError("Player 'inventory' must be a list of item ids.")
    return list(value)
