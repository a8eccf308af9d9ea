"""Factory helpers for runtime entities."""

from .enemy_factory import create_enemy_def
from .player_factory import create_player_from_payload, player_to_payload

__all__ = [
    "create_enemy_def",
    "create_player_from_payload",
    "player_to_payload",
]
