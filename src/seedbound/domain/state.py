"""Domain-level session state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from seedbound.core.rng import RNG
from seedbound.domain.entities import Player


@dataclass
class GameState:
    """Minimal per-session state; the RNG is exclusively owned by this session."""

    seed: str | int
    rng: RNG
    player: Player
    unlocked_locations: List[str] = field(default_factory=list)
    relationships: dict[str, int] = field(default_factory=dict)
