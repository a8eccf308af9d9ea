"""Attribute models for runtime entities."""
from __future__ import annotations

from dataclasses import dataclass

from seedbound.core.types import ATTRIBUTE_NAMES, AttributeName

MAX_ATTRIBUTE_VALUE = 3
MIN_ATTRIBUTE_VALUE = 0


@dataclass(slots=True)
class Attributes:
    """Stores the four player attributes (Strength, Agility, Wisdom, Luck)."""

    FUE: int = 0
    AGI: int = 0
    SAB: int = 0
    SUE: int = 0

    def get(self, name: AttributeName) -> int:
        if name not in ATTRIBUTE_NAMES:
            raise KeyError(name)
        return getattr(self, name)

    def set(self, name: AttributeName, value: int) -> None:
        if name not in ATTRIBUTE_NAMES:
            raise KeyError(name)
        setattr(self, name, value)

    def to_dict(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in ATTRIBUTE_NAMES}
