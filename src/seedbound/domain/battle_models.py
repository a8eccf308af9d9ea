"""Combat domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Tuple, Union

from seedbound.core.types import CombatPhase
from seedbound.domain.entities import CombatEnemy, Player

AttackAttribute = Literal["FUE", "AGI"]
ATTACK_ATTRIBUTES: Tuple[AttackAttribute, ...] = ("FUE", "AGI")


@dataclass(slots=True)
class CombatLogEntry:
    """One append-only line of the combat log."""

    turn: int
    actor: str
    action: str
    result: str
    timestamp: float
    target: str | None = None
    damage: int | None = None


@dataclass(slots=True)
class AttackAction:
    target_index: int
    attribute: AttackAttribute = "FUE"

    def __post_init__(self) -> None:
        if self.attribute not in ATTACK_ATTRIBUTES:
            raise ValueError(f"Attack attribute must be one of {ATTACK_ATTRIBUTES}, got '{self.attribute}'.")


@dataclass(slots=True)
class DefendAction:
    pass


@dataclass(slots=True)
class UseItemAction:
    item_id: str
    target_index: int | None = None


@dataclass(slots=True)
class FleeAction:
    pass


CombatAction = Union[AttackAction, DefendAction, UseItemAction, FleeAction]


def action_tag(action: CombatAction) -> str:
    if isinstance(action, AttackAction):
        return "attack"
    if isinstance(action, DefendAction):
        return "defend"
    if isinstance(action, UseItemAction):
        return "use_item"
    return "flee"


@dataclass(slots=True)
class CombatState:
    """Tracks the state of an ongoing encounter."""

    player: Player
    enemies: List[CombatEnemy]
    turn: int = 1
    phase: CombatPhase = "player"
    combat_log: List[CombatLogEntry] = field(default_factory=list)
    last_player_action: CombatAction | None = None
    escaped: bool = False
    rewards_claimed: bool = False

    @property
    def is_over(self) -> bool:
        return self.phase in ("victory", "defeat")

    def living_enemies(self) -> List[CombatEnemy]:
        return [enemy for enemy in self.enemies if not enemy.is_dead]


@dataclass(slots=True)
class RollSummary:
    dice: Tuple[int, int]
    modifier: int
    total: int
    difficulty: int


@dataclass(slots=True)
class CombatActionResult:
    """Outcome of a single player or enemy action."""

    success: bool
    message: str
    damage: int | None = None
    healing: int | None = None
    critical: bool = False
    roll: RollSummary | None = None


@dataclass(slots=True)
class CombatRewards:
    xp: int = 0
    gold: int = 0
    items: List[str] = field(default_factory=list)
