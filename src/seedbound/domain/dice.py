"""2d6 roll result models, difficulty tiers and flavour pools."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from seedbound.core.types import AdvantageMode, DifficultyTier, RollOutcome

DIFFICULTY_TIERS: Dict[DifficultyTier, int] = {
    "easy": 6,
    "normal": 7,
    "difficult": 9,
    "epic": 11,
}

SUCCESS_OUTCOMES: Tuple[RollOutcome, ...] = ("partial_success", "success", "critical_success")

PARTIAL_SUCCESS_CONSEQUENCES: Tuple[str, ...] = (
    "but it costs you an extra point of fatigue",
    "but you alert nearby enemies",
    "but you lose or damage an item",
    "but you expose yourself to danger",
    "but someone notices",
    "but it takes longer than expected",
    "but you have to make some noise",
    "but you leave a trail behind",
)

CRITICAL_SUCCESS_BONUSES: Tuple[str, ...] = (
    "and you find something useful besides",
    "and you impress everyone present",
    "and you do it faster than expected",
    "and you spend no resources",
    "and you learn valuable information",
    "and you gain a tactical edge",
    "and nobody notices",
    "and you inspire your allies",
)

_OUTCOME_RANKS: Dict[RollOutcome, int] = {
    "critical_failure": 0,
    "partial_success": 1,
    "success": 2,
    "critical_success": 3,
}


@dataclass(frozen=True, slots=True)
class DiceRollResult:
    """Full breakdown of one resolved 2d6 roll."""

    dice: Tuple[int, int]
    dice_total: int
    modifier: int
    total: int
    difficulty: int
    outcome: RollOutcome
    success: bool
    advantage: AdvantageMode
    consequence: str | None = None
    bonus: str | None = None


@dataclass(frozen=True, slots=True)
class CombatRollResult(DiceRollResult):
    """Roll result with the wounds it inflicts."""

    damage: int = 0


def resolve_difficulty(difficulty: int | DifficultyTier) -> int:
    """Return the target number for a raw integer or a named tier."""
    if isinstance(difficulty, bool):
        raise ValueError("Difficulty must be an integer or a named tier.")
    if isinstance(difficulty, int):
        return difficulty
    try:
        return DIFFICULTY_TIERS[difficulty]
    except KeyError as exc:
        raise ValueError(f"Unknown difficulty tier '{difficulty}'.") from exc


def determine_outcome(total: int, difficulty: int) -> RollOutcome:
    """
    Band a roll total into an outcome tier.

    The difficulty gate is checked before banding, so a total of 10 against
    difficulty 11 is a critical failure even though 10 bands as a success.
    """
    if total < difficulty:
        return "critical_failure"
    if total >= 12:
        return "critical_success"
    if total >= 10:
        return "success"
    if total >= 7:
        return "partial_success"
    return "critical_failure"


def damage_for_outcome(outcome: RollOutcome) -> int:
    if outcome == "critical_success":
        return 2
    if outcome in ("success", "partial_success"):
        return 1
    return 0


def outcome_rank(outcome: RollOutcome) -> int:
    return _OUTCOME_RANKS.get(outcome, 0)


def compare_outcomes(first: RollOutcome, second: RollOutcome) -> int:
    return outcome_rank(first) - outcome_rank(second)
