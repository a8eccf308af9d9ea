"""2d6 resolution mechanic driven by the session RNG."""
from __future__ import annotations

from typing import Tuple

from seedbound.core.rng import RNG
from seedbound.core.types import AdvantageMode, AttributeName, DifficultyTier, RollOutcome
from seedbound.domain.dice import (
    CRITICAL_SUCCESS_BONUSES,
    PARTIAL_SUCCESS_CONSEQUENCES,
    SUCCESS_OUTCOMES,
    CombatRollResult,
    DiceRollResult,
    damage_for_outcome,
    determine_outcome,
    resolve_difficulty,
)

_OUTCOME_LABELS: dict[RollOutcome, str] = {
    "critical_failure": "Critical failure! Something goes terribly wrong.",
    "partial_success": "Partial success: you get what you wanted,",
    "success": "Success! You pull it off.",
    "critical_success": "Critical success! You pull it off perfectly",
}


class DiceService:
    """Resolves 2d6 + modifier rolls against a difficulty.

    Every die face comes from the injected RNG, so two services built on RNGs with the
    same seed resolve identical roll sequences.
    """

    def __init__(self, rng: RNG) -> None:
        self._rng = rng

    @property
    def rng(self) -> RNG:
        return self._rng

    def roll(
        self,
        attribute_modifier: int = 0,
        difficulty: int | DifficultyTier = "normal",
        advantage: AdvantageMode = "none",
        extra_modifier: int = 0,
    ) -> DiceRollResult:
        target = resolve_difficulty(difficulty)
        dice = self._roll_dice(advantage)
        dice_total = dice[0] + dice[1]
        modifier = attribute_modifier + extra_modifier
        total = dice_total + modifier
        outcome = determine_outcome(total, target)
        consequence: str | None = None
        bonus: str | None = None
        if outcome == "partial_success":
            consequence = self._rng.pick(PARTIAL_SUCCESS_CONSEQUENCES)
        elif outcome == "critical_success":
            bonus = self._rng.pick(CRITICAL_SUCCESS_BONUSES)
        return DiceRollResult(
            dice=dice,
            dice_total=dice_total,
            modifier=modifier,
            total=total,
            difficulty=target,
            outcome=outcome,
            success=outcome in SUCCESS_OUTCOMES,
            advantage=advantage,
            consequence=consequence,
            bonus=bonus,
        )

    def combat_roll(
        self,
        attack_modifier: int,
        defender_defense: int,
        advantage: AdvantageMode = "none",
        weapon_bonus: int = 0,
    ) -> CombatRollResult:
        """Roll an attack and derive the wounds it inflicts from the outcome tier."""
        result = self.roll(attack_modifier, defender_defense, advantage, weapon_bonus)
        return CombatRollResult(
            dice=result.dice,
            dice_total=result.dice_total,
            modifier=result.modifier,
            total=result.total,
            difficulty=result.difficulty,
            outcome=result.outcome,
            success=result.success,
            advantage=result.advantage,
            consequence=result.consequence,
            bonus=result.bonus,
            damage=damage_for_outcome(result.outcome),
        )

    def quick_check(self, attribute_modifier: int, difficulty: int | DifficultyTier = "normal") -> bool:
        return self.roll(attribute_modifier, difficulty).success

    def skill_check(
        self,
        attribute_name: AttributeName,
        attribute_value: int,
        difficulty: DifficultyTier = "normal",
        advantage: AdvantageMode = "none",
    ) -> DiceRollResult:
        """Roll a named attribute check; the name is a label, the value is the modifier."""
        return self.roll(attribute_value, difficulty, advantage)

    @staticmethod
    def describe_result(result: DiceRollResult) -> str:
        sign = "+" if result.modifier >= 0 else ""
        prefix = f"You rolled [{result.dice[0]}, {result.dice[1]}] {sign}{result.modifier} = {result.total}."
        label = _OUTCOME_LABELS[result.outcome]
        if result.outcome == "partial_success" and result.consequence:
            return f"{prefix} {label} {result.consequence}."
        if result.outcome == "critical_success" and result.bonus:
            return f"{prefix} {label} {result.bonus}."
        return f"{prefix} {label}"

    def _roll_dice(self, advantage: AdvantageMode) -> Tuple[int, int]:
        if advantage == "none":
            pair = self._rng.roll_2d6()
            return pair.die1, pair.die2
        if advantage not in ("advantage", "disadvantage"):
            raise ValueError(f"Unknown advantage mode '{advantage}'.")
        faces = [self._rng.next_int(1, 6) for _ in range(3)]
        faces.sort(reverse=advantage == "advantage")
        return faces[0], faces[1]
