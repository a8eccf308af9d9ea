"""Pure progression helpers: XP, level-ups, milestone rewards and attribute points."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from seedbound.core.types import ATTRIBUTE_NAMES
from seedbound.domain.entities import MAX_ATTRIBUTE_VALUE, Attributes, Player
from seedbound.domain.entities.player import BASE_FATIGUE, BASE_WOUNDS, STARTING_INVENTORY_SLOTS

XP_PER_LEVEL = 3
MAX_LEVEL = 10
STARTING_LEVEL = 1
FULL_HEAL = 99

_SLOT_BONUS_LEVELS = {3: 2, 5: 2, 7: 2, 10: 5}
_ITEM_UNLOCKS = {3: "advanced_gear", 7: "legendary_item", 10: "ultimate_gear"}
_STARTING_ATTRIBUTES = {"FUE": 2, "AGI": 2, "SAB": 1, "SUE": 1}


@dataclass(frozen=True, slots=True)
class LevelUpReward:
    attribute_points: int
    heal_wounds: int
    heal_fatigue: int
    inventory_slots: int
    gold_bonus: int
    new_item: str | None = None


@dataclass(frozen=True, slots=True)
class LevelUpResult:
    leveled_up: bool
    new_level: int
    rewards: LevelUpReward
    remaining_xp: int
    max_level_reached: bool


@dataclass(frozen=True, slots=True)
class AttributeSpendResult:
    success: bool
    message: str


@dataclass(frozen=True, slots=True)
class ProgressionInfo:
    current_level: int
    current_xp: int
    xp_to_next_level: int
    xp_progress: int
    can_level_up: bool
    max_level_reached: bool


def get_xp_for_next_level(current_level: int) -> int:
    if current_level >= MAX_LEVEL:
        return 0
    return XP_PER_LEVEL


def calculate_rewards(new_level: int) -> LevelUpReward:
    """Return the reward bundle for reaching ``new_level``."""
    attribute_points = 1
    gold_bonus = 5
    if new_level == 5:
        attribute_points = 2
        gold_bonus = 10
    elif new_level == 10:
        attribute_points = 3
        gold_bonus = 50
    return LevelUpReward(
        attribute_points=attribute_points,
        heal_wounds=FULL_HEAL,
        heal_fatigue=FULL_HEAL,
        inventory_slots=_SLOT_BONUS_LEVELS.get(new_level, 0),
        gold_bonus=gold_bonus,
        new_item=_ITEM_UNLOCKS.get(new_level),
    )


def _apply_automatic_rewards(player: Player, rewards: LevelUpReward) -> None:
    # Attribute points are left for apply_attribute_point.
    player.wounds = min(player.max_wounds, player.wounds + rewards.heal_wounds)
    player.fatigue = max(0, player.fatigue - rewards.heal_fatigue)
    player.gold += rewards.gold_bonus
    player.inventory_slots += rewards.inventory_slots


def _process_level_up(player: Player) -> LevelUpResult:
    remaining_xp = player.xp - player.xp_to_next_level
    player.level += 1
    player.xp = remaining_xp
    player.xp_to_next_level = get_xp_for_next_level(player.level)
    rewards = calculate_rewards(player.level)
    _apply_automatic_rewards(player, rewards)
    return LevelUpResult(
        leveled_up=True,
        new_level=player.level,
        rewards=rewards,
        remaining_xp=remaining_xp,
        max_level_reached=player.level >= MAX_LEVEL,
    )


def add_xp(player: Player, amount: int) -> List[LevelUpResult]:
    """
    Add XP and process every level-up it triggers.

    A single large grant can chain several level-ups; each one is reported in order.
    """
    player.xp = max(0, player.xp + amount)
    results: List[LevelUpResult] = []
    while player.xp >= player.xp_to_next_level and player.level < MAX_LEVEL:
        results.append(_process_level_up(player))
    return results


def _update_derived_stats(player: Player) -> None:
    player.max_wounds = BASE_WOUNDS + player.level // 2
    player.max_fatigue = BASE_FATIGUE + player.level // 2
    player.wounds = min(player.wounds, player.max_wounds)
    player.fatigue = max(0, player.fatigue)


def apply_attribute_point(player: Player, attribute: str) -> AttributeSpendResult:
    """Spend one attribute point; fails without mutating when the attribute is capped."""
    if attribute not in ATTRIBUTE_NAMES:
        return AttributeSpendResult(success=False, message="Invalid attribute selection.")
    current_value = player.attributes.get(attribute)  # type: ignore[arg-type]
    if current_value >= MAX_ATTRIBUTE_VALUE:
        return AttributeSpendResult(
            success=False,
            message=f"{attribute} is already at its maximum ({MAX_ATTRIBUTE_VALUE}).",
        )
    player.attributes.set(attribute, current_value + 1)  # type: ignore[arg-type]
    _update_derived_stats(player)
    return AttributeSpendResult(success=True, message=f"+1 {attribute}")


def get_xp_progress(player: Player) -> int:
    if player.level >= MAX_LEVEL or player.xp_to_next_level == 0:
        return 100
    return (player.xp * 100) // player.xp_to_next_level


def can_level_up(player: Player) -> bool:
    return player.xp >= player.xp_to_next_level and player.level < MAX_LEVEL


def get_progression_info(player: Player) -> ProgressionInfo:
    return ProgressionInfo(
        current_level=player.level,
        current_xp=player.xp,
        xp_to_next_level=player.xp_to_next_level,
        xp_progress=get_xp_progress(player),
        can_level_up=can_level_up(player),
        max_level_reached=player.level >= MAX_LEVEL,
    )


def calculate_power_level(player: Player) -> int:
    attrs = player.attributes
    return (
        player.level * 10
        + attrs.FUE * 5
        + attrs.AGI * 5
        + attrs.SAB * 5
        + attrs.SUE * 3
        + player.wounds * 2
        + len(player.inventory) * 3
    )


def reset_progression(player: Player, keep_attributes: bool = False) -> None:
    """Return the player to level 1 (new game+)."""
    player.level = STARTING_LEVEL
    player.xp = 0
    player.xp_to_next_level = get_xp_for_next_level(STARTING_LEVEL)
    player.wounds = BASE_WOUNDS
    player.max_wounds = BASE_WOUNDS
    player.fatigue = 0
    player.max_fatigue = BASE_FATIGUE
    player.gold = 0
    player.inventory = []
    player.inventory_slots = STARTING_INVENTORY_SLOTS
    if not keep_attributes:
        player.attributes = Attributes(**_STARTING_ATTRIBUTES)


def get_level_rewards_description(level: int) -> str:
    rewards = calculate_rewards(level)
    parts = [
        f"+{rewards.attribute_points} attribute point(s)",
        "Full heal",
        f"+{rewards.gold_bonus} gold",
    ]
    if rewards.inventory_slots > 0:
        parts.append(f"+{rewards.inventory_slots} inventory slots")
    if rewards.new_item:
        parts.append(f"New item: {rewards.new_item}")
    return ", ".join(parts)


def simulate_progression_to(player: Player, target_level: int) -> List[LevelUpResult]:
    """Grant one threshold of XP at a time until ``target_level`` (capped at MAX_LEVEL)."""
    results: List[LevelUpResult] = []
    while player.level < target_level and player.level < MAX_LEVEL:
        results.extend(add_xp(player, player.xp_to_next_level))
    return results

