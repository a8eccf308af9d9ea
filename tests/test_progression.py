from __future__ import annotations

from seedbound.domain.entities import Attributes, Player
from seedbound.domain.progression import (
    MAX_LEVEL,
    add_xp,
    apply_attribute_point,
    calculate_power_level,
    calculate_rewards,
    can_level_up,
    get_level_rewards_description,
    get_progression_info,
    get_xp_for_next_level,
    get_xp_progress,
    reset_progression,
    simulate_progression_to,
)


def _make_player(**overrides: object) -> Player:
    player = Player(name="Ash", attributes=Attributes(FUE=2, AGI=2, SAB=1, SUE=1))
    for key, value in overrides.items():
        setattr(player, key, value)
    return player


def test_large_grant_chains_level_ups() -> None:
    player = _make_player(xp=2)

    results = add_xp(player, 5)

    assert len(results) == 2
    assert [result.new_level for result in results] == [2, 3]
    assert player.level == 3
    assert player.xp == 1
    assert player.xp_to_next_level == 3


def test_xp_never_goes_negative() -> None:
    player = _make_player(xp=1)

    assert add_xp(player, -10) == []
    assert player.xp == 0


def test_level_up_heals_and_pays_gold() -> None:
    player = _make_player(wounds=1, fatigue=2, gold=4)

    (result,) = add_xp(player, 3)

    assert result.rewards.attribute_points == 1
    assert player.wounds == player.max_wounds
    assert player.fatigue == 0
    assert player.gold == 9


def test_milestone_rewards() -> None:
    level_three = calculate_rewards(3)
    level_five = calculate_rewards(5)
    level_ten = calculate_rewards(10)

    assert (level_three.inventory_slots, level_three.new_item) == (2, "advanced_gear")
    assert (level_five.attribute_points, level_five.gold_bonus, level_five.inventory_slots) == (2, 10, 2)
    assert level_five.new_item is None
    assert (level_ten.attribute_points, level_ten.gold_bonus, level_ten.inventory_slots) == (3, 50, 5)
    assert level_ten.new_item == "ultimate_gear"
    assert calculate_rewards(4).inventory_slots == 0


def test_no_levels_past_max() -> None:
    player = _make_player()

    results = add_xp(player, 100)

    assert player.level == MAX_LEVEL
    assert len(results) == MAX_LEVEL - 1
    assert results[-1].max_level_reached is True
    assert get_xp_for_next_level(MAX_LEVEL) == 0
    assert can_level_up(player) is False
    assert get_xp_progress(player) == 100


def test_attribute_point_at_cap_fails_without_mutation() -> None:
    player = _make_player(attributes=Attributes(FUE=3, AGI=0, SAB=0, SUE=0))

    result = apply_attribute_point(player, "FUE")

    assert result.success is False
    assert player.attributes.FUE == 3


def test_attribute_point_recomputes_derived_stats() -> None:
    player = _make_player(level=4)

    result = apply_attribute_point(player, "SAB")

    assert result.success is True
    assert player.attributes.SAB == 2
    assert player.max_wounds == 5
    assert player.max_fatigue == 5


def test_invalid_attribute_name_is_rejected() -> None:
    result = apply_attribute_point(_make_player(), "CHA")

    assert result.success is False
    assert result.message == "Invalid attribute selection."


def test_progression_info_and_power_level() -> None:
    player = _make_player(xp=2)

    info = get_progression_info(player)

    assert (info.current_level, info.xp_progress, info.can_level_up) == (1, 66, False)
    assert calculate_power_level(player) == 10 + 10 + 10 + 5 + 3 + 6


def test_reset_progression_keeps_attributes_when_asked() -> None:
    player = _make_player(level=6, xp=2, gold=50, inventory=["sword"], attributes=Attributes(FUE=3, AGI=3))

    reset_progression(player, keep_attributes=True)
    assert (player.level, player.xp, player.gold, player.inventory) == (1, 0, 0, [])
    assert player.attributes.FUE == 3

    reset_progression(player)
    assert player.attributes.to_dict() == {"FUE": 2, "AGI": 2, "SAB": 1, "SUE": 1}


def test_simulate_progression_and_description() -> None:
    player = _make_player()

    results = simulate_progression_to(player, 5)

    assert player.level == 5
    assert [result.new_level for result in results] == [2, 3, 4, 5]
    description = get_level_rewards_description(10)
    assert "+3 attribute point(s)" in description
    assert "ultimate_gear" in description
