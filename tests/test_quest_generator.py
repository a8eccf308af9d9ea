from __future__ import annotations

from seedbound.core.rng import RNG
from seedbound.domain.quest_state import quest_to_dict
from seedbound.services.quest_generator import TITLE_PREFIXES, QuestGenerator, scale_rewards
from tests.helpers.scripted_rng import ScriptedRNG


def _generate(faces: tuple[int, ...], level: int = 1):
    return QuestGenerator(ScriptedRNG(faces, seed="quests")).generate(level)


def test_same_seed_generates_same_quest() -> None:
    quest_a = QuestGenerator(RNG("village")).generate(2)
    quest_b = QuestGenerator(RNG("village")).generate(2)

    assert quest_to_dict(quest_a) == quest_to_dict(quest_b)


def test_combat_archetype_builds_counter_objective() -> None:
    quest = _generate((3, 4, 1, 1, 6, 6, 6, 6), level=3)

    assert quest.giver == "Mysterious Hermit"
    assert quest.starting_location == "Haunted Manor"
    assert quest.type == "side_quest"
    assert quest.level_range == (2, 4)
    assert (quest.rewards.xp, quest.rewards.gold) == (10, 100)
    assert quest.title.endswith(" in Haunted Manor")
    assert quest.title.split(" in ")[0] in TITLE_PREFIXES["combat"]
    assert "Mysterious Hermit" in quest.description or "Haunted Manor" in quest.description

    assert len(quest.objectives) == 1
    objective = quest.objectives[0]
    assert objective.type == "combat"
    assert objective.count is not None and 2 <= objective.count <= 4
    assert objective.current_count == 0
    assert objective.enemies == ["generic_enemy"] * objective.count
    assert objective.rewards.gold == objective.count * 5
    assert objective.rewards.xp == max(1, objective.count // 2)


def test_investigate_archetype_has_three_chained_objectives() -> None:
    quest = _generate((1, 1, 2, 2, 2, 2, 2, 2))

    assert [objective.type for objective in quest.objectives] == ["explore", "talk", "collect"]
    assert quest.objectives[1].count == 2
    assert quest.objectives[2].count == 3
    assert quest.objectives[2].items == ["evidence"]
    assert all(objective.required for objective in quest.objectives)


def test_delivery_archetype_collects_then_delivers() -> None:
    quest = _generate((1, 2, 3, 3, 3, 3, 3, 3))

    collect, deliver = quest.objectives
    assert collect.type == "collect" and collect.count == 1 and collect.items == ["package"]
    assert deliver.type == "delivery" and deliver.location == quest.starting_location


def test_level_range_floor_is_one() -> None:
    quest = QuestGenerator(RNG(4)).generate(1, "random_event")

    assert quest.level_range == (1, 2)
    assert quest.type == "random_event"


def test_reward_scaling_floors() -> None:
    assert (scale_rewards(1, 10, 1).xp, scale_rewards(1, 10, 1).gold) == (1, 10)
    assert (scale_rewards(1, 15, 2).xp, scale_rewards(1, 15, 2).gold) == (1, 22)
    assert scale_rewards(5, 50, 10).gold == 275


def test_quest_ids_are_unique_within_a_session() -> None:
    generator = QuestGenerator(RNG("ids"))
    ids = {generator.generate(1).id for _ in range(20)}

    assert len(ids) == 20
