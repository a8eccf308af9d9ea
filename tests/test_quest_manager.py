from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence

import pytest

from seedbound.core.rng import RNG
from seedbound.data.errors import DataValidationError
from seedbound.data.quest_loader import QuestLoader
from seedbound.domain.defs import CampaignQuestDef, Consequence, UnlockLocationConsequence
from seedbound.domain.quest_state import Quest
from seedbound.services.quest_manager import QuestManager


def _make_definition(quest_id: str = "main_01", level_range: Sequence[int] = (1, 3)) -> CampaignQuestDef:
    return QuestLoader().from_json(
        {
            "quest": {
                "id": quest_id,
                "title": "The Old Mill",
                "type": "main_quest",
                "level_range": list(level_range),
                "giver": "Elder Mara",
                "starting_location": "village",
                "description": "Something stirs in the mill.",
                "objectives": [
                    {"id": "go", "type": "explore", "description": "Reach the mill", "location": "mill"},
                    {"id": "rats", "type": "combat", "description": "Rats", "enemies": ["rat", "rat"]},
                ],
                "rewards": {"base": {"xp": 2, "gold": 10}},
                "branches": [
                    {
                        "id": "burn_it",
                        "trigger": "mill_cleared",
                        "description": "Burn the mill down",
                        "consequences": [{"type": "unlock_location", "location_id": "ashes"}],
                    }
                ],
                "failure_conditions": [{"condition": "mill_collapses", "result": "Buried alive."}],
            }
        }
    )


def _make_manager() -> QuestManager:
    manager = QuestManager(RNG("manager"))
    manager.register_campaign_quest(_make_definition())
    return manager


def _finish_quest(manager: QuestManager, quest: Quest) -> None:
    for objective in quest.objectives:
        if objective.is_counter:
            manager.progress_objective(quest.id, objective.id, objective.count or 0)
        manager.complete_objective(quest.id, objective.id)


def test_campaign_quest_activation_and_origin() -> None:
    manager = _make_manager()

    assert manager.activate_quest("main_01") is True
    assert manager.get_origin("main_01") == "campaign"
    assert [quest.id for quest in manager.get_active_campaign_quests()] == ["main_01"]
    assert manager.get_active_procedural_quests() == []
    assert manager.activate_quest("missing") is False


def test_procedural_quests_are_registered_and_activatable() -> None:
    manager = _make_manager()

    quests = manager.generate_procedural_quests_for_player(2)
    assert len(quests) == 3
    assert all(manager.get_origin(quest.id) == "procedural" for quest in quests)

    assert manager.activate_quest(quests[0].id) is True
    assert [quest.id for quest in manager.get_active_procedural_quests()] == [quests[0].id]


def test_quest_lives_in_one_place() -> None:
    manager = _make_manager()
    manager.activate_quest("main_01")

    manager.complete_objective("main_01", "go")

    assert manager.get_quest("main_01") is manager.system.get_quest("main_01")
    assert manager.get_quest("main_01").objectives[0].completed is True  # type: ignore[union-attr]
    assert manager.get_quest_progress("main_01") == 50


def test_execute_branch_hands_consequences_to_applier() -> None:
    manager = _make_manager()
    received: List[Consequence] = []

    assert manager.execute_branch("main_01", "burn_it", received.extend) is True
    assert received == [UnlockLocationConsequence(location_id="ashes")]
    assert manager.execute_branch("main_01", "missing", received.extend) is False
    assert manager.execute_branch("nope", "burn_it", received.extend) is False
    assert len(received) == 1


def test_failure_conditions() -> None:
    manager = _make_manager()

    assert manager.check_failure_condition("main_01", "mill_collapses") == "Buried alive."
    assert manager.check_failure_condition("main_01", "rain") is None
    assert manager.get_quest_branches("missing") == []

    manager.activate_quest("main_01")
    assert manager.fail_quest("main_01") is True
    assert manager.get_quest("main_01").failed is True  # type: ignore[union-attr]
    assert manager.get_available_campaign_quests(1) == []


def test_available_campaign_quests_filter_by_level_and_state() -> None:
    manager = _make_manager()
    manager.register_campaign_quest(_make_definition("main_02", (4, 6)))

    assert [quest.id for quest in manager.get_available_campaign_quests(2)] == ["main_01"]
    assert manager.is_quest_available("main_02", 5) is True
    manager.activate_quest("main_01")
    assert manager.get_available_campaign_quests(2) == []


def test_can_complete_objective_through_manager() -> None:
    manager = _make_manager()
    manager.activate_quest("main_01")

    assert manager.can_complete_objective("main_01", "go", [], "village").can_complete is False
    assert manager.can_complete_objective("main_01", "go", [], "mill").can_complete is True
    assert manager.can_complete_objective("main_01", "nope", [], "mill").reason == "Objective not found."


def test_serialize_round_trip_keeps_branch_metadata() -> None:
    manager = _make_manager()
    manager.activate_quest("main_01")
    manager.progress_objective("main_01", "rats")
    procedural = manager.generate_procedural_quest(1)
    manager.activate_quest(procedural.id)
    snapshot = json.loads(json.dumps(manager.serialize()))

    restored = QuestManager(RNG("other"))
    restored.register_campaign_quest(_make_definition())
    restored.deserialize(snapshot)

    assert {quest.id for quest in restored.get_active_quests()} == {"main_01", procedural.id}
    assert restored.get_origin(procedural.id) == "procedural"
    assert restored.get_quest_objectives("main_01")[1].current_count == 1
    assert [branch.id for branch in restored.get_quest_branches("main_01")] == ["burn_it"]
    assert restored.serialize() == snapshot


def test_load_campaign_quests_skips_bad_files(tmp_path: Path) -> None:
    good = tmp_path / "quest.json"
    good.write_text(json.dumps(QuestLoader().to_json(_make_definition("main_09"))), encoding="utf-8")
    manager = QuestManager(RNG(1))

    loaded = manager.load_campaign_quests([good, tmp_path / "missing.json"])

    assert [quest.id for quest in loaded] == ["main_09"]
    assert manager.load_campaign_quest(tmp_path / "missing.json") is None
    assert manager.debug_summary()["campaign_quests"] == 1


def test_completed_procedural_quest_keeps_origin_and_full_progress() -> None:
    manager = _make_manager()
    quest = manager.generate_procedural_quest(1)
    manager.activate_quest(quest.id)

    _finish_quest(manager, quest)

    assert quest.completed is True
    assert manager.get_quest_progress(quest.id) == 100
    assert manager.get_origin(quest.id) == "procedural"

    snapshot = json.loads(json.dumps(manager.serialize()))
    assert snapshot["quest_sources"] == {"main_01": "campaign", quest.id: "procedural"}

    restored = QuestManager(RNG("other"))
    restored.register_campaign_quest(_make_definition())
    restored.deserialize(snapshot)

    assert restored.get_origin(quest.id) == "procedural"
    assert restored.get_origin("main_01") == "campaign"
    assert restored.get_quest_progress(quest.id) == 100
    assert restored.serialize() == snapshot


def test_unknown_origin_in_snapshot_is_rejected() -> None:
    with pytest.raises(DataValidationError):
        QuestManager(RNG(1)).deserialize({"quest_sources": {"q": "rumour"}})


def test_abandoned_campaign_quest_is_offered_again_with_progress_cleared() -> None:
    manager = _make_manager()
    manager.activate_quest("main_01")
    manager.complete_objective("main_01", "go")
    manager.progress_objective("main_01", "rats")

    assert manager.abandon_quest("main_01") is True

    available = manager.get_available_campaign_quests(1)
    assert [quest.id for quest in available] == ["main_01"]
    assert [objective.completed for objective in available[0].objectives] == [False, False]
    assert available[0].objectives[1].current_count == 0
    assert manager.get_quest_progress("main_01") == 0
    assert manager.activate_quest("main_01") is True


def test_abandoned_procedural_quest_is_dropped() -> None:
    manager = _make_manager()
    quest = manager.generate_procedural_quest(1)
    manager.activate_quest(quest.id)

    assert manager.abandon_quest(quest.id) is True

    assert manager.get_quest(quest.id) is None
    assert manager.activate_quest(quest.id) is False
    assert manager.get_origin(quest.id) == "procedural"
    assert manager.debug_summary()["procedural_quests"] == 0
    assert manager.serialize()["quest_sources"][quest.id] == "procedural"
