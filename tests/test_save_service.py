from __future__ import annotations

import json

import pytest

from seedbound.data.quest_loader import QuestLoader
from seedbound.domain.defs import CampaignQuestDef
from seedbound.domain.entities import Attributes, Player
from seedbound.services.errors import SaveLoadError
from seedbound.services.game_session import GameSession
from seedbound.services.save_service import SaveService


def _make_definition() -> CampaignQuestDef:
    return QuestLoader().from_json(
        {
            "quest": {
                "id": "main_01",
                "title": "The Old Mill",
                "type": "main_quest",
                "level_range": [1, 3],
                "giver": "Elder Mara",
                "starting_location": "village",
                "description": "Something stirs in the mill.",
                "objectives": [{"id": "rats", "type": "combat", "description": "Rats", "enemies": ["rat", "rat"]}],
                "rewards": {"base": {"xp": 2, "gold": 10}},
                "branches": [
                    {"id": "burn", "trigger": "done", "description": "Burn it", "consequences": []}
                ],
            }
        }
    )


def _make_session() -> GameSession:
    player = Player(name="Ash", gold=12, inventory=["rope"], attributes=Attributes(FUE=2, AGI=1))
    session = GameSession(player, seed="save-seed")
    session.quests.register_campaign_quest(_make_definition())
    session.quests.activate_quest("main_01")
    session.quests.progress_objective("main_01", "rats")
    session.state.unlocked_locations.append("mill")
    session.state.relationships["mara"] = 2
    session.dice.roll(1)
    return session


def test_round_trip_resumes_identical_rolls() -> None:
    service = SaveService()
    session = _make_session()
    payload = json.loads(json.dumps(service.serialize(session)))

    restored = service.deserialize(payload, campaign_quests=[_make_definition()])

    assert restored.player.name == "Ash"
    assert restored.player.inventory == ["rope"]
    assert restored.player.attributes.FUE == 2
    assert restored.state.seed == "save-seed"
    assert restored.state.unlocked_locations == ["mill"]
    assert restored.state.relationships == {"mara": 2}
    assert restored.quests.get_quest_objectives("main_01")[0].current_count == 1
    assert [branch.id for branch in restored.quests.get_quest_branches("main_01")] == ["burn"]
    assert [restored.dice.roll(0) for _ in range(5)] == [session.dice.roll(0) for _ in range(5)]


def test_payload_shape() -> None:
    payload = SaveService().serialize(_make_session())

    assert payload["save_version"] == SaveService.SAVE_VERSION
    assert set(payload) == {"save_version", "seed", "rng", "player", "quests", "world"}
    assert isinstance(payload["rng"]["state"], int)
    assert payload["player"]["xpToNextLevel"] == 3
    assert payload["quests"]["quest_sources"] == {"main_01": "campaign"}


def test_version_mismatch_is_rejected() -> None:
    payload = SaveService().serialize(_make_session())
    payload["save_version"] = 99

    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("rng", {"state": 2**32}),
        ("rng", {"state": "abc"}),
        ("player", {"name": ""}),
        ("quests", {"active_quests": "nope"}),
        ("seed", None),
    ],
)
def test_invalid_sections_are_rejected(key: str, value: object) -> None:
    payload = SaveService().serialize(_make_session())
    payload[key] = value

    with pytest.raises(SaveLoadError):
        SaveService().deserialize(payload)


def test_non_mapping_payload_is_rejected() -> None:
    with pytest.raises(SaveLoadError):
        SaveService().deserialize([])  # type: ignore[arg-type]
