"""Procedural quest synthesis from 2d6 table lookups."""
from __future__ import annotations

import math
from typing import Dict, List, Tuple

from structlog import get_logger

from seedbound.core.rng import RNG
from seedbound.core.types import ObjectiveType, QuestKind
from seedbound.domain.quest_state import Quest, QuestObjective, RewardBundle

logger = get_logger(__name__)

QUEST_TYPE_TABLE: Dict[int, ObjectiveType] = {
    2: "investigate",
    3: "delivery",
    4: "talk",
    5: "collect",
    6: "explore",
    7: "combat",
    8: "combat",
    9: "escort",
    10: "explore",
    11: "delivery",
    12: "investigate",
}

NPC_TABLE: Dict[int, str] = {
    2: "Mysterious Hermit",
    3: "Travelling Merchant",
    4: "Corrupt Guard",
    5: "Desperate Farmer",
    6: "Village Healer",
    7: "Gossiping Innkeeper",
    8: "Village Blacksmith",
    9: "Dark Priest",
    10: "Ruined Noble",
    11: "Exiled Mage",
    12: "Cult Leader",
}

LOCATION_TABLE: Dict[int, str] = {
    2: "Forbidden Catacombs",
    3: "Cursed Forest",
    4: "Ancient Ruins",
    5: "Abandoned Village",
    6: "Raven Tavern",
    7: "Market Square",
    8: "Watchman's Tower",
    9: "Sealed Crypt",
    10: "Deep Mines",
    11: "Crystal Cavern",
    12: "Haunted Manor",
}

REWARD_TABLE: Dict[int, Tuple[int, int]] = {
    2: (3, 25),
    3: (1, 10),
    4: (1, 15),
    5: (2, 10),
    6: (1, 20),
    7: (2, 15),
    8: (2, 20),
    9: (2, 25),
    10: (3, 20),
    11: (3, 30),
    12: (5, 50),
}

TITLE_PREFIXES: Dict[ObjectiveType, Tuple[str, ...]] = {
    "delivery": ("Urgent Delivery", "The Package", "Courier Run"),
    "combat": ("Extermination", "Clean Sweep", "The Hunt"),
    "explore": ("Expedition", "Exploration", "Discovery"),
    "talk": ("Audience", "Meeting", "Negotiation"),
    "collect": ("Gathering", "The Search", "Collection"),
    "escort": ("Escort", "Protection", "Safe Passage"),
    "investigate": ("Investigation", "The Mystery", "The Case"),
}

DESCRIPTION_TEMPLATES: Dict[ObjectiveType, Tuple[str, ...]] = {
    "delivery": (
        "{giver} needs you to deliver an important package to {location}.",
        "You must carry a secret object to {location} for {giver}.",
    ),
    "combat": (
        "{giver} asks you to wipe out the threats lurking in {location}.",
        "Dangerous creatures stalk {location}. {giver} needs your help.",
    ),
    "explore": (
        "{giver} wants you to explore {location} and report what you find.",
        "Secrets lie hidden in {location}. {giver} sends you to look.",
    ),
    "talk": (
        "{giver} needs you to speak with someone in {location}.",
        "You must carry a message from {giver} to a contact in {location}.",
    ),
    "collect": (
        "{giver} is after items that can only be found in {location}.",
        "You need to gather rare materials from {location} for {giver}.",
    ),
    "escort": (
        "{giver} needs protection on the road to {location}.",
        "You must escort {giver} safely to {location}.",
    ),
    "investigate": (
        "{giver} hires you to solve a mystery in {location}.",
        "Strange things happen in {location}. {giver} wants answers.",
    ),
}

COMBAT_ENEMY_RANGE = (2, 4)
COLLECT_ITEM_RANGE = (3, 6)
GENERIC_ENEMY_ID = "generic_enemy"


def level_multiplier(player_level: int) -> float:
    return 1 + (player_level - 1) * 0.5


def scale_rewards(xp: int, gold: int, player_level: int) -> RewardBundle:
    multiplier = level_multiplier(player_level)
    return RewardBundle(xp=math.floor(xp * multiplier), gold=math.floor(gold * multiplier))


class QuestGenerator:
    """Builds side quests from four independent 2d6 lookups.

    Draw order is fixed (archetype, giver, location, reward, then objectives, title,
    description and finally the quest id) so a seed always yields the same quest.
    """

    def __init__(self, rng: RNG) -> None:
        self._rng = rng

    def generate(self, player_level: int, quest_type: QuestKind = "side_quest") -> Quest:
        archetype = QUEST_TYPE_TABLE[self._rng.roll_2d6().total]
        giver = NPC_TABLE[self._rng.roll_2d6().total]
        location = LOCATION_TABLE[self._rng.roll_2d6().total]
        base_xp, base_gold = REWARD_TABLE[self._rng.roll_2d6().total]
        rewards = scale_rewards(base_xp, base_gold, player_level)

        objectives = self._build_objectives(archetype, location)
        title = f"{self._rng.pick(TITLE_PREFIXES[archetype])} in {location}"
        description = self._rng.pick(DESCRIPTION_TEMPLATES[archetype]).format(giver=giver, location=location)

        quest = Quest(
            id=self._rng.uuid(),
            title=title,
            type=quest_type,
            level_range=(max(1, player_level - 1), player_level + 1),
            giver=giver,
            starting_location=location,
            description=description,
            objectives=objectives,
            rewards=rewards,
        )
        logger.debug(
            "Procedural quest generated",
            quest_id=quest.id,
            archetype=archetype,
            giver=giver,
            location=location,
            player_level=player_level,
        )
        return quest

    def _build_objectives(self, archetype: ObjectiveType, location: str) -> List[QuestObjective]:
        rng = self._rng
        if archetype == "delivery":
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="collect",
                    description="Pick up the package",
                    items=["package"],
                    count=1,
                    current_count=0,
                ),
                QuestObjective(
                    id=rng.uuid(),
                    type="delivery",
                    description=f"Deliver the package to {location}",
                    location=location,
                    items=["package"],
                    rewards=RewardBundle(xp=1),
                ),
            ]
        if archetype == "combat":
            enemy_count = rng.next_int(*COMBAT_ENEMY_RANGE)
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="combat",
                    description=f"Defeat {enemy_count} enemies in {location}",
                    location=location,
                    enemies=[GENERIC_ENEMY_ID] * enemy_count,
                    count=enemy_count,
                    current_count=0,
                    rewards=RewardBundle(xp=max(1, enemy_count // 2), gold=enemy_count * 5),
                )
            ]
        if archetype == "explore":
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="explore",
                    description=f"Explore {location}",
                    location=location,
                    rewards=RewardBundle(xp=1),
                ),
                QuestObjective(
                    id=rng.uuid(),
                    type="collect",
                    description="Find 3 clues",
                    items=["clue"],
                    count=3,
                    current_count=0,
                    rewards=RewardBundle(xp=1),
                ),
            ]
        if archetype == "talk":
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="talk",
                    description=f"Talk to the informant in {location}",
                    location=location,
                    target_npc="informant",
                    rewards=RewardBundle(xp=1),
                )
            ]
        if archetype == "collect":
            item_count = rng.next_int(*COLLECT_ITEM_RANGE)
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="collect",
                    description=f"Collect {item_count} items in {location}",
                    location=location,
                    items=["quest_item"],
                    count=item_count,
                    current_count=0,
                    rewards=RewardBundle(xp=2, gold=10),
                )
            ]
        if archetype == "escort":
            return [
                QuestObjective(
                    id=rng.uuid(),
                    type="escort",
                    description=f"Escort the traveller to {location}",
                    location=location,
                    target_npc="escort_target",
                    rewards=RewardBundle(xp=2, gold=15),
                )
            ]
        # investigate
        return [
            QuestObjective(
                id=rng.uuid(),
                type="explore",
                description=f"Investigate {location}",
                location=location,
                rewards=RewardBundle(xp=1),
            ),
            QuestObjective(
                id=rng.uuid(),
                type="talk",
                description="Question 2 witnesses",
                count=2,
                current_count=0,
                rewards=RewardBundle(xp=1),
            ),
            QuestObjective(
                id=rng.uuid(),
                type="collect",
                description="Gather 3 pieces of evidence",
                items=["evidence"],
                count=3,
                current_count=0,
                rewards=RewardBundle(xp=1),
            ),
        ]
