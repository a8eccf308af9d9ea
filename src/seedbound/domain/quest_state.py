"""Quest and objective state data structures."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple

from seedbound.core.types import ObjectiveType, QuestKind


@dataclass(slots=True)
class RewardBundle:
    """XP, gold and item ids granted on completion."""

    xp: int = 0
    gold: int = 0
    items: List[str] = field(default_factory=list)


@dataclass(slots=True)
class QuestObjective:
    """A single step of a quest; counter objectives carry ``count``."""

    id: str
    type: ObjectiveType
    description: str
    required: bool = True
    completed: bool = False
    location: str | None = None
    target_npc: str | None = None
    enemies: List[str] | None = None
    items: List[str] | None = None
    count: int | None = None
    current_count: int | None = None
    rewards: RewardBundle = field(default_factory=RewardBundle)
    rewards_claimed: bool = False

    @property
    def is_counter(self) -> bool:
        return bool(self.count)


@dataclass(slots=True)
class Quest:
    """A quest from either the campaign catalog or the procedural generator."""

    id: str
    title: str
    type: QuestKind
    level_range: Tuple[int, int]
    giver: str
    starting_location: str
    description: str
    objectives: List[QuestObjective] = field(default_factory=list)
    rewards: RewardBundle = field(default_factory=RewardBundle)
    active: bool = False
    completed: bool = False
    failed: bool = False

    def find_objective(self, objective_id: str) -> QuestObjective | None:
        for objective in self.objectives:
            if objective.id == objective_id:
                return objective
        return None

    def required_objectives(self) -> List[QuestObjective]:
        return [objective for objective in self.objectives if objective.required]


def rewards_to_dict(rewards: RewardBundle) -> Dict[str, Any]:
    return {"xp": rewards.xp, "gold": rewards.gold, "items": list(rewards.items)}


def rewards_from_dict(payload: Mapping[str, Any] | None) -> RewardBundle:
    if not payload:
        return RewardBundle()
    return RewardBundle(
        xp=int(payload.get("xp", 0) or 0),
        gold=int(payload.get("gold", 0) or 0),
        items=[str(item) for item in payload.get("items") or []],
    )


def objective_to_dict(objective: QuestObjective) -> Dict[str, Any]:
    return {
        "id": objective.id,
        "type": objective.type,
        "description": objective.description,
        "required": objective.required,
        "completed": objective.completed,
        "location": objective.location,
        "target_npc": objective.target_npc,
        "enemies": list(objective.enemies) if objective.enemies is not None else None,
        "items": list(objective.items) if objective.items is not None else None,
        "count": objective.count,
        "current_count": objective.current_count,
        "rewards": rewards_to_dict(objective.rewards),
        "rewards_claimed": objective.rewards_claimed,
    }


def objective_from_dict(payload: Mapping[str, Any]) -> QuestObjective:
    enemies = payload.get("enemies")
    items = payload.get("items")
    return QuestObjective(
        id=str(payload["id"]),
        type=payload["type"],
        description=str(payload.get("description", "")),
        required=bool(payload.get("required", True)),
        completed=bool(payload.get("completed", False)),
        location=payload.get("location"),
        target_npc=payload.get("target_npc"),
        enemies=[str(enemy) for enemy in enemies] if enemies is not None else None,
        items=[str(item) for item in items] if items is not None else None,
        count=payload.get("count"),
        current_count=payload.get("current_count"),
        rewards=rewards_from_dict(payload.get("rewards")),
        rewards_claimed=bool(payload.get("rewards_claimed", False)),
    )


def quest_to_dict(quest: Quest) -> Dict[str, Any]:
    """Return a JSON-serializable snapshot of the quest."""
    return {
        "id": quest.id,
        "title": quest.title,
        "type": quest.type,
        "level_range": [quest.level_range[0], quest.level_range[1]],
        "giver": quest.giver,
        "starting_location": quest.starting_location,
        "description": quest.description,
        "objectives": [objective_to_dict(objective) for objective in quest.objectives],
        "rewards": rewards_to_dict(quest.rewards),
        "active": quest.active,
        "completed": quest.completed,
        "failed": quest.failed,
    }


def quest_from_dict(payload: Mapping[str, Any]) -> Quest:
    """Rebuild a quest from :func:`quest_to_dict` output."""
    level_range = payload.get("level_range") or [1, 1]
    return Quest(
        id=str(payload["id"]),
        title=str(payload.get("title", "")),
        type=payload.get("type", "side_quest"),
        level_range=(int(level_range[0]), int(level_range[1])),
        giver=str(payload.get("giver", "")),
        starting_location=str(payload.get("starting_location", "")),
        description=str(payload.get("description", "")),
        objectives=[objective_from_dict(entry) for entry in payload.get("objectives") or []],
        rewards=rewards_from_dict(payload.get("rewards")),
        active=bool(payload.get("active", False)),
        completed=bool(payload.get("completed", False)),
        failed=bool(payload.get("failed", False)),
    )


@dataclass(frozen=True, slots=True)
class ObjectiveCheck:
    """Precondition check for completing an objective."""

    can_complete: bool
    reason: str | None = None
