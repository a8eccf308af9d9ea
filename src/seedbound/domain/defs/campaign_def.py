"""Campaign quest metadata: decision branches, consequences and failure conditions."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from seedbound.domain.quest_state import Quest, RewardBundle


@dataclass(frozen=True, slots=True)
class RelationshipConsequence:
    target: str
    value: int = 0


@dataclass(frozen=True, slots=True)
class RewardConsequence:
    xp: int = 0
    gold: int = 0
    items: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class UnlockQuestConsequence:
    quest_id: str


@dataclass(frozen=True, slots=True)
class UnlockLocationConsequence:
    location_id: str


Consequence = Union[
    RelationshipConsequence,
    RewardConsequence,
    UnlockQuestConsequence,
    UnlockLocationConsequence,
]


@dataclass(frozen=True, slots=True)
class BranchDef:
    """A named decision point and the consequences of choosing it."""

    id: str
    trigger: str
    description: str
    consequences: Tuple[Consequence, ...] = ()


@dataclass(frozen=True, slots=True)
class FailureConditionDef:
    condition: str
    result: str


@dataclass(slots=True)
class CampaignQuestDef:
    """Parsed campaign quest plus the metadata the runtime quest does not carry."""

    quest: Quest
    base_rewards: RewardBundle
    bonus_rewards: RewardBundle | None = None
    branches: Tuple[BranchDef, ...] = ()
    failure_conditions: Tuple[FailureConditionDef, ...] = field(default_factory=tuple)
