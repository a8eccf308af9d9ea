"""Unified quest management for campaign and procedural quests."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence, Tuple, Union

from structlog import get_logger

from seedbound.core.rng import RNG
from seedbound.core.types import QuestKind, QuestOrigin
from seedbound.data.errors import DataError, DataValidationError
from seedbound.data.quest_loader import QuestLoader
from seedbound.domain.defs import BranchDef, CampaignQuestDef, Consequence, FailureConditionDef
from seedbound.domain.quest_state import ObjectiveCheck, Quest, QuestObjective, quest_from_dict, quest_to_dict
from seedbound.services.quest_service import ObjectiveCompletion, ObjectiveProgress, QuestSystem

logger = get_logger(__name__)

ConsequenceApplier = Callable[[Sequence[Consequence]], None]

_ORIGINS: Tuple[QuestOrigin, ...] = ("campaign", "procedural")


@dataclass(slots=True)
class CampaignEntry:
    quest: Quest
    branches: Tuple[BranchDef, ...] = ()
    failure_conditions: Tuple[FailureConditionDef, ...] = field(default_factory=tuple)

    @property
    def origin(self) -> QuestOrigin:
        return "campaign"


@dataclass(slots=True)
class ProceduralEntry:
    quest: Quest

    @property
    def origin(self) -> QuestOrigin:
        return "procedural"


QuestEntry = Union[CampaignEntry, ProceduralEntry]


def _reset_progress(quest: Quest) -> None:
    for objective in quest.objectives:
        objective.completed = False
        objective.rewards_claimed = False
        if objective.is_counter:
            objective.current_count = 0


class QuestManager:
    """Single registry of known quests keyed by id, backed by one QuestSystem.

    Every mutation goes through the QuestSystem so a quest lives in exactly one place
    at runtime; the registry adds origin and campaign branch metadata on top.
    """

    def __init__(self, rng: RNG, *, loader: QuestLoader | None = None) -> None:
        self._system = QuestSystem(rng)
        self._loader = loader or QuestLoader()
        self._registry: Dict[str, QuestEntry] = {}
        # Origins of quests with no live registry entry.
        self._retired_origins: Dict[str, QuestOrigin] = {}

    @property
    def system(self) -> QuestSystem:
        return self._system

    # -----------------------
    # Registration
    # -----------------------
    def register_campaign_quest(self, definition: CampaignQuestDef) -> Quest:
        quest = definition.quest
        self._retired_origins.pop(quest.id, None)
        self._registry[quest.id] = CampaignEntry(
            quest=quest,
            branches=tuple(definition.branches),
            failure_conditions=tuple(definition.failure_conditions),
        )
        logger.info("Campaign quest loaded", quest_id=quest.id, title=quest.title)
        return quest

    def load_campaign_quest(self, path: Path | str) -> Quest | None:
        try:
            definition = self._loader.load_from_path(path)
        except DataError as exc:
            logger.error("Campaign quest failed to load", path=str(path), error=str(exc))
            return None
        return self.register_campaign_quest(definition)

    def load_campaign_quests(self, paths: Sequence[Path | str]) -> List[Quest]:
        return [self.register_campaign_quest(definition) for definition in self._loader.load_multiple(paths)]

    def generate_procedural_quest(self, player_level: int, quest_type: QuestKind = "side_quest") -> Quest:
        quest = self._system.generate_quest(player_level, quest_type)
        self._registry[quest.id] = ProceduralEntry(quest=quest)
        logger.info("Procedural quest generated", quest_id=quest.id, title=quest.title)
        return quest

    def generate_procedural_quests_for_player(self, player_level: int, count: int = 3) -> List[Quest]:
        return [self.generate_procedural_quest(player_level, "side_quest") for _ in range(count)]

    # -----------------------
    # Lifecycle (delegated)
    # -----------------------
    def activate_quest(self, quest_id: str) -> bool:
        entry = self._registry.get(quest_id)
        quest = entry.quest if entry is not None else self._system.get_quest(quest_id)
        if quest is None:
            logger.warning("Quest not found", quest_id=quest_id)
            return False
        return self._system.activate_quest(quest)

    def complete_objective(self, quest_id: str, objective_id: str) -> ObjectiveCompletion:
        completion = self._system.complete_objective(quest_id, objective_id)
        if completion.quest_completed:
            self._retire(quest_id)
        return completion

    def progress_objective(self, quest_id: str, objective_id: str, amount: int = 1) -> ObjectiveProgress:
        return self._system.progress_objective(quest_id, objective_id, amount)

    def abandon_quest(self, quest_id: str) -> bool:
        """Drop an active quest; a campaign quest goes back on offer with its progress cleared."""
        if not self._system.abandon_quest(quest_id):
            return False
        entry = self._registry.get(quest_id)
        if isinstance(entry, CampaignEntry):
            _reset_progress(entry.quest)
        else:
            self._retire(quest_id)
        return True

    def fail_quest(self, quest_id: str) -> bool:
        if not self._system.fail_quest(quest_id):
            return False
        self._retire(quest_id)
        return True

    def _retire(self, quest_id: str) -> None:
        entry = self._registry.get(quest_id)
        if isinstance(entry, ProceduralEntry):
            del self._registry[quest_id]
            self._retired_origins[quest_id] = entry.origin

    # -----------------------
    # Queries
    # -----------------------
    def get_quest(self, quest_id: str) -> Quest | None:
        active = self._system.get_quest(quest_id)
        if active is not None:
            return active
        entry = self._registry.get(quest_id)
        return entry.quest if entry is not None else None

    def get_origin(self, quest_id: str) -> QuestOrigin | None:
        entry = self._registry.get(quest_id)
        if entry is not None:
            return entry.origin
        return self._retired_origins.get(quest_id)

    def get_active_quests(self) -> List[Quest]:
        return self._system.get_active_quests()

    def get_active_campaign_quests(self) -> List[Quest]:
        return [quest for quest in self._system.get_active_quests() if self.get_origin(quest.id) == "campaign"]

    def get_active_procedural_quests(self) -> List[Quest]:
        return [
            quest for quest in self._system.get_active_quests() if self.get_origin(quest.id) == "procedural"
        ]

    def get_quest_objectives(self, quest_id: str) -> List[QuestObjective]:
        return self._system.get_quest_objectives(quest_id)

    def get_quest_progress(self, quest_id: str) -> int:
        return self._system.get_quest_progress(quest_id)

    def get_completed_quests(self) -> List[str]:
        return self._system.get_completed_quests()

    def is_quest_available(self, quest_id: str, player_level: int) -> bool:
        quest = self.get_quest(quest_id)
        if quest is None:
            return False
        return self._system.is_quest_available(quest, player_level)

    def get_available_campaign_quests(self, player_level: int) -> List[Quest]:
        """Campaign quests in level range that are neither active nor completed."""
        active_ids = {quest.id for quest in self._system.get_active_quests()}
        completed_ids = set(self._system.get_completed_quests())
        available: List[Quest] = []
        for quest_id, entry in self._registry.items():
            if not isinstance(entry, CampaignEntry):
                continue
            if quest_id in active_ids or quest_id in completed_ids or entry.quest.failed:
                continue
            if self._system.is_quest_available(entry.quest, player_level):
                available.append(entry.quest)
        return available

    def get_quest_branches(self, quest_id: str) -> List[BranchDef]:
        entry = self._registry.get(quest_id)
        if isinstance(entry, CampaignEntry):
            return list(entry.branches)
        return []

    def get_quest_failure_conditions(self, quest_id: str) -> List[FailureConditionDef]:
        entry = self._registry.get(quest_id)
        if isinstance(entry, CampaignEntry):
            return list(entry.failure_conditions)
        return []

    def check_failure_condition(self, quest_id: str, condition: str) -> str | None:
        for failure in self.get_quest_failure_conditions(quest_id):
            if failure.condition == condition:
                return failure.result
        return None

    def can_complete_objective(
        self,
        quest_id: str,
        objective_id: str,
        inventory: Sequence[str],
        current_location: str,
    ) -> ObjectiveCheck:
        for objective in self._system.get_quest_objectives(quest_id):
            if objective.id == objective_id:
                return QuestLoader.can_complete_objective(objective, inventory, current_location)
        return ObjectiveCheck(can_complete=False, reason="Objective not found.")

    # -----------------------
    # Branches
    # -----------------------
    def execute_branch(self, quest_id: str, branch_id: str, apply_consequences: ConsequenceApplier) -> bool:
        """Hand a campaign branch's consequences to the caller-supplied applier."""
        entry = self._registry.get(quest_id)
        if not isinstance(entry, CampaignEntry):
            logger.warning("No campaign metadata for quest", quest_id=quest_id)
            return False
        branch = next((candidate for candidate in entry.branches if candidate.id == branch_id), None)
        if branch is None:
            logger.warning("Branch not found", quest_id=quest_id, branch_id=branch_id)
            return False
        logger.info(
            "Branch executed",
            quest_id=quest_id,
            branch_id=branch_id,
            consequences=len(branch.consequences),
        )
        apply_consequences(branch.consequences)
        return True

    # -----------------------
    # Persistence
    # -----------------------
    def serialize(self) -> Dict[str, Any]:
        return {
            "active_quests": [quest_to_dict(quest) for quest in self._system.get_active_quests()],
            "completed_quests": self._system.get_completed_quests(),
            "quest_sources": self._quest_sources(),
        }

    def _quest_sources(self) -> Dict[str, QuestOrigin]:
        sources = dict(self._retired_origins)
        sources.update((quest_id, entry.origin) for quest_id, entry in self._registry.items())
        return sources

    def deserialize(self, payload: Mapping[str, Any]) -> None:
        """Restore active quests, completed ids and the origin map from :meth:`serialize` output.

        Campaign metadata already registered (from loaded campaign files) is kept and
        re-attached to the restored quest objects. Origins of quests that are no longer
        live are kept by id only.
        """
        if not isinstance(payload, Mapping):
            raise DataValidationError("Quest snapshot must be an object.")
        active_raw = payload.get("active_quests", [])
        completed_raw = payload.get("completed_quests", [])
        sources_raw = payload.get("quest_sources", {})
        if not isinstance(active_raw, list) or not isinstance(completed_raw, list):
            raise DataValidationError("Quest snapshot lists are malformed.")
        if not isinstance(sources_raw, Mapping):
            raise DataValidationError("quest_sources must be an object.")
        if not all(isinstance(quest_id, str) for quest_id in completed_raw):
            raise DataValidationError("completed_quests entries must be strings.")
        for quest_id, origin in sources_raw.items():
            if origin not in _ORIGINS:
                raise DataValidationError(f"quest_sources.{quest_id} must be one of {_ORIGINS}.")

        restored: List[Quest] = []
        for index, raw in enumerate(active_raw):
            if not isinstance(raw, Mapping):
                raise DataValidationError(f"active_quests[{index}] must be an object.")
            try:
                quest = quest_from_dict(raw)
            except (KeyError, TypeError, ValueError, IndexError) as exc:
                raise DataValidationError(f"active_quests[{index}] is invalid: {exc}") from exc
            origin = sources_raw.get(quest.id, "procedural")
            existing = self._registry.get(quest.id)
            if origin == "campaign":
                if isinstance(existing, CampaignEntry):
                    existing.quest = quest
                else:
                    self._registry[quest.id] = CampaignEntry(quest=quest)
            else:
                self._registry[quest.id] = ProceduralEntry(quest=quest)
            restored.append(quest)

        self._retired_origins = {
            quest_id: origin for quest_id, origin in sources_raw.items() if quest_id not in self._registry
        }
        self._system.restore(restored, completed_raw)
        logger.info("Quest state restored", active=len(restored), completed=len(completed_raw))

    def debug_summary(self) -> Dict[str, Any]:
        return {
            "campaign_quests": sum(1 for entry in self._registry.values() if isinstance(entry, CampaignEntry)),
            "procedural_quests": sum(
                1 for entry in self._registry.values() if isinstance(entry, ProceduralEntry)
            ),
            "active": [
                {
                    "id": quest.id,
                    "title": quest.title,
                    "origin": self.get_origin(quest.id),
                    "progress": self._system.get_quest_progress(quest.id),
                }
                for quest in self._system.get_active_quests()
            ],
            "completed": self._system.get_completed_quests(),
        }
