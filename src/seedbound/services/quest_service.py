"""Quest tracking: activation, objective completion and counter progress."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from structlog import get_logger

from seedbound.core.rng import RNG
from seedbound.core.types import QuestKind
from seedbound.domain.quest_state import Quest, QuestObjective, RewardBundle
from seedbound.services.quest_generator import QuestGenerator

logger = get_logger(__name__)


@dataclass(slots=True)
class ObjectiveCompletion:
    """Result of finalizing one objective; ``quest_rewards`` is set when the quest completes."""

    success: bool
    quest_completed: bool = False
    objective: QuestObjective | None = None
    rewards: RewardBundle = field(default_factory=RewardBundle)
    quest_rewards: RewardBundle | None = None
    reason: str | None = None


@dataclass(slots=True)
class ObjectiveProgress:
    success: bool
    current_count: int = 0
    completed: bool = False
    reason: str | None = None


class QuestSystem:
    """Owns the active quest list and the ids of completed quests.

    Counter objectives use two calls: :meth:`progress_objective` marks them completed
    once the count is reached, then :meth:`complete_objective` pays their rewards and
    checks whether the quest is done.
    """

    def __init__(self, rng: RNG) -> None:
        self._generator = QuestGenerator(rng)
        self._active: Dict[str, Quest] = {}
        self._completed_ids: List[str] = []

    def generate_quest(self, player_level: int, quest_type: QuestKind = "side_quest") -> Quest:
        return self._generator.generate(player_level, quest_type)

    def activate_quest(self, quest: Quest) -> bool:
        if quest.completed or quest.failed:
            return False
        quest.active = True
        if quest.id not in self._active:
            self._active[quest.id] = quest
            logger.info("Quest activated", quest_id=quest.id, title=quest.title)
        return True

    def complete_objective(self, quest_id: str, objective_id: str) -> ObjectiveCompletion:
        quest = self._active.get(quest_id)
        if quest is None:
            return ObjectiveCompletion(success=False, reason=f"Quest '{quest_id}' is not active.")
        objective = quest.find_objective(objective_id)
        if objective is None:
            return ObjectiveCompletion(success=False, reason=f"Objective '{objective_id}' not found.")
        if objective.rewards_claimed or (objective.completed and not objective.is_counter):
            return ObjectiveCompletion(success=False, reason="Objective already completed.")
        if objective.is_counter and not objective.completed:
            current = objective.current_count or 0
            return ObjectiveCompletion(success=False, reason=f"Progress: {current}/{objective.count}")

        objective.completed = True
        objective.rewards_claimed = True
        rewards = RewardBundle(
            xp=objective.rewards.xp,
            gold=objective.rewards.gold,
            items=list(objective.rewards.items),
        )
        quest_completed = self._is_finished(quest)
        quest_rewards: RewardBundle | None = None
        if quest_completed:
            self._finish(quest)
            quest_rewards = RewardBundle(
                xp=quest.rewards.xp,
                gold=quest.rewards.gold,
                items=list(quest.rewards.items),
            )
        return ObjectiveCompletion(
            success=True,
            quest_completed=quest_completed,
            objective=objective,
            rewards=rewards,
            quest_rewards=quest_rewards,
        )

    def progress_objective(self, quest_id: str, objective_id: str, amount: int = 1) -> ObjectiveProgress:
        quest = self._active.get(quest_id)
        if quest is None:
            return ObjectiveProgress(success=False, reason=f"Quest '{quest_id}' is not active.")
        objective = quest.find_objective(objective_id)
        if objective is None or not objective.is_counter:
            return ObjectiveProgress(success=False, reason="Objective has no progress counter.")
        if objective.rewards_claimed:
            return ObjectiveProgress(
                success=False,
                current_count=objective.current_count or 0,
                completed=True,
                reason="Objective already completed.",
            )
        if amount <= 0:
            return ObjectiveProgress(
                success=False,
                current_count=objective.current_count or 0,
                completed=objective.completed,
                reason="Progress amount must be positive.",
            )
        objective.current_count = (objective.current_count or 0) + amount
        if objective.current_count >= (objective.count or 0):
            objective.completed = True
        return ObjectiveProgress(
            success=True,
            current_count=objective.current_count,
            completed=objective.completed,
        )

    def get_quest_progress(self, quest_id: str) -> int:
        """Percentage (0-100, floored) of required objectives completed; finished quests report 100."""
        if quest_id in self._completed_ids:
            return 100
        quest = self._active.get(quest_id)
        if quest is None:
            return 0
        required = quest.required_objectives()
        if not required:
            return 0
        done = sum(1 for objective in required if objective.completed)
        return (done * 100) // len(required)

    def abandon_quest(self, quest_id: str) -> bool:
        quest = self._active.pop(quest_id, None)
        if quest is None:
            return False
        quest.active = False
        logger.info("Quest abandoned", quest_id=quest_id)
        return True

    def fail_quest(self, quest_id: str) -> bool:
        quest = self._active.pop(quest_id, None)
        if quest is None:
            return False
        quest.active = False
        quest.failed = True
        logger.info("Quest failed", quest_id=quest_id)
        return True

    def get_quest(self, quest_id: str) -> Quest | None:
        return self._active.get(quest_id)

    def get_active_quests(self) -> List[Quest]:
        return [quest for quest in self._active.values() if quest.active]

    def get_quest_objectives(self, quest_id: str) -> List[QuestObjective]:
        quest = self._active.get(quest_id)
        return list(quest.objectives) if quest is not None else []

    def get_completed_quests(self) -> List[str]:
        return list(self._completed_ids)

    @staticmethod
    def is_quest_available(quest: Quest, player_level: int) -> bool:
        minimum, maximum = quest.level_range
        return minimum <= player_level <= maximum

    def restore(self, active_quests: Iterable[Quest], completed_ids: Iterable[str]) -> None:
        """Replace tracked state wholesale (save/restore only)."""
        self._active = {}
        for quest in active_quests:
            quest.active = True
            self._active[quest.id] = quest
        self._completed_ids = []
        for quest_id in completed_ids:
            if quest_id not in self._completed_ids:
                self._completed_ids.append(quest_id)

    @staticmethod
    def _is_finished(quest: Quest) -> bool:
        # Counter objectives only count once their rewards have been claimed.
        return all(
            objective.completed and (objective.rewards_claimed or not objective.is_counter)
            for objective in quest.required_objectives()
        )

    def _finish(self, quest: Quest) -> None:
        quest.completed = True
        quest.active = False
        self._active.pop(quest.id, None)
        if quest.id not in self._completed_ids:
            self._completed_ids.append(quest.id)
        logger.info("Quest completed", quest_id=quest.id, title=quest.title)
