"""Adapter between the campaign quest JSON format and the runtime quest model."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Sequence

from structlog import get_logger

from seedbound.core.types import OBJECTIVE_TYPES, QUEST_KINDS, ObjectiveType
from seedbound.data.errors import DataError, DataValidationError
from seedbound.data.json_loader import load_json
from seedbound.domain.defs import (
    BranchDef,
    CampaignQuestDef,
    Consequence,
    FailureConditionDef,
    RelationshipConsequence,
    RewardConsequence,
    UnlockLocationConsequence,
    UnlockQuestConsequence,
)
from seedbound.domain.quest_state import ObjectiveCheck, Quest, QuestObjective, RewardBundle

logger = get_logger(__name__)

_FALLBACK_OBJECTIVE_TYPE: ObjectiveType = "talk"


class QuestLoader:
    """Parses campaign quest payloads (``{"quest": {...}}``) and writes them back."""

    def from_json(self, payload: object) -> CampaignQuestDef:
        container = self._require_mapping(payload, "campaign quest")
        quest_map = self._require_mapping(container.get("quest"), "campaign quest.quest")
        quest_id = self._require_str(quest_map.get("id"), "quest.id")
        ctx = f"quest '{quest_id}'"
        quest_type = self._require_str(quest_map.get("type"), f"{ctx}.type")
        if quest_type not in QUEST_KINDS:
            raise DataValidationError(f"{ctx}.type must be one of {', '.join(QUEST_KINDS)}.")
        level_range = self._parse_level_range(quest_map.get("level_range"), ctx)

        objectives_data = self._require_list(quest_map.get("objectives", []), f"{ctx}.objectives")
        objectives = [
            self._parse_objective(entry, f"{ctx}.objectives[{index}]")
            for index, entry in enumerate(objectives_data)
        ]

        rewards_map = self._require_mapping(quest_map.get("rewards"), f"{ctx}.rewards")
        base_rewards = self._parse_rewards(rewards_map.get("base"), f"{ctx}.rewards.base")
        bonus_raw = rewards_map.get("optional_bonus")
        bonus_rewards = (
            self._parse_rewards(bonus_raw, f"{ctx}.rewards.optional_bonus") if bonus_raw is not None else None
        )
        total_rewards = RewardBundle(
            xp=base_rewards.xp + (bonus_rewards.xp if bonus_rewards else 0),
            gold=base_rewards.gold + (bonus_rewards.gold if bonus_rewards else 0),
            items=list(base_rewards.items) + (list(bonus_rewards.items) if bonus_rewards else []),
        )

        quest = Quest(
            id=quest_id,
            title=self._require_str(quest_map.get("title"), f"{ctx}.title"),
            type=quest_type,  # type: ignore[arg-type]
            level_range=level_range,
            giver=self._require_str(quest_map.get("giver"), f"{ctx}.giver"),
            starting_location=self._require_str(quest_map.get("starting_location"), f"{ctx}.starting_location"),
            description=self._require_str(quest_map.get("description"), f"{ctx}.description"),
            objectives=objectives,
            rewards=total_rewards,
        )
        return CampaignQuestDef(
            quest=quest,
            base_rewards=base_rewards,
            bonus_rewards=bonus_rewards,
            branches=tuple(self._parse_branches(quest_map.get("branches"), ctx)),
            failure_conditions=tuple(self._parse_failure_conditions(quest_map.get("failure_conditions"), ctx)),
        )

    def load_from_path(self, path: Path | str) -> CampaignQuestDef:
        """Load one campaign quest file; raises DataLoadError/DataValidationError."""
        definition = self.from_json(load_json(Path(path)))
        logger.debug("Campaign quest parsed", quest_id=definition.quest.id, path=str(path))
        return definition

    def load_multiple(self, paths: Sequence[Path | str]) -> List[CampaignQuestDef]:
        """Load every readable file, skipping (and logging) the ones that fail."""
        definitions: List[CampaignQuestDef] = []
        for path in paths:
            try:
                definitions.append(self.load_from_path(path))
            except DataError as exc:
                logger.warning("Skipping campaign quest file", path=str(path), error=str(exc))
        return definitions

    def to_json(self, definition: CampaignQuestDef) -> Dict[str, Any]:
        """Write a definition back out in the campaign wire format."""
        quest = definition.quest
        rewards: Dict[str, Any] = {"base": self._rewards_to_json(definition.base_rewards)}
        if definition.bonus_rewards is not None:
            rewards["optional_bonus"] = self._rewards_to_json(definition.bonus_rewards)
        return {
            "quest": {
                "id": quest.id,
                "title": quest.title,
                "type": quest.type,
                "level_range": [quest.level_range[0], quest.level_range[1]],
                "giver": quest.giver,
                "starting_location": quest.starting_location,
                "description": quest.description,
                "objectives": [self._objective_to_json(objective) for objective in quest.objectives],
                "rewards": rewards,
                "branches": [self._branch_to_json(branch) for branch in definition.branches],
                "failure_conditions": [
                    {"condition": failure.condition, "result": failure.result}
                    for failure in definition.failure_conditions
                ],
            }
        }

    @staticmethod
    def can_complete_objective(
        objective: QuestObjective,
        inventory: Sequence[str],
        current_location: str,
    ) -> ObjectiveCheck:
        """Check location, delivery items and counter progress without mutating anything."""
        if objective.location and objective.location != current_location:
            return ObjectiveCheck(can_complete=False, reason=f"You must be at: {objective.location}")
        if objective.type == "delivery" and objective.items:
            if not all(item in inventory for item in objective.items):
                return ObjectiveCheck(can_complete=False, reason=f"You need: {', '.join(objective.items)}")
        if objective.count and objective.current_count is not None:
            if objective.current_count < objective.count:
                return ObjectiveCheck(
                    can_complete=False,
                    reason=f"Progress: {objective.current_count}/{objective.count}",
                )
        return ObjectiveCheck(can_complete=True)

    def _parse_level_range(self, value: object, ctx: str) -> tuple[int, int]:
        entries = self._require_list(value, f"{ctx}.level_range")
        if len(entries) != 2 or not all(self._is_int(entry) for entry in entries):
            raise DataValidationError(f"{ctx}.level_range must be a [min, max] pair of integers.")
        minimum, maximum = int(entries[0]), int(entries[1])  # type: ignore[arg-type]
        if minimum > maximum:
            raise DataValidationError(f"{ctx}.level_range minimum exceeds maximum.")
        return minimum, maximum

    def _parse_objective(self, value: object, ctx: str) -> QuestObjective:
        mapping = self._require_mapping(value, ctx)
        raw_type = self._require_str(mapping.get("type"), f"{ctx}.type")
        objective_type: ObjectiveType = (
            raw_type if raw_type in OBJECTIVE_TYPES else _FALLBACK_OBJECTIVE_TYPE  # type: ignore[assignment]
        )
        objective = QuestObjective(
            id=self._require_str(mapping.get("id"), f"{ctx}.id"),
            type=objective_type,
            description=self._require_str(mapping.get("description"), f"{ctx}.description"),
            required=self._optional_bool(mapping.get("required"), f"{ctx}.required", default=True),
            completed=self._optional_bool(mapping.get("completed"), f"{ctx}.completed", default=False),
            location=self._optional_str(mapping.get("location"), f"{ctx}.location"),
            target_npc=self._optional_str(mapping.get("target_npc"), f"{ctx}.target_npc"),
            rewards=self._parse_rewards(mapping.get("rewards"), f"{ctx}.rewards"),
        )
        count = mapping.get("count")
        if count is not None and (not self._is_int(count) or count <= 0):  # type: ignore[operator]
            raise DataValidationError(f"{ctx}.count must be a positive integer.")

        boss = self._optional_str(mapping.get("boss"), f"{ctx}.boss")
        enemies = mapping.get("enemies")
        if boss is not None:
            objective.enemies = [boss]
        elif enemies is not None:
            objective.enemies = self._require_str_list(enemies, f"{ctx}.enemies")
        if objective.enemies is not None:
            objective.count = count or len(objective.enemies)  # type: ignore[assignment]
            objective.current_count = 0

        item = self._optional_str(mapping.get("item"), f"{ctx}.item")
        items = mapping.get("items")
        if item is not None:
            objective.items = [item]
            objective.count = 1
            objective.current_count = 0
        elif items is not None:
            objective.items = self._require_str_list(items, f"{ctx}.items")
            objective.count = count or len(objective.items)  # type: ignore[assignment]
            objective.current_count = 0
        elif objective.enemies is None and count is not None:
            objective.count = count  # type: ignore[assignment]
            objective.current_count = 0
        return objective

    def _parse_rewards(self, value: object, ctx: str) -> RewardBundle:
        if value is None:
            return RewardBundle()
        mapping = self._require_mapping(value, ctx)
        xp = mapping.get("xp", 0)
        gold = mapping.get("gold", 0)
        if not self._is_int(xp) or xp < 0:  # type: ignore[operator]
            raise DataValidationError(f"{ctx}.xp must be a non-negative integer.")
        if not self._is_int(gold) or gold < 0:  # type: ignore[operator]
            raise DataValidationError(f"{ctx}.gold must be a non-negative integer.")
        items = self._require_str_list(mapping.get("items", []), f"{ctx}.items")
        return RewardBundle(xp=xp, gold=gold, items=items)  # type: ignore[arg-type]

    def _parse_branches(self, value: object, ctx: str) -> List[BranchDef]:
        if value is None:
            return []
        branches: List[BranchDef] = []
        for index, entry in enumerate(self._require_list(value, f"{ctx}.branches")):
            branch_ctx = f"{ctx}.branches[{index}]"
            mapping = self._require_mapping(entry, branch_ctx)
            consequences_data = self._require_list(mapping.get("consequences", []), f"{branch_ctx}.consequences")
            branches.append(
                BranchDef(
                    id=self._require_str(mapping.get("id"), f"{branch_ctx}.id"),
                    trigger=self._require_str(mapping.get("trigger"), f"{branch_ctx}.trigger"),
                    description=self._require_str(mapping.get("description"), f"{branch_ctx}.description"),
                    consequences=tuple(
                        self._parse_consequence(item, f"{branch_ctx}.consequences[{position}]")
                        for position, item in enumerate(consequences_data)
                    ),
                )
            )
        return branches

    def _parse_consequence(self, value: object, ctx: str) -> Consequence:
        mapping = self._require_mapping(value, ctx)
        kind = self._require_str(mapping.get("type"), f"{ctx}.type")
        if kind == "relationship":
            amount = mapping.get("value", 0)
            if not self._is_int(amount):
                raise DataValidationError(f"{ctx}.value must be an integer.")
            return RelationshipConsequence(
                target=self._require_str(mapping.get("target"), f"{ctx}.target"),
                value=amount,  # type: ignore[arg-type]
            )
        if kind == "reward":
            rewards = self._parse_rewards(mapping, ctx)
            return RewardConsequence(xp=rewards.xp, gold=rewards.gold, items=tuple(rewards.items))
        if kind == "unlock_quest":
            return UnlockQuestConsequence(quest_id=self._require_str(mapping.get("quest_id"), f"{ctx}.quest_id"))
        if kind == "unlock_location":
            return UnlockLocationConsequence(
                location_id=self._require_str(mapping.get("location_id"), f"{ctx}.location_id")
            )
        raise DataValidationError(
            f"{ctx}.type must be one of relationship, reward, unlock_quest, unlock_location."
        )

    def _parse_failure_conditions(self, value: object, ctx: str) -> List[FailureConditionDef]:
        if value is None:
            return []
        conditions: List[FailureConditionDef] = []
        for index, entry in enumerate(self._require_list(value, f"{ctx}.failure_conditions")):
            entry_ctx = f"{ctx}.failure_conditions[{index}]"
            mapping = self._require_mapping(entry, entry_ctx)
            conditions.append(
                FailureConditionDef(
                    condition=self._require_str(mapping.get("condition"), f"{entry_ctx}.condition"),
                    result=self._require_str(mapping.get("result"), f"{entry_ctx}.result"),
                )
            )
        return conditions

    @staticmethod
    def _rewards_to_json(rewards: RewardBundle) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"xp": rewards.xp, "gold": rewards.gold}
        if rewards.items:
            payload["items"] = list(rewards.items)
        return payload

    def _objective_to_json(self, objective: QuestObjective) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": objective.id,
            "type": objective.type,
            "description": objective.description,
            "required": objective.required,
            "completed": objective.completed,
        }
        if objective.location is not None:
            payload["location"] = objective.location
        if objective.target_npc is not None:
            payload["target_npc"] = objective.target_npc
        if objective.enemies is not None:
            payload["enemies"] = list(objective.enemies)
        if objective.items is not None:
            payload["items"] = list(objective.items)
        if objective.count is not None:
            payload["count"] = objective.count
        payload["rewards"] = self._rewards_to_json(objective.rewards)
        return payload

    @staticmethod
    def _branch_to_json(branch: BranchDef) -> Dict[str, Any]:
        consequences: List[Dict[str, Any]] = []
        for consequence in branch.consequences:
            if isinstance(consequence, RelationshipConsequence):
                consequences.append(
                    {"type": "relationship", "target": consequence.target, "value": consequence.value}
                )
            elif isinstance(consequence, RewardConsequence):
                entry: Dict[str, Any] = {"type": "reward", "xp": consequence.xp, "gold": consequence.gold}
                if consequence.items:
                    entry["items"] = list(consequence.items)
                consequences.append(entry)
            elif isinstance(consequence, UnlockQuestConsequence):
                consequences.append({"type": "unlock_quest", "quest_id": consequence.quest_id})
            else:
                consequences.append({"type": "unlock_location", "location_id": consequence.location_id})
        return {
            "id": branch.id,
            "trigger": branch.trigger,
            "description": branch.description,
            "consequences": consequences,
        }

    @staticmethod
    def _is_int(value: object) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_bool(value: object, context: str, *, default: bool) -> bool:
        if value is None:
            return default
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result
