"""Shared type aliases for the core and domain layers."""
from typing import Literal

AttributeName = Literal["FUE", "AGI", "SAB", "SUE"]
AdvantageMode = Literal["none", "advantage", "disadvantage"]
DifficultyTier = Literal["easy", "normal", "difficult", "epic"]
RollOutcome = Literal["critical_failure", "partial_success", "success", "critical_success"]
CombatPhase = Literal["player", "enemy", "victory", "defeat"]
QuestKind = Literal["main_quest", "side_quest", "random_event"]
ObjectiveType = Literal["delivery", "combat", "explore", "talk", "collect", "escort", "investigate"]
QuestOrigin = Literal["campaign", "procedural"]

ATTRIBUTE_NAMES: tuple[AttributeName, ...] = ("FUE", "AGI", "SAB", "SUE")
OBJECTIVE_TYPES: tuple[ObjectiveType, ...] = (
    "delivery",
    "combat",
    "explore",
    "talk",
    "collect",
    "escort",
    "investigate",
)
QUEST_KINDS: tuple[QuestKind, ...] = ("main_quest", "side_quest", "random_event")

__all__ = [
    "ATTRIBUTE_NAMES",
    "AdvantageMode",
    "AttributeName",
    "CombatPhase",
    "DifficultyTier",
    "OBJECTIVE_TYPES",
    "ObjectiveType",
    "QUEST_KINDS",
    "QuestKind",
    "QuestOrigin",
    "RollOutcome",
]
