"""Service layer exports."""

from .combat_service import CombatEngine, combat_action_from_payload
from .dice_service import DiceService
from .errors import FactoryError, IllegalPhaseError, SaveLoadError, UnknownActionError
from .game_session import GameSession
from .narrative_service import NarrativeService
from .quest_manager import QuestManager
from .quest_service import QuestSystem
from .save_service import SaveService

__all__ = [
    "CombatEngine",
    "DiceService",
    "FactoryError",
    "GameSession",
    "IllegalPhaseError",
    "NarrativeService",
    "QuestManager",
    "QuestSystem",
    "SaveLoadError",
    "SaveService",
    "UnknownActionError",
    "combat_action_from_payload",
]
