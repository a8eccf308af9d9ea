"""Session glue: one RNG, one dice service, one quest manager and the player record."""
from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

from structlog import get_logger

from seedbound.core.config import EngineConfig
from seedbound.core.rng import RNG, generate_random_seed
from seedbound.domain.battle_models import CombatRewards
from seedbound.domain.defs import (
    Consequence,
    RelationshipConsequence,
    RewardConsequence,
    UnlockLocationConsequence,
    UnlockQuestConsequence,
)
from seedbound.domain.entities import EnemyDef, Player
from seedbound.domain.progression import LevelUpResult, add_xp
from seedbound.domain.state import GameState
from seedbound.services.combat_service import CombatEngine
from seedbound.services.dice_service import DiceService
from seedbound.services.narrative_service import NarrativeKind, NarrativeService, TextGenerator
from seedbound.services.quest_manager import QuestManager
from seedbound.services.quest_service import ObjectiveCompletion

logger = get_logger(__name__)


class GameSession:
    """Owns the session RNG and hands it to every engine by reference."""

    def __init__(
        self,
        player: Player,
        *,
        seed: str | int | None = None,
        narrative: NarrativeService | None = None,
    ) -> None:
        resolved_seed = seed if seed is not None else generate_random_seed()
        self.state = GameState(seed=resolved_seed, rng=RNG(resolved_seed), player=player)
        self.dice = DiceService(self.state.rng)
        self.quests = QuestManager(self.state.rng)
        self.narrative = narrative

    @classmethod
    def from_config(
        cls,
        player: Player,
        config: EngineConfig,
        *,
        seed: str | int | None = None,
        generator: TextGenerator | None = None,
    ) -> "GameSession":
        """Start a session using the configured default seed and narrative switch."""
        resolved_seed = seed if seed is not None else config.default_seed
        narrative = NarrativeService(generator, enabled=config.narrative_enabled)
        return cls(player, seed=resolved_seed, narrative=narrative)

    @property
    def player(self) -> Player:
        return self.state.player

    @property
    def rng(self) -> RNG:
        return self.state.rng

    def start_combat(self, enemies: Sequence[EnemyDef]) -> CombatEngine:
        return CombatEngine(self.state.player, enemies, self.dice)

    def apply_rewards(self, xp: int = 0, gold: int = 0, items: Iterable[str] = ()) -> List[LevelUpResult]:
        player = self.state.player
        player.gold += gold
        player.inventory.extend(items)
        level_ups = add_xp(player, xp)
        for level_up in level_ups:
            logger.info(
                "Level up",
                player=player.name,
                level=level_up.new_level,
                attribute_points=level_up.rewards.attribute_points,
            )
        return level_ups

    def claim_combat_rewards(self, engine: CombatEngine) -> CombatRewards | None:
        """Pay out a finished, won (or escaped) fight once; returns None otherwise."""
        combat = engine.state
        if combat.phase != "victory" or combat.rewards_claimed:
            return None
        rewards = engine.get_rewards()
        combat.rewards_claimed = True
        self.apply_rewards(rewards.xp, rewards.gold, rewards.items)
        return rewards

    def complete_objective(self, quest_id: str, objective_id: str) -> ObjectiveCompletion:
        """Complete an objective and pay its rewards (plus the quest's when it finishes)."""
        completion = self.quests.complete_objective(quest_id, objective_id)
        if completion.success:
            self.apply_rewards(completion.rewards.xp, completion.rewards.gold, completion.rewards.items)
            if completion.quest_rewards is not None:
                quest_rewards = completion.quest_rewards
                self.apply_rewards(quest_rewards.xp, quest_rewards.gold, quest_rewards.items)
        return completion

    def execute_branch(self, quest_id: str, branch_id: str) -> bool:
        return self.quests.execute_branch(quest_id, branch_id, self.apply_consequences)

    def apply_consequences(self, consequences: Sequence[Consequence]) -> None:
        for consequence in consequences:
            if isinstance(consequence, RelationshipConsequence):
                relationships = self.state.relationships
                relationships[consequence.target] = relationships.get(consequence.target, 0) + consequence.value
            elif isinstance(consequence, RewardConsequence):
                self.apply_rewards(consequence.xp, consequence.gold, consequence.items)
            elif isinstance(consequence, UnlockQuestConsequence):
                if not self.quests.activate_quest(consequence.quest_id):
                    logger.warning("Unlocked quest is not registered", quest_id=consequence.quest_id)
            elif isinstance(consequence, UnlockLocationConsequence):
                if consequence.location_id not in self.state.unlocked_locations:
                    self.state.unlocked_locations.append(consequence.location_id)
            else:
                raise TypeError(f"Unsupported consequence: {consequence!r}")

    def narrate(self, kind: NarrativeKind, prompt: str, context: Mapping[str, str] | None = None) -> str:
        if self.narrative is None:
            return NarrativeService.fallback(kind, prompt, context)
        return self.narrative.generate(kind, prompt, context)
