"""Turn-based combat state machine resolved through the 2d6 mechanic."""
from __future__ import annotations

import time
from typing import Callable, List, Mapping, Sequence

from structlog import get_logger

from seedbound.domain.battle_models import (
    AttackAction,
    CombatAction,
    CombatActionResult,
    CombatLogEntry,
    CombatRewards,
    CombatState,
    DefendAction,
    FleeAction,
    RollSummary,
    UseItemAction,
    action_tag,
)
from seedbound.domain.dice import CombatRollResult, DiceRollResult
from seedbound.domain.entities import CombatEnemy, EnemyDef, Player, tick_status_effects
from seedbound.domain.entities.enemy import DEFAULT_ENEMY_WOUNDS
from seedbound.services.dice_service import DiceService
from seedbound.services.errors import IllegalPhaseError, UnknownActionError

logger = get_logger(__name__)

HEALING_POTION_ID = "healing_potion"
HEALING_POTION_AMOUNT = 2
PLAYER_DEFENSE = 7
FLEE_DIFFICULTY = "normal"
SYSTEM_ACTOR = "System"


class CombatEngine:
    """One live encounter: ``player`` -> ``enemy`` -> ``player`` ... until victory or defeat.

    The engine mutates the player snapshot and its enemy list in place. Rewards are
    computed on demand from the dead enemies and never applied here.
    """

    def __init__(
        self,
        player: Player,
        enemies: Sequence[EnemyDef],
        dice: DiceService,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._dice = dice
        self._clock = clock
        combat_enemies = [CombatEnemy.from_def(definition) for definition in enemies]
        self._state = CombatState(player=player, enemies=combat_enemies)
        self._log(
            SYSTEM_ACTOR,
            "start",
            f"Combat started against {len(combat_enemies)} enemy(ies)!",
            turn=0,
        )
        logger.info(
            "Combat started",
            player=player.name,
            enemies=[enemy.name for enemy in combat_enemies],
        )

    @property
    def state(self) -> CombatState:
        return self._state

    def is_combat_over(self) -> bool:
        return self._state.is_over

    # -----------------------
    # Player phase
    # -----------------------
    def process_player_action(self, action: CombatAction) -> CombatActionResult:
        """Resolve one player action and hand the turn to the enemies (or end the fight)."""
        if self._state.phase != "player":
            raise IllegalPhaseError(f"Cannot act during the '{self._state.phase}' phase.")

        target_name: str | None = None
        if isinstance(action, AttackAction):
            target = self._enemy_at(action.target_index)
            target_name = target.name if target is not None else None
            result = self._player_attack(action)
        elif isinstance(action, DefendAction):
            result = CombatActionResult(
                success=True,
                message="You brace yourself to defend. The next blow should hurt less.",
            )
        elif isinstance(action, UseItemAction):
            result = self._player_use_item(action)
        elif isinstance(action, FleeAction):
            result = self._player_flee()
        else:
            raise UnknownActionError(f"Unknown combat action: {action!r}")

        self._state.last_player_action = action
        self._log(
            self._state.player.name,
            action_tag(action),
            result.message,
            target=target_name,
            damage=result.damage,
        )

        if self._state.escaped:
            self._log(SYSTEM_ACTOR, "end", "You escaped from combat.")
            logger.info("Combat ended", outcome="escaped", turn=self._state.turn)
            return result
        if all(enemy.is_dead for enemy in self._state.enemies):
            self._state.phase = "victory"
            self._log(SYSTEM_ACTOR, "end", "Victory! Every enemy has been defeated.")
            logger.info("Combat ended", outcome="victory", turn=self._state.turn)
            return result

        self._state.phase = "enemy"
        logger.debug("Combat phase changed", phase="enemy", turn=self._state.turn)
        return result

    def _player_attack(self, action: AttackAction) -> CombatActionResult:
        enemy = self._enemy_at(action.target_index)
        if enemy is None or enemy.is_dead:
            return CombatActionResult(success=False, message="Invalid target.")

        player = self._state.player
        roll = self._dice.combat_roll(
            player.attributes.get(action.attribute),
            enemy.stats.DEF,
            "none",
            0,
        )
        summary = _summarize(roll)
        critical = roll.outcome == "critical_success"
        if roll.success:
            enemy.current_wounds = max(0, enemy.current_wounds - roll.damage)
            prefix = "CRITICAL! " if critical else ""
            if enemy.current_wounds == 0:
                enemy.is_dead = True
                message = (
                    f"{prefix}You hit {enemy.name} for {roll.damage} damage! {enemy.name} has been defeated!"
                )
            else:
                message = (
                    f"{prefix}You hit {enemy.name} for {roll.damage} damage. "
                    f"({enemy.current_wounds}/{enemy.stats.Heridas or DEFAULT_ENEMY_WOUNDS} wounds left)"
                )
            return CombatActionResult(
                success=True,
                message=message,
                damage=roll.damage,
                critical=critical,
                roll=summary,
            )

        backlash = 2 if roll.outcome == "critical_failure" else 1
        player.wounds = max(0, player.wounds - backlash)
        return CombatActionResult(
            success=False,
            message=(
                f"Your attack against {enemy.name} failed ({roll.total} vs {roll.difficulty}) "
                f"and you take {backlash} wound(s)."
            ),
            roll=summary,
        )

    def _player_use_item(self, action: UseItemAction) -> CombatActionResult:
        if action.item_id != HEALING_POTION_ID:
            return CombatActionResult(success=False, message="That item cannot be used in combat.")
        player = self._state.player
        player.wounds = min(player.max_wounds, player.wounds + HEALING_POTION_AMOUNT)
        return CombatActionResult(
            success=True,
            message=f"You drink a healing potion and recover {HEALING_POTION_AMOUNT} wounds.",
            healing=HEALING_POTION_AMOUNT,
        )

    def _player_flee(self) -> CombatActionResult:
        roll = self._dice.roll(self._state.player.attributes.AGI, FLEE_DIFFICULTY)
        summary = _summarize(roll)
        if roll.success:
            self._state.escaped = True
            self._state.phase = "victory"
            return CombatActionResult(
                success=True,
                message=f"You got away! ({roll.total} vs {roll.difficulty})",
                roll=summary,
            )
        return CombatActionResult(
            success=False,
            message=f"You could not escape. ({roll.total} vs {roll.difficulty})",
            roll=summary,
        )

    # -----------------------
    # Enemy phase
    # -----------------------
    def process_enemy_turn(self) -> List[CombatActionResult]:
        """Let every living enemy attack in list order; stops as soon as the player falls."""
        if self._state.phase != "enemy":
            raise IllegalPhaseError(f"Enemies cannot act during the '{self._state.phase}' phase.")

        player = self._state.player
        results: List[CombatActionResult] = []
        for enemy in self._state.living_enemies():
            result = self._enemy_attack(enemy)
            results.append(result)
            self._log(enemy.name, "attack", result.message, target=player.name, damage=result.damage)
            if player.wounds <= 0:
                self._state.phase = "defeat"
                self._log(SYSTEM_ACTOR, "end", "You have been defeated...")
                logger.info("Combat ended", outcome="defeat", turn=self._state.turn)
                return results

        self._state.turn += 1
        self._state.phase = "player"
        player.status_effects = tick_status_effects(player.status_effects)
        for enemy in self._state.enemies:
            enemy.status_effects = tick_status_effects(enemy.status_effects)
        logger.debug("Combat phase changed", phase="player", turn=self._state.turn)
        return results

    def _enemy_attack(self, enemy: CombatEnemy) -> CombatActionResult:
        player = self._state.player
        roll = self._dice.combat_roll(enemy.stats.FUE, PLAYER_DEFENSE, "none", 0)
        summary = _summarize(roll)
        critical = roll.outcome == "critical_success"
        if roll.success:
            player.wounds = max(0, player.wounds - roll.damage)
            prefix = "CRITICAL! " if critical else ""
            return CombatActionResult(
                success=True,
                message=(
                    f"{prefix}{enemy.name} hits you for {roll.damage} damage. "
                    f"({player.wounds}/{player.max_wounds} wounds left)"
                ),
                damage=roll.damage,
                critical=critical,
                roll=summary,
            )
        return CombatActionResult(
            success=False,
            message=f"{enemy.name} misses. ({roll.total} vs {roll.difficulty})",
            roll=summary,
        )

    # -----------------------
    # Rewards
    # -----------------------
    def get_rewards(self) -> CombatRewards:
        """XP from the level of every dead enemy plus their common-tier loot; gold is always 0."""
        rewards = CombatRewards()
        for enemy in self._state.enemies:
            if not enemy.is_dead:
                continue
            rewards.xp += enemy.level or 1
            loot = enemy.definition.loot_table
            if loot is not None and loot.common:
                rewards.items.extend(loot.common)
        return rewards

    # -----------------------
    # Helpers
    # -----------------------
    def _enemy_at(self, index: int) -> CombatEnemy | None:
        if 0 <= index < len(self._state.enemies):
            return self._state.enemies[index]
        return None

    def _log(
        self,
        actor: str,
        action: str,
        result: str,
        *,
        target: str | None = None,
        damage: int | None = None,
        turn: int | None = None,
    ) -> None:
        self._state.combat_log.append(
            CombatLogEntry(
                turn=self._state.turn if turn is None else turn,
                actor=actor,
                action=action,
                result=result,
                timestamp=self._clock(),
                target=target,
                damage=damage,
            )
        )


def _summarize(roll: DiceRollResult | CombatRollResult) -> RollSummary:
    return RollSummary(dice=roll.dice, modifier=roll.modifier, total=roll.total, difficulty=roll.difficulty)


def combat_action_from_payload(payload: Mapping[str, object]) -> CombatAction:
    """Parse a tagged action mapping such as ``{"type": "attack", "target_index": 0}``."""
    if not isinstance(payload, Mapping):
        raise UnknownActionError("Combat action must be an object.")
    kind = payload.get("type")
    if kind == "attack":
        target_index = payload.get("target_index", payload.get("targetIndex"))
        if not isinstance(target_index, int) or isinstance(target_index, bool):
            raise UnknownActionError("Attack action requires an integer target_index.")
        attribute = payload.get("attribute", "FUE")
        try:
            return AttackAction(target_index=target_index, attribute=attribute)  # type: ignore[arg-type]
        except ValueError as exc:
            raise UnknownActionError(str(exc)) from exc
    if kind == "defend":
        return DefendAction()
    if kind == "use_item":
        item_id = payload.get("item_id", payload.get("itemId"))
        if not isinstance(item_id, str):
            raise UnknownActionError("use_item action requires a string item_id.")
        target = payload.get("target_index", payload.get("targetIndex"))
        return UseItemAction(item_id=item_id, target_index=target if isinstance(target, int) else None)
    if kind == "flee":
        return FleeAction()
    raise UnknownActionError(f"Unknown combat action type '{kind}'.")
