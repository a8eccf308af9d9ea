from __future__ import annotations

from typing import Sequence

import pytest

from seedbound.domain.battle_models import AttackAction, DefendAction, FleeAction, UseItemAction
from seedbound.domain.entities import Attributes, CombatEnemy, EnemyDef, EnemyStats, LootTable, Player, StatusEffect
from seedbound.services.combat_service import HEALING_POTION_ID, CombatEngine, combat_action_from_payload
from seedbound.services.dice_service import DiceService
from seedbound.services.errors import IllegalPhaseError, UnknownActionError
from tests.helpers.scripted_rng import ScriptedRNG


def _make_player(**overrides: object) -> Player:
    player = Player(name="Ash", attributes=Attributes(FUE=0, AGI=0, SAB=0, SUE=0))
    for key, value in overrides.items():
        setattr(player, key, value)
    return player


def _make_enemy(
    name: str = "Goblin",
    *,
    wounds: int = 3,
    defense: int = 7,
    strength: int = 0,
    level: int = 1,
    common: Sequence[str] = (),
    rare: Sequence[str] = (),
) -> EnemyDef:
    return EnemyDef(
        name=name,
        stats=EnemyStats(FUE=strength, AGI=0, DEF=defense, Heridas=wounds),
        level=level,
        loot_table=LootTable(common=tuple(common), rare=tuple(rare)),
    )


def _make_engine(player: Player, enemies: Sequence[EnemyDef], *faces: int) -> tuple[CombatEngine, ScriptedRNG]:
    rng = ScriptedRNG(faces)
    return CombatEngine(player, enemies, DiceService(rng), clock=lambda: 0.0), rng


def test_construction_initializes_enemies_and_log() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy(wounds=4), _make_enemy("Rat", wounds=0)])

    state = engine.state
    assert [enemy.current_wounds for enemy in state.enemies] == [4, 3]
    assert not any(enemy.is_dead for enemy in state.enemies)
    assert state.phase == "player"
    assert state.turn == 1
    assert len(state.combat_log) == 1
    assert state.combat_log[0].turn == 0
    assert state.combat_log[0].actor == "System"


def test_attacks_kill_enemy_and_win() -> None:
    engine, rng = _make_engine(_make_player(), [_make_enemy()], 6, 6, 1, 1, 5, 5)

    first = engine.process_player_action(AttackAction(target_index=0))
    assert first.success is True and first.damage == 2 and first.critical is True
    assert engine.state.enemies[0].current_wounds == 1
    assert engine.state.phase == "enemy"

    engine.process_enemy_turn()
    assert engine.state.phase == "player"
    assert engine.state.turn == 2

    second = engine.process_player_action(AttackAction(target_index=0, attribute="AGI"))
    assert second.damage == 1
    enemy = engine.state.enemies[0]
    assert enemy.current_wounds == 0
    assert enemy.is_dead is True
    assert engine.state.phase == "victory"
    assert engine.is_combat_over() is True
    assert rng.pending == 0


def test_player_action_during_enemy_phase_is_illegal() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy()])
    engine.process_player_action(DefendAction())
    log_size = len(engine.state.combat_log)

    with pytest.raises(IllegalPhaseError):
        engine.process_player_action(AttackAction(target_index=0))

    assert engine.state.phase == "enemy"
    assert len(engine.state.combat_log) == log_size
    assert engine.state.enemies[0].current_wounds == 3


def test_enemy_turn_during_player_phase_is_illegal() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy()])

    with pytest.raises(IllegalPhaseError):
        engine.process_enemy_turn()
    assert engine.state.phase == "player"


def test_failed_attack_wounds_the_player() -> None:
    player = _make_player()
    engine, _ = _make_engine(player, [_make_enemy()], 2, 3)

    result = engine.process_player_action(AttackAction(target_index=0))

    assert result.success is False
    assert result.roll is not None and result.roll.total == 5
    assert player.wounds == 1
    assert engine.state.enemies[0].current_wounds == 3
    assert engine.state.phase == "enemy"


def test_defeat_stops_remaining_enemies() -> None:
    player = _make_player(wounds=1)
    engine, rng = _make_engine(player, [_make_enemy(), _make_enemy("Orc")], 6, 6, 1, 1)
    engine.process_player_action(DefendAction())

    results = engine.process_enemy_turn()

    assert len(results) == 1
    assert player.wounds == 0
    assert engine.state.phase == "defeat"
    assert rng.pending == 2
    assert engine.state.turn == 1


def test_enemy_turn_ticks_status_effects() -> None:
    player = _make_player(
        status_effects=[
            StatusEffect(id="poison", name="Poison", duration=1, effect="poison", value=1),
            StatusEffect(id="bless", name="Blessing", duration=3, effect="buff", value=1),
        ]
    )
    engine, _ = _make_engine(player, [_make_enemy()], 1, 1)
    engine.state.enemies[0].status_effects.append(
        StatusEffect(id="stun", name="Stun", duration=1, effect="stun")
    )
    engine.process_player_action(DefendAction())

    engine.process_enemy_turn()

    assert [effect.id for effect in player.status_effects] == ["bless"]
    assert player.status_effects[0].duration == 2
    assert engine.state.enemies[0].status_effects == []


def test_flee_success_ends_combat_as_escape() -> None:
    player = _make_player(attributes=Attributes(AGI=1))
    engine, _ = _make_engine(player, [_make_enemy()], 3, 3)

    result = engine.process_player_action(FleeAction())

    assert result.success is True
    assert engine.state.phase == "victory"
    assert engine.state.escaped is True
    assert engine.get_rewards().xp == 0


def test_flee_failure_passes_turn() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy()], 1, 1)

    result = engine.process_player_action(FleeAction())

    assert result.success is False
    assert engine.state.phase == "enemy"
    assert engine.state.escaped is False


def test_healing_potion_heals_up_to_max() -> None:
    player = _make_player(wounds=2)
    engine, _ = _make_engine(player, [_make_enemy()])

    result = engine.process_player_action(UseItemAction(item_id=HEALING_POTION_ID))

    assert result.success is True
    assert result.healing == 2
    assert player.wounds == 3


def test_unknown_item_reports_failure() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy()])

    result = engine.process_player_action(UseItemAction(item_id="smoke_bomb"))

    assert result.success is False
    assert engine.state.phase == "enemy"


def test_invalid_target_consumes_no_dice() -> None:
    engine, rng = _make_engine(_make_player(), [_make_enemy()], 6, 6)

    result = engine.process_player_action(AttackAction(target_index=4))

    assert result.success is False
    assert result.roll is None
    assert rng.pending == 2


def test_rewards_count_dead_enemies_and_common_loot_only() -> None:
    enemies = [
        _make_enemy("Bandit", wounds=1, level=2, common=["dagger"], rare=["crown"]),
        _make_enemy("Wolf", common=["pelt"]),
    ]
    engine, _ = _make_engine(_make_player(), enemies, 5, 5)
    engine.process_player_action(AttackAction(target_index=0))

    rewards = engine.get_rewards()

    assert rewards.xp == 2
    assert rewards.gold == 0
    assert rewards.items == ["dagger"]
    assert engine.get_rewards() == rewards


def test_log_records_every_action() -> None:
    engine, _ = _make_engine(_make_player(), [_make_enemy()], 1, 1)
    engine.process_player_action(DefendAction())
    engine.process_enemy_turn()

    actions = [(entry.actor, entry.action) for entry in engine.state.combat_log]
    assert actions == [("System", "start"), ("Ash", "defend"), ("Goblin", "attack")]


def test_action_payload_parsing() -> None:
    assert combat_action_from_payload({"type": "attack", "target_index": 1, "attribute": "AGI"}) == AttackAction(
        target_index=1, attribute="AGI"
    )
    assert combat_action_from_payload({"type": "use_item", "itemId": "healing_potion"}) == UseItemAction(
        item_id="healing_potion"
    )
    assert isinstance(combat_action_from_payload({"type": "flee"}), FleeAction)

    with pytest.raises(UnknownActionError):
        combat_action_from_payload({"type": "dance"})
    with pytest.raises(UnknownActionError):
        combat_action_from_payload({"type": "attack", "target_index": 0, "attribute": "SAB"})


def test_non_action_is_rejected_without_side_effects() -> None:
    engine, rng = _make_engine(_make_player(), [_make_enemy()])
    state_before = rng.get_state()

    with pytest.raises(UnknownActionError):
        engine.process_player_action(object())  # type: ignore[arg-type]

    assert engine.state.phase == "player"
    assert len(engine.state.combat_log) == 1
    assert engine.state.last_player_action is None
    assert rng.get_state() == state_before


def test_combat_enemy_from_def_defaults_missing_wounds() -> None:
    assert CombatEnemy.from_def(_make_enemy(wounds=0)).current_wounds == 3
    assert CombatEnemy.from_def(_make_enemy(wounds=5)).current_wounds == 5
