"""
Opcodes - Primitive, loggable state mutations.

Opcodes are the only thing that mutates a GameState during play and the
unit of the replay log: each application returns the GameLog entries it
produced.

Opcodes are grouped into OpcodeLists (batches). apply_batches() runs a
group of batches on a clone and hands the clone back only when every
opcode succeeded, so a failed batch leaves the original state untouched.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable
import logging

from .abilities import PlayerAbility
from .card import Card
from .continuous import ContinuousItem, OnField, ShieldBroken
from .effect import EffectActivateContext, EffectTriggerContext
from .events import CardEvent
from .field import BattleRole, FieldBattleState, FieldState
from .ids import ObjectId
from .log import GameLog
from .player import EndgameReason, PlayerEndgameState
from .shards import Color
from .zones import MoveReason, Zone, ZoneKind

if TYPE_CHECKING:
    from .state import GameState, Phase

logger = logging.getLogger(__name__)


class Opcode:
    """Marker base class for opcodes."""


@dataclass(frozen=True)
class StartGame(Opcode):
    pass


@dataclass(frozen=True)
class ChangeTurn(Opcode):
    turn: int
    player: int
    phase: Phase


@dataclass(frozen=True)
class ChangePhase(Opcode):
    phase: Phase


@dataclass(frozen=True)
class SetLife(Opcode):
    player: int
    life: int


@dataclass(frozen=True)
class GenerateShards(Opcode):
    player: int
    source: ObjectId | None
    color: Color
    amount: int


@dataclass(frozen=True)
class ConsumeShards(Opcode):
    player: int
    source: ObjectId | None
    color: Color
    amount: int


@dataclass(frozen=True)
class BreakShield(Opcode):
    card: ObjectId


@dataclass(frozen=True)
class GenerateCardToken(Opcode):
    card: Card


@dataclass(frozen=True)
class DrawCard(Opcode):
    player: int


@dataclass(frozen=True)
class CastCard(Opcode):
    player: int
    card: ObjectId
    cost: int


@dataclass(frozen=True)
class MoveCard(Opcode):
    card: ObjectId
    from_zone: Zone
    to_zone: Zone
    reason: MoveReason


@dataclass(frozen=True)
class ShuffleDeck(Opcode):
    player: int


@dataclass(frozen=True)
class TriggerEvent(Opcode):
    source: ObjectId
    target: ObjectId
    event: CardEvent


@dataclass(frozen=True)
class SetFieldState(Opcode):
    card: ObjectId
    state: FieldState


@dataclass(frozen=True)
class SetBattleState(Opcode):
    card: ObjectId
    state: FieldBattleState | None


@dataclass(frozen=True)
class ResetBattleState(Opcode):
    pass


@dataclass(frozen=True)
class Attack(Opcode):
    """Logging-only opcode: attacker hits a blocker or a player."""
    attacker: ObjectId
    blocker: ObjectId | None = None
    player: int | None = None


@dataclass(frozen=True)
class InflictDamage(Opcode):
    player: int
    amount: int


OpcodeList = list


class OpcodeExecutor:
    """Applies opcodes to a state in place."""

    def __init__(self, state: GameState):
        self.state = state

    def execute(self, opcode: Opcode) -> list[GameLog]:
        self.state.timestamp += 1
        handler = self._get_handler(type(opcode))
        logger.debug("execute %s", opcode)
        return handler(opcode)

    def execute_all(self, batches: list[OpcodeList]) -> list[GameLog]:
        logs = []
        for batch in batches:
            for opcode in batch:
                logs.extend(self.execute(opcode))
        return logs

    def _get_handler(self, opcode_type: type) -> Callable[[Opcode], list[GameLog]]:
        handlers = {
            StartGame: self._start_game,
            ChangeTurn: self._change_turn,
            ChangePhase: self._change_phase,
            SetLife: self._set_life,
            GenerateShards: self._generate_shards,
            ConsumeShards: self._consume_shards,
            BreakShield: self._break_shield,
            GenerateCardToken: self._generate_card_token,
            DrawCard: self._draw_card,
            CastCard: self._cast_card,
            MoveCard: self._move_card,
            ShuffleDeck: self._shuffle_deck,
            TriggerEvent: self._trigger_event,
            SetFieldState: self._set_field_state,
            SetBattleState: self._set_battle_state,
            ResetBattleState: self._reset_battle_state,
            Attack: self._attack,
            InflictDamage: self._inflict_damage,
        }
        return handlers[opcode_type]

    def _snapshot(self, card_id: ObjectId | None):
        if card_id is None:
            return None
        card = self.state.find_card(card_id)
        return card.snapshot() if card is not None else None

    # =========================================================================
    # Turn structure
    # =========================================================================

    def _start_game(self, op: StartGame) -> list[GameLog]:
        return [GameLog.game_started()]

    def _change_turn(self, op: ChangeTurn) -> list[GameLog]:
        self.state.turn = op.turn
        self.state.players.set_player_in_turn(op.player)
        self.state.phase = op.phase
        for player in self.state.players:
            player.reset_counters()
        return [GameLog.turn_changed(op.turn, op.player), GameLog.phase_changed(op.phase.value)]

    def _change_phase(self, op: ChangePhase) -> list[GameLog]:
        self.state.phase = op.phase
        return [GameLog.phase_changed(op.phase.value)]

    # =========================================================================
    # Life and shards
    # =========================================================================

    def _set_life(self, op: SetLife) -> list[GameLog]:
        self.state.players.get(op.player).life = op.life
        return [GameLog.life_changed(op.player, op.life)]

    def _inflict_damage(self, op: InflictDamage) -> list[GameLog]:
        player = self.state.players.get(op.player)
        player.life = max(0, player.life - max(0, op.amount))
        return [
            GameLog.damage_taken(player.id, op.amount),
            GameLog.life_changed(player.id, player.life),
        ]

    def _generate_shards(self, op: GenerateShards) -> list[GameLog]:
        player = self.state.players.get(op.player)
        propagate = sum(
            a.amount for a in player.abilities
            if isinstance(a, PlayerAbility) and a.kind == "propagate"
        )
        amount = max(0, op.amount + propagate)
        player.shards.add(op.color, amount)
        return [GameLog.shards_earned(player.id, self._snapshot(op.source), op.color.display_name, amount)]

    def _consume_shards(self, op: ConsumeShards) -> list[GameLog]:
        player = self.state.players.get(op.player)
        player.shards.consume(op.color, op.amount)
        return [GameLog.shards_spent(player.id, self._snapshot(op.source), op.color.display_name, op.amount)]

    def _break_shield(self, op: BreakShield) -> list[GameLog]:
        card = self.state.get_card(op.card)
        self.state.continuous.add(ContinuousItem(
            source=card.id,
            effect=ShieldBroken(),
            condition=OnField(card.id),
            timestamp=self.state.generations.next(),
        ))
        return [GameLog.shield_broken(card.snapshot())]

    # =========================================================================
    # Card movement
    # =========================================================================

    def _generate_card_token(self, op: GenerateCardToken) -> list[GameLog]:
        card = op.card
        player = self.state.players.get(card.controller)
        player.field.push(card)
        return [GameLog.card_token_generated(card.snapshot())]

    def _draw_card(self, op: DrawCard) -> list[GameLog]:
        player = self.state.players.get(op.player)
        card = player.deck.pop_top()
        if card is None:
            if player.endgame is None:
                player.endgame = PlayerEndgameState.lose(EndgameReason.DECK_OUT)
            return []
        from_zone = card.zone
        to_zone = Zone(player.id, ZoneKind.HAND)
        card.set_zone(to_zone, self.state.generations)
        player.hand.push(card)
        player.counters.draw += 1
        return [GameLog.card_moved(player.id, card.snapshot(), str(from_zone), str(to_zone), MoveReason.DRAW.value)]

    def _cast_card(self, op: CastCard) -> list[GameLog]:
        player = self.state.players.get(op.player)
        card = player.hand.remove(op.card)
        if card is None:
            return []
        from_zone = card.zone
        to_zone = Zone(player.id, ZoneKind.FIELD)
        card.set_zone(to_zone, self.state.generations)
        player.field.push(card)
        if op.cost == 0:
            player.counters.free_casted += 1
        return [GameLog.card_moved(player.id, card.snapshot(), str(from_zone), str(to_zone), MoveReason.CASTED.value)]

    def _move_card(self, op: MoveCard) -> list[GameLog]:
        source_player = self.state.players.get(op.from_zone.player)
        card = source_player.zone(op.from_zone.kind).remove(op.card)
        if card is None:
            return []
        if card.is_token and op.to_zone.kind != ZoneKind.FIELD:
            owner = self.state.players.get(card.owner)
            card.set_zone(Zone(owner.id, ZoneKind.LIMBO), self.state.generations)
            owner.limbo.push(card)
            return [GameLog.card_token_destroyed(card.snapshot())]
        controller = card.controller
        card.set_zone(op.to_zone, self.state.generations)
        self.state.players.get(op.to_zone.player).zone(op.to_zone.kind).push(card)
        return [GameLog.card_moved(controller, card.snapshot(), str(op.from_zone), str(op.to_zone), op.reason.value)]

    def _shuffle_deck(self, op: ShuffleDeck) -> list[GameLog]:
        player = self.state.players.get(op.player)
        player.deck.shuffle(self.state.rng)
        for card in player.deck:
            card.renew_id(self.state.ids, self.state.generations)
        player.deck.shuffle(self.state.rng)
        return [GameLog.deck_shuffled(player.id)]

    # =========================================================================
    # Effects
    # =========================================================================

    def _trigger_event(self, op: TriggerEvent) -> list[GameLog]:
        source = self.state.find_card(op.source)
        target = self.state.find_card(op.target)
        if source is None or target is None:
            return []
        effect = target.effect
        if not effect.event_filter() & op.event.filter:
            return []

        activate_ctx = EffectActivateContext(self.state, source, target)
        effect.activate(op.event, activate_ctx)
        logs = [GameLog.effect_activated(target.snapshot(), stack_id) for stack_id in activate_ctx.stack_ids]

        trigger_ctx = EffectTriggerContext(self.state, target)
        for stack_id in activate_ctx.stack_ids + activate_ctx.continuous_ids:
            effect.trigger(stack_id, trigger_ctx)
        self.state.continuous.extend(trigger_ctx.continuous)
        self.state.stack.extend(trigger_ctx.stack)
        return logs

    # =========================================================================
    # Battle
    # =========================================================================

    def _set_field_state(self, op: SetFieldState) -> list[GameLog]:
        for player in self.state.players:
            player.field.set_card_field_state(op.card, op.state)
        return []

    def _set_battle_state(self, op: SetBattleState) -> list[GameLog]:
        logs = []
        for player in self.state.players:
            changed = player.field.set_card_battle_state(op.card, op.state)
            if changed and op.state is not None and op.state.role == BattleRole.ATTACKING:
                logs.append(GameLog.attack_declared(self._snapshot(op.card)))
        return logs

    def _reset_battle_state(self, op: ResetBattleState) -> list[GameLog]:
        for player in self.state.players:
            player.field.reset_battle_state()
        return []

    def _attack(self, op: Attack) -> list[GameLog]:
        attacker = self._snapshot(op.attacker)
        if attacker is None:
            return []
        if op.blocker is not None:
            blocker = self._snapshot(op.blocker)
            return [GameLog.creature_attacked_creature(attacker, blocker)] if blocker else []
        return [GameLog.creature_attacked_player(attacker, op.player)]


def apply_batches(state: GameState, batches: list[OpcodeList]) -> tuple[GameState, list[GameLog]]:
    """
    Apply opcode batches all-or-nothing.

    Returns the updated clone and its logs. Any error propagates and the
    caller's state is left exactly as it was.
    """
    working = state.clone()
    logs = OpcodeExecutor(working).execute_all(batches)
    return working, logs
