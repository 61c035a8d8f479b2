"""
Phase rules - What each phase does with a player's action.

PhaseRules.opcodes(player, action) turns the current phase plus an
action into opcode batches. It never mutates the state: validation
errors (unaffordable card, full field) are raised before any batch is
produced, and an empty result means "waiting for a player".

Turn 0 is the setup turn: start the game, set life, shuffle, deal the
initial hands and hand turn 1 to the first player.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Callable

from . import opcodes as op
from .abilities import KeywordAbility
from .action import Action, ActionType
from .commands import CommandLowering
from .config import DebugFlags
from .errors import CardNotFoundError, CreatureAlreadyFreeCastedError, IllegalActionError, ZoneCapacityError
from .events import CardEvent, EventReason
from .field import FieldBattleState, FieldState
from .state import Phase
from .zones import MoveReason, Zone, ZoneKind

if TYPE_CHECKING:
    from ..catalog.registry import Catalog
    from .card import Card
    from .state import GameState


class PhaseRules:
    """Builds the opcode batches for the current phase."""

    def __init__(self, state: GameState, catalog: Catalog):
        self.state = state
        self.lowering = CommandLowering(state, catalog)

    def opcodes(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        if self.state.turn == 0:
            return self._initialize()
        handler = self._get_handler(self.state.phase)
        return handler(player, action)

    def _get_handler(self, phase: Phase) -> Callable[[int, Action | None], list[op.OpcodeList]]:
        handlers = {
            Phase.STANDBY: self._standby,
            Phase.DRAW: self._draw,
            Phase.MAIN: self._main,
            Phase.BLOCK: self._block,
            Phase.BATTLE: self._battle,
            Phase.END: self._end,
        }
        return handlers[phase]

    # =========================================================================
    # Setup
    # =========================================================================

    def _initialize(self) -> list[op.OpcodeList]:
        state = self.state
        batches = [[op.StartGame()]]
        batches.extend([op.SetLife(p.id, state.regulation.initial_life)] for p in state.players)
        if not state.config.no_deck_shuffle:
            batches.extend([op.ShuffleDeck(p.id)] for p in state.players)
        for player in state.players:
            batches.extend([op.DrawCard(player.id)] for _ in range(state.regulation.initial_hand_size))
        batches.append([op.ChangeTurn(1, state.players.player_in_turn_id, Phase.STANDBY)])
        return batches

    # =========================================================================
    # Phases
    # =========================================================================

    def _standby(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        return [[op.ChangePhase(Phase.DRAW)]]

    def _draw(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        in_turn = self.state.players.player_in_turn_id
        return [[op.DrawCard(in_turn)], [op.ChangePhase(Phase.MAIN)]]

    def _main(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        if action is None:
            return []
        if action.action_type == ActionType.CAST_CARD:
            return self.cast_card(player, action)
        if action.action_type == ActionType.ATTACK:
            batch = [op.SetBattleState(a.id, FieldBattleState.attacking()) for a in action.attackers]
            batch.append(op.ChangePhase(Phase.BLOCK))
            return [batch]
        if action.action_type == ActionType.END_TURN:
            return [[op.ResetBattleState(), op.ChangePhase(Phase.END)]]
        return []

    def _block(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        in_turn = self.state.players.player_in_turn
        if not any(True for _ in in_turn.field.attacking_cards()):
            return [[op.ChangePhase(Phase.BATTLE)]]
        if action is None:
            return []
        if action.action_type == ActionType.BLOCK:
            batch = [
                op.SetBattleState(blocker.id, FieldBattleState.blocking(attacker))
                for attacker, blocker in action.pairs
            ]
            batch.append(op.ChangePhase(Phase.BATTLE))
            return [batch]
        if action.action_type == ActionType.CAST_CARD:
            return self.cast_card(player, action)
        return []

    def _battle(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        state = self.state
        in_turn = state.players.player_in_turn
        defender = state.players.next_player(in_turn.id)

        attackers = list(in_turn.field.attacking_cards())
        if attackers:
            attacker = min(
                attackers,
                key=lambda c: (0 if defender.field.find_blocker(c.timed_id) is not None else 1, c.timestamp),
            )
            return self._resolve_attack(attacker, defender.id, defender.field.find_blocker(attacker.timed_id))

        if not state.stack.is_empty:
            return []
        return [[op.ResetBattleState(), op.ChangePhase(Phase.END)]]

    def _resolve_attack(self, attacker: Card, defender: int, blocker: Card | None) -> list[op.OpcodeList]:
        lowering = self.lowering
        batches = lowering.apply_event(CardEvent.attacking(), attacker, attacker)
        batches.append([
            op.Attack(attacker.id, blocker.id if blocker else None, None if blocker else defender),
            op.SetBattleState(attacker.id, FieldBattleState.attacked()),
        ])
        batches.append([op.SetFieldState(attacker.id, FieldState.EXHAUSTED)])

        power = attacker.computed.current_power
        if blocker is None:
            if power > 0:
                batches.append([op.InflictDamage(defender, power)])
                event = CardEvent.dealt_damage(defender, power, EventReason.BATTLE)
                batches.extend(lowering.apply_event(event, attacker, attacker))
        else:
            batches.extend(lowering.apply_event(CardEvent.blocking(), blocker, blocker))
            blocker_power = blocker.computed.current_power
            if _loses_fight(attacker, power, blocker, blocker_power):
                batches.extend(lowering.apply_event(
                    CardEvent.destroyed(attacker.zone, EventReason.BATTLE), blocker, attacker,
                ))
            if _loses_fight(blocker, blocker_power, attacker, power):
                batches.extend(lowering.apply_event(
                    CardEvent.destroyed(blocker.zone, EventReason.BATTLE), attacker, blocker,
                ))

        batches.extend(lowering.apply_event(CardEvent.attacked(), attacker, attacker))
        return batches

    def _end(self, player: int, action: Action | None) -> list[op.OpcodeList]:
        state = self.state
        in_turn = state.players.player_in_turn
        if action is not None and action.action_type == ActionType.SELECT_CARD:
            card = in_turn.hand.get(action.card.id)
            if card is None:
                raise CardNotFoundError(action.card.id)
            to_zone = Zone(in_turn.id, ZoneKind.GRAVEYARD)
            return [[op.MoveCard(card.id, card.zone, to_zone, MoveReason.DISCARDED)]]
        if len(in_turn.hand) > state.regulation.max_hand_size:
            return []
        next_id = state.players.next_id(in_turn.id)
        return [[op.ChangeTurn(state.turn + 1, next_id, Phase.STANDBY)]]

    # =========================================================================
    # Casting
    # =========================================================================

    def cast_card(self, player_id: int, action: Action) -> list[op.OpcodeList]:
        """Validate a cast and build its batches, or raise without side effects."""
        state = self.state
        player = state.players.get(player_id)
        card = player.hand.get(action.card.id)
        if card is None or card.timed_id != action.card:
            raise CardNotFoundError(action.card.id)

        ignore_cost = bool(state.config.debug & DebugFlags.IGNORE_COST)
        cost = 0 if ignore_cost else card.computed.cost.value()
        if not ignore_cost and cost == 0 and card.computed.is_creature and player.counters.free_casted > 0:
            raise CreatureAlreadyFreeCastedError()
        plan = player.shards.payment_plan(cost, card.computed.color)
        if not player.field.has_space():
            raise ZoneCapacityError(str(Zone(player.id, ZoneKind.FIELD)), player.field.capacity)
        if not card.effect.is_castable(state, card, True):
            raise IllegalActionError(f"{card.archetype.name} cannot be cast now")

        batch = [op.ConsumeShards(player.id, card.id, color, amount) for color, amount in plan]
        batch.append(op.CastCard(player.id, card.id, cost))
        batches = [batch]
        batches.extend(self.lowering.apply_event(CardEvent.casted(card.zone), card, card))
        batches.extend(self.lowering.apply_event_any(CardEvent.any_casted(), card))
        return batches


def _loses_fight(card: Card, power: int, other: Card, other_power: int) -> bool:
    if KeywordAbility.TOXIC in other.computed.abilities:
        return True
    return other_power > 0 and power <= other_power
