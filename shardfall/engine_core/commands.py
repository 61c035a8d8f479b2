"""
Commands - Declarative effect outcomes and their lowering into opcodes.

Stack handlers return commands ("destroy that card", "deal 200 damage").
Lowering checks the commands against the current state and turns each one
into opcode batches. A command whose target is gone, or was renewed since
it was chosen, fails with TargetLostError.

Card events are lowered here too: apply_event() adds the zone move an
event implies plus a TriggerEvent, and only when the listening card's
filter includes the event.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from . import opcodes as op
from .abilities import KeywordAbility
from .card import Card
from .errors import TargetLostError
from .events import CardEvent, EventKind, EventReason
from .field import FieldState
from .ids import ObjectId, TimedObjectId
from .shards import Color
from .zones import MoveReason, Zone, ZoneKind

if TYPE_CHECKING:
    from ..catalog.registry import Catalog
    from .state import GameState


class ActionCommand:
    """Marker base class for commands."""


@dataclass(frozen=True)
class InflictDamage(ActionCommand):
    target: int
    amount: int


@dataclass(frozen=True)
class DestroyCard(ActionCommand):
    source: ObjectId
    target: TimedObjectId
    reason: EventReason = EventReason.EFFECT


@dataclass(frozen=True)
class ReturnCardToHand(ActionCommand):
    source: ObjectId
    target: TimedObjectId
    reason: EventReason = EventReason.EFFECT


@dataclass(frozen=True)
class ShuffleCardIntoDeck(ActionCommand):
    source: ObjectId
    target: TimedObjectId


@dataclass(frozen=True)
class SetFieldState(ActionCommand):
    source: ObjectId
    target: TimedObjectId
    state: FieldState
    reason: EventReason = EventReason.EFFECT


@dataclass(frozen=True)
class GenerateCardToken(ActionCommand):
    token: ObjectId
    archetype: str
    player: int


@dataclass(frozen=True)
class GenerateShards(ActionCommand):
    player: int
    source: ObjectId | None
    color: Color
    amount: int


@dataclass(frozen=True)
class ConsumeShards(ActionCommand):
    player: int
    source: ObjectId | None
    color: Color
    amount: int


@dataclass(frozen=True)
class BreakShield(ActionCommand):
    target: TimedObjectId


class CommandLowering:
    """Lowers commands and card events against one state."""

    def __init__(self, state: GameState, catalog: Catalog):
        self.state = state
        self.catalog = catalog

    def lower(self, command: ActionCommand) -> list[op.OpcodeList]:
        handler = self._get_handler(type(command))
        return handler(command)

    def lower_all(self, commands: list[ActionCommand]) -> list[op.OpcodeList]:
        """Lower every command or none: the first failure propagates."""
        batches = []
        for command in commands:
            batches.extend(self.lower(command))
        return [batch for batch in batches if batch]

    def _get_handler(self, command_type: type) -> Callable[[ActionCommand], list[op.OpcodeList]]:
        handlers = {
            InflictDamage: self._inflict_damage,
            DestroyCard: self._destroy_card,
            ReturnCardToHand: self._return_card_to_hand,
            ShuffleCardIntoDeck: self._shuffle_card_into_deck,
            SetFieldState: self._set_field_state,
            GenerateCardToken: self._generate_card_token,
            GenerateShards: self._generate_shards,
            ConsumeShards: self._consume_shards,
            BreakShield: self._break_shield,
        }
        return handlers[command_type]

    def _current(self, target: TimedObjectId) -> Card:
        card = self.state.find_card(target.id)
        if card is None or card.timed_id != target:
            raise TargetLostError(target)
        return card

    # =========================================================================
    # Command handlers
    # =========================================================================

    def _inflict_damage(self, command: InflictDamage) -> list[op.OpcodeList]:
        return [[op.InflictDamage(command.target, command.amount)]]

    def _destroy_card(self, command: DestroyCard) -> list[op.OpcodeList]:
        source = self.state.get_card(command.source)
        target = self._current(command.target)
        piercing = KeywordAbility.PIERCING in source.computed.abilities
        if not piercing and target.computed.current_shields > 0:
            return [[op.BreakShield(target.id)]]
        return self.apply_event(CardEvent.destroyed(target.zone, command.reason), source, target)

    def _return_card_to_hand(self, command: ReturnCardToHand) -> list[op.OpcodeList]:
        source = self.state.get_card(command.source)
        target = self._current(command.target)
        return self.apply_event(CardEvent.returned_to_hand(command.reason), source, target)

    def _shuffle_card_into_deck(self, command: ShuffleCardIntoDeck) -> list[op.OpcodeList]:
        source = self.state.get_card(command.source)
        target = self._current(command.target)
        batches = self.apply_event(CardEvent.returned_to_deck(), source, target)
        batches.append([op.ShuffleDeck(target.owner)])
        return batches

    def _set_field_state(self, command: SetFieldState) -> list[op.OpcodeList]:
        target = self._current(command.target)
        return [[op.SetFieldState(target.id, command.state)]]

    def _generate_card_token(self, command: GenerateCardToken) -> list[op.OpcodeList]:
        archetype = self.catalog.get(command.archetype)
        card = Card.with_id(
            command.token,
            self.state.generations,
            archetype,
            owner=command.player,
            zone_kind=ZoneKind.FIELD,
        )
        batches = [[op.GenerateCardToken(card)]]
        batches.extend(self.apply_event(CardEvent.casted(card.zone), card, card))
        batches.extend(self.apply_event_any(CardEvent.any_casted(), card))
        return batches

    def _generate_shards(self, command: GenerateShards) -> list[op.OpcodeList]:
        return [[op.GenerateShards(command.player, command.source, command.color, command.amount)]]

    def _consume_shards(self, command: ConsumeShards) -> list[op.OpcodeList]:
        return [[op.ConsumeShards(command.player, command.source, command.color, command.amount)]]

    def _break_shield(self, command: BreakShield) -> list[op.OpcodeList]:
        target = self._current(command.target)
        return [[op.BreakShield(target.id)]]

    # =========================================================================
    # Events
    # =========================================================================

    def apply_event(self, event: CardEvent, source: Card, target: Card) -> list[op.OpcodeList]:
        """Opcodes implied by an event happening to target."""
        trigger = None
        if target.effect.event_filter() & event.filter:
            trigger = op.TriggerEvent(source.id, target.id, event)

        if event.kind == EventKind.DESTROYED:
            to_zone = Zone(target.owner, ZoneKind.GRAVEYARD)
            volatile = KeywordAbility.VOLATILE in target.computed.abilities
            devour = KeywordAbility.DEVOUR in source.computed.abilities
            batches = []
            if not (volatile or devour or target.is_token):
                batches.append([op.GenerateShards(to_zone.player, None, Color.COLORLESS, 1)])
            batch = [op.MoveCard(target.id, target.zone, to_zone, MoveReason.DESTROYED)]
            if trigger:
                batch.append(trigger)
            batches.append(batch)
            return batches

        if event.kind in (EventKind.RETURNED_TO_HAND, EventKind.RETURNED_TO_DECK):
            kind = ZoneKind.HAND if event.kind == EventKind.RETURNED_TO_HAND else ZoneKind.DECK
            batch = [op.MoveCard(target.id, target.zone, Zone(target.owner, kind), MoveReason.MOVE)]
            if trigger:
                batch.append(trigger)
            return [batch]

        return [[trigger]] if trigger else []

    def apply_event_any(self, event: CardEvent, source: Card) -> list[op.OpcodeList]:
        """Deliver event to every card on every field."""
        batches = []
        for card in list(self.state.field_cards()):
            batches.extend(self.apply_event(event, source, card))
        return batches
