"""
Built-in cards.

Each card is a CardArchetype constant plus, when it does something, an
Effect subclass. Effects that fire on every event they listen to derive
from TriggeredEffect and implement main(); the rest override activate()
to narrow the events they react to.

Card text uses {placeholders} rendered from the base attributes, and
<<card>> / [[keyword]] markers for clients.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import ActionType, AvailableAction, PlayerAvailableActions
from ..engine_core.abilities import KeywordAbility
from ..engine_core.card import CardArchetype, CardAttribute
from ..engine_core.commands import (
    DestroyCard,
    GenerateCardToken,
    GenerateShards,
    InflictDamage,
    ReturnCardToHand,
    ShuffleCardIntoDeck,
)
from ..engine_core.computed import CardType, CreatureType
from ..engine_core.continuous import InTurn, PowerBoost
from ..engine_core.effect import Effect, EffectReport
from ..engine_core.events import EventFilter, EventKind, EventReason
from ..engine_core.shards import Color
from ..engine_core.zones import ZoneKind

if TYPE_CHECKING:
    from ..engine_core.action import Action
    from ..engine_core.effect import EffectActivateContext, EffectTriggerContext
    from ..engine_core.events import CardEvent


class TriggeredEffect(Effect):
    """Pushes "main" on every event in the filter and resolves it with main()."""

    def activate(self, event: CardEvent, ctx: EffectActivateContext):
        ctx.trigger_stack("main")

    def resolve(self, stack_id: str, ctx: EffectTriggerContext, action: Action | None) -> EffectReport:
        if stack_id != "main":
            return super().resolve(stack_id, ctx, action)
        return self.main(ctx, action)

    def main(self, ctx: EffectTriggerContext, action: Action | None) -> EffectReport:
        return EffectReport()


def _select_or_offer(ctx: EffectTriggerContext, action: Action | None, candidates, command_factory, instructions):
    """Shared flow for "choose a card" effects."""
    if not candidates:
        return EffectReport()
    if action is not None and action.action_type == ActionType.SELECT_CARD and action.card in candidates:
        return EffectReport().with_commands([command_factory(action.card)])
    offer = PlayerAvailableActions(
        ctx.source.controller,
        [AvailableAction.select_card(candidates)],
        instructions=instructions,
    )
    return EffectReport().with_available_actions(offer)


# ============================================================================
# Effects
# ============================================================================

class BamboosterEffect(TriggeredEffect):
    events = EventFilter.ATTACKING

    def main(self, ctx, action):
        power = ctx.source.computed.current_power
        if power <= 0:
            return EffectReport()
        return EffectReport().with_commands([InflictDamage(ctx.source.controller, power)])


class DiamondPorcupineEffect(TriggeredEffect):
    events = EventFilter.DEALT_DAMAGE

    def activate(self, event, ctx):
        if event.reason == EventReason.BATTLE:
            ctx.trigger_stack("main")

    def main(self, ctx, action):
        card = ctx.source
        return EffectReport().with_commands([
            GenerateShards(card.controller, card.id, card.computed.color, 1),
        ])


class AirborneEagleRayEffect(TriggeredEffect):
    events = EventFilter.CASTED

    def main(self, ctx, action):
        candidates = [
            card.timed_id for card in ctx.state.field_cards()
            if card.computed.is_targetable
        ]
        return _select_or_offer(
            ctx, action, candidates,
            lambda target: ReturnCardToHand(ctx.source.id, target, EventReason.EFFECT),
            "Choose a card to return to its owner's hand",
        )


class PyrosnailEffect(TriggeredEffect):
    events = EventFilter.DESTROYED

    def main(self, ctx, action):
        target = ctx.state.players.next_id(ctx.source.controller)
        return EffectReport().with_commands([InflictDamage(target, 100)])


class VigilantLynxEffect(TriggeredEffect):
    events = EventFilter.ANY_CASTED

    def activate(self, event, ctx):
        if ctx.source.id != ctx.target.id and ctx.source.controller != ctx.target.controller:
            ctx.trigger_stack("main")

    def main(self, ctx, action):
        ctx.push_continuous(PowerBoost(100), InTurn(ctx.state.turn))
        return EffectReport()


class ScrapyardRavenEffect(TriggeredEffect):
    events = EventFilter.CASTED

    def activate(self, event, ctx):
        if ctx.state.players.get(ctx.target.controller).shards.is_empty:
            ctx.trigger_stack("main")

    def main(self, ctx, action):
        card = ctx.source
        return EffectReport().with_commands([
            GenerateShards(card.controller, card.id, card.computed.color, 1),
        ])


class VoraciousAnteaterEffect(TriggeredEffect):
    events = EventFilter.DESTROYED

    def main(self, ctx, action):
        return EffectReport().with_commands([
            GenerateCardToken(ctx.new_id(), "ant", ctx.source.controller),
        ])


class MireAlligatorEffect(TriggeredEffect):
    events = EventFilter.CASTED

    def main(self, ctx, action):
        own_field = ctx.state.players.get(ctx.source.controller).field
        candidates = [card.timed_id for card in own_field if card.computed.is_targetable]
        return _select_or_offer(
            ctx, action, candidates,
            lambda target: DestroyCard(ctx.source.id, target, EventReason.EFFECT),
            "Choose one of your cards to destroy",
        )


class BinaryStarfishEffect(TriggeredEffect):
    events = EventFilter.CASTED

    def activate(self, event, ctx):
        if event.kind == EventKind.CASTED and event.from_zone.kind == ZoneKind.HAND:
            ctx.trigger_stack("main")

    def main(self, ctx, action):
        return EffectReport().with_commands([
            GenerateCardToken(ctx.new_id(), ctx.source.archetype.id, ctx.source.controller),
        ])


class DeepSeaWyrmEffect(TriggeredEffect):
    events = EventFilter.CASTED

    def main(self, ctx, action):
        power = ctx.source.computed.current_power
        commands = [
            ShuffleCardIntoDeck(ctx.source.id, card.timed_id)
            for card in ctx.state.field_cards()
            if card.computed.current_power < power
        ]
        return EffectReport().with_commands(commands)


class VolcanicWyrmEffect(TriggeredEffect):
    events = EventFilter.ATTACKING | EventFilter.BLOCKING

    def main(self, ctx, action):
        target = ctx.state.players.next_id(ctx.source.controller)
        return EffectReport().with_commands([InflictDamage(target, 200)])


# ============================================================================
# Archetypes
# ============================================================================

def _creature(color, cost, power, creature_type=None, abilities=(), shields=0, is_token=False):
    return CardAttribute(
        color=color,
        cost=cost,
        card_type=CardType.CREATURE,
        creature_type=creature_type,
        power=power,
        shields=shields,
        abilities=tuple(abilities),
        is_token=is_token,
    )


BAMBOOSTER = CardArchetype(
    id="bamb",
    name="Bambooster",
    attribute=_creature(Color.RED, 1, 300, CreatureType.ROBOT),
    effect_factory=BamboosterEffect,
    text="When attacking, inflict {power} damage to you.",
)

DIAMOND_PORCUPINE = CardArchetype(
    id="diam",
    name="Diamond Porcupine",
    attribute=_creature(Color.RED, 2, 100, CreatureType.CYBORG),
    effect_factory=DiamondPorcupineEffect,
    text="When this deals battle damage to a player, gain 1 red shard.",
)

AIRBORNE_EAGLE_RAY = CardArchetype(
    id="airb",
    name="Airborne Eagle Ray",
    attribute=_creature(Color.BLUE, 3, 300, CreatureType.CYBORG),
    effect_factory=AirborneEagleRayEffect,
    text="When cast, return a creature on the field to its owner's hand.",
)

COPPERMINE_SCORPION = CardArchetype(
    id="copp",
    name="Coppermine Scorpion",
    attribute=_creature(Color.RED, 2, 2, CreatureType.ROBOT, [KeywordAbility.TOXIC]),
    effect_factory=Effect,
    text="[[Toxic]]",
)

PYROSNAIL = CardArchetype(
    id="pyro",
    name="Pyrosnail",
    attribute=_creature(Color.RED, 2, 100, CreatureType.CYBORG, [KeywordAbility.VOLATILE]),
    effect_factory=PyrosnailEffect,
    text="[[Volatile]] When destroyed, inflict 100 damage to your opponent.",
)

VIGILANT_LYNX = CardArchetype(
    id="vigi",
    name="Vigilant Lynx",
    attribute=_creature(Color.GREEN, 2, 100, CreatureType.MUTANT, shields=1),
    effect_factory=VigilantLynxEffect,
    text="When your opponent casts a card, this gets +100 power until end of turn.",
)

MOONLIT_GECKO = CardArchetype(
    id="moon",
    name="Moonlit Gecko",
    attribute=_creature(Color.GREEN, 0, 1, CreatureType.MUTANT),
    effect_factory=Effect,
)

SCRAPYARD_RAVEN = CardArchetype(
    id="scra",
    name="Scrapyard Raven",
    attribute=_creature(Color.GREEN, 2, 200),
    effect_factory=ScrapyardRavenEffect,
    text="When cast, if you have no shards, gain 1 green shard.",
)

ANT = CardArchetype(
    id="ant",
    name="Ant",
    attribute=_creature(Color.GREEN, 0, 1, CreatureType.MUTANT, is_token=True),
    effect_factory=Effect,
)

VORACIOUS_ANTEATER = CardArchetype(
    id="vora",
    name="Voracious Anteater",
    attribute=_creature(Color.GREEN, 3, 400, CreatureType.CYBORG, [KeywordAbility.DEVOUR]),
    effect_factory=VoraciousAnteaterEffect,
    text="[[Devour]] When destroyed, generate an <<Ant>> token.",
)

MIRE_ALLIGATOR = CardArchetype(
    id="mire",
    name="Mire Alligator",
    attribute=_creature(Color.GREEN, 3, 400, CreatureType.MUTANT, [KeywordAbility.DEVOUR]),
    effect_factory=MireAlligatorEffect,
    text="[[Devour]] When cast, destroy one of your creatures.",
)

BINARY_STARFISH = CardArchetype(
    id="bina",
    name="Binary Starfish",
    attribute=_creature(Color.BLUE, 3, 200, CreatureType.MUTANT),
    effect_factory=BinaryStarfishEffect,
    text="When cast from your hand, generate a copy of this card.",
)

DEEP_SEA_WYRM = CardArchetype(
    id="deep",
    name="Deep-Sea Wyrm",
    attribute=_creature(Color.BLUE, 6, 500, abilities=[KeywordAbility.STEALTH]),
    effect_factory=DeepSeaWyrmEffect,
    text="[[Stealth]] When cast, shuffle every creature with less than {power} power into its owner's deck.",
)

OREPECKER = CardArchetype(
    id="orep",
    name="Orepecker",
    attribute=_creature(Color.RED, 1, 100, CreatureType.CYBORG, [KeywordAbility.PIERCING]),
    effect_factory=Effect,
    text="[[Piercing]]",
)

SOUNDLESS_OWL = CardArchetype(
    id="soun",
    name="Soundless Owl",
    attribute=_creature(Color.BLUE, 2, 3, CreatureType.CYBORG, [KeywordAbility.STEALTH]),
    effect_factory=Effect,
    text="[[Stealth]]",
)

WIND_UP_SPIDER = CardArchetype(
    id="wind",
    name="Wind-Up Spider",
    attribute=_creature(Color.RED, 0, 1, CreatureType.ROBOT),
    effect_factory=Effect,
)

ELECTRIC_CLIONE = CardArchetype(
    id="elec",
    name="Electric Clione",
    attribute=_creature(Color.BLUE, 0, 1, CreatureType.PROGRAM, [KeywordAbility.VOLATILE]),
    effect_factory=Effect,
    text="[[Volatile]]",
)

VOLCANIC_WYRM = CardArchetype(
    id="volc",
    name="Volcanic Wyrm",
    attribute=_creature(Color.RED, 7, 500, CreatureType.MUTANT),
    effect_factory=VolcanicWyrmEffect,
    text="When attacking or blocking, inflict 200 damage to your opponent.",
)


ALL_CARDS = [
    BAMBOOSTER,
    DIAMOND_PORCUPINE,
    AIRBORNE_EAGLE_RAY,
    COPPERMINE_SCORPION,
    PYROSNAIL,
    VIGILANT_LYNX,
    MOONLIT_GECKO,
    SCRAPYARD_RAVEN,
    ANT,
    VORACIOUS_ANTEATER,
    MIRE_ALLIGATOR,
    BINARY_STARFISH,
    DEEP_SEA_WYRM,
    OREPECKER,
    SOUNDLESS_OWL,
    WIND_UP_SPIDER,
    ELECTRIC_CLIONE,
    VOLCANIC_WYRM,
]
