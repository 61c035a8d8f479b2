"""
Action Generator - Which actions are on offer right now.

Returns None while the stack is resolving or after the game ended;
otherwise the PlayerAvailableActions for the one player who must act.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from .action import AvailableAction, PlayerAvailableActions
from .config import DebugFlags
from .ids import TimedObjectId
from .state import Phase

if TYPE_CHECKING:
    from .card import Card
    from .player import Player
    from .state import GameState


def is_castable(state: GameState, player: Player, card: Card) -> bool:
    """Same checks the Main phase applies when the cast is submitted."""
    if not player.field.has_space():
        return False
    cost = card.computed.cost.value()
    if state.config.debug & DebugFlags.IGNORE_COST:
        castable = True
    elif cost == 0:
        castable = not (card.computed.is_creature and player.counters.free_casted > 0)
    else:
        castable = len(player.shards) >= cost
    return card.effect.is_castable(state, card, castable)


def castable_cards(state: GameState, player: Player) -> list[TimedObjectId]:
    return [card.timed_id for card in player.hand if is_castable(state, player, card)]


def available_actions(state: GameState) -> PlayerAvailableActions | None:
    if not state.stack.is_empty or state.condition.is_ended or state.turn == 0:
        return None

    in_turn = state.players.player_in_turn

    if state.phase == Phase.MAIN:
        actions = [AvailableAction.end_turn()]
        castable = castable_cards(state, in_turn)
        if castable:
            actions.append(AvailableAction.cast_card(castable))
        attackers = [card.timed_id for card in in_turn.field.active_cards() if card.computed.is_creature]
        if attackers:
            actions.append(AvailableAction.attack(attackers))
        return PlayerAvailableActions(in_turn.id, actions)

    if state.phase == Phase.BLOCK:
        attackers = [card.timed_id for card in in_turn.field.attacking_cards()]
        if not attackers:
            return None
        defender = state.players.next_player(in_turn.id)
        blockers = [card.timed_id for card in defender.field.active_cards() if card.computed.is_creature]
        actions = [AvailableAction.block(blockers, attackers)]
        castable = castable_cards(state, defender)
        if castable:
            actions.append(AvailableAction.cast_card(castable))
        return PlayerAvailableActions(defender.id, actions)

    if state.phase == Phase.END and len(in_turn.hand) > state.regulation.max_hand_size:
        cards = [card.timed_id for card in in_turn.hand]
        return PlayerAvailableActions(
            in_turn.id,
            [AvailableAction.select_card(cards)],
            instructions=f"Discard down to {state.regulation.max_hand_size} cards",
        )

    return None
