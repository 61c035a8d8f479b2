"""
Simple Bot - Rule-of-thumb play without search.

Looks at the offered actions (choices first, then casts, then combat)
and takes the first one a heuristic applies to:
- SelectCard: the best card for us (own cards score positive, the
  opponent's negative)
- CastCard: the highest-scoring castable card
- Attack: every creature stronger than the strongest untapped blocker,
  unless the opponent's board could kill us on the swing back
- Block: stop the biggest attackers with stronger blockers, or with
  anything when the incoming damage is lethal
Otherwise the offer's default action.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from ..engine_core.action import Action, ActionType
from .policy import BotDecision, BotPolicy, FirstLegalPolicy, offer_for

if TYPE_CHECKING:
    from ..engine_core.action import AvailableAction
    from ..engine_core.environment import Environment
    from ..engine_core.state import GameState


_PRIORITY = {
    ActionType.SELECT_CARD: 0,
    ActionType.CAST_CARD: 1,
    ActionType.ATTACK: 2,
    ActionType.BLOCK: 3,
}


class SimpleBot(BotPolicy):

    def select_action(self, env: Environment, player: int) -> BotDecision:
        offer = offer_for(env, player)
        state = env.state
        for available in sorted(offer.actions, key=lambda a: _PRIORITY.get(a.action_type, len(_PRIORITY))):
            action = self._consider(state, player, available)
            if action is not None:
                return BotDecision(action=action, explanation=f"Heuristic {action.describe()}")

        action = offer.default_action()
        if action is None:
            return FirstLegalPolicy().select_action(env, player)
        return BotDecision(action=action, explanation="Default action")

    def _consider(self, state: GameState, player: int, available: AvailableAction) -> Action | None:
        kind = available.action_type
        if kind == ActionType.SELECT_CARD:
            return self._select(state, player, available)
        if kind == ActionType.ATTACK:
            return self._attack(state, player, available)
        if kind == ActionType.BLOCK:
            return self._block(state, player, available)
        if kind == ActionType.CAST_CARD:
            cards = [state.find_card(c.id) for c in available.cards]
            cards = [c for c in cards if c is not None]
            if cards:
                return Action.cast_card(max(cards, key=lambda c: c.score()).timed_id)
        return None

    def _select(self, state: GameState, player: int, available: AvailableAction) -> Action | None:
        best = None
        best_score = None
        for timed_id in available.cards:
            card = state.find_card(timed_id.id)
            if card is None:
                continue
            score = card.score() if card.controller == player else -card.score()
            if best_score is None or score > best_score:
                best, best_score = timed_id, score
        return Action.select_card(best) if best is not None else None

    def _attack(self, state: GameState, player: int, available: AvailableAction) -> Action | None:
        me = state.players.get(player)
        opponent = state.players.next_player(player)
        blockers = [c.computed.current_power for c in opponent.field.active_cards()]
        if sum(blockers) >= me.life:
            return Action.attack([])
        strongest = max(blockers, default=0)
        attackers = []
        for timed_id in available.cards:
            card = state.find_card(timed_id.id)
            power = card.computed.current_power if card else 0
            if power > 0 and power > strongest:
                attackers.append(timed_id)
        return Action.attack(attackers) if attackers else None

    def _block(self, state: GameState, player: int, available: AvailableAction) -> Action:
        me = state.players.get(player)
        blockers = [state.find_card(c.id) for c in available.cards]
        blockers = sorted((c for c in blockers if c is not None), key=lambda c: c.computed.current_power)
        attackers = [state.find_card(c.id) for c in available.attackers]
        attackers = sorted((c for c in attackers if c is not None), key=lambda c: c.computed.current_power)

        pairs = []
        while attackers and blockers:
            incoming = sum(c.computed.current_power for c in attackers)
            attacker = attackers.pop()
            power = attacker.computed.current_power
            if power <= 0:
                continue
            for index, blocker in enumerate(blockers):
                if blocker.computed.current_power > power or incoming >= me.life:
                    pairs.append((attacker.timed_id, blockers.pop(index).timed_id))
                    break
        return Action.block(pairs)
