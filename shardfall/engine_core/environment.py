"""
Environment - The match controller.

Owns the live GameState, the queue of pending opcode batches and the
action set last offered to a player. process() is the single entry point:

1. Validate the action against the retained offer. Concede always passes;
   debug commands pass when the DEBUG_COMMAND flag is set; with no offer
   outstanding only Continue from the player in turn or the controller of
   the resolving stack item is accepted.
2. If the stack is non-empty, resolve its top item on a working copy.
   Otherwise pop the next opcode batch, asking the phase rules for more
   when the queue is empty.
3. Refresh: drop spent continuous effects, recompute attributes, check
   the game condition.

GameErrors come back in ProcessReport.error and leave the state untouched.
A failed opcode batch stays at the head of the queue; run_until_input()
raises its error rather than retrying it. Nothing else is caught.
"""

from __future__ import annotations
from collections import deque
from copy import deepcopy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
import logging
import random

from . import opcodes as op
from .action import Action, ActionType, PlayerAvailableActions
from .action_generator import available_actions
from .card import Card
from .commands import CommandLowering
from .config import DebugFlags, GameProfile
from .effect import EffectTriggerContext
from .errors import GameError, IllegalActionError
from .field import Field
from .log import GameLog
from .phases import PhaseRules
from .player import EndgameReason, Player, PlayerEndgameState, PlayerList
from .state import GameCondition, GameState

if TYPE_CHECKING:
    from ..catalog.registry import Catalog

logger = logging.getLogger(__name__)


@dataclass
class ProcessReport:
    """Outcome of one process() call."""
    available_actions: PlayerAvailableActions | None = None
    logs: list[GameLog] = field(default_factory=list)
    error: GameError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "logs": [entry.to_dict() for entry in self.logs],
            "error": self.error.to_dict() if self.error else None,
        }


def build_state(profile: GameProfile, catalog: Catalog) -> GameState:
    """Seat the players and fill their decks; nothing is dealt yet."""
    config = profile.config
    regulation = profile.regulation
    state = GameState(
        regulation=regulation,
        config=config,
        rng=random.Random(config.rng_seed),
    )
    players = []
    for index, player_config in enumerate(profile.players):
        player = Player(
            id=index,
            life=regulation.initial_life,
            name=player_config.name or f"Player {index + 1}",
            field=Field(capacity=regulation.field_size),
        )
        for archetype_id in player_config.deck.archetype_ids():
            archetype = catalog.get(archetype_id)
            player.deck.push(Card.new(state.ids, state.generations, archetype, player.id))
        players.append(player)

    first = 0
    if players and not config.no_player_shuffle:
        first = state.rng.choice([p.id for p in players])
    state.players = PlayerList(players, first)
    return state


def compute_effects(state: GameState):
    """Rebuild every computed attribute from base values plus continuous effects."""
    for card in state.all_cards():
        card.computed = state.continuous.apply_card(state, card)
    for player in state.players:
        player.abilities = state.continuous.apply_player(state, player.id)


def check_game_condition(state: GameState) -> list[GameLog]:
    if state.condition.is_ended:
        return []
    for player in state.players:
        if player.life <= 0 and player.endgame is None:
            player.endgame = PlayerEndgameState.lose(EndgameReason.LIFE_ZERO)

    winners = [p for p in state.players if p.endgame is not None and p.endgame.won]
    losers = [p for p in state.players if p.endgame is not None and not p.endgame.won]
    if len(winners) == 1:
        condition = GameCondition.finished(winners[0].id, winners[0].endgame.reason)
    elif len(losers) == 1:
        loser = losers[0]
        winner = state.players.next_player(loser.id)
        winner.endgame = PlayerEndgameState.win(loser.endgame.reason)
        condition = GameCondition.finished(winner.id, loser.endgame.reason)
    elif losers or winners:
        condition = GameCondition.finished(None, EndgameReason.SIMULTANEOUS_END)
    else:
        return []

    state.condition = condition
    return [GameLog.game_ended(condition.winner, condition.reason.value)]


def refresh(state: GameState) -> list[GameLog]:
    state.continuous.update(state)
    compute_effects(state)
    return check_game_condition(state)


class Environment:
    """
    A running match.

    Usage:
        env = Environment(profile, default_catalog())
        env.run_until_input()
        report = env.process(player, action)
    """

    def __init__(self, profile: GameProfile, catalog: Catalog):
        self.catalog = catalog
        self.state = build_state(profile, catalog)
        self.opcodes: deque[op.OpcodeList] = deque()
        self.last_available: PlayerAvailableActions | None = None
        self.logs: list[GameLog] = []

    @property
    def condition(self) -> GameCondition:
        return self.state.condition

    def available_actions(self) -> PlayerAvailableActions | None:
        """The offer process() validates against; None while the match runs on its own."""
        return self.last_available

    def clone(self) -> Environment:
        return deepcopy(self)

    # =========================================================================
    # Processing
    # =========================================================================

    def process(self, player: int, action: Action) -> ProcessReport:
        if action.action_type == ActionType.CONCEDE:
            return self._concede(player)
        if self.state.condition.is_ended:
            return self._reject(IllegalActionError("the game has ended"))
        if action.action_type == ActionType.DEBUG_COMMAND:
            return self._debug_command(action)
        if self.last_available is None:
            if not self._may_continue(player, action):
                return self._reject(IllegalActionError(
                    f"{action.describe()} was not offered to player {player}"
                ))
        elif not self.last_available.validate(player, action):
            return self._reject(self._rejection_reason(player, action))

        if not self.state.stack.is_empty:
            return self._resolve_stack(player, action)
        return self._step(player, action)

    def _finish(self, logs: list[GameLog]) -> ProcessReport:
        self.logs.extend(logs)
        return ProcessReport(self.last_available, logs)

    def _reject(self, error: GameError) -> ProcessReport:
        logger.warning("Rejected action: %s", error.message)
        return ProcessReport(self.last_available, [], error)

    def _may_continue(self, player: int, action: Action) -> bool:
        if action.action_type != ActionType.CONTINUE:
            return False
        if player == self.state.players.player_in_turn_id:
            return True
        item = self.state.stack.peek()
        if item is None:
            return False
        source = self.state.find_card(item.source)
        return source is not None and source.controller == player

    def _rejection_reason(self, player: int, action: Action) -> GameError:
        """Explain why an action outside the offer is illegal."""
        if action.action_type == ActionType.CAST_CARD and action.card is not None:
            try:
                PhaseRules(self.state, self.catalog).cast_card(player, action)
            except GameError as error:
                return error
        return IllegalActionError(f"{action.describe()} is not available to player {player}")

    def _current_offer(self) -> PlayerAvailableActions | None:
        if self.opcodes:
            return None
        return available_actions(self.state)

    def _concede(self, player: int) -> ProcessReport:
        try:
            self.state.players.get(player).endgame = PlayerEndgameState.lose(EndgameReason.CONCEDE)
        except GameError as error:
            return self._reject(error)
        logs = refresh(self.state)
        self.last_available = None
        return self._finish(logs)

    def _debug_command(self, action: Action) -> ProcessReport:
        if not self.state.config.debug & DebugFlags.DEBUG_COMMAND:
            return self._reject(IllegalActionError("debug commands are disabled"))
        working = self.state.clone()
        try:
            batches = CommandLowering(working, self.catalog).lower_all(list(action.commands))
            logs = op.OpcodeExecutor(working).execute_all(batches)
        except GameError as error:
            return self._reject(error)
        logs.extend(refresh(working))
        self.state = working
        self.last_available = self._current_offer()
        return self._finish(logs)

    def _step(self, player: int, action: Action) -> ProcessReport:
        if not self.opcodes:
            try:
                batches = PhaseRules(self.state, self.catalog).opcodes(player, action)
            except GameError as error:
                return self._reject(error)
            self.opcodes.extend(batches)

        logs = []
        if self.opcodes:
            batch = self.opcodes[0]
            logger.debug("Applying batch of %d opcode(s)", len(batch))
            try:
                self.state, logs = op.apply_batches(self.state, [batch])
            except GameError as error:
                logger.error("Opcode batch failed: %s", error.message)
                return ProcessReport(self.last_available, [], error)
            self.opcodes.popleft()
        logs.extend(refresh(self.state))
        self.last_available = self._current_offer()
        return self._finish(logs)

    def _resolve_stack(self, player: int, action: Action) -> ProcessReport:
        working = self.state.clone()
        item = working.stack.pop()
        try:
            effect = self.catalog.handler(item.archetype)
            source = working.get_card(item.source)
            ctx = EffectTriggerContext(working, source, item.params)
            # Only an item that already made an offer may consume the answer.
            answer = action if item.prompted else None
            report = effect.resolve(item.id, ctx, answer)

            logs = []
            if answer is not None and answer.action_type == ActionType.SELECT_CARD and answer.card is not None:
                target = working.find_card(answer.card.id)
                if target is not None:
                    logs.append(GameLog.card_targeted(source.snapshot(), target.snapshot()))

            working.continuous.extend(ctx.continuous)
            working.stack.extend(ctx.stack)
            batches = CommandLowering(working, self.catalog).lower_all(report.commands)
            logs.extend(op.OpcodeExecutor(working).execute_all(batches))
        except GameError as error:
            logger.error("Stack item %s:%s failed: %s", item.archetype, item.id, error.message)
            self.state.stack.pop()
            self.last_available = self._current_offer()
            return ProcessReport(self.last_available, [], error)

        if report.needs_choice:
            item.prompted = True
            working.stack.push(item)
        logs.extend(refresh(working))
        self.state = working
        if report.needs_choice and not working.condition.is_ended:
            self.last_available = report.available_actions
        else:
            self.last_available = self._current_offer()
        return self._finish(logs)

    # =========================================================================
    # Driving
    # =========================================================================

    def run_until_input(self, max_steps: int = 10_000) -> list[GameLog]:
        """Advance until a player must choose or the game ends."""
        logs = []
        for _ in range(max_steps):
            if self.state.condition.is_ended or self.last_available is not None:
                return logs
            stuck = self.opcodes[0] if self.opcodes and self.state.stack.is_empty else None
            report = self.process(self.state.players.player_in_turn_id, Action.continue_())
            logs.extend(report.logs)
            if report.error is not None and stuck is not None and self.opcodes and self.opcodes[0] is stuck:
                raise report.error
        raise IllegalActionError(f"match did not reach a decision point in {max_steps} steps")
