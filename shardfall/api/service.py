"""
Match Service - Business logic layer between the API and the engine.

The service:
1. Builds game profiles from requests (starter decks or deck-list text)
2. Creates sessions and seats bots
3. Converts client actions to engine actions
4. Formats per-player snapshots and logs

This layer is framework-agnostic (can be used with FastAPI, Flask, etc.)
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .schemas import (
    # Requests
    CreateMatchRequest,
    ActionRequest,
    CardRef,
    # Responses
    MatchResponse,
    SnapshotResponse,
    ActionResponse,
    LogResponse,
    CatalogEntry,
    ErrorResponse,
    # Shared
    CardInfo,
    PlayerInfo,
    StackItemInfo,
    AvailableActionInfo,
    OfferInfo,
    LogEntry,
    # Enums
    ActionKind,
    ErrorCode,
    MatchStatus,
)
from ..bots import PERSONALITIES, BotPolicy, LookaheadBot, RandomPolicy, SimpleBot
from ..catalog import Catalog, STARTER_DECKS, default_catalog, starter_deck
from ..engine_core.action import Action, ActionType, PlayerAvailableActions
from ..engine_core.card import CardSnapshot
from ..engine_core.config import GameConfig, GameProfile, PlayerConfig, Regulation
from ..engine_core.errors import GameError
from ..engine_core.ids import TimedObjectId
from ..engine_core.local import LocalEnvironment
from ..engine_core.log import GameLog
from ..rules.deck import DeckList
from ..session import GameLoop, SessionBusyError, SessionManager


def _not_found(match_id: str) -> ErrorResponse:
    return ErrorResponse(
        error=f"Match {match_id} not found",
        error_code=ErrorCode.MATCH_NOT_FOUND,
    )


def _card_info(snapshot: CardSnapshot) -> CardInfo:
    return CardInfo(
        id=snapshot.id,
        timestamp=snapshot.timestamp,
        archetype_id=snapshot.archetype_id,
        name=snapshot.name,
        owner=snapshot.owner,
        zone=str(snapshot.zone),
        power=snapshot.power,
        cost=snapshot.cost,
        field_state=snapshot.field_state,
        is_token=snapshot.is_token,
    )


def _log_entry(entry: GameLog) -> LogEntry:
    return LogEntry(
        kind=entry.kind.value,
        player=entry.player,
        card=_card_info(entry.card) if entry.card else None,
        target=_card_info(entry.target) if entry.target else None,
        data=dict(entry.data),
        message=entry.describe(),
    )


def _ref(timed_id: TimedObjectId) -> CardRef:
    return CardRef(id=timed_id.id, timestamp=timed_id.timestamp)


def _timed(ref: CardRef) -> TimedObjectId:
    return TimedObjectId(ref.id, ref.timestamp)


def _offer_info(offer: PlayerAvailableActions) -> OfferInfo:
    return OfferInfo(
        player=offer.player,
        actions=[
            AvailableActionInfo(
                action_type=ActionKind(available.action_type.value),
                cards=[_ref(c) for c in available.cards],
                attackers=[_ref(a) for a in available.attackers],
            )
            for available in offer.actions
        ],
        instructions=offer.instructions,
    )


def to_engine_action(request: ActionRequest) -> Action:
    """Convert a client action request into an engine Action."""
    kind = ActionType(request.action_type.value)
    if kind in (ActionType.CAST_CARD, ActionType.SELECT_CARD):
        if request.card is None:
            raise ValueError(f"{kind.value} requires a card")
        card = _timed(request.card)
        return Action.cast_card(card) if kind == ActionType.CAST_CARD else Action.select_card(card)
    if kind == ActionType.ATTACK:
        return Action.attack([_timed(a) for a in request.attackers])
    if kind == ActionType.BLOCK:
        return Action.block([(_timed(a), _timed(b)) for a, b in request.pairs])
    return Action(kind)


@dataclass
class MatchService:
    """
    Main service for match clients.

    Usage:
        service = MatchService()

        match = service.create_match(request)
        snapshot = service.get_snapshot(match.match_id, viewer=0)
        result = service.submit_action(match.match_id, action_request)
    """
    catalog: Catalog = field(default_factory=default_catalog)
    regulation: Regulation = field(default_factory=Regulation.standard)
    session_manager: SessionManager = None  # type: ignore

    # Game loops per match
    _game_loops: dict[str, GameLoop] = field(default_factory=dict)

    def __post_init__(self):
        if self.session_manager is None:
            self.session_manager = SessionManager(catalog=self.catalog)

    # =========================================================================
    # Matches
    # =========================================================================

    def load_deck(self, text: str) -> DeckList:
        """A starter deck by name, or parsed deck-list text."""
        if text.strip().lower() in STARTER_DECKS:
            return starter_deck(text.strip().lower(), self.catalog)
        return DeckList.parse(text, self.catalog)

    def make_bot(self, kind: str, seed: int | None = None) -> BotPolicy:
        if kind == "simple":
            return SimpleBot()
        if kind == "random":
            return RandomPolicy(seed)
        if kind in PERSONALITIES:
            return LookaheadBot(personality=PERSONALITIES[kind], seed=seed)
        raise ValueError(f"Unknown bot: {kind}")

    def create_match(self, request: CreateMatchRequest) -> MatchResponse | ErrorResponse:
        """
        Start a match and run it to the first decision for a client.
        """
        players = []
        warnings: list[str] = []
        bots: dict[int, BotPolicy] = {}
        for seat_id, seat in enumerate(request.seats):
            try:
                deck = self.load_deck(seat.deck)
                result = self.regulation.verify(deck, self.catalog)
                result.raise_for_errors()
                if seat.bot:
                    bots[seat_id] = self.make_bot(seat.bot, request.seed)
            except GameError as e:
                return ErrorResponse(error=e.message, error_code=ErrorCode.INVALID_DECK, details=e.details)
            except ValueError as e:
                return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
            warnings.extend(f"seat {seat_id}: {w}" for w in result.warnings)
            players.append(PlayerConfig(deck=deck, name=seat.name))

        profile = GameProfile(
            players=players,
            config=GameConfig(
                rng_seed=request.seed,
                no_deck_shuffle=request.no_deck_shuffle,
                no_player_shuffle=request.no_player_shuffle,
            ),
            regulation=self.regulation,
        )
        session = self.session_manager.create_session(profile, bots)
        loop = GameLoop(session)
        self._game_loops[session.session_id] = loop
        result = loop.advance()

        return MatchResponse(
            match_id=session.session_id,
            status=self._status(session.env.condition.is_ended),
            players=[p.id for p in session.env.state.players.players],
            bots=sorted(bots),
            warnings=warnings,
        )

    def end_match(self, match_id: str) -> bool:
        if match_id not in self._game_loops:
            return False
        self._game_loops.pop(match_id)
        self.session_manager.end_session(match_id, reason="ended by client")
        return True

    def list_matches(self) -> list[str]:
        return self.session_manager.list_active_sessions()

    # =========================================================================
    # Play
    # =========================================================================

    def get_snapshot(self, match_id: str, viewer: int) -> SnapshotResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if session is None:
            return _not_found(match_id)
        local = LocalEnvironment.from_env(session.env, viewer, log_offset=len(session.env.logs))
        return SnapshotResponse(
            match_id=match_id,
            viewer=viewer,
            status=self._status(local.ended),
            turn=local.turn,
            phase=local.phase,
            player_in_turn=local.player_in_turn,
            players=[
                PlayerInfo(
                    id=p.id,
                    name=p.name,
                    life=p.life,
                    shards=p.shards,
                    deck_count=p.deck_count,
                    hand_count=p.hand_count,
                    hand=[_card_info(c) for c in p.hand] if p.hand is not None else None,
                    field=[_card_info(c) for c in p.field],
                    graveyard=[_card_info(c) for c in p.graveyard],
                    colony=[_card_info(c) for c in p.colony],
                    is_bot=session.is_bot_seat(p.id),
                )
                for p in local.players
            ],
            stack=[StackItemInfo(source=item.source, id=item.id) for item in local.stack],
            available_actions=_offer_info(local.available_actions) if local.available_actions else None,
            winner=local.winner,
        )

    def submit_action(self, match_id: str, request: ActionRequest) -> ActionResponse | ErrorResponse:
        """
        Queue a client action and run the match to the next client decision.
        """
        loop = self._game_loops.get(match_id)
        if loop is None:
            return _not_found(match_id)
        try:
            action = to_engine_action(request)
        except ValueError as e:
            return ErrorResponse(error=str(e), error_code=ErrorCode.VALIDATION_ERROR)
        try:
            self.session_manager.submit(match_id, request.player, action)
        except SessionBusyError as e:
            return ErrorResponse(error=e.message, error_code=ErrorCode.SESSION_BUSY, details=e.details)

        result = loop.drain()
        if result.errors:
            error = result.errors[0]
            return ErrorResponse(
                error=error["error"],
                error_code=ErrorCode.INVALID_ACTION,
                details={"reason": error["error_code"], **error["details"]},
            )
        return ActionResponse(
            match_id=match_id,
            status=self._status(loop.session.env.condition.is_ended),
            logs=[_log_entry(entry.redacted(request.player)) for entry in result.logs],
            bot_actions=result.bot_actions,
            winner=result.winner,
        )

    def get_log(self, match_id: str, viewer: int, offset: int = 0) -> LogResponse | ErrorResponse:
        session = self.session_manager.get_session(match_id)
        if session is None:
            return _not_found(match_id)
        local = LocalEnvironment.from_env(session.env, viewer, log_offset=offset)
        return LogResponse(
            match_id=match_id,
            offset=offset,
            entries=[_log_entry(entry) for entry in local.logs],
        )

    def list_catalog(self) -> list[CatalogEntry]:
        return [
            CatalogEntry(
                id=archetype.id,
                name=archetype.name,
                color=archetype.attribute.color.display_name,
                cost=archetype.attribute.cost,
                power=archetype.attribute.power,
                text=self.catalog.describe(archetype.id),
            )
            for archetype in self.catalog
        ]

    def _status(self, ended: bool) -> MatchStatus:
        return MatchStatus.GAME_OVER if ended else MatchStatus.WAITING_INPUT
