"""
Tests for the effect pipeline.

Tests:
- Event filters gate triggers
- Stack resolves last-in first-out
- Continuous effects apply while their condition holds, then expire
- Command lowering (stale targets, shields, piercing, volatile, tokens)
- Opcode batches are all-or-nothing
"""

import pytest

from ..engine_core import opcodes as op
from ..engine_core.action import Action
from ..engine_core.commands import CommandLowering, DestroyCard, GenerateCardToken, InflictDamage
from ..engine_core.continuous import ContinuousItem, InTurn, OnField, PowerBoost
from ..engine_core.effect import Stack, StackItem
from ..engine_core.environment import refresh
from ..engine_core.errors import InsufficientShardsError, TargetLostError
from ..engine_core.events import CardEvent, EventFilter
from ..engine_core.ids import TimedObjectId
from ..engine_core.log import LogKind
from ..engine_core.shards import Color
from ..engine_core.zones import MoveReason, Zone, ZoneKind
from .conftest import put_card


class TestEventFilter:
    """Tests that events only reach effects that listen to them."""

    def test_listening_card_gets_trigger(self, env, catalog):
        """An event in the filter produces a TriggerEvent."""
        card = put_card(env, 0, "bamb", ZoneKind.FIELD)
        batches = CommandLowering(env.state, catalog).apply_event(CardEvent.attacking(), card, card)
        assert batches == [[op.TriggerEvent(card.id, card.id, CardEvent.attacking())]]

    def test_deaf_card_gets_nothing(self, env, catalog):
        """A card without the event in its filter is skipped."""
        card = put_card(env, 0, "orep", ZoneKind.FIELD)
        assert card.effect.event_filter() == EventFilter.NONE
        assert CommandLowering(env.state, catalog).apply_event(CardEvent.attacking(), card, card) == []

    def test_trigger_pushes_stack_item(self, env):
        """Executing a TriggerEvent puts the effect on the stack."""
        card = put_card(env, 0, "bamb", ZoneKind.FIELD)
        op.OpcodeExecutor(env.state).execute(op.TriggerEvent(card.id, card.id, CardEvent.attacking()))
        item = env.state.stack.peek()
        assert item.source == card.id
        assert item.archetype == "bamb"
        assert item.id == "main"

    def test_trigger_for_vanished_card_is_noop(self, env):
        """Triggers referencing a card that no longer exists do nothing."""
        logs = op.OpcodeExecutor(env.state).execute(op.TriggerEvent(99999, 99999, CardEvent.attacking()))
        assert logs == []
        assert env.state.stack.is_empty


class TestStack:
    """Tests for LIFO resolution."""

    def test_stack_pops_last_pushed(self):
        """pop returns the most recent item."""
        stack = Stack()
        stack.push(StackItem(1, "bamb", "first"))
        stack.push(StackItem(2, "pyro", "second"))
        assert stack.pop().id == "second"
        assert stack.pop().id == "first"
        assert stack.pop() is None

    def test_environment_resolves_top_first(self, env):
        """The item pushed last resolves first."""
        bamb = put_card(env, 0, "bamb", ZoneKind.FIELD)
        pyro = put_card(env, 0, "pyro", ZoneKind.FIELD)
        env.state.stack.push(StackItem(bamb.id, "bamb", "main"))
        env.state.stack.push(StackItem(pyro.id, "pyro", "main"))

        env.process(0, Action.continue_())
        assert env.state.players.get(1).life == 1900
        assert env.state.players.get(0).life == 2000

        env.process(0, Action.continue_())
        assert env.state.players.get(0).life == 1700
        assert env.state.stack.is_empty


class TestContinuous:
    """Tests for continuous effect application and expiry."""

    def test_turn_scoped_boost_expires(self, env):
        """A boost for turn T stops applying and is dropped after T."""
        lynx = put_card(env, 0, "vigi", ZoneKind.FIELD)
        state = env.state
        state.turn = 3
        state.continuous.add(ContinuousItem(lynx.id, PowerBoost(100), InTurn(3), state.generations.next()))

        refresh(state)
        assert lynx.computed.current_power == 200

        state.turn = 4
        refresh(state)
        assert lynx.computed.current_power == 100
        assert len(state.continuous) == 0

    def test_on_field_condition(self, env):
        """A while-on-field boost ends when the card leaves."""
        bamb = put_card(env, 0, "bamb", ZoneKind.FIELD)
        state = env.state
        state.continuous.add(ContinuousItem(bamb.id, PowerBoost(50), OnField(bamb.id), state.generations.next()))
        refresh(state)
        assert bamb.computed.current_power == 350

        state.players.get(0).field.remove(bamb.id)
        bamb.set_zone(Zone(0, ZoneKind.GRAVEYARD), state.generations)
        state.players.get(0).graveyard.push(bamb)
        refresh(state)
        assert bamb.computed.current_power == 300
        assert len(state.continuous) == 0

    def test_recompute_starts_from_base(self, env):
        """Repeated refreshes do not stack the same boost."""
        bamb = put_card(env, 0, "bamb", ZoneKind.FIELD)
        state = env.state
        state.continuous.add(ContinuousItem(bamb.id, PowerBoost(100), timestamp=state.generations.next()))
        refresh(state)
        refresh(state)
        assert bamb.computed.current_power == 400


class TestLowering:
    """Tests for command lowering."""

    def test_stale_target_is_lost(self, env, catalog):
        """A target renewed since it was chosen fails to lower."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        target = put_card(env, 1, "orep", ZoneKind.FIELD)
        chosen = target.timed_id
        target.renew_id(env.state.ids, env.state.generations)

        with pytest.raises(TargetLostError):
            CommandLowering(env.state, catalog).lower(DestroyCard(source.id, chosen))

    def test_lower_all_is_all_or_nothing(self, env, catalog):
        """One lost target fails the whole command list."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        target = put_card(env, 1, "orep", ZoneKind.FIELD)
        commands = [InflictDamage(1, 100), DestroyCard(source.id, TimedObjectId(target.id, target.timestamp - 1))]
        with pytest.raises(TargetLostError):
            CommandLowering(env.state, catalog).lower_all(commands)

    def test_shield_absorbs_destroy(self, env, catalog):
        """A shielded card loses a shield instead of being destroyed."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        lynx = put_card(env, 1, "vigi", ZoneKind.FIELD)
        lowering = CommandLowering(env.state, catalog)

        batches = lowering.lower(DestroyCard(source.id, lynx.timed_id))
        assert batches == [[op.BreakShield(lynx.id)]]

        op.OpcodeExecutor(env.state).execute_all(batches)
        refresh(env.state)
        assert lynx.computed.current_shields == 0

        batches = lowering.lower(DestroyCard(source.id, lynx.timed_id))
        op.OpcodeExecutor(env.state).execute_all(batches)
        assert env.state.find_card(lynx.id).zone.kind == ZoneKind.GRAVEYARD

    def test_piercing_ignores_shield(self, env, catalog):
        """A piercing source destroys a shielded card outright."""
        source = put_card(env, 0, "orep", ZoneKind.FIELD)
        lynx = put_card(env, 1, "vigi", ZoneKind.FIELD)
        batches = CommandLowering(env.state, catalog).lower(DestroyCard(source.id, lynx.timed_id))
        assert op.MoveCard(lynx.id, lynx.zone, Zone(1, ZoneKind.GRAVEYARD), MoveReason.DESTROYED) in batches[-1]

    def test_destroy_grants_colorless_shard(self, env, catalog):
        """The owner of a destroyed card gains one colorless shard."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        target = put_card(env, 1, "orep", ZoneKind.FIELD)
        batches = CommandLowering(env.state, catalog).lower(DestroyCard(source.id, target.timed_id))
        op.OpcodeExecutor(env.state).execute_all(batches)
        assert env.state.players.get(1).shards.get(Color.COLORLESS) == 1

    def test_volatile_grants_no_shard(self, env, catalog):
        """Volatile cards leave no shard and still trigger their effect."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        pyro = put_card(env, 1, "pyro", ZoneKind.FIELD)
        batches = CommandLowering(env.state, catalog).lower(DestroyCard(source.id, pyro.timed_id))
        assert not any(isinstance(o, op.GenerateShards) for batch in batches for o in batch)
        assert any(isinstance(o, op.TriggerEvent) for batch in batches for o in batch)

    def test_devour_grants_no_shard(self, env, catalog):
        """Cards destroyed by a devour source leave no shard."""
        source = put_card(env, 0, "vora", ZoneKind.FIELD)
        target = put_card(env, 1, "orep", ZoneKind.FIELD)
        batches = CommandLowering(env.state, catalog).lower(DestroyCard(source.id, target.timed_id))
        assert not any(isinstance(o, op.GenerateShards) for batch in batches for o in batch)

    def test_destroyed_token_goes_to_limbo(self, env, catalog):
        """Tokens leaving the field are moved to limbo."""
        source = put_card(env, 0, "bamb", ZoneKind.FIELD)
        lowering = CommandLowering(env.state, catalog)
        token_id = env.state.ids.allocate()
        op.OpcodeExecutor(env.state).execute_all(lowering.lower(GenerateCardToken(token_id, "ant", 1)))
        token = env.state.find_card(token_id)
        assert token.zone == Zone(1, ZoneKind.FIELD)

        logs = op.OpcodeExecutor(env.state).execute_all(lowering.lower(DestroyCard(source.id, token.timed_id)))
        assert env.state.find_card(token_id).zone.kind == ZoneKind.LIMBO
        assert env.state.players.get(1).shards.is_empty
        assert logs[-1].kind == LogKind.CARD_TOKEN_DESTROYED


class TestBatchAtomicity:
    """Tests that a failing batch leaves the state untouched."""

    def test_failed_batch_changes_nothing(self, env):
        """An opcode failure discards every earlier opcode of the group."""
        state = env.state
        state.players.get(0).shards.add(Color.RED, 1)
        batches = [[
            op.GenerateShards(0, None, Color.BLUE, 2),
            op.ConsumeShards(0, None, Color.RED, 5),
        ]]
        with pytest.raises(InsufficientShardsError):
            op.apply_batches(state, batches)
        shards = state.players.get(0).shards
        assert shards.get(Color.BLUE) == 0
        assert shards.get(Color.RED) == 1

    def test_successful_batch_returns_clone(self, env):
        """The original state is never mutated in place."""
        state = env.state
        updated, logs = op.apply_batches(state, [[op.SetLife(0, 1234)]])
        assert updated.players.get(0).life == 1234
        assert state.players.get(0).life == 2000
        assert logs[0].kind == LogKind.LIFE_CHANGED

