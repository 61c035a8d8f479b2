"""
Tests for opcode execution.

Tests:
- TriggerEvent only activates effects whose filter holds the event
- A broken shield lasts while its card stays on the field
"""

from ..engine_core import opcodes as op
from ..engine_core.continuous import ShieldBroken
from ..engine_core.effect import Effect
from ..engine_core.environment import refresh
from ..engine_core.events import CardEvent, EventFilter
from ..engine_core.zones import MoveReason, Zone, ZoneKind
from .conftest import put_card


class CountingEffect(Effect):
    """Records every activation and pushes one stack item per event."""
    events = EventFilter.ATTACKING

    def __init__(self):
        self.activations = []

    def activate(self, event, ctx):
        self.activations.append(event)
        ctx.trigger_stack("main")


class TestTriggerEvent:
    """Tests for the event gate inside TriggerEvent."""

    def test_filtered_event_never_activates(self, env):
        """An event outside the filter does not reach activate()."""
        card = put_card(env, 0, "orep", ZoneKind.FIELD)
        card.effect = CountingEffect()

        logs = op.OpcodeExecutor(env.state).execute(op.TriggerEvent(card.id, card.id, CardEvent.attacked()))

        assert card.effect.activations == []
        assert logs == []
        assert env.state.stack.is_empty

    def test_listened_event_activates_once(self, env):
        """An event inside the filter activates once and confirms its stack item."""
        card = put_card(env, 0, "orep", ZoneKind.FIELD)
        card.effect = CountingEffect()

        op.OpcodeExecutor(env.state).execute(op.TriggerEvent(card.id, card.id, CardEvent.attacking()))

        assert card.effect.activations == [CardEvent.attacking()]
        assert len(env.state.stack) == 1
        assert env.state.stack.peek().source == card.id


class TestBreakShield:
    """Tests for shield bookkeeping."""

    def test_shield_returns_after_leaving_field(self, env):
        """The broken-shield modifier is dropped once its card leaves the field."""
        lynx = put_card(env, 0, "vigi", ZoneKind.FIELD)
        executor = op.OpcodeExecutor(env.state)

        executor.execute(op.BreakShield(lynx.id))
        refresh(env.state)
        assert lynx.computed.current_shields == 0

        executor.execute(op.MoveCard(lynx.id, lynx.zone, Zone(0, ZoneKind.GRAVEYARD), MoveReason.DESTROYED))
        refresh(env.state)
        assert not any(isinstance(item.effect, ShieldBroken) for item in env.state.continuous.items)
        assert lynx.computed.current_shields == 1
