"""
Effect Engine - The two-phase trigger/activate protocol and the stack.

Each card owns one Effect instance:

- event_filter(): which event kinds the effect listens to. Events outside
  the mask never reach activate() or trigger().
- activate(event, ctx): looks at the concrete event and confirms which
  logical ids should fire (ctx.trigger_stack / ctx.trigger_continuous).
- trigger(id, ctx): registers a confirmed id, normally by pushing a stack
  item (ctx.push_stack) or a continuous modifier (ctx.push_continuous).
- resolve(id, ctx, action): runs when the stack item is popped and
  returns an EffectReport of commands, or of actions to offer when the
  effect needs a choice.

Stack items are plain data (source, archetype, id, params). The behavior
is looked up from the catalog by (archetype id, logical id) when the item
resolves, so the stack can be copied, inspected and logged.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

from .continuous import Always, Condition, ContinuousEffect, ContinuousItem
from .errors import KeyNotFoundError
from .events import CardEvent, EventFilter

if TYPE_CHECKING:
    from .action import Action, PlayerAvailableActions
    from .card import Card
    from .ids import ObjectId
    from .state import GameState


@dataclass
class EffectReport:
    """What a resolved stack item wants done."""
    commands: list[Any] = field(default_factory=list)
    available_actions: PlayerAvailableActions | None = None

    def with_commands(self, commands) -> EffectReport:
        self.commands.extend(commands)
        return self

    def with_available_actions(self, actions: PlayerAvailableActions) -> EffectReport:
        self.available_actions = actions
        return self

    @property
    def needs_choice(self) -> bool:
        return self.available_actions is not None and not self.available_actions.is_empty


# =============================================================================
# Stack
# =============================================================================

@dataclass
class StackItem:
    source: ObjectId
    archetype: str
    id: str
    params: dict[str, Any] = field(default_factory=dict)
    # Set once the item has offered a choice; until then it never sees player input.
    prompted: bool = False


@dataclass(frozen=True)
class LocalStackItem:
    """Client-visible projection of a stack item."""
    source: ObjectId
    id: str


@dataclass
class Stack:
    """LIFO resolution stack."""
    items: list[StackItem] = field(default_factory=list)

    def push(self, item: StackItem):
        self.items.append(item)

    def extend(self, items: list[StackItem]):
        self.items.extend(items)

    def pop(self) -> StackItem | None:
        return self.items.pop() if self.items else None

    def peek(self) -> StackItem | None:
        return self.items[-1] if self.items else None

    @property
    def is_empty(self) -> bool:
        return not self.items

    def local(self) -> list[LocalStackItem]:
        return [LocalStackItem(item.source, item.id) for item in self.items]

    def __iter__(self) -> Iterator[StackItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


# =============================================================================
# Contexts
# =============================================================================

class EffectActivateContext:
    """Passed to activate(): the event's source card and the listening card."""

    def __init__(self, state: GameState, source: Card, target: Card):
        self.state = state
        self.source = source
        self.target = target
        self.stack_ids: list[str] = []
        self.continuous_ids: list[str] = []

    def trigger_stack(self, stack_id: str):
        self.stack_ids.append(stack_id)

    def trigger_continuous(self, stack_id: str):
        self.continuous_ids.append(stack_id)


class EffectTriggerContext:
    """
    Passed to trigger() and resolve().

    source is the card whose effect is running. Registrations are collected
    here and merged into the state by the caller once the hook returns.
    """

    def __init__(self, state: GameState, source: Card, params: dict[str, Any] | None = None):
        self.state = state
        self.source = source
        self.params = params or {}
        self.stack: list[StackItem] = []
        self.continuous: list[ContinuousItem] = []

    def push_stack(self, stack_id: str, **params):
        self.stack.append(StackItem(
            source=self.source.id,
            archetype=self.source.archetype.id,
            id=stack_id,
            params=params,
        ))

    def push_continuous(self, effect: ContinuousEffect, condition: Condition | None = None):
        self.continuous.append(ContinuousItem(
            source=self.source.id,
            effect=effect,
            condition=condition or Always(),
            timestamp=self.state.generations.next(),
        ))

    def new_id(self) -> ObjectId:
        return self.state.ids.allocate()


# =============================================================================
# Effect base
# =============================================================================

class Effect:
    """
    Base effect: listens to nothing and does nothing.

    Subclasses set `events` and override the hooks they need.
    """
    events: EventFilter = EventFilter.NONE

    def event_filter(self) -> EventFilter:
        return self.events

    def is_castable(self, state: GameState, card: Card, castable: bool) -> bool:
        return castable

    def activate(self, event: CardEvent, ctx: EffectActivateContext):
        pass

    def trigger(self, stack_id: str, ctx: EffectTriggerContext):
        ctx.push_stack(stack_id)

    def resolve(self, stack_id: str, ctx: EffectTriggerContext, action: Action | None) -> EffectReport:
        raise KeyNotFoundError(f"{type(self).__name__}:{stack_id}")
