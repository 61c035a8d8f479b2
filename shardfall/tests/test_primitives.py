"""
Tests for the engine's value types.

Tests:
- Object identity and generations
- Card containers (ordered lists, fixed slots)
- Shard ledger atomicity and payment plans
- Linear values
- Ability algebra (merge/cancel, removals remembered)
"""

import pytest

from ..engine_core.abilities import AbilityList, AnonymousAbility, KeywordAbility, PlayerAbility
from ..engine_core.errors import InsufficientShardsError, ZoneCapacityError
from ..engine_core.field import FieldBattleState
from ..engine_core.ids import MAX_RESERVED_ID, GenerationCounter, ObjectIdCounter, TimedObjectId
from ..engine_core.linear import Linear, Modifier
from ..engine_core.shards import Color, ShardList
from ..engine_core.zones import CardList, CardSlot, ZoneKind
from .conftest import put_card


class TestIdentity:
    """Tests for ObjectId and generation counters."""

    def test_ids_skip_reserved_range(self):
        """Allocated ids start above the reserved range and never repeat."""
        counter = ObjectIdCounter()
        ids = [counter.allocate() for _ in range(5)]
        assert min(ids) > MAX_RESERVED_ID
        assert len(set(ids)) == 5

    def test_generations_are_monotonic(self):
        """Each generation is larger than the previous one."""
        generations = GenerationCounter()
        values = [generations.next() for _ in range(4)]
        assert values == sorted(values)
        assert len(set(values)) == 4

    def test_timed_id_equality_includes_timestamp(self):
        """Same id at different generations is a different reference."""
        assert TimedObjectId(101, 1) == TimedObjectId(101, 1)
        assert TimedObjectId(101, 1) != TimedObjectId(101, 2)

    def test_moving_card_issues_new_generation(self, env):
        """Drawing a card keeps its id but changes its timestamp."""
        card = put_card(env, 0, "bamb", ZoneKind.DECK)
        before = card.timed_id
        env.run_until_input()

        drawn = env.state.find_card(before.id)
        assert drawn.zone.kind == ZoneKind.HAND
        assert drawn.id == before.id
        assert drawn.timestamp > before.timestamp

    def test_shuffle_renews_ids(self, catalog):
        """Shuffling a deck reissues every card id."""
        from ..engine_core.environment import Environment
        from .conftest import make_profile

        env = Environment(make_profile(shuffle=True), catalog)
        before = {card.id for card in env.state.players.get(0).deck}
        env.run_until_input()

        after = {card.id for p in env.state.players for card in p.all_cards()}
        assert before.isdisjoint(after)


class TestContainers:
    """Tests for CardList and CardSlot."""

    def test_card_list_top_is_last(self, env):
        """pop_top takes the most recently pushed card."""
        first = put_card(env, 0, "bamb", ZoneKind.GRAVEYARD)
        second = put_card(env, 0, "orep", ZoneKind.GRAVEYARD)
        graveyard = env.state.players.get(0).graveyard
        assert graveyard.top is second
        assert graveyard.pop_top() is second
        assert graveyard.pop_top() is first
        assert graveyard.pop_top() is None

    def test_remove_missing_returns_none(self):
        """Removing an absent id is not an error."""
        assert CardList().remove(12345) is None
        assert CardSlot(capacity=2).remove(12345) is None

    def test_slot_fills_first_empty(self, env):
        """New cards take the first empty slot."""
        slot = CardSlot(capacity=3)
        a = put_card(env, 0, "bamb", ZoneKind.GRAVEYARD)
        b = put_card(env, 0, "orep", ZoneKind.GRAVEYARD)
        c = put_card(env, 0, "wind", ZoneKind.GRAVEYARD)
        slot.push(a)
        slot.push(b)
        slot.remove(a.id)
        slot.push(c)
        assert slot.slots[0] is c
        assert slot.slots[1] is b

    def test_full_slot_raises(self, env):
        """A full slot container raises instead of dropping the card."""
        slot = CardSlot(capacity=1)
        slot.push(put_card(env, 0, "bamb", ZoneKind.GRAVEYARD))
        with pytest.raises(ZoneCapacityError):
            slot.push(put_card(env, 0, "orep", ZoneKind.GRAVEYARD))
        assert len(slot) == 1

    def test_find_blocker_matches_generation(self, env):
        """A block recorded against an older generation of the attacker is ignored."""
        attacker = put_card(env, 0, "bamb", ZoneKind.FIELD)
        blocker = put_card(env, 1, "vigi", ZoneKind.FIELD)
        field = env.state.players.get(1).field

        field.set_card_battle_state(blocker.id, FieldBattleState.blocking(TimedObjectId(attacker.id, attacker.timestamp - 1)))
        assert field.find_blocker(attacker.timed_id) is None

        field.set_card_battle_state(blocker.id, FieldBattleState.blocking(attacker.timed_id))
        assert field.find_blocker(attacker.timed_id) is blocker


class TestShardList:
    """Tests for the shard ledger."""

    def test_add_and_consume(self):
        """Consuming the exact amount removes the color entry."""
        shards = ShardList()
        shards.add(Color.RED, 2)
        shards.consume(Color.RED, 2)
        assert shards.is_empty
        assert shards.get(Color.RED) == 0

    def test_zero_add_is_ignored(self):
        """Zero counts are never stored."""
        shards = ShardList()
        shards.add(Color.BLUE, 0)
        assert shards.is_empty

    def test_consume_is_all_or_nothing(self):
        """A failed consume leaves the ledger unchanged."""
        shards = ShardList()
        shards.add(Color.GREEN, 1)
        with pytest.raises(InsufficientShardsError) as exc:
            shards.consume(Color.GREEN, 2)
        assert shards.get(Color.GREEN) == 1
        assert exc.value.amount == 2

    def test_payment_plan_prefers_card_color(self):
        """The card's own color is spent first, then colorless."""
        shards = ShardList()
        shards.add(Color.RED, 1)
        shards.add(Color.COLORLESS, 2)
        shards.add(Color.BLUE, 5)
        assert shards.payment_plan(2, Color.RED) == [(Color.RED, 1), (Color.COLORLESS, 1)]

    def test_payment_plan_rejects_short_total(self):
        """Plans fail when the total is too small."""
        shards = ShardList()
        shards.add(Color.RED, 1)
        with pytest.raises(InsufficientShardsError):
            shards.payment_plan(3, Color.RED)

    def test_len_is_total(self):
        """len() counts every shard across colors."""
        shards = ShardList()
        shards.add(Color.RED, 2)
        shards.add(Color.BLUE, 3)
        assert len(shards) == 5
        assert shards.to_dict() == {"Red": 2, "Blue": 3}


class TestLinear:
    """Tests for layered numeric values."""

    def test_add_then_multiply(self):
        """Multiplication scales earlier additions."""
        value = Linear(100)
        value.add(50)
        value.mul(2)
        assert value.value() == 300

    def test_assign_discards_layers(self):
        """Assign overrides the base and earlier layers."""
        value = Linear(100)
        value.add(50)
        value.assign(10)
        value.add(5)
        assert value.value() == 15

    def test_clamped_at_minimum(self):
        """Values never drop below the minimum."""
        value = Linear(1)
        value.apply(Modifier.sub(5))
        assert value.value() == 0

    def test_division(self):
        """Division collapses to the current value."""
        value = Linear(7)
        value.apply(Modifier.div(2))
        assert value.value() == 3
        assert value.is_modified


class TestAbilityAlgebra:
    """Tests for AbilityList merge and cancel."""

    def test_same_keyword_collapses(self):
        """Adding a keyword twice keeps one."""
        abilities = AbilityList.of([KeywordAbility.TOXIC, KeywordAbility.TOXIC])
        assert len(abilities) == 1

    def test_different_keywords_kept_sorted(self):
        """Different kinds are both kept in declaration order."""
        abilities = AbilityList.of([KeywordAbility.STEALTH, KeywordAbility.TOXIC])
        assert list(abilities) == [KeywordAbility.TOXIC, KeywordAbility.STEALTH]

    def test_removal_is_remembered(self):
        """A removed kind stays removed when added again."""
        abilities = AbilityList.of([KeywordAbility.PIERCING])
        abilities.remove(KeywordAbility.PIERCING)
        abilities.add(KeywordAbility.PIERCING)
        assert KeywordAbility.PIERCING not in abilities

    def test_cancel_leaves_other_kinds(self):
        """Removing one kind does not touch others."""
        abilities = AbilityList.of([KeywordAbility.TOXIC, AnonymousAbility.DEFENDER])
        abilities.remove(KeywordAbility.TOXIC)
        assert AnonymousAbility.DEFENDER in abilities
        assert KeywordAbility.TOXIC not in abilities

    def test_player_abilities_sum(self):
        """Numeric abilities of the same kind add up."""
        abilities = AbilityList.of([PlayerAbility.propagate(1), PlayerAbility.propagate(2)])
        assert list(abilities) == [PlayerAbility.propagate(3)]

    def test_player_abilities_vanish_at_zero(self):
        """Opposite amounts cancel out completely."""
        abilities = AbilityList.of([PlayerAbility.draw(1), PlayerAbility.draw(-1)])
        assert len(abilities) == 0
