"""
Cards - Archetypes (catalog templates) and card instances.

An archetype is immutable and shared by every card spawned from it.
A card instance owns its identity, zone, battle bookkeeping, computed
attributes and its own effect instance.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable
import re
import unicodedata

from .abilities import AnonymousAbility, KeywordAbility
from .computed import CardType, ComputedAttribute, CreatureType
from .field import FieldBattleState, FieldState
from .ids import GenerationCounter, ObjectId, ObjectIdCounter, TimedObjectId
from .shards import Color
from .zones import Zone, ZoneKind

if TYPE_CHECKING:
    from .effect import Effect


def safe_name(name: str) -> str:
    """Filesystem and asset friendly form of a card name."""
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    ascii_name = re.sub(r"\s+", "-", ascii_name.strip().lower())
    return re.sub(r"[^a-z0-9\-]", "", ascii_name)


@dataclass(frozen=True)
class CardAttribute:
    """Base attribute bundle printed on a card."""
    color: Color = Color.COLORLESS
    cost: int = 0
    card_type: CardType = CardType.CREATURE
    creature_type: CreatureType | None = None
    power: int | None = None
    shields: int = 0
    abilities: tuple[KeywordAbility, ...] = ()
    anon_abilities: tuple[AnonymousAbility, ...] = ()
    is_token: bool = False


@dataclass(frozen=True)
class CardArchetype:
    """
    Immutable catalog entry.

    effect_factory builds a fresh effect instance for each card spawned
    from this archetype.
    """
    id: str
    name: str
    attribute: CardAttribute
    effect_factory: Callable[[], Effect]
    text: str = ""

    @property
    def safe_name(self) -> str:
        return safe_name(self.name)

    def new_effect(self) -> Effect:
        return self.effect_factory()

    def __deepcopy__(self, memo):
        return self


@dataclass(frozen=True)
class CardSnapshot:
    """Serializable view of a card at a point in time."""
    id: ObjectId
    timestamp: int
    archetype_id: str | None
    name: str | None
    owner: int
    zone: Zone
    power: int | None = None
    cost: int | None = None
    field_state: str | None = None
    is_token: bool = False

    @property
    def timed_id(self) -> TimedObjectId:
        return TimedObjectId(self.id, self.timestamp)

    def redacted(self) -> CardSnapshot:
        """Hide everything but identity and location."""
        return CardSnapshot(
            id=self.id,
            timestamp=self.timestamp,
            archetype_id=None,
            name=None,
            owner=self.owner,
            zone=self.zone,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "archetype_id": self.archetype_id,
            "name": self.name,
            "owner": self.owner,
            "zone": {"player": self.zone.player, "kind": self.zone.kind.value},
            "power": self.power,
            "cost": self.cost,
            "field_state": self.field_state,
            "is_token": self.is_token,
        }


@dataclass
class Card:
    archetype: CardArchetype
    id: ObjectId
    timestamp: int
    owner: int
    zone: Zone
    computed: ComputedAttribute
    effect: Effect
    field_state: FieldState = FieldState.ACTIVE
    battle: FieldBattleState | None = None

    @classmethod
    def new(
        cls,
        ids: ObjectIdCounter,
        generations: GenerationCounter,
        archetype: CardArchetype,
        owner: int,
        zone_kind: ZoneKind = ZoneKind.DECK,
    ) -> Card:
        return cls.with_id(ids.allocate(), generations, archetype, owner, zone_kind)

    @classmethod
    def with_id(
        cls,
        card_id: ObjectId,
        generations: GenerationCounter,
        archetype: CardArchetype,
        owner: int,
        zone_kind: ZoneKind = ZoneKind.DECK,
    ) -> Card:
        return cls(
            archetype=archetype,
            id=card_id,
            timestamp=generations.next(),
            owner=owner,
            zone=Zone(owner, zone_kind),
            computed=ComputedAttribute.from_attribute(archetype.attribute),
            effect=archetype.new_effect(),
        )

    @property
    def timed_id(self) -> TimedObjectId:
        return TimedObjectId(self.id, self.timestamp)

    @property
    def controller(self) -> int:
        return self.zone.player

    @property
    def is_token(self) -> bool:
        return self.archetype.attribute.is_token

    def set_zone(self, zone: Zone, generations: GenerationCounter):
        """Move bookkeeping. A new generation is issued unless field to field."""
        if not (self.zone.kind == ZoneKind.FIELD and zone.kind == ZoneKind.FIELD):
            self.timestamp = generations.next()
        if zone.kind != ZoneKind.FIELD:
            self.field_state = FieldState.ACTIVE
            self.battle = None
        self.zone = zone
        self.reset_computed()

    def renew_id(self, ids: ObjectIdCounter, generations: GenerationCounter):
        """Reissue identity so references captured earlier no longer match."""
        self.id = ids.allocate()
        self.timestamp = generations.next()

    def reset_computed(self):
        self.computed = ComputedAttribute.from_attribute(self.archetype.attribute)

    def snapshot(self) -> CardSnapshot:
        return CardSnapshot(
            id=self.id,
            timestamp=self.timestamp,
            archetype_id=self.archetype.id,
            name=self.archetype.name,
            owner=self.owner,
            zone=self.zone,
            power=self.computed.power.value() if self.computed.power is not None else None,
            cost=self.computed.cost.value(),
            field_state=self.field_state.value if self.zone.kind == ZoneKind.FIELD else None,
            is_token=self.is_token,
        )

    def score(self) -> int:
        """Rough material value of the card used by evaluators."""
        score = self.computed.abilities.score() + self.computed.anon_abilities.score()
        score += self.computed.current_power // 100
        if self.computed.is_creature:
            score += 1
        if self.zone.kind == ZoneKind.FIELD and self.field_state == FieldState.ACTIVE:
            score += 1
        return score
