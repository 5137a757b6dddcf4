"""
Stellar Homestead — Event System
Random colony events, the ordered event catalog, and roll sources.

One event at most resolves per Event phase. A roll in [1, 100] is
compared against each event's trigger weight in catalog order and the
first event whose weight is at least the roll fires. Weights are
thresholds, not a probability partition: an earlier event always
pre-empts a later one whenever both qualify.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from enum import Enum, auto
import json
import logging
import random

from .ledger import ResourceKind, ResourceLedger
from ..crew.colonist import Colonist, Specialization, first_with_specialization
from ..config import COLONY, ColonyConfig

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Types of events that can strike the colony."""
    SOLAR_STORM = auto()
    TRADE_SHIP = auto()
    METEOR_SHOWER = auto()


@dataclass(frozen=True)
class ColonyEvent:
    """An immutable event definition."""
    kind: EventKind
    name: str
    description: str
    trigger_weight: int
    effect: Tuple[Tuple[ResourceKind, int], ...] = ()

    def __post_init__(self):
        if not 1 <= self.trigger_weight <= 100:
            raise ValueError(f"{self.name}: trigger weight {self.trigger_weight} outside [1, 100]")

    @property
    def delta(self) -> ResourceLedger:
        return ResourceLedger(dict(self.effect))

    def qualifies(self, roll: int) -> bool:
        return self.trigger_weight >= roll


@dataclass
class EventOutcome:
    """What executing an event did to the colony."""
    event: ColonyEvent
    roll: int
    delta: ResourceLedger = field(default_factory=ResourceLedger)
    responder: Optional[str] = None

    @property
    def name(self) -> str:
        return self.event.name

    def to_dict(self) -> Dict:
        return {
            "event": self.event.kind.name,
            "name": self.event.name,
            "roll": self.roll,
            "delta": self.delta.snapshot(),
            "responder": self.responder,
        }


# =============================================================================
# POST-APPLY HOOKS
# =============================================================================

PostApplyHook = Callable[[ColonyEvent, ResourceLedger, List[Colonist], ColonyConfig], Optional[Tuple[str, ResourceLedger]]]


def _engineer_repair(event, resources, colonists, config):
    """The first engineer on the roster patches up storm damage."""
    engineer = first_with_specialization(colonists, Specialization.ENGINEER)
    if engineer is None:
        return None
    bonus = ResourceLedger({ResourceKind.ENERGY: config.engineer_storm_repair})
    resources.add(bonus)
    logger.info(f"{engineer.name} quickly repairs some damage!")
    return engineer.name, bonus


POST_APPLY_HOOKS: Dict[EventKind, PostApplyHook] = {
    EventKind.SOLAR_STORM: _engineer_repair,
}


# =============================================================================
# STANDARD CATALOG
# =============================================================================

STANDARD_EVENTS: Tuple[ColonyEvent, ...] = (
    ColonyEvent(
        kind=EventKind.SOLAR_STORM,
        name="Solar Storm",
        description="A solar storm damages energy systems!",
        trigger_weight=15,
        effect=((ResourceKind.ENERGY, -30),),
    ),
    ColonyEvent(
        kind=EventKind.TRADE_SHIP,
        name="Trade Ship Arrival",
        description="A trade ship offers resources!",
        trigger_weight=25,
        effect=((ResourceKind.MATERIALS, 20), (ResourceKind.FOOD, 15)),
    ),
    ColonyEvent(
        kind=EventKind.METEOR_SHOWER,
        name="Meteor Shower",
        description="Meteors provide rare materials but damage buildings!",
        trigger_weight=10,
        effect=((ResourceKind.MATERIALS, 30), (ResourceKind.OXYGEN, -10)),
    ),
)


class EventCatalog:
    """Ordered collection of events resolved by first match."""

    def __init__(self, events: Iterable[ColonyEvent] = STANDARD_EVENTS, config: ColonyConfig = COLONY):
        self.events: Tuple[ColonyEvent, ...] = tuple(events)
        self.config = config

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def get(self, kind: EventKind) -> Optional[ColonyEvent]:
        for event in self.events:
            if event.kind == kind:
                return event
        return None

    def select(self, roll: int) -> Optional[ColonyEvent]:
        """First event in declaration order whose weight is >= ``roll``."""
        for event in self.events:
            if event.qualifies(roll):
                return event
        return None

    def execute(
        self,
        event: ColonyEvent,
        resources: ResourceLedger,
        colonists: List[Colonist],
        roll: int = 0,
    ) -> EventOutcome:
        """
        Apply ``event`` to the stockpile.

        The base effect is always added, never debited, so negative
        components can push a resource below zero. Variant hooks run
        after the base effect.
        """
        logger.warning(f"EVENT TRIGGERED: {event.name} - {event.description}")
        applied = event.delta
        resources.add(applied)

        outcome = EventOutcome(event=event, roll=roll, delta=applied.copy())
        hook = POST_APPLY_HOOKS.get(event.kind)
        if hook is not None:
            result = hook(event, resources, colonists, self.config)
            if result is not None:
                outcome.responder, bonus = result
                outcome.delta.add(bonus)
        return outcome

    def resolve(
        self,
        roll: int,
        resources: ResourceLedger,
        colonists: List[Colonist],
    ) -> Optional[EventOutcome]:
        """Select by ``roll`` and execute; ``None`` means a peaceful turn."""
        event = self.select(roll)
        if event is None:
            logger.info(f"A peaceful turn. No events occurred (roll {roll}).")
            return None
        return self.execute(event, resources, colonists, roll=roll)


# =============================================================================
# ROLL SOURCES
# =============================================================================

class RollSource(ABC):
    """Supplies the uniform integer roll for each Event phase."""

    def __init__(self, low: int = COLONY.event_roll_min, high: int = COLONY.event_roll_max):
        self.low = low
        self.high = high
        self.rolls_made: List[int] = []

    @abstractmethod
    def _next(self) -> int:
        pass

    def roll(self) -> int:
        value = self._next()
        self.rolls_made.append(value)
        return value


class RandomRollSource(RollSource):
    """Seeded uniform rolls, reproducible for a given seed."""

    def __init__(self, seed: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self.seed = seed
        self.rng = random.Random(seed)

    def _next(self) -> int:
        return self.rng.randint(self.low, self.high)


class ScriptedRollSource(RollSource):
    """
    Replays a fixed roll sequence.

    Once the script runs out every further roll is ``fallback``, which
    defaults to the top of the range (no standard event qualifies).
    """

    def __init__(self, rolls: Iterable[int], fallback: Optional[int] = None, **kwargs):
        super().__init__(**kwargs)
        self.script = [int(r) for r in rolls]
        self.script_index = 0
        self.fallback = self.high if fallback is None else fallback

        for value in self.script:
            if not self.low <= value <= self.high:
                raise ValueError(f"Scripted roll {value} outside [{self.low}, {self.high}]")

    @classmethod
    def from_json(cls, filepath: str) -> "ScriptedRollSource":
        """Load a roll script (a JSON list of integers)."""
        with open(filepath, "r") as f:
            rolls = json.load(f)
        return cls(rolls)

    @property
    def exhausted(self) -> bool:
        return self.script_index >= len(self.script)

    def _next(self) -> int:
        if self.exhausted:
            return self.fallback
        value = self.script[self.script_index]
        self.script_index += 1
        return value

    def reset(self):
        self.script_index = 0
        self.rolls_made = []
