"""
Stellar Homestead — Resource Ledger
Tracks the colony stockpile and applies resource deltas atomically.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Tuple, Union
from enum import Enum, auto
import logging

from .errors import InsufficientResourceError, UnknownResourceKindError

logger = logging.getLogger(__name__)


class ResourceKind(Enum):
    """Types of resources tracked by the colony."""
    FOOD = auto()
    ENERGY = auto()
    MATERIALS = auto()
    OXYGEN = auto()

    @classmethod
    def coerce(cls, value: Union["ResourceKind", str]) -> "ResourceKind":
        """Accept a member or a case-insensitive member name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise UnknownResourceKindError(value)

    @property
    def label(self) -> str:
        return self.name.capitalize()


DeltaLike = Union["ResourceLedger", Mapping[Union[ResourceKind, str], int]]


@dataclass
class ResourceLedger:
    """
    Signed integer quantity per resource kind.

    The same type is used for the colony stockpile and for the deltas,
    costs, and aggregates that are combined with it. An empty ledger is
    the zero delta.

    Combination is key-wise. Adding or subtracting a delta that carries
    a kind the ledger does not hold yet creates that key.
    """

    quantities: Dict[ResourceKind, int] = field(default_factory=dict)

    def __post_init__(self):
        # Keys naming the same kind ("food", FOOD) are summed, as add() does
        quantities: Dict[ResourceKind, int] = {}
        for kind, amount in _delta_items(dict(self.quantities)):
            quantities[kind] = quantities.get(kind, 0) + amount
        self.quantities = quantities

    @classmethod
    def from_mapping(cls, mapping: DeltaLike) -> "ResourceLedger":
        """Build a ledger from another ledger or a ``{kind: amount}`` mapping."""
        if isinstance(mapping, ResourceLedger):
            return mapping.copy()
        return cls(dict(mapping))

    @classmethod
    def starting(cls, config=None) -> "ResourceLedger":
        """The colony stockpile at the start of a run."""
        from ..config import COLONY
        config = config or COLONY
        return cls.from_mapping(config.starting_resources)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def __getitem__(self, kind: Union[ResourceKind, str]) -> int:
        resource = ResourceKind.coerce(kind)
        if resource not in self.quantities:
            raise UnknownResourceKindError(resource)
        return self.quantities[resource]

    def get(self, kind: Union[ResourceKind, str]) -> int:
        """Quantity held for ``kind``; raises if the ledger has no such key."""
        return self[kind]

    def __contains__(self, kind) -> bool:
        try:
            return ResourceKind.coerce(kind) in self.quantities
        except UnknownResourceKindError:
            return False

    def __iter__(self) -> Iterator[ResourceKind]:
        return iter(self.quantities)

    def __len__(self) -> int:
        return len(self.quantities)

    def items(self):
        return self.quantities.items()

    def can_afford(self, cost: DeltaLike) -> bool:
        """
        True iff every kind in ``cost`` is covered by the held quantity.

        A kind the ledger does not hold counts as zero, so this agrees
        with ``subtract`` for every ledger state.
        """
        remaining: Dict[ResourceKind, int] = {}
        for kind, amount in _delta_items(cost):
            remaining[kind] = remaining.get(kind, self.quantities.get(kind, 0)) - amount
            if remaining[kind] < 0:
                return False
        return True

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, delta: DeltaLike) -> "ResourceLedger":
        """Increase each kind in ``delta`` by its amount. Never fails on amounts."""
        changes = _delta_items(delta)
        for kind, amount in changes:
            self.quantities[kind] = self.quantities.get(kind, 0) + amount
        return self

    def subtract(self, delta: DeltaLike) -> "ResourceLedger":
        """
        Debit every kind in ``delta`` or none of them.

        Raises:
            InsufficientResourceError: the first kind that would go negative.
                The ledger is left exactly as it was.
        """
        changes = _delta_items(delta)
        tentative: Dict[ResourceKind, int] = {}
        for kind, amount in changes:
            held = tentative.get(kind, self.quantities.get(kind, 0))
            result = held - amount
            if result < 0:
                logger.debug(f"Debit rejected: {kind.name} {held} - {amount}")
                raise InsufficientResourceError(kind, required=amount, available=held)
            tentative[kind] = result

        self.quantities.update(tentative)
        return self

    # ------------------------------------------------------------------
    # Combination helpers
    # ------------------------------------------------------------------

    def copy(self) -> "ResourceLedger":
        return ResourceLedger(dict(self.quantities))

    def __add__(self, other: DeltaLike) -> "ResourceLedger":
        return self.copy().add(other)

    def __sub__(self, other: DeltaLike) -> "ResourceLedger":
        return self.copy().subtract(other)

    def snapshot(self) -> Dict[str, int]:
        """Plain ``{NAME: amount}`` view in declaration order."""
        return {
            kind.name: self.quantities[kind]
            for kind in ResourceKind
            if kind in self.quantities
        }

    def get_status(self) -> dict:
        """Get current status as dictionary."""
        return {
            "resources": self.snapshot(),
            "negative": [k.name for k, v in self.quantities.items() if v < 0],
        }

    def __repr__(self) -> str:
        body = " ".join(f"{name.lower()}:{amount}" for name, amount in self.snapshot().items())
        return f"ResourceLedger({body})"


def _delta_items(delta: DeltaLike) -> List[Tuple[ResourceKind, int]]:
    """Normalize a delta to ``(kind, amount)`` pairs, rejecting unknown kinds up front."""
    if isinstance(delta, ResourceLedger):
        return list(delta.quantities.items())
    return [(ResourceKind.coerce(kind), int(amount)) for kind, amount in delta.items()]
