"""
Stellar Homestead — Buildings
Colony structures that produce a single resource every Production phase.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Union
from enum import Enum, auto
import logging

from .ledger import ResourceKind, ResourceLedger

logger = logging.getLogger(__name__)


class BuildingKind(Enum):
    """Structures the colony can build."""
    SOLAR_PANEL = auto()
    GREENHOUSE = auto()
    OXYGEN_GENERATOR = auto()
    MATERIAL_FACTORY = auto()

    @classmethod
    def coerce(cls, value: Union["BuildingKind", str]) -> "BuildingKind":
        if isinstance(value, cls):
            return value
        key = str(value).strip().upper().replace(" ", "_").replace("-", "_")
        return cls[key]


@dataclass(frozen=True)
class BuildingSpec:
    """Fixed data for one kind of building."""
    kind: BuildingKind
    name: str
    cost: Dict[ResourceKind, int]
    output: ResourceKind
    base_amount: int

    @property
    def cost_ledger(self) -> ResourceLedger:
        return ResourceLedger(dict(self.cost))

    def describe_cost(self) -> str:
        return ", ".join(f"{kind.label}: {amount}" for kind, amount in self.cost.items())


BUILDING_SPECS: Dict[BuildingKind, BuildingSpec] = {
    BuildingKind.SOLAR_PANEL: BuildingSpec(
        kind=BuildingKind.SOLAR_PANEL,
        name="Solar Panel",
        cost={ResourceKind.MATERIALS: 20},
        output=ResourceKind.ENERGY,
        base_amount=15,
    ),
    BuildingKind.GREENHOUSE: BuildingSpec(
        kind=BuildingKind.GREENHOUSE,
        name="Greenhouse",
        cost={ResourceKind.MATERIALS: 30, ResourceKind.ENERGY: 10},
        output=ResourceKind.FOOD,
        base_amount=20,
    ),
    BuildingKind.OXYGEN_GENERATOR: BuildingSpec(
        kind=BuildingKind.OXYGEN_GENERATOR,
        name="Oxygen Generator",
        cost={ResourceKind.MATERIALS: 25, ResourceKind.ENERGY: 15},
        output=ResourceKind.OXYGEN,
        base_amount=10,
    ),
    BuildingKind.MATERIAL_FACTORY: BuildingSpec(
        kind=BuildingKind.MATERIAL_FACTORY,
        name="Material Factory",
        cost={ResourceKind.MATERIALS: 40, ResourceKind.ENERGY: 20},
        output=ResourceKind.MATERIALS,
        base_amount=8,
    ),
}


@dataclass
class Building:
    """
    A placed structure.

    Output is ``rate(output kind) * level`` while operational. Upgrades
    raise the level and add to the Materials rate; only a Material
    Factory actually emits Materials, so for other kinds the bonus is
    recorded but never produced.
    """
    kind: BuildingKind
    level: int = 1
    operational: bool = True
    production: Dict[ResourceKind, int] = field(default_factory=dict)

    def __post_init__(self):
        self.kind = BuildingKind.coerce(self.kind)
        if self.level < 1:
            raise ValueError(f"Building level must be >= 1, got {self.level}")
        if not self.production:
            self.production = {self.spec.output: self.spec.base_amount}
        else:
            self.production = dict(ResourceLedger.from_mapping(self.production).items())

    @property
    def spec(self) -> BuildingSpec:
        return BUILDING_SPECS[self.kind]

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def cost(self) -> ResourceLedger:
        return self.spec.cost_ledger

    @property
    def rate(self) -> int:
        """Per-level amount of this building's output resource."""
        return self.production.get(self.spec.output, 0)

    def produce(self) -> ResourceLedger:
        """Resource delta for one Production phase."""
        if not self.operational:
            return ResourceLedger()
        return ResourceLedger({self.spec.output: self.rate * self.level})

    def upgrade(self, materials_bonus: int = 5):
        """Raise the level by one and add to the Materials production rate."""
        self.level += 1
        self.production[ResourceKind.MATERIALS] = (
            self.production.get(ResourceKind.MATERIALS, 0) + materials_bonus
        )
        logger.info(f"{self.name}: upgraded to level {self.level}")

    def get_production_info(self) -> str:
        return (
            f"{self.name} Level {self.level} produces "
            f"{self.rate * self.level} {self.spec.output.name.lower()}"
        )

    def get_status(self) -> dict:
        """Get current status as dictionary."""
        return {
            "kind": self.kind.name,
            "name": self.name,
            "level": self.level,
            "operational": self.operational,
            "production": {k.name: v for k, v in self.production.items()},
            "output": self.produce().snapshot(),
        }

    def copy(self) -> "Building":
        return Building(self.kind, self.level, self.operational, dict(self.production))


def create_building(kind: Union[BuildingKind, str]) -> Building:
    """Fresh level-1 building of ``kind``."""
    return Building(BuildingKind.coerce(kind))


def total_output(buildings: List[Building]) -> ResourceLedger:
    """Sum of ``produce()`` over operational buildings, in list order."""
    aggregate = ResourceLedger()
    for building in buildings:
        if building.operational:
            aggregate.add(building.produce())
            logger.debug(building.get_production_info())
    return aggregate
