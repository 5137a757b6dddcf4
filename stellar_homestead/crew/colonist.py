"""
Stellar Homestead — Colonist Model
Individual colonists with specializations, experience, and health.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union
from enum import Enum, auto
import logging

from ..core.errors import ColonistDeceasedError, ColonistIncapacitatedError
from ..core.ledger import ResourceKind, ResourceLedger
from ..config import COLONY, ColonyConfig

logger = logging.getLogger(__name__)


class Specialization(Enum):
    """Colonist specializations."""
    ENGINEER = auto()
    SCIENTIST = auto()
    FARMER = auto()
    GENERALIST = auto()

    @classmethod
    def from_name(cls, value: Union["Specialization", str, None]) -> "Specialization":
        """Look up by name; anything unrecognized is a generalist."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.GENERALIST
        return cls.__members__.get(str(value).strip().upper(), cls.GENERALIST)

    @property
    def label(self) -> str:
        return self.name.capitalize()


@dataclass
class Colonist:
    """
    A member of the colony.

    Working raises experience and yields resources according to the
    specialization. A colonist whose health drops to zero has died and
    must be taken off the roster by whoever owns it.
    """
    name: str
    specialization: Specialization = Specialization.GENERALIST
    experience: int = 0
    health: int = 100
    assigned: bool = False

    def __post_init__(self):
        self.specialization = Specialization.from_name(self.specialization)

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def can_work(self, threshold: int = COLONY.work_health_threshold) -> bool:
        return self.health >= threshold

    def work(self, config: ColonyConfig = COLONY) -> ResourceLedger:
        """
        Do one turn of labor.

        Raises:
            ColonistIncapacitatedError: health is below the work threshold.
                Experience is not changed.
        """
        if not self.can_work(config.work_health_threshold):
            raise ColonistIncapacitatedError(self.name, self.health)

        self.experience += 1
        xp = self.experience
        output = ResourceLedger()

        if self.specialization == Specialization.ENGINEER:
            output.add({ResourceKind.MATERIALS: 5 + xp // 10})
        elif self.specialization == Specialization.SCIENTIST:
            output.add({
                ResourceKind.ENERGY: 3 + xp // 15,
                ResourceKind.OXYGEN: 2 + xp // 20,
            })
        elif self.specialization == Specialization.FARMER:
            output.add({ResourceKind.FOOD: 8 + xp // 8})
        else:
            output.add({ResourceKind.MATERIALS: 2, ResourceKind.FOOD: 2})

        logger.debug(f"{self.name} worked (xp {xp}): {output!r}")
        return output

    def rest(self, config: ColonyConfig = COLONY):
        """Recover health and come off assignment."""
        self.health = min(config.max_health, self.health + config.rest_recovery)
        self.assigned = False

    def take_damage(self, amount: int):
        """
        Lose health, never below zero.

        Raises:
            ColonistDeceasedError: health reached zero.
        """
        self.health = max(0, self.health - amount)
        if self.health == 0:
            raise ColonistDeceasedError(self.name)

    def set_assigned(self, status: bool):
        self.assigned = status

    def display_info(self) -> str:
        return (
            f"{self.name} ({self.specialization.label}) - Health: {self.health} "
            f"Experience: {self.experience} Assigned: {'Yes' if self.assigned else 'No'}"
        )

    def get_status(self) -> Dict:
        """Get current status as dictionary."""
        return {
            "name": self.name,
            "specialization": self.specialization.name,
            "experience": self.experience,
            "health": self.health,
            "assigned": self.assigned,
        }

    @classmethod
    def from_status(cls, data: Dict) -> "Colonist":
        return cls(
            name=data["name"],
            specialization=Specialization.from_name(data.get("specialization")),
            experience=int(data.get("experience", 0)),
            health=int(data.get("health", 100)),
            assigned=bool(data.get("assigned", False)),
        )

    def copy(self) -> "Colonist":
        return Colonist(self.name, self.specialization, self.experience, self.health, self.assigned)


def initial_roster(config: ColonyConfig = COLONY) -> List[Colonist]:
    """The fixed starting crew."""
    roster = [
        Colonist(name=name, specialization=Specialization.from_name(spec))
        for name, spec in config.initial_colonists
    ]
    logger.info(f"Crew initialized: {len(roster)} colonists")
    return roster


def first_with_specialization(
    colonists: List[Colonist],
    specialization: Specialization,
) -> Optional[Colonist]:
    """First colonist in roster order with ``specialization``."""
    for colonist in colonists:
        if colonist.specialization == specialization:
            return colonist
    return None
