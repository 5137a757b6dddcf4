"""
Stellar Homestead — Colony Economy Simulator

A turn-based space colony: buildings and colonists keep a four-resource
stockpile (food, energy, materials, oxygen) alive against upkeep and
random events until the colony thrives or collapses.
"""

__version__ = "1.0.0"

from .config import (
    COLONY,
    SETTINGS,
    ColonyConfig,
    GameSettings,
    load_settings,
)

from .core import (
    ResourceKind,
    ResourceLedger,
    Building,
    BuildingKind,
    EventKind,
    EventCatalog,
    RandomRollSource,
    ScriptedRollSource,
    Build,
    AssignColonist,
    RestAll,
    SaveGame,
    NoOp,
    GamePhase,
    GameOutcome,
    CycleReport,
    SimulationEngine,
    HomesteadError,
    InsufficientResourceError,
    UnknownResourceKindError,
    ColonistIncapacitatedError,
    ColonistDeceasedError,
    InvalidIndexError,
)

from .crew import Colonist, Specialization

__all__ = [
    # Version info
    "__version__",

    # Config
    "COLONY",
    "SETTINGS",
    "ColonyConfig",
    "GameSettings",
    "load_settings",

    # Core classes
    "ResourceKind",
    "ResourceLedger",
    "Building",
    "BuildingKind",
    "EventKind",
    "EventCatalog",
    "RandomRollSource",
    "ScriptedRollSource",
    "Build",
    "AssignColonist",
    "RestAll",
    "SaveGame",
    "NoOp",
    "GamePhase",
    "GameOutcome",
    "CycleReport",
    "SimulationEngine",

    # Errors
    "HomesteadError",
    "InsufficientResourceError",
    "UnknownResourceKindError",
    "ColonistIncapacitatedError",
    "ColonistDeceasedError",
    "InvalidIndexError",

    # Crew
    "Colonist",
    "Specialization",
]
