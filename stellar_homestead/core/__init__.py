"""
Stellar Homestead — Core Module
Resource ledger, producers, events, commands, and the simulation engine.
"""

from .errors import (
    HomesteadError,
    InsufficientResourceError,
    UnknownResourceKindError,
    ColonistIncapacitatedError,
    ColonistDeceasedError,
    InvalidIndexError,
    SaveFileError,
)
from .ledger import ResourceKind, ResourceLedger
from .buildings import Building, BuildingKind, BuildingSpec, BUILDING_SPECS, create_building
from .commands import (
    ManagementCommand,
    Build,
    AssignColonist,
    RestAll,
    SaveGame,
    NoOp,
    CommandResult,
    command_from_dict,
)
from .events import (
    EventKind,
    ColonyEvent,
    EventOutcome,
    EventCatalog,
    STANDARD_EVENTS,
    RollSource,
    RandomRollSource,
    ScriptedRollSource,
)
from .simulation import (
    GamePhase,
    GameOutcome,
    GameState,
    CycleReport,
    ProductionSummary,
    SimulationEngine,
)

__all__ = [
    # Errors
    "HomesteadError",
    "InsufficientResourceError",
    "UnknownResourceKindError",
    "ColonistIncapacitatedError",
    "ColonistDeceasedError",
    "InvalidIndexError",
    "SaveFileError",

    # Ledger
    "ResourceKind",
    "ResourceLedger",

    # Buildings
    "Building",
    "BuildingKind",
    "BuildingSpec",
    "BUILDING_SPECS",
    "create_building",

    # Commands
    "ManagementCommand",
    "Build",
    "AssignColonist",
    "RestAll",
    "SaveGame",
    "NoOp",
    "CommandResult",
    "command_from_dict",

    # Events
    "EventKind",
    "ColonyEvent",
    "EventOutcome",
    "EventCatalog",
    "STANDARD_EVENTS",
    "RollSource",
    "RandomRollSource",
    "ScriptedRollSource",

    # Simulation
    "GamePhase",
    "GameOutcome",
    "GameState",
    "CycleReport",
    "ProductionSummary",
    "SimulationEngine",
]
