"""
Stellar Homestead — Management Commands
Decisions a driver can hand the engine during the Management phase.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import logging

from .buildings import BuildingKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ManagementCommand:
    """Base for all management decisions."""

    @property
    def ends_management(self) -> bool:
        """True if the driver is done for this turn."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"command": COMMAND_NAMES[type(self)]}


@dataclass(frozen=True)
class Build(ManagementCommand):
    """Construct a new level-1 building."""
    kind: BuildingKind = BuildingKind.SOLAR_PANEL

    def __post_init__(self):
        object.__setattr__(self, "kind", BuildingKind.coerce(self.kind))

    def to_dict(self) -> Dict[str, Any]:
        return {"command": "build", "building": self.kind.name}


@dataclass(frozen=True)
class AssignColonist(ManagementCommand):
    """Mark a colonist (zero-based roster index) as assigned."""
    index: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"command": "assign", "index": self.index}


@dataclass(frozen=True)
class RestAll(ManagementCommand):
    """Every colonist rests."""


@dataclass(frozen=True)
class SaveGame(ManagementCommand):
    """Write the current game to ``path``."""
    path: str = "stellar_homestead_save.json"

    def to_dict(self) -> Dict[str, Any]:
        return {"command": "save", "path": self.path}


@dataclass(frozen=True)
class NoOp(ManagementCommand):
    """Continue to the next turn."""

    @property
    def ends_management(self) -> bool:
        return True


COMMAND_NAMES = {
    Build: "build",
    AssignColonist: "assign",
    RestAll: "rest",
    SaveGame: "save",
    NoOp: "continue",
}


@dataclass
class CommandResult:
    """Outcome of applying one management command."""
    command: ManagementCommand
    accepted: bool
    message: str = ""
    error: Optional[Exception] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "command": self.command.to_dict(),
            "accepted": self.accepted,
            "message": self.message,
            "error": type(self.error).__name__ if self.error else None,
        }


def command_from_dict(data: Union[Dict[str, Any], str, None]) -> Optional[ManagementCommand]:
    """
    Parse a command from its dictionary form.

    Accepts ``{"command": "build", "building": "GREENHOUSE"}``,
    ``{"command": "assign", "index": 1}``, ``{"command": "rest"}``,
    ``{"command": "save", "path": "..."}``, ``{"command": "continue"}``
    or the bare command name as a string. Returns ``None`` for anything
    unrecognized.
    """
    if data is None:
        return None
    if isinstance(data, str):
        data = {"command": data}

    name = str(data.get("command", "")).strip().lower()
    try:
        if name == "build":
            return Build(BuildingKind.coerce(data["building"]))
        if name == "assign":
            return AssignColonist(int(data["index"]))
        if name == "rest":
            return RestAll()
        if name == "save":
            return SaveGame(str(data.get("path", SaveGame.path)))
        if name in ("continue", "noop", ""):
            return NoOp()
    except (KeyError, ValueError, TypeError) as e:
        logger.warning(f"Malformed command {data!r}: {e}")
        return None

    logger.warning(f"Unknown command: {name}")
    return None
