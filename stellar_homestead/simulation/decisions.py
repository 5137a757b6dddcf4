"""
Stellar Homestead — Decision Sources
Drivers that supply management decisions to the engine.

A decision source answers ``next_decision(engine)`` with a management
command, or ``None`` to continue to the next turn. The engine reports
each applied command back through ``notify(result)``.

- Passive: never does anything (headless runs)
- Scripted: replays per-turn command lists, e.g. from a JSON file
- Menu: the interactive numbered menu
"""

from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, List, Optional, Union
import json
import logging

from ..core.buildings import BUILDING_SPECS, BuildingKind
from ..core.commands import (
    AssignColonist,
    Build,
    CommandResult,
    ManagementCommand,
    NoOp,
    RestAll,
    SaveGame,
    command_from_dict,
)
from ..config import SETTINGS

logger = logging.getLogger(__name__)


CommandLike = Union[ManagementCommand, Dict, str]


class DecisionSource(ABC):
    """Abstract base class for management drivers."""

    def __init__(self):
        self.results: List[CommandResult] = []

    @abstractmethod
    def next_decision(self, engine) -> Optional[ManagementCommand]:
        """
        Next command for the current Management phase.

        Returns:
            A command, or None to continue to the next turn.
        """
        pass

    def notify(self, result: CommandResult):
        """Record the outcome of an applied command."""
        self.results.append(result)
        if not result.accepted:
            logger.info(f"Decision rejected: {result.message}")

    @property
    def rejected(self) -> List[CommandResult]:
        return [r for r in self.results if not r.accepted]


class PassiveDecisionSource(DecisionSource):
    """Always continues."""

    def next_decision(self, engine) -> Optional[ManagementCommand]:
        return None


class ScriptedDecisionSource(DecisionSource):
    """
    Replays decisions turn by turn.

    Script format is either a list whose item ``i`` holds the commands
    for turn ``i + 1``, or a mapping from turn number to commands:

        [
            [{"command": "build", "building": "GREENHOUSE"}],
            [],
            [{"command": "assign", "index": 0}, "rest"],
        ]

    Turns without an entry continue immediately.
    """

    def __init__(self, script: Union[List[Iterable[CommandLike]], Dict[int, Iterable[CommandLike]]]):
        super().__init__()
        if isinstance(script, dict):
            items = {int(turn): list(commands) for turn, commands in script.items()}
        else:
            items = {turn: list(commands) for turn, commands in enumerate(script, start=1)}

        self.script: Dict[int, List[Optional[ManagementCommand]]] = {
            turn: [self._parse(c) for c in commands] for turn, commands in items.items()
        }
        self._cursor: Dict[int, int] = {}

    @staticmethod
    def _parse(command: CommandLike) -> Optional[ManagementCommand]:
        if isinstance(command, ManagementCommand):
            return command
        return command_from_dict(command)

    @classmethod
    def from_json(cls, filepath: str) -> "ScriptedDecisionSource":
        """Load a decision script from a JSON file."""
        with open(filepath, "r") as f:
            script = json.load(f)
        return cls(script)

    def next_decision(self, engine) -> Optional[ManagementCommand]:
        turn = engine.turn
        commands = self.script.get(turn, [])
        position = self._cursor.get(turn, 0)
        if position >= len(commands):
            return None
        self._cursor[turn] = position + 1
        return commands[position]

    def reset(self):
        self._cursor = {}
        self.results = []


class MenuDecisionSource(DecisionSource):
    """
    Interactive numbered menu.

    Reads choices through ``input_fn`` and writes prompts through
    ``output_fn`` so it can be driven by a terminal or by a test. Any
    unreadable or out-of-menu answer means "continue".
    """

    MENU = (
        "1. Build Structure",
        "2. Assign Colonists",
        "3. Rest Colonists",
        "4. Save Game",
        "5. Continue to next turn",
    )

    def __init__(
        self,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
        save_path: str = SETTINGS.save_path,
    ):
        super().__init__()
        self.input_fn = input_fn
        self.output_fn = output_fn
        self.save_path = save_path

    def _ask_int(self, prompt: str) -> Optional[int]:
        try:
            return int(self.input_fn(prompt).strip())
        except (ValueError, EOFError):
            return None

    def next_decision(self, engine) -> Optional[ManagementCommand]:
        self.output_fn("\n=== Management Phase ===")
        for line in self.MENU:
            self.output_fn(line)

        choice = self._ask_int("Choose action: ")
        if choice == 1:
            return self._choose_building()
        if choice == 2:
            return self._choose_colonist(engine)
        if choice == 3:
            return RestAll()
        if choice == 4:
            return SaveGame(self.save_path)

        self.output_fn("Continuing to next turn...")
        return NoOp()

    def _choose_building(self) -> Optional[ManagementCommand]:
        self.output_fn("Available structures:")
        kinds = list(BuildingKind)
        for number, kind in enumerate(kinds, start=1):
            spec = BUILDING_SPECS[kind]
            self.output_fn(f"{number}. {spec.name} ({spec.describe_cost()})")

        choice = self._ask_int("Select structure: ")
        if choice is None or not 1 <= choice <= len(kinds):
            self.output_fn("Invalid choice.")
            return None
        return Build(kinds[choice - 1])

    def _choose_colonist(self, engine) -> Optional[ManagementCommand]:
        self.output_fn("Available colonists:")
        for number, colonist in enumerate(engine.colonists, start=1):
            self.output_fn(f"{number}. {colonist.display_info()}")

        choice = self._ask_int("Select colonist to assign (0 to cancel): ")
        if not choice or choice < 0:
            return None
        return AssignColonist(choice - 1)

    def notify(self, result: CommandResult):
        super().notify(result)
        self.output_fn(result.message)
