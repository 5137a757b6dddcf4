"""
Stellar Homestead — Simulation Engine
Phase state machine, production aggregation, event resolution, and
win/lose evaluation for one colony run.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
from enum import Enum, auto
import logging

from .buildings import Building, create_building, total_output
from .commands import (
    AssignColonist,
    Build,
    CommandResult,
    ManagementCommand,
    NoOp,
    RestAll,
    SaveGame,
)
from .errors import (
    ColonistDeceasedError,
    HomesteadError,
    InsufficientResourceError,
    InvalidIndexError,
)
from .events import EventCatalog, EventOutcome, RandomRollSource, RollSource
from .ledger import ResourceKind, ResourceLedger
from ..crew.colonist import Colonist, initial_roster
from ..config import COLONY, ColonyConfig

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Phases of a turn."""
    SETUP = auto()
    PRODUCTION = auto()
    EVENT = auto()
    MANAGEMENT = auto()
    END = auto()

    @property
    def label(self) -> str:
        if self is GamePhase.END:
            return "Game Over"
        return self.name.capitalize()


class GameOutcome(Enum):
    """How a finished run ended."""
    WIN = auto()
    LOSE = auto()


# Successor of each phase on a normal advance
_NEXT_PHASE = {
    GamePhase.SETUP: GamePhase.PRODUCTION,
    GamePhase.PRODUCTION: GamePhase.EVENT,
    GamePhase.EVENT: GamePhase.MANAGEMENT,
    GamePhase.MANAGEMENT: GamePhase.PRODUCTION,
    GamePhase.END: GamePhase.END,
}


@dataclass
class GameState:
    """Current position in the phase cycle."""
    phase: GamePhase = GamePhase.SETUP
    turn: int = 1
    is_running: bool = True
    outcome: Optional[GameOutcome] = None
    end_reason: str = ""

    @property
    def is_ended(self) -> bool:
        return self.phase == GamePhase.END

    def next_phase(self) -> GamePhase:
        """Advance one edge. The turn counter moves only on Management -> Production."""
        if self.phase == GamePhase.END:
            self.is_running = False
            return self.phase
        if self.phase == GamePhase.MANAGEMENT:
            self.turn += 1
        self.phase = _NEXT_PHASE[self.phase]
        return self.phase

    def end_game(self, outcome: GameOutcome, reason: str):
        self.phase = GamePhase.END
        self.is_running = False
        self.outcome = outcome
        self.end_reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.name,
            "turn": self.turn,
            "is_running": self.is_running,
            "outcome": self.outcome.name if self.outcome else None,
            "end_reason": self.end_reason,
        }


@dataclass
class ProductionSummary:
    """Result of one Production phase."""
    production: ResourceLedger = field(default_factory=ResourceLedger)
    consumption: ResourceLedger = field(default_factory=ResourceLedger)
    consumption_applied: bool = True
    warnings: List[str] = field(default_factory=list)


@dataclass
class CycleReport:
    """Everything that happened during one Production -> Event -> Management cycle."""
    turn: int
    production: ResourceLedger = field(default_factory=ResourceLedger)
    consumption: ResourceLedger = field(default_factory=ResourceLedger)
    consumption_applied: bool = True
    roll: Optional[int] = None
    event: Optional[EventOutcome] = None
    commands: List[CommandResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    # Filled in when the cycle closes
    phase: GamePhase = GamePhase.PRODUCTION
    next_turn: int = 0
    terminal: bool = False
    outcome: Optional[GameOutcome] = None
    end_reason: str = ""
    resources: Dict[str, int] = field(default_factory=dict)

    @property
    def event_name(self) -> Optional[str]:
        return self.event.name if self.event else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "turn": self.turn,
            "production": self.production.snapshot(),
            "consumption": self.consumption.snapshot(),
            "consumption_applied": self.consumption_applied,
            "roll": self.roll,
            "event": self.event.to_dict() if self.event else None,
            "commands": [c.to_dict() for c in self.commands],
            "warnings": list(self.warnings),
            "phase": self.phase.name,
            "next_turn": self.next_turn,
            "terminal": self.terminal,
            "outcome": self.outcome.name if self.outcome else None,
            "end_reason": self.end_reason,
            "resources": dict(self.resources),
        }


class SimulationEngine:
    """
    One colony run.

    Owns the stockpile, the building list, the roster, and the phase
    state. External code reads copies through the query accessors and
    changes the colony only through management commands.

    Manages:
    - Phase sequencing (``step`` runs one phase, ``advance_cycle`` one turn)
    - Production aggregation and upkeep
    - Event rolls and resolution
    - Win/lose evaluation after every Management phase
    """

    def __init__(
        self,
        config: ColonyConfig = COLONY,
        roll_source: Optional[RollSource] = None,
        seed: Optional[int] = None,
        catalog: Optional[EventCatalog] = None,
    ):
        self.config = config
        self.state = GameState()

        self._resources = ResourceLedger.starting(config)
        self._buildings: List[Building] = [create_building(k) for k in config.initial_buildings]
        self._colonists: List[Colonist] = initial_roster(config)

        self.catalog = catalog or EventCatalog(config=config)
        self.roll_source = roll_source or RandomRollSource(
            seed, low=config.event_roll_min, high=config.event_roll_max
        )

        self.cycle_history: List[CycleReport] = []
        self._pending: Optional[CycleReport] = None

        # Callbacks
        self.on_cycle_complete: Optional[Callable[[CycleReport], None]] = None
        self.on_event_triggered: Optional[Callable[[EventOutcome], None]] = None
        self.on_simulation_end: Optional[Callable[[Dict], None]] = None

        logger.info("Stellar Homestead colony established")

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def resources(self) -> ResourceLedger:
        return self._resources.copy()

    @property
    def buildings(self) -> Tuple[Building, ...]:
        return tuple(b.copy() for b in self._buildings)

    @property
    def colonists(self) -> Tuple[Colonist, ...]:
        return tuple(c.copy() for c in self._colonists)

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def turn(self) -> int:
        return self.state.turn

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def outcome(self) -> Optional[GameOutcome]:
        return self.state.outcome

    # ------------------------------------------------------------------
    # Phase handlers
    # ------------------------------------------------------------------

    def run_production_phase(self) -> ProductionSummary:
        """
        Aggregate producer output, add it, then deduct upkeep.

        Buildings are summed first, then working colonists, and the
        total is added before upkeep is charged. A colonist that cannot
        work, or upkeep that cannot be paid, is recorded as a warning
        and the phase carries on.
        """
        cfg = self.config
        summary = ProductionSummary()
        aggregate = summary.production
        aggregate.add(total_output(self._buildings))

        for colonist in self._colonists:
            if colonist.assigned or colonist.health <= cfg.production_health_threshold:
                continue
            try:
                aggregate.add(colonist.work(cfg))
            except HomesteadError as e:
                summary.warnings.append(str(e))
                logger.warning(f"Production: {e}")

        self._resources.add(aggregate)

        colonist_count = len(self._colonists)
        summary.consumption = ResourceLedger({
            ResourceKind.FOOD: cfg.food_per_colonist * colonist_count,
            ResourceKind.OXYGEN: cfg.oxygen_per_colonist * colonist_count,
            ResourceKind.ENERGY: cfg.energy_per_building * len(self._buildings),
        })
        try:
            self._resources.subtract(summary.consumption)
        except InsufficientResourceError as e:
            summary.consumption_applied = False
            summary.warnings.append(f"Upkeep not paid: {e}")
            logger.warning(f"Upkeep not paid: {e}")

        logger.info(f"Production {aggregate!r}, upkeep {summary.consumption!r}")
        return summary

    def run_event_phase(self, roll: Optional[int] = None) -> Tuple[int, Optional[EventOutcome]]:
        """Roll (unless given) and resolve at most one event."""
        if roll is None:
            roll = self.roll_source.roll()
        outcome = self.catalog.resolve(roll, self._resources, self._colonists)
        if outcome is not None and self.on_event_triggered:
            self.on_event_triggered(outcome)
        return roll, outcome

    def run_management_phase(self, driver=None) -> List[CommandResult]:
        """
        Pull decisions from ``driver`` until it says continue.

        ``None``, ``NoOp``, or anything that is not a command ends the
        phase. At most ``max_commands_per_turn`` commands are applied.
        Rejected commands are reported back through ``driver.notify``.
        """
        results: List[CommandResult] = []
        if driver is None:
            return results

        for _ in range(self.config.max_commands_per_turn):
            decision = driver.next_decision(self)
            if not isinstance(decision, ManagementCommand):
                if decision is not None:
                    logger.warning(f"Ignoring invalid decision {decision!r}; continuing")
                break
            if decision.ends_management:
                break

            result = self._apply_and_record(decision)
            results.append(result)
            notify = getattr(driver, "notify", None)
            if notify is not None:
                notify(result)

        return results

    def check_game_conditions(self) -> Optional[GameOutcome]:
        """Win is checked before lose. Ends the game on either."""
        cfg = self.config
        colonist_count = len(self._colonists)

        if self.state.turn >= cfg.win_turn and colonist_count >= cfg.win_min_colonists:
            self._end_game(GameOutcome.WIN, f"Colony thrived for {self.state.turn} turns")
            return GameOutcome.WIN

        # A kind the stockpile no longer holds counts as exhausted
        held = self._resources.quantities
        if held.get(ResourceKind.FOOD, 0) <= 0 or held.get(ResourceKind.OXYGEN, 0) <= 0:
            self._end_game(GameOutcome.LOSE, "Colony ran out of essential resources")
            return GameOutcome.LOSE

        if colonist_count == 0:
            self._end_game(GameOutcome.LOSE, "All colonists have perished")
            return GameOutcome.LOSE

        return None

    # ------------------------------------------------------------------
    # Sequencing
    # ------------------------------------------------------------------

    def step(self, driver=None) -> GamePhase:
        """Run the current phase to completion and advance. Returns the new phase."""
        phase = self.state.phase

        if phase == GamePhase.SETUP:
            logger.info("Colony initialization complete")
            return self.state.next_phase()

        if phase == GamePhase.END:
            return self.state.next_phase()

        report = self._pending
        if report is None:
            report = self._pending = CycleReport(turn=self.state.turn)

        if phase == GamePhase.PRODUCTION:
            summary = self.run_production_phase()
            report.production = summary.production
            report.consumption = summary.consumption
            report.consumption_applied = summary.consumption_applied
            report.warnings.extend(summary.warnings)
            return self.state.next_phase()

        if phase == GamePhase.EVENT:
            report.roll, report.event = self.run_event_phase()
            return self.state.next_phase()

        # Management
        report.commands.extend(self.run_management_phase(driver))
        if self.check_game_conditions() is None:
            self.state.next_phase()
        self._close_cycle(report)
        return self.state.phase

    def advance_cycle(self, driver=None) -> CycleReport:
        """
        Run through the end of the current cycle.

        From Setup this first enters Production. On an ended game
        nothing runs and a terminal report is returned.
        """
        if self.state.is_ended:
            self.state.next_phase()
            return self._terminal_report()

        if self.state.phase == GamePhase.SETUP:
            self.step(driver)

        while True:
            was = self.state.phase
            self.step(driver)
            if was == GamePhase.MANAGEMENT:
                break
        return self.cycle_history[-1]

    # ------------------------------------------------------------------
    # Management commands
    # ------------------------------------------------------------------

    def apply_management_command(self, command: ManagementCommand) -> CommandResult:
        """
        Apply one command.

        Raises:
            InsufficientResourceError: Build cost not affordable.
            InvalidIndexError: AssignColonist index out of range.
            SaveFileError: SaveGame could not write its file.
        No state changes when an error is raised.
        """
        if isinstance(command, Build):
            building = create_building(command.kind)
            self._resources.subtract(building.cost)
            self._buildings.append(building)
            logger.info(f"Built {building.name}!")
            return CommandResult(command, True, f"Built {building.name}")

        if isinstance(command, AssignColonist):
            colonist = self._colonist_at(command.index)
            colonist.set_assigned(True)
            logger.info(f"{colonist.name} has been assigned to work")
            return CommandResult(command, True, f"{colonist.name} assigned")

        if isinstance(command, RestAll):
            for colonist in self._colonists:
                colonist.rest(self.config)
            logger.info("All colonists have rested and recovered health")
            return CommandResult(command, True, "All colonists rested")

        if isinstance(command, SaveGame):
            from ..simulation.persistence import save_game
            save_game(self, command.path)
            return CommandResult(command, True, f"Saved to {command.path}")

        if isinstance(command, NoOp):
            return CommandResult(command, True, "Continuing to next turn")

        raise TypeError(f"Not a management command: {command!r}")

    def _apply_and_record(self, command: ManagementCommand) -> CommandResult:
        try:
            return self.apply_management_command(command)
        except HomesteadError as e:
            logger.warning(f"Command rejected: {e}")
            return CommandResult(command, False, str(e), error=e)

    def _colonist_at(self, index: int) -> Colonist:
        if not 0 <= index < len(self._colonists):
            raise InvalidIndexError(index, len(self._colonists), "colonist")
        return self._colonists[index]

    def upgrade_building(self, index: int):
        """Upgrade the building at ``index`` by one level."""
        if not 0 <= index < len(self._buildings):
            raise InvalidIndexError(index, len(self._buildings), "building")
        self._buildings[index].upgrade(self.config.upgrade_materials_bonus)

    def damage_colonist(self, index: int, amount: int) -> bool:
        """
        Injure a colonist. Returns False if they died and were removed.
        """
        colonist = self._colonist_at(index)
        try:
            colonist.take_damage(amount)
        except ColonistDeceasedError as e:
            self._colonists.pop(index)
            logger.warning(f"{e}; {len(self._colonists)} colonists remain")
            return False
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _end_game(self, outcome: GameOutcome, reason: str):
        self.state.end_game(outcome, reason)
        logger.info(f"Game ended ({outcome.name}): {reason}")

    def _close_cycle(self, report: CycleReport):
        report.phase = self.state.phase
        report.next_turn = self.state.turn
        report.terminal = self.state.is_ended
        report.outcome = self.state.outcome
        report.end_reason = self.state.end_reason
        report.resources = self._resources.snapshot()

        self.cycle_history.append(report)
        self._pending = None

        if self.on_cycle_complete:
            self.on_cycle_complete(report)
        if report.terminal and self.on_simulation_end:
            self.on_simulation_end(self.get_final_report())

    def _terminal_report(self) -> CycleReport:
        return CycleReport(
            turn=self.state.turn,
            phase=self.state.phase,
            next_turn=self.state.turn,
            terminal=True,
            outcome=self.state.outcome,
            end_reason=self.state.end_reason,
            resources=self._resources.snapshot(),
        )

    def restore(
        self,
        state: GameState,
        resources: ResourceLedger,
        buildings: List[Building],
        colonists: List[Colonist],
    ):
        """Replace the whole colony, e.g. from a save file."""
        self.state = state
        self._resources = resources.copy()
        self._buildings = [b.copy() for b in buildings]
        self._colonists = [c.copy() for c in colonists]
        self._pending = None
        logger.info(f"Colony restored at turn {state.turn} ({state.phase.label})")

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def get_status(self) -> Dict:
        """Get current simulation status."""
        return {
            "turn": self.state.turn,
            "phase": self.state.phase.name,
            "is_running": self.state.is_running,
            "outcome": self.state.outcome.name if self.state.outcome else None,
            "end_reason": self.state.end_reason,
            "resources": self._resources.snapshot(),
            "buildings": [b.get_status() for b in self._buildings],
            "colonists": [c.get_status() for c in self._colonists],
        }

    def get_final_report(self) -> Dict:
        """Summary of the whole run."""
        events_fired: Dict[str, int] = {}
        for report in self.cycle_history:
            if report.event:
                events_fired[report.event.name] = events_fired.get(report.event.name, 0) + 1

        return {
            "summary": {
                "turns_played": len(self.cycle_history),
                "final_turn": self.state.turn,
                "outcome": self.state.outcome.name if self.state.outcome else None,
                "end_reason": self.state.end_reason,
                "colonists_remaining": len(self._colonists),
                "buildings": len(self._buildings),
            },
            "final_resources": self._resources.snapshot(),
            "events_fired": events_fired,
            "warnings": sum(len(r.warnings) for r in self.cycle_history),
        }
