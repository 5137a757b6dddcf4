"""
Stellar Homestead — Run Loop
Drives an engine cycle by cycle with rendering and auto-save.
"""

from typing import Callable, List, Optional
import logging

from ..core.errors import SaveFileError
from ..core.simulation import CycleReport, SimulationEngine
from ..config import GameSettings
from .decisions import DecisionSource, PassiveDecisionSource
from .persistence import save_game
from .reporting import render_cycle, render_status

logger = logging.getLogger(__name__)


def run_game(
    engine: SimulationEngine,
    driver: Optional[DecisionSource] = None,
    max_cycles: Optional[int] = None,
    settings: Optional[GameSettings] = None,
    renderer: Optional[Callable[[str], None]] = None,
) -> List[CycleReport]:
    """
    Advance ``engine`` until it ends or ``max_cycles`` cycles have run.

    Args:
        driver: Source of management decisions (passive if omitted).
        max_cycles: Cycle limit, or None to play to the end.
        settings: Startup settings; with ``auto_save`` on the game is
            written to ``settings.save_path`` after every cycle.
        renderer: Receives the status block before each cycle and the
            cycle account after it.

    Returns:
        Reports for the cycles run by this call.
    """
    driver = driver or PassiveDecisionSource()
    reports: List[CycleReport] = []

    while engine.is_running:
        if max_cycles is not None and len(reports) >= max_cycles:
            break

        if renderer:
            renderer(render_status(engine))

        report = engine.advance_cycle(driver)
        reports.append(report)

        if renderer:
            renderer(render_cycle(report))

        if settings is not None and settings.auto_save:
            try:
                save_game(engine, settings.save_path)
            except SaveFileError as e:
                logger.warning(f"Auto-save failed: {e}")

        if report.terminal:
            break

    logger.info(f"Run stopped after {len(reports)} cycles at turn {engine.turn}")
    return reports
