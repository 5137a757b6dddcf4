"""
Stellar Homestead — Simulation Package
Decision sources, persistence, reporting, and the run loop that sit
around the core engine.
"""

from .decisions import (
    DecisionSource,
    PassiveDecisionSource,
    ScriptedDecisionSource,
    MenuDecisionSource,
)

from .persistence import (
    FORMAT_VERSION,
    game_to_dict,
    save_game,
    load_game,
    engine_from_dict,
)

from .reporting import (
    render_status,
    render_cycle,
    export_cycle_workbook,
    export_run_summary,
)

from .runner import run_game

__all__ = [
    # Decisions
    "DecisionSource",
    "PassiveDecisionSource",
    "ScriptedDecisionSource",
    "MenuDecisionSource",

    # Persistence
    "FORMAT_VERSION",
    "game_to_dict",
    "save_game",
    "load_game",
    "engine_from_dict",

    # Reporting
    "render_status",
    "render_cycle",
    "export_cycle_workbook",
    "export_run_summary",

    # Runner
    "run_game",
]
