"""
Stellar Homestead — command line.

    python -m stellar_homestead --seed 7 --max-cycles 12
    python -m stellar_homestead --interactive --config config.txt
    python -m stellar_homestead --script plan.json --workbook run.xlsx
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import COLONY, load_settings
from .core.errors import SaveFileError
from .core.simulation import SimulationEngine
from .simulation.decisions import (
    MenuDecisionSource,
    PassiveDecisionSource,
    ScriptedDecisionSource,
)
from .simulation.persistence import load_game
from .simulation.reporting import export_cycle_workbook, export_run_summary
from .simulation.runner import run_game

logger = logging.getLogger("stellar_homestead")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stellar_homestead",
        description="Turn-based space colony management simulation.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for event rolls")
    parser.add_argument("--max-cycles", type=int, default=None, help="Stop after this many turns")
    drivers = parser.add_mutually_exclusive_group()
    drivers.add_argument("--interactive", action="store_true", help="Play through the numbered menu")
    drivers.add_argument("--script", default=None, help="JSON file of per-turn management commands")
    parser.add_argument("--load", default=None, help="Resume from a saved game")
    parser.add_argument("--config", default=None, help="Key/value settings file")
    parser.add_argument("--save", default=None, help="Save path (overrides the settings file)")
    parser.add_argument("--workbook", default=None, help="Write the cycle log to this .xlsx file")
    parser.add_argument("--summary", default=None, help="Write a run summary to this .docx file")
    parser.add_argument("--quiet", action="store_true", help="Do not print status each turn")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    settings = load_settings(args.config)
    if args.save:
        settings.save_path = args.save
    # Auto-save only when a save path was asked for explicitly
    settings.auto_save = settings.auto_save and bool(args.save or args.config)

    if args.load:
        try:
            engine = load_game(args.load, config=COLONY, seed=args.seed)
        except SaveFileError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 2
    else:
        engine = SimulationEngine(config=COLONY, seed=args.seed)

    if args.interactive:
        driver = MenuDecisionSource(save_path=settings.save_path)
    elif args.script:
        driver = ScriptedDecisionSource.from_json(args.script)
    else:
        driver = PassiveDecisionSource()

    print("Welcome to Stellar Homestead!")
    print(f"Difficulty: {settings.difficulty}")

    renderer = None if args.quiet else print
    run_game(engine, driver, max_cycles=args.max_cycles, settings=settings, renderer=renderer)

    final = engine.get_final_report()["summary"]
    print(f"\nGame ended after {final['final_turn']} turns: {final['outcome'] or 'unfinished'}")
    if final["end_reason"]:
        print(final["end_reason"])

    if args.workbook:
        export_cycle_workbook(engine.cycle_history, args.workbook)
    if args.summary:
        export_run_summary(engine, args.summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())
