"""
Stellar Homestead — Persistence
Save and load a colony as a JSON document.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from ..core.buildings import Building
from ..core.errors import SaveFileError
from ..core.events import RollSource
from ..core.ledger import ResourceLedger
from ..core.simulation import GameOutcome, GamePhase, GameState, SimulationEngine
from ..crew.colonist import Colonist
from ..config import COLONY, ColonyConfig

logger = logging.getLogger(__name__)

FORMAT_VERSION = 1


def game_to_dict(engine: SimulationEngine) -> Dict[str, Any]:
    """Everything needed to resume ``engine``."""
    return {
        "format_version": FORMAT_VERSION,
        "state": engine.state.to_dict(),
        "resources": engine.resources.snapshot(),
        "buildings": [
            {
                "kind": b.kind.name,
                "level": b.level,
                "operational": b.operational,
                "production": {k.name: v for k, v in b.production.items()},
            }
            for b in engine.buildings
        ],
        "colonists": [c.get_status() for c in engine.colonists],
    }


def save_game(engine: SimulationEngine, filepath: Union[str, Path]) -> Path:
    """
    Write the game to ``filepath``.

    Raises:
        SaveFileError: the file could not be written.
    """
    path = Path(filepath)
    try:
        with open(path, "w") as f:
            json.dump(game_to_dict(engine), f, indent=2)
    except OSError as e:
        raise SaveFileError(f"Failed to save game to {path}: {e}") from e

    logger.info(f"Game saved to {path}")
    return path


def engine_from_dict(
    data: Dict[str, Any],
    config: ColonyConfig = COLONY,
    roll_source: Optional[RollSource] = None,
    seed: Optional[int] = None,
) -> SimulationEngine:
    """Rebuild an engine from ``game_to_dict`` output."""
    version = data.get("format_version")
    if version != FORMAT_VERSION:
        raise SaveFileError(f"Unsupported save format version: {version!r}")

    try:
        raw_state = data["state"]
        outcome = raw_state.get("outcome")
        state = GameState(
            phase=GamePhase[raw_state["phase"]],
            turn=int(raw_state["turn"]),
            is_running=bool(raw_state["is_running"]),
            outcome=GameOutcome[outcome] if outcome else None,
            end_reason=raw_state.get("end_reason", ""),
        )
        resources = ResourceLedger.from_mapping(data["resources"])
        buildings = [
            Building(
                kind=b["kind"],
                level=int(b.get("level", 1)),
                operational=bool(b.get("operational", True)),
                production=b.get("production") or {},
            )
            for b in data["buildings"]
        ]
        colonists = [Colonist.from_status(c) for c in data["colonists"]]
    except (KeyError, ValueError, TypeError) as e:
        raise SaveFileError(f"Corrupt save data: {e}") from e

    # Dead colonists never stay on the roster
    for colonist in colonists:
        if not 0 < colonist.health <= config.max_health:
            raise SaveFileError(
                f"Corrupt save data: {colonist.name} has health {colonist.health} "
                f"outside 1..{config.max_health}"
            )

    engine = SimulationEngine(config=config, roll_source=roll_source, seed=seed)
    engine.restore(state, resources, buildings, colonists)
    return engine


def load_game(
    filepath: Union[str, Path],
    config: ColonyConfig = COLONY,
    roll_source: Optional[RollSource] = None,
    seed: Optional[int] = None,
) -> SimulationEngine:
    """
    Read a game written by ``save_game``.

    Raises:
        SaveFileError: the file is missing, not JSON, or not a save.
    """
    path = Path(filepath)
    try:
        with open(path, "r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SaveFileError(f"Failed to load game from {path}: {e}") from e

    if not isinstance(data, dict):
        raise SaveFileError(f"{path} does not contain a saved game")

    engine = engine_from_dict(data, config=config, roll_source=roll_source, seed=seed)
    logger.info(f"Game loaded from {path}")
    return engine
