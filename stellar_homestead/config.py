"""
Stellar Homestead — Configuration
Colony constants, starting conditions, and startup settings.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple, Optional
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


@dataclass
class ColonyConfig:
    """Core colony parameters. Defaults reproduce the standard game."""

    # Starting stockpile
    starting_resources: Dict[str, int] = field(default_factory=lambda: {
        "FOOD": 100,
        "ENERGY": 100,
        "MATERIALS": 50,
        "OXYGEN": 100,
    })

    # Starting colony
    initial_colonists: List[Tuple[str, str]] = field(default_factory=lambda: [
        ("Alex Chen", "ENGINEER"),
        ("Maria Santos", "SCIENTIST"),
        ("James Wilson", "FARMER"),
    ])
    initial_buildings: List[str] = field(default_factory=lambda: [
        "SOLAR_PANEL",
        "GREENHOUSE",
    ])

    # Upkeep per turn
    food_per_colonist: int = 3
    oxygen_per_colonist: int = 2
    energy_per_building: int = 2

    # Colonist health
    max_health: int = 100
    work_health_threshold: int = 50        # work() refuses below this
    production_health_threshold: int = 50  # must be strictly above to be scheduled
    rest_recovery: int = 10

    # Buildings
    upgrade_materials_bonus: int = 5

    # Events
    event_roll_min: int = 1
    event_roll_max: int = 100
    engineer_storm_repair: int = 10

    # Termination
    win_turn: int = 10
    win_min_colonists: int = 3

    # Management
    max_commands_per_turn: int = 5


@dataclass
class GameSettings:
    """
    Startup settings read from a key/value file.

    Only consumed by the run loop and the renderers; core formulas
    never depend on these values.
    """
    difficulty: str = "normal"
    auto_save: bool = True
    save_path: str = "stellar_homestead_save.json"
    extra: Dict[str, str] = field(default_factory=dict)


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def load_settings(filepath: Optional[str] = None) -> GameSettings:
    """
    Load settings from a whitespace-delimited ``key value`` file.

    Missing files fall back to defaults. Unknown keys are kept in
    ``GameSettings.extra``; blank lines and ``#`` comments are skipped.
    """
    settings = GameSettings()
    if filepath is None:
        return settings

    path = Path(filepath)
    if not path.exists():
        logger.info(f"No configuration at {path}, using defaults")
        return settings

    with open(path, "r") as f:
        for line_no, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split(None, 1)
            if len(parts) != 2:
                logger.warning(f"{path}:{line_no}: ignoring malformed line {line!r}")
                continue
            key, value = parts[0].lower(), parts[1].strip()

            if key == "difficulty":
                settings.difficulty = value
            elif key == "auto_save":
                settings.auto_save = _parse_bool(value)
            elif key == "save_path":
                settings.save_path = value
            else:
                settings.extra[key] = value

    logger.info(f"Difficulty set to: {settings.difficulty}")
    return settings


# Default configurations
COLONY = ColonyConfig()
SETTINGS = GameSettings()
