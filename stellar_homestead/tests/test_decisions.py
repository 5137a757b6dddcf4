"""
Test: Decision Sources
Command parsing, scripted replays, and the interactive menu.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import json

import pytest

from stellar_homestead.config import ColonyConfig
from stellar_homestead.core.buildings import BuildingKind
from stellar_homestead.core.commands import (
    AssignColonist,
    Build,
    NoOp,
    RestAll,
    SaveGame,
    command_from_dict,
)
from stellar_homestead.core.events import ScriptedRollSource
from stellar_homestead.core.simulation import SimulationEngine
from stellar_homestead.simulation.decisions import (
    MenuDecisionSource,
    PassiveDecisionSource,
    ScriptedDecisionSource,
)


# =============================================================================
# TEST HELPERS
# =============================================================================

def quiet_engine(**config_overrides) -> SimulationEngine:
    return SimulationEngine(config=ColonyConfig(**config_overrides), roll_source=ScriptedRollSource([]))


def scripted_input(*answers):
    """input() replacement that returns ``answers`` in order, then EOF."""
    queue = list(answers)

    def fake_input(prompt=""):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return fake_input


# =============================================================================
# COMMAND PARSING
# =============================================================================

@pytest.mark.parametrize("data,expected", [
    ({"command": "build", "building": "GREENHOUSE"}, Build(BuildingKind.GREENHOUSE)),
    ({"command": "Build", "building": "solar panel"}, Build(BuildingKind.SOLAR_PANEL)),
    ({"command": "assign", "index": "2"}, AssignColonist(2)),
    ({"command": "rest"}, RestAll()),
    ("rest", RestAll()),
    ({"command": "save", "path": "x.json"}, SaveGame("x.json")),
    ({"command": "save"}, SaveGame()),
    ("continue", NoOp()),
])
def test_command_from_dict(data, expected):
    assert command_from_dict(data) == expected


@pytest.mark.parametrize("data", [
    None,
    {"command": "build"},
    {"command": "build", "building": "launch pad"},
    {"command": "assign", "index": "first"},
    {"command": "demolish"},
])
def test_unparseable_commands_are_none(data):
    assert command_from_dict(data) is None


def test_command_dict_round_trip():
    for command in (Build(BuildingKind.MATERIAL_FACTORY), AssignColonist(1), RestAll(), SaveGame("a.json"), NoOp()):
        assert command_from_dict(command.to_dict()) == command


def test_only_noop_ends_management():
    assert NoOp().ends_management
    assert not RestAll().ends_management
    assert not Build(BuildingKind.GREENHOUSE).ends_management


# =============================================================================
# PASSIVE & SCRIPTED
# =============================================================================

def test_passive_source_never_acts():
    engine = quiet_engine()
    driver = PassiveDecisionSource()
    report = engine.advance_cycle(driver)

    assert driver.next_decision(engine) is None
    assert report.commands == []


class TestScripted:
    """Per-turn command replay."""

    def test_list_script_is_one_based(self):
        engine = quiet_engine()
        driver = ScriptedDecisionSource([
            [{"command": "assign", "index": 0}],
            [],
            ["rest"],
        ])

        first = engine.advance_cycle(driver)
        second = engine.advance_cycle(driver)
        third = engine.advance_cycle(driver)

        assert [r.command for r in first.commands] == [AssignColonist(0)]
        assert second.commands == []
        assert [r.command for r in third.commands] == [RestAll()]

    def test_dict_script(self):
        engine = quiet_engine()
        driver = ScriptedDecisionSource({"2": [Build(BuildingKind.SOLAR_PANEL)]})

        engine.advance_cycle(driver)
        assert len(engine.buildings) == 2
        engine.advance_cycle(driver)
        assert len(engine.buildings) == 3

    def test_turn_is_not_replayed(self):
        engine = quiet_engine()
        driver = ScriptedDecisionSource([[RestAll()]])

        engine.advance_cycle(driver)
        assert driver.next_decision(engine) is None  # turn 2 has nothing

        driver.reset()
        assert driver.results == []

    def test_unparseable_entry_ends_the_turn(self):
        engine = quiet_engine()
        driver = ScriptedDecisionSource([[{"command": "demolish"}, "rest"]])
        report = engine.advance_cycle(driver)
        assert report.commands == []

    def test_from_json(self, tmp_path):
        path = tmp_path / "plan.json"
        path.write_text(json.dumps([[{"command": "build", "building": "OXYGEN_GENERATOR"}]]))

        engine = quiet_engine()
        driver = ScriptedDecisionSource.from_json(str(path))
        report = engine.advance_cycle(driver)

        assert report.commands[0].accepted
        assert engine.buildings[-1].kind == BuildingKind.OXYGEN_GENERATOR
        assert driver.results == report.commands


# =============================================================================
# MENU
# =============================================================================

class TestMenu:
    """Numbered menu read through an injected input function."""

    def make_menu(self, *answers, save_path="menu_save.json"):
        output = []
        menu = MenuDecisionSource(
            input_fn=scripted_input(*answers),
            output_fn=output.append,
            save_path=save_path,
        )
        return menu, output

    def test_build_choice(self):
        menu, output = self.make_menu("1", "2")
        assert menu.next_decision(quiet_engine()) == Build(BuildingKind.GREENHOUSE)
        assert any("Greenhouse (Materials: 30, Energy: 10)" in line for line in output)

    def test_invalid_building_choice(self):
        menu, output = self.make_menu("1", "9")
        assert menu.next_decision(quiet_engine()) is None
        assert "Invalid choice." in output

    def test_assign_is_one_based(self):
        menu, _ = self.make_menu("2", "3")
        assert menu.next_decision(quiet_engine()) == AssignColonist(2)

    def test_assign_cancel(self):
        menu, _ = self.make_menu("2", "0")
        assert menu.next_decision(quiet_engine()) is None

    def test_rest_and_save(self):
        menu, _ = self.make_menu("3", "4", save_path="slot.json")
        engine = quiet_engine()
        assert menu.next_decision(engine) == RestAll()
        assert menu.next_decision(engine) == SaveGame("slot.json")

    @pytest.mark.parametrize("answer", ["5", "42", "abc", ""])
    def test_anything_else_continues(self, answer):
        menu, _ = self.make_menu(answer)
        assert menu.next_decision(quiet_engine()) == NoOp()

    def test_end_of_input_continues(self):
        menu, _ = self.make_menu()
        assert menu.next_decision(quiet_engine()) == NoOp()

    def test_menu_drives_engine(self):
        engine = quiet_engine(starting_resources={"FOOD": 100, "ENERGY": 100, "MATERIALS": 10, "OXYGEN": 100})
        menu, output = self.make_menu("1", "1", "2", "1", "5")
        report = engine.advance_cycle(menu)

        assert [r.accepted for r in report.commands] == [False, True]
        assert engine.colonists[0].assigned
        assert len(engine.buildings) == 2
        assert any("Insufficient MATERIALS" in line for line in output)
        assert len(menu.rejected) == 1
