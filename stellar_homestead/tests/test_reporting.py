"""
Test: Reporting, Run Loop & CLI
Text rendering, Excel/Word exports, auto-save, and the command line.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

import json

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml.ns import qn
from openpyxl import load_workbook

from stellar_homestead.__main__ import main
from stellar_homestead.config import ColonyConfig, GameSettings
from stellar_homestead.core.buildings import BuildingKind
from stellar_homestead.core.commands import Build
from stellar_homestead.core.events import ScriptedRollSource
from stellar_homestead.core.simulation import GameOutcome, SimulationEngine
from stellar_homestead.simulation.decisions import ScriptedDecisionSource
from stellar_homestead.simulation.reporting import (
    CYCLE_COLUMNS,
    HEADER_COLOR,
    export_cycle_workbook,
    export_run_summary,
    render_cycle,
    render_status,
)
from stellar_homestead.simulation.runner import run_game


def quiet_engine(rolls=(), **config_overrides) -> SimulationEngine:
    return SimulationEngine(config=ColonyConfig(**config_overrides), roll_source=ScriptedRollSource(rolls))


# =============================================================================
# TEXT RENDERING
# =============================================================================

def test_render_status():
    text = render_status(quiet_engine())

    assert "STELLAR HOMESTEAD - Turn 1" in text
    assert "Phase: Setup" in text
    assert "Resources: food:100 energy:100 materials:50 oxygen:100" in text
    assert "Buildings (2):" in text
    assert "  Solar Panel Level 1 (Operational)" in text
    assert "Colonists (3):" in text
    assert "Alex Chen (Engineer) - Health: 100" in text


def test_render_peaceful_cycle():
    engine = quiet_engine(rolls=[77])
    text = render_cycle(engine.advance_cycle())

    assert text.startswith("--- Turn 1 ---")
    assert "A peaceful turn (roll 77)" in text
    assert "(NOT PAID)" not in text


def test_render_event_cycle():
    engine = quiet_engine(rolls=[15])
    text = render_cycle(engine.advance_cycle())
    assert "Event: Solar Storm (roll 15), Alex Chen repaired damage" in text


def test_render_unpaid_upkeep_and_ending():
    engine = quiet_engine(
        starting_resources={"FOOD": 0, "ENERGY": 100, "MATERIALS": 50, "OXYGEN": 100},
        initial_buildings=[],
        initial_colonists=[("Solo", "ENGINEER")],
    )
    text = render_cycle(engine.advance_cycle())

    assert "(NOT PAID)" in text
    assert "Warning: Upkeep not paid" in text
    assert "GAME OVER (LOSE)" in text


def test_render_commands():
    engine = quiet_engine(starting_resources={"FOOD": 100, "ENERGY": 100, "MATERIALS": 0, "OXYGEN": 100})
    driver = ScriptedDecisionSource([[Build(BuildingKind.SOLAR_PANEL), "rest"]])
    text = render_cycle(engine.advance_cycle(driver))

    assert "Command [rejected]: Insufficient MATERIALS" in text
    assert "Command [ok]: All colonists rested" in text


# =============================================================================
# EXPORTS
# =============================================================================

def test_cycle_workbook(tmp_path):
    engine = quiet_engine(rolls=[20, 100, 3])
    reports = [engine.advance_cycle() for _ in range(3)]

    path = export_cycle_workbook(reports, tmp_path / "cycles.xlsx")

    ws = load_workbook(path)["Cycles"]
    assert [c.value for c in ws[1]] == CYCLE_COLUMNS
    assert ws.max_row == 4
    assert ws.freeze_panes == "A2"

    row = {title: ws.cell(row=2, column=i).value for i, title in enumerate(CYCLE_COLUMNS, start=1)}
    assert row["Turn"] == 1
    assert row["Roll"] == 20
    assert row["Event"] == "Trade Ship Arrival"
    assert row["Produced Food"] == 28
    assert row["Upkeep Paid"] == "Yes"
    assert row["Materials"] == 75

    assert ws.cell(row=3, column=3).value in (None, "")
    assert ws.cell(row=4, column=4).value == "Alex Chen"


def test_run_summary_document(tmp_path):
    engine = quiet_engine(win_turn=2)
    run_game(engine)

    path = export_run_summary(engine, tmp_path / "summary.docx")
    doc = Document(str(path))

    text = "\n".join(p.text for p in doc.paragraphs)
    assert "STELLAR HOMESTEAD" in text
    assert "Colony Run Summary" in text
    assert "Result: WIN" in text

    assert len(doc.tables) == 4
    resources, buildings, colonists, turn_log = doc.tables
    assert [c.text for c in resources.rows[0].cells] == ["Resource", "Amount"]
    assert len(buildings.rows) == 3
    assert colonists.rows[1].cells[0].text == "Alex Chen"
    assert len(turn_log.rows) == 3


def test_run_summary_table_styling(tmp_path):
    path = export_run_summary(quiet_engine(), tmp_path / "styled.docx")
    resources = Document(str(path)).tables[0]

    header = resources.rows[0].cells[0]
    fills = header._tc.tcPr.xpath("./w:shd")
    assert fills[0].get(qn("w:fill")) == HEADER_COLOR
    assert header.paragraphs[0].runs[0].bold

    food_row = resources.rows[1].cells
    assert food_row[0].text == "Food"
    assert food_row[1].paragraphs[0].alignment == WD_ALIGN_PARAGRAPH.RIGHT
    assert food_row[0].paragraphs[0].alignment is None


def test_run_summary_without_history(tmp_path):
    path = export_run_summary(quiet_engine(), tmp_path / "empty.docx")
    assert len(Document(str(path)).tables) == 3


# =============================================================================
# RUN LOOP
# =============================================================================

def test_run_game_plays_to_the_end():
    engine = quiet_engine()
    reports = run_game(engine)

    assert len(reports) == 10
    assert reports[-1].terminal
    assert engine.outcome == GameOutcome.WIN


def test_run_game_cycle_limit_and_renderer():
    engine = quiet_engine()
    rendered = []
    reports = run_game(engine, max_cycles=2, renderer=rendered.append)

    assert len(reports) == 2
    assert engine.is_running
    assert len(rendered) == 4
    assert rendered[0].strip().splitlines()[1] == "STELLAR HOMESTEAD - Turn 1"
    assert rendered[1].startswith("--- Turn 1 ---")


def test_run_game_auto_save(tmp_path):
    path = tmp_path / "auto.json"
    engine = quiet_engine()
    run_game(engine, max_cycles=2, settings=GameSettings(auto_save=True, save_path=str(path)))

    assert json.loads(path.read_text())["state"]["turn"] == 3


def test_run_game_auto_save_failure_is_not_fatal(tmp_path):
    engine = quiet_engine()
    settings = GameSettings(auto_save=True, save_path=str(tmp_path / "no_dir" / "save.json"))
    reports = run_game(engine, max_cycles=1, settings=settings)
    assert len(reports) == 1


def test_run_game_auto_save_off(tmp_path):
    path = tmp_path / "never.json"
    run_game(quiet_engine(), max_cycles=1, settings=GameSettings(auto_save=False, save_path=str(path)))
    assert not path.exists()


# =============================================================================
# COMMAND LINE
# =============================================================================

def test_cli_headless_run(tmp_path, capsys):
    workbook = tmp_path / "run.xlsx"
    summary = tmp_path / "run.docx"

    code = main([
        "--seed", "7",
        "--max-cycles", "3",
        "--quiet",
        "--workbook", str(workbook),
        "--summary", str(summary),
    ])

    out = capsys.readouterr().out
    assert code == 0
    assert "Welcome to Stellar Homestead!" in out
    assert "Difficulty: normal" in out
    assert workbook.exists()
    assert summary.exists()


def test_cli_script_and_save(tmp_path, capsys):
    script = tmp_path / "plan.json"
    script.write_text(json.dumps([[{"command": "build", "building": "SOLAR_PANEL"}]]))
    save = tmp_path / "slot.json"

    code = main(["--seed", "1", "--max-cycles", "1", "--script", str(script), "--save", str(save)])

    assert code == 0
    data = json.loads(save.read_text())
    assert len(data["buildings"]) == 3
    assert "STELLAR HOMESTEAD - Turn 1" in capsys.readouterr().out


def test_cli_resume(tmp_path):
    save = tmp_path / "slot.json"
    assert main(["--seed", "2", "--max-cycles", "2", "--quiet", "--save", str(save)]) == 0
    assert main(["--seed", "2", "--max-cycles", "1", "--quiet", "--load", str(save), "--save", str(save)]) == 0

    assert json.loads(save.read_text())["state"]["turn"] == 4


def test_cli_bad_save_file(tmp_path, capsys):
    bad = tmp_path / "corrupt.json"
    bad.write_text("not a save")

    assert main(["--load", str(bad)]) == 2
    assert "Error:" in capsys.readouterr().err
