"""
Stellar Homestead — Reporting
Text status rendering and run exports (Excel cycle log, Word summary).
"""

from pathlib import Path
from typing import Iterable, List, Optional, Union
import logging

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..core.ledger import ResourceKind
from ..core.simulation import CycleReport, SimulationEngine

logger = logging.getLogger(__name__)

HEADER_COLOR = "1F4E79"
RULE = "=" * 50


# =============================================================================
# TEXT RENDERING
# =============================================================================

def render_status(engine: SimulationEngine) -> str:
    """Status block: turn, phase, resources, buildings, colonists."""
    resources = engine.resources
    buildings = engine.buildings
    colonists = engine.colonists

    lines = [
        "",
        RULE,
        f"STELLAR HOMESTEAD - Turn {engine.turn}",
        f"Phase: {engine.phase.label}",
        RULE,
        "Resources: " + " ".join(
            f"{name.lower()}:{amount}" for name, amount in resources.snapshot().items()
        ),
        f"Buildings ({len(buildings)}):",
    ]
    for building in buildings:
        status = "Operational" if building.operational else "Offline"
        lines.append(f"  {building.name} Level {building.level} ({status})")

    lines.append(f"Colonists ({len(colonists)}):")
    for colonist in colonists:
        lines.append(f"  {colonist.display_info()}")

    return "\n".join(lines)


def render_cycle(report: CycleReport) -> str:
    """One-paragraph account of a finished cycle."""
    lines = [f"--- Turn {report.turn} ---"]
    lines.append(f"Produced: {_format_amounts(report.production.snapshot())}")
    upkeep = _format_amounts(report.consumption.snapshot())
    lines.append(f"Upkeep: {upkeep}" + ("" if report.consumption_applied else " (NOT PAID)"))

    if report.event:
        line = f"Event: {report.event.name} (roll {report.roll})"
        if report.event.responder:
            line += f", {report.event.responder} repaired damage"
        lines.append(line)
    elif report.roll is not None:
        lines.append(f"A peaceful turn (roll {report.roll})")

    for result in report.commands:
        mark = "ok" if result.accepted else "rejected"
        lines.append(f"Command [{mark}]: {result.message}")
    for warning in report.warnings:
        lines.append(f"Warning: {warning}")

    if report.terminal:
        lines.append(f"GAME OVER ({report.outcome.name if report.outcome else '?'}): {report.end_reason}")
    return "\n".join(lines)


def _format_amounts(amounts: dict) -> str:
    if not amounts:
        return "nothing"
    return ", ".join(f"{name.lower()} {amount:+d}" for name, amount in amounts.items())


# =============================================================================
# EXCEL CYCLE LOG
# =============================================================================

CYCLE_COLUMNS = (
    ["Turn", "Roll", "Event", "Responder"]
    + [f"Produced {k.label}" for k in ResourceKind]
    + ["Upkeep Paid"]
    + [f"{k.label}" for k in ResourceKind]
    + ["Commands", "Rejected", "Warnings", "Outcome"]
)


def export_cycle_workbook(reports: Iterable[CycleReport], filepath: Union[str, Path]) -> Path:
    """Write one row per cycle to an .xlsx workbook."""
    path = Path(filepath)
    wb = Workbook()
    ws = wb.active
    ws.title = "Cycles"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color=HEADER_COLOR, end_color=HEADER_COLOR, fill_type="solid")
    for col, title in enumerate(CYCLE_COLUMNS, start=1):
        cell = ws.cell(row=1, column=col, value=title)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = Alignment(horizontal="center")

    row_count = 0
    for row, report in enumerate(reports, start=2):
        produced = report.production.snapshot()
        values = [
            report.turn,
            report.roll,
            report.event_name or "",
            report.event.responder if report.event and report.event.responder else "",
        ]
        values += [produced.get(k.name, 0) for k in ResourceKind]
        values.append("Yes" if report.consumption_applied else "No")
        values += [report.resources.get(k.name, 0) for k in ResourceKind]
        values += [
            len(report.commands),
            sum(1 for c in report.commands if not c.accepted),
            "; ".join(report.warnings),
            report.outcome.name if report.outcome else "",
        ]
        for col, value in enumerate(values, start=1):
            ws.cell(row=row, column=col, value=value)
        row_count += 1

    for col in range(1, len(CYCLE_COLUMNS) + 1):
        ws.column_dimensions[get_column_letter(col)].width = 14
    ws.freeze_panes = "A2"

    wb.save(path)
    logger.info(f"Cycle log exported to {path} ({row_count} rows)")
    return path


# =============================================================================
# WORD RUN SUMMARY
# =============================================================================

def shade_cell(cell, color: str = HEADER_COLOR):
    """Fill a table cell with ``color`` (hex RGB)."""
    fill = OxmlElement('w:shd')
    fill.set(qn('w:val'), 'clear')
    fill.set(qn('w:fill'), color)
    cell._tc.get_or_add_tcPr().append(fill)


def add_section_table(doc, title: str, headers, rows):
    """Heading plus a grid table with a shaded header row; numbers are right-aligned."""
    doc.add_heading(title, level=1)
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = 'Table Grid'

    for cell, header in zip(table.rows[0].cells, headers):
        run = cell.paragraphs[0].add_run(header)
        run.bold = True
        run.font.color.rgb = RGBColor(0xFF, 0xFF, 0xFF)
        shade_cell(cell)

    for values in rows:
        cells = table.add_row().cells
        for cell, value in zip(cells, values):
            cell.text = str(value)
            if isinstance(value, int):
                cell.paragraphs[0].alignment = WD_ALIGN_PARAGRAPH.RIGHT

    return table


def export_run_summary(
    engine: SimulationEngine,
    filepath: Union[str, Path],
    reports: Optional[List[CycleReport]] = None,
) -> Path:
    """Write a .docx summary of the run: outcome, stockpile, colony, turn log."""
    path = Path(filepath)
    reports = engine.cycle_history if reports is None else reports
    final = engine.get_final_report()
    summary = final["summary"]

    doc = Document()
    title = doc.add_heading('STELLAR HOMESTEAD', 0)
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER

    subtitle = doc.add_paragraph('Colony Run Summary')
    subtitle.alignment = WD_ALIGN_PARAGRAPH.CENTER
    subtitle.runs[0].font.size = Pt(16)
    subtitle.runs[0].bold = True

    doc.add_heading('Outcome', level=1)
    outcome = doc.add_paragraph()
    outcome.add_run(f"Result: {summary['outcome'] or 'In progress'}\n").bold = True
    outcome.add_run(f"Turns played: {summary['turns_played']}\n")
    if summary['end_reason']:
        outcome.add_run(f"Reason: {summary['end_reason']}")

    add_section_table(
        doc,
        'Final Resources',
        ["Resource", "Amount"],
        [(name.capitalize(), amount) for name, amount in final["final_resources"].items()],
    )

    add_section_table(
        doc,
        'Buildings',
        ["Building", "Level", "Status"],
        [
            (b.name, b.level, "Operational" if b.operational else "Offline")
            for b in engine.buildings
        ],
    )

    add_section_table(
        doc,
        'Colonists',
        ["Name", "Specialization", "Health", "Experience"],
        [
            (c.name, c.specialization.label, c.health, c.experience)
            for c in engine.colonists
        ],
    )

    if reports:
        add_section_table(
            doc,
            'Turn Log',
            ["Turn", "Event", "Food", "Energy", "Materials", "Oxygen"],
            [
                (
                    r.turn,
                    r.event_name or "-",
                    r.resources.get("FOOD", 0),
                    r.resources.get("ENERGY", 0),
                    r.resources.get("MATERIALS", 0),
                    r.resources.get("OXYGEN", 0),
                )
                for r in reports
            ],
        )

    doc.save(str(path))
    logger.info(f"Run summary exported to {path}")
    return path
