# logic/work_orders/template.py
from __future__ import annotations

from pathlib import Path
from typing import List

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from .config import DEFAULT_SHEET, DEFAULT_TEMPLATE
from .layout import ACTIONS, COLUMNS, FINDINGS, SPARE_PARTS, TECHNICIANS, SectionSpec

# ----------------------------- helpers de estilo -----------------------------
_THIN = Side(style="thin", color="000000")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)

F_HEADER = PatternFill("solid", fgColor="E9EDF3")  # gris claro para cabeceras

FONT_TITLE = Font(name="Calibri", bold=True, size=12, color="000000")
FONT_HEADER = Font(name="Calibri", bold=True, size=11, color="000000")
FONT_CELL = Font(name="Calibri", size=11, color="000000")

HEADER_LABELS = ["Work Order No:", "Date:", "Equipment No:", "KM/HRS:", "Work Type:"]

SECTION_HEADERS = {
    FINDINGS.key: ["No.", "Findings", "", "", ""],
    ACTIONS.key: ["Symbol", "Action Taken", "Start Time", "End Time", "Date"],
    SPARE_PARTS.key: ["No.", "Part Name", "Part Number", "Quantity", "Remarks"],
    TECHNICIANS.key: ["No.", "Technician", "Symbol", "Staff ID", "Signature"],
}

WIDTHS = {"A": 10, "B": 42, "C": 18, "D": 18, "E": 24}


def _write_headers(ws, row: int, headers: List[str]) -> None:
    for j, h in enumerate(headers, start=1):
        cell = ws.cell(row=row, column=j, value=h or None)
        cell.font = FONT_HEADER
        cell.fill = F_HEADER
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = _BORDER


def _write_data_rows(ws, section: SectionSpec) -> None:
    for r in range(section.base_row, section.base_row + section.capacity):
        for j in range(1, len(COLUMNS) + 1):
            cell = ws.cell(row=r, column=j)
            cell.font = FONT_CELL
            cell.border = _BORDER
            cell.alignment = Alignment(vertical="center", wrap_text=(j == 2))
        ws.row_dimensions[r].height = 20
        if section.merge:
            ws.merge_cells(f"{section.merge[0]}{r}:{section.merge[1]}{r}")


def build_template_workbook() -> Workbook:
    """
    Plantilla de la hoja de orden de trabajo con las filas fijas que espera
    el planificador (hallazgos 8-10, acciones 15-17, repuestos 20-23, tecnicos 26-28).
    """
    wb = Workbook()
    ws = wb.active
    ws.title = DEFAULT_SHEET
    for letter, width in WIDTHS.items():
        ws.column_dimensions[letter].width = width

    for r, label in enumerate(HEADER_LABELS, start=1):
        ws.merge_cells(start_row=r, start_column=1, end_row=r, end_column=4)
        c = ws.cell(row=r, column=1, value=label)
        c.font = FONT_TITLE if r == 1 else FONT_HEADER
        c.alignment = Alignment(horizontal="right", vertical="center")
        ws.cell(row=r, column=5).border = _BORDER

    for section in (FINDINGS, ACTIONS, SPARE_PARTS, TECHNICIANS):
        header_row = section.base_row - 1
        _write_headers(ws, header_row, SECTION_HEADERS[section.key])
        if section.merge:
            ws.merge_cells(f"{section.merge[0]}{header_row}:{section.merge[1]}{header_row}")
        _write_data_rows(ws, section)

    # firmas entre hallazgos y acciones
    ws.merge_cells("A12:B12")
    ws.merge_cells("C12:E12")
    ws["A12"] = "Job Allocated By:"
    ws["C12"] = "Job Requested By:"
    for ref in ("A12", "C12"):
        ws[ref].font = FONT_HEADER

    ws.merge_cells("A30:E30")
    ws["A30"] = "Remarks:"
    ws["A30"].font = FONT_HEADER
    return wb


def save_template(path: Path | str = DEFAULT_TEMPLATE) -> Path:
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    build_template_workbook().save(out)
    return out
