from __future__ import annotations

import logging
from datetime import date
from typing import Any, Callable, Dict, Sequence, Tuple

from .canvas import ExcelCanvas
from .formatting import as_date, format_date, format_quantity, format_time, is_blank
from .layout import SectionPlacement
from .models import Action, ActionDate, Finding, SparePart, TechnicianRow
from .symbols import SymbolTable

logger = logging.getLogger(__name__)

CellMap = Dict[str, Any]


def _required(value: Any, section: str, field: str, index: int) -> Any:
    if is_blank(value):
        logger.warning("Valor vacio en %s[%d].%s; se deja la celda en blanco", section, index, field)
        return ""
    return value.strip() if isinstance(value, str) else value


def _same_day(a: Any, b: Any) -> bool:
    da, db = as_date(a), as_date(b)
    if da is not None and db is not None:
        return da == db
    return a == b


def action_schedule(action: Action) -> Tuple[str, str, str]:
    """
    (inicio, fin, fecha) de una accion.

    Con fechas de ejecucion: inicio de la mas antigua (o el de la accion), fin de
    la ultima que tenga hora de cierre (o el de la accion) y la fecha como rango
    'inicio-fin' cuando abarca varios dias. Sin fechas: los campos de la accion.
    """
    dates: Sequence[ActionDate] = action.action_dates or ()
    if len(dates) == 0:
        return format_time(action.start_time), format_time(action.end_time), format_date(action.action_date)

    ordered = sorted(dates, key=lambda d: as_date(d.action_date) or date.max)
    first, last = ordered[0], ordered[-1]
    start = first.start_time if not is_blank(first.start_time) else action.start_time
    end = action.end_time
    for entry in reversed(ordered):
        if not is_blank(entry.end_time):
            end = entry.end_time
            break
    if _same_day(first.action_date, last.action_date):
        date_cell = format_date(first.action_date)
    else:
        date_cell = f"{format_date(first.action_date)}-{format_date(last.action_date)}"
    return format_time(start), format_time(end), date_cell


class RowMaterializer:
    """
    Escribe cada seccion en la hoja. Los primeros `capacity` elementos van a las
    filas de la plantilla; el resto se escribe en filas insertadas debajo del
    cursor, siempre de arriba hacia abajo porque cada insercion mueve las filas
    siguientes.
    """

    def __init__(self, canvas: ExcelCanvas, symbols: SymbolTable | None = None):
        self.canvas = canvas
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.inserted: Dict[str, int] = {}

    def _write_row(self, placement: SectionPlacement, row: int, cells: CellMap) -> None:
        merge = placement.section.merge
        if merge:
            self.canvas.merge_range(f"{merge[0]}{row}:{merge[1]}{row}")
        for col, value in cells.items():
            self.canvas.set_cell_value(f"{col}{row}", value)

    def render(
        self,
        placement: SectionPlacement,
        items: Sequence[Any],
        cells_for: Callable[[int, Any], CellMap],
    ) -> int:
        key = placement.section.key
        self.inserted[key] = 0
        if not placement.rendered:
            return 0
        section = placement.section
        anchor = placement.start_row  # primera fila de datos de la seccion
        cursor = placement.start_row
        for index, item in enumerate(items):
            if index < section.capacity:
                row = cursor
            else:
                row = self.canvas.insert_row_copying_format(anchor, cursor, section.columns)
                self.inserted[key] += 1
            self._write_row(placement, row, cells_for(index, item))
            cursor = row + 1
        logger.debug("%s: %d filas desde %d (%d insertadas)", key, len(items), anchor, self.inserted[key])
        return self.inserted[key]

    # ----------- secciones -----------
    def render_findings(self, placement: SectionPlacement, findings: Sequence[Finding]) -> int:
        def cells(i: int, f: Finding) -> CellMap:
            return {"A": i + 1, "B": _required(f.description, "findings", "description", i)}

        return self.render(placement, findings, cells)

    def render_actions(self, placement: SectionPlacement, actions: Sequence[Action]) -> int:
        def cells(i: int, a: Action) -> CellMap:
            symbol = i + 1
            self.symbols.assign(a.id, symbol)
            start, end, day = action_schedule(a)
            return {
                "A": symbol,
                "B": _required(a.description, "actions", "description", i),
                "C": start,
                "D": end,
                "E": day,
            }

        return self.render(placement, actions, cells)

    def render_spare_parts(self, placement: SectionPlacement, parts: Sequence[SparePart]) -> int:
        def cells(i: int, p: SparePart) -> CellMap:
            return {
                "A": i + 1,
                "B": _required(p.part_name, "spare_parts", "part_name", i),
                "C": _required(p.part_number, "spare_parts", "part_number", i),
                "D": _required(format_quantity(p.quantity, p.unit), "spare_parts", "quantity", i),
            }

        return self.render(placement, parts, cells)

    def render_technicians(self, placement: SectionPlacement, technicians: Sequence[TechnicianRow]) -> int:
        def cells(i: int, t: TechnicianRow) -> CellMap:
            return {
                "A": i + 1,
                "B": _required(t.name, "technicians", "name", i),
                "C": self.symbols.resolve_csv(t.action_ids),
                "D": _required(t.staff_id, "technicians", "staff_id", i),
            }

        return self.render(placement, technicians, cells)
