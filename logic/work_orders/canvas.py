from __future__ import annotations

import logging
from copy import copy
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Any, Iterable, List, Tuple

from openpyxl import Workbook, load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.utils import column_index_from_string
from openpyxl.utils.cell import coordinate_from_string
from openpyxl.worksheet.cell_range import CellRange

from .config import DEFAULT_SHEET
from .errors import SerializationError, TemplateError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=8)
def _cached_template(path: str, mtime_ns: int, size: int) -> bytes:
    # la clave incluye mtime/tamano: si la plantilla cambia en disco se vuelve a leer
    return Path(path).read_bytes()


def read_template_bytes(path: Path | str) -> bytes:
    p = Path(path)
    try:
        st = p.stat()
    except OSError as e:
        raise TemplateError(f"No se encontro la plantilla: {p}") from e
    return _cached_template(str(p.resolve()), st.st_mtime_ns, st.st_size)


def _get_sheet(wb: Workbook, name: str):
    if name in wb.sheetnames:
        return wb[name]
    # fallback: primera hoja
    return wb[wb.sheetnames[0]]


def _split(address: str) -> Tuple[int, int]:
    letter, row = coordinate_from_string(address)
    return row, column_index_from_string(letter)


class ExcelCanvas:
    """
    Hoja de Excel mutable sobre openpyxl, direccionada por fila absoluta.

    Cada composicion trabaja sobre su propio Workbook parseado desde los bytes
    de la plantilla; nunca se comparte un arbol en memoria entre reportes.
    """

    def __init__(self, wb: Workbook, ws=None):
        self.wb = wb
        self.ws = ws if ws is not None else wb.active

    @classmethod
    def load_template(cls, path: Path | str, sheet_name: str = DEFAULT_SHEET) -> "ExcelCanvas":
        data = read_template_bytes(path)
        try:
            wb = load_workbook(BytesIO(data))
        except Exception as e:
            raise TemplateError(f"No se pudo leer la plantilla {path}: {e}") from e
        return cls(wb, _get_sheet(wb, sheet_name))

    # ----------- lectura / escritura -----------
    def _anchor(self, row: int, col: int):
        cell = self.ws.cell(row, col)
        if isinstance(cell, MergedCell):
            for rng in self.ws.merged_cells.ranges:
                if rng.min_row <= row <= rng.max_row and rng.min_col <= col <= rng.max_col:
                    return self.ws.cell(rng.min_row, rng.min_col)
        return cell

    def set_cell_value(self, address: str, value: Any) -> None:
        row, col = _split(address)
        self._anchor(row, col).value = value

    def get_cell_value(self, address: str) -> Any:
        row, col = _split(address)
        return self._anchor(row, col).value

    def merged_ranges(self) -> List[str]:
        return sorted(rng.coord for rng in self.ws.merged_cells.ranges)

    # ----------- combinaciones -----------
    def merge_range(self, range_string: str) -> None:
        """Combina el rango; si ya existe igual no hace nada, si choca con otro viejo lo deshace."""
        target = CellRange(range_string)
        current = list(self.ws.merged_cells.ranges)
        if any(rng.coord == target.coord for rng in current):
            return
        for rng in current:
            if not rng.isdisjoint(target):
                self.ws.unmerge_cells(rng.coord)
        if target.size["rows"] == 1 and target.size["columns"] == 1:
            return
        self.ws.merge_cells(target.coord)

    # ----------- insercion de filas -----------
    def _shift_merges(self, insert_at: int) -> List[Tuple[int, int, int, int]]:
        shifted: List[Tuple[int, int, int, int]] = []
        for rng in list(self.ws.merged_cells.ranges):
            if rng.max_row < insert_at:
                continue
            self.ws.unmerge_cells(rng.coord)
            top = rng.min_row + 1 if rng.min_row >= insert_at else rng.min_row
            shifted.append((top, rng.min_col, rng.max_row + 1, rng.max_col))
        return shifted

    def _shift_heights(self, insert_at: int) -> None:
        dims = self.ws.row_dimensions
        heights = {r: d.height for r, d in list(dims.items()) if r >= insert_at}
        for r in heights:
            dims[r].height = None
        for r, h in heights.items():
            dims[r + 1].height = h

    def insert_row_copying_format(self, source_row: int, insert_at: int, columns: Iterable[str]) -> int:
        """
        Inserta una fila en `insert_at` copiando el estilo de `source_row` en las
        columnas dadas. Todo lo que estaba en `insert_at` o debajo baja una fila
        (celdas, combinaciones y alturas). Devuelve el numero de la fila nueva.
        """
        if insert_at < 1 or source_row < 1:
            raise ValueError(f"Fila invalida: origen={source_row} destino={insert_at}")
        ws = self.ws
        merges = self._shift_merges(insert_at)
        self._shift_heights(insert_at)
        ws.insert_rows(insert_at, 1)
        for top, left, bottom, right in merges:
            ws.merge_cells(start_row=top, start_column=left, end_row=bottom, end_column=right)

        src_row = source_row + 1 if source_row >= insert_at else source_row
        for letter in columns:
            col = column_index_from_string(letter)
            src = ws.cell(src_row, col)
            dst = ws.cell(insert_at, col)
            if src.has_style:
                dst._style = copy(src._style)
        ws.row_dimensions[insert_at].height = ws.row_dimensions[src_row].height
        return insert_at

    # ----------- salida -----------
    def serialize(self) -> bytes:
        buf = BytesIO()
        try:
            self.wb.save(buf)
        except Exception as e:
            logger.exception("Fallo al serializar el reporte")
            raise SerializationError(f"No se pudo generar el archivo Excel: {e}") from e
        return buf.getvalue()
