"""
Composicion del reporte Excel de una orden de trabajo.

Secuencia: plantilla -> encabezado -> proyeccion -> plan de secciones ->
hallazgos -> acciones (asigna simbolos) -> repuestos -> tecnicos (usa
simbolos) -> bytes. Cualquier error aborta todo; nunca se devuelve un
archivo a medias.
"""
from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Iterable, List, Optional, Tuple

from .canvas import ExcelCanvas
from .config import DEFAULT_SHEET, DEFAULT_TEMPLATE, ReportConfig
from .errors import MalformedInputError, UpstreamFetchError, WorkOrderError, WorkOrderNotFoundError
from .formatting import format_date, is_blank
from .layout import ACTIONS, FINDINGS, SPARE_PARTS, TECHNICIANS, plan_sections
from .materializer import RowMaterializer
from .models import Finding, TechnicianAssignment, User, WorkOrderHeader
from .projector import project
from .roles import require_role_at_least

logger = logging.getLogger(__name__)


def parse_work_order_id(value: Any) -> int:
    if value is None or isinstance(value, bool) or is_blank(value):
        raise MalformedInputError("Se requiere el id de la orden de trabajo")
    try:
        wid = int(str(value).strip())
    except ValueError as e:
        raise MalformedInputError(f"Id de orden de trabajo invalido: {value!r}") from e
    if wid <= 0:
        raise MalformedInputError(f"Id de orden de trabajo invalido: {value!r}")
    return wid


def report_filename(work_order_no: Any, now: Optional[float] = None) -> str:
    stamp = int((now if now is not None else time.time()) * 1000)
    return f"WorkOrderReport_{work_order_no}_{stamp}.xlsx"


class WorkOrderReportComposer:
    def __init__(self, template_path: Path | str = DEFAULT_TEMPLATE, sheet_name: str = DEFAULT_SHEET):
        self.template_path = Path(template_path)
        self.sheet_name = sheet_name

    @classmethod
    def from_config(cls, cfg: ReportConfig) -> "WorkOrderReportComposer":
        return cls(cfg.template_path, cfg.sheet_name)

    @staticmethod
    def _write_header(canvas: ExcelCanvas, header: WorkOrderHeader) -> None:
        allocated = " ".join(str(p).strip() for p in (header.first_name, header.last_name) if not is_blank(p))
        requested = "" if is_blank(header.requested_by) else str(header.requested_by).strip()
        canvas.set_cell_value("E1", header.work_order_no)
        canvas.set_cell_value("E2", format_date(header.work_order_date))
        canvas.set_cell_value("E3", header.equipment_number)
        canvas.set_cell_value("E4", "N/A" if is_blank(header.km_hrs) else header.km_hrs)
        canvas.set_cell_value("E5", header.work_type)
        canvas.set_cell_value("C12", f"Job Requested By: {requested}".strip())
        canvas.set_cell_value("A12", f"Job Allocated By: {allocated}".strip())

    def compose(
        self,
        header: WorkOrderHeader,
        findings: Iterable[Finding],
        assignments: Iterable[TechnicianAssignment] = (),
    ) -> bytes:
        if header is None:
            raise WorkOrderNotFoundError("Orden de trabajo no encontrada")
        if is_blank(header.work_order_no):
            raise MalformedInputError(f"La orden {header.id} no tiene numero")

        canvas = ExcelCanvas.load_template(self.template_path, self.sheet_name)
        self._write_header(canvas, header)

        projected = project(findings, assignments)
        plan = plan_sections(projected.counts())
        for placement in plan.values():
            logger.debug(
                "Seccion %s: inicio=%d elementos=%d excedente=%d",
                placement.section.key, placement.start_row, placement.count, placement.overflow,
            )

        rows = RowMaterializer(canvas)
        rows.render_findings(plan[FINDINGS.key], projected.findings)
        rows.render_actions(plan[ACTIONS.key], projected.actions)
        rows.render_spare_parts(plan[SPARE_PARTS.key], projected.spare_parts)
        rows.render_technicians(plan[TECHNICIANS.key], projected.technicians)

        logger.info(
            "Reporte OT %s: %s, filas insertadas %s",
            header.work_order_no, projected.counts(), rows.inserted,
        )
        return canvas.serialize()


def _fetch(what: str, fn, *args):
    try:
        return fn(*args)
    except WorkOrderError:
        raise
    except Exception as e:
        logger.exception("Fallo consultando %s", what)
        raise UpstreamFetchError(f"Error consultando {what}: {e}") from e


def build_report(
    work_order_id: Any,
    source,
    composer: Optional[WorkOrderReportComposer] = None,
    user: Optional[User] = None,
) -> Tuple[WorkOrderHeader, bytes]:
    """
    Genera el Excel de la orden `work_order_id` y devuelve (encabezado, bytes).

    `source` es cualquier objeto con fetch_header / fetch_findings /
    fetch_technician_assignments (normalmente WorkOrderRepository). El
    encabezado se consulta una sola vez.
    """
    wid = parse_work_order_id(work_order_id)
    if user is not None:
        require_role_at_least(user, "user")

    header = _fetch("encabezado", source.fetch_header, wid)
    if header is None:
        raise WorkOrderNotFoundError(f"Orden de trabajo no encontrada: {wid}")
    findings: List[Finding] = _fetch("hallazgos", source.fetch_findings, wid)
    assignments: List[TechnicianAssignment] = _fetch("tecnicos", source.fetch_technician_assignments, wid)

    composer = composer or WorkOrderReportComposer()
    try:
        return header, composer.compose(header, findings, assignments)
    except WorkOrderError:
        raise
    except Exception as e:
        logger.exception("Error generando el reporte de la orden %s", wid)
        raise WorkOrderError(f"Error interno generando el reporte: {e}") from e


def compose_report(
    work_order_id: Any,
    source,
    composer: Optional[WorkOrderReportComposer] = None,
    user: Optional[User] = None,
) -> bytes:
    return build_report(work_order_id, source, composer, user)[1]
