from __future__ import annotations

from typing import Any, Dict, List, Optional

from .db import query_rows
from .models import Action, ActionDate, Finding, SparePart, TechnicianAssignment, WorkOrderHeader

SQL_HEADER = """
SELECT
    wo.id, wo.work_order_no, wo.work_order_date, wo.equipment_number, wo.km_hrs,
    wo.work_type, wo.requested_by, wo.status, u.first_name, u.last_name
FROM work_orders wo
LEFT JOIN users u ON wo.requested_by_id = u.id
WHERE wo.id = ?
"""

SQL_FINDINGS = """
SELECT f.id, f.description
FROM findings f
WHERE f.work_order_id = ?
ORDER BY f.id
"""

SQL_ACTIONS = """
SELECT a.id, a.finding_id, a.description, a.action_date, a.start_time, a.end_time
FROM actions a
JOIN findings f ON f.id = a.finding_id
WHERE f.work_order_id = ?
ORDER BY a.id
"""

SQL_ACTION_DATES = """
SELECT ad.id, ad.action_id, ad.action_date, ad.start_time, ad.end_time, ad.is_completed
FROM action_dates ad
JOIN actions a ON a.id = ad.action_id
JOIN findings f ON f.id = a.finding_id
WHERE f.work_order_id = ?
ORDER BY ad.action_date, ad.id
"""

SQL_SPARE_PARTS = """
SELECT sp.id, sp.action_id, sp.part_name, sp.part_number, sp.quantity, sp.unit
FROM spare_parts sp
JOIN actions a ON a.id = sp.action_id
JOIN findings f ON f.id = a.finding_id
WHERE f.work_order_id = ?
ORDER BY sp.id
"""

SQL_TECHNICIANS = """
SELECT t.name, t.staff_id, a.id AS action_id
FROM action_technicians t
JOIN actions a ON a.id = t.action_id
JOIN findings f ON f.id = a.finding_id
WHERE f.work_order_id = ?
ORDER BY t.name, t.staff_id
"""


class WorkOrderRepository:
    """Lectura (solo lectura) de una orden de trabajo para el reporte."""

    def __init__(self, conn):
        self.conn = conn

    def fetch_header(self, work_order_id: int) -> Optional[WorkOrderHeader]:
        rows = query_rows(self.conn, SQL_HEADER, [work_order_id])
        if not rows:
            return None
        return WorkOrderHeader(**rows[0])

    def fetch_findings(self, work_order_id: int) -> List[Finding]:
        """Arbol hallazgo -> acciones -> (fechas, repuestos), ordenado por id en cada nivel."""
        dates: Dict[Any, List[ActionDate]] = {}
        for r in query_rows(self.conn, SQL_ACTION_DATES, [work_order_id]):
            dates.setdefault(r["action_id"], []).append(
                ActionDate(
                    id=r["id"],
                    action_date=r["action_date"],
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    is_completed=bool(r["is_completed"]),
                )
            )
        parts: Dict[Any, List[SparePart]] = {}
        for r in query_rows(self.conn, SQL_SPARE_PARTS, [work_order_id]):
            action_id = r.pop("action_id")
            parts.setdefault(action_id, []).append(SparePart(**r))

        actions: Dict[Any, List[Action]] = {}
        for r in query_rows(self.conn, SQL_ACTIONS, [work_order_id]):
            actions.setdefault(r["finding_id"], []).append(
                Action(
                    id=r["id"],
                    description=r["description"],
                    action_date=r["action_date"],
                    start_time=r["start_time"],
                    end_time=r["end_time"],
                    action_dates=tuple(dates.get(r["id"], ())),
                    spare_parts=tuple(parts.get(r["id"], ())),
                )
            )
        return [
            Finding(id=r["id"], description=r["description"], actions=tuple(actions.get(r["id"], ())))
            for r in query_rows(self.conn, SQL_FINDINGS, [work_order_id])
        ]

    def fetch_technician_assignments(self, work_order_id: int) -> List[TechnicianAssignment]:
        return [TechnicianAssignment(**r) for r in query_rows(self.conn, SQL_TECHNICIANS, [work_order_id])]
