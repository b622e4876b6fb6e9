from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple


# ---------------------------- SNAPSHOT (solo lectura) ---------------------------- #


@dataclass(frozen=True)
class WorkOrderHeader:
    id: int
    work_order_no: Any
    work_order_date: Any = None
    equipment_number: Any = None
    km_hrs: Any = None
    work_type: Any = None
    requested_by: Any = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    status: Optional[str] = None


@dataclass(frozen=True)
class ActionDate:
    action_date: Any
    start_time: Any = None
    end_time: Any = None  # None = jornada sin cerrar
    is_completed: bool = False
    id: Optional[int] = None


@dataclass(frozen=True)
class SparePart:
    id: Optional[int]
    part_name: Optional[str]
    part_number: Any = None
    quantity: Any = None
    unit: Optional[str] = None


@dataclass(frozen=True)
class Action:
    id: Optional[int]
    description: Optional[str]
    action_date: Any = None
    start_time: Any = None
    end_time: Any = None
    action_dates: Tuple[ActionDate, ...] = ()
    spare_parts: Tuple[SparePart, ...] = ()


@dataclass(frozen=True)
class Finding:
    id: Optional[int]
    description: Optional[str]
    actions: Tuple[Action, ...] = ()


@dataclass(frozen=True)
class TechnicianAssignment:
    name: Optional[str]
    staff_id: Any
    action_id: Optional[int]


# ---------------------------- PROYECCION ---------------------------- #


@dataclass
class TechnicianRow:
    """Tecnico (staff_id, nombre) con las acciones en que participo, en orden de aparicion."""

    staff_id: Any
    name: str
    action_ids: List[int] = field(default_factory=list)


@dataclass
class ProjectedReport:
    findings: List[Finding] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    spare_parts: List[SparePart] = field(default_factory=list)
    technicians: List[TechnicianRow] = field(default_factory=list)

    def counts(self) -> dict:
        return {
            "findings": len(self.findings),
            "actions": len(self.actions),
            "spare_parts": len(self.spare_parts),
            "technicians": len(self.technicians),
        }


@dataclass(frozen=True)
class User:
    user_id: int
    role: str  # user | admin | superadmin
    username: str = ""
