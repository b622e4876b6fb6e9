from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from .formatting import is_blank
from .models import Action, Finding, ProjectedReport, SparePart, TechnicianAssignment, TechnicianRow


def _keep_finding(finding: Finding) -> bool:
    return finding is not None and not is_blank(finding.description)


def _keep_action(action: Action) -> bool:
    return action is not None and action.id is not None and not is_blank(action.description)


def _keep_spare_part(part: SparePart) -> bool:
    return part is not None and part.id is not None and not is_blank(part.part_name)


def _group_technicians(
    actions: List[Action], assignments: Iterable[TechnicianAssignment]
) -> List[TechnicianRow]:
    """
    Agrupa asignaciones por (staff_id, nombre sin espacios). El orden de salida es
    el de primera aparicion recorriendo las acciones en su orden canonico.
    """
    by_action: Dict[int, List[TechnicianAssignment]] = {}
    for asg in assignments or []:
        if asg is None or asg.action_id is None or is_blank(asg.name):
            continue
        by_action.setdefault(asg.action_id, []).append(asg)

    rows: Dict[Tuple[Any, str], TechnicianRow] = {}
    for action in actions:
        for asg in by_action.get(action.id, []):
            name = str(asg.name).strip()
            key = (asg.staff_id, name)
            row = rows.get(key)
            if row is None:
                row = rows[key] = TechnicianRow(staff_id=asg.staff_id, name=name)
            if action.id not in row.action_ids:
                row.action_ids.append(action.id)
    return list(rows.values())


def project(
    findings: Iterable[Finding], assignments: Iterable[TechnicianAssignment] = ()
) -> ProjectedReport:
    """Aplana hallazgo -> accion -> repuestos/tecnicos en cuatro listas filtradas."""
    kept_findings = [f for f in findings or [] if _keep_finding(f)]

    actions: List[Action] = []
    for finding in kept_findings:
        actions.extend(a for a in finding.actions if _keep_action(a))

    spare_parts: List[SparePart] = []
    for action in actions:
        spare_parts.extend(p for p in action.spare_parts if _keep_spare_part(p))

    return ProjectedReport(
        findings=kept_findings,
        actions=actions,
        spare_parts=spare_parts,
        technicians=_group_technicians(actions, assignments),
    )
