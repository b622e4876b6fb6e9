from logic.work_orders.models import Action, Finding, SparePart, TechnicianAssignment
from logic.work_orders.projector import project


def _finding(fid, desc, *actions):
    return Finding(id=fid, description=desc, actions=tuple(actions))


def test_filtra_elementos_invalidos():
    findings = [
        _finding(
            1,
            "Fuga de aceite",
            Action(id=10, description="Cambio de sello", spare_parts=(
                SparePart(id=100, part_name="Sello"),
                SparePart(id=101, part_name="  "),
                SparePart(id=None, part_name="Sin id"),
            )),
            Action(id=None, description="Sin id"),
            Action(id=11, description=""),
        ),
        _finding(2, "   ", Action(id=12, description="Accion de hallazgo vacio")),
        _finding(3, None),
    ]
    res = project(findings)
    assert [f.id for f in res.findings] == [1]
    assert [a.id for a in res.actions] == [10]
    assert [p.id for p in res.spare_parts] == [100]
    assert res.counts() == {"findings": 1, "actions": 1, "spare_parts": 1, "technicians": 0}


def test_orden_canonico_de_acciones():
    findings = [
        _finding(1, "A", Action(id=3, description="a3"), Action(id=1, description="a1")),
        _finding(2, "B", Action(id=2, description="b2")),
    ]
    assert [a.id for a in project(findings).actions] == [3, 1, 2]


def test_tecnicos_agrupados_por_staff_y_nombre():
    findings = [_finding(1, "F", Action(id=1, description="x"), Action(id=2, description="y"))]
    assignments = [
        TechnicianAssignment(name="Luis ", staff_id="S2", action_id=2),
        TechnicianAssignment(name="Marta", staff_id="S1", action_id=1),
        TechnicianAssignment(name="Luis", staff_id="S2", action_id=1),
        TechnicianAssignment(name="Luis", staff_id="S2", action_id=1),
        TechnicianAssignment(name="Otro", staff_id="S9", action_id=99),
        TechnicianAssignment(name="", staff_id="S3", action_id=1),
    ]
    techs = project(findings, assignments).technicians
    assert [(t.staff_id, t.name) for t in techs] == [("S1", "Marta"), ("S2", "Luis")]
    assert techs[1].action_ids == [1, 2]


def test_idempotente():
    findings = [_finding(1, "F", Action(id=1, description="x", spare_parts=(SparePart(id=5, part_name="p"),)))]
    assignments = [TechnicianAssignment(name="Ana", staff_id="1", action_id=1)]
    assert project(findings, assignments) == project(findings, assignments)


def test_entrada_vacia():
    assert project([]).counts() == {"findings": 0, "actions": 0, "spare_parts": 0, "technicians": 0}
