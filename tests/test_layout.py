import pytest

from logic.work_orders.layout import (
    ACTIONS,
    FINDINGS,
    SPARE_PARTS,
    TECHNICIANS,
    LayoutContext,
    plan_sections,
)


def test_sin_excedente_usa_filas_base():
    plan = plan_sections({"findings": 2, "actions": 3, "spare_parts": 1, "technicians": 0})
    assert [p.start_row for p in plan.values()] == [8, 15, 20, 26]
    assert all(p.overflow == 0 for p in plan.values())
    assert plan["technicians"].rendered is False


def test_excedente_acumulado_desplaza_secciones_siguientes():
    plan = plan_sections({"findings": 5, "actions": 5, "spare_parts": 0, "technicians": 2})
    assert plan["findings"].overflow == 2
    assert plan["actions"].start_row == 17
    assert plan["spare_parts"].start_row == 24
    assert plan["spare_parts"].overflow == 0
    assert plan["technicians"].start_row == 30


def test_desplazamiento_es_el_excedente_no_el_conteo():
    # repuestos por debajo de la capacidad no mueven a tecnicos
    plan = plan_sections({"findings": 4, "actions": 1, "spare_parts": 3, "technicians": 1})
    assert plan["actions"].start_row == 16
    assert plan["spare_parts"].start_row == 21
    assert plan["technicians"].start_row == 27


def test_excedente_de_repuestos():
    plan = plan_sections({"findings": 0, "actions": 0, "spare_parts": 7, "technicians": 1})
    assert plan["spare_parts"].overflow == 3
    assert plan["technicians"].start_row == 29


def test_place_no_modifica_el_contexto():
    ctx = LayoutContext(cumulative_overflow=1)
    placement, nxt = ctx.place(ACTIONS, 6)
    assert placement.start_row == 16
    assert placement.end_row_if_no_overflow == 18
    assert placement.in_template == 3
    assert ctx.cumulative_overflow == 1
    assert nxt.cumulative_overflow == 4


def test_conteo_negativo():
    with pytest.raises(ValueError):
        LayoutContext().place(FINDINGS, -1)


def test_orden_fijo_de_secciones():
    plan = plan_sections({})
    assert list(plan) == [FINDINGS.key, ACTIONS.key, SPARE_PARTS.key, TECHNICIANS.key]
    assert all(p.count == 0 for p in plan.values())
