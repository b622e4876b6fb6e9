from openpyxl import Workbook

from logic.work_orders.canvas import ExcelCanvas
from logic.work_orders.layout import ACTIONS, FINDINGS, TECHNICIANS, LayoutContext
from logic.work_orders.materializer import RowMaterializer, action_schedule
from logic.work_orders.models import Action, ActionDate, Finding, TechnicianRow


def test_horario_con_varias_fechas():
    action = Action(
        id=1,
        description="x",
        start_time="07:00",
        action_dates=(
            ActionDate("2024-01-03", "10:00", "17:00"),
            ActionDate("2024-01-01", "09:00", "12:00"),
        ),
    )
    assert action_schedule(action) == ("09:00", "17:00", "01/01/2024-03/01/2024")


def test_horario_sin_fechas_usa_la_accion():
    action = Action(id=1, description="x", action_date="2024-02-05", start_time="08:00:00", end_time="10:00")
    assert action_schedule(action) == ("08:00", "10:00", "05/02/2024")


def test_horario_ultima_fecha_abierta():
    action = Action(
        id=1,
        description="x",
        end_time="18:00",
        action_dates=(
            ActionDate("2024-01-01", "09:00", "12:00"),
            ActionDate("2024-01-02", "09:30", None),
        ),
    )
    assert action_schedule(action) == ("09:00", "12:00", "01/01/2024-02/01/2024")


def test_horario_mismo_dia_y_sin_hora_de_inicio():
    action = Action(
        id=1,
        description="x",
        start_time="06:15",
        end_time="07:00",
        action_dates=(ActionDate("2024-05-10", None, None),),
    )
    assert action_schedule(action) == ("06:15", "07:00", "10/05/2024")


def _canvas():
    wb = Workbook()
    return ExcelCanvas(wb, wb.active)


def test_simbolos_y_tecnicos():
    canvas = _canvas()
    rows = RowMaterializer(canvas)
    actions = [Action(id=40, description="a"), Action(id=7, description="b")]
    placement, _ = LayoutContext().place(ACTIONS, len(actions))
    rows.render_actions(placement, actions)
    assert canvas.get_cell_value("A15") == 1
    assert canvas.get_cell_value("A16") == 2
    assert rows.symbols.get(7) == 2

    techs = [TechnicianRow(staff_id="S1", name="Ana", action_ids=[7, 40, 999])]
    placement, _ = LayoutContext().place(TECHNICIANS, 1)
    rows.render_technicians(placement, techs)
    assert canvas.get_cell_value("C26") == "1,2"
    assert canvas.get_cell_value("D26") == "S1"


def test_valor_requerido_vacio_no_aborta(caplog):
    canvas = _canvas()
    placement, _ = LayoutContext().place(TECHNICIANS, 1)
    RowMaterializer(canvas).render_technicians(placement, [TechnicianRow(staff_id=None, name="Ana")])
    assert canvas.get_cell_value("B26") == "Ana"
    assert canvas.get_cell_value("D26") in ("", None)
    assert "staff_id" in caplog.text


def test_excedente_inserta_filas_debajo():
    canvas = _canvas()
    canvas.set_cell_value("A12", "firma")
    findings = [Finding(id=i, description=f"h{i}") for i in range(1, 6)]
    placement, _ = LayoutContext().place(FINDINGS, len(findings))
    rows = RowMaterializer(canvas)
    assert rows.render_findings(placement, findings) == 2
    assert [canvas.get_cell_value(f"B{r}") for r in range(8, 13)] == ["h1", "h2", "h3", "h4", "h5"]
    assert canvas.get_cell_value("A14") == "firma"
    assert "B12:E12" in canvas.merged_ranges()
