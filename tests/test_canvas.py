from io import BytesIO

import pytest
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Font

from logic.work_orders.canvas import ExcelCanvas
from logic.work_orders.errors import TemplateError


def _canvas():
    wb = Workbook()
    return ExcelCanvas(wb, wb.active)


def test_insertar_fila_mueve_celdas_combinaciones_y_alturas():
    canvas = _canvas()
    ws = canvas.ws
    ws["A5"] = "origen"
    ws["A5"].font = Font(bold=True)
    ws.row_dimensions[5].height = 20
    ws.row_dimensions[7].height = 33
    ws["A7"] = "abajo"
    ws.merge_cells("B7:E7")
    ws.merge_cells("A3:A4")

    new_row = canvas.insert_row_copying_format(5, 6, "ABCDE")

    assert new_row == 6
    assert ws["A8"].value == "abajo"
    assert "B8:E8" in canvas.merged_ranges()
    assert "B7:E7" not in canvas.merged_ranges()
    assert "A3:A4" in canvas.merged_ranges()
    assert ws.row_dimensions[8].height == 33
    assert ws.row_dimensions[6].height == 20
    assert ws["A6"].font.bold is True
    assert ws["A6"].value is None


def test_insertar_dentro_de_una_combinacion_la_extiende():
    canvas = _canvas()
    canvas.ws.merge_cells("A2:A4")
    canvas.insert_row_copying_format(2, 3, "A")
    assert canvas.merged_ranges() == ["A2:A5"]


def test_origen_debajo_del_punto_de_insercion():
    canvas = _canvas()
    canvas.ws["B9"].font = Font(italic=True)
    canvas.insert_row_copying_format(9, 4, "B")
    assert canvas.ws["B4"].font.italic is True
    assert canvas.ws["B10"].font.italic is True


def test_merge_range_idempotente_y_reemplaza_viejas():
    canvas = _canvas()
    canvas.merge_range("B8:E8")
    canvas.merge_range("B8:E8")
    assert canvas.merged_ranges() == ["B8:E8"]
    canvas.merge_range("B8:C8")
    assert canvas.merged_ranges() == ["B8:C8"]
    canvas.merge_range("B8")
    assert canvas.merged_ranges() == []


def test_escribir_en_celda_combinada_va_al_ancla():
    canvas = _canvas()
    canvas.merge_range("B8:E8")
    canvas.set_cell_value("D8", "texto")
    assert canvas.ws["B8"].value == "texto"
    assert canvas.get_cell_value("E8") == "texto"


def test_serialize_y_plantilla(template_path):
    canvas = ExcelCanvas.load_template(template_path, "Template Sheet")
    canvas.set_cell_value("E1", "WO-9")
    data = canvas.serialize()
    wb = load_workbook(BytesIO(data))
    assert wb["Template Sheet"]["E1"].value == "WO-9"


def test_cada_carga_es_independiente(template_path):
    a = ExcelCanvas.load_template(template_path)
    b = ExcelCanvas.load_template(template_path)
    a.set_cell_value("E1", "X")
    assert b.get_cell_value("E1") is None


def test_hoja_inexistente_usa_la_primera(template_path):
    canvas = ExcelCanvas.load_template(template_path, "No existe")
    assert canvas.ws.title == "Template Sheet"


def test_plantilla_faltante(tmp_path):
    with pytest.raises(TemplateError):
        ExcelCanvas.load_template(tmp_path / "nada.xlsx")


def test_plantilla_corrupta(tmp_path):
    bad = tmp_path / "bad.xlsx"
    bad.write_bytes(b"no es un zip")
    with pytest.raises(TemplateError):
        ExcelCanvas.load_template(bad)
