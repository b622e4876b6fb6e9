import sqlite3

import pytest

from logic.work_orders.db import execute, init_schema
from logic.work_orders.template import save_template


@pytest.fixture
def template_path(tmp_path):
    return save_template(tmp_path / "template_file.xlsx")


@pytest.fixture
def conn():
    c = sqlite3.connect(":memory:")
    c.execute("PRAGMA foreign_keys = ON")
    init_schema(c)
    yield c
    c.close()


def seed_work_order(conn, findings, *, wo_id=1, work_order_no="WO-0001", status="pending", requested_by_id=None):
    """
    Inserta una orden con su arbol. `findings` es una lista de dicts:
    {"description": ..., "actions": [{"description", "dates": [...], "parts": [...], "techs": [...]}]}
    Devuelve los ids de accion en orden de insercion.
    """
    execute(
        conn,
        "INSERT INTO work_orders (id, work_order_no, work_order_date, equipment_number, km_hrs, work_type, "
        "requested_by, requested_by_id, status) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [wo_id, work_order_no, "2024-03-05", "EQ-77", None, "Correctivo", "Ana Ruiz", requested_by_id, status],
    )
    action_ids = []
    for f in findings:
        execute(conn, "INSERT INTO findings (work_order_id, description) VALUES (?, ?)", [wo_id, f["description"]])
        finding_id = conn.execute("SELECT max(id) FROM findings").fetchone()[0]
        for a in f.get("actions", []):
            execute(
                conn,
                "INSERT INTO actions (finding_id, description, action_date, start_time, end_time) VALUES (?, ?, ?, ?, ?)",
                [finding_id, a["description"], a.get("action_date"), a.get("start_time"), a.get("end_time")],
            )
            action_id = conn.execute("SELECT max(id) FROM actions").fetchone()[0]
            action_ids.append(action_id)
            for d in a.get("dates", []):
                execute(
                    conn,
                    "INSERT INTO action_dates (action_id, action_date, start_time, end_time, is_completed) "
                    "VALUES (?, ?, ?, ?, ?)",
                    [action_id, d[0], d[1], d[2], 1],
                )
            for p in a.get("parts", []):
                execute(
                    conn,
                    "INSERT INTO spare_parts (action_id, part_name, part_number, quantity, unit) VALUES (?, ?, ?, ?, ?)",
                    [action_id, *p],
                )
            for name, staff_id in a.get("techs", []):
                execute(
                    conn,
                    "INSERT INTO action_technicians (action_id, name, staff_id) VALUES (?, ?, ?)",
                    [action_id, name, staff_id],
                )
    return action_ids


@pytest.fixture
def seed():
    return seed_work_order
