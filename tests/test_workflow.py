from datetime import datetime

import pytest

from logic.work_orders.db import execute
from logic.work_orders.errors import ConflictError, PermissionDeniedError, WorkOrderNotFoundError
from logic.work_orders.models import User
from logic.work_orders.workflow import cleanup_expired_notifications, resubmit_work_order

OWNER = User(user_id=5, role="user")


@pytest.fixture
def rejected(conn, seed):
    execute(conn, "INSERT INTO users (id, username) VALUES (?, ?)", [5, "owner"])
    seed(conn, [], status="rejected", requested_by_id=5)
    execute(conn, "UPDATE work_orders SET rejection_reason = ?, approved_by = ? WHERE id = 1", ["faltan fotos", 9])
    return 1


def test_reenviar_orden_rechazada(conn, rejected):
    row = resubmit_work_order(conn, OWNER, rejected)
    assert row["status"] == "pending"
    assert row["rejection_reason"] is None
    assert row["approved_by"] is None


def test_solo_el_solicitante_reenvia(conn, rejected):
    with pytest.raises(PermissionDeniedError):
        resubmit_work_order(conn, User(user_id=6, role="superadmin"), rejected)


def test_solo_rechazadas(conn, rejected):
    resubmit_work_order(conn, OWNER, rejected)
    with pytest.raises(ConflictError):
        resubmit_work_order(conn, OWNER, rejected)


def test_reenviar_inexistente(conn):
    with pytest.raises(WorkOrderNotFoundError):
        resubmit_work_order(conn, OWNER, 77)


def test_limpieza_de_notificaciones(conn):
    for expires in ("2024-01-01 00:00:00", "2024-06-01 12:00:00", "2025-01-01 00:00:00"):
        execute(conn, "INSERT INTO notifications (message, expires_at) VALUES (?, ?)", ["aviso", expires])
    assert cleanup_expired_notifications(conn, now=datetime(2024, 7, 1)) == 2
    assert conn.execute("SELECT count(*) FROM notifications").fetchone()[0] == 1
    assert cleanup_expired_notifications(conn, now=datetime(2024, 7, 1)) == 0
