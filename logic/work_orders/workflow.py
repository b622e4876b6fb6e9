from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .db import execute, query_rows
from .errors import ConflictError, PermissionDeniedError, WorkOrderNotFoundError
from .models import User
from .roles import require_role_at_least

logger = logging.getLogger(__name__)


def resubmit_work_order(conn, user: User, work_order_id: int) -> Dict[str, Any]:
    """Vuelve a 'pending' una orden rechazada. Solo quien la solicito puede reenviarla."""
    require_role_at_least(user, "user")
    rows = query_rows(conn, "SELECT id, status, requested_by_id FROM work_orders WHERE id = ?", [work_order_id])
    if not rows:
        raise WorkOrderNotFoundError(f"Orden de trabajo no encontrada: {work_order_id}")
    wo = rows[0]
    if wo["status"] != "rejected":
        raise ConflictError("Solo se pueden reenviar ordenes rechazadas")
    if wo["requested_by_id"] != user.user_id:
        raise PermissionDeniedError("Solo el creador de la orden puede reenviarla")

    updated = execute(
        conn,
        "UPDATE work_orders SET status = 'pending', rejection_reason = NULL, approved_by = NULL, "
        "approved_at = NULL, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND status = 'rejected'",
        [work_order_id],
    )
    if updated == 0:
        raise ConflictError("No se pudo reenviar la orden de trabajo")
    logger.info("Orden %s reenviada por usuario %s", work_order_id, user.user_id)
    return query_rows(conn, "SELECT * FROM work_orders WHERE id = ?", [work_order_id])[0]


def cleanup_expired_notifications(conn, now: Optional[datetime] = None) -> int:
    """Borra notificaciones vencidas y devuelve cuantas se eliminaron."""
    cutoff = now or datetime.now()
    deleted = execute(conn, "DELETE FROM notifications WHERE expires_at < ?", [cutoff])
    deleted = max(deleted, 0)
    logger.info("Notificaciones vencidas eliminadas: %d", deleted)
    return deleted
