"""
Ciclo de vida de las fechas de ejecucion de una accion.

Reglas:
  - no se abre una fecha nueva si la ultima no tiene hora de cierre
  - al abrir una fecha nueva, las anteriores quedan completadas
  - solo la fecha mas reciente puede marcarse completada
  - revertir una fecha completada requiere rol admin

Las funciones no hacen commit: usar WorkOrdersDb.session().
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from .db import execute, is_integrity_error, query_rows
from .errors import ConflictError, MalformedInputError, PermissionDeniedError, WorkOrderNotFoundError
from .formatting import as_date, is_blank
from .models import User
from .roles import has_role_at_least, require_role_at_least

logger = logging.getLogger(__name__)

_COLUMNS = "id, action_id, action_date, start_time, end_time, is_completed, created_at, updated_at"
_EDITABLE = ("action_date", "start_time", "end_time", "is_completed")


def _normalize(row: Dict[str, Any]) -> Dict[str, Any]:
    row["is_completed"] = bool(row.get("is_completed"))
    return row


def _day_key(value: Any) -> Any:
    d = as_date(value)
    return d if d is not None else str(value).strip()


def list_action_dates(conn, action_id: int) -> List[Dict[str, Any]]:
    """Fechas de la accion, la mas reciente primero."""
    rows = query_rows(conn, f"SELECT {_COLUMNS} FROM action_dates WHERE action_id = ?", [action_id])
    rows = [_normalize(r) for r in rows]
    rows.sort(key=lambda r: as_date(r["action_date"]) or date.min, reverse=True)
    return rows


def _latest(conn, action_id: int) -> Optional[Dict[str, Any]]:
    rows = list_action_dates(conn, action_id)
    return rows[0] if rows else None


def _by_id(conn, action_id: int, date_id: int) -> Optional[Dict[str, Any]]:
    rows = query_rows(
        conn, f"SELECT {_COLUMNS} FROM action_dates WHERE id = ? AND action_id = ?", [date_id, action_id]
    )
    return _normalize(rows[0]) if rows else None


def _by_day(conn, action_id: int, action_date: Any) -> Optional[Dict[str, Any]]:
    key = _day_key(action_date)
    for row in list_action_dates(conn, action_id):
        if _day_key(row["action_date"]) == key:
            return row
    return None


def add_action_date(
    conn,
    action_id: int,
    action_date: Any,
    start_time: Any,
    end_time: Any = None,
    is_completed: bool = False,
) -> Dict[str, Any]:
    if is_blank(action_date) or is_blank(start_time):
        raise MalformedInputError("Faltan campos requeridos: action_date, start_time")
    if is_blank(end_time):
        end_time = None

    prev = _latest(conn, action_id)
    if prev is not None and is_blank(prev["end_time"]):
        raise ConflictError(
            f"No se puede iniciar de nuevo: la fecha {prev['action_date']} no tiene hora de cierre"
        )
    if _by_day(conn, action_id, action_date) is not None:
        raise ConflictError("Ya existe una entrada para esta accion en esa fecha")

    try:
        execute(
            conn,
            "INSERT INTO action_dates (action_id, action_date, start_time, end_time, is_completed) "
            "VALUES (?, ?, ?, ?, ?)",
            [action_id, action_date, start_time, end_time, bool(is_completed)],
        )
    except Exception as e:
        if is_integrity_error(e):
            raise ConflictError("Ya existe una entrada para esta accion en esa fecha") from e
        raise

    inserted = _by_day(conn, action_id, action_date)
    execute(
        conn,
        "UPDATE action_dates SET is_completed = 1, updated_at = CURRENT_TIMESTAMP "
        "WHERE action_id = ? AND id <> ?",
        [action_id, inserted["id"]],
    )
    logger.info("Accion %s: nueva fecha %s", action_id, action_date)
    return inserted


def update_action_date(conn, user: User, action_id: int, date_id: int, **fields: Any) -> Dict[str, Any]:
    unknown = set(fields) - set(_EDITABLE)
    if unknown:
        raise MalformedInputError(f"Campos no editables: {', '.join(sorted(unknown))}")
    changes = {k: fields[k] for k in _EDITABLE if k in fields}
    if not changes:
        raise MalformedInputError("No hay campos para actualizar")

    existing = _by_id(conn, action_id, date_id)
    if existing is None:
        raise WorkOrderNotFoundError("Fecha de accion no encontrada")

    if changes.get("is_completed") is False and existing["is_completed"]:
        if not has_role_at_least(user, "admin"):
            raise PermissionDeniedError("Solo un admin puede revertir una fecha completada")

    if "action_date" in changes:
        other = _by_day(conn, action_id, changes["action_date"])
        if other is not None and other["id"] != date_id:
            raise ConflictError("Ya existe otra entrada para esta accion en esa fecha")

    if changes.get("is_completed") is True:
        latest = _latest(conn, action_id)
        if latest is None or latest["id"] != date_id:
            raise ConflictError("Solo la fecha mas reciente puede marcarse completada")

    sets = ", ".join(f"{k} = ?" for k in changes)
    execute(
        conn,
        f"UPDATE action_dates SET {sets}, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND action_id = ?",
        [*changes.values(), date_id, action_id],
    )
    return _by_id(conn, action_id, date_id)


def set_completion(conn, user: User, action_id: int, action_date: Any, is_completed: bool) -> Dict[str, Any]:
    if is_blank(action_date) or is_completed is None:
        raise MalformedInputError("Faltan campos requeridos: action_date, is_completed")
    if is_completed is False and not has_role_at_least(user, "admin"):
        raise PermissionDeniedError("Solo un admin puede revertir una fecha completada")

    target = _by_day(conn, action_id, action_date)
    if target is None:
        raise WorkOrderNotFoundError("Fecha de accion no encontrada para esa fecha")
    if is_completed:
        latest = _latest(conn, action_id)
        if latest is None or latest["id"] != target["id"]:
            raise ConflictError("Solo la fecha mas reciente puede marcarse completada")

    execute(
        conn,
        "UPDATE action_dates SET is_completed = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        [bool(is_completed), target["id"]],
    )
    return _by_id(conn, action_id, target["id"])


def delete_action_date(conn, user: User, action_id: int, date_id: int) -> None:
    require_role_at_least(user, "admin")
    deleted = execute(conn, "DELETE FROM action_dates WHERE id = ? AND action_id = ?", [date_id, action_id])
    if deleted == 0:
        raise WorkOrderNotFoundError("Fecha de accion no encontrada")
