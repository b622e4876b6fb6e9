"""
Formato de celdas para el reporte de orden de trabajo.

Los drivers devuelven fechas y horas en tipos distintos (SQL Server via pyodbc
entrega date/time/timedelta, SQLite entrega texto ISO), asi que todo pasa
por aqui antes de llegar a la hoja.
"""
from __future__ import annotations

import math
import re
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

__all__ = [
    "as_date",
    "format_date",
    "format_time",
    "format_quantity",
    "is_blank",
]

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})")


def is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def as_date(value: Any) -> Optional[date]:
    """Convierte a date (acepta date, datetime y 'YYYY-MM-DD[...]'). None si no se puede."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if len(s) < 10:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def format_date(value: Any) -> str:
    """DD/MM/YYYY; '' si viene vacio y el texto tal cual si no es una fecha."""
    d = as_date(value)
    if d is not None:
        return d.strftime("%d/%m/%Y")
    return "" if is_blank(value) else str(value).strip()


def format_time(value: Any) -> str:
    """HH:MM desde time, datetime, timedelta o 'HH:MM[:SS]'."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%H:%M")
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if isinstance(value, timedelta):
        minutes = int(value.total_seconds()) // 60
        return f"{(minutes // 60) % 24:02d}:{minutes % 60:02d}"
    m = _TIME_RE.match(str(value))
    if m:
        return f"{int(m.group(1)):02d}:{m.group(2)}"
    return str(value).strip()


def _plain_number(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation:
            return value.strip()
    if isinstance(value, Decimal):
        # NaN/sNaN/Infinity no se convierten a float
        if not value.is_finite():
            return str(value)
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return str(value)
        return int(value) if value.is_integer() else value
    return value


def _quantity_text(value: Any) -> str:
    # con unidad se respeta el texto del driver ("2.50" sigue siendo "2.50")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def format_quantity(quantity: Any, unit: Any = None) -> Any:
    """'{cantidad} {unidad}' si hay unidad; si no, la cantidad sola (numerica)."""
    if is_blank(quantity):
        return ""
    if not is_blank(unit):
        return f"{_quantity_text(quantity)} {str(unit).strip()}"
    return _plain_number(quantity)
