# db.py
from __future__ import annotations

import logging
import socket
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Tuple

from .config import DATA_DIR, DbConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = DATA_DIR / "schema.sql"

pyodbc = None
_pyodbc_error: str | None = None
try:
    import pyodbc as _pyodbc  # type: ignore
    pyodbc = _pyodbc
except Exception as e:
    _pyodbc_error = str(e)


# ----------- helpers DB-API (pyodbc y sqlite3 usan parametros '?') -----------
def _db_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def query_rows(conn, sql: str, params: Iterable[Any] = ()) -> List[Dict[str, Any]]:
    cur = conn.cursor()
    try:
        cur.execute(sql, tuple(_db_value(p) for p in params))
        if cur.description is None:
            return []
        cols = [d[0] for d in cur.description]
        return [dict(zip(cols, row)) for row in cur.fetchall()]
    finally:
        cur.close()


def execute(conn, sql: str, params: Iterable[Any] = ()) -> int:
    """Ejecuta INSERT/UPDATE/DELETE y devuelve filas afectadas. No hace commit."""
    cur = conn.cursor()
    try:
        cur.execute(sql, tuple(_db_value(p) for p in params))
        return cur.rowcount
    finally:
        cur.close()


def is_integrity_error(exc: BaseException) -> bool:
    # cada driver define su propia IntegrityError
    return type(exc).__name__ == "IntegrityError"


def init_schema(conn, path: Path | str = SCHEMA_PATH) -> None:
    """Crea las tablas en una base SQLite (archivo local o :memory:)."""
    script = Path(path).read_text(encoding="utf-8")
    conn.executescript(script)


class WorkOrdersDb:
    def __init__(self, cfg: DbConfig):
        self.cfg = cfg

    @staticmethod
    def _import_pyodbc():
        global pyodbc, _pyodbc_error
        if pyodbc is not None:
            return pyodbc
        try:
            import pyodbc as _pyodbc  # type: ignore
            pyodbc = _pyodbc
            _pyodbc_error = None
        except Exception as e:
            _pyodbc_error = str(e)
        return pyodbc

    @staticmethod
    def pyodbc_status() -> tuple[bool, str]:
        if pyodbc is None:
            return False, (_pyodbc_error or "pyodbc no esta instalado.")
        return True, f"pyodbc {getattr(pyodbc, 'version', '')}".strip()

    @staticmethod
    def odbc_drivers() -> list[str]:
        if WorkOrdersDb._import_pyodbc() is None:
            return []
        return list(pyodbc.drivers())

    def _conn_str(self) -> str:
        c = self.cfg
        base = f"DRIVER={{{c.driver}}};SERVER={c.server};DATABASE={c.database};"
        tls = "Encrypt=yes;" if c.encrypt else "Encrypt=no;"
        if c.trust_server_certificate:
            tls += "TrustServerCertificate=yes;"

        if c.auth == "windows":
            return base + "Trusted_Connection=yes;" + tls
        if c.auth == "credman":
            user, password = self._read_credman()
            return base + f"UID={user};PWD={password};" + tls
        if not c.user or not c.password:
            raise ValueError("auth='sql' requiere user y password.")
        return base + f"UID={c.user};PWD={c.password};" + tls

    def _read_credman(self) -> Tuple[str, str]:
        target = self.cfg.cred_target or "WorkOrdersDB"
        user_hint = self.cfg.cred_user or None
        try:
            import keyring  # type: ignore
        except Exception as e:
            raise ValueError(f"auth='credman' requiere keyring: {e}") from e
        if user_hint:
            pwd = keyring.get_password(target, user_hint)
            if pwd:
                return user_hint, pwd
        cred = keyring.get_credential(target, user_hint)
        if cred and cred.username and cred.password:
            return cred.username, cred.password
        raise ValueError(f"No se pudo leer la credencial {target} del almacen del sistema.")

    # --------- Diagnostico ---------
    def tcp_port_open(self, port: int = 1433, timeout_s: float = 1.5) -> Tuple[bool, str]:
        try:
            with socket.create_connection((self.cfg.server, port), timeout=timeout_s):
                return True, f"TCP {self.cfg.server}:{port} OK"
        except OSError as e:
            return False, f"TCP {self.cfg.server}:{port} FAIL -> {e}"

    # --------- Conexion ---------
    def connect(self):
        if self.cfg.engine == "sqlite":
            conn = sqlite3.connect(self.cfg.sqlite_path)
            conn.execute("PRAGMA foreign_keys = ON")
            return conn
        if self._import_pyodbc() is None or pyodbc is None:
            raise RuntimeError(f"pyodbc no esta disponible: {_pyodbc_error or 'instale pyodbc'}")
        conn = pyodbc.connect(self._conn_str(), timeout=10)
        conn.timeout = 120
        return conn

    @contextmanager
    def session(self) -> Iterator[Any]:
        """Conexion con commit al salir y rollback si algo falla."""
        conn = self.connect()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            logger.exception("Rollback en %s", self.cfg.database if self.cfg.engine != "sqlite" else self.cfg.sqlite_path)
            raise
        finally:
            conn.close()
