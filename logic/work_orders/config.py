from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Literal, Optional, Tuple

ROOT_DIR = Path(__file__).resolve().parents[2]
DATA_DIR = ROOT_DIR / "data" / "work_orders"
CONFIG_PATH = DATA_DIR / "config.json"
DEFAULT_TEMPLATE = DATA_DIR / "template_file.xlsx"
DEFAULT_SHEET = "Template Sheet"


@dataclass(frozen=True)
class DbConfig:
    engine: Literal["sqlserver", "sqlite"] = "sqlite"
    server: str = "localhost"
    database: str = "WORK_ORDERS"
    auth: Literal["windows", "sql", "credman"] = "windows"
    user: Optional[str] = None
    password: Optional[str] = None
    cred_target: Optional[str] = "WorkOrdersDB"
    cred_user: Optional[str] = None
    driver: str = "ODBC Driver 18 for SQL Server"
    encrypt: bool = False
    trust_server_certificate: bool = True
    sqlite_path: str = str(DATA_DIR / "work_orders.db")


@dataclass(frozen=True)
class ReportConfig:
    template_path: str = str(DEFAULT_TEMPLATE)
    sheet_name: str = DEFAULT_SHEET
    log_level: str = "INFO"


def _pick(cls, raw: Any) -> Dict[str, Any]:
    # ignora claves desconocidas del json
    if not isinstance(raw, dict):
        return {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in raw.items() if k in names}


def load_config(path: Path | str | None = None) -> Tuple[DbConfig, ReportConfig]:
    """
    Lee data/work_orders/config.json (o la ruta dada) con bloques "db" y "report".
    Si el archivo no existe se usan los valores por defecto.
    """
    p = Path(path) if path else CONFIG_PATH
    if not p.exists():
        return DbConfig(), ReportConfig()
    with p.open(encoding="utf-8") as f:
        raw = json.load(f)
    return DbConfig(**_pick(DbConfig, raw.get("db"))), ReportConfig(**_pick(ReportConfig, raw.get("report")))
