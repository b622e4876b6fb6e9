from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtWidgets import (
    QFileDialog,
    QFrame,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPlainTextEdit,
    QPushButton,
    QVBoxLayout,
)

from logic.work_orders.composer import (
    WorkOrderReportComposer,
    build_report,
    parse_work_order_id,
    report_filename,
)
from logic.work_orders.config import load_config
from logic.work_orders.db import WorkOrdersDb
from logic.work_orders.errors import (
    MalformedInputError,
    PermissionDeniedError,
    WorkOrderError,
    WorkOrderNotFoundError,
)
from logic.work_orders.models import User
from logic.work_orders.repository import WorkOrderRepository

logger = logging.getLogger(__name__)


class WorkOrderReportPage(QFrame):
    def __init__(self, parent=None, user: User | None = None):
        super().__init__(parent)
        self.user = user
        self.db_cfg, self.report_cfg = load_config()

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        title = QLabel("REPORTE DE ORDEN DE TRABAJO")
        title.setStyleSheet("font-size:18px;font-weight:800;color:#0f172a;")
        layout.addWidget(title)

        row = QHBoxLayout()
        row.setSpacing(10)
        row.addWidget(QLabel("ID ORDEN:"))
        self.txt_id = QLineEdit()
        self.txt_id.setPlaceholderText("Ej: 125")
        self.txt_id.setMaximumWidth(160)
        row.addWidget(self.txt_id)
        self.btn_generate = QPushButton("GENERAR REPORTE")
        self.btn_diag = QPushButton("DIAGNOSTICO BD")
        row.addWidget(self.btn_generate)
        row.addWidget(self.btn_diag)
        row.addStretch(1)
        layout.addLayout(row)

        self.lbl_template = QLabel(f"PLANTILLA: {self.report_cfg.template_path}")
        self.lbl_template.setStyleSheet("color:#334155;")
        layout.addWidget(self.lbl_template)

        log_box = QGroupBox("REGISTRO")
        log_layout = QVBoxLayout(log_box)
        log_layout.setContentsMargins(12, 10, 12, 12)
        self.txt_log = QPlainTextEdit()
        self.txt_log.setReadOnly(True)
        self.txt_log.setMinimumHeight(180)
        log_layout.addWidget(self.txt_log)
        layout.addWidget(log_box)
        layout.addStretch(1)

        self.btn_generate.clicked.connect(self._generate)
        self.txt_id.returnPressed.connect(self._generate)
        self.btn_diag.clicked.connect(self._run_diagnostic)

    def _append_log(self, text: str) -> None:
        self.txt_log.appendPlainText(text)

    def _generate(self) -> None:
        raw = self.txt_id.text()
        try:
            wid = parse_work_order_id(raw)
            composer = WorkOrderReportComposer.from_config(self.report_cfg)
            with WorkOrdersDb(self.db_cfg).session() as conn:
                header, data = build_report(wid, WorkOrderRepository(conn), composer=composer, user=self.user)
        except MalformedInputError as e:
            QMessageBox.warning(self, "REPORTE", str(e))
            return
        except WorkOrderNotFoundError as e:
            self._append_log(f"NO ENCONTRADA: {e}")
            QMessageBox.warning(self, "REPORTE", str(e))
            return
        except PermissionDeniedError as e:
            QMessageBox.warning(self, "REPORTE", str(e))
            return
        except WorkOrderError as e:
            self._append_log(f"ERROR: {e}")
            QMessageBox.warning(self, "REPORTE", f"No se pudo generar el reporte: {e}")
            return
        except Exception as e:
            logger.exception("Error inesperado generando reporte")
            self._append_log(f"ERROR: {e}")
            QMessageBox.warning(self, "REPORTE", f"Error inesperado: {e}")
            return

        default_name = report_filename(header.work_order_no)
        path, _ = QFileDialog.getSaveFileName(self, "Guardar reporte", str(Path.home() / default_name), "Excel (*.xlsx)")
        if not path:
            self._append_log("Guardado cancelado.")
            return
        try:
            Path(path).write_bytes(data)
        except OSError as e:
            self._append_log(f"ERROR guardando {path}: {e}")
            QMessageBox.warning(self, "REPORTE", f"No se pudo guardar el archivo: {e}")
            return
        self._append_log(f"OK -> {path} ({len(data)} bytes)")

    def _run_diagnostic(self) -> None:
        db = WorkOrdersDb(self.db_cfg)
        self._append_log("=== DIAGNOSTICO BD ===")
        self._append_log(f"MOTOR: {self.db_cfg.engine.upper()}")
        if self.db_cfg.engine == "sqlite":
            exists = Path(self.db_cfg.sqlite_path).exists()
            self._append_log(f"ARCHIVO: {self.db_cfg.sqlite_path} -> {'OK' if exists else 'NO EXISTE'}")
        else:
            ok_py, msg_py = db.pyodbc_status()
            self._append_log(f"PYODBC: {'OK' if ok_py else 'FAIL'} -> {msg_py}")
            ok_tcp, msg_tcp = db.tcp_port_open(1433)
            self._append_log(f"TCP 1433: {'OK' if ok_tcp else 'FAIL'} -> {msg_tcp}")
            drivers = db.odbc_drivers()
            self._append_log(f"DRIVERS ODBC: {', '.join(drivers) if drivers else 'No detectados'}")
        QMessageBox.information(self, "BD", "Diagnostico finalizado. Revisa el registro.")
