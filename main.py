# main.py - Arranque de la app de ordenes de trabajo.
# Configura logging segun data/work_orders/config.json y, si existe,
# aplica resources/app.qss sobre el estilo base de la ventana.

import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from PySide6.QtCore import QFile, QTextStream

from gui.main_window import WorkOrdersApp
from logic.work_orders.config import load_config


def _read_qss(path: Path) -> str:
    f = QFile(str(path))
    if f.open(QFile.ReadOnly | QFile.Text):
        css = QTextStream(f).readAll()
        f.close()
        return css
    return ""


def load_styles(app: QApplication) -> None:
    qss = Path(__file__).resolve().parent / "resources" / "app.qss"
    if qss.exists():
        app.setStyleSheet(_read_qss(qss))


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )


# -----------------------------------------------
# Punto de entrada
# -----------------------------------------------
if __name__ == "__main__":
    _, report_cfg = load_config()
    setup_logging(report_cfg.log_level)

    app = QApplication(sys.argv)
    load_styles(app)

    win = WorkOrdersApp()
    win.show()

    sys.exit(app.exec())
