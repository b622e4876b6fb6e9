from PySide6.QtWidgets import (
    QMainWindow, QWidget, QHBoxLayout, QVBoxLayout,
    QFrame, QListWidget, QListWidgetItem, QStackedWidget, QLabel
)
from PySide6.QtCore import Qt

from gui.pages.work_order_report_page import WorkOrderReportPage
from logic.work_orders.models import User


class WorkOrdersApp(QMainWindow):
    def __init__(self, user: User | None = None):
        super().__init__()
        self.user = user
        self.setWindowTitle("ORDENES DE TRABAJO")
        self.resize(1100, 720)

        self._apply_base_style()
        self._build_ui()

    # ------------------------------------------------------------------
    #  ESTILO GLOBAL
    # ------------------------------------------------------------------
    def _apply_base_style(self):
        self.setStyleSheet("""
QMainWindow { background: #f3f6fb; }
QFrame { background: transparent; }
QLineEdit {
    background: #ffffff;
    color: #0f172a;
    border: 1px solid #d8deeb;
    border-radius: 8px;
    padding: 6px 8px;
}
QLabel { color: #0f172a; }
#SideBar { background: #0c1220; border: none; }
#SideBar QListWidget { background: transparent; border: none; outline: 0; }
#SideBar QListWidget::item {
    height: 38px;
    padding: 8px 12px;
    border-radius: 8px;
    font-weight: 700;
    color: #e5edff;
}
#SideBar QListWidget::item:selected { background: rgba(76,201,255,0.32); color: #ffffff; }
#TopBar {
    background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 #0f62fe, stop:1 #22d3ee);
    border-radius: 14px;
}
#TopTitle { color: #ffffff; font-size: 22px; font-weight: 800; }
#TopUser { color: #0f172a; background: #ffffff; padding: 6px 10px; border-radius: 10px; font-weight: 700; }
QPushButton {
    background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 #0f62fe, stop:1 #22d3ee);
    color: #ffffff;
    border: none;
    border-radius: 10px;
    padding: 10px 16px;
    font-weight: 700;
}
QPushButton:pressed { background: #0d4fcc; }
""")

    # ------------------------------------------------------------------
    #  CONSTRUCCION DE LA INTERFAZ
    # ------------------------------------------------------------------
    def _build_ui(self):
        central = QWidget()
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        side = QFrame()
        side.setObjectName("SideBar")
        side.setFixedWidth(220)
        side_layout = QVBoxLayout(side)
        side_layout.setContentsMargins(18, 18, 18, 18)

        self.nav = QListWidget()
        self.nav.setFocusPolicy(Qt.NoFocus)
        self.stack = QStackedWidget()

        def add_nav_item(text: str, page: QWidget):
            self.nav.addItem(QListWidgetItem(text))
            self.stack.addWidget(page)

        add_nav_item("REPORTE OT", WorkOrderReportPage(self, user=self.user))
        side_layout.addWidget(self.nav, stretch=1)
        root.addWidget(side)

        main = QFrame()
        main_layout = QVBoxLayout(main)
        main_layout.setContentsMargins(12, 12, 12, 12)
        main_layout.setSpacing(12)
        main_layout.addWidget(self._create_top_bar())
        main_layout.addWidget(self.stack, 1)
        root.addWidget(main, 1)

        self.nav.currentRowChanged.connect(self.stack.setCurrentIndex)
        self.nav.setCurrentRow(0)

    def _create_top_bar(self) -> QWidget:
        top = QFrame()
        top.setObjectName("TopBar")
        top.setFixedHeight(80)
        layout = QHBoxLayout(top)
        layout.setContentsMargins(20, 16, 20, 16)

        title = QLabel("MANTENIMIENTO")
        title.setObjectName("TopTitle")
        layout.addWidget(title)
        layout.addStretch(1)

        who = self.user.username if self.user and self.user.username else "SIN SESION"
        chip = QLabel(f"{who}".upper())
        chip.setObjectName("TopUser")
        chip.setAlignment(Qt.AlignCenter)
        chip.setMinimumWidth(150)
        layout.addWidget(chip, alignment=Qt.AlignVCenter)
        return top
