"""
Ordenes de trabajo de mantenimiento.

Genera el reporte Excel de una orden (hallazgos, acciones, repuestos y
tecnicos) sobre la plantilla de data/work_orders/. Esta capa de logica es
independiente de la UI.
"""

from .composer import WorkOrderReportComposer, compose_report  # noqa: F401
from .repository import WorkOrderRepository  # noqa: F401
