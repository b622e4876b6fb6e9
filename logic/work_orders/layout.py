"""
Planificador de secciones de la plantilla de orden de trabajo.

La plantilla trae un numero fijo de filas con formato por seccion. Cuando una
seccion trae mas elementos que su capacidad se insertan filas, y todas las
secciones de abajo bajan exactamente el excedente acumulado (nunca el conteo
completo de las secciones anteriores).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

COLUMNS: Tuple[str, ...] = ("A", "B", "C", "D", "E")


@dataclass(frozen=True)
class SectionSpec:
    key: str
    base_row: int  # primera fila de datos en la plantilla vacia
    capacity: int  # filas con formato disponibles sin insertar
    columns: Tuple[str, ...] = COLUMNS
    merge: Optional[Tuple[str, str]] = None  # columnas de texto combinadas por fila


FINDINGS = SectionSpec("findings", base_row=8, capacity=3, merge=("B", "E"))
ACTIONS = SectionSpec("actions", base_row=15, capacity=3)
SPARE_PARTS = SectionSpec("spare_parts", base_row=20, capacity=4)
TECHNICIANS = SectionSpec("technicians", base_row=26, capacity=3)

SECTIONS: Tuple[SectionSpec, ...] = (FINDINGS, ACTIONS, SPARE_PARTS, TECHNICIANS)


@dataclass(frozen=True)
class SectionPlacement:
    section: SectionSpec
    count: int
    start_row: int
    overflow: int
    end_row_if_no_overflow: int

    @property
    def rendered(self) -> bool:
        return self.count > 0

    @property
    def in_template(self) -> int:
        """Elementos que caben en las filas ya existentes."""
        return min(self.count, self.section.capacity)


@dataclass(frozen=True)
class LayoutContext:
    cumulative_overflow: int = 0

    def place(self, section: SectionSpec, count: int) -> Tuple[SectionPlacement, "LayoutContext"]:
        if count < 0:
            raise ValueError(f"Conteo negativo para {section.key}: {count}")
        start = section.base_row + self.cumulative_overflow
        overflow = max(0, count - section.capacity)
        placement = SectionPlacement(
            section=section,
            count=count,
            start_row=start,
            overflow=overflow,
            end_row_if_no_overflow=start + section.capacity - 1,
        )
        return placement, LayoutContext(self.cumulative_overflow + overflow)


def plan_sections(
    counts: Mapping[str, int], sections: Sequence[SectionSpec] = SECTIONS
) -> Dict[str, SectionPlacement]:
    """Devuelve la ubicacion de cada seccion, en el orden fijo de `sections`."""
    ctx = LayoutContext()
    plan: Dict[str, SectionPlacement] = {}
    for section in sections:
        placement, ctx = ctx.place(section, int(counts.get(section.key, 0)))
        plan[section.key] = placement
    return plan
