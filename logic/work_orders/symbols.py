from __future__ import annotations

from typing import Dict, Iterable, List


class SymbolTable:
    """Simbolo (1..N) de cada accion escrita en la hoja, por id de accion."""

    def __init__(self) -> None:
        self._by_action: Dict[int, int] = {}

    def assign(self, action_id: int, symbol: int) -> None:
        self._by_action[action_id] = symbol

    def get(self, action_id: int) -> int | None:
        return self._by_action.get(action_id)

    def resolve(self, action_ids: Iterable[int]) -> List[int]:
        # ids sin simbolo se omiten: no deben tumbar el reporte
        found = {self._by_action[a] for a in action_ids if a in self._by_action}
        return sorted(found)

    def resolve_csv(self, action_ids: Iterable[int]) -> str:
        return ",".join(str(s) for s in self.resolve(action_ids))

    def __len__(self) -> int:
        return len(self._by_action)
