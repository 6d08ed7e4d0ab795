"""
Estoque em memória de barras e retalhos

Aplica planos de corte de forma atômica: se alguma origem do plano já foi
consumida, nada é alterado e `PlanConflictError` é levantado.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple, Union
from uuid import uuid4

from .exceptions import DuplicateRecordError, PlanConflictError, RecordNotFoundError
from .models import CuttingPlan, ItemStatus, RemnantItem, SourceKind, StockItem

logger = logging.getLogger(__name__)

InventoryItem = Union[StockItem, RemnantItem]


class InMemoryInventory:
    """Repositório de estoque baseado em dicionários"""

    def __init__(self):
        self._stock: Dict[str, StockItem] = {}
        self._remnants: Dict[str, RemnantItem] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._stock) + len(self._remnants)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._stock or item_id in self._remnants

    def add_stock(self, item: StockItem) -> None:
        with self._lock:
            if item.id in self:
                raise DuplicateRecordError(f"Registro {item.id!r} já existe")
            self._stock[item.id] = item

    def add_remnant(self, item: RemnantItem) -> None:
        with self._lock:
            if item.id in self:
                raise DuplicateRecordError(f"Registro {item.id!r} já existe")
            self._remnants[item.id] = item

    def get(self, item_id: str) -> InventoryItem:
        if item_id in self._stock:
            return self._stock[item_id]
        try:
            return self._remnants[item_id]
        except KeyError as exc:
            raise RecordNotFoundError(f"Registro {item_id!r} não encontrado") from exc

    def available_for(self, profile_id: str) -> Tuple[List[StockItem], List[RemnantItem]]:
        """Cópias das barras e retalhos disponíveis de um perfil"""
        with self._lock:
            stock = [
                item.model_copy() for item in self._stock.values()
                if item.profile_id == profile_id and item.status == ItemStatus.AVAILABLE
            ]
            remnants = [
                item.model_copy() for item in self._remnants.values()
                if item.profile_id == profile_id and item.status == ItemStatus.AVAILABLE
            ]
        return stock, remnants

    def apply_plan(self, plan: CuttingPlan, work_order_id: Optional[str] = None) -> List[RemnantItem]:
        """
        Consome as origens do plano e registra os retalhos gerados

        Args:
            plan: Plano calculado sobre um retrato anterior do estoque
            work_order_id: Ordem de serviço que originou o plano

        Returns:
            Retalhos criados

        Raises:
            PlanConflictError: alguma origem não está mais disponível
        """
        with self._lock:
            conflicts = []
            for usage in plan.sources:
                table = self._stock if usage.source_kind == SourceKind.STOCK else self._remnants
                item = table.get(usage.source_id)
                if item is None or item.status != ItemStatus.AVAILABLE:
                    conflicts.append(usage.source_id)
            if conflicts:
                logger.warning("Plano %s em conflito: %s", plan.profile_group_id, conflicts)
                raise PlanConflictError(conflicts)

            for usage in plan.sources:
                table = self._stock if usage.source_kind == SourceKind.STOCK else self._remnants
                table[usage.source_id] = table[usage.source_id].model_copy(
                    update={"status": ItemStatus.CONSUMED}
                )

            created = []
            for produced in plan.produced_remnants:
                remnant = RemnantItem(
                    id=f"REM-{uuid4().hex[:12]}",
                    profile_id=produced.profile_id,
                    length=produced.length,
                    origin_source_id=produced.origin_source_id,
                    origin_work_order_id=work_order_id,
                )
                self._remnants[remnant.id] = remnant
                created.append(remnant)

        logger.info(
            "Plano %s aplicado: %d origens consumidas, %d retalhos criados",
            plan.profile_group_id, len(plan.sources), len(created),
        )
        return created
