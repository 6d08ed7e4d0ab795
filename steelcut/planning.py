"""
Planejamento de corte de uma ordem de serviço

Agrupa a demanda por perfil, otimiza cada grupo contra o estoque atual e
sugere a compra de barras comerciais para o que não pôde ser atendido.
"""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from .config import Settings
from .core import compute_cutting_plan
from .exceptions import InvalidInputError
from .inventory import InMemoryInventory
from .models import (
    ProfileGroupPlan, PurchaseBar, PurchaseSuggestion, RequiredPiece,
    StockItem, UnassignedPiece, WorkOrderPlan
)

logger = logging.getLogger(__name__)


def group_by_profile(demand: Sequence[RequiredPiece]) -> Dict[str, List[RequiredPiece]]:
    """Agrupa as peças por perfil, em ordem alfabética de perfil"""
    groups: Dict[str, List[RequiredPiece]] = {}
    for piece in demand:
        groups.setdefault(piece.profile_id, []).append(piece)
    return OrderedDict(sorted(groups.items()))


def suggest_purchase(
    profile_id: str,
    unassignable: Sequence[UnassignedPiece],
    standard_length: float = 12000.0,
    kerf: float = 3.0,
    min_usable_remnant: float = 50.0,
) -> PurchaseSuggestion:
    """
    Distribui a demanda não atendida em barras comerciais novas

    Os cortes e pendências devolvidos mantêm o `piece_id` e o `instance`
    das unidades recebidas.

    Args:
        profile_id: Perfil das peças
        unassignable: Unidades não atendidas pelo estoque
        standard_length: Comprimento da barra comercial (mm)
        kerf: Espessura do corte (mm)
        min_usable_remnant: Menor retalho aproveitável (mm)

    Returns:
        Barras a comprar e peças que nem a barra comercial comporta

    Raises:
        InvalidInputError: unidade repetida ou mesma peça com comprimentos diferentes
    """
    lengths: Dict[str, float] = {}
    seen = set()
    units: Dict[str, UnassignedPiece] = OrderedDict()
    for index, unit in enumerate(unassignable):
        if (unit.piece_id, unit.instance) in seen:
            raise InvalidInputError(f"Unidade repetida: {unit.piece_id} #{unit.instance}")
        seen.add((unit.piece_id, unit.instance))
        if lengths.setdefault(unit.piece_id, unit.length) != unit.length:
            raise InvalidInputError(
                f"Peça {unit.piece_id} com comprimentos diferentes: "
                f"{lengths[unit.piece_id]} e {unit.length}"
            )
        units[f"U{index + 1:06d}"] = unit

    # Uma peça por unidade, para não perder a numeração original
    pieces = [
        RequiredPiece(id=key, profile_id=profile_id, length=unit.length, label=unit.label)
        for key, unit in units.items()
    ]
    # Uma barra virtual por unidade basta no pior caso
    virtual_bars = [
        StockItem(id=f"NEW-{i + 1:04d}", profile_id=profile_id, length=standard_length)
        for i in range(len(units))
    ]
    plan = compute_cutting_plan(
        profile_id, virtual_bars, [], pieces,
        kerf=kerf, min_usable_remnant=min_usable_remnant,
    )

    bars = []
    for usage in plan.sources:
        cuts = []
        for cut in plan.assignments:
            if cut.source_id != usage.source_id:
                continue
            unit = units[cut.piece_id]
            cuts.append(cut.model_copy(update={"piece_id": unit.piece_id, "instance": unit.instance}))
        bars.append(PurchaseBar(
            length=usage.original_length,
            cuts=cuts,
            remaining_length=usage.remaining_length,
        ))

    unallocated = [units[missing.piece_id] for missing in plan.unassignable]
    if unallocated:
        logger.warning(
            "Perfil %s: %d peças maiores que a barra comercial de %gmm",
            profile_id, len(unallocated), standard_length,
        )

    return PurchaseSuggestion(
        profile_id=profile_id,
        standard_length=standard_length,
        bars=bars,
        unallocated=unallocated,
        efficiency=plan.efficiency,
    )


def plan_work_order(
    demand: Sequence[RequiredPiece],
    inventory: InMemoryInventory,
    settings: Optional[Settings] = None,
    work_order_id: Optional[str] = None,
    stock_length_overrides: Optional[Dict[str, float]] = None,
) -> WorkOrderPlan:
    """
    Calcula um plano por perfil contra o estoque disponível

    O estoque não é alterado; aplique cada plano com
    `InMemoryInventory.apply_plan`. `stock_length_overrides` troca o
    comprimento da barra comercial de perfis específicos na sugestão de compra.
    """
    settings = settings or Settings()
    overrides = stock_length_overrides or {}
    groups = []
    for profile_id, pieces in group_by_profile(demand).items():
        stock, remnants = inventory.available_for(profile_id)
        plan = compute_cutting_plan(
            profile_id, stock, remnants, pieces,
            kerf=settings.kerf,
            min_usable_remnant=settings.min_usable_remnant,
        )
        purchase = None
        if plan.unassignable:
            standard_length = overrides.get(profile_id, settings.standard_stock_length)
            purchase = suggest_purchase(
                profile_id,
                plan.unassignable,
                standard_length=standard_length,
                kerf=settings.kerf,
                min_usable_remnant=settings.min_usable_remnant,
            )
        groups.append(ProfileGroupPlan(profile_id=profile_id, plan=plan, purchase=purchase))

    result = WorkOrderPlan(work_order_id=work_order_id, groups=groups)
    logger.info(
        "Ordem %s: %d perfis, %d barras do estoque, %d barras a comprar",
        work_order_id or "-", len(groups), result.total_stock_consumed, result.bars_to_purchase,
    )
    return result
