"""
Núcleo do SteelCut: plano de corte 1D com prioridade para retalhos
"""

import logging
import math
import time
from bisect import bisect_left, insort
from typing import Dict, List, Optional, Sequence, Tuple

from .exceptions import InvalidInputError
from .models import (
    CutAssignment, CuttingPlan, ItemStatus, OptimizationRequest, ProducedRemnant,
    RemnantItem, RequiredPiece, SourceKind, SourceUsage, StockItem, UnassignedPiece
)

logger = logging.getLogger(__name__)

# Tolerância para comparações de comprimento em ponto flutuante
EPSILON = 1e-6


class _SourceState:
    """Estado em memória de uma barra ou retalho durante a otimização"""

    __slots__ = ("source_id", "kind", "original_length", "remaining", "cuts")

    def __init__(self, source_id: str, kind: SourceKind, length: float):
        self.source_id = source_id
        self.kind = kind
        self.original_length = length
        self.remaining = length
        self.cuts: List[CutAssignment] = []

    @property
    def key(self) -> Tuple[float, float, str]:
        return (self.remaining, self.original_length, self.source_id)


class SourcePool:
    """
    Origens ordenadas por comprimento restante

    Desempate: menor comprimento original, depois menor identificador.
    """

    def __init__(self):
        self._keys: List[Tuple[float, float, str]] = []
        self._states: Dict[str, _SourceState] = {}

    def __len__(self) -> int:
        return len(self._keys)

    def add(self, state: _SourceState) -> None:
        self._states[state.source_id] = state
        insort(self._keys, state.key)

    def take_best_fit(self, needed: float) -> Optional[_SourceState]:
        """Remove e retorna a origem de menor sobra que comporta `needed`"""
        index = bisect_left(self._keys, (needed - EPSILON,))
        if index == len(self._keys):
            return None
        key = self._keys.pop(index)
        return self._states[key[2]]


def _validate(
    profile_group_id: str,
    stock: Sequence[StockItem],
    remnants: Sequence[RemnantItem],
    demand: Sequence[RequiredPiece],
    kerf: float,
    min_usable_remnant: float,
) -> None:
    if not math.isfinite(kerf) or kerf < 0:
        raise InvalidInputError(f"Kerf inválido: {kerf}")
    if not math.isfinite(min_usable_remnant) or min_usable_remnant < 0:
        raise InvalidInputError(f"Retalho mínimo inválido: {min_usable_remnant}")

    seen_sources = set()
    for kind, items in ((SourceKind.STOCK, stock), (SourceKind.REMNANT, remnants)):
        for item in items:
            if item.profile_id != profile_group_id:
                raise InvalidInputError(
                    f"{kind.value} {item.id} pertence ao perfil {item.profile_id}, "
                    f"esperado {profile_group_id}"
                )
            if not (math.isfinite(item.length) and item.length > 0):
                raise InvalidInputError(f"{kind.value} {item.id} com comprimento inválido: {item.length}")
            if item.id in seen_sources:
                raise InvalidInputError(f"Origem duplicada: {item.id}")
            seen_sources.add(item.id)

    seen_pieces = set()
    for piece in demand:
        if piece.profile_id != profile_group_id:
            raise InvalidInputError(
                f"Peça {piece.id} pertence ao perfil {piece.profile_id}, esperado {profile_group_id}"
            )
        if not (math.isfinite(piece.length) and piece.length > 0):
            raise InvalidInputError(f"Peça {piece.id} com comprimento inválido: {piece.length}")
        if piece.quantity < 1:
            raise InvalidInputError(f"Peça {piece.id} com quantidade inválida: {piece.quantity}")
        if piece.id in seen_pieces:
            raise InvalidInputError(f"Peça duplicada: {piece.id}")
        seen_pieces.add(piece.id)


def _expand_demand(demand: Sequence[RequiredPiece]) -> List[Tuple[RequiredPiece, int]]:
    """Expande a demanda em unidades, da maior para a menor"""
    units = [(piece, i + 1) for piece in demand for i in range(piece.quantity)]
    units.sort(key=lambda unit: (-unit[0].length, unit[0].id, unit[1]))
    return units


def compute_cutting_plan(
    profile_group_id: str,
    stock: Sequence[StockItem],
    remnants: Sequence[RemnantItem],
    demand: Sequence[RequiredPiece],
    kerf: float = 3.0,
    min_usable_remnant: float = 50.0,
) -> CuttingPlan:
    """
    Calcula o plano de corte de um grupo de perfil (best fit decrescente)

    Retalhos são sempre tentados antes das barras inteiras. Peças que não
    cabem em nenhuma origem aparecem em `unassignable`.

    Args:
        profile_group_id: Perfil comum a todas as origens e peças
        stock: Barras disponíveis
        remnants: Retalhos disponíveis
        demand: Peças a cortar
        kerf: Perda da lâmina por corte (mm)
        min_usable_remnant: Sobras menores que isso viram sucata (mm)

    Returns:
        Plano de corte

    Raises:
        InvalidInputError: entrada malformada
    """
    _validate(profile_group_id, stock, remnants, demand, kerf, min_usable_remnant)

    remnant_pool = SourcePool()
    stock_pool = SourcePool()
    for kind, items, pool in (
        (SourceKind.REMNANT, remnants, remnant_pool),
        (SourceKind.STOCK, stock, stock_pool),
    ):
        for item in items:
            if item.status != ItemStatus.AVAILABLE:
                logger.debug("Ignorando %s %s com status %s", kind.value, item.id, item.status.value)
                continue
            pool.add(_SourceState(item.id, kind, float(item.length)))

    assignments: List[CutAssignment] = []
    unassignable: List[UnassignedPiece] = []
    used_sources: List[_SourceState] = []

    for piece, instance in _expand_demand(demand):
        needed = piece.length + kerf
        state = remnant_pool.take_best_fit(needed)
        pool = remnant_pool
        if state is None:
            state = stock_pool.take_best_fit(needed)
            pool = stock_pool

        if state is None:
            logger.debug("Peça %s #%d (%smm) sem origem disponível", piece.id, instance, piece.length)
            unassignable.append(UnassignedPiece(
                piece_id=piece.id,
                instance=instance,
                label=piece.label,
                length=piece.length,
            ))
            continue

        if not state.cuts:
            used_sources.append(state)
        cut = CutAssignment(
            piece_id=piece.id,
            instance=instance,
            label=piece.label,
            source_id=state.source_id,
            source_kind=state.kind,
            offset=state.original_length - state.remaining,
            length=piece.length,
            kerf=kerf,
            order=len(state.cuts) + 1,
        )
        state.cuts.append(cut)
        assignments.append(cut)

        state.remaining = max(0.0, state.remaining - needed)
        if state.remaining > EPSILON:
            pool.add(state)

    # Sobras: retalho aproveitável ou sucata
    produced: List[ProducedRemnant] = []
    usages: List[SourceUsage] = []
    for state in used_sources:
        used_length = sum(cut.length for cut in state.cuts)
        kerf_loss = sum(cut.kerf for cut in state.cuts)
        remaining = state.remaining if state.remaining > EPSILON else 0.0
        scrap = 0.0
        if remaining > 0 and remaining >= min_usable_remnant:
            produced.append(ProducedRemnant(
                profile_id=profile_group_id,
                length=remaining,
                origin_source_id=state.source_id,
                origin_kind=state.kind,
            ))
        else:
            scrap = remaining
        usages.append(SourceUsage(
            source_id=state.source_id,
            source_kind=state.kind,
            original_length=state.original_length,
            used_length=used_length,
            kerf_loss=kerf_loss,
            remaining_length=remaining,
            scrap_length=scrap,
            pieces=len(state.cuts),
            efficiency=used_length / state.original_length * 100,
        ))

    total_kerf = sum(u.kerf_loss for u in usages)
    total_scrap = sum(u.scrap_length for u in usages)
    total_used = sum(u.used_length for u in usages)
    total_material = sum(u.original_length for u in usages)

    plan = CuttingPlan(
        profile_group_id=profile_group_id,
        assignments=assignments,
        produced_remnants=produced,
        unassignable=unassignable,
        sources=usages,
        total_waste_length=total_kerf + total_scrap,
        total_kerf_loss=total_kerf,
        total_scrap_length=total_scrap,
        total_stock_consumed=sum(1 for u in usages if u.source_kind == SourceKind.STOCK),
        total_remnants_consumed=sum(1 for u in usages if u.source_kind == SourceKind.REMNANT),
        efficiency=(total_used / total_material) * 100 if total_material > 0 else 0,
        metadata={"kerf": kerf, "min_usable_remnant": min_usable_remnant},
    )
    logger.info(
        "Perfil %s: %d cortes, %d retalhos gerados, %d peças sem origem, desperdício %.1fmm",
        profile_group_id, len(assignments), len(produced), len(unassignable), plan.total_waste_length,
    )
    return plan


class CuttingPlanOptimizer:
    """
    Otimizador de planos de corte
    """

    def __init__(self, kerf: float = 3.0, min_usable_remnant: float = 50.0):
        """
        Inicializa o otimizador

        Args:
            kerf: Espessura do corte em mm
            min_usable_remnant: Menor sobra guardada como retalho, em mm
        """
        self.kerf = kerf
        self.min_usable_remnant = min_usable_remnant

    @classmethod
    def from_settings(cls, settings) -> "CuttingPlanOptimizer":
        return cls(kerf=settings.kerf, min_usable_remnant=settings.min_usable_remnant)

    def optimize(self, request: OptimizationRequest) -> CuttingPlan:
        """
        Otimiza uma requisição, usando o kerf e o retalho mínimo da própria requisição

        Args:
            request: Requisição de otimização

        Returns:
            Plano de corte com tempo de processamento preenchido
        """
        start_time = time.time()
        plan = compute_cutting_plan(
            request.profile_group_id,
            request.stock,
            request.remnants,
            request.demand,
            kerf=request.kerf,
            min_usable_remnant=request.min_usable_remnant,
        )
        plan.processing_time = (time.time() - start_time) * 1000
        return plan

    def plan(
        self,
        profile_group_id: str,
        stock: Sequence[StockItem],
        remnants: Sequence[RemnantItem],
        demand: Sequence[RequiredPiece],
    ) -> CuttingPlan:
        """Método de conveniência com os parâmetros do otimizador"""
        request = OptimizationRequest(
            profile_group_id=profile_group_id,
            stock=list(stock),
            remnants=list(remnants),
            demand=list(demand),
            kerf=self.kerf,
            min_usable_remnant=self.min_usable_remnant,
        )
        return self.optimize(request)
