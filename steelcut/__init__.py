"""
SteelCut - Otimização de Cortes de Perfis para Estruturas Metálicas

Distribui as peças de uma ordem de serviço entre retalhos e barras do estoque,
reduzindo o desperdício e priorizando o consumo de retalhos.
"""

from .core import CuttingPlanOptimizer, compute_cutting_plan
from .exceptions import InvalidInputError, PlanConflictError, SteelCutError
from .models import (
    StockItem, RemnantItem, RequiredPiece, CutAssignment, ProducedRemnant,
    UnassignedPiece, CuttingPlan, OptimizationRequest
)

__version__ = "1.0.0"
__author__ = "SteelCut Team"

__all__ = [
    "CuttingPlanOptimizer",
    "compute_cutting_plan",
    "InvalidInputError",
    "PlanConflictError",
    "SteelCutError",
    "StockItem",
    "RemnantItem",
    "RequiredPiece",
    "CutAssignment",
    "ProducedRemnant",
    "UnassignedPiece",
    "CuttingPlan",
    "OptimizationRequest",
]
