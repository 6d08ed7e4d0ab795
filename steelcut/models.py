"""
Modelos de dados para o SteelCut
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, Field
from enum import Enum


class ItemStatus(str, Enum):
    """Situação de uma barra ou retalho no estoque"""
    AVAILABLE = "available"
    RESERVED = "reserved"
    CONSUMED = "consumed"


class SourceKind(str, Enum):
    """Origem de material para um corte"""
    STOCK = "stock"       # Barra inteira
    REMNANT = "remnant"   # Retalho de corte anterior


class StockItem(BaseModel):
    """Barra de comprimento fixo disponível em estoque"""
    id: str = Field(..., description="Identificador único da barra")
    profile_id: str = Field(..., description="Perfil/dimensões da barra")
    length: float = Field(..., description="Comprimento total (mm)")
    status: ItemStatus = Field(ItemStatus.AVAILABLE, description="Situação da barra")
    name: Optional[str] = Field(None, description="Descrição (lote, fornecedor)")


class RemnantItem(BaseModel):
    """Retalho produzido por um corte anterior"""
    id: str = Field(..., description="Identificador único do retalho")
    profile_id: str = Field(..., description="Perfil/dimensões do retalho")
    length: float = Field(..., description="Comprimento disponível (mm)")
    status: ItemStatus = Field(ItemStatus.AVAILABLE, description="Situação do retalho")
    origin_source_id: Optional[str] = Field(None, description="Barra ou retalho de origem")
    origin_work_order_id: Optional[str] = Field(None, description="Ordem de serviço de origem")


class RequiredPiece(BaseModel):
    """Peça linear a ser cortada"""
    id: str = Field(..., description="Identificador único da peça")
    profile_id: str = Field(..., description="Perfil/dimensões exigidos")
    length: float = Field(..., description="Comprimento (mm)")
    quantity: int = Field(1, description="Quantidade necessária")
    label: Optional[str] = Field(None, description="Marca da peça / referência do desenho")


class CutAssignment(BaseModel):
    """Uma instância de peça cortada de uma origem"""
    piece_id: str = Field(..., description="ID da peça")
    instance: int = Field(..., description="Índice da unidade (1..quantidade)")
    label: Optional[str] = Field(None, description="Marca da peça")
    source_id: str = Field(..., description="ID da barra ou retalho")
    source_kind: SourceKind = Field(..., description="Tipo da origem")
    offset: float = Field(..., description="Posição do início do corte na origem (mm)")
    length: float = Field(..., description="Comprimento da peça (mm)")
    kerf: float = Field(0, description="Perda da lâmina neste corte (mm)")
    order: int = Field(..., description="Ordem de execução dentro da origem")

    @property
    def consumed_length(self) -> float:
        """Material consumido pela peça mais a lâmina"""
        return self.length + self.kerf


class ProducedRemnant(BaseModel):
    """Retalho aproveitável gerado pelo plano"""
    profile_id: str = Field(..., description="Perfil do retalho")
    length: float = Field(..., description="Comprimento do retalho (mm)")
    origin_source_id: str = Field(..., description="ID da origem")
    origin_kind: SourceKind = Field(..., description="Tipo da origem")


class UnassignedPiece(BaseModel):
    """Unidade de peça que não coube em nenhuma origem"""
    piece_id: str = Field(..., description="ID da peça")
    instance: int = Field(..., description="Índice da unidade")
    label: Optional[str] = Field(None, description="Marca da peça")
    length: float = Field(..., description="Comprimento (mm)")


class SourceUsage(BaseModel):
    """Aproveitamento de uma origem consumida"""
    source_id: str = Field(..., description="ID da origem")
    source_kind: SourceKind = Field(..., description="Tipo da origem")
    original_length: float = Field(..., description="Comprimento original (mm)")
    used_length: float = Field(..., description="Soma das peças cortadas (mm)")
    kerf_loss: float = Field(..., description="Perda total da lâmina (mm)")
    remaining_length: float = Field(..., description="Sobra final (mm)")
    scrap_length: float = Field(..., description="Sobra descartada como sucata (mm)")
    pieces: int = Field(..., description="Quantidade de peças cortadas")
    efficiency: float = Field(..., description="Aproveitamento percentual")


class CuttingPlan(BaseModel):
    """Plano de corte de um grupo de perfil"""
    profile_group_id: str = Field(..., description="Grupo de perfil otimizado")
    assignments: List[CutAssignment] = Field(default_factory=list, description="Cortes em ordem")
    produced_remnants: List[ProducedRemnant] = Field(default_factory=list, description="Retalhos gerados")
    unassignable: List[UnassignedPiece] = Field(default_factory=list, description="Demanda não atendida")
    sources: List[SourceUsage] = Field(default_factory=list, description="Origens consumidas")
    total_waste_length: float = Field(0, description="Perda da lâmina + sucata (mm)")
    total_kerf_loss: float = Field(0, description="Perda total da lâmina (mm)")
    total_scrap_length: float = Field(0, description="Sobras abaixo do mínimo aproveitável (mm)")
    total_stock_consumed: int = Field(0, description="Barras novas utilizadas")
    total_remnants_consumed: int = Field(0, description="Retalhos utilizados")
    efficiency: float = Field(0, description="Aproveitamento percentual total")
    processing_time: float = Field(0, description="Tempo de processamento (ms)")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Metadados adicionais")

    @property
    def is_complete(self) -> bool:
        """Toda a demanda foi atendida"""
        return not self.unassignable

    @property
    def consumed_source_ids(self) -> List[str]:
        return [usage.source_id for usage in self.sources]

    @property
    def execution_order(self) -> List[str]:
        """Ordem de execução legível dos cortes"""
        return [
            f"{a.label or a.piece_id} ({a.length:g}mm) em {a.source_id} @ {a.offset:g}mm"
            for a in self.assignments
        ]


class OptimizationRequest(BaseModel):
    """Requisição de otimização para um grupo de perfil"""
    profile_group_id: str = Field(..., description="Grupo de perfil")
    stock: List[StockItem] = Field(default_factory=list, description="Barras disponíveis")
    remnants: List[RemnantItem] = Field(default_factory=list, description="Retalhos disponíveis")
    demand: List[RequiredPiece] = Field(default_factory=list, description="Peças a cortar")
    kerf: float = Field(3.0, description="Espessura do corte (mm)")
    min_usable_remnant: float = Field(50.0, description="Menor retalho aproveitável (mm)")


class PurchaseBar(BaseModel):
    """Barra comercial nova a comprar, com as peças que serão cortadas dela"""
    length: float = Field(..., description="Comprimento da barra comercial (mm)")
    cuts: List[CutAssignment] = Field(..., description="Peças alocadas na barra")
    remaining_length: float = Field(..., description="Sobra prevista (mm)")


class PurchaseSuggestion(BaseModel):
    """Sugestão de compra para a demanda não atendida de um perfil"""
    profile_id: str = Field(..., description="Perfil a comprar")
    standard_length: float = Field(..., description="Comprimento comercial (mm)")
    bars: List[PurchaseBar] = Field(default_factory=list, description="Barras a comprar")
    unallocated: List[UnassignedPiece] = Field(default_factory=list, description="Peças maiores que a barra comercial")
    efficiency: float = Field(0, description="Aproveitamento percentual das barras novas")

    @property
    def bar_count(self) -> int:
        return len(self.bars)


class ProfileGroupPlan(BaseModel):
    """Resultado de um grupo de perfil dentro de uma ordem de serviço"""
    profile_id: str = Field(..., description="Grupo de perfil")
    plan: CuttingPlan = Field(..., description="Plano sobre o estoque atual")
    purchase: Optional[PurchaseSuggestion] = Field(None, description="Compra sugerida")


class WorkOrderPlan(BaseModel):
    """Planos de corte de todos os perfis de uma ordem de serviço"""
    work_order_id: Optional[str] = Field(None, description="Ordem de serviço")
    groups: List[ProfileGroupPlan] = Field(default_factory=list, description="Planos por perfil")

    @property
    def is_complete(self) -> bool:
        return all(group.plan.is_complete for group in self.groups)

    @property
    def total_waste_length(self) -> float:
        return sum(group.plan.total_waste_length for group in self.groups)

    @property
    def total_stock_consumed(self) -> int:
        return sum(group.plan.total_stock_consumed for group in self.groups)

    @property
    def bars_to_purchase(self) -> int:
        return sum(group.purchase.bar_count for group in self.groups if group.purchase)
