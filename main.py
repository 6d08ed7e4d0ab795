"""
Servidor FastAPI principal para o SteelCut
"""

import logging
import tempfile
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import uvicorn

from steelcut import CuttingPlanOptimizer, InvalidInputError, __version__
from steelcut.config import Settings
from steelcut.models import CuttingPlan, OptimizationRequest, PurchaseSuggestion, UnassignedPiece
from steelcut.planning import suggest_purchase
from steelcut.utils import CuttingPlanReporter

logger = logging.getLogger(__name__)

settings = Settings.from_env()

# Configuração do FastAPI
app = FastAPI(
    title="SteelCut API",
    description="API para planos de corte de perfis com aproveitamento de retalhos",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Configuração de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Instância global do otimizador
optimizer = CuttingPlanOptimizer.from_settings(settings)


class PurchaseRequest(BaseModel):
    """Requisição de sugestão de compra"""
    profile_id: str = Field(..., description="Perfil a comprar")
    unassignable: List[UnassignedPiece] = Field(..., description="Peças sem origem no estoque")
    standard_length: Optional[float] = Field(None, description="Barra comercial (mm)")
    kerf: Optional[float] = Field(None, description="Espessura do corte (mm)")


@app.get("/")
async def root():
    """Página inicial da API"""
    return {
        "message": "SteelCut API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """Verificação de saúde da API"""
    return {
        "status": "healthy",
        "service": "SteelCut API",
        "version": __version__
    }


@app.post("/optimize", response_model=CuttingPlan)
async def optimize(request: OptimizationRequest):
    """
    Plano de corte de um grupo de perfil

    Args:
        request: Requisição de otimização

    Returns:
        Plano de corte; peças sem origem vêm em `unassignable`
    """
    try:
        return optimizer.optimize(request)
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/optimize/batch")
async def optimize_batch(requests: List[OptimizationRequest]):
    """
    Otimização em lote, uma requisição por grupo de perfil

    Args:
        requests: Lista de requisições de otimização

    Returns:
        Resumo e resultado de cada requisição
    """
    results = []
    for request in requests:
        try:
            plan = optimizer.optimize(request)
            results.append({"success": True, "plan": plan.model_dump(mode="json")})
        except InvalidInputError as e:
            logger.warning("Requisição %s rejeitada: %s", request.profile_group_id, e)
            results.append({"success": False, "profile_group_id": request.profile_group_id, "error": str(e)})

    return {
        "total_requests": len(requests),
        "successful": len([r for r in results if r["success"]]),
        "failed": len([r for r in results if not r["success"]]),
        "results": results
    }


@app.post("/purchase/suggest", response_model=PurchaseSuggestion)
async def purchase_suggest(request: PurchaseRequest):
    """Distribui peças sem estoque em barras comerciais novas"""
    standard_length = request.standard_length
    if standard_length is None:
        standard_length = settings.standard_stock_length
    kerf = settings.kerf if request.kerf is None else request.kerf
    if standard_length <= 0 or kerf < 0:
        raise HTTPException(status_code=422, detail="Barra comercial e kerf devem ser positivos")
    try:
        return suggest_purchase(
            request.profile_id,
            request.unassignable,
            standard_length=standard_length,
            kerf=kerf,
            min_usable_remnant=settings.min_usable_remnant,
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/report/generate")
async def generate_report(plan: CuttingPlan, format: str = "all"):
    """
    Gera relatórios em diferentes formatos

    Args:
        plan: Plano de corte
        format: Formato do relatório (txt, csv, json, html, all)

    Returns:
        Relatório no formato solicitado
    """
    formats = ["txt", "csv", "json", "html"] if format == "all" else [format]
    unknown = [f for f in formats if f not in ("txt", "csv", "json", "html")]
    if unknown:
        raise HTTPException(status_code=400, detail=f"Formato não suportado: {', '.join(unknown)}")

    reporter = CuttingPlanReporter(plan)
    results = {}

    if "txt" in formats:
        results["txt"] = reporter.generate_text_report()

    if "json" in formats:
        results["json"] = plan.model_dump(mode="json")

    if "csv" in formats:
        with tempfile.TemporaryDirectory() as temp_dir:
            base_path = Path(temp_dir) / "plano"
            results["csv"] = {
                path.stem: path.read_text(encoding="utf-8")
                for path in reporter.generate_csv_report(str(base_path))
            }

    if "html" in formats:
        results["html"] = reporter.generate_html_report()

    return {
        "formats_generated": formats,
        "results": results
    }


@app.get("/examples")
async def get_example():
    """Retorna exemplo de requisição de otimização"""
    return {
        "profile_group_id": "HEA200-S355",
        "stock": [
            {"id": "LOT-1001", "profile_id": "HEA200-S355", "length": 12000},
            {"id": "LOT-1002", "profile_id": "HEA200-S355", "length": 6000}
        ],
        "remnants": [
            {"id": "REM-0001", "profile_id": "HEA200-S355", "length": 2450, "origin_source_id": "LOT-0950"}
        ],
        "demand": [
            {"id": "B-101", "profile_id": "HEA200-S355", "length": 4200, "quantity": 2, "label": "Viga B-101"},
            {"id": "C-205", "profile_id": "HEA200-S355", "length": 2300, "quantity": 3, "label": "Coluna C-205"}
        ],
        "kerf": settings.kerf,
        "min_usable_remnant": settings.min_usable_remnant
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower()
    )
