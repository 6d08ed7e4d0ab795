#!/usr/bin/env python3
"""
Script principal para executar o SteelCut
"""

import argparse
import logging
import sys

from steelcut.config import Settings
from steelcut.inventory import InMemoryInventory
from steelcut.models import RemnantItem, RequiredPiece, StockItem
from steelcut.planning import plan_work_order
from steelcut.utils import CuttingPlanReporter, create_visualization, export_plan

logger = logging.getLogger(__name__)


def create_sample_data():
    """Cria estoque e demanda de exemplo para demonstração"""

    inventory = InMemoryInventory()
    for i in range(3):
        inventory.add_stock(StockItem(id=f"HEA200-L{i + 1}", profile_id="HEA200", length=12000, name="HEA 200 S355"))
    inventory.add_stock(StockItem(id="IPE160-L1", profile_id="IPE160", length=6000, name="IPE 160 S235"))
    inventory.add_remnant(RemnantItem(id="HEA200-R1", profile_id="HEA200", length=2600, origin_source_id="HEA200-L0"))
    inventory.add_remnant(RemnantItem(id="IPE160-R1", profile_id="IPE160", length=900))

    demand = [
        RequiredPiece(id="B-101", profile_id="HEA200", length=5400, quantity=2, label="Viga principal"),
        RequiredPiece(id="C-201", profile_id="HEA200", length=2500, quantity=4, label="Coluna"),
        RequiredPiece(id="T-301", profile_id="IPE160", length=1800, quantity=4, label="Travessa"),
        RequiredPiece(id="T-302", profile_id="IPE160", length=850, quantity=2, label="Mão francesa"),
    ]
    return inventory, demand


def run_demo(settings: Settings, export_dir=None, visualization=False):
    """Executa demonstração do sistema"""

    inventory, demand = create_sample_data()
    logger.info("Kerf %.1fmm, retalho mínimo %.1fmm", settings.kerf, settings.min_usable_remnant)

    result = plan_work_order(demand, inventory, settings, work_order_id="OS-DEMO")

    for group in result.groups:
        print(CuttingPlanReporter(group.plan).generate_text_report())
        if group.purchase:
            print(f"Comprar {group.purchase.bar_count} barra(s) de {group.purchase.standard_length:g}mm"
                  f" do perfil {group.profile_id}")
            for unit in group.purchase.unallocated:
                print(f"  • {unit.piece_id} ({unit.length:g}mm) maior que a barra comercial")

        if export_dir:
            export_plan(group.plan, export_dir)
            if visualization:
                create_visualization(group.plan, export_dir)

    for group in result.groups:
        created = inventory.apply_plan(group.plan, work_order_id=result.work_order_id)
        logger.info("Perfil %s: %d retalho(s) devolvido(s) ao estoque", group.profile_id, len(created))

    return result


def run_api_server(settings: Settings):
    """Inicia o servidor da API"""
    import uvicorn

    logger.info("Servidor iniciado em http://%s:%d (documentação em /docs)", settings.api_host, settings.api_port)
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower()
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="SteelCut - Planos de Corte de Perfis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exemplos de uso:
  python run.py demo                    # Executa demonstração
  python run.py api                     # Inicia servidor da API
  python run.py demo --export results   # Executa demo e exporta resultados
        """
    )
    parser.add_argument('--verbose', action='store_true', help='Log detalhado (DEBUG)')
    parser.add_argument('command', choices=['demo', 'api'], help='Comando a executar')
    parser.add_argument('--export', metavar='DIR', help='Diretório para exportar resultados')
    parser.add_argument('--visualization', action='store_true', help='Criar visualizações dos resultados')
    parser.add_argument('--kerf', type=float, help='Espessura do corte (mm)')
    return parser


def main(argv=None):
    """Função principal"""
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    if args.kerf is not None:
        settings = settings.model_copy(update={"kerf": args.kerf})

    level = logging.DEBUG if args.verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(level)

    try:
        if args.command == 'demo':
            run_demo(settings, export_dir=args.export, visualization=args.visualization)
        elif args.command == 'api':
            run_api_server(settings)
    except KeyboardInterrupt:
        logger.info("Sistema interrompido pelo usuário")
    except Exception:
        logger.exception("Erro ao executar %s", args.command)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
