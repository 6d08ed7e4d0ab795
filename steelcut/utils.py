"""
Utilitários para visualização e relatórios do SteelCut
"""

import json
import logging
from typing import List, Optional
from pathlib import Path
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import numpy as np
import pandas as pd

from .models import CuttingPlan, SourceUsage

logger = logging.getLogger(__name__)


class CuttingPlanVisualizer:
    """Classe para visualização de planos de corte"""

    def __init__(self, plan: CuttingPlan):
        """
        Inicializa o visualizador

        Args:
            plan: Plano de corte
        """
        self.plan = plan
        self.colors = plt.cm.Set3(np.linspace(0, 1, 12))

    def plot_bars(self, save_path: Optional[str] = None, show: bool = True) -> bool:
        """Desenha cada origem consumida com as peças, a lâmina e a sobra"""
        if not self.plan.sources:
            logger.info("Nenhum corte para visualizar")
            return False

        fig, axes = plt.subplots(len(self.plan.sources), 1, figsize=(12, 2.5 * len(self.plan.sources)))
        axes = np.atleast_1d(axes)

        for ax, usage in zip(axes, self.plan.sources):
            ax.set_xlim(0, usage.original_length)
            ax.set_ylim(-0.5, 0.5)
            ax.set_yticks([])
            ax.set_title(
                f"{usage.source_id} ({usage.source_kind.value}, {usage.original_length:g}mm)"
                f" - Aproveitamento: {usage.efficiency:.1f}%"
            )
            ax.set_xlabel("Posição (mm)")

            for j, cut in enumerate(self._cuts_for(usage)):
                color = self.colors[j % len(self.colors)]
                ax.add_patch(Rectangle((cut.offset, -0.2), cut.length, 0.4,
                                       facecolor=color, edgecolor='black', linewidth=1))
                ax.text(cut.offset + cut.length / 2, 0, f"{cut.label or cut.piece_id}\n{cut.length:g}",
                        ha='center', va='center', fontsize=7)
                if cut.kerf > 0:
                    ax.axvspan(cut.offset + cut.length, cut.offset + cut.length + cut.kerf,
                               color='black', alpha=0.6)

            if usage.remaining_length > 0:
                start = usage.original_length - usage.remaining_length
                color = 'red' if usage.scrap_length > 0 else 'green'
                label = "Sucata" if usage.scrap_length > 0 else "Retalho"
                ax.axvspan(start, usage.original_length, alpha=0.3, color=color,
                           label=f"{label}: {usage.remaining_length:.1f}mm")
                ax.legend(loc='upper right', fontsize=7)

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        plt.close(fig)
        return True

    def create_summary_chart(self, save_path: Optional[str] = None, show: bool = True) -> None:
        """Cria gráfico de resumo do plano"""
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

        names = [usage.source_id for usage in self.plan.sources]
        efficiencies = [usage.efficiency for usage in self.plan.sources]
        ax1.bar(names, efficiencies, color='skyblue', edgecolor='navy')
        ax1.set_title('Aproveitamento por Origem')
        ax1.set_ylabel('Aproveitamento (%)')
        ax1.set_ylim(0, 100)
        ax1.tick_params(axis='x', rotation=45)

        ax2.axis('off')
        summary_text = (
            f"PERFIL {self.plan.profile_group_id}\n\n"
            f"Aproveitamento: {self.plan.efficiency:.1f}%\n"
            f"Desperdício: {self.plan.total_waste_length:.1f} mm\n"
            f"  lâmina: {self.plan.total_kerf_loss:.1f} mm\n"
            f"  sucata: {self.plan.total_scrap_length:.1f} mm\n"
            f"Barras novas: {self.plan.total_stock_consumed}\n"
            f"Retalhos usados: {self.plan.total_remnants_consumed}\n"
            f"Retalhos gerados: {len(self.plan.produced_remnants)}\n"
            f"Peças sem origem: {len(self.plan.unassignable)}"
        )
        ax2.text(0.1, 0.9, summary_text, transform=ax2.transAxes, fontsize=12,
                 verticalalignment='top', fontfamily='monospace',
                 bbox=dict(boxstyle="round,pad=0.5", facecolor='lightblue', alpha=0.8))

        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        plt.close(fig)

    def _cuts_for(self, usage: SourceUsage):
        return [cut for cut in self.plan.assignments if cut.source_id == usage.source_id]


class CuttingPlanReporter:
    """Classe para geração de relatórios"""

    def __init__(self, plan: CuttingPlan):
        self.plan = plan

    def cuts_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Origem': cut.source_id,
                'Tipo': cut.source_kind.value,
                'Ordem': cut.order,
                'Peça': cut.piece_id,
                'Unidade': cut.instance,
                'Marca': cut.label or '',
                'Comprimento': cut.length,
                'Posição': cut.offset,
                'Kerf': cut.kerf,
            }
            for cut in self.plan.assignments
        ], columns=['Origem', 'Tipo', 'Ordem', 'Peça', 'Unidade', 'Marca', 'Comprimento', 'Posição', 'Kerf'])

    def sources_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {
                'Origem': usage.source_id,
                'Tipo': usage.source_kind.value,
                'Comprimento': usage.original_length,
                'Peças': usage.pieces,
                'Usado': usage.used_length,
                'Lâmina': usage.kerf_loss,
                'Sobra': usage.remaining_length,
                'Sucata': usage.scrap_length,
                'Aproveitamento': round(usage.efficiency, 2),
            }
            for usage in self.plan.sources
        ], columns=['Origem', 'Tipo', 'Comprimento', 'Peças', 'Usado', 'Lâmina', 'Sobra', 'Sucata', 'Aproveitamento'])

    def remnants_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {'Origem': r.origin_source_id, 'Tipo': r.origin_kind.value, 'Comprimento': r.length}
            for r in self.plan.produced_remnants
        ], columns=['Origem', 'Tipo', 'Comprimento'])

    def unassigned_frame(self) -> pd.DataFrame:
        return pd.DataFrame([
            {'Peça': u.piece_id, 'Unidade': u.instance, 'Marca': u.label or '', 'Comprimento': u.length}
            for u in self.plan.unassignable
        ], columns=['Peça', 'Unidade', 'Marca', 'Comprimento'])

    def generate_text_report(self) -> str:
        """Gera relatório em formato texto"""
        plan = self.plan
        report = []
        report.append("=" * 60)
        report.append(f"PLANO DE CORTE - PERFIL {plan.profile_group_id}")
        report.append("=" * 60)
        report.append("")
        report.append("RESUMO GERAL:")
        report.append(f"  • Aproveitamento: {plan.efficiency:.1f}%")
        report.append(f"  • Desperdício Total: {plan.total_waste_length:.1f} mm"
                      f" (lâmina {plan.total_kerf_loss:.1f}, sucata {plan.total_scrap_length:.1f})")
        report.append(f"  • Barras Novas: {plan.total_stock_consumed}")
        report.append(f"  • Retalhos Utilizados: {plan.total_remnants_consumed}")
        report.append("")

        report.append("DETALHES POR ORIGEM:")
        report.append("-" * 40)
        for i, usage in enumerate(plan.sources, 1):
            report.append(f"\n{i}. {usage.source_id} ({usage.source_kind.value}, {usage.original_length:g}mm):")
            report.append(f"   • Aproveitamento: {usage.efficiency:.1f}%")
            report.append(f"   • Sobra: {usage.remaining_length:.1f} mm")
            for cut in plan.assignments:
                if cut.source_id == usage.source_id:
                    report.append(f"     {cut.order}. {cut.label or cut.piece_id}: {cut.length:g}mm (pos: {cut.offset:g}mm)")

        if plan.produced_remnants:
            report.append("\nRETALHOS GERADOS:")
            report.append("-" * 30)
            for remnant in plan.produced_remnants:
                report.append(f"  • {remnant.length:.1f}mm (Origem: {remnant.origin_source_id})")

        if plan.unassignable:
            report.append("\nSEM ESTOQUE - COMPRAR MATERIAL:")
            report.append("-" * 30)
            for unit in plan.unassignable:
                report.append(f"  • {unit.label or unit.piece_id} #{unit.instance}: {unit.length:g}mm")

        report.append("\n" + "=" * 60)
        return "\n".join(report)

    def generate_csv_report(self, file_path: str) -> List[Path]:
        """Gera relatórios CSV (cortes, origens, retalhos, pendências)"""
        written = []
        for suffix, frame in (
            ("cortes", self.cuts_frame()),
            ("origens", self.sources_frame()),
            ("retalhos", self.remnants_frame()),
            ("pendencias", self.unassigned_frame()),
        ):
            path = Path(f"{file_path}_{suffix}.csv")
            frame.to_csv(path, index=False, encoding='utf-8')
            written.append(path)
        return written

    def generate_json_report(self, file_path: str) -> None:
        """Gera relatório em formato JSON"""
        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump(self.plan.model_dump(mode='json'), f, indent=2, ensure_ascii=False)

    def generate_html_report(self, file_path: Optional[str] = None) -> str:
        """Gera relatório em formato HTML"""
        plan = self.plan
        html = f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <title>Plano de Corte - {plan.profile_group_id}</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 20px; }}
        table {{ border-collapse: collapse; margin-bottom: 20px; }}
        th, td {{ border: 1px solid #ccc; padding: 4px 8px; }}
    </style>
</head>
<body>
    <h1>Plano de Corte - Perfil {plan.profile_group_id}</h1>
    <p><strong>Aproveitamento:</strong> {plan.efficiency:.1f}% |
       <strong>Desperdício:</strong> {plan.total_waste_length:.1f}mm |
       <strong>Barras novas:</strong> {plan.total_stock_consumed}</p>
    <h2>Origens</h2>
    {self.sources_frame().to_html(index=False)}
    <h2>Cortes</h2>
    {self.cuts_frame().to_html(index=False)}
    <h2>Retalhos Gerados</h2>
    {self.remnants_frame().to_html(index=False)}
    <h2>Pendências</h2>
    {self.unassigned_frame().to_html(index=False)}
    <p>Gerado em {pd.Timestamp.now().strftime("%d/%m/%Y %H:%M:%S")}</p>
</body>
</html>
"""
        if file_path:
            with open(file_path, 'w', encoding='utf-8') as f:
                f.write(html)
        return html


def export_plan(plan: CuttingPlan, output_dir: str, formats: List[str] = None) -> Path:
    """
    Exporta um plano em múltiplos formatos

    Args:
        plan: Plano de corte
        output_dir: Diretório de saída
        formats: Lista de formatos (txt, csv, json, html)

    Returns:
        Caminho base dos arquivos gerados
    """
    if formats is None:
        formats = ["txt", "csv", "json", "html"]

    Path(output_dir).mkdir(parents=True, exist_ok=True)

    reporter = CuttingPlanReporter(plan)
    base_path = Path(output_dir) / f"plano_{plan.profile_group_id}"

    if "txt" in formats:
        with open(f"{base_path}.txt", 'w', encoding='utf-8') as f:
            f.write(reporter.generate_text_report())

    if "csv" in formats:
        reporter.generate_csv_report(str(base_path))

    if "json" in formats:
        reporter.generate_json_report(f"{base_path}.json")

    if "html" in formats:
        reporter.generate_html_report(f"{base_path}.html")

    logger.info("Relatórios exportados para: %s", output_dir)
    return base_path


def create_visualization(plan: CuttingPlan, output_dir: str, show: bool = False) -> None:
    """
    Cria visualizações do plano

    Args:
        plan: Plano de corte
        output_dir: Diretório de saída
        show: Se deve mostrar os gráficos
    """
    Path(output_dir).mkdir(parents=True, exist_ok=True)

    visualizer = CuttingPlanVisualizer(plan)
    base_path = Path(output_dir) / f"plano_{plan.profile_group_id}"

    visualizer.plot_bars(f"{base_path}_barras.png", show=show)
    visualizer.create_summary_chart(f"{base_path}_resumo.png", show=show)
