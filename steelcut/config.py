"""
Configuração do SteelCut
"""

import os
from typing import Mapping, Optional
from pydantic import BaseModel, Field

ENV_PREFIX = "STEELCUT_"


class Settings(BaseModel):
    """Parâmetros padrão de corte e do servidor"""
    kerf: float = Field(3.0, ge=0, description="Espessura da lâmina (mm)")
    min_usable_remnant: float = Field(50.0, ge=0, description="Menor retalho aproveitável (mm)")
    standard_stock_length: float = Field(12000.0, gt=0, description="Barra comercial para compra (mm)")
    api_host: str = Field("0.0.0.0", description="Endereço do servidor")
    api_port: int = Field(8000, description="Porta do servidor")
    log_level: str = Field("INFO", description="Nível de log")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Carrega a configuração a partir de variáveis STEELCUT_*

        Args:
            environ: Ambiente a ler (padrão: os.environ)

        Returns:
            Configuração validada
        """
        if environ is None:
            environ = os.environ
        values = {}
        for name in cls.model_fields:
            key = ENV_PREFIX + name.upper()
            if key in environ:
                values[name] = environ[key]
        return cls(**values)
