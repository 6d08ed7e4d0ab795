"""
Exceções do SteelCut
"""


class SteelCutError(Exception):
    """Erro base do SteelCut"""


class InvalidInputError(SteelCutError, ValueError):
    """Entrada malformada: comprimentos não positivos, kerf negativo ou perfis misturados"""


class RecordNotFoundError(SteelCutError, KeyError):
    """Item de estoque ou retalho inexistente"""


class PlanConflictError(SteelCutError):
    """Uma origem do plano foi consumida por outro processo antes da aplicação"""

    def __init__(self, source_ids):
        self.source_ids = list(source_ids)
        super().__init__(
            "Origens não disponíveis: " + ", ".join(self.source_ids)
            + ". Execute a otimização novamente."
        )


class DuplicateRecordError(SteelCutError):
    """Registro com o mesmo identificador já existe"""
