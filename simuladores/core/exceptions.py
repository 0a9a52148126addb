"""Exceções de domínio dos simuladores"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .schema_registry import ValidationResult


class SimuladoresError(Exception):
    """Erro base do pacote"""


class UnknownRuleSetKeyError(SimuladoresError, ValueError):
    """Chave de simulador desconhecida"""

    def __init__(self, key: object):
        self.key = key
        super().__init__(f"Chave de simulador desconhecida: {key!r}")


class RuleSetValidationError(SimuladoresError):
    """Payload rejeitado pelo registro de schemas na gravação

    Attributes:
        result: ValidationResult com todas as violações encontradas
    """

    def __init__(self, result: "ValidationResult"):
        self.result = result
        fields = ", ".join(issue.field for issue in result.errors)
        super().__init__(f"Payload inválido para {result.key.value}: {fields}")


class RuleSetNotFoundError(SimuladoresError):
    """RuleSet inexistente (ou fora do workspace)"""

    def __init__(self, ruleset_id: int, workspace_id: Optional[str] = None):
        self.ruleset_id = ruleset_id
        self.workspace_id = workspace_id
        super().__init__(f"RuleSet {ruleset_id} não encontrado")
