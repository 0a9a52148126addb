"""Base dos calculadores de simulação"""

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .ruleset import RuleSetKey


class BaseCalculator(ABC):
    """Calculador de um tipo de simulador

    Implementações são puras: o resultado depende apenas da entrada e do
    payload recebidos. Não há I/O, relógio ou estado entre chamadas.

    Attributes:
        kind: tipo de simulador atendido
    """

    kind: RuleSetKey

    @abstractmethod
    def calculate(self, entrada: Any, config: Mapping[str, Any]) -> Any:
        """Executa a simulação

        Args:
            entrada: dados informados pelo usuário
            config: payload resolvido (ativo ou padrão)
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value})"
