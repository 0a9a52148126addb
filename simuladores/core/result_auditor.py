"""Verificação de consistência de resultados de simulação"""

from decimal import Decimal
from typing import List

from .calculation_trace import MINUS, PLUS, SimulationResult

TOLERANCE = Decimal('0.000001')


def audit_result(result: SimulationResult) -> List[str]:
    """Problemas encontrados no resultado (lista vazia se consistente)

    Verifica que o total é a soma com sinal das linhas e que nenhuma linha
    tem valor negativo ou sinal inválido.
    """
    problems = []

    for index, item in enumerate(result.breakdown):
        if item.amount < 0:
            problems.append(f"Linha {index} ({item.label}) com valor negativo: {item.amount}")
        if item.sign not in (PLUS, MINUS):
            problems.append(f"Linha {index} ({item.label}) com sinal inválido: {item.sign!r}")

    difference = abs(result.total - result.signed_sum())
    if difference > TOLERANCE:
        problems.append(
            f"Total {result.total} difere da soma do detalhamento {result.signed_sum()}"
        )

    return problems
