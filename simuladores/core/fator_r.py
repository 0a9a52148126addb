"""Fator R: escolha do anexo do Simples pela relação folha / receita"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping

from ..logging_config import log
from .base_calculator import BaseCalculator
from .money import ZERO, format_brl, format_percent, parse_amount, to_decimal
from .ruleset import RuleSetKey


@dataclass(frozen=True)
class FatorRInput:
    """Entrada do Fator R

    Attributes:
        folha_12m: folha de salários dos últimos 12 meses (com encargos)
        receita_12m: receita bruta dos últimos 12 meses (RBT12)
    """
    folha_12m: Any
    receita_12m: Any


@dataclass(frozen=True)
class FatorRResult:
    """Anexo escolhido pelo Fator R

    Attributes:
        ratio: folha_12m / receita_12m (0 quando não há receita)
        threshold: limite configurado
        annex: anexo aplicável
        branch: "ge" (ratio >= threshold) ou "lt"
    """
    folha_12m: Decimal
    receita_12m: Decimal
    ratio: Decimal
    threshold: Decimal
    annex: str
    branch: str

    @property
    def ok(self) -> bool:
        return True

    @property
    def formula_text(self) -> str:
        operator = "≥" if self.branch == "ge" else "<"
        return (
            f"{format_brl(self.folha_12m)} ÷ {format_brl(self.receita_12m)} = "
            f"{format_percent(self.ratio.quantize(Decimal('0.0001')))} {operator} "
            f"{format_percent(self.threshold)} → Anexo {self.annex}"
        )

    def to_dict(self) -> dict:
        return {
            'kind': RuleSetKey.FATOR_R.value,
            'folha_12m': str(self.folha_12m),
            'receita_12m': str(self.receita_12m),
            'ratio': str(self.ratio),
            'threshold': str(self.threshold),
            'annex': self.annex,
            'branch': self.branch,
            'formula_text': self.formula_text,
        }


class FatorRCalculator(BaseCalculator):
    """Compara o Fator R com o limite do payload FATOR_R

    Empate vai para o ramo superior: ratio == threshold escolhe annex_if_ge.
    """

    kind = RuleSetKey.FATOR_R

    def calculate(self, entrada: FatorRInput, config: Mapping[str, Any]) -> FatorRResult:
        folha = parse_amount(entrada.folha_12m)
        receita = parse_amount(entrada.receita_12m)
        ratio = folha / receita if receita > 0 else ZERO
        threshold = max(to_decimal(config.get('threshold', 0.28)), ZERO)

        if ratio >= threshold:
            annex, branch = str(config.get('annex_if_ge', 'III')), "ge"
        else:
            annex, branch = str(config.get('annex_if_lt', 'V')), "lt"

        log.debug(f"Fator R: ratio={ratio}, threshold={threshold}, anexo={annex}")
        return FatorRResult(
            folha_12m=folha,
            receita_12m=receita,
            ratio=ratio,
            threshold=threshold,
            annex=annex,
            branch=branch
        )
