"""SimplesCalculator: alíquota efetiva do Simples Nacional por faixa de RBT12

alíquota efetiva = (RBT12 × alíquota nominal − parcela a deduzir) / RBT12
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..logging_config import log
from .base_calculator import BaseCalculator
from .calculation_trace import MINUS, BreakdownItem, SimulationResult
from .money import (
    CENT, ZERO, format_brl, format_percent, parse_amount, round_money, to_decimal,
)
from .ruleset import RuleSetKey


@dataclass(frozen=True)
class SimplesBand:
    """Faixa de um anexo: min <= RBT12 <= max"""
    min: Decimal
    max: Decimal
    aliquota_nominal: Decimal
    deducao: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SimplesBand":
        return cls(
            min=to_decimal(data.get('min')),
            max=to_decimal(data.get('max')),
            aliquota_nominal=to_decimal(data.get('aliquota_nominal')),
            deducao=to_decimal(data.get('deducao')),
        )

    def contains(self, revenue: Decimal) -> bool:
        return self.min <= revenue <= self.max

    def to_dict(self) -> dict:
        return {
            'min': str(self.min),
            'max': str(self.max),
            'aliquota_nominal': str(self.aliquota_nominal),
            'deducao': str(self.deducao),
        }


@dataclass(frozen=True)
class SimplesInput:
    """Entrada do Simples DAS

    Attributes:
        annex: anexo (I a V)
        receita_12m: receita bruta dos últimos 12 meses (RBT12)
        receita_mes: receita do mês de apuração, para o valor do DAS
    """
    annex: Any
    receita_12m: Any
    receita_mes: Any = None


@dataclass(frozen=True)
class BracketNotFound:
    """Falha de busca de faixa

    Indica problema na tabela (lacuna, sobreposição ou anexo ausente) ou
    receita acima do teto. Nunca se usa uma faixa vizinha no lugar.
    """
    annex: str
    revenue: Decimal
    message: str

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {
            'ok': False,
            'error': 'bracket_not_found',
            'annex': self.annex,
            'revenue': str(self.revenue),
            'message': self.message,
        }


def matching_bands(table: Sequence[Mapping[str, Any]], revenue: Decimal) -> List[SimplesBand]:
    """Todas as faixas que contêm a receita (arredondada ao centavo)"""
    bands = [SimplesBand.from_dict(row) for row in table if isinstance(row, Mapping)]
    # fora do intervalo da tabela não há faixa a buscar nem valor a arredondar
    if not bands:
        return []
    lowest = min(band.min for band in bands)
    highest = max(band.max for band in bands)
    if revenue < lowest - CENT or revenue > highest + CENT:
        return []
    revenue = revenue.quantize(CENT)
    return [band for band in bands if band.contains(revenue)]


def find_band(table: Sequence[Mapping[str, Any]], revenue: Decimal) -> Optional[SimplesBand]:
    """Faixa única que contém a receita, ou None"""
    bands = matching_bands(table, revenue)
    return bands[0] if len(bands) == 1 else None


def effective_rate(band: SimplesBand, revenue: Decimal) -> Decimal:
    """Alíquota efetiva da faixa; receita zero resulta em zero"""
    if revenue <= 0:
        return ZERO
    return max((revenue * band.aliquota_nominal - band.deducao) / revenue, ZERO)


class SimplesCalculator(BaseCalculator):
    """Imposto anual estimado e alíquota efetiva do Simples Nacional

    O total do resultado é o imposto sobre o RBT12 (bruto menos parcela a
    deduzir). O DAS do mês fica em details['das_mensal'] quando a receita do
    mês é informada.
    """

    kind = RuleSetKey.SIMPLES_DAS

    def calculate(
        self,
        entrada: SimplesInput,
        config: Mapping[str, Any]
    ) -> Union[SimulationResult, BracketNotFound]:
        annex = str(getattr(entrada.annex, 'value', entrada.annex)).strip().upper()
        receita = parse_amount(entrada.receita_12m)

        tables = config.get('tables') or {}
        table = tables.get(annex) if isinstance(tables, Mapping) else None
        if not table:
            log.warning(f"Simples DAS: anexo {annex} ausente na tabela")
            return BracketNotFound(annex, receita, f"Anexo {annex} não configurado na tabela do Simples.")

        bands = matching_bands(table, receita)
        if len(bands) != 1:
            message = (
                f"Receita {format_brl(receita)} fora das faixas do Anexo {annex}."
                if not bands else
                f"Faixas sobrepostas no Anexo {annex} para {format_brl(receita)}."
            )
            log.warning(f"Simples DAS: {message}")
            return BracketNotFound(annex, receita, message)

        band = bands[0]
        items: List[BreakdownItem] = []

        bruto = round_money(receita * band.aliquota_nominal)
        items.append(BreakdownItem(
            label="RBT12 × Alíquota Nominal",
            base=receita,
            formula_text=f"{format_brl(receita)} × {format_percent(band.aliquota_nominal)}",
            amount=bruto
        ))

        deducao = min(round_money(band.deducao), bruto)
        if deducao > 0:
            items.append(BreakdownItem(
                label="Parcela a Deduzir",
                base=band.deducao,
                formula_text=(
                    f"{format_brl(band.deducao)}" if deducao == round_money(band.deducao)
                    else f"MIN({format_brl(band.deducao)}, {format_brl(bruto)})"
                ),
                amount=deducao,
                sign=MINUS
            ))

        rate = effective_rate(band, receita)
        details = {
            'annex': annex,
            'band': band.to_dict(),
            'effective_rate': rate,
            'das_mensal': None,
        }
        if entrada.receita_mes is not None:
            details['das_mensal'] = round_money(parse_amount(entrada.receita_mes) * rate)

        result = SimulationResult.from_items(self.kind, items, details=details)
        log.debug(f"Simples DAS: anexo={annex}, RBT12={receita}, alíquota efetiva={rate}")
        return result
