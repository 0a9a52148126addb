"""FeriasCalculator: simulação de férias com abono pecuniário"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, List, Mapping

from ..logging_config import log
from .base_calculator import BaseCalculator
from .calculation_trace import BreakdownItem, SimulationResult
from .money import format_brl, parse_amount, parse_days, round_money
from .ruleset import RuleSetKey


@dataclass(frozen=True)
class FeriasInput:
    """Entrada do simulador de férias

    Attributes:
        salario_base: salário mensal informado
        dias_abono: dias de férias que o empregado quer vender
    """
    salario_base: Any
    dias_abono: Any = 0


class FeriasCalculator(BaseCalculator):
    """Férias de 30 dias + 1/3 constitucional + abono pecuniário

    Parâmetros do payload FERIAS:
        tercoConstitucional: soma salário ÷ 3
        limiteDiasAbono: teto de dias vendidos
    """

    kind = RuleSetKey.FERIAS

    def calculate(self, entrada: FeriasInput, config: Mapping[str, Any]) -> SimulationResult:
        salario = parse_amount(entrada.salario_base)
        items: List[BreakdownItem] = []
        warnings: List[str] = []

        items.append(BreakdownItem(
            label="Férias (30 dias)",
            base=salario,
            formula_text="Salário informado",
            amount=round_money(salario)
        ))

        if bool(config.get('tercoConstitucional', False)):
            items.append(BreakdownItem(
                label="1/3 Constitucional",
                base=salario,
                formula_text=f"{format_brl(salario)} ÷ 3",
                amount=round_money(salario / 3)
            ))

        dias_abono = self._dias_abono(entrada, config, warnings)
        valor_diario = salario / 30
        if dias_abono > 0:
            items.append(BreakdownItem(
                label="Abono pecuniário",
                base=Decimal(dias_abono),
                formula_text=f"{dias_abono} dias × ({format_brl(salario)} ÷ 30)",
                amount=round_money(valor_diario * dias_abono)
            ))

        result = SimulationResult.from_items(
            self.kind,
            items,
            details={'dias_abono': dias_abono, 'valor_diario': round_money(valor_diario)},
            warnings=warnings
        )
        log.debug(f"Férias calculadas: total={result.total}, abono={dias_abono} dias")
        return result

    def _dias_abono(
        self,
        entrada: FeriasInput,
        config: Mapping[str, Any],
        warnings: List[str]
    ) -> int:
        """Dias de abono limitados ao teto do payload"""
        solicitados = parse_days(entrada.dias_abono)
        limite = parse_days(config.get('limiteDiasAbono', 0))

        if solicitados > limite:
            warnings.append(
                f"Abono limitado a {limite} dias (solicitado: {solicitados} dias)."
            )
            return limite
        return solicitados
