"""HonorariosCalculator: proposta de honorários contábeis"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping, Optional, Type, TypeVar

from ..logging_config import log
from .base_calculator import BaseCalculator
from .calculation_trace import MINUS, PLUS, BreakdownItem, SimulationResult
from .money import (
    ZERO, format_brl, format_number, format_percent, parse_amount, parse_days,
    round_money, to_decimal,
)
from .ruleset import RuleSetKey


class RegimeTributario(str, Enum):
    SIMPLES = "SIMPLES"
    LUCRO_PRESUMIDO = "LUCRO_PRESUMIDO"
    LUCRO_REAL = "LUCRO_REAL"


class SegmentoEmpresa(str, Enum):
    COMERCIO = "COMERCIO"
    PRESTADOR = "PRESTADOR"
    INDUSTRIA = "INDUSTRIA"


E = TypeVar('E', bound=Enum)


@dataclass(frozen=True)
class HonorariosInput:
    """Entrada do simulador de honorários

    Attributes:
        faturamento: faturamento mensal do cliente
        regime: regime tributário
        segmento: segmento de atuação
        num_funcionarios: funcionários na folha
        sistema_financeiro: cliente usa o sistema financeiro do escritório
        ponto_eletronico: cliente usa o ponto eletrônico do escritório
    """
    faturamento: Any
    regime: Any = RegimeTributario.SIMPLES
    segmento: Any = SegmentoEmpresa.COMERCIO
    num_funcionarios: Any = 0
    sistema_financeiro: bool = False
    ponto_eletronico: bool = False


class HonorariosCalculator(BaseCalculator):
    """Honorário mensal

    Ordem de composição:
        1. valor base = MAX(baseMin, faturamento × regimePercentual[regime])
        2. ajuste de segmento = valor base × (fatorSegmento[segmento] − 1)
        3. adicional = funcionários × adicFuncionario
        4. subtotal = 1 + 2 + 3
        5. cada desconto habilitado = subtotal × taxa (subtraído)
    """

    kind = RuleSetKey.HONORARIOS

    def calculate(self, entrada: HonorariosInput, config: Mapping[str, Any]) -> SimulationResult:
        warnings: List[str] = []
        regime = self._parse_enum(RegimeTributario, entrada.regime, RegimeTributario.SIMPLES, warnings)
        segmento = self._parse_enum(SegmentoEmpresa, entrada.segmento, SegmentoEmpresa.COMERCIO, warnings)
        faturamento = parse_amount(entrada.faturamento)
        funcionarios = parse_days(entrada.num_funcionarios)
        items: List[BreakdownItem] = []

        # 1. Valor base
        base_min = parse_amount(config.get('baseMin', 0))
        percentual = self._lookup(config, 'regimePercentual', regime.value, ZERO, warnings)
        valor_base = round_money(max(base_min, faturamento * percentual))
        items.append(BreakdownItem(
            label="Valor Base",
            base=faturamento,
            formula_text=(
                f"MAX({format_brl(base_min)}, {format_percent(percentual)} × {format_brl(faturamento)})"
            ),
            amount=valor_base
        ))

        # 2. Ajuste do segmento
        fator = self._lookup(config, 'fatorSegmento', segmento.value, Decimal(1), warnings)
        ajuste = round_money(valor_base * (fator - 1))
        if ajuste != 0:
            items.append(BreakdownItem(
                label=f"Ajuste {segmento.value.capitalize()}",
                base=valor_base,
                formula_text=f"{format_brl(valor_base)} × ({format_number(fator)} − 1)",
                amount=abs(ajuste),
                sign=PLUS if ajuste > 0 else MINUS
            ))

        # 3. Adicional por funcionário
        adicional = parse_amount(config.get('adicFuncionario', 0))
        if funcionarios > 0 and adicional > 0:
            items.append(BreakdownItem(
                label="Adicional Funcionários",
                base=Decimal(funcionarios),
                formula_text=f"{funcionarios} × {format_brl(adicional)}",
                amount=round_money(adicional * funcionarios)
            ))

        # 4/5. Descontos sobre o subtotal
        subtotal = sum((item.signed_amount for item in items), ZERO)
        if entrada.sistema_financeiro:
            self._desconto(
                "Desconto Sistema Financeiro", config.get('descontoSistemaFinanceiro', 0), subtotal, items
            )
        if entrada.ponto_eletronico:
            self._desconto(
                "Desconto Ponto Eletrônico", config.get('descontoPontoEletronico', 0), subtotal, items
            )

        result = SimulationResult.from_items(
            self.kind,
            items,
            details={
                'regime': regime.value,
                'segmento': segmento.value,
                'valor_base': valor_base,
                'subtotal': subtotal,
            },
            warnings=warnings
        )
        result.details['total_anual'] = result.total * 12
        log.debug(f"Honorários calculados: regime={regime.value}, total={result.total}")
        return result

    def _desconto(self, label: str, taxa: Any, subtotal: Decimal, items: List[BreakdownItem]) -> None:
        taxa = min(max(to_decimal(taxa), ZERO), Decimal(1))
        valor = round_money(subtotal * taxa)
        if valor <= 0:
            return
        items.append(BreakdownItem(
            label=label,
            base=subtotal,
            formula_text=f"{format_percent(taxa)} × {format_brl(subtotal)}",
            amount=valor,
            sign=MINUS
        ))

    def _lookup(
        self,
        config: Mapping[str, Any],
        table: str,
        key: str,
        default: Decimal,
        warnings: List[str]
    ) -> Decimal:
        """Valor de uma tabela do payload (regimePercentual, fatorSegmento)"""
        values = config.get(table) or {}
        if key not in values:
            warnings.append(f"{table} sem valor para {key}; usado {format_number(default)}.")
            return default
        return max(to_decimal(values[key]), ZERO)

    def _parse_enum(
        self,
        enum_cls: Type[E],
        value: Any,
        default: E,
        warnings: List[str]
    ) -> E:
        raw: Optional[str] = getattr(value, 'value', value)
        try:
            return enum_cls(str(raw).strip().upper())
        except ValueError:
            warnings.append(f"{enum_cls.__name__} desconhecido ({raw!r}); usado {default.value}.")
            return default
