"""RescisaoCalculator: verbas rescisórias"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Mapping

from ..logging_config import log
from .base_calculator import BaseCalculator
from .calculation_trace import MINUS, BreakdownItem, SimulationResult
from .money import (
    ZERO, format_brl, format_number, format_percent, parse_amount, parse_days,
    round_money, to_decimal,
)
from .ruleset import RuleSetKey

# Lei 12.506/2011: aviso prévio proporcional limitado a 90 dias
LIMITE_DIAS_AVISO_PREVIO = Decimal(90)


class TipoRescisao(str, Enum):
    SEM_JUSTA_CAUSA = "SEM_JUSTA_CAUSA"
    COM_JUSTA_CAUSA = "COM_JUSTA_CAUSA"
    PEDIDO_DEMISSAO = "PEDIDO_DEMISSAO"
    ACORDO_MUTUO = "ACORDO_MUTUO"


@dataclass(frozen=True)
class RescisaoInput:
    """Entrada do simulador de rescisão

    Attributes:
        salario_base: salário mensal
        tipo_rescisao: modalidade de desligamento
        anos_servico: anos completos na empresa
        dias_trabalhados_mes: dias do mês de saída (saldo de salário)
        meses_decimo_terceiro: meses do ano para o 13º proporcional
        dias_ferias_vencidas: dias de férias vencidas não gozadas
        saldo_fgts: saldo depositado de FGTS (base da multa)
        aviso_previo_trabalhado: aviso cumprido em vez de indenizado
    """
    salario_base: Any
    tipo_rescisao: Any = TipoRescisao.SEM_JUSTA_CAUSA
    anos_servico: Any = 0
    dias_trabalhados_mes: Any = 0
    meses_decimo_terceiro: Any = 0
    dias_ferias_vencidas: Any = 0
    saldo_fgts: Any = 0
    aviso_previo_trabalhado: bool = False


class RescisaoCalculator(BaseCalculator):
    """Verbas rescisórias parametrizadas pelo payload RESCISAO

    Parâmetros:
        multaFgts: multa sobre o FGTS na dispensa sem justa causa
        multaAcordo: multa sobre o FGTS no acordo mútuo
        diasAvisoPrevioBase: dias de aviso prévio
        diasAvisoPrevioPorAno: acréscimo por ano de serviço
    """

    kind = RuleSetKey.RESCISAO

    def calculate(self, entrada: RescisaoInput, config: Mapping[str, Any]) -> SimulationResult:
        salario = parse_amount(entrada.salario_base)
        valor_diario = salario / 30
        warnings: List[str] = []
        tipo = self._tipo(entrada.tipo_rescisao, warnings)
        items: List[BreakdownItem] = []

        self._saldo_salario(entrada, salario, valor_diario, items)
        if tipo != TipoRescisao.COM_JUSTA_CAUSA:
            self._decimo_terceiro(entrada, salario, items)
        self._ferias_vencidas(entrada, salario, valor_diario, items)

        dias_aviso = self._dias_aviso(entrada, config)
        if tipo == TipoRescisao.SEM_JUSTA_CAUSA and not entrada.aviso_previo_trabalhado:
            items.append(BreakdownItem(
                label="Aviso Prévio Indenizado",
                base=dias_aviso,
                formula_text=f"{format_number(dias_aviso)} dias × ({format_brl(salario)} ÷ 30)",
                amount=round_money(valor_diario * dias_aviso)
            ))

        self._multa_fgts(entrada, tipo, config, items)

        if tipo == TipoRescisao.PEDIDO_DEMISSAO and not entrada.aviso_previo_trabalhado:
            self._desconto_aviso(salario, valor_diario, config, items)

        result = SimulationResult.from_items(
            self.kind,
            items,
            details={
                'tipo_rescisao': tipo.value,
                'dias_aviso_previo': dias_aviso,
                'anos_servico': parse_days(entrada.anos_servico),
            },
            warnings=warnings
        )
        log.debug(f"Rescisão calculada: tipo={tipo.value}, total={result.total}")
        return result

    def _tipo(self, value: Any, warnings: List[str]) -> TipoRescisao:
        try:
            return TipoRescisao(str(getattr(value, 'value', value)).strip().upper())
        except ValueError:
            warnings.append(
                f"Tipo de rescisão desconhecido ({value!r}); considerado sem justa causa."
            )
            return TipoRescisao.SEM_JUSTA_CAUSA

    def _saldo_salario(self, entrada, salario, valor_diario, items) -> None:
        dias = min(parse_days(entrada.dias_trabalhados_mes), 30)
        if dias == 0:
            return
        items.append(BreakdownItem(
            label="Saldo de Salário",
            base=Decimal(dias),
            formula_text=f"{dias} dias × ({format_brl(salario)} ÷ 30)",
            amount=round_money(valor_diario * dias)
        ))

    def _decimo_terceiro(self, entrada, salario, items) -> None:
        meses = min(parse_days(entrada.meses_decimo_terceiro), 12)
        if meses == 0:
            return
        items.append(BreakdownItem(
            label="13º Proporcional",
            base=Decimal(meses),
            formula_text=f"{meses} meses × ({format_brl(salario)} ÷ 12)",
            amount=round_money(salario / 12 * meses)
        ))

    def _ferias_vencidas(self, entrada, salario, valor_diario, items) -> None:
        dias = parse_days(entrada.dias_ferias_vencidas)
        if dias == 0:
            return
        valor_ferias = round_money(valor_diario * dias)
        items.append(BreakdownItem(
            label="Férias Vencidas",
            base=Decimal(dias),
            formula_text=f"{dias} dias × ({format_brl(salario)} ÷ 30)",
            amount=valor_ferias
        ))
        items.append(BreakdownItem(
            label="1/3 Constitucional",
            base=valor_ferias,
            formula_text=f"{format_brl(valor_ferias)} ÷ 3",
            amount=round_money(valor_ferias / 3)
        ))

    def _dias_aviso(self, entrada: RescisaoInput, config: Mapping[str, Any]) -> Decimal:
        """diasAvisoPrevioBase + diasAvisoPrevioPorAno × anos, até 90 dias"""
        base = max(to_decimal(config.get('diasAvisoPrevioBase', 30)), ZERO)
        por_ano = max(to_decimal(config.get('diasAvisoPrevioPorAno', 0)), ZERO)
        anos = parse_days(entrada.anos_servico)
        return min(base + por_ano * anos, LIMITE_DIAS_AVISO_PREVIO)

    def _multa_fgts(self, entrada, tipo, config, items) -> None:
        if tipo == TipoRescisao.SEM_JUSTA_CAUSA:
            taxa = to_decimal(config.get('multaFgts', 0))
            label = f"Multa {format_percent(taxa)} FGTS"
        elif tipo == TipoRescisao.ACORDO_MUTUO:
            taxa = to_decimal(config.get('multaAcordo', 0))
            label = f"Multa {format_percent(taxa)} FGTS (Acordo)"
        else:
            return

        saldo = parse_amount(entrada.saldo_fgts)
        taxa = max(taxa, ZERO)
        if saldo == 0 or taxa == 0:
            return
        items.append(BreakdownItem(
            label=label,
            base=saldo,
            formula_text=f"{format_percent(taxa)} × {format_brl(saldo)}",
            amount=round_money(saldo * taxa)
        ))

    def _desconto_aviso(self, salario, valor_diario, config, items) -> None:
        """Pedido de demissão sem cumprir aviso: desconta os dias de aviso

        O desconto fica limitado aos créditos já apurados.
        """
        dias = max(to_decimal(config.get('diasAvisoPrevioBase', 30)), ZERO)
        creditos = sum((item.signed_amount for item in items), ZERO)
        desconto = min(round_money(valor_diario * dias), creditos)
        if desconto <= 0:
            return
        items.append(BreakdownItem(
            label="Desconto Aviso Prévio não cumprido",
            base=dias,
            formula_text=(
                f"MIN({format_number(dias)} dias × ({format_brl(salario)} ÷ 30), "
                f"{format_brl(creditos)})"
            ),
            amount=desconto,
            sign=MINUS
        ))
