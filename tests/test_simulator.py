"""Despacho por simulador e consistência dos resultados"""

from decimal import Decimal

import pytest

from simuladores.core import (
    CALCULATORS,
    BreakdownItem,
    FeriasInput,
    HonorariosInput,
    RescisaoInput,
    RuleSetKey,
    SimplesInput,
    SimulationResult,
    audit_result,
    calculate,
    get_calculator,
    get_default,
)
from simuladores.core.calculation_trace import MINUS, PLUS


MONETARY_CASES = [
    (RuleSetKey.FERIAS, FeriasInput(salario_base="3.456,78", dias_abono=7)),
    (RuleSetKey.RESCISAO, RescisaoInput(
        salario_base=2345.67, tipo_rescisao="PEDIDO_DEMISSAO", dias_trabalhados_mes=11,
        meses_decimo_terceiro=7, dias_ferias_vencidas=13
    )),
    (RuleSetKey.RESCISAO, RescisaoInput(
        salario_base=4321, anos_servico=7, dias_trabalhados_mes=29, meses_decimo_terceiro=11,
        dias_ferias_vencidas=30, saldo_fgts=23456.78
    )),
    (RuleSetKey.HONORARIOS, HonorariosInput(
        faturamento=87654.32, regime="LUCRO_PRESUMIDO", segmento="PRESTADOR",
        num_funcionarios=13, sistema_financeiro=True, ponto_eletronico=True
    )),
    (RuleSetKey.SIMPLES_DAS, SimplesInput(annex="V", receita_12m=1234567.89, receita_mes=98765.43)),
]


class TestDispatch:

    def test_every_key_has_calculator(self):
        assert set(CALCULATORS) == set(RuleSetKey)
        for key, calculator in CALCULATORS.items():
            assert calculator.kind == key

    def test_get_calculator_accepts_string(self):
        assert get_calculator("ferias") is CALCULATORS[RuleSetKey.FERIAS]

    def test_wrong_input_type(self):
        with pytest.raises(TypeError):
            calculate(RuleSetKey.FERIAS, HonorariosInput(faturamento=1000), get_default(RuleSetKey.FERIAS))


class TestTotalMatchesBreakdown:
    """total == soma com sinal do detalhamento"""

    @pytest.mark.parametrize("key, entrada", MONETARY_CASES)
    def test_total_is_signed_sum(self, key, entrada):
        result = calculate(key, entrada, get_default(key))

        expected = sum(
            (item.amount if item.sign == PLUS else -item.amount for item in result.breakdown),
            Decimal('0')
        )
        assert result.total == expected
        assert all(item.amount >= 0 for item in result.breakdown)
        assert audit_result(result) == []


class TestSimulationResult:

    def test_from_items(self):
        result = SimulationResult.from_items(RuleSetKey.FERIAS, [
            BreakdownItem("A", Decimal('1'), "a", Decimal('10.00')),
            BreakdownItem("B", Decimal('1'), "b", Decimal('2.50'), sign=MINUS),
        ])

        assert result.total == Decimal('7.50')
        assert result.to_dict()['total'] == "7.50"
        assert "Total" in result.get_summary()

    def test_negative_amount_is_rejected(self):
        with pytest.raises(ValueError):
            BreakdownItem("A", Decimal('1'), "a", Decimal('-1'))

    def test_invalid_sign_is_rejected(self):
        with pytest.raises(ValueError):
            BreakdownItem("A", Decimal('1'), "a", Decimal('1'), sign="*")

    def test_auditor_detects_wrong_total(self):
        item = BreakdownItem("A", Decimal('1'), "a", Decimal('10.00'))
        result = SimulationResult(kind=RuleSetKey.FERIAS, total=Decimal('11.00'), breakdown=[item])

        assert len(audit_result(result)) == 1
