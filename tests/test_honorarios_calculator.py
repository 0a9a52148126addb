"""HonorariosCalculator"""

from decimal import Decimal

from simuladores.core import (
    HonorariosCalculator,
    HonorariosInput,
    RegimeTributario,
    RuleSetKey,
    SegmentoEmpresa,
    audit_result,
    get_default,
)
from simuladores.core.calculation_trace import MINUS, PLUS


class TestHonorariosCalculator:

    def setup_method(self):
        self.calculator = HonorariosCalculator()
        self.config = get_default(RuleSetKey.HONORARIOS)

    def test_percentage_above_minimum(self):
        """50.000 × 1,2% = 600; 3 funcionários = 120; desconto 5% de 720 = 36"""
        result = self.calculator.calculate(
            HonorariosInput(
                faturamento=50000,
                regime=RegimeTributario.SIMPLES,
                segmento=SegmentoEmpresa.COMERCIO,
                num_funcionarios=3,
                sistema_financeiro=True
            ),
            self.config
        )

        assert [(item.label, item.amount, item.sign) for item in result.breakdown] == [
            ("Valor Base", Decimal('600.00'), PLUS),
            ("Adicional Funcionários", Decimal('120.00'), PLUS),
            ("Desconto Sistema Financeiro", Decimal('36.00'), MINUS),
        ]
        assert result.total == Decimal('684.00')
        assert result.details['subtotal'] == Decimal('720.00')
        assert result.details['total_anual'] == Decimal('8208.00')
        assert audit_result(result) == []

    def test_minimum_fee_applies(self):
        result = self.calculator.calculate(
            HonorariosInput(faturamento=10000, regime="LUCRO_REAL", segmento="PRESTADOR"),
            self.config
        )

        assert result.breakdown[0].amount == Decimal('450.00')
        assert result.breakdown[1].label == "Ajuste Prestador"
        assert result.breakdown[1].amount == Decimal('45.00')
        assert result.total == Decimal('495.00')

    def test_both_discounts_use_subtotal(self):
        result = self.calculator.calculate(
            HonorariosInput(
                faturamento=10000,
                regime="LUCRO_REAL",
                segmento="PRESTADOR",
                sistema_financeiro=True,
                ponto_eletronico=True
            ),
            self.config
        )

        descontos = [item for item in result.breakdown if item.sign == MINUS]
        assert [item.amount for item in descontos] == [Decimal('24.75'), Decimal('24.75')]
        assert result.total == Decimal('445.50')

    def test_industry_factor(self):
        result = self.calculator.calculate(
            HonorariosInput(faturamento=100000, regime="lucro_presumido", segmento="industria"),
            self.config
        )

        assert result.total == Decimal('1920.00')

    def test_factor_below_one_is_a_deduction(self):
        config = get_default(RuleSetKey.HONORARIOS)
        config['fatorSegmento']['COMERCIO'] = 0.9

        result = self.calculator.calculate(HonorariosInput(faturamento=50000), config)

        ajuste = result.breakdown[1]
        assert ajuste.sign == MINUS
        assert ajuste.amount == Decimal('60.00')
        assert result.total == Decimal('540.00')

    def test_unknown_regime_uses_simples(self):
        result = self.calculator.calculate(HonorariosInput(faturamento=50000, regime="MEI"), self.config)

        assert result.details['regime'] == "SIMPLES"
        assert result.total == Decimal('600.00')
        assert len(result.warnings) == 1

    def test_missing_table_entry_warns(self):
        config = get_default(RuleSetKey.HONORARIOS)
        del config['regimePercentual']['LUCRO_REAL']

        result = self.calculator.calculate(HonorariosInput(faturamento=1000000, regime="LUCRO_REAL"), config)

        assert result.total == Decimal('450.00')
        assert any("regimePercentual" in warning for warning in result.warnings)

    def test_discount_rate_is_clamped(self):
        config = dict(self.config, descontoSistemaFinanceiro=1.5)

        result = self.calculator.calculate(
            HonorariosInput(faturamento=50000, sistema_financeiro=True), config
        )

        assert result.total == Decimal('0.00')
        assert audit_result(result) == []
