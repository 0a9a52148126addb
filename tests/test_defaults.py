"""Catálogo de defaults"""

from decimal import Decimal

import pytest

from simuladores.core import RuleSetKey, SimplesBand, get_default, get_default_ruleset
from simuladores.core.defaults import get_default_entry


class TestCatalog:

    def test_every_key_has_default(self):
        for key in RuleSetKey:
            assert isinstance(get_default(key), dict)

    def test_default_values(self):
        assert get_default(RuleSetKey.FERIAS) == {'tercoConstitucional': True, 'limiteDiasAbono': 10}
        assert get_default(RuleSetKey.FATOR_R) == {
            'threshold': 0.28, 'annex_if_ge': 'III', 'annex_if_lt': 'V'
        }
        assert get_default(RuleSetKey.RESCISAO)['multaFgts'] == 0.4

    def test_returns_independent_copy(self):
        payload = get_default(RuleSetKey.HONORARIOS)
        payload['regimePercentual']['SIMPLES'] = 0.5

        assert get_default(RuleSetKey.HONORARIOS)['regimePercentual']['SIMPLES'] == 0.012

    def test_default_ruleset(self):
        ruleset = get_default_ruleset("simples_das")

        assert ruleset.key == RuleSetKey.SIMPLES_DAS
        assert ruleset.version == 1
        assert ruleset.is_global
        assert not ruleset.is_active
        assert get_default_entry(RuleSetKey.FERIAS).name == "Férias (Padrão)"


class TestSimplesTables:
    """Faixas contíguas de 0 a 4.800.000 em todos os anexos"""

    @pytest.mark.parametrize("annex", ["I", "II", "III", "IV", "V"])
    def test_bands_are_contiguous(self, annex):
        bands = [SimplesBand.from_dict(row) for row in get_default(RuleSetKey.SIMPLES_DAS)['tables'][annex]]

        assert len(bands) == 6
        assert bands[0].min == Decimal('0')
        assert bands[-1].max == Decimal('4800000')
        for previous, current in zip(bands, bands[1:]):
            assert current.min == previous.max + Decimal('0.01')
            assert current.aliquota_nominal > previous.aliquota_nominal
