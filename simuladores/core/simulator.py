"""Registro de calculadores e despacho por tipo de simulador"""

from types import MappingProxyType
from typing import Any, Mapping, Union

from .base_calculator import BaseCalculator
from .fator_r import FatorRCalculator, FatorRInput
from .ferias_calculator import FeriasCalculator, FeriasInput
from .honorarios_calculator import HonorariosCalculator, HonorariosInput
from .rescisao_calculator import RescisaoCalculator, RescisaoInput
from .ruleset import RuleSetKey
from .simples_calculator import SimplesCalculator, SimplesInput


CALCULATORS: Mapping[RuleSetKey, BaseCalculator] = MappingProxyType({
    RuleSetKey.FERIAS: FeriasCalculator(),
    RuleSetKey.RESCISAO: RescisaoCalculator(),
    RuleSetKey.HONORARIOS: HonorariosCalculator(),
    RuleSetKey.FATOR_R: FatorRCalculator(),
    RuleSetKey.SIMPLES_DAS: SimplesCalculator(),
})

INPUT_TYPES: Mapping[RuleSetKey, type] = MappingProxyType({
    RuleSetKey.FERIAS: FeriasInput,
    RuleSetKey.RESCISAO: RescisaoInput,
    RuleSetKey.HONORARIOS: HonorariosInput,
    RuleSetKey.FATOR_R: FatorRInput,
    RuleSetKey.SIMPLES_DAS: SimplesInput,
})


def get_calculator(key: Union[RuleSetKey, str]) -> BaseCalculator:
    return CALCULATORS[RuleSetKey.parse(key)]


def calculate(key: Union[RuleSetKey, str], entrada: Any, config: Mapping[str, Any]) -> Any:
    """Executa o simulador `key`

    Args:
        key: tipo de simulador
        entrada: instância do tipo de entrada do simulador
        config: payload resolvido

    Raises:
        TypeError: entrada de outro simulador
    """
    key = RuleSetKey.parse(key)
    expected = INPUT_TYPES[key]
    if not isinstance(entrada, expected):
        raise TypeError(
            f"{key.value} espera {expected.__name__}, recebido {type(entrada).__name__}"
        )
    return CALCULATORS[key].calculate(entrada, config)
