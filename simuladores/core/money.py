"""Conversão defensiva de entradas numéricas e formatação em reais"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any

ZERO = Decimal('0')
CENT = Decimal('0.01')

# Teto de qualquer valor informado (um quatrilhão); acima disso o valor é
# limitado ao teto, mantendo o sinal.
LIMITE_VALOR = Decimal('1e15')

# Dígitos suficientes para arredondar ao centavo valores até o teto
_PRECISAO = 40

_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def to_decimal(value: Any) -> Decimal:
    """Converte valor numérico em Decimal, ou zero quando inválido

    Aceita int, float, Decimal e strings. Strings no formato brasileiro
    ("3.000,50", "R$ 1.234,00") são normalizadas. Vazio, None, NaN, infinito
    e texto não numérico viram zero.

    Args:
        value: valor informado pelo usuário ou pelo payload

    Returns:
        Decimal finito, limitado a ±LIMITE_VALOR
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return _limit(value) if value.is_finite() else ZERO

    if isinstance(value, int):
        return _limit(Decimal(value))

    if isinstance(value, float):
        if not math.isfinite(value):
            return ZERO
        return _limit(Decimal(str(value)))

    text = str(value).strip().replace("R$", "").replace(" ", "")
    if not text:
        return ZERO
    if "," in text or _THOUSANDS.match(text):
        # formato pt-BR: ponto separa milhar, vírgula separa decimais
        text = text.replace(".", "").replace(",", ".")

    try:
        number = Decimal(text)
    except InvalidOperation:
        return ZERO
    return _limit(number) if number.is_finite() else ZERO


def _limit(number: Decimal) -> Decimal:
    if number.copy_abs() > LIMITE_VALOR:
        return LIMITE_VALOR.copy_sign(number)
    return number


def parse_amount(value: Any) -> Decimal:
    """Valor monetário informado, nunca negativo"""
    return max(to_decimal(value), ZERO)


def parse_days(value: Any) -> int:
    """Quantidade de dias/meses/anos informada, inteira e nunca negativa"""
    return max(int(to_decimal(value)), 0)


def round_money(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        ctx.prec = _PRECISAO
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def format_brl(value: Decimal) -> str:
    """Formata em reais: Decimal('3000') -> 'R$ 3.000,00'"""
    text = f"{round_money(Decimal(value)):,.2f}"
    return "R$ " + text.replace(",", "_").replace(".", ",").replace("_", ".")


def format_percent(rate: Any) -> str:
    """Formata taxa decimal como percentual: 0.4 -> '40%', 0.073 -> '7,3%'"""
    pct = (to_decimal(rate) * 100).normalize()
    text = f"{pct:f}".replace(".", ",")
    return f"{text}%"


def format_number(value: Any) -> str:
    """Número sem zeros à direita, com vírgula decimal"""
    number = to_decimal(value).normalize()
    return f"{number:f}".replace(".", ",")
