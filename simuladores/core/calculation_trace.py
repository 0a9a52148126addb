"""BreakdownItem / SimulationResult: resultado detalhado de uma simulação"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .money import ZERO, format_brl
from .ruleset import RuleSetKey

PLUS = "+"
MINUS = "-"


@dataclass(frozen=True)
class BreakdownItem:
    """Uma linha do detalhamento de cálculo

    Attributes:
        label: nome da verba (ex: "1/3 Constitucional")
        base: base de cálculo exibida (valor ou quantidade de dias)
        formula_text: aritmética efetivamente aplicada, legível
        amount: valor da linha, sempre >= 0
        sign: "+" soma ao total, "-" subtrai
    """

    label: str
    base: Decimal
    formula_text: str
    amount: Decimal
    sign: str = PLUS

    def __post_init__(self):
        if self.sign not in (PLUS, MINUS):
            raise ValueError(f"Sinal inválido: {self.sign!r}")
        if self.amount < 0:
            raise ValueError(f"Valor negativo em '{self.label}': {self.amount}")

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.sign == PLUS else -self.amount

    def to_dict(self) -> dict:
        return {
            'label': self.label,
            'base': str(self.base),
            'formula_text': self.formula_text,
            'amount': str(self.amount),
            'sign': self.sign,
        }

    def __str__(self) -> str:
        return f"{self.sign} {self.label}: {format_brl(self.amount)} ({self.formula_text})"


@dataclass(frozen=True)
class SimulationResult:
    """Resultado de uma simulação

    O total é sempre a soma algébrica das linhas do detalhamento; use
    `from_items` para construir o resultado.

    Attributes:
        kind: simulador que produziu o resultado
        total: soma com sinal de breakdown[].amount
        breakdown: linhas na ordem em que foram aplicadas
        details: valores auxiliares específicos do simulador
        warnings: avisos sobre entradas ajustadas
    """

    kind: RuleSetKey
    total: Decimal
    breakdown: List[BreakdownItem]
    details: Dict[str, Any] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @classmethod
    def from_items(
        cls,
        kind: RuleSetKey,
        items: List[BreakdownItem],
        details: Optional[Dict[str, Any]] = None,
        warnings: Optional[List[str]] = None
    ) -> "SimulationResult":
        total = sum((item.signed_amount for item in items), ZERO)
        return cls(
            kind=kind,
            total=total,
            breakdown=list(items),
            details=details or {},
            warnings=warnings or [],
        )

    @property
    def ok(self) -> bool:
        return True

    def signed_sum(self) -> Decimal:
        """Soma com sinal das linhas (deve ser igual a total)"""
        return sum((item.signed_amount for item in self.breakdown), ZERO)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind.value,
            'total': str(self.total),
            'breakdown': [item.to_dict() for item in self.breakdown],
            'details': {k: _serialize_value(v) for k, v in self.details.items()},
            'warnings': list(self.warnings),
        }

    def get_summary(self) -> str:
        """Resumo em texto, usado por exportadores de relatório"""
        lines = [f"=== Simulação {self.kind.value} ===", ""]
        for item in self.breakdown:
            lines.append(f"{item.sign} {item.label:<32} {format_brl(item.amount):>18}")
            lines.append(f"    {item.formula_text}")
        lines.append("─" * 54)
        lines.append(f"  {'Total':<32} {format_brl(self.total):>18}")
        for warning in self.warnings:
            lines.append(f"! {warning}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.get_summary()


def _serialize_value(value: Any) -> Any:
    """Converte Decimal (inclusive aninhado) em string"""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    return value
