"""Registro de schemas de RuleSet

Cada tipo de simulador tem um modelo pydantic que descreve o formato e os
limites numéricos do seu payload. `validate()` é o portão de gravação: o
resolver não revalida na leitura.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Annotated, Any, Dict, List, Mapping, Type, Union

from pydantic import BaseModel, Field, Strict, ValidationError

from .ruleset import RuleSetKey


NonNegative = Annotated[float, Strict(), Field(ge=0, allow_inf_nan=False)]
Ratio = Annotated[float, Strict(), Field(ge=0, le=1, allow_inf_nan=False)]
StrictBool = Annotated[bool, Strict()]
StrictStr = Annotated[str, Strict()]


# ============================================================================
# HONORARIOS
# ============================================================================

class RegimePercentualSchema(BaseModel):
    """Percentual sobre o faturamento por regime tributário"""
    SIMPLES: NonNegative
    LUCRO_PRESUMIDO: NonNegative
    LUCRO_REAL: NonNegative


class FatorSegmentoSchema(BaseModel):
    """Fator multiplicador por segmento da empresa"""
    COMERCIO: NonNegative
    PRESTADOR: NonNegative
    INDUSTRIA: NonNegative


class HonorariosSchema(BaseModel):
    baseMin: NonNegative
    regimePercentual: RegimePercentualSchema
    fatorSegmento: FatorSegmentoSchema
    adicFuncionario: NonNegative
    descontoSistemaFinanceiro: Ratio
    descontoPontoEletronico: Ratio


# ============================================================================
# RESCISAO / FERIAS / FATOR_R
# ============================================================================

class RescisaoSchema(BaseModel):
    multaFgts: Ratio
    multaAcordo: Ratio
    diasAvisoPrevioBase: NonNegative
    diasAvisoPrevioPorAno: NonNegative


class FeriasSchema(BaseModel):
    tercoConstitucional: StrictBool
    limiteDiasAbono: NonNegative


class FatorRSchema(BaseModel):
    threshold: Ratio
    annex_if_ge: StrictStr
    annex_if_lt: StrictStr


# ============================================================================
# SIMPLES_DAS
# ============================================================================

class SimplesBandSchema(BaseModel):
    """Faixa de receita bruta (RBT12) de um anexo"""
    min: NonNegative
    max: NonNegative
    aliquota_nominal: NonNegative
    deducao: NonNegative


class SimplesTablesSchema(BaseModel):
    I: List[SimplesBandSchema]
    II: List[SimplesBandSchema]
    III: List[SimplesBandSchema]
    IV: List[SimplesBandSchema]
    V: List[SimplesBandSchema]


class SimplesDasSchema(BaseModel):
    tables: SimplesTablesSchema


SCHEMAS: Mapping[RuleSetKey, Type[BaseModel]] = MappingProxyType({
    RuleSetKey.HONORARIOS: HonorariosSchema,
    RuleSetKey.RESCISAO: RescisaoSchema,
    RuleSetKey.FERIAS: FeriasSchema,
    RuleSetKey.FATOR_R: FatorRSchema,
    RuleSetKey.SIMPLES_DAS: SimplesDasSchema,
})


@dataclass(frozen=True)
class ValidationIssue:
    """Violação de um campo do payload

    Attributes:
        field: caminho do campo separado por pontos (ex: "tables.I.0.deducao")
        message: descrição legível
        error_type: código do erro (ex: "missing", "less_than_equal")
    """
    field: str
    message: str
    error_type: str

    def to_dict(self) -> Dict[str, str]:
        return {'field': self.field, 'message': self.message, 'type': self.error_type}


@dataclass(frozen=True)
class ValidationResult:
    """Resultado da validação de um payload"""
    key: RuleSetKey
    ok: bool
    errors: List[ValidationIssue] = field(default_factory=list)

    @property
    def fields(self) -> List[str]:
        """Campos com violação, na ordem reportada"""
        return [issue.field for issue in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {'ok': True}
        return {'ok': False, 'errors': [issue.to_dict() for issue in self.errors]}


def validate(key: Union[RuleSetKey, str], payload: Any) -> ValidationResult:
    """Valida um payload contra o schema do simulador

    Todas as violações são listadas, não apenas a primeira, para que a
    administração mostre tudo de uma vez. Campos desconhecidos são ignorados.

    Args:
        key: tipo de simulador
        payload: candidato a payload

    Returns:
        ValidationResult com ok=True ou com a lista de violações

    Raises:
        UnknownRuleSetKeyError: key fora do conjunto fixo
    """
    key = RuleSetKey.parse(key)

    if not isinstance(payload, Mapping):
        issue = ValidationIssue(
            field="payload",
            message=f"Payload deve ser um objeto, recebido {type(payload).__name__}",
            error_type="dict_type"
        )
        return ValidationResult(key=key, ok=False, errors=[issue])

    try:
        SCHEMAS[key].model_validate(dict(payload))
    except ValidationError as e:
        issues = [
            ValidationIssue(
                field=".".join(str(part) for part in error['loc']) or "payload",
                message=error['msg'],
                error_type=error['type']
            )
            for error in e.errors()
        ]
        return ValidationResult(key=key, ok=False, errors=issues)

    return ValidationResult(key=key, ok=True)


def json_schema(key: Union[RuleSetKey, str]) -> Dict[str, Any]:
    """JSON Schema do payload (para o editor de regras)"""
    return SCHEMAS[RuleSetKey.parse(key)].model_json_schema()
