"""Schemas de requisição/resposta da API (Pydantic)"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Entradas numéricas aceitam número ou texto ("3.000,00"); o calculador
# converte de forma defensiva.
NumberLike = Union[Decimal, str, None]


# ============================================================================
# RuleSets
# ============================================================================

class RuleSetCreateRequest(BaseModel):
    """Nova versão de RuleSet"""
    key: str = Field(..., description="HONORARIOS, RESCISAO, FERIAS, FATOR_R ou SIMPLES_DAS")
    name: str = Field(..., min_length=1, description="Nome da versão")
    payload: Dict[str, Any] = Field(..., description="Parâmetros do simulador")
    is_active: bool = Field(default=False, description="Ativar ao criar")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "key": "FERIAS",
            "name": "Férias 2025",
            "payload": {"tercoConstitucional": True, "limiteDiasAbono": 10},
            "is_active": True
        }
    })


class RuleSetValidateRequest(BaseModel):
    key: str
    payload: Any


class RuleSetResponse(BaseModel):
    id: Optional[int] = None
    key: str
    name: str
    version: int
    is_active: bool
    payload: Dict[str, Any]
    workspace_id: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime


class ActiveRuleSetResponse(BaseModel):
    """Configuração resolvida para o workspace"""
    key: str
    config: Dict[str, Any]
    is_fallback: bool
    ruleset: Optional[RuleSetResponse] = None


class DefaultRuleSetResponse(BaseModel):
    key: str
    name: str
    version: int
    payload: Dict[str, Any]


class ValidationIssueResponse(BaseModel):
    field: str
    message: str
    type: str


class ValidationResponse(BaseModel):
    ok: bool
    errors: List[ValidationIssueResponse] = Field(default_factory=list)


# ============================================================================
# Simulações
# ============================================================================

class FeriasRequest(BaseModel):
    salario_base: NumberLike = Field(..., description="Salário mensal")
    dias_abono: NumberLike = Field(default=0, description="Dias vendidos")

    model_config = ConfigDict(json_schema_extra={
        "example": {"salario_base": 3000, "dias_abono": 5}
    })


class RescisaoRequest(BaseModel):
    salario_base: NumberLike
    tipo_rescisao: str = Field(default="SEM_JUSTA_CAUSA")
    anos_servico: NumberLike = 0
    dias_trabalhados_mes: NumberLike = 0
    meses_decimo_terceiro: NumberLike = 0
    dias_ferias_vencidas: NumberLike = 0
    saldo_fgts: NumberLike = 0
    aviso_previo_trabalhado: bool = False


class HonorariosRequest(BaseModel):
    faturamento: NumberLike
    regime: str = Field(default="SIMPLES")
    segmento: str = Field(default="COMERCIO")
    num_funcionarios: NumberLike = 0
    sistema_financeiro: bool = False
    ponto_eletronico: bool = False


class FatorRRequest(BaseModel):
    folha_12m: NumberLike
    receita_12m: NumberLike


class SimplesRequest(BaseModel):
    annex: str = Field(..., description="Anexo I a V")
    receita_12m: NumberLike
    receita_mes: NumberLike = None


class BreakdownItemResponse(BaseModel):
    label: str
    base: Decimal
    formula_text: str
    amount: Decimal
    sign: str


class SimulationResponse(BaseModel):
    """Resultado de simulação"""
    kind: str
    total: Decimal
    breakdown: List[BreakdownItemResponse]
    details: Dict[str, Any] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)
    is_fallback: bool


class FatorRResponse(BaseModel):
    kind: str
    folha_12m: Decimal
    receita_12m: Decimal
    ratio: Decimal
    threshold: Decimal
    annex: str
    branch: str
    formula_text: str
    is_fallback: bool

