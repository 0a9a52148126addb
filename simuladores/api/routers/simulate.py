"""Endpoints dos simuladores"""

from typing import Any, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.concurrency import run_in_threadpool

from ...audit import AuditEventType, AuditService
from ...core import (
    ActiveRuleSetResolver,
    BracketNotFound,
    ConfigSource,
    FatorRInput,
    FeriasInput,
    HonorariosInput,
    RescisaoInput,
    RuleSetKey,
    SimplesInput,
    SimulationResult,
    audit_result,
    calculate,
)
from ...logging_config import log
from ..dependencies import get_audit_service, get_config_source, get_user_id, get_workspace_id
from ..schemas import (
    FatorRRequest,
    FatorRResponse,
    FeriasRequest,
    HonorariosRequest,
    RescisaoRequest,
    SimplesRequest,
    SimulationResponse,
)

router = APIRouter()


async def _simulate(
    key: RuleSetKey,
    entrada: Any,
    workspace_id: Optional[str],
    user_id: str,
    source: ConfigSource,
    audit: AuditService
) -> Tuple[Any, bool]:
    """Resolve a configuração ativa e executa o simulador

    Returns:
        (resultado, is_fallback)
    """
    resolved = await run_in_threadpool(ActiveRuleSetResolver(source).resolve_active, key, workspace_id)
    if resolved.is_fallback:
        await run_in_threadpool(
            audit.record,
            AuditEventType.RULESET_FALLBACK,
            workspace_id=workspace_id,
            user_id=user_id,
            entity_type="ruleset",
            key=key.value
        )

    result = calculate(key, entrada, resolved.config)

    if isinstance(result, BracketNotFound):
        await run_in_threadpool(
            audit.record,
            AuditEventType.BRACKET_NOT_FOUND,
            workspace_id=workspace_id,
            user_id=user_id,
            entity_type="simulation",
            key=key.value,
            annex=result.annex,
            revenue=str(result.revenue)
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=result.to_dict()
        )

    if isinstance(result, SimulationResult):
        problems = audit_result(result)
        if problems:
            log.error(f"Resultado inconsistente em {key.value}: {problems}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Resultado de simulação inconsistente"
            )

    return result, resolved.is_fallback


def _to_response(result: SimulationResult, is_fallback: bool) -> SimulationResponse:
    return SimulationResponse(**result.to_dict(), is_fallback=is_fallback)


@router.post("/ferias", response_model=SimulationResponse)
async def simulate_ferias(
    request: FeriasRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    source: ConfigSource = Depends(get_config_source),
    audit: AuditService = Depends(get_audit_service)
):
    """Férias com 1/3 constitucional e abono pecuniário"""
    entrada = FeriasInput(**request.model_dump())
    result, is_fallback = await _simulate(RuleSetKey.FERIAS, entrada, workspace_id, user_id, source, audit)
    return _to_response(result, is_fallback)


@router.post("/rescisao", response_model=SimulationResponse)
async def simulate_rescisao(
    request: RescisaoRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    source: ConfigSource = Depends(get_config_source),
    audit: AuditService = Depends(get_audit_service)
):
    """Verbas rescisórias por tipo de rescisão"""
    entrada = RescisaoInput(**request.model_dump())
    result, is_fallback = await _simulate(RuleSetKey.RESCISAO, entrada, workspace_id, user_id, source, audit)
    return _to_response(result, is_fallback)


@router.post("/honorarios", response_model=SimulationResponse)
async def simulate_honorarios(
    request: HonorariosRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    source: ConfigSource = Depends(get_config_source),
    audit: AuditService = Depends(get_audit_service)
):
    """Honorários contábeis mensais"""
    entrada = HonorariosInput(**request.model_dump())
    result, is_fallback = await _simulate(RuleSetKey.HONORARIOS, entrada, workspace_id, user_id, source, audit)
    return _to_response(result, is_fallback)


@router.post("/fator-r", response_model=FatorRResponse)
async def simulate_fator_r(
    request: FatorRRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    source: ConfigSource = Depends(get_config_source),
    audit: AuditService = Depends(get_audit_service)
):
    """Fator R: folha / receita e anexo resultante"""
    entrada = FatorRInput(**request.model_dump())
    result, is_fallback = await _simulate(RuleSetKey.FATOR_R, entrada, workspace_id, user_id, source, audit)
    return FatorRResponse(**result.to_dict(), is_fallback=is_fallback)


@router.post("/simples-das", response_model=SimulationResponse)
async def simulate_simples_das(
    request: SimplesRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    source: ConfigSource = Depends(get_config_source),
    audit: AuditService = Depends(get_audit_service)
):
    """Alíquota efetiva do Simples Nacional

    Receita fora das faixas do anexo responde 422 com error=bracket_not_found.
    """
    entrada = SimplesInput(**request.model_dump())
    result, is_fallback = await _simulate(RuleSetKey.SIMPLES_DAS, entrada, workspace_id, user_id, source, audit)
    return _to_response(result, is_fallback)
