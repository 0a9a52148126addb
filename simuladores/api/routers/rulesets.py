"""Endpoints de administração de RuleSets"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from ...audit import AuditEventType, AuditService
from ...core import ActiveRuleSetResolver, ConfigSource, RuleSet, validate
from ...core.defaults import get_default_entry
from ...core.exceptions import RuleSetNotFoundError, RuleSetValidationError
from ...core.schema_registry import json_schema
from ...database import RuleSetRepository, get_db
from ..dependencies import (
    get_audit_service,
    get_config_source,
    get_user_id,
    get_workspace_id,
    parse_key,
)
from ..schemas import (
    ActiveRuleSetResponse,
    DefaultRuleSetResponse,
    RuleSetCreateRequest,
    RuleSetResponse,
    RuleSetValidateRequest,
    ValidationResponse,
)

router = APIRouter()


def _to_response(ruleset: RuleSet) -> RuleSetResponse:
    return RuleSetResponse(**ruleset.to_dict())


@router.get("", response_model=List[RuleSetResponse])
async def list_rulesets(
    key: Optional[str] = Query(default=None, description="Filtrar por simulador"),
    workspace_id: Optional[str] = Depends(get_workspace_id),
    db: Session = Depends(get_db)
):
    """Versões visíveis ao workspace (inclui as globais)"""
    simulator_key = parse_key(key) if key else None
    rulesets = RuleSetRepository(db).list(simulator_key, workspace_id)
    return [_to_response(ruleset) for ruleset in rulesets]


@router.get("/active", response_model=ActiveRuleSetResponse)
async def get_active_ruleset(
    key: str = Query(..., description="Tipo de simulador"),
    workspace_id: Optional[str] = Depends(get_workspace_id),
    source: ConfigSource = Depends(get_config_source),
    db: Session = Depends(get_db)
):
    """Configuração que os simuladores usarão para o workspace

    Sem RuleSet ativo (ou com o banco indisponível) devolve o padrão com
    is_fallback=true.
    """
    simulator_key = parse_key(key)
    resolved = ActiveRuleSetResolver(source).resolve_active(simulator_key, workspace_id)

    ruleset = None
    if not resolved.is_fallback:
        active = RuleSetRepository(db).get_active(simulator_key, workspace_id)
        ruleset = _to_response(active) if active else None

    return ActiveRuleSetResponse(
        key=simulator_key.value,
        config=resolved.config,
        is_fallback=resolved.is_fallback,
        ruleset=ruleset
    )


@router.get("/defaults/{key}", response_model=DefaultRuleSetResponse)
async def get_default_ruleset(key: str):
    entry = get_default_entry(parse_key(key))
    return DefaultRuleSetResponse(
        key=entry.key.value,
        name=entry.name,
        version=entry.version,
        payload=entry.payload
    )


@router.get("/schema/{key}")
async def get_ruleset_schema(key: str):
    """JSON Schema do payload (para formulários do painel)"""
    return json_schema(parse_key(key))


@router.post("/validate", response_model=ValidationResponse)
async def validate_ruleset(request: RuleSetValidateRequest):
    """Valida um payload sem gravar"""
    result = validate(parse_key(request.key), request.payload)
    return ValidationResponse(**result.to_dict())


@router.post("", response_model=RuleSetResponse, status_code=status.HTTP_201_CREATED)
async def create_ruleset(
    request: RuleSetCreateRequest,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    audit: AuditService = Depends(get_audit_service),
    db: Session = Depends(get_db)
):
    """Grava nova versão de RuleSet

    Payload inválido é rejeitado com 422 listando todos os campos.
    """
    simulator_key = parse_key(request.key)

    try:
        ruleset = RuleSetRepository(db).create_version(
            simulator_key,
            request.name,
            request.payload,
            workspace_id=workspace_id,
            created_by=user_id,
            is_active=request.is_active
        )
    except RuleSetValidationError as e:
        await run_in_threadpool(
            audit.record,
            AuditEventType.RULESET_REJECTED,
            workspace_id=workspace_id,
            user_id=user_id,
            entity_type="ruleset",
            key=simulator_key.value,
            fields=e.result.fields
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), **e.result.to_dict()}
        )

    await run_in_threadpool(
        audit.record,
        AuditEventType.RULESET_CREATED,
        workspace_id=workspace_id,
        user_id=user_id,
        entity_type="ruleset",
        entity_id=ruleset.id,
        key=ruleset.key.value,
        version=ruleset.version,
        is_active=ruleset.is_active
    )
    return _to_response(ruleset)


@router.post("/{ruleset_id}/activate", response_model=RuleSetResponse)
async def activate_ruleset(
    ruleset_id: int,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    user_id: str = Depends(get_user_id),
    audit: AuditService = Depends(get_audit_service),
    db: Session = Depends(get_db)
):
    try:
        ruleset = RuleSetRepository(db).activate(ruleset_id, workspace_id)
    except RuleSetNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    await run_in_threadpool(
        audit.record,
        AuditEventType.RULESET_ACTIVATED,
        workspace_id=workspace_id,
        user_id=user_id,
        entity_type="ruleset",
        entity_id=ruleset.id,
        key=ruleset.key.value,
        version=ruleset.version
    )
    return _to_response(ruleset)


@router.get("/{ruleset_id}", response_model=RuleSetResponse)
async def get_ruleset(
    ruleset_id: int,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    db: Session = Depends(get_db)
):
    try:
        return _to_response(RuleSetRepository(db).get(ruleset_id, workspace_id))
    except RuleSetNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
