"""Endpoints de consulta da auditoria recente"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ...audit import AuditService
from ..dependencies import get_audit_service, get_workspace_id

router = APIRouter()


@router.get("/report")
async def get_audit_report(
    workspace_id: Optional[str] = Depends(get_workspace_id),
    audit: AuditService = Depends(get_audit_service)
) -> Dict[str, Any]:
    """Relatório das entradas recentes do workspace (contagens e fallbacks)"""
    return audit.generate_audit_report(workspace_id)


@router.get("/{entity_type}/{entity_id}")
async def get_entity_trail(
    entity_type: str,
    entity_id: str,
    workspace_id: Optional[str] = Depends(get_workspace_id),
    audit: AuditService = Depends(get_audit_service)
) -> List[Dict[str, Any]]:
    trail = audit.get_entity_audit_trail(entity_type, entity_id)
    return [entry.to_dict() for entry in trail if entry.workspace_id == workspace_id]
