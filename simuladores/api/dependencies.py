"""Dependências compartilhadas pelos routers"""

from typing import Optional

from fastapi import Header, HTTPException, status

from ..audit import AuditService, audit_service
from ..core import ConfigSource, RuleSetKey, UnknownRuleSetKeyError
from ..database import SessionLocal, SqlAlchemyConfigSource


def get_workspace_id(x_workspace_id: Optional[str] = Header(default=None)) -> Optional[str]:
    """Workspace (tenant) da requisição; ausente = somente RuleSets globais"""
    return x_workspace_id or None


def get_user_id(x_user_id: Optional[str] = Header(default=None)) -> str:
    return x_user_id or "system"


def get_config_source() -> ConfigSource:
    return SqlAlchemyConfigSource(SessionLocal)


def get_audit_service() -> AuditService:
    return audit_service


def parse_key(key: str) -> RuleSetKey:
    """Converte a chave do simulador ou responde 400"""
    try:
        return RuleSetKey.parse(key)
    except UnknownRuleSetKeyError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
