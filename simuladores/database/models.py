"""Modelos de banco de dados"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, JSON, Index
)
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


class RuleSetDB(Base):
    """Tabela de RuleSets

    Cada linha é uma versão imutável de payload. Edições criam nova linha;
    somente `is_active` muda depois da criação.
    """
    __tablename__ = "rulesets"

    id = Column(Integer, primary_key=True, index=True)

    simulator_key = Column(
        String(30),
        nullable=False,
        index=True,
        comment="HONORARIOS, RESCISAO, FERIAS, FATOR_R, SIMPLES_DAS"
    )
    name = Column(String(200), nullable=False)
    version = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)
    payload = Column(JSON, nullable=False, comment="Parâmetros do simulador")

    # NULL = RuleSet global, visível a todos os workspaces
    workspace_id = Column(String(64), nullable=True, index=True)

    created_by = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("ix_rulesets_lookup", "simulator_key", "workspace_id", "is_active"),
    )

    def __repr__(self):
        return (
            f"<RuleSet(id={self.id}, key={self.simulator_key}, version={self.version}, "
            f"active={self.is_active}, workspace={self.workspace_id})>"
        )


class AuditLogDB(Base):
    """Log de auditoria de ações administrativas"""
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    action = Column(String(50), nullable=False, index=True)
    entity_type = Column(String(50), nullable=True)
    entity_id = Column(String(64), nullable=True)
    workspace_id = Column(String(64), nullable=True, index=True)
    user_id = Column(String(100), nullable=True)
    extra_metadata = Column(JSON, nullable=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action={self.action}, entity={self.entity_type}:{self.entity_id})>"
