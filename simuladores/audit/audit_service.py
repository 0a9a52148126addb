"""Serviço de log de auditoria"""

import json
import os
from collections import deque
from dataclasses import dataclass, asdict
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Deque, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.connection import SessionLocal
from ..database.models import AuditLogDB
from ..logging_config import log


# Entradas mantidas em memória para trilhas e relatório; as mais antigas
# são descartadas (o histórico completo fica em audit_logs).
MAX_MEMORY_ENTRIES = int(os.getenv("SIMULADORES_AUDIT_MEMORY", "1000"))


class AuditEventType(Enum):
    """Tipos de evento de auditoria"""
    RULESET_CREATED = "RULESET_CREATED"
    RULESET_REJECTED = "RULESET_REJECTED"
    RULESET_ACTIVATED = "RULESET_ACTIVATED"
    RULESET_FALLBACK = "RULESET_FALLBACK"
    BRACKET_NOT_FOUND = "BRACKET_NOT_FOUND"


@dataclass
class AuditEntry:
    """Entrada do log de auditoria"""
    event_type: AuditEventType
    timestamp: datetime
    workspace_id: Optional[str] = None
    user_id: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['event_type'] = self.event_type.value
        data['timestamp'] = self.timestamp.isoformat()
        return data

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)


class AuditService:
    """Registra eventos de administração e de uso dos simuladores

    Mantém as entradas recentes em memória, envia cada uma ao log e, quando
    configurado, grava em arquivo JSON lines e na tabela `audit_logs`.
    """

    def __init__(
        self,
        log_file: Optional[str] = None,
        session_factory: Optional[Callable[[], Session]] = None,
        max_entries: int = MAX_MEMORY_ENTRIES
    ):
        """
        Args:
            log_file: arquivo JSON lines (None = sem arquivo)
            session_factory: fábrica de sessões para gravar em audit_logs
            max_entries: limite de entradas em memória
        """
        self.log_file = log_file
        self.session_factory = session_factory
        self.entries: Deque[AuditEntry] = deque(maxlen=max_entries)

    def log_entry(self, entry: AuditEntry):
        """Registra uma entrada

        Falha ao gravar arquivo ou banco é registrada no log e não
        interrompe a operação auditada.
        """
        self.entries.append(entry)

        log.info(
            f"[AUDIT] {entry.event_type.value} workspace={entry.workspace_id} "
            f"user={entry.user_id} {entry.entity_type or ''}:{entry.entity_id or ''}"
        )

        if self.log_file:
            self._write_to_file(entry)
        if self.session_factory:
            self._write_to_db(entry)

    def record(
        self,
        event_type: AuditEventType,
        workspace_id: Optional[str] = None,
        user_id: Optional[str] = None,
        entity_type: Optional[str] = None,
        entity_id: Optional[Any] = None,
        **metadata: Any
    ) -> AuditEntry:
        """Cria e registra uma entrada"""
        entry = AuditEntry(
            event_type=event_type,
            timestamp=datetime.now(),
            workspace_id=workspace_id,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            metadata=metadata or None
        )
        self.log_entry(entry)
        return entry

    def _write_to_file(self, entry: AuditEntry):
        try:
            with open(self.log_file, 'a', encoding='utf-8') as f:
                f.write(entry.to_json())
                f.write('\n')
        except OSError as e:
            log.error(f"Falha ao gravar auditoria em {self.log_file}: {e}")

    def _write_to_db(self, entry: AuditEntry):
        db = self.session_factory()
        try:
            db.add(AuditLogDB(
                action=entry.event_type.value,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                workspace_id=entry.workspace_id,
                user_id=entry.user_id,
                extra_metadata=json.loads(json.dumps(entry.metadata, default=str)),
                created_at=entry.timestamp
            ))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            log.error(f"Falha ao gravar auditoria no banco: {e}")
        finally:
            db.close()

    def get_workspace_audit_trail(self, workspace_id: Optional[str]) -> List[AuditEntry]:
        return [entry for entry in self.entries if entry.workspace_id == workspace_id]

    def get_entity_audit_trail(self, entity_type: str, entity_id: Any) -> List[AuditEntry]:
        """Histórico de uma entidade (ex: todas as ações sobre um RuleSet)"""
        return [
            entry for entry in self.entries
            if entry.entity_type == entity_type and entry.entity_id == str(entity_id)
        ]

    def generate_audit_report(self, workspace_id: Optional[str]) -> Dict[str, Any]:
        """Relatório de auditoria do workspace"""
        trail = self.get_workspace_audit_trail(workspace_id)

        if not trail:
            return {
                "workspace_id": workspace_id,
                "message": "Nenhum evento de auditoria"
            }

        event_counts: Dict[str, int] = {}
        for entry in trail:
            event_type = entry.event_type.value
            event_counts[event_type] = event_counts.get(event_type, 0) + 1

        return {
            "workspace_id": workspace_id,
            "total_events": len(trail),
            "start_time": trail[0].timestamp.isoformat(),
            "end_time": trail[-1].timestamp.isoformat(),
            "event_counts": event_counts,
            "fallback_count": event_counts.get(AuditEventType.RULESET_FALLBACK.value, 0),
            "events": [entry.to_dict() for entry in trail]
        }


# Instância global
audit_service = AuditService(
    log_file=os.getenv("SIMULADORES_AUDIT_FILE"),
    session_factory=SessionLocal
)
