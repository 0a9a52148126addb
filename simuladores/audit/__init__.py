"""Módulo de auditoria"""

from .audit_service import AuditService, AuditEntry, AuditEventType, audit_service

__all__ = [
    'AuditService',
    'AuditEntry',
    'AuditEventType',
    'audit_service'
]
