"""Módulo de banco de dados"""

from .models import (
    Base,
    RuleSetDB,
    AuditLogDB
)
from .connection import (
    engine,
    SessionLocal,
    get_db,
    init_db
)
from .repository import RuleSetRepository, SqlAlchemyConfigSource

__all__ = [
    'Base',
    'RuleSetDB',
    'AuditLogDB',
    'engine',
    'SessionLocal',
    'get_db',
    'init_db',
    'RuleSetRepository',
    'SqlAlchemyConfigSource'
]
