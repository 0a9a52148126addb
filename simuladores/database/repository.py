"""Persistência de RuleSets"""

from typing import Any, Callable, Dict, List, Optional, Union

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.defaults import get_default_ruleset
from ..core.exceptions import RuleSetNotFoundError, RuleSetValidationError
from ..core.ruleset import RuleSet, RuleSetKey
from ..core.schema_registry import validate
from ..logging_config import log
from .models import RuleSetDB


def _workspace_filter(query, workspace_id: Optional[str], include_global: bool = True):
    """Restringe a consulta ao workspace (e opcionalmente aos RuleSets globais)"""
    if workspace_id is None:
        return query.filter(RuleSetDB.workspace_id.is_(None))
    if include_global:
        return query.filter(
            (RuleSetDB.workspace_id == workspace_id) | (RuleSetDB.workspace_id.is_(None))
        )
    return query.filter(RuleSetDB.workspace_id == workspace_id)


def _to_domain(row: RuleSetDB) -> RuleSet:
    return RuleSet(
        key=RuleSetKey.parse(row.simulator_key),
        name=row.name,
        version=row.version,
        is_active=row.is_active,
        payload=row.payload,
        workspace_id=row.workspace_id,
        id=row.id,
        created_by=row.created_by,
        created_at=row.created_at
    )


def _query_active(db: Session, key: RuleSetKey, workspace_id: Optional[str]) -> Optional[RuleSetDB]:
    """RuleSet ativo: o do workspace tem precedência sobre o global"""
    query = db.query(RuleSetDB).filter(
        RuleSetDB.simulator_key == key.value,
        RuleSetDB.is_active.is_(True)
    )
    query = _workspace_filter(query, workspace_id)
    return query.order_by(
        RuleSetDB.workspace_id.is_(None),
        RuleSetDB.version.desc()
    ).first()


class RuleSetRepository:
    """Operações administrativas sobre RuleSets

    Payloads nunca são alterados nem apagados: uma edição é uma nova versão.
    """

    def __init__(self, db: Session):
        self.db = db

    def create_version(
        self,
        key: Union[RuleSetKey, str],
        name: str,
        payload: Dict[str, Any],
        workspace_id: Optional[str] = None,
        created_by: Optional[str] = None,
        is_active: bool = False
    ) -> RuleSet:
        """Grava nova versão após validar o payload

        Args:
            key: tipo de simulador
            name: nome da versão
            payload: parâmetros
            workspace_id: tenant (None = global)
            created_by: usuário
            is_active: ativa a nova versão, desativando as demais do workspace

        Returns:
            RuleSet gravado

        Raises:
            RuleSetValidationError: payload rejeitado pelo schema
        """
        key = RuleSetKey.parse(key)
        result = validate(key, payload)
        if not result.ok:
            log.info(f"RuleSet {key.value} rejeitado: {', '.join(result.fields)}")
            raise RuleSetValidationError(result)

        current = self.db.query(func.max(RuleSetDB.version)).filter(
            RuleSetDB.simulator_key == key.value
        )
        current = _workspace_filter(current, workspace_id, include_global=False).scalar()

        if is_active:
            self._deactivate_all(key, workspace_id)

        row = RuleSetDB(
            simulator_key=key.value,
            name=name.strip(),
            version=(current or 0) + 1,
            is_active=is_active,
            payload=payload,
            workspace_id=workspace_id,
            created_by=created_by
        )
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)

        log.info(f"RuleSet {key.value} v{row.version} criado (workspace={workspace_id}, ativo={is_active})")
        return _to_domain(row)

    def activate(self, ruleset_id: int, workspace_id: Optional[str] = None) -> RuleSet:
        """Ativa uma versão e desativa as outras da mesma key no workspace

        Raises:
            RuleSetNotFoundError: id inexistente ou de outro workspace
        """
        query = self.db.query(RuleSetDB).filter(RuleSetDB.id == ruleset_id)
        row = _workspace_filter(query, workspace_id, include_global=False).first()
        if row is None:
            raise RuleSetNotFoundError(ruleset_id, workspace_id)

        key = RuleSetKey.parse(row.simulator_key)
        self._deactivate_all(key, workspace_id)
        row.is_active = True
        self.db.commit()
        self.db.refresh(row)

        log.info(f"RuleSet {key.value} v{row.version} ativado (workspace={workspace_id})")
        return _to_domain(row)

    def get(self, ruleset_id: int, workspace_id: Optional[str] = None) -> RuleSet:
        query = self.db.query(RuleSetDB).filter(RuleSetDB.id == ruleset_id)
        row = _workspace_filter(query, workspace_id).first()
        if row is None:
            raise RuleSetNotFoundError(ruleset_id, workspace_id)
        return _to_domain(row)

    def list(
        self,
        key: Optional[Union[RuleSetKey, str]] = None,
        workspace_id: Optional[str] = None
    ) -> List[RuleSet]:
        """Versões visíveis ao workspace (inclui globais), por key e versão desc"""
        query = _workspace_filter(self.db.query(RuleSetDB), workspace_id)
        if key is not None:
            query = query.filter(RuleSetDB.simulator_key == RuleSetKey.parse(key).value)
        rows = query.order_by(
            RuleSetDB.simulator_key.asc(),
            RuleSetDB.version.desc()
        ).all()
        return [_to_domain(row) for row in rows]

    def get_active(self, key: Union[RuleSetKey, str], workspace_id: Optional[str] = None) -> Optional[RuleSet]:
        row = _query_active(self.db, RuleSetKey.parse(key), workspace_id)
        return _to_domain(row) if row else None

    def seed_defaults(self, created_by: str = "system") -> List[RuleSet]:
        """Grava os defaults do catálogo como RuleSets globais ativos

        Só para keys que ainda não têm nenhuma versão global.
        """
        seeded = []
        for key in RuleSetKey:
            exists = self.db.query(RuleSetDB.id).filter(
                RuleSetDB.simulator_key == key.value,
                RuleSetDB.workspace_id.is_(None)
            ).first()
            if exists:
                continue

            default = get_default_ruleset(key)
            row = RuleSetDB(
                simulator_key=key.value,
                name=default.name,
                version=default.version,
                is_active=True,
                payload=default.payload,
                workspace_id=None,
                created_by=created_by
            )
            self.db.add(row)
            self.db.flush()
            seeded.append(_to_domain(row))

        self.db.commit()
        if seeded:
            log.info(f"Defaults gravados: {', '.join(rs.key.value for rs in seeded)}")
        return seeded

    def _deactivate_all(self, key: RuleSetKey, workspace_id: Optional[str]) -> None:
        query = self.db.query(RuleSetDB).filter(
            RuleSetDB.simulator_key == key.value,
            RuleSetDB.is_active.is_(True)
        )
        for row in _workspace_filter(query, workspace_id, include_global=False).all():
            row.is_active = False
        self.db.flush()


class SqlAlchemyConfigSource:
    """ConfigSource sobre a tabela `rulesets`

    Abre uma sessão por consulta. Erros de banco propagam; o resolver
    decide o que fazer com eles.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def try_get_active(self, key: RuleSetKey, workspace_id: Optional[str]) -> Optional[Dict[str, Any]]:
        db = self.session_factory()
        try:
            row = _query_active(db, key, workspace_id)
            return row.payload if row else None
        finally:
            db.close()
