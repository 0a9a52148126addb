"""Resolver de RuleSet ativo

Busca o payload ativo do workspace numa fonte de configuração e, na falta
dele, devolve o default do catálogo marcando `is_fallback`.

Falha da fonte e ausência de RuleSet seguem o mesmo caminho: os simuladores
continuam utilizáveis com a configuração padrão. A falha é registrada no log
em nível WARNING, já que pode esconder indisponibilidade do banco.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

from ..logging_config import log
from .defaults import get_default
from .ruleset import RuleSetKey


@runtime_checkable
class ConfigSource(Protocol):
    """Fonte de RuleSets ativos"""

    def try_get_active(self, key: RuleSetKey, workspace_id: Optional[str]) -> Optional[Dict[str, Any]]:
        """Payload ativo para key/workspace, ou None"""
        ...


class StaticConfigSource:
    """Fonte em memória, indexada por (key, workspace_id)

    workspace_id None registra um payload global, visível a todos os
    workspaces. Vazia, funciona como fonte que nunca encontra nada.
    """

    def __init__(self, payloads: Optional[Mapping[Tuple[RuleSetKey, Optional[str]], Dict[str, Any]]] = None):
        self._payloads: Dict[Tuple[RuleSetKey, Optional[str]], Dict[str, Any]] = dict(payloads or {})

    def set_active(self, key: RuleSetKey, payload: Dict[str, Any], workspace_id: Optional[str] = None) -> None:
        self._payloads[(RuleSetKey.parse(key), workspace_id)] = payload

    def try_get_active(self, key: RuleSetKey, workspace_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if (key, workspace_id) in self._payloads:
            return self._payloads[(key, workspace_id)]
        return self._payloads.get((key, None))


@dataclass(frozen=True)
class ResolvedConfig:
    """Payload a usar no cálculo

    Attributes:
        key: tipo de simulador
        config: payload (ativo ou padrão)
        is_fallback: True quando veio do catálogo padrão
    """
    key: RuleSetKey
    config: Dict[str, Any]
    is_fallback: bool

    def to_dict(self) -> Dict[str, Any]:
        return {'key': self.key.value, 'config': self.config, 'is_fallback': self.is_fallback}


class ActiveRuleSetResolver:
    """Compõe uma ConfigSource com o catálogo de defaults"""

    def __init__(self, source: ConfigSource):
        self.source = source

    def resolve_active(self, key: Union[RuleSetKey, str], workspace_id: Optional[str] = None) -> ResolvedConfig:
        """Payload ativo do workspace ou o default

        Não valida o payload lido: a validação acontece na gravação.

        Args:
            key: tipo de simulador
            workspace_id: tenant

        Returns:
            ResolvedConfig com is_fallback=False somente quando a fonte
            devolveu um payload
        """
        key = RuleSetKey.parse(key)

        try:
            payload = self.source.try_get_active(key, workspace_id)
        except Exception as e:
            log.opt(exception=e).warning(
                f"Falha ao buscar RuleSet ativo {key.value} (workspace={workspace_id}); usando padrão"
            )
            payload = None

        if payload is None:
            log.info(f"Sem RuleSet ativo para {key.value} (workspace={workspace_id}); usando padrão")
            return ResolvedConfig(key=key, config=get_default(key), is_fallback=True)

        return ResolvedConfig(key=key, config=payload, is_fallback=False)


def resolve_active(
    key: Union[RuleSetKey, str],
    workspace_id: Optional[str],
    source: ConfigSource
) -> ResolvedConfig:
    return ActiveRuleSetResolver(source).resolve_active(key, workspace_id)
