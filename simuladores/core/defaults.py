"""Catálogo de payloads padrão

Rede de segurança: quando não existe RuleSet ativo para o workspace, os
simuladores usam estes valores. O catálogo é lido uma única vez do YAML
empacotado e não muda durante o processo.
"""

import copy
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

import yaml

from .ruleset import RuleSet, RuleSetKey


DEFAULTS_FILE = Path(__file__).parent.parent / "rules" / "default_rulesets.yaml"


@dataclass(frozen=True)
class DefaultEntry:
    """Entrada do catálogo"""
    key: RuleSetKey
    name: str
    version: int
    payload: Mapping[str, Any]


def _load_catalog(file_path: Path) -> Mapping[RuleSetKey, DefaultEntry]:
    """Carrega o catálogo do YAML

    Raises:
        ValueError: arquivo mal formado ou sem alguma das chaves de simulador
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or not isinstance(data.get('rulesets'), dict):
        raise ValueError(f"Catálogo de defaults inválido: {file_path}")

    entries = {}
    for raw_key, entry in data['rulesets'].items():
        key = RuleSetKey.parse(raw_key)
        entries[key] = DefaultEntry(
            key=key,
            name=entry.get('name', key.value),
            version=int(entry.get('version', 1)),
            payload=entry['payload']
        )

    missing = [key.value for key in RuleSetKey if key not in entries]
    if missing:
        raise ValueError(f"Catálogo sem defaults para: {', '.join(missing)}")

    return MappingProxyType(entries)


_CATALOG: Mapping[RuleSetKey, DefaultEntry] = _load_catalog(DEFAULTS_FILE)


def get_default(key: Union[RuleSetKey, str]) -> Dict[str, Any]:
    """Payload padrão do simulador

    Retorna uma cópia: quem chama pode alterá-la sem afetar o catálogo.

    Args:
        key: tipo de simulador

    Returns:
        payload padrão
    """
    return copy.deepcopy(_CATALOG[RuleSetKey.parse(key)].payload)


def get_default_entry(key: Union[RuleSetKey, str]) -> DefaultEntry:
    return _CATALOG[RuleSetKey.parse(key)]


def get_default_ruleset(key: Union[RuleSetKey, str]) -> RuleSet:
    """Default como RuleSet global, inativo e não persistido (usado no seed)"""
    entry = get_default_entry(key)
    return RuleSet(
        key=entry.key,
        name=entry.name,
        version=entry.version,
        is_active=False,
        payload=get_default(entry.key),
        created_by="system"
    )
