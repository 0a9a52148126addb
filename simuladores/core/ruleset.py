"""RuleSet: configuração versionada de um simulador

Cada simulador (férias, rescisão, honorários, Fator R, Simples DAS) lê seus
parâmetros de um RuleSet. Edições criam uma nova versão; versões antigas
permanecem para auditoria.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union

from .exceptions import UnknownRuleSetKeyError


class RuleSetKey(str, Enum):
    """Tipos de simulador"""
    HONORARIOS = "HONORARIOS"
    RESCISAO = "RESCISAO"
    FERIAS = "FERIAS"
    FATOR_R = "FATOR_R"
    SIMPLES_DAS = "SIMPLES_DAS"

    @classmethod
    def parse(cls, value: Union["RuleSetKey", str]) -> "RuleSetKey":
        """Converte string (case-insensitive) em RuleSetKey

        Raises:
            UnknownRuleSetKeyError: chave fora do conjunto fixo
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise UnknownRuleSetKeyError(value) from None


@dataclass(frozen=True)
class RuleSet:
    """Versão de configuração de um simulador

    Objeto imutável. O payload não é validado aqui: a validação acontece
    apenas na gravação (schema_registry.validate).

    Attributes:
        key: tipo de simulador
        name: nome exibido na administração (ex: "Férias (Padrão)")
        version: número de versão por key, crescente
        is_active: no máximo um ativo por key e workspace
        payload: parâmetros do simulador
        workspace_id: tenant dono da versão (None = global)
        id: identificador no banco (None se ainda não persistido)
        created_by: usuário que criou a versão
        created_at: momento da criação

    Example:
        >>> rs = RuleSet(
        ...     key=RuleSetKey.FERIAS,
        ...     name="Férias 2024",
        ...     version=2,
        ...     is_active=True,
        ...     payload={"tercoConstitucional": True, "limiteDiasAbono": 10},
        ... )
    """

    key: RuleSetKey
    name: str
    version: int
    is_active: bool
    payload: Dict[str, Any]
    workspace_id: Optional[str] = None
    id: Optional[int] = None
    created_by: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def is_global(self) -> bool:
        """Versão compartilhada por todos os workspaces"""
        return self.workspace_id is None

    def to_dict(self) -> Dict[str, Any]:
        """Converte para dicionário serializável"""
        return {
            'id': self.id,
            'key': self.key.value,
            'name': self.name,
            'version': self.version,
            'is_active': self.is_active,
            'payload': self.payload,
            'workspace_id': self.workspace_id,
            'created_by': self.created_by,
            'created_at': self.created_at.isoformat()
        }

    def __str__(self) -> str:
        status = "ativo" if self.is_active else "inativo"
        return f"RuleSet({self.key.value} v{self.version}, {status})"

    def __repr__(self) -> str:
        return (
            f"RuleSet(key={self.key.value!r}, version={self.version!r}, "
            f"is_active={self.is_active!r}, workspace_id={self.workspace_id!r})"
        )
