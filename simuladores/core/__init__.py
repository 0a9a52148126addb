"""Motor de simulação parametrizado por RuleSets"""

from .ruleset import RuleSet, RuleSetKey
from .exceptions import (
    SimuladoresError,
    RuleSetValidationError,
    RuleSetNotFoundError,
    UnknownRuleSetKeyError,
)
from .schema_registry import validate, ValidationResult, ValidationIssue
from .defaults import get_default, get_default_ruleset
from .resolver import ActiveRuleSetResolver, ConfigSource, ResolvedConfig, StaticConfigSource, resolve_active
from .calculation_trace import BreakdownItem, SimulationResult
from .ferias_calculator import FeriasCalculator, FeriasInput
from .rescisao_calculator import RescisaoCalculator, RescisaoInput, TipoRescisao
from .honorarios_calculator import HonorariosCalculator, HonorariosInput, RegimeTributario, SegmentoEmpresa
from .fator_r import FatorRCalculator, FatorRInput, FatorRResult
from .simples_calculator import BracketNotFound, SimplesBand, SimplesCalculator, SimplesInput, find_band
from .simulator import CALCULATORS, calculate, get_calculator
from .result_auditor import audit_result

__all__ = [
    'RuleSet',
    'RuleSetKey',
    'SimuladoresError',
    'RuleSetValidationError',
    'RuleSetNotFoundError',
    'UnknownRuleSetKeyError',
    'validate',
    'ValidationResult',
    'ValidationIssue',
    'get_default',
    'get_default_ruleset',
    'ActiveRuleSetResolver',
    'ConfigSource',
    'ResolvedConfig',
    'StaticConfigSource',
    'resolve_active',
    'BreakdownItem',
    'SimulationResult',
    'FeriasCalculator',
    'FeriasInput',
    'RescisaoCalculator',
    'RescisaoInput',
    'TipoRescisao',
    'HonorariosCalculator',
    'HonorariosInput',
    'RegimeTributario',
    'SegmentoEmpresa',
    'FatorRCalculator',
    'FatorRInput',
    'FatorRResult',
    'BracketNotFound',
    'SimplesBand',
    'SimplesCalculator',
    'SimplesInput',
    'find_band',
    'CALCULATORS',
    'calculate',
    'get_calculator',
    'audit_result',
]
