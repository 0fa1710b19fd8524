"""Core functionality for schemeless."""

from .config import ValidatorSettings
from .events import Attribute, Characters, SchemaEvent, StartElement
from .kinds import ElementKind
from .logging import (
    ValidationRunLogger,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)
from .rules import (
    DEFAULT_RULES,
    RuleOverrides,
    RulesLoadError,
    RuleTables,
    load_rules,
)

__all__ = [
    "DEFAULT_RULES",
    "Attribute",
    "Characters",
    "ElementKind",
    "RuleOverrides",
    "RuleTables",
    "RulesLoadError",
    "SchemaEvent",
    "StartElement",
    "ValidationRunLogger",
    "ValidatorSettings",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "load_rules",
]
