"""Schema validation components.

This package provides the single-pass validation engine for Solr schema
documents: the rule engine, the cross-reference resolver, the XML event
stream adapter and the SchemaValidator that ties them together.
"""

from .engine import RuleEngine
from .errors import (
    SchemaViolation,
    ValidationError,
    ValidationResult,
    ValidationStats,
    ViolationType,
)
from .resolver import CrossReferenceResolver
from .state import (
    CopyFieldEdge,
    NameRegistry,
    TypeReference,
    TypeReferenceMap,
    ValidationState,
    composite_key,
)
from .stream import iter_schema_events, local_name
from .validator import SchemaValidator

__all__ = [
    "CopyFieldEdge",
    "CrossReferenceResolver",
    "NameRegistry",
    "RuleEngine",
    "SchemaValidator",
    "SchemaViolation",
    "TypeReference",
    "TypeReferenceMap",
    "ValidationError",
    "ValidationResult",
    "ValidationState",
    "ValidationStats",
    "ViolationType",
    "composite_key",
    "iter_schema_events",
    "local_name",
]
