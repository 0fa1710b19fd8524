"""Error and result data structures for the validation engine.

A run stops at the first violation, so a result carries at most one error.
Inside the engine the violation travels as a ``SchemaViolation`` exception;
``SchemaValidator`` turns it into a ``ValidationResult`` for its callers.
"""

from dataclasses import dataclass, field
from enum import Enum


class ViolationType(str, Enum):
    """Closed taxonomy of schema violations."""

    UNSUPPORTED_ELEMENT = "unsupported_element"
    MISSING_REQUIRED_ATTRIBUTE = "missing_required_attribute"
    UNRECOGNIZED_OPTIONAL_ATTRIBUTE = "unrecognized_optional_attribute"
    INVALID_BOOLEAN_VALUE = "invalid_boolean_value"
    DUPLICATE_TYPE_DECLARATION = "duplicate_type_declaration"
    MISSING_SOURCE = "missing_source"
    MISSING_DEST = "missing_dest"
    SELF_REFERENTIAL_COPY = "self_referential_copy"
    UNSUPPORTED_IMPLEMENTATION_CLASS = "unsupported_implementation_class"
    DEPRECATED_IMPLEMENTATION_CLASS = "deprecated_implementation_class"
    NO_RECOGNIZED_ATTRIBUTES = "no_recognized_attributes"
    RESERVED_NAME_USED = "reserved_name_used"
    DUPLICATE_NAME = "duplicate_name"
    UNRESOLVED_UNIQUE_KEY = "unresolved_unique_key"
    UNRESOLVED_FIELD_TYPE = "unresolved_field_type"
    UNRESOLVED_COPY_FIELD_ENDPOINT = "unresolved_copy_field_endpoint"

    # Raised by the XML adapter or opt-in engine settings
    XML_SYNTAX_ERROR = "xml_syntax_error"
    FORBIDDEN_XML_CONSTRUCT = "forbidden_xml_construct"
    DUPLICATE_ATTRIBUTE = "duplicate_attribute"


@dataclass
class ValidationError:
    """Represents a schema violation.

    Contains the taxonomy case, a human readable message and whatever
    context the detecting rule had: the element kind, the element's declared
    name and the offending value.
    """

    type: ViolationType
    message: str
    element: str | None = None
    name: str | None = None
    value: str | None = None
    line: int | None = None
    column: int | None = None
    help: str | None = None

    def __str__(self) -> str:
        """Return a formatted string representation of the error."""
        parts = [f"{self.type.value}: {self.message}"]

        if self.element and self.name:
            parts.append(f"(element: {self.element} name={self.name})")
        elif self.element:
            parts.append(f"(element: {self.element})")
        if self.line is not None or self.column is not None:
            location = f"line {self.line or 0}, column {self.column or 0}"
            parts.append(f"({location})")
        if self.help:
            parts.append(f"Help: {self.help}")

        return " ".join(parts)

    def to_dict(self) -> dict[str, str | int]:
        """Convert to a dictionary, omitting empty context."""
        data: dict[str, str | int] = {
            "type": self.type.value,
            "message": self.message,
        }
        for key in ("element", "name", "value", "line", "column", "help"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


class SchemaViolation(Exception):
    """Raised by the engine and resolver at the first violation.

    Carries the ``ValidationError`` describing the problem.
    """

    def __init__(self, error: ValidationError):
        super().__init__(error.message)
        self.error = error

    @property
    def type(self) -> ViolationType:
        """Taxonomy case of the violation."""
        return self.error.type


@dataclass
class ValidationStats:
    """Counters collected during one run."""

    elements: int = 0
    fields: int = 0
    dynamic_fields: int = 0
    field_types: int = 0
    copy_fields: int = 0
    skipped: int = 0

    def to_dict(self) -> dict[str, int]:
        """Convert to a dictionary for JSON/YAML output."""
        return {
            "elements": self.elements,
            "fields": self.fields,
            "dynamic_fields": self.dynamic_fields,
            "field_types": self.field_types,
            "copy_fields": self.copy_fields,
            "skipped": self.skipped,
        }


@dataclass
class ValidationResult:
    """Verdict of one validation run."""

    is_valid: bool
    error: ValidationError | None = None
    stats: ValidationStats = field(default_factory=ValidationStats)
    unique_key: str | None = None
    duration_ms: float = 0.0

    @classmethod
    def success(cls, stats: ValidationStats, unique_key: str | None = None) -> "ValidationResult":
        """Create a passing result."""
        return cls(is_valid=True, stats=stats, unique_key=unique_key)

    @classmethod
    def failure(
        cls, error: ValidationError, stats: ValidationStats | None = None
    ) -> "ValidationResult":
        """Create a failing result for ``error``."""
        return cls(is_valid=False, error=error, stats=stats or ValidationStats())

    @property
    def error_type(self) -> ViolationType | None:
        """Taxonomy case of the failure, if any."""
        return self.error.type if self.error else None

    def __str__(self) -> str:
        """Return a formatted string representation of the validation result."""
        if self.is_valid:
            return "✅ Valid"
        return f"❌ Invalid\n  - {self.error}"
