"""State accumulated over one pass of the schema event stream.

A ``ValidationState`` is created empty for every run and dropped once the
verdict is known; nothing survives between runs.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field

from .errors import ValidationStats


def composite_key(kind: str, name: str) -> str:
    """Build the ``<kind>:<name>`` key used by the name registry."""
    return f"{kind}:{name}"


class NameRegistry:
    """Set of ``<kind>:<name>`` keys declared so far."""

    def __init__(self) -> None:
        self._keys: set[str] = set()

    def __contains__(self, key: str) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def add(self, kind: str, name: str) -> bool:
        """Register a name, returning False if it was already present."""
        key = composite_key(kind, name)
        if key in self._keys:
            return False
        self._keys.add(key)
        return True

    def declares(self, kind: str, name: str) -> bool:
        """Check whether ``name`` was declared under ``kind``."""
        return composite_key(kind, name) in self._keys


@dataclass(frozen=True)
class TypeReference:
    """A field's reference to a fieldType by name."""

    field: str
    type: str
    element: str


class TypeReferenceMap:
    """Type references by field name, in declaration order."""

    def __init__(self) -> None:
        self._fields: set[str] = set()
        self._references: list[TypeReference] = []

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._fields

    def __iter__(self) -> Iterator[TypeReference]:
        return iter(self._references)

    def __len__(self) -> int:
        return len(self._references)

    def record(self, field_name: str, type_name: str, element: str) -> None:
        """Record a type reference; repeats for a name are all kept."""
        self._fields.add(field_name)
        self._references.append(TypeReference(field_name, type_name, element))


@dataclass(frozen=True)
class CopyFieldEdge:
    """A copyField declaration."""

    source: str
    dest: str


@dataclass
class ValidationState:
    """Everything the engine learns about the schema during one pass."""

    names: NameRegistry = field(default_factory=NameRegistry)
    types: TypeReferenceMap = field(default_factory=TypeReferenceMap)
    copy_fields: list[CopyFieldEdge] = field(default_factory=list)
    pending_unique_key: bool = False
    unique_key: str | None = None
    stats: ValidationStats = field(default_factory=ValidationStats)
