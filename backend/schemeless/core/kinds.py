"""Schema element kinds.

Element tags are classified into the kinds that carry their own rule set.
Every other tag maps to ``ElementKind.OTHER``; the raw tag always travels
with the event so that ``OTHER`` elements can still be accepted or rejected
by name.
"""

from enum import Enum


class ElementKind(Enum):
    """Kinds of schema elements with dedicated validation rules."""

    FIELD = "field"
    DYNAMIC_FIELD = "dynamicField"
    COPY_FIELD = "copyField"
    FIELD_TYPE = "fieldType"
    UNIQUE_KEY = "uniqueKey"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str) -> "ElementKind":
        """Classify a raw tag name, falling back to OTHER."""
        for kind in cls:
            if kind is not cls.OTHER and kind.value == tag:
                return kind
        return cls.OTHER

    @property
    def is_field_like(self) -> bool:
        """Whether the kind declares a named, typed field."""
        return self in (ElementKind.FIELD, ElementKind.DYNAMIC_FIELD)


__all__ = ["ElementKind"]
