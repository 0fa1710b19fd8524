"""Event records consumed by the rule engine.

Any adapter able to walk a schema document in order can drive the engine by
producing these two records.
"""

from dataclasses import dataclass, field

Attribute = tuple[str, str]


@dataclass(frozen=True)
class StartElement:
    """An element start with its raw tag name and ordered attributes.

    Attribute keys may repeat; lookups take the last occurrence. ``line`` and
    ``column`` (both 1-based) locate the start tag in the source document and
    take no part in equality.
    """

    tag: str
    attributes: tuple[Attribute, ...] = field(default_factory=tuple)
    line: int | None = field(default=None, compare=False)
    column: int | None = field(default=None, compare=False)

    def get(self, key: str) -> str | None:
        """Return the value of the last attribute named ``key``."""
        value = None
        for attr_key, attr_value in self.attributes:
            if attr_key == key:
                value = attr_value
        return value

    def has(self, key: str) -> bool:
        """Check whether any attribute is named ``key``."""
        return any(attr_key == key for attr_key, _ in self.attributes)

    @property
    def keys(self) -> list[str]:
        """Attribute keys in document order, repeats included."""
        return [attr_key for attr_key, _ in self.attributes]


@dataclass(frozen=True)
class Characters:
    """Raw character content of a text node."""

    content: str


SchemaEvent = StartElement | Characters


__all__ = ["Attribute", "Characters", "SchemaEvent", "StartElement"]
