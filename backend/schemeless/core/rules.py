"""Static rule tables for Solr schema validation.

The rule tables are immutable reference data: the element tags a schema may
contain, the attribute keys each construct accepts, and the implementation
classes a fieldType may be backed by. ``DEFAULT_RULES`` is built once at
import time and handed to the engine by reference. Projects with custom
field types can extend the tables from a YAML file with ``load_rules``.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
import yaml

# Deprecated field types, see
# https://solr.apache.org/guide/solr/latest/indexing-guide/field-types-included-with-solr.html#deprecated-field-types
DEPRECATED_TYPES_URL = (
    "https://solr.apache.org/guide/solr/latest/indexing-guide/"
    "field-types-included-with-solr.html#deprecated-field-types"
)


class RulesLoadError(Exception):
    """Raised when a rule override file cannot be read or is malformed."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class RuleTables(BaseModel):
    """Immutable rule tables consulted by the rule engine."""

    model_config = ConfigDict(frozen=True)

    schema_elements: tuple[str, ...] = (
        "field",
        "fieldType",
        "dynamicField",
        "uniqueKey",
        "analyzer",
        "tokenizer",
        "filter",
        "schema",
        "charFilter",
        "copyField",
        "similarity",
    )

    field_required_attributes: tuple[str, ...] = ("name", "type")
    field_core_attributes: tuple[str, ...] = ("name", "type", "default")

    optional_field_properties: tuple[str, ...] = (
        "indexed",
        "stored",
        "docValues",
        "sortMissingFirst",
        "sortMissingLast",
        "multiValued",
        "uninvertible",
        "omitNorms",
        "omitTermFreqAndPositions",
        "omitPositions",
        "termVectors",
        "termPositions",
        "termOffsets",
        "termPayloads",
        "required",
        "useDocValuesAsStored",
        "large",
        "default",
    )
    # Optional properties whose value is free text rather than a boolean
    non_boolean_field_properties: tuple[str, ...] = ("default",)
    boolean_values: tuple[str, ...] = ("true", "false")

    class_prefixes: tuple[str, ...] = ("solr.", "org.apache.solr.schema.")

    field_type_classes: tuple[str, ...] = (
        "BBoxField",
        "BinaryField",
        "BoolField",
        "CollationField",
        "CurrencyFieldType",
        "DateRangeField",
        "DenseVectorField",
        "DatePointField",
        "DoublePointField",
        "ExternalFileField",
        "EnumFieldType",
        "FloatPointField",
        "ICUCollationField",
        "IntPointField",
        "LatLonPointSpatialField",
        "LongPointField",
        "NestPathField",
        "PointType",
        "PreAnalyzedField",
        "RandomSortField",
        "RankField",
        "RptWithGeometrySpatialField",
        "SortableTextField",
        "SpatialRecursivePrefixTreeFieldType",
        "StrField",
        "TextField",
        "UUIDField",
    )

    deprecated_field_type_classes: tuple[str, ...] = (
        "CurrencyField",
        "EnumField",
        "TrieDateField",
        "TrieDoubleField",
        "TrieFloatField",
        "TrieIntField",
        "TrieLongField",
        "TrieField",
    )

    field_type_properties: tuple[str, ...] = (
        "name",
        "positionIncrementGap",
        "autoGeneratePhraseQueries",
        "synonymQueryStyle",
        "enableGraphQueries",
        "docValuesFormat",
        "postingsFormat",
    )

    # SOLR-17274: names clashing with atomic update operations
    reserved_names: tuple[str, ...] = ("set", "add", "remove")

    constant_names: tuple[str, ...] = ("_root_", "_version_", "_nest_path_", "_text_")

    def is_schema_element(self, tag: str) -> bool:
        """Check whether a raw tag name is a recognized schema element."""
        return tag in self.schema_elements

    def is_boolean_property(self, key: str) -> bool:
        """Check whether an optional field property only accepts true/false."""
        return (
            key in self.optional_field_properties
            and key not in self.non_boolean_field_properties
        )

    def class_suffix(self, class_name: str) -> str | None:
        """Return the implementation class name with its namespace prefix removed.

        Returns None when the class does not live in a recognized namespace.
        """
        for prefix in self.class_prefixes:
            if class_name.startswith(prefix):
                return class_name[len(prefix) :]
        return None

    def extended(self, overrides: "RuleOverrides") -> "RuleTables":
        """Return a copy of these tables with the override entries appended."""
        update: dict[str, tuple[str, ...]] = {}
        for table, additions in overrides.model_dump().items():
            if not additions:
                continue
            current = getattr(self, table)
            update[table] = current + tuple(a for a in additions if a not in current)
        return self.model_copy(update=update)


class RuleOverrides(BaseModel):
    """Additional entries for the rule tables, as read from a YAML file."""

    model_config = ConfigDict(extra="forbid")

    schema_elements: list[str] = Field(default_factory=list)
    optional_field_properties: list[str] = Field(default_factory=list)
    non_boolean_field_properties: list[str] = Field(default_factory=list)
    class_prefixes: list[str] = Field(default_factory=list)
    field_type_classes: list[str] = Field(default_factory=list)
    deprecated_field_type_classes: list[str] = Field(default_factory=list)
    field_type_properties: list[str] = Field(default_factory=list)
    reserved_names: list[str] = Field(default_factory=list)
    constant_names: list[str] = Field(default_factory=list)


DEFAULT_RULES = RuleTables()


def parse_rule_overrides(data: Any) -> RuleOverrides:
    """Validate already-parsed override data."""
    if data is None:
        return RuleOverrides()
    if not isinstance(data, dict):
        raise RulesLoadError("Rule overrides must be a mapping of table name to list")
    try:
        return RuleOverrides.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise RulesLoadError("Invalid rule overrides", errors) from e


def load_rules(path: str | Path | None, base: RuleTables = DEFAULT_RULES) -> RuleTables:
    """Load rule tables, extending ``base`` with the overrides in ``path``.

    Args:
        path: YAML file with override lists, or None for the base tables
        base: Rule tables to extend

    Returns:
        The effective rule tables

    Raises:
        RulesLoadError: If the file is missing, unreadable or malformed
    """
    if path is None:
        return base

    rules_path = Path(path)
    if not rules_path.is_file():
        raise RulesLoadError(f"Rules file not found: {rules_path}")

    try:
        data = yaml.safe_load(rules_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise RulesLoadError(f"Cannot read rules file {rules_path}: {e}") from e

    return base.extended(parse_rule_overrides(data))
