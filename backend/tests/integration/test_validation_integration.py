"""Integration tests validating a realistic managed-schema file.

The fixture schema exercises every element kind, including analyzer chains
and constant field names. Each failure test breaks exactly one thing in it.
"""

from pathlib import Path
import tempfile

import pytest

from schemeless.core import DEFAULT_RULES, ValidatorSettings, load_rules
from schemeless.validation import SchemaValidator, ViolationType


@pytest.fixture
def validator():
    return SchemaValidator(DEFAULT_RULES, ValidatorSettings())


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


class TestValidSchema:
    """Test the untouched fixture schema."""

    def test_sample_schema_is_valid(self, validator, sample_schema_path):
        result = validator.validate_file(sample_schema_path)

        assert result.is_valid is True, str(result)
        assert result.unique_key == "id"

    def test_sample_schema_stats(self, validator, sample_schema_path):
        stats = validator.validate_file(sample_schema_path).stats

        assert stats.fields == 10
        assert stats.dynamic_fields == 2
        assert stats.copy_fields == 3
        assert stats.field_types == 6
        # schema, 2 analyzers, 2 tokenizers, 2 filters, charFilter, similarity
        assert stats.skipped == 9


class TestBrokenSchemas:
    """Test single-edit variants of the fixture schema."""

    @pytest.mark.parametrize(
        ("old", "new", "expected"),
        [
            (
                'class="solr.LongPointField"',
                'class="solr.TrieLongField"',
                ViolationType.DEPRECATED_IMPLEMENTATION_CLASS,
            ),
            (
                "<uniqueKey>id</uniqueKey>",
                "<uniqueKey>isbn</uniqueKey>",
                ViolationType.UNRESOLVED_UNIQUE_KEY,
            ),
            (
                "<uniqueKey>id</uniqueKey>",
                "<uniqueKey>*_s</uniqueKey>",
                ViolationType.UNRESOLVED_UNIQUE_KEY,
            ),
            (
                '<fieldType name="pdate" class="org.apache.solr.schema.DatePointField" docValues="true"/>',
                "",
                ViolationType.UNRESOLVED_FIELD_TYPE,
            ),
            (
                '<copyField source="doi" dest="_text_"/>',
                '<copyField source="abstract" dest="_text_"/>',
                ViolationType.UNRESOLVED_COPY_FIELD_ENDPOINT,
            ),
            (
                '<field name="pages" type="pint" default="0"/>',
                '<field name="pages" type="pint" default="0" stored="yes"/>',
                ViolationType.INVALID_BOOLEAN_VALUE,
            ),
            (
                '<field name="doi" type="string" indexed="true" stored="true"/>',
                '<field name="title" type="string" indexed="true" stored="true"/>',
                ViolationType.DUPLICATE_NAME,
            ),
            (
                '<similarity class="solr.SchemaSimilarityFactory"/>',
                '<similarity class="solr.SchemaSimilarityFactory"/><query/>',
                ViolationType.UNSUPPORTED_ELEMENT,
            ),
            (
                '<dynamicField name="*_i" type="pint" indexed="true" stored="true"/>',
                '<dynamicField name="remove" type="pint"/>',
                ViolationType.RESERVED_NAME_USED,
            ),
        ],
    )
    def test_single_edit(self, validator, sample_schema, old, new, expected):
        assert old in sample_schema
        result = validator.validate_content(sample_schema.replace(old, new))

        assert result.is_valid is False
        assert result.error_type == expected

    def test_unresolved_field_type_names_field(self, validator, sample_schema):
        content = sample_schema.replace(
            '<fieldType name="pdate" class="org.apache.solr.schema.DatePointField" docValues="true"/>',
            "",
        )

        result = validator.validate_content(content)

        assert result.error.name == "published"
        assert result.error.value == "pdate"


class TestRuleOverridesEndToEnd:
    """Test validating legacy schemas with extended rule tables."""

    def test_legacy_wrappers_accepted_with_overrides(self, temp_dir, sample_schema):
        legacy = sample_schema.replace(
            '<field name="id"', '<fields><field name="id"'
        ).replace("<dynamicField", "</fields><dynamicField", 1)
        rules_file = temp_dir / "rules.yaml"
        rules_file.write_text("schema_elements:\n  - fields\n")

        strict = SchemaValidator(DEFAULT_RULES, ValidatorSettings())
        relaxed = SchemaValidator(load_rules(rules_file), ValidatorSettings())

        assert strict.validate_content(legacy).error_type == ViolationType.UNSUPPORTED_ELEMENT
        assert relaxed.validate_content(legacy).is_valid is True
