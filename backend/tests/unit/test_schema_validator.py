"""Unit tests for the SchemaValidator entry point.

Covers the verdict returned to callers, the end-to-end scenarios for small
documents and the absence of state between runs.
"""

import pytest

from schemeless.core import DEFAULT_RULES, StartElement, ValidatorSettings
from schemeless.validation import (
    SchemaValidator,
    ValidationError,
    ValidationResult,
    ViolationType,
)


@pytest.fixture
def validator():
    """Create a validator with default rules and settings."""
    return SchemaValidator(DEFAULT_RULES, ValidatorSettings())


def wrap(body: str) -> str:
    """Wrap schema body elements in a root element."""
    return f'<schema name="test" version="1.6">{body}</schema>'


class TestValidationResult:
    """Test the result data structures."""

    def test_error_str_representation(self):
        """Test string representation of ValidationError."""
        error = ValidationError(
            type=ViolationType.DUPLICATE_NAME,
            message="Found duplicate field names 'id'.",
            element="field",
            name="id",
            line=3,
            column=4,
            help="Rename one of the fields",
        )

        text = str(error)
        assert "duplicate_name: Found duplicate field names 'id'." in text
        assert "(element: field name=id)" in text
        assert "(line 3, column 4)" in text
        assert "Help: Rename one of the fields" in text

    def test_error_to_dict_omits_empty_context(self):
        """Test dictionary conversion of ValidationError."""
        error = ValidationError(
            type=ViolationType.MISSING_DEST,
            message="copyField must have the dest attribute.",
            element="copyField",
        )

        assert error.to_dict() == {
            "type": "missing_dest",
            "message": "copyField must have the dest attribute.",
            "element": "copyField",
        }

    def test_failure_result(self):
        """Test properties of a failing result."""
        error = ValidationError(type=ViolationType.MISSING_SOURCE, message="m")
        result = ValidationResult.failure(error)

        assert result.is_valid is False
        assert result.error_type == ViolationType.MISSING_SOURCE
        assert "Invalid" in str(result)

    def test_success_result(self):
        """Test properties of a passing result."""
        result = ValidationResult(is_valid=True)

        assert result.error is None
        assert result.error_type is None
        assert str(result) == "✅ Valid"


class TestScenarios:
    """Test small end-to-end documents."""

    def test_field_with_forward_type_reference(self, validator):
        """Test a field whose fieldType is declared after it."""
        events = [
            StartElement(
                "field",
                (("name", "id"), ("type", "id_unique"), ("required", "true"), ("stored", "true")),
            ),
            StartElement(
                "fieldType",
                (("name", "id_unique"), ("class", "solr.StrField"), ("sortMissingLast", "true")),
            ),
        ]

        result = validator.validate(events)

        assert result.is_valid is True
        assert result.error is None

    def test_field_with_forward_type_reference_xml(self, validator):
        """Test the same document parsed from XML."""
        content = wrap(
            '<field name="id" type="id_unique" required="true" stored="true"/>'
            '<fieldType name="id_unique" class="solr.StrField" sortMissingLast="true"/>'
        )

        result = validator.validate_content(content)

        assert result.is_valid is True
        assert result.stats.fields == 1
        assert result.stats.field_types == 1

    def test_deprecated_trie_field(self, validator):
        """Test that a Trie field type is rejected."""
        result = validator.validate_content(
            '<fieldType name="x" class="solr.TrieIntField" positionIncrementGap="0"/>'
        )

        assert result.is_valid is False
        assert result.error_type == ViolationType.DEPRECATED_IMPLEMENTATION_CLASS

    @pytest.mark.parametrize(
        "content",
        [
            '<copyField source="doi" dest="doi"/>',
            wrap(
                '<field name="doi" type="string"/>'
                '<fieldType name="string" class="solr.StrField"/>'
                '<copyField source="doi" dest="doi"/>'
            ),
        ],
    )
    def test_self_referential_copy_field(self, validator, content):
        """Test that self copies fail whether or not the field exists."""
        result = validator.validate_content(content)

        assert result.error_type == ViolationType.SELF_REFERENTIAL_COPY

    def test_unique_key_resolves(self, validator):
        """Test that a matching uniqueKey passes and is reported."""
        result = validator.validate_content(
            wrap(
                "<uniqueKey>id</uniqueKey>"
                '<field name="id" type="string"/>'
                '<fieldType name="string" class="solr.StrField"/>'
            )
        )

        assert result.is_valid is True
        assert result.unique_key == "id"

    def test_unique_key_unresolved(self, validator):
        """Test that an unknown uniqueKey fails."""
        result = validator.validate_content(
            wrap(
                "<uniqueKey>isbn</uniqueKey>"
                '<field name="id" type="string"/>'
                '<fieldType name="string" class="solr.StrField"/>'
            )
        )

        assert result.error_type == ViolationType.UNRESOLVED_UNIQUE_KEY

    def test_constant_name_redeclared(self, validator):
        """Test that constant names may be declared twice."""
        result = validator.validate_content(
            wrap(
                '<field name="_version_" type="plong" stored="false"/>'
                '<field name="_version_" type="plong" stored="false"/>'
                '<fieldType name="plong" class="solr.LongPointField"/>'
            )
        )

        assert result.is_valid is True

    def test_unsupported_element(self, validator):
        """Test that wrapper elements from old schemas are rejected."""
        result = validator.validate_content(
            wrap('<fields><field name="id" type="string"/></fields>')
        )

        assert result.error_type == ViolationType.UNSUPPORTED_ELEMENT
        assert result.error.value == "fields"

    def test_stops_at_first_violation(self, validator):
        """Test that only the first problem is reported."""
        result = validator.validate_content(
            wrap('<field name="add" type="string"/><unknown/>')
        )

        assert result.error_type == ViolationType.RESERVED_NAME_USED
        assert result.stats.elements == 2

    def test_malformed_xml(self, validator):
        """Test that malformed XML yields a failing result, not an exception."""
        result = validator.validate_content("<schema><uniqueKey>id</schema>")

        assert result.error_type == ViolationType.XML_SYNTAX_ERROR

    def test_strict_attributes_from_settings(self):
        """Test that strict attribute mode can be enabled through settings."""
        validator = SchemaValidator(
            DEFAULT_RULES, ValidatorSettings(strict_attributes=True)
        )
        events = [StartElement("copyField", (("source", "a"), ("dest", "b"), ("dest", "c")))]

        result = validator.validate(events)

        assert result.error_type == ViolationType.DUPLICATE_ATTRIBUTE


class TestIdempotence:
    """Test that no state persists between runs."""

    def test_valid_document_twice(self, validator, sample_schema):
        """Test that a valid document passes on every run."""
        first = validator.validate_content(sample_schema)
        second = validator.validate_content(sample_schema)

        assert first.is_valid is True
        assert second.is_valid is True
        assert first.stats == second.stats

    def test_invalid_document_twice(self, validator):
        """Test that a failing document fails the same way on every run."""
        content = wrap('<field name="id" type="missing"/>')

        first = validator.validate_content(content)
        second = validator.validate_content(content)

        assert first.error_type == ViolationType.UNRESOLVED_FIELD_TYPE
        assert second.error == first.error

    def test_file_validation(self, validator, sample_schema_path):
        """Test validating a schema file from disk."""
        result = validator.validate_file(sample_schema_path)

        assert result.is_valid is True


class TestErrorLocation:
    """Test that violations found in XML point at the offending element."""

    def test_rule_violation_reports_line_and_column(self, validator):
        """Test the location of an element-level violation."""
        result = validator.validate_content(
            '<schema>\n\n<field name="a" type="t" stored="yes"/></schema>'
        )

        assert result.error_type == ViolationType.INVALID_BOOLEAN_VALUE
        assert result.error.line == 3
        assert result.error.column == 1

    def test_nested_element_location(self, validator, sample_schema):
        """Test the location of a violation deep inside the fixture schema."""
        content = sample_schema.replace(
            '<filter class="solr.LowerCaseFilterFactory"/>',
            '<filter class="solr.LowerCaseFilterFactory"/><unknown/>',
        )
        expected_line = next(
            number
            for number, line in enumerate(content.splitlines(), start=1)
            if "<unknown/>" in line
        )

        result = validator.validate_content(content)

        assert result.error_type == ViolationType.UNSUPPORTED_ELEMENT
        assert result.error.line == expected_line


class TestContentEncoding:
    """Test in-memory documents that declare a non UTF-8 encoding."""

    CONTENT = (
        '<?xml version="1.0" encoding="ISO-8859-1"?>\n'
        '<schema name="test" version="1.6">'
        "<uniqueKey>café</uniqueKey>"
        '<field name="café" type="string"/>'
        '<fieldType name="string" class="solr.StrField"/>'
        "</schema>"
    )

    def test_text_content_is_not_re_encoded(self, validator):
        """Test that decoded text keeps its characters."""
        result = validator.validate_content(self.CONTENT)

        assert result.is_valid is True
        assert result.unique_key == "café"

    def test_bytes_follow_the_declared_encoding(self, validator):
        """Test that raw bytes are decoded as the declaration says."""
        result = validator.validate_content(self.CONTENT.encode("iso-8859-1"))

        assert result.is_valid is True
        assert result.unique_key == "café"
