"""Main validator that drives the rule engine and the resolver.

This module implements the SchemaValidator class, the entry point for
callers: it runs one pass over a schema's events, resolves deferred
references and turns the first violation into a ``ValidationResult``.
"""

from collections.abc import Iterable
import io
from pathlib import Path

from ..core.config import ValidatorSettings
from ..core.events import SchemaEvent
from ..core.logging import ValidationRunLogger, get_logger
from ..core.rules import DEFAULT_RULES, RuleTables
from .engine import RuleEngine
from .errors import SchemaViolation, ValidationResult
from .resolver import CrossReferenceResolver
from .state import ValidationState
from .stream import iter_schema_events

logger = get_logger(__name__)


class SchemaValidator:
    """Validates Solr schema documents.

    A validator holds only configuration. Every call starts from empty
    state, so the same instance can validate any number of documents and
    always returns the same verdict for the same input.
    """

    def __init__(
        self,
        rules: RuleTables = DEFAULT_RULES,
        settings: ValidatorSettings | None = None,
        strict_attributes: bool | None = None,
    ):
        """Initialize the validator with rule tables and configuration.

        Args:
            rules: Rule tables to validate against (default: built-in tables)
            settings: Optional settings; read from the environment if omitted
            strict_attributes: Overrides ``settings.strict_attributes``
        """
        self.rules = rules
        self.settings = settings or ValidatorSettings()
        self.strict_attributes = (
            self.settings.strict_attributes
            if strict_attributes is None
            else strict_attributes
        )
        self.resolver = CrossReferenceResolver()

    def validate(
        self, events: Iterable[SchemaEvent], source: str = "<events>"
    ) -> ValidationResult:
        """Validate a stream of schema events.

        Args:
            events: Element and text events in document order
            source: Label used in log output

        Returns:
            ValidationResult with the verdict and, on failure, the first error
        """
        state = ValidationState()
        engine = RuleEngine(self.rules, state, strict_attributes=self.strict_attributes)

        with ValidationRunLogger(logger, source) as run:
            try:
                for event in events:
                    engine.observe(event)
                self.resolver.resolve(state)
            except SchemaViolation as violation:
                result = ValidationResult.failure(violation.error, state.stats)
            else:
                result = ValidationResult.success(state.stats, state.unique_key)

        result.duration_ms = run.duration_ms
        run.log_verdict(
            result.is_valid,
            error_type=result.error_type.value if result.error_type else None,
            elements=state.stats.elements,
        )
        return result

    def validate_content(self, content: str | bytes, source: str = "<string>") -> ValidationResult:
        """Validate a schema document held in memory.

        ``str`` content is parsed as decoded text; ``bytes`` are decoded by
        the parser according to the XML declaration.
        """
        stream = io.StringIO(content) if isinstance(content, str) else io.BytesIO(content)
        return self.validate(iter_schema_events(stream), source=source)

    def validate_file(self, path: str | Path) -> ValidationResult:
        """Validate a schema document on disk.

        Raises:
            OSError: If the file cannot be opened
        """
        file_path = Path(path)
        with file_path.open("rb") as handle:
            return self.validate(iter_schema_events(handle), source=str(file_path))
