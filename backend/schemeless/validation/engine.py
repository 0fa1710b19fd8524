"""Rule engine applying per-element schema rules.

The engine is fed one event at a time in document order. Each element is
checked against the rule set of its kind and recorded in the run's
``ValidationState``; the first violation raises ``SchemaViolation``.
"""

from collections import Counter

from ..core.events import Characters, SchemaEvent, StartElement
from ..core.kinds import ElementKind
from ..core.logging import get_logger
from ..core.rules import DEPRECATED_TYPES_URL, RuleTables
from .errors import SchemaViolation, ValidationError, ViolationType
from .state import CopyFieldEdge, ValidationState

logger = get_logger(__name__)


def _violation(
    violation_type: ViolationType,
    message: str,
    event: StartElement | None = None,
    value: str | None = None,
    help_text: str | None = None,
) -> SchemaViolation:
    """Build a violation carrying the element context of ``event``."""
    return SchemaViolation(
        ValidationError(
            type=violation_type,
            message=message,
            element=event.tag if event else None,
            name=event.get("name") if event else None,
            value=value,
            line=event.line if event else None,
            column=event.column if event else None,
            help=help_text,
        )
    )


class RuleEngine:
    """Validates schema elements and accumulates cross-reference state."""

    def __init__(
        self,
        rules: RuleTables,
        state: ValidationState | None = None,
        strict_attributes: bool = False,
    ):
        """Initialize the engine.

        Args:
            rules: Rule tables to validate against
            state: State to accumulate into (a fresh one by default)
            strict_attributes: Reject elements repeating an attribute key
        """
        self.rules = rules
        self.state = state if state is not None else ValidationState()
        self.strict_attributes = strict_attributes

    def observe(self, event: SchemaEvent) -> None:
        """Dispatch one event from the stream."""
        if isinstance(event, StartElement):
            self.observe_element(event)
        elif isinstance(event, Characters):
            self.observe_text(event.content)

    def observe_element(self, event: StartElement) -> None:
        """Validate one element start and record what it declares.

        Raises:
            SchemaViolation: If the element breaks a rule
        """
        self.state.stats.elements += 1

        if not self.rules.is_schema_element(event.tag):
            raise _violation(
                ViolationType.UNSUPPORTED_ELEMENT,
                f"Found unsupported schema field: {event.tag}.",
                event,
                value=event.tag,
                help_text=f"Supported elements: {', '.join(self.rules.schema_elements)}",
            )

        kind = ElementKind.from_tag(event.tag)

        if kind is ElementKind.OTHER:
            # Analyzer chains, similarity and the root element are accepted as-is
            self.state.stats.skipped += 1
            logger.debug("Skipping element", element=event.tag)
            return

        if self.strict_attributes:
            self._check_unique_attributes(event)

        if kind.is_field_like:
            self._observe_field(event, kind)
        elif kind is ElementKind.COPY_FIELD:
            self._observe_copy_field(event)
        elif kind is ElementKind.FIELD_TYPE:
            self._observe_field_type(event)
        elif kind is ElementKind.UNIQUE_KEY:
            self.state.pending_unique_key = True

    def observe_text(self, content: str) -> None:
        """Consume character data, capturing a pending unique key."""
        text = content.strip()
        if not self.state.pending_unique_key or not text:
            logger.debug("Ignoring character data", length=len(content))
            return

        self.state.unique_key = text
        self.state.pending_unique_key = False
        logger.debug("Captured unique key", unique_key=text)

    def _check_unique_attributes(self, event: StartElement) -> None:
        repeated = [key for key, count in Counter(event.keys).items() if count > 1]
        if repeated:
            raise _violation(
                ViolationType.DUPLICATE_ATTRIBUTE,
                f"Found repeated attribute '{repeated[0]}' in {event.tag}.",
                event,
                value=repeated[0],
            )

    def _observe_field(self, event: StartElement, kind: ElementKind) -> None:
        rules = self.rules

        required = rules.field_required_attributes
        if not all(event.has(key) for key in required):
            raise _violation(
                ViolationType.MISSING_REQUIRED_ATTRIBUTE,
                f"Found unsupported field key or property for '{event.tag}': {list(required)}.",
                event,
                help_text=f"Every {event.tag} must declare {', '.join(required)}",
            )

        name = event.get("name") or ""

        for key, value in event.attributes:
            if (
                key not in rules.field_core_attributes
                and key not in rules.optional_field_properties
            ):
                raise _violation(
                    ViolationType.UNRECOGNIZED_OPTIONAL_ATTRIBUTE,
                    f"Found some optional fields are incorrectly defined for '{event.tag}': {key}.",
                    event,
                    value=key,
                )
            if rules.is_boolean_property(key) and value not in rules.boolean_values:
                raise _violation(
                    ViolationType.INVALID_BOOLEAN_VALUE,
                    f"Found unsupported value '{value}' for {key} type in {event.tag}={name}.",
                    event,
                    value=value,
                    help_text=f"'{key}' only accepts {' or '.join(rules.boolean_values)}",
                )

        self._register_name(event, name)

        for key, type_name in event.attributes:
            if key != "type":
                continue
            if name in self.state.types and name not in rules.constant_names:
                raise _violation(
                    ViolationType.DUPLICATE_TYPE_DECLARATION,
                    f"Found duplicate types with the same name: '{name}'.",
                    event,
                    value=type_name,
                )
            self.state.types.record(name, type_name, event.tag)

        if kind is ElementKind.FIELD:
            self.state.stats.fields += 1
        else:
            self.state.stats.dynamic_fields += 1

    def _observe_copy_field(self, event: StartElement) -> None:
        dest = event.get("dest")
        if dest is None:
            raise _violation(
                ViolationType.MISSING_DEST,
                "copyField must have the dest attribute.",
                event,
                value=event.get("source"),
            )
        source = event.get("source")
        if source is None:
            raise _violation(
                ViolationType.MISSING_SOURCE,
                "copyField must have the source attribute.",
                event,
                value=dest,
            )
        if source == dest:
            raise _violation(
                ViolationType.SELF_REFERENTIAL_COPY,
                f"dest: '{dest}' and source: '{source}' cannot share the same value in copyField.",
                event,
                value=source,
            )

        self.state.copy_fields.append(CopyFieldEdge(source, dest))
        self.state.stats.copy_fields += 1

    def _observe_field_type(self, event: StartElement) -> None:
        rules = self.rules
        classes = [value for key, value in event.attributes if key == "class"]

        for class_name in classes:
            if class_name.split(".")[-1] in rules.deprecated_field_type_classes:
                raise _violation(
                    ViolationType.DEPRECATED_IMPLEMENTATION_CLASS,
                    f"Found deprecated class in the fieldType declaration: {class_name}. "
                    "Please consider changing it with the new equivalent type.",
                    event,
                    value=class_name,
                    help_text=DEPRECATED_TYPES_URL,
                )

        if not any(self._is_supported_class(class_name) for class_name in classes):
            raise _violation(
                ViolationType.UNSUPPORTED_IMPLEMENTATION_CLASS,
                f"Found an undefined class type in the fieldType declaration: {classes}",
                event,
                value=classes[-1] if classes else None,
                help_text=f"Use a class from {' or '.join(rules.class_prefixes)}",
            )

        if not any(key in rules.field_type_properties for key in event.keys):
            raise _violation(
                ViolationType.NO_RECOGNIZED_ATTRIBUTES,
                f"Could not find any attributes of the fieldType: {list(rules.field_type_properties)}.",
                event,
            )

        name = event.get("name")
        if name is None:
            raise _violation(
                ViolationType.MISSING_REQUIRED_ATTRIBUTE,
                f"Found unsupported field key or property for '{event.tag}': ['name'].",
                event,
            )

        self._register_name(event, name)
        self.state.stats.field_types += 1

    def _is_supported_class(self, class_name: str) -> bool:
        suffix = self.rules.class_suffix(class_name)
        if suffix is None:
            return False
        return any(
            suffix == supported or suffix.endswith("." + supported)
            for supported in self.rules.field_type_classes
        )

    def _register_name(self, event: StartElement, name: str) -> None:
        """Register ``<kind>:<name>``, enforcing reserved and duplicate names."""
        if name in self.rules.reserved_names:
            raise _violation(
                ViolationType.RESERVED_NAME_USED,
                f"Found the reserved keyword '{name}' being used in '{event.tag}'.",
                event,
                value=name,
                help_text="See SOLR-17274: set, add and remove are atomic update operations",
            )

        added = self.state.names.add(event.tag, name)
        if not added and name not in self.rules.constant_names:
            raise _violation(
                ViolationType.DUPLICATE_NAME,
                f"Found duplicate field names '{name}'.",
                event,
                value=name,
            )
