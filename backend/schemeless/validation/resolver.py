"""Cross-reference resolution run once the event stream is exhausted."""

from ..core.kinds import ElementKind
from .errors import SchemaViolation, ValidationError, ViolationType
from .state import ValidationState


class CrossReferenceResolver:
    """Checks references that can only be resolved after the whole schema.

    Checks run in a fixed order (unique key, field types, copyField
    endpoints) and stop at the first unresolved reference.
    """

    def resolve(self, state: ValidationState) -> None:
        """Resolve deferred references against the declared names.

        Raises:
            SchemaViolation: For the first unresolved reference
        """
        self._resolve_unique_key(state)
        self._resolve_field_types(state)
        self._resolve_copy_fields(state)

    def _resolve_unique_key(self, state: ValidationState) -> None:
        key = state.unique_key
        if key is None or state.names.declares(ElementKind.FIELD.value, key):
            return

        raise SchemaViolation(
            ValidationError(
                type=ViolationType.UNRESOLVED_UNIQUE_KEY,
                message=f"uniqueKey '{key}' does not match any declared field.",
                element=ElementKind.UNIQUE_KEY.value,
                value=key,
                help="The uniqueKey must name a <field>, not a dynamicField",
            )
        )

    def _resolve_field_types(self, state: ValidationState) -> None:
        for reference in state.types:
            if state.names.declares(ElementKind.FIELD_TYPE.value, reference.type):
                continue
            raise SchemaViolation(
                ValidationError(
                    type=ViolationType.UNRESOLVED_FIELD_TYPE,
                    message=(
                        f"Field '{reference.field}' references undefined "
                        f"fieldType '{reference.type}'."
                    ),
                    element=reference.element,
                    name=reference.field,
                    value=reference.type,
                    help=f"Declare <fieldType name=\"{reference.type}\" .../>",
                )
            )

    def _resolve_copy_fields(self, state: ValidationState) -> None:
        field_tag = ElementKind.FIELD.value
        for edge in state.copy_fields:
            for role, endpoint in (("source", edge.source), ("dest", edge.dest)):
                if state.names.declares(field_tag, endpoint):
                    continue
                raise SchemaViolation(
                    ValidationError(
                        type=ViolationType.UNRESOLVED_COPY_FIELD_ENDPOINT,
                        message=(
                            f"copyField {role} '{endpoint}' does not match any "
                            f"declared field (source='{edge.source}', dest='{edge.dest}')."
                        ),
                        element=ElementKind.COPY_FIELD.value,
                        value=endpoint,
                    )
                )
