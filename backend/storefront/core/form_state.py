"""Form State — values and per-field errors for one editable form schema.

Invariants:
    - values has exactly the editable schema keys (read-only fields never present)
    - errors holds only failing fields; a field that validates has no entry
    - apply_edit re-validates the edited field only, never the whole form
    - reset restores schema defaults, ignoring caller-supplied initial values

Design Decisions:
    - Dataclass with in-place transitions: the controller owns one instance per
      form and hands out copies to callbacks, so mutation stays local
    - Fallback for a missing default is "" so text inputs start controlled
"""

import copy
from dataclasses import dataclass, field
from typing import Any

from storefront.core.errors import FieldNotEditableError
from storefront.core.form_schema import FormSchema
from storefront.core.validation import validate_field, validate_form


def default_values(schema: FormSchema) -> dict[str, Any]:
    """Declared default per field, "" when none is declared."""
    return {
        name: copy.deepcopy(definition.default) if definition.default is not None else ""
        for name, definition in schema.properties.items()
    }


def initial_values(schema: FormSchema, initial: dict[str, Any] | None) -> dict[str, Any]:
    """Caller value when present, else declared default, else ""."""
    initial = initial or {}
    defaults = default_values(schema)
    return {
        name: initial[name] if initial.get(name) is not None else defaults[name]
        for name in schema.properties
    }


@dataclass
class FormState:
    """Editable values plus current validation errors."""

    schema: FormSchema
    values: dict[str, Any] = field(default_factory=dict)
    errors: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, schema: FormSchema, initial: dict[str, Any] | None = None) -> "FormState":
        editable = schema.editable()
        return cls(schema=editable, values=initial_values(editable, initial))

    def apply_edit(self, field_name: str, value: Any) -> str | None:
        """Set one value and re-validate that field. Returns its error, if any."""
        definition = self.schema.properties.get(field_name)
        if definition is None:
            raise FieldNotEditableError(field_name)
        self.values[field_name] = value
        error = validate_field(value, definition, field_name, self.schema)
        if error:
            self.errors[field_name] = error
        else:
            self.errors.pop(field_name, None)
        return error

    def validate_all(self) -> dict[str, str]:
        self.errors = validate_form(self.schema, self.values)
        return dict(self.errors)

    def reset(self) -> None:
        self.values = default_values(self.schema)
        self.errors = {}

    def snapshot(self) -> tuple[dict[str, Any], dict[str, str]]:
        """Copies of (values, errors) safe to hand to callers."""
        return dict(self.values), dict(self.errors)
