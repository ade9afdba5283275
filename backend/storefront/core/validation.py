"""Form Validation — rule-based checks of values against a FormSchema.

Invariants:
    - All functions are PURE: never mutate form state, never raise for bad values
    - validate_field returns exactly one message (first failing rule) or None
    - Rule order: required -> type-specific -> pattern -> enum (short-circuit)
    - Empty = None, blank string, or empty list; boolean False is a present answer
    - Empty and not required -> valid, no further checks

Design Decisions:
    - Messages use the field title (falling back to the field name) so the same
      validator serves the public newsletter form and the admin editor
    - pattern must match the whole string (re.fullmatch), not a substring
    - Booleans are rejected by numeric checks even though bool subclasses int
    - Only finite numbers count: "inf", "Infinity" and overflowing text such as
      "1e400" are not numbers (they cannot be stored or JSON-encoded)
"""

import math
import re
from datetime import datetime
from functools import lru_cache
from typing import Any

from storefront.core.domain_types import FieldFormat, FieldType
from storefront.core.errors import SchemaDefinitionError
from storefront.core.form_schema import FieldDefinition, FormSchema

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

_DATE_FORMATS = frozenset({FieldFormat.DATE.value, FieldFormat.DATE_TIME.value})
_LENGTH_EXEMPT_FORMATS = _DATE_FORMATS | {FieldFormat.EMAIL.value}


def is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def parse_number(value: Any) -> float | None:
    """Numeric reading of a form value, None when it is not a number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_date(value: str) -> datetime | None:
    """Parse ISO date or date-time text; trailing Z accepted as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def validate_field(
    value: Any, field: FieldDefinition, field_name: str, schema: FormSchema,
) -> str | None:
    """Validate one value. Returns an error message or None."""
    label = field.label(field_name)
    present_boolean = field.type == FieldType.BOOLEAN.value and value is False

    if schema.is_required(field_name) and not present_boolean and is_empty_value(value):
        return f"{label} is required"
    if is_empty_value(value):
        return None

    error = _check_type(value, field, label)
    if error:
        return error

    if field.pattern and isinstance(value, str):
        if not _compile_pattern(field.pattern).fullmatch(value):
            return f"{label} is not valid"

    if field.enum is not None and field.type == FieldType.STRING.value:
        if value not in field.enum:
            return f"{label} must be one of the valid options"

    return None


def validate_form(schema: FormSchema, form_data: dict) -> dict[str, str]:
    """Validate every schema field; only failing fields appear in the result."""
    errors: dict[str, str] = {}
    for field_name, field in schema.properties.items():
        error = validate_field(form_data.get(field_name), field, field_name, schema)
        if error:
            errors[field_name] = error
    return errors


def is_valid(errors: dict[str, str]) -> bool:
    return not errors


# ─── Type-specific rules ─────────────────────────────────────────

def _check_type(value: Any, field: FieldDefinition, label: str) -> str | None:
    match field.type:
        case FieldType.BOOLEAN.value:
            if not isinstance(value, bool):
                return f"{label} must be a boolean"
        case FieldType.NUMBER.value | FieldType.INTEGER.value:
            return _check_number(value, field, label)
        case FieldType.STRING.value:
            return _check_string(value, field, label)
        case FieldType.ARRAY.value:
            if not isinstance(value, (list, tuple)):
                return f"{label} must be an array"
            if field.enum is not None and any(v not in field.enum for v in value):
                return f"{label} contains invalid options"
    return None


def _check_number(value: Any, field: FieldDefinition, label: str) -> str | None:
    number = parse_number(value)
    if number is None:
        return f"{label} must be a number"
    if field.type == FieldType.INTEGER.value and not number.is_integer():
        return f"{label} must be an integer"
    if field.minimum is not None and number < field.minimum:
        return f"{label} cannot be less than {_format_bound(field.minimum)}"
    if field.maximum is not None and number > field.maximum:
        return f"{label} cannot be greater than {_format_bound(field.maximum)}"
    return None


def _check_string(value: Any, field: FieldDefinition, label: str) -> str | None:
    if not isinstance(value, str):
        return f"{label} must be a string"
    if field.format == FieldFormat.EMAIL.value:
        if not EMAIL_PATTERN.match(value):
            return f"{label} is not a valid email"
    elif field.format in _DATE_FORMATS:
        if parse_date(value) is None:
            return f"{label} must be a valid date"
    if field.format not in _LENGTH_EXEMPT_FORMATS:
        if field.min_length is not None and len(value) < field.min_length:
            return f"{label} must be at least {field.min_length} characters"
        if field.max_length is not None and len(value) > field.max_length:
            return f"{label} cannot exceed {field.max_length} characters"
    return None


def _format_bound(bound: float) -> str:
    return str(int(bound)) if float(bound).is_integer() else str(bound)


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise SchemaDefinitionError(f"Invalid pattern {pattern!r}: {e}")
