"""Field Dispatch — maps a FieldDefinition to exactly one input widget variant.

Invariants:
    - select_widget is PURE and TOTAL: every definition yields exactly one variant
    - Dispatch order: boolean, array, string (email, date, textarea, select, text),
      number/integer, then UnsupportedWidget for anything else
    - UnsupportedWidget is a display outcome, never an exception
    - Date widgets display calendar-date granularity (time of day dropped)

Design Decisions:
    - Closed union of frozen dataclasses instead of a tag string: consumers use
      `match` with assert_never so a new variant fails type checking until handled
    - Options pair enum values with enumNames positionally; missing labels fall back
      to str(value)
"""

from dataclasses import dataclass
from typing import Any, Union, assert_never

from storefront.core.domain_types import FieldFormat, FieldType
from storefront.core.form_schema import FieldDefinition
from storefront.core.validation import parse_date


@dataclass(frozen=True)
class Option:
    value: Any
    label: str


@dataclass(frozen=True)
class BooleanWidget:
    pass


@dataclass(frozen=True)
class MultiSelectWidget:
    options: tuple[Option, ...]


@dataclass(frozen=True)
class EmailWidget:
    pass


@dataclass(frozen=True)
class DateWidget:
    with_time: bool = False


@dataclass(frozen=True)
class TextAreaWidget:
    pass


@dataclass(frozen=True)
class SelectWidget:
    options: tuple[Option, ...]


@dataclass(frozen=True)
class TextWidget:
    pass


@dataclass(frozen=True)
class NumberWidget:
    integer: bool
    minimum: float | None = None
    maximum: float | None = None

    @property
    def step(self) -> str:
        return "1" if self.integer else "any"


@dataclass(frozen=True)
class UnsupportedWidget:
    type_name: str


FieldWidget = Union[
    BooleanWidget, MultiSelectWidget, EmailWidget, DateWidget, TextAreaWidget,
    SelectWidget, TextWidget, NumberWidget, UnsupportedWidget,
]


def select_widget(field: FieldDefinition) -> FieldWidget:
    """Choose the single widget for a field definition."""
    match field.type:
        case FieldType.BOOLEAN.value:
            return BooleanWidget()
        case FieldType.ARRAY.value:
            return MultiSelectWidget(options=build_options(field))
        case FieldType.STRING.value:
            return _select_string_widget(field)
        case FieldType.NUMBER.value | FieldType.INTEGER.value:
            return NumberWidget(
                integer=field.type == FieldType.INTEGER.value,
                minimum=field.minimum,
                maximum=field.maximum,
            )
        case _:
            return UnsupportedWidget(type_name=field.type)


def _select_string_widget(field: FieldDefinition) -> FieldWidget:
    if field.format == FieldFormat.EMAIL.value:
        return EmailWidget()
    if field.format in (FieldFormat.DATE.value, FieldFormat.DATE_TIME.value):
        return DateWidget(with_time=field.format == FieldFormat.DATE_TIME.value)
    if field.format == FieldFormat.TEXTAREA.value or field.multiline:
        return TextAreaWidget()
    if field.enum:
        return SelectWidget(options=build_options(field))
    return TextWidget()


def build_options(field: FieldDefinition) -> tuple[Option, ...]:
    values = field.enum or ()
    names = field.enum_names or ()
    return tuple(
        Option(value=value, label=names[i] if i < len(names) else str(value))
        for i, value in enumerate(values)
    )


def display_value(widget: FieldWidget, value: Any) -> Any:
    """Value as the widget shows it (the stored value is left untouched)."""
    match widget:
        case BooleanWidget():
            return value is True
        case MultiSelectWidget(options=options):
            allowed = [o.value for o in options]
            if not isinstance(value, (list, tuple)):
                return []
            return [v for v in value if v in allowed]
        case DateWidget():
            return normalize_date(value)
        case NumberWidget():
            return "" if value is None else value
        case EmailWidget() | TextAreaWidget() | SelectWidget() | TextWidget():
            return "" if value is None else value
        case UnsupportedWidget():
            return value
        case _:
            assert_never(widget)


def normalize_date(value: Any) -> str:
    """Calendar-date text (YYYY-MM-DD) for a date/date-time value, "" if unparseable."""
    if not isinstance(value, str) or not value.strip():
        return ""
    parsed = parse_date(value)
    return parsed.date().isoformat() if parsed else ""
