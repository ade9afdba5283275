"""Form View — render model for a schema-driven form (what a template draws).

Invariants:
    - One FieldView per editable field, in schema order
    - Every field and both buttons are disabled while a submission is in flight
    - The widget comes from select_widget; the shown value from display_value
      (stored values are never rewritten for display)

Design Decisions:
    - Plain frozen dataclasses: any template layer (Jinja, HTMX, JSON for a SPA)
      can consume them without knowing the dispatch rules
"""

from dataclasses import dataclass
from typing import Any, assert_never

from storefront.core.field_dispatch import (
    BooleanWidget, DateWidget, EmailWidget, FieldWidget, MultiSelectWidget,
    NumberWidget, SelectWidget, TextAreaWidget, TextWidget, UnsupportedWidget,
    display_value, select_widget,
)
from storefront.core.form_state import FormState
from storefront.core.theme import FormTheme


@dataclass(frozen=True)
class FieldView:
    name: str
    label: str
    description: str | None
    widget: FieldWidget
    value: Any
    error: str | None
    required: bool
    disabled: bool
    css_class: str
    notice: str | None = None


@dataclass(frozen=True)
class FormView:
    form_id: str
    title: str | None
    description: str | None
    fields: tuple[FieldView, ...]
    submit_label: str
    submit_disabled: bool
    reset_label: str
    reset_disabled: bool


def build_form_view(
    form_id: str, state: FormState, theme: FormTheme, submitting: bool,
) -> FormView:
    schema = state.schema
    return FormView(
        form_id=form_id,
        title=schema.title,
        description=schema.description,
        fields=tuple(
            _build_field_view(name, state, theme, submitting)
            for name in schema.properties
        ),
        submit_label=theme.labels.submitting if submitting else theme.labels.submit,
        submit_disabled=submitting,
        reset_label=theme.labels.reset,
        reset_disabled=submitting,
    )


def _build_field_view(
    name: str, state: FormState, theme: FormTheme, disabled: bool,
) -> FieldView:
    definition = state.schema.properties[name]
    widget = select_widget(definition)
    error = state.errors.get(name)
    notice = None
    if isinstance(widget, UnsupportedWidget):
        notice = theme.labels.unsupported.format(type_name=widget.type_name)
    return FieldView(
        name=name,
        label=definition.label(name),
        description=definition.description,
        widget=widget,
        value=display_value(widget, state.values.get(name)),
        error=error,
        required=state.schema.is_required(name),
        disabled=disabled,
        css_class=_css_class(widget, theme, error is not None, disabled),
        notice=notice,
    )


def _css_class(widget: FieldWidget, theme: FormTheme, has_error: bool, disabled: bool) -> str:
    match widget:
        case TextWidget() | EmailWidget() | NumberWidget():
            return theme.input.compose(has_error, disabled)
        case TextAreaWidget():
            return theme.textarea.compose(has_error, disabled)
        case SelectWidget():
            return theme.select.compose(has_error, disabled)
        case DateWidget():
            return theme.date_input.compose(has_error, disabled)
        case BooleanWidget() | MultiSelectWidget():
            return theme.choices.checkbox
        case UnsupportedWidget():
            return theme.unsupported.container
        case _:
            assert_never(widget)
