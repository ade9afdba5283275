"""Form State — defaults, single-field edits, and reset round-trip."""

import pytest

from storefront.core.errors import FieldNotEditableError
from storefront.core.form_schema import FormSchema
from storefront.core.form_state import FormState, default_values, initial_values

SCHEMA = FormSchema.from_json({
    "properties": {
        "id": {"type": "integer", "readOnly": True},
        "email": {"type": "string", "format": "email", "title": "Email"},
        "name": {"type": "string", "default": "Guest"},
        "tags": {"type": "array", "default": ["new"]},
        "subscribe": {"type": "boolean", "default": True},
    },
    "required": ["email"],
})


def test_initial_values_prefer_caller_then_default_then_blank():
    state = FormState.create(SCHEMA, {"name": "Ana", "email": None})
    assert state.values == {
        "email": "", "name": "Ana", "tags": ["new"], "subscribe": True,
    }


def test_read_only_fields_are_excluded():
    state = FormState.create(SCHEMA, {"id": 7})
    assert "id" not in state.values
    with pytest.raises(FieldNotEditableError):
        state.apply_edit("id", 8)


def test_edit_revalidates_only_the_edited_field():
    state = FormState.create(SCHEMA)
    state.errors = {"name": "stale"}
    assert state.apply_edit("email", "bad") == "Email is not a valid email"
    assert state.errors == {"name": "stale", "email": "Email is not a valid email"}
    assert state.apply_edit("email", "a@b.com") is None
    assert state.errors == {"name": "stale"}


def test_reset_restores_declared_defaults_and_clears_errors():
    state = FormState.create(SCHEMA, {"name": "Ana"})
    state.apply_edit("email", "bad")
    state.reset()
    assert state.values == default_values(SCHEMA.editable())
    assert state.values["name"] == "Guest"
    assert state.errors == {}


def test_defaults_are_copied_per_state():
    first = FormState.create(SCHEMA)
    first.values["tags"].append("x")
    assert FormState.create(SCHEMA).values["tags"] == ["new"]


def test_snapshot_returns_copies():
    state = FormState.create(SCHEMA)
    values, errors = state.snapshot()
    values["email"] = "changed"
    assert state.values["email"] == ""


def test_initial_values_without_caller_input():
    assert initial_values(SCHEMA.editable(), None)["subscribe"] is True
