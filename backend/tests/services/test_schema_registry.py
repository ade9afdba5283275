"""Schema Registry — discovery, caching, and malformed-document handling."""

import json

import pytest

from storefront.core.errors import ResourceNotFoundError, SchemaDefinitionError
from storefront.infrastructure.schema_registry import SchemaRegistry, get_schema_registry


@pytest.fixture
def registry_dir(tmp_path):
    schemas = tmp_path / "schemas"
    schemas.mkdir()
    (schemas / "widgets.json").write_text(json.dumps({
        "properties": {"name": {"type": "string"}}, "required": ["name"],
    }))
    (tmp_path / "forms.json").write_text(json.dumps({
        "contact": {"dbSchemaName": "widgets", "jsonSchema": {
            "properties": {"email": {"type": "string", "format": "email"}},
        }},
        "bare": {"dbSchemaName": "widgets"},
    }))
    return tmp_path


def test_tables_come_from_the_directory(registry_dir):
    registry = SchemaRegistry(registry_dir / "schemas", registry_dir / "forms.json")
    assert registry.table_names() == ["widgets"]
    assert registry.schema("widgets").required == ("name",)
    assert registry.schema("widgets") is registry.schema("widgets")


def test_unknown_or_traversing_names_are_404(registry_dir):
    registry = SchemaRegistry(registry_dir / "schemas", registry_dir / "forms.json")
    with pytest.raises(ResourceNotFoundError):
        registry.raw_schema("../forms")


def test_form_configs(registry_dir):
    registry = SchemaRegistry(registry_dir / "schemas", registry_dir / "forms.json")
    assert registry.form_config("contact").db_schema_name == "widgets"
    assert list(registry.form_schema("contact").properties) == ["email"]
    assert registry.form_schema("bare") is None
    assert registry.form_config("missing") is None


def test_malformed_schema_is_a_definition_error(registry_dir):
    (registry_dir / "schemas" / "broken.json").write_text("{not json")
    registry = SchemaRegistry(registry_dir / "schemas", registry_dir / "forms.json")
    with pytest.raises(SchemaDefinitionError):
        registry.table_names()


def test_invalid_form_config_is_a_definition_error(registry_dir):
    (registry_dir / "forms.json").write_text(json.dumps({"x": {"sendFeedbackEmail": True}}))
    registry = SchemaRegistry(registry_dir / "schemas", registry_dir / "forms.json")
    with pytest.raises(SchemaDefinitionError):
        registry.form_config("x")


def test_bundled_schemas_parse():
    registry = get_schema_registry()
    for name in registry.table_names():
        registry.schema(name)
    assert registry.form_schema("newsletter_signup").is_required("email")
