"""Schema Registry — loads admin table schemas and form configs from JSON files.

Invariants:
    - A table is known iff <schemas_dir>/<table>.json exists; nothing else is queryable
    - Files are read once and cached for the registry's lifetime
    - Malformed documents raise SchemaDefinitionError (500), unknown tables
      raise ResourceNotFoundError (404)

Design Decisions:
    - Table names validated against a directory listing, never joined into a path
      from caller input, so "../" style names cannot escape the directory
    - Form configs parsed with pydantic (FormEmailConfig): camelCase file format,
      snake_case attributes
"""

import json
import logging
from functools import lru_cache
from pathlib import Path

from pydantic import ValidationError

from storefront.config import get_settings
from storefront.core.errors import ErrorContext, ResourceNotFoundError, SchemaDefinitionError
from storefront.core.form_schema import FormSchema
from storefront.schemas.forms import FormEmailConfig

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> dict:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SchemaDefinitionError(f"Cannot load {path.name}: {e}") from e
    if not isinstance(document, dict):
        raise SchemaDefinitionError(f"{path.name} must contain a JSON object")
    return document


class SchemaRegistry:
    """Table schemas by table name, form configs by form id."""

    def __init__(self, schemas_dir: Path, form_configs_path: Path):
        self.schemas_dir = Path(schemas_dir)
        self.form_configs_path = Path(form_configs_path)
        self._raw_schemas: dict[str, dict] | None = None
        self._parsed: dict[str, FormSchema] = {}
        self._form_configs: dict[str, FormEmailConfig] | None = None

    def _load_schemas(self) -> dict[str, dict]:
        if self._raw_schemas is None:
            self._raw_schemas = {
                path.stem: _read_json(path)
                for path in sorted(self.schemas_dir.glob("*.json"))
            }
            logger.info(f"Loaded {len(self._raw_schemas)} table schemas")
        return self._raw_schemas

    def table_names(self) -> list[str]:
        return list(self._load_schemas())

    def has_table(self, table_name: str) -> bool:
        return table_name in self._load_schemas()

    def raw_schema(self, table_name: str) -> dict:
        schemas = self._load_schemas()
        if table_name not in schemas:
            raise ResourceNotFoundError(
                "Table schema", table_name, ErrorContext(table_name=table_name),
            )
        return schemas[table_name]

    def schema(self, table_name: str) -> FormSchema:
        if table_name not in self._parsed:
            self._parsed[table_name] = FormSchema.from_json(self.raw_schema(table_name))
        return self._parsed[table_name]

    def _load_form_configs(self) -> dict[str, FormEmailConfig]:
        if self._form_configs is None:
            document = _read_json(self.form_configs_path)
            try:
                self._form_configs = {
                    form_id: FormEmailConfig.model_validate(config)
                    for form_id, config in document.items()
                }
            except ValidationError as e:
                raise SchemaDefinitionError(f"Invalid form config: {e}") from e
        return self._form_configs

    def form_config(self, form_id: str) -> FormEmailConfig | None:
        return self._load_form_configs().get(form_id)

    def form_schema(self, form_id: str) -> FormSchema | None:
        config = self.form_config(form_id)
        if config is None or not config.json_schema:
            return None
        return FormSchema.from_json(config.json_schema)


@lru_cache
def get_schema_registry() -> SchemaRegistry:
    settings = get_settings()
    return SchemaRegistry(settings.schemas_dir, settings.form_configs_path)
