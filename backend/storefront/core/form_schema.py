"""Form Schema Model — typed view of a JSON Schema object used for forms and admin tables.

Invariants:
    - FormSchema.required is a subset of FormSchema.properties keys (checked on parse)
    - enum kept only for string/array fields; minimum/maximum only for number/integer
    - Property order of the source document is preserved (drives field order)
    - Instances are frozen: controllers derive new schemas, never mutate shared ones

Design Decisions:
    - Dataclasses over Pydantic in core: no IO, no coercion surprises; parsing is explicit
    - type kept as raw str: unknown types must survive parsing so the dispatcher can
      render its "unsupported field type" notice instead of failing the whole schema
"""

from dataclasses import dataclass, field, replace
from typing import Any

from storefront.core.domain_types import FieldType
from storefront.core.errors import SchemaDefinitionError

_ENUM_TYPES = frozenset({FieldType.STRING.value, FieldType.ARRAY.value})
_NUMERIC_TYPES = frozenset({FieldType.NUMBER.value, FieldType.INTEGER.value})


@dataclass(frozen=True)
class FieldDefinition:
    """One schema-driven field."""

    type: str
    title: str | None = None
    description: str | None = None
    default: Any = None
    format: str | None = None
    enum: tuple | None = None
    enum_names: tuple[str, ...] | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    read_only: bool = False
    multiline: bool = False

    def label(self, field_name: str) -> str:
        return self.title or field_name

    @classmethod
    def from_json(cls, raw: dict) -> "FieldDefinition":
        """Parse one entry of a JSON Schema `properties` mapping."""
        field_type = str(raw.get("type", ""))
        enum = raw.get("enum") if field_type in _ENUM_TYPES else None
        if enum is None and field_type == FieldType.ARRAY.value:
            # {"type": "array", "items": {"enum": [...]}} is the standard multi-select form
            items = raw.get("items") or {}
            enum = items.get("enum")
        enum_names = raw.get("enumNames") if enum is not None else None
        numeric = field_type in _NUMERIC_TYPES
        return cls(
            type=field_type,
            title=raw.get("title"),
            description=raw.get("description"),
            default=raw.get("default"),
            format=raw.get("format"),
            enum=tuple(enum) if enum is not None else None,
            enum_names=tuple(enum_names) if enum_names is not None else None,
            minimum=raw.get("minimum") if numeric else None,
            maximum=raw.get("maximum") if numeric else None,
            min_length=raw.get("minLength"),
            max_length=raw.get("maxLength"),
            pattern=raw.get("pattern"),
            read_only=bool(raw.get("readOnly", False)),
            multiline=raw.get("multiline") is True,
        )


@dataclass(frozen=True)
class FormSchema:
    """Ordered field mapping plus the required set."""

    properties: dict[str, FieldDefinition] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    title: str | None = None
    description: str | None = None

    def __post_init__(self):
        missing = [name for name in self.required if name not in self.properties]
        if missing:
            raise SchemaDefinitionError(
                f"Required fields not declared in properties: {', '.join(missing)}",
            )

    def is_required(self, field_name: str) -> bool:
        return field_name in self.required

    def editable(self) -> "FormSchema":
        """Schema without read-only fields (what a form renders and submits)."""
        properties = {
            name: definition
            for name, definition in self.properties.items()
            if not definition.read_only
        }
        return replace(
            self,
            properties=properties,
            required=tuple(n for n in self.required if n in properties),
        )

    @classmethod
    def from_json(cls, raw: dict) -> "FormSchema":
        """Parse a JSON Schema object document (`type: object`)."""
        raw_properties = raw.get("properties") or {}
        if not isinstance(raw_properties, dict):
            raise SchemaDefinitionError("Schema 'properties' must be an object")
        return cls(
            properties={
                name: FieldDefinition.from_json(definition)
                for name, definition in raw_properties.items()
            },
            required=tuple(raw.get("required") or ()),
            title=raw.get("title"),
            description=raw.get("description"),
        )
