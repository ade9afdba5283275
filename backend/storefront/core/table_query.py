"""Table Query — pure pagination/sort/filter state and record checks for admin tables.

Invariants:
    - TableQuery is immutable; every transition returns a new query
    - Sorting, searching and filtering jump back to page 1
    - Toggling the sorted column flips direction; a new column starts ascending
    - to_params() drops empty filter values; export_params() never carries page/limit
    - required_field_errors ignores read-only fields

Design Decisions:
    - Sort on the wire is "field:asc|desc" (one sort key only)
    - TablePage mirrors the gateway response {data, total, hasMore}
"""

import math
from dataclasses import dataclass, field, replace
from typing import Any

from storefront.core.domain_types import FieldFormat, FieldType, SortDirection
from storefront.core.form_schema import FormSchema
from storefront.core.validation import is_empty_value, parse_number

DEFAULT_PAGE_SIZE = 50

_DATE_FORMATS = frozenset({FieldFormat.DATE.value, FieldFormat.DATE_TIME.value})


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: SortDirection = SortDirection.ASC

    def to_param(self) -> str:
        return f"{self.field}:{self.direction.value}"

    @classmethod
    def parse(cls, text: str | None) -> "SortSpec | None":
        if not text:
            return None
        name, _, direction = text.partition(":")
        if not name:
            return None
        return cls(
            field=name,
            direction=SortDirection.DESC if direction.lower() == "desc" else SortDirection.ASC,
        )


@dataclass(frozen=True)
class TableQuery:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort: SortSpec | None = None
    search: str = ""
    filters: dict[str, Any] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def toggle_sort(self, field_name: str) -> "TableQuery":
        if self.sort and self.sort.field == field_name:
            flipped = (
                SortDirection.DESC if self.sort.direction == SortDirection.ASC
                else SortDirection.ASC
            )
            sort = SortSpec(field_name, flipped)
        else:
            sort = SortSpec(field_name, SortDirection.ASC)
        return replace(self, sort=sort, page=1)

    def with_search(self, term: str) -> "TableQuery":
        return replace(self, search=term, page=1)

    def with_filter(self, name: str, value: Any) -> "TableQuery":
        filters = dict(self.filters)
        if value is None or value == "":
            filters.pop(name, None)
        else:
            filters[name] = value
        return replace(self, filters=filters, page=1)

    def with_page(self, page: int) -> "TableQuery":
        return replace(self, page=max(1, page))

    def export_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.sort:
            params["sort"] = self.sort.to_param()
        if self.search:
            params["search"] = self.search
        for name, value in self.filters.items():
            if value is None or value == "":
                continue
            params[name] = _param_text(value)
        return params

    def to_params(self) -> dict[str, str]:
        return {"page": str(self.page), "limit": str(self.limit), **self.export_params()}


def _param_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class TablePage:
    rows: list[dict[str, Any]]
    total: int
    has_more: bool

    @classmethod
    def from_response(cls, body: dict) -> "TablePage":
        return cls(
            rows=list(body.get("data") or []),
            total=int(body.get("total") or 0),
            has_more=bool(body.get("hasMore", False)),
        )

    def to_response(self) -> dict:
        return {"data": self.rows, "total": self.total, "hasMore": self.has_more}


def has_more(offset: int, limit: int, total: int) -> bool:
    return offset + limit < total


def page_count(total: int, limit: int) -> int:
    return max(1, math.ceil(total / limit)) if limit > 0 else 1


def showing_range(page: int, limit: int, total: int) -> tuple[int, int]:
    """1-based (first, last) row numbers displayed on a page."""
    if total == 0:
        return 0, 0
    return (page - 1) * limit + 1, min(page * limit, total)


# ─── Record checks for create/update ────────────────────────────

def display_columns(schema: FormSchema) -> list[str]:
    return [name for name in schema.properties if name != "id"]


def required_field_errors(schema: FormSchema, record: dict[str, Any]) -> dict[str, str]:
    """Required, editable fields that are empty in the record."""
    errors: dict[str, str] = {}
    for name in schema.required:
        definition = schema.properties[name]
        if definition.read_only:
            continue
        if is_empty_value(record.get(name)):
            errors[name] = f"{definition.label(name)} is required"
    return errors


def strip_read_only(schema: FormSchema, record: dict[str, Any]) -> dict[str, Any]:
    return {
        name: value
        for name, value in record.items()
        if not (name in schema.properties and schema.properties[name].read_only)
    }


def coerce_record(schema: FormSchema, record: dict[str, Any]) -> dict[str, Any]:
    """Editor text to JSON values: numeric fields parsed, blank numbers and dates to None."""
    coerced: dict[str, Any] = {}
    for name, value in record.items():
        definition = schema.properties.get(name)
        if definition is None:
            coerced[name] = value
            continue
        if definition.type in (FieldType.NUMBER.value, FieldType.INTEGER.value):
            if is_empty_value(value):
                coerced[name] = None
                continue
            number = parse_number(value)
            if number is None:
                coerced[name] = value
            elif definition.type == FieldType.INTEGER.value and number.is_integer():
                coerced[name] = int(number)
            else:
                coerced[name] = number
        elif definition.format in _DATE_FORMATS and is_empty_value(value):
            coerced[name] = None
        else:
            coerced[name] = value
    return coerced
