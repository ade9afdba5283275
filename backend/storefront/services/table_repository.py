"""Table Repository — generic CRUD, paging and CSV export over registry-known tables.

Invariants:
    - Only tables present in BOTH the schema registry and Base.metadata are reachable
    - Sort and filter names must be real columns; identifiers never reach SQL text
      (SQLAlchemy Core builds every statement)
    - Read-only schema fields and "id" are dropped from writes; created_at/updated_at
      are stamped by the server
    - Writes are validated with the same validator as the forms (RecordValidationError)
    - Default order is newest first (created_at desc)

Design Decisions:
    - SQLAlchemy Core over ORM classes: one code path for every admin table
    - search = case-insensitive substring over every string column
    - Filter values arrive as query-string text and are coerced by column type
"""

import csv
import io
import json
import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Boolean, DateTime, Float, Integer, Numeric, String, Table, Text
from sqlalchemy import delete, func, insert, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

import storefront.models  # noqa: F401  (registers every table on Base.metadata)
from storefront.core.cell_format import strip_html
from storefront.core.errors import (
    ErrorContext, InvalidQueryError, RecordValidationError, ResourceNotFoundError,
)
from storefront.core.form_schema import FormSchema
from storefront.core.table_query import (
    DEFAULT_PAGE_SIZE, SortSpec, TablePage, has_more, required_field_errors,
    strip_read_only,
)
from storefront.core.validation import parse_date, parse_number, validate_field
from storefront.db.base import Base
from storefront.infrastructure.schema_registry import SchemaRegistry

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 500
NO_DATA_CSV = "No data to export"

_TIMESTAMP_COLUMNS = ("created_at", "updated_at")
_TRUE_TEXT = frozenset({"true", "1", "yes"})
_FALSE_TEXT = frozenset({"false", "0", "no"})


class TableRepository:
    """CRUD over one AsyncSession for any table the registry knows."""

    def __init__(self, db: AsyncSession, registry: SchemaRegistry):
        self.db = db
        self.registry = registry

    # ─── Lookup ──────────────────────────────────────────────────

    def table(self, table_name: str) -> Table:
        table = Base.metadata.tables.get(table_name)
        if table is None or not self.registry.has_table(table_name):
            raise ResourceNotFoundError(
                "Table", table_name, ErrorContext(table_name=table_name),
            )
        return table

    def schema(self, table_name: str) -> FormSchema:
        return self.registry.schema(table_name)

    # ─── Reads ───────────────────────────────────────────────────

    async def list_rows(
        self,
        table_name: str,
        *,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
        sort: str | None = None,
        search: str | None = None,
        filters: dict[str, str] | None = None,
    ) -> TablePage:
        table = self.table(table_name)
        page = max(1, page)
        limit = min(max(1, limit), MAX_PAGE_SIZE)
        offset = (page - 1) * limit
        conditions = self._conditions(table, search, filters or {})

        count_stmt = select(func.count()).select_from(table).where(*conditions)
        total = (await self.db.execute(count_stmt)).scalar_one()

        stmt = (
            select(table)
            .where(*conditions)
            .order_by(*self._order_by(table, sort))
            .limit(limit)
            .offset(offset)
        )
        result = await self.db.execute(stmt)
        rows = [dict(row._mapping) for row in result]
        return TablePage(rows=rows, total=total, has_more=has_more(offset, limit, total))

    async def get_row(self, table_name: str, row_id: int) -> dict[str, Any]:
        table = self.table(table_name)
        result = await self.db.execute(select(table).where(table.c.id == row_id))
        row = result.first()
        if row is None:
            raise ResourceNotFoundError(
                "Row", f"{table_name}/{row_id}", ErrorContext(table_name=table_name),
            )
        return dict(row._mapping)

    async def export_csv(
        self,
        table_name: str,
        *,
        sort: str | None = None,
        search: str | None = None,
        filters: dict[str, str] | None = None,
    ) -> str:
        table = self.table(table_name)
        stmt = (
            select(table)
            .where(*self._conditions(table, search, filters or {}))
            .order_by(*self._order_by(table, sort))
        )
        rows = [dict(row._mapping) for row in await self.db.execute(stmt)]
        if not rows:
            return NO_DATA_CSV
        return rows_to_csv(rows)

    # ─── Writes ──────────────────────────────────────────────────

    async def create_row(self, table_name: str, data: dict[str, Any]) -> dict[str, Any]:
        table = self.table(table_name)
        schema = self.schema(table_name)
        record = self._prepare(table, schema, data, partial=False)
        now = datetime.now(timezone.utc)
        for column in _TIMESTAMP_COLUMNS:
            if column in table.c:
                record[column] = now
        result = await self.db.execute(insert(table).values(**record))
        await self.db.commit()
        row_id = result.inserted_primary_key[0]
        logger.info(f"Row {row_id} created", extra={"table_name": table_name})
        return await self.get_row(table_name, row_id)

    async def update_row(
        self, table_name: str, row_id: int, data: dict[str, Any],
    ) -> dict[str, Any]:
        table = self.table(table_name)
        schema = self.schema(table_name)
        await self.get_row(table_name, row_id)
        record = self._prepare(table, schema, data, partial=True)
        if "updated_at" in table.c:
            record["updated_at"] = datetime.now(timezone.utc)
        if record:
            await self.db.execute(update(table).where(table.c.id == row_id).values(**record))
            await self.db.commit()
        logger.info(f"Row {row_id} updated", extra={"table_name": table_name})
        return await self.get_row(table_name, row_id)

    async def delete_row(self, table_name: str, row_id: int) -> None:
        table = self.table(table_name)
        result = await self.db.execute(delete(table).where(table.c.id == row_id))
        if result.rowcount == 0:
            raise ResourceNotFoundError(
                "Row", f"{table_name}/{row_id}", ErrorContext(table_name=table_name),
            )
        await self.db.commit()
        logger.info(f"Row {row_id} deleted", extra={"table_name": table_name})

    # ─── Statement pieces ────────────────────────────────────────

    def _conditions(self, table: Table, search: str | None, filters: dict[str, str]) -> list:
        conditions = []
        if search:
            pattern = f"%{search}%"
            text_columns = [c for c in table.c if isinstance(c.type, (String, Text))]
            if text_columns:
                conditions.append(or_(*(c.ilike(pattern) for c in text_columns)))
        for name, raw in filters.items():
            if name not in table.c:
                raise InvalidQueryError(
                    f"Unknown filter field '{name}'", ErrorContext(table_name=table.name),
                )
            if raw is None or raw == "":
                continue
            column = table.c[name]
            conditions.append(column == _coerce_filter(column, raw, table.name))
        return conditions

    def _order_by(self, table: Table, sort: str | None) -> list:
        spec = SortSpec.parse(sort)
        if spec is None:
            if "created_at" in table.c:
                return [table.c.created_at.desc(), table.c.id.desc()]
            return [table.c.id.desc()]
        if spec.field not in table.c:
            raise InvalidQueryError(
                f"Unknown sort field '{spec.field}'", ErrorContext(table_name=table.name),
            )
        column = table.c[spec.field]
        return [column.desc() if spec.direction.value == "desc" else column.asc()]

    def _prepare(
        self, table: Table, schema: FormSchema, data: dict[str, Any], partial: bool,
    ) -> dict[str, Any]:
        record = strip_read_only(schema, data)
        record.pop("id", None)
        for column in _TIMESTAMP_COLUMNS:
            record.pop(column, None)
        unknown = [name for name in record if name not in table.c]
        if unknown:
            raise InvalidQueryError(
                f"Unknown fields: {', '.join(sorted(unknown))}",
                ErrorContext(table_name=table.name),
            )

        errors = {} if partial else required_field_errors(schema, record)
        for name, value in record.items():
            definition = schema.properties.get(name)
            if definition is None or name in errors:
                continue
            error = validate_field(value, definition, name, schema)
            if error:
                errors[name] = error
        if errors:
            raise RecordValidationError(errors, ErrorContext(table_name=table.name))

        return {
            name: _coerce_value(table.c[name], value)
            for name, value in record.items()
        }


# ─── Column-type coercion ───────────────────────────────────────

def _coerce_value(column, value: Any) -> Any:
    """Validated JSON value to what the column type expects."""
    if value is None:
        return None
    column_type = column.type
    if isinstance(column_type, DateTime) and isinstance(value, str):
        return parse_date(value) if value.strip() else None
    if isinstance(column_type, (Integer, Float, Numeric)) and not isinstance(value, bool):
        if isinstance(value, str) and not value.strip():
            return None
        number = parse_number(value)
        if number is not None:
            return int(number) if isinstance(column_type, Integer) else number
    return value


def _coerce_filter(column, raw: str, table_name: str) -> Any:
    column_type = column.type
    if isinstance(column_type, Boolean):
        text = raw.strip().lower()
        if text in _TRUE_TEXT:
            return True
        if text in _FALSE_TEXT:
            return False
    elif isinstance(column_type, (Integer, Float, Numeric)):
        number = parse_number(raw)
        if number is not None:
            return int(number) if isinstance(column_type, Integer) else number
    elif isinstance(column_type, DateTime):
        parsed = parse_date(raw)
        if parsed is not None:
            return parsed
    else:
        return raw
    raise InvalidQueryError(
        f"Invalid value for filter '{column.name}'", ErrorContext(table_name=table_name),
    )


def _csv_text(name: str, value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, default=str)
    text = str(value)
    if "rich_text" in name:
        return strip_html(text)
    return text


def rows_to_csv(rows: list[dict[str, Any]]) -> str:
    """Header from the first row's keys; rich_text columns stripped of HTML."""
    columns = list(rows[0])
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([_csv_text(name, row.get(name)) for name in columns])
    return buffer.getvalue()
