"""Table Controller — admin CRUD state for one schema-defined table.

Invariants:
    - status: idle -> loading -> loaded | errored; every mutation passes through
      loading again and, on success, reloads the current query (no optimistic patching)
    - One cached TablePage per controller; replaced only by a completed load
    - A failed call leaves exactly one stored message plus its ErrorKind;
      AccessDeniedError is terminal (later calls are refused without a request)
    - Create/update run the required-field check first; a failing check sends nothing
    - Delete asks the confirm callback; a declined confirmation sends nothing
    - Export honors sort/search/filters but never page/limit

Design Decisions:
    - Data source and download sink are protocols: StorefrontApiClient over HTTP
      in production, in-process fakes in tests
    - No cancellation of in-flight loads: the later completion wins
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

import httpx

from storefront.core.cell_format import CellDisplay, format_cell
from storefront.core.domain_types import EditorMode, ErrorKind, TableStatus
from storefront.core.errors import (
    AccessDeniedError, FieldNotEditableError, ResourceNotFoundError, StorefrontError,
)
from storefront.core.form_schema import FormSchema
from storefront.core.form_state import initial_values
from storefront.core.table_query import (
    DEFAULT_PAGE_SIZE, TablePage, TableQuery, coerce_record, display_columns,
    page_count, required_field_errors, showing_range, strip_read_only,
)

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class TableDataSource(Protocol):
    async def list_rows(self, table_name: str, params: dict[str, str]) -> TablePage: ...

    async def create_row(self, table_name: str, record: dict[str, Any]) -> dict[str, Any]: ...

    async def update_row(
        self, table_name: str, row_id: Any, record: dict[str, Any],
    ) -> dict[str, Any]: ...

    async def delete_row(self, table_name: str, row_id: Any) -> None: ...

    async def export_csv(self, table_name: str, params: dict[str, str]) -> bytes: ...


class DownloadSink(Protocol):
    def save(self, filename: str, content: bytes) -> None: ...


class FileDownloadSink:
    """Writes downloads into a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def save(self, filename: str, content: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / Path(filename).name).write_bytes(content)


def classify_error(exc: Exception) -> ErrorKind:
    if isinstance(exc, AccessDeniedError):
        return ErrorKind.ACCESS_DENIED
    if isinstance(exc, ResourceNotFoundError):
        return ErrorKind.NOT_FOUND
    return ErrorKind.NETWORK


def _error_message(exc: Exception) -> str:
    if isinstance(exc, StorefrontError):
        return exc.message
    return str(exc) or type(exc).__name__


@dataclass(frozen=True)
class PageInfo:
    """Pager footer: "Showing first-last of total", page N of page_count."""
    page: int
    page_count: int
    first: int
    last: int
    total: int


@dataclass
class EditorState:
    """Open create/edit modal: working record plus required-field errors."""
    mode: EditorMode
    record: dict[str, Any]
    row_id: Any = None
    errors: dict[str, str] = field(default_factory=dict)


class TableController:
    """Loads, pages, sorts, filters, edits and exports one admin table."""

    def __init__(
        self,
        table_name: str,
        schema: FormSchema,
        source: TableDataSource,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        confirm: ConfirmCallback | None = None,
        download_sink: DownloadSink | None = None,
    ):
        self.table_name = table_name
        self.schema = schema
        self._source = source
        self._confirm = confirm or (lambda _message: False)
        self._download_sink = download_sink
        self.query = TableQuery(limit=page_size)
        self.status = TableStatus.IDLE
        self.page: TablePage | None = None
        self.error: str | None = None
        self.error_kind: ErrorKind | None = None
        self.editor: EditorState | None = None

    # ─── Reads ───────────────────────────────────────────────────

    @property
    def columns(self) -> list[str]:
        return display_columns(self.schema)

    @property
    def rows(self) -> list[dict[str, Any]]:
        return self.page.rows if self.page else []

    @property
    def page_info(self) -> PageInfo | None:
        if self.page is None:
            return None
        first, last = showing_range(self.query.page, self.query.limit, self.page.total)
        return PageInfo(
            page=self.query.page,
            page_count=page_count(self.page.total, self.query.limit),
            first=first,
            last=last,
            total=self.page.total,
        )

    @property
    def access_denied(self) -> bool:
        return self.error_kind == ErrorKind.ACCESS_DENIED

    def cell(self, row: dict[str, Any], column: str) -> CellDisplay:
        return format_cell(row.get(column), column, self.schema.properties.get(column))

    async def load(self) -> bool:
        """Fetch the page for the current query. Returns True on success."""
        if self.access_denied:
            return False
        self.status = TableStatus.LOADING
        try:
            page = await self._source.list_rows(self.table_name, self.query.to_params())
        except (StorefrontError, httpx.HTTPError) as e:
            self._fail(e, "load")
            return False
        self.page = page
        self.status = TableStatus.LOADED
        self.error = None
        self.error_kind = None
        return True

    async def toggle_sort(self, field_name: str) -> bool:
        self.query = self.query.toggle_sort(field_name)
        return await self.load()

    async def search(self, term: str) -> bool:
        self.query = self.query.with_search(term)
        return await self.load()

    async def set_filter(self, name: str, value: Any) -> bool:
        self.query = self.query.with_filter(name, value)
        return await self.load()

    async def go_to_page(self, page: int) -> bool:
        self.query = self.query.with_page(page)
        return await self.load()

    async def next_page(self) -> bool:
        if not (self.page and self.page.has_more):
            return False
        return await self.go_to_page(self.query.page + 1)

    async def previous_page(self) -> bool:
        if self.query.page <= 1:
            return False
        return await self.go_to_page(self.query.page - 1)

    # ─── Editor ──────────────────────────────────────────────────

    def open_create(self) -> EditorState:
        self.editor = EditorState(
            mode=EditorMode.CREATE,
            record=initial_values(self.schema.editable(), None),
        )
        return self.editor

    def open_edit(self, row: dict[str, Any]) -> EditorState:
        self.editor = EditorState(mode=EditorMode.EDIT, record=dict(row), row_id=row.get("id"))
        return self.editor

    def set_field(self, field_name: str, value: Any) -> None:
        if self.editor is None:
            raise RuntimeError("No editor is open")
        definition = self.schema.properties.get(field_name)
        if definition is None or definition.read_only:
            raise FieldNotEditableError(field_name)
        self.editor.record[field_name] = value
        self.editor.errors.pop(field_name, None)

    def close_editor(self) -> None:
        self.editor = None

    async def save(self) -> bool:
        """Create or update from the open editor; closes it on success."""
        editor = self.editor
        if editor is None:
            raise RuntimeError("No editor is open")
        editor.errors = required_field_errors(self.schema, editor.record)
        if editor.errors:
            return False
        record = coerce_record(self.schema, strip_read_only(self.schema, editor.record))
        record.pop("id", None)
        if editor.mode == EditorMode.CREATE:
            ok = await self._mutate("create", self._source.create_row, self.table_name, record)
        else:
            ok = await self._mutate(
                "update", self._source.update_row, self.table_name, editor.row_id, record,
            )
        if ok:
            self.editor = None
            await self.load()
        return ok

    async def create(self, record: dict[str, Any]) -> bool:
        self.open_create()
        for name, value in record.items():
            self.set_field(name, value)
        return await self.save()

    async def update(self, row: dict[str, Any], changes: dict[str, Any]) -> bool:
        self.open_edit(row)
        for name, value in changes.items():
            self.set_field(name, value)
        return await self.save()

    async def delete(self, row: dict[str, Any]) -> bool:
        label = self.schema.title or self.table_name
        if not self._confirm(f"Are you sure you want to delete this {label} record?"):
            return False
        ok = await self._mutate("delete", self._source.delete_row, self.table_name, row["id"])
        if ok:
            await self.load()
        return ok

    # ─── Export ──────────────────────────────────────────────────

    async def export(self) -> bool:
        if self._download_sink is None:
            raise RuntimeError("No download sink configured")
        if self.access_denied:
            return False
        try:
            content = await self._source.export_csv(
                self.table_name, self.query.export_params(),
            )
        except (StorefrontError, httpx.HTTPError) as e:
            self._fail(e, "export", keep_status=True)
            return False
        self._download_sink.save(f"{self.table_name}.csv", content)
        return True

    # ─── Internals ───────────────────────────────────────────────

    async def _mutate(self, operation: str, call: Callable[..., Awaitable[Any]], *args) -> bool:
        if self.access_denied:
            return False
        self.status = TableStatus.LOADING
        try:
            await call(*args)
        except (StorefrontError, httpx.HTTPError) as e:
            self._fail(e, operation)
            return False
        return True

    def _fail(self, exc: Exception, operation: str, keep_status: bool = False) -> None:
        self.error = _error_message(exc)
        self.error_kind = classify_error(exc)
        if not keep_status:
            self.status = TableStatus.ERRORED
        logger.error(
            f"Table {operation} failed: {self.error}",
            extra={"table_name": self.table_name},
        )
