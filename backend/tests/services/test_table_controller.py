"""Table Controller — state machine, reload-after-mutation, and error classification.

Invariants:
    - Mutations reload the current query; the cache only changes on a completed load
    - Required-field failures send nothing
    - Declined delete confirmation sends nothing
    - AccessDeniedError is terminal; later calls are refused without a request
    - Export carries sort/search/filters, never page/limit
    - Overlapping loads are not cancelled: the later completion wins
"""

import asyncio

import httpx
import pytest

from storefront.core.domain_types import EditorMode, ErrorKind, TableStatus
from storefront.core.errors import AccessDeniedError, FieldNotEditableError, ResourceNotFoundError
from storefront.core.form_schema import FormSchema
from storefront.core.table_query import TablePage
from storefront.services.table_controller import FileDownloadSink, PageInfo, TableController

SCHEMA = FormSchema.from_json({
    "title": "Products",
    "properties": {
        "id": {"type": "integer", "readOnly": True},
        "name": {"type": "string", "title": "Name"},
        "price": {"type": "number"},
        "created_at": {"type": "string", "format": "date-time", "readOnly": True},
    },
    "required": ["name", "price"],
})


class FakeSource:
    """In-memory TableDataSource that records every call."""

    def __init__(self, rows=None):
        self.rows = list(rows or [])
        self.calls = []
        self.fail_with = None
        self._next_id = max((r["id"] for r in self.rows), default=0) + 1

    def _maybe_fail(self):
        if self.fail_with is not None:
            raise self.fail_with

    async def list_rows(self, table_name, params):
        self.calls.append(("list", params))
        self._maybe_fail()
        limit = int(params["limit"])
        start = (int(params["page"]) - 1) * limit
        rows = self.rows[start:start + limit]
        return TablePage(rows, len(self.rows), start + limit < len(self.rows))

    async def create_row(self, table_name, record):
        self.calls.append(("create", record))
        self._maybe_fail()
        row = {"id": self._next_id, **record}
        self._next_id += 1
        self.rows.append(row)
        return row

    async def update_row(self, table_name, row_id, record):
        self.calls.append(("update", row_id, record))
        self._maybe_fail()
        for row in self.rows:
            if row["id"] == row_id:
                row.update(record)
                return row
        raise ResourceNotFoundError("Row", str(row_id))

    async def delete_row(self, table_name, row_id):
        self.calls.append(("delete", row_id))
        self._maybe_fail()
        self.rows = [r for r in self.rows if r["id"] != row_id]

    async def export_csv(self, table_name, params):
        self.calls.append(("export", params))
        self._maybe_fail()
        return b"id,name\n"


class MemorySink:
    def __init__(self):
        self.files = {}

    def save(self, filename, content):
        self.files[filename] = content


class GatedSource(FakeSource):
    """list_rows waits until the test opens that call's gate."""

    def __init__(self, rows=None):
        super().__init__(rows)
        self.gates = []

    async def list_rows(self, table_name, params):
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return await super().list_rows(table_name, params)

    async def wait_for_calls(self, count):
        while len(self.gates) < count:
            await asyncio.sleep(0)


def _rows(n):
    return [{"id": i, "name": f"Item {i}", "price": float(i)} for i in range(1, n + 1)]


def _calls(source, kind):
    return [c for c in source.calls if c[0] == kind]


async def test_load_moves_idle_to_loaded():
    controller = TableController("products", SCHEMA, FakeSource(_rows(3)))
    assert controller.status == TableStatus.IDLE
    assert await controller.load()
    assert controller.status == TableStatus.LOADED
    assert [r["id"] for r in controller.rows] == [1, 2, 3]
    assert controller.columns == ["name", "price", "created_at"]


async def test_paging_uses_has_more():
    source = FakeSource(_rows(5))
    controller = TableController("products", SCHEMA, source, page_size=2)
    await controller.load()
    assert await controller.next_page()
    assert controller.query.page == 2
    assert await controller.next_page()
    assert not await controller.next_page()
    assert await controller.previous_page()
    assert controller.query.page == 2


async def test_page_info_tracks_query_and_total():
    controller = TableController("products", SCHEMA, FakeSource(_rows(5)), page_size=2)
    assert controller.page_info is None
    await controller.load()
    assert controller.page_info == PageInfo(page=1, page_count=3, first=1, last=2, total=5)
    await controller.go_to_page(3)
    assert controller.page_info == PageInfo(page=3, page_count=3, first=5, last=5, total=5)


async def test_overlapping_loads_later_completion_wins():
    source = GatedSource(_rows(4))
    controller = TableController("products", SCHEMA, source, page_size=2)

    first = asyncio.create_task(controller.load())
    await source.wait_for_calls(1)
    controller.query = controller.query.with_page(2)
    second = asyncio.create_task(controller.load())
    await source.wait_for_calls(2)
    assert controller.status == TableStatus.LOADING

    source.gates[1].set()
    assert await second
    assert [r["id"] for r in controller.rows] == [3, 4]

    source.gates[0].set()
    assert await first
    assert controller.status == TableStatus.LOADED
    assert [r["id"] for r in controller.rows] == [1, 2]
    assert [c[1]["page"] for c in _calls(source, "list")] == ["2", "1"]


async def test_sort_and_filter_reach_the_source():
    source = FakeSource(_rows(1))
    controller = TableController("products", SCHEMA, source)
    await controller.toggle_sort("price")
    await controller.toggle_sort("price")
    await controller.set_filter("status", "active")
    await controller.search("cap")
    params = _calls(source, "list")[-1][1]
    assert params["sort"] == "price:desc"
    assert params["status"] == "active"
    assert params["search"] == "cap"
    assert params["page"] == "1"


async def test_create_checks_required_fields_before_sending():
    source = FakeSource()
    controller = TableController("products", SCHEMA, source)
    assert not await controller.create({"name": ""})
    assert _calls(source, "create") == []
    assert controller.editor.errors == {"name": "Name is required", "price": "price is required"}


async def test_create_coerces_sends_and_reloads():
    source = FakeSource()
    controller = TableController("products", SCHEMA, source)
    await controller.load()
    assert await controller.create({"name": "Cap", "price": "12.5"})
    assert _calls(source, "create") == [("create", {"name": "Cap", "price": 12.5})]
    assert controller.editor is None
    assert [r["name"] for r in controller.rows] == ["Cap"]
    assert controller.status == TableStatus.LOADED


async def test_update_strips_read_only_fields():
    source = FakeSource(_rows(1))
    controller = TableController("products", SCHEMA, source)
    await controller.load()
    row = dict(controller.rows[0], created_at="2024-01-01T00:00:00")
    assert await controller.update(row, {"name": "Renamed"})
    _, row_id, payload = _calls(source, "update")[0]
    assert row_id == 1
    assert payload == {"name": "Renamed", "price": 1.0}


async def test_editor_rejects_read_only_fields():
    controller = TableController("products", SCHEMA, FakeSource())
    editor = controller.open_create()
    assert editor.mode == EditorMode.CREATE
    assert editor.record == {"name": "", "price": ""}
    with pytest.raises(FieldNotEditableError):
        controller.set_field("created_at", "x")


async def test_delete_requires_confirmation():
    source = FakeSource(_rows(2))
    prompts = []
    declining = TableController(
        "products", SCHEMA, source, confirm=lambda msg: prompts.append(msg) or False,
    )
    assert not await declining.delete({"id": 1})
    assert _calls(source, "delete") == []
    assert prompts == ["Are you sure you want to delete this Products record?"]

    accepting = TableController("products", SCHEMA, source, confirm=lambda msg: True)
    await accepting.load()
    assert await accepting.delete({"id": 1})
    assert [r["id"] for r in accepting.rows] == [2]
    assert accepting.page.total == 1


async def test_network_failure_stores_one_message():
    source = FakeSource()
    source.fail_with = httpx.ConnectError("connection refused")
    controller = TableController("products", SCHEMA, source)
    assert not await controller.load()
    assert controller.status == TableStatus.ERRORED
    assert controller.error == "connection refused"
    assert controller.error_kind == ErrorKind.NETWORK


async def test_failed_mutation_keeps_cached_page():
    source = FakeSource(_rows(2))
    controller = TableController("products", SCHEMA, source, confirm=lambda msg: True)
    await controller.load()
    source.fail_with = httpx.ReadTimeout("slow")
    assert not await controller.delete({"id": 1})
    assert len(controller.rows) == 2
    assert controller.status == TableStatus.ERRORED


async def test_access_denied_is_terminal():
    source = FakeSource(_rows(1))
    source.fail_with = AccessDeniedError()
    controller = TableController("products", SCHEMA, source)
    assert not await controller.load()
    assert controller.access_denied
    source.fail_with = None
    calls_before = len(source.calls)
    assert not await controller.load()
    assert len(source.calls) == calls_before


async def test_not_found_is_reported_distinctly():
    source = FakeSource()
    source.fail_with = ResourceNotFoundError("Table", "products")
    controller = TableController("products", SCHEMA, source)
    await controller.load()
    assert controller.error_kind == ErrorKind.NOT_FOUND


async def test_export_skips_page_and_limit():
    source = FakeSource(_rows(1))
    sink = MemorySink()
    controller = TableController("products", SCHEMA, source, download_sink=sink)
    await controller.toggle_sort("name")
    await controller.go_to_page(3)
    assert await controller.export()
    params = _calls(source, "export")[0][1]
    assert params == {"sort": "name:asc"}
    assert sink.files == {"products.csv": b"id,name\n"}


def test_file_download_sink_writes_into_directory(tmp_path):
    FileDownloadSink(tmp_path / "downloads").save("../products.csv", b"data")
    assert (tmp_path / "downloads" / "products.csv").read_bytes() == b"data"


async def test_cell_uses_schema_format():
    controller = TableController("products", SCHEMA, FakeSource())
    assert controller.cell({"name": None}, "name").text == ""
