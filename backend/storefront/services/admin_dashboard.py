"""Admin Dashboard — admin gate, schema discovery, and one TableController per table.

Invariants:
    - Schemas are loaded only after the gateway confirms admin status
    - get_table() hands out the same controller for the same table name
    - A failed call stores one message (error) and its ErrorKind; 403 marks the
      dashboard access-denied

Design Decisions:
    - Schemas fetched sequentially: a handful of tables, and ordering stays stable
"""

import logging

import httpx

from storefront.core.domain_types import ErrorKind
from storefront.core.errors import StorefrontError
from storefront.core.form_schema import FormSchema
from storefront.services.storefront_client import StorefrontApiClient
from storefront.services.table_controller import (
    ConfirmCallback, DownloadSink, TableController, classify_error,
)

logger = logging.getLogger(__name__)


class AdminDashboard:
    def __init__(
        self,
        client: StorefrontApiClient,
        *,
        confirm: ConfirmCallback | None = None,
        download_sink: DownloadSink | None = None,
    ):
        self.client = client
        self._confirm = confirm
        self._download_sink = download_sink
        self.is_admin: bool | None = None
        self.schemas: dict[str, FormSchema] = {}
        self.error: str | None = None
        self.error_kind: ErrorKind | None = None
        self._tables: dict[str, TableController] = {}

    @property
    def schema_names(self) -> list[str]:
        return list(self.schemas)

    async def open(self) -> bool:
        """Check admin status, then load every schema. True when ready."""
        if not await self.check_admin_status():
            return False
        return await self.load_schemas()

    async def check_admin_status(self) -> bool:
        try:
            self.is_admin = await self.client.admin_status()
        except (StorefrontError, httpx.HTTPError) as e:
            self._fail(e, "Failed to check admin status")
            return False
        if not self.is_admin:
            self.error_kind = ErrorKind.ACCESS_DENIED
        return self.is_admin

    async def load_schemas(self) -> bool:
        try:
            names = await self.client.list_schemas()
            self.schemas = {
                name: FormSchema.from_json(await self.client.get_schema(name))
                for name in names
            }
        except (StorefrontError, httpx.HTTPError) as e:
            self._fail(e, "Failed to load schemas")
            return False
        self.error = None
        self.error_kind = None
        return True

    def get_table(self, table_name: str) -> TableController:
        if table_name not in self._tables:
            if table_name not in self.schemas:
                raise KeyError(f"Unknown table: {table_name}")
            self._tables[table_name] = TableController(
                table_name,
                self.schemas[table_name],
                self.client,
                confirm=self._confirm,
                download_sink=self._download_sink,
            )
        return self._tables[table_name]

    def _fail(self, exc: Exception, fallback: str) -> None:
        self.error = exc.message if isinstance(exc, StorefrontError) else fallback
        self.error_kind = classify_error(exc)
        logger.error(f"{fallback}: {exc}")
