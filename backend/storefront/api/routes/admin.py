"""Admin Routes — owner status and table schema discovery.

Invariants:
    - /status never fails for anonymous callers: it answers {isAdmin: false}
    - Schema endpoints require the owner (403) and 404 on unknown tables
"""

import logging

from fastapi import APIRouter, Depends

from storefront.api.deps import get_current_user, get_registry, is_owner, require_admin
from storefront.config import Settings, get_settings
from storefront.infrastructure.schema_registry import SchemaRegistry
from storefront.schemas.admin import AdminStatusResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/status", response_model=AdminStatusResponse, response_model_by_alias=True)
async def admin_status(
    user: dict | None = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
):
    return AdminStatusResponse(is_admin=is_owner(user, settings))


@router.get("/schemas", dependencies=[Depends(require_admin)])
async def list_schemas(registry: SchemaRegistry = Depends(get_registry)) -> list[str]:
    """Names of every table the admin dashboard can manage."""
    return registry.table_names()


@router.get("/schemas/{table_name}", dependencies=[Depends(require_admin)])
async def get_schema(
    table_name: str, registry: SchemaRegistry = Depends(get_registry),
) -> dict:
    return registry.raw_schema(table_name)
