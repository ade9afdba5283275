"""Table Schemas — admin table list/mutation contracts."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TablePageResponse(BaseModel):
    """GET /api/tables/{table} response."""
    model_config = ConfigDict(populate_by_name=True)

    data: list[dict[str, Any]]
    total: int = Field(ge=0)
    has_more: bool = Field(alias="hasMore")


class DeleteResponse(BaseModel):
    success: bool = True
