"""Admin Schemas — admin status response."""

from pydantic import BaseModel, ConfigDict, Field


class AdminStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_admin: bool = Field(alias="isAdmin")
