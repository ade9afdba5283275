"""Upload Schemas — hosted URL of an uploaded file."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    url: str
