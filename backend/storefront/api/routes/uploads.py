"""Upload Routes — multipart file in, hosted URL out.

Invariants:
    - /media is public (storefront forms attach photos); /file requires the owner
    - The file body is forwarded base64-encoded to the platform OSS upload model
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile

from storefront.api.deps import get_platform_client, require_admin
from storefront.infrastructure.platform_client import PlatformApiClient
from storefront.schemas.upload import UploadResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/upload", tags=["uploads"])


async def _upload(file: UploadFile, platform: PlatformApiClient) -> UploadResponse:
    content = await file.read()
    url = await platform.upload_bytes(content)
    logger.info(f"Uploaded {file.filename} ({len(content)} bytes)")
    return UploadResponse(url=url)


@router.post("/media", response_model=UploadResponse)
async def upload_media(
    file: UploadFile = File(...),
    platform: PlatformApiClient = Depends(get_platform_client),
):
    return await _upload(file, platform)


@router.post(
    "/file", response_model=UploadResponse, dependencies=[Depends(require_admin)],
)
async def upload_file(
    file: UploadFile = File(...),
    platform: PlatformApiClient = Depends(get_platform_client),
):
    return await _upload(file, platform)
