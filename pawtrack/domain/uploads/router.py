"""
Upload router - direct uploads, presigned uploads and file delivery.

Keys are namespaced by business: <business_id>/<category>/<uuid>.<ext>
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import FileResponse, RedirectResponse

from ...auth import require_staff
from ...models import User
from ...utils.storage import StorageService, get_storage, read_upload, validate_key
from .schemas import PresignRequest, PresignResponse, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["Uploads"])

# Local files are immutable (uuid keys)
LOCAL_FILE_CACHE_HEADERS = {"Cache-Control": "public, max-age=86400"}


@router.post("/{category}", response_model=UploadResponse, status_code=201)
async def upload_file(
    category: str,
    file: UploadFile = File(...),
    current_user: User = Depends(require_staff),
    storage: StorageService = Depends(get_storage),
):
    """Upload a file and get back its storage key and a URL for immediate display"""
    data = await read_upload(file)
    result = storage.upload(current_user.business_id, category, data, file.content_type, file.filename)
    logger.info(f"📤 {category} upload by user {current_user.id}: {result['key']}")
    return result


@router.post("/{category}/presign", response_model=PresignResponse)
async def presign_upload(
    category: str,
    data: PresignRequest,
    current_user: User = Depends(require_staff),
    storage: StorageService = Depends(get_storage),
):
    """
    Presigned PUT URL for uploading straight to object storage.
    With local storage the client is told to fall back to POST /uploads/{category}.
    """
    return storage.presign(
        current_user.business_id, category, data.contentType, data.filename, data.size
    )


@router.get("/files/{key:path}")
async def get_file(key: str, storage: StorageService = Depends(get_storage)):
    validate_key(key)
    if not storage.is_local:
        url = storage.url(key)
        if not url:
            raise HTTPException(status_code=404, detail="File not found")
        return RedirectResponse(url, status_code=307)

    path = storage.local_path(key)
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(path, headers=LOCAL_FILE_CACHE_HEADERS)
