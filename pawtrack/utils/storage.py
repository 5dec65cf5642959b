"""
Object storage for uploaded files (dog photos, evidence, gallery media, receipts).
Files go to Cloudflare R2 when credentials are configured, otherwise to local disk.
Only the object key is stored in the database; URLs are resolved on read.
"""

import logging
import os
import uuid
from functools import lru_cache
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, UploadFile

from .. import config

logger = logging.getLogger(__name__)

# Presigned URL expiration time (1 hour)
PRESIGNED_URL_EXPIRATION = 3600

MAX_IMAGE_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
MAX_VIDEO_SIZE_BYTES = 100 * 1024 * 1024  # 100MB

IMAGE_TYPES = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/heic": "heic",
}
VIDEO_TYPES = {
    "video/mp4": "mp4",
    "video/quicktime": "mov",
    "video/webm": "webm",
}
DOCUMENT_TYPES = {"application/pdf": "pdf"}

UPLOAD_CATEGORIES = {
    "dog-images": IMAGE_TYPES,
    "receipts": IMAGE_TYPES,
    "gallery": {**IMAGE_TYPES, **VIDEO_TYPES},
    "evidence": {**IMAGE_TYPES, **VIDEO_TYPES, **DOCUMENT_TYPES},
}

StorageError = (BotoCoreError, ClientError, OSError)


def max_upload_size(content_type: Optional[str]) -> int:
    return MAX_VIDEO_SIZE_BYTES if content_type in VIDEO_TYPES else MAX_IMAGE_SIZE_BYTES


def check_upload_size(content_type: Optional[str], size: int):
    max_size = max_upload_size(content_type)
    if size > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File size exceeds {max_size // (1024 * 1024)}MB limit. "
            f"Your file is {size / (1024 * 1024):.2f}MB.",
        )


async def read_upload(file: UploadFile) -> bytes:
    """Read a multipart upload without buffering more than the size limit allows"""
    if file.size is not None:
        check_upload_size(file.content_type, file.size)
    max_size = max_upload_size(file.content_type)
    data = await file.read(max_size + 1)
    check_upload_size(file.content_type, len(data))
    return data


def validate_upload(category: str, content_type: Optional[str], filename: Optional[str], size: int):
    """Validate an upload before it is stored. Returns the file extension to use."""
    allowed = UPLOAD_CATEGORIES.get(category)
    if allowed is None:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid upload category. Use one of: {', '.join(UPLOAD_CATEGORIES)}",
        )

    if filename:
        if "/" in filename or "\\" in filename or ".." in filename:
            logger.warning(f"❌ Dangerous filename rejected: '{filename}'")
            raise HTTPException(status_code=400, detail="Invalid filename")
        if len(filename) > 255:
            raise HTTPException(status_code=400, detail="Filename too long - maximum 255 characters")

    if content_type not in allowed:
        raise HTTPException(status_code=415, detail=f"Unsupported file type: {content_type}")

    check_upload_size(content_type, size)
    if size == 0:
        raise HTTPException(status_code=400, detail="Empty file")

    return allowed[content_type]


def build_key(business_id: int, category: str, ext: str) -> str:
    return f"{business_id}/{category}/{uuid.uuid4()}.{ext}"


def validate_key(key: str) -> str:
    """Reject keys that could escape the storage root"""
    if not key or ".." in key.split("/") or key.startswith("/") or "\\" in key:
        raise HTTPException(status_code=400, detail="Invalid file key")
    return key


def validate_owned_key(key: Optional[str], business_id: int) -> Optional[str]:
    """Keys sent by clients must live under the caller's business prefix; external URLs pass through"""
    if key is None or key.startswith(("http://", "https://")):
        return key
    validate_key(key)
    if not key.startswith(f"{business_id}/"):
        logger.warning(f"❌ Foreign file key rejected for business {business_id}: '{key}'")
        raise HTTPException(status_code=400, detail="File does not belong to this business")
    return key


class R2StorageBackend:
    """Cloudflare R2 through the S3 API"""

    name = "r2"

    def __init__(self, client=None, bucket: Optional[str] = None):
        self._client = client
        self.bucket = bucket or config.R2_BUCKET_NAME

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=f"https://{config.R2_ACCOUNT_ID}.r2.cloudflarestorage.com",
                aws_access_key_id=config.R2_ACCESS_KEY_ID,
                aws_secret_access_key=config.R2_SECRET_ACCESS_KEY,
                config=Config(signature_version="s3v4"),
                region_name="auto",
            )
        return self._client

    def save(self, key: str, data: bytes, content_type: str) -> None:
        self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
        logger.info(f"✅ Uploaded {key} to R2 ({len(data)} bytes)")

    def url(self, key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
        """Presigned GET URL for a private object"""
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": key, "ResponseContentDisposition": "inline"},
            ExpiresIn=expiration,
        )

    def presign_upload(self, key: str, content_type: str) -> dict:
        upload_url = self.client.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": key, "ContentType": content_type},
            ExpiresIn=PRESIGNED_URL_EXPIRATION,
        )
        return {"useLocalUpload": False, "uploadUrl": upload_url, "key": key}

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=key)

    def path(self, key: str) -> Optional[Path]:
        return None


class LocalStorageBackend:
    """Files under UPLOAD_DIR, served back through /uploads/files/<key>"""

    name = "local"

    def __init__(self, root: Optional[str] = None):
        self.root = Path(root or config.UPLOAD_DIR).resolve()

    def _resolve(self, key: str) -> Path:
        path = (self.root / validate_key(key)).resolve()
        if self.root not in path.parents:
            raise HTTPException(status_code=400, detail="Invalid file key")
        return path

    def save(self, key: str, data: bytes, content_type: str) -> None:
        path = self._resolve(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"✅ Stored {key} on local disk ({len(data)} bytes)")

    def url(self, key: str, expiration: int = PRESIGNED_URL_EXPIRATION) -> str:
        return f"/uploads/files/{key}"

    def presign_upload(self, key: str, content_type: str) -> dict:
        category = key.split("/")[1]
        return {"useLocalUpload": True, "uploadUrl": f"/uploads/{category}", "key": None}

    def delete(self, key: str) -> None:
        path = self._resolve(key)
        if path.exists():
            os.remove(path)

    def path(self, key: str) -> Optional[Path]:
        path = self._resolve(key)
        return path if path.is_file() else None


class StorageService:
    """Facade used by the routers; picks the backend from STORAGE_BACKEND"""

    def __init__(self, backend=None):
        if backend is None:
            backend = (
                R2StorageBackend() if config.STORAGE_BACKEND == "r2" else LocalStorageBackend()
            )
        self.backend = backend

    @property
    def is_local(self) -> bool:
        return self.backend.name == "local"

    def upload(
        self, business_id: int, category: str, data: bytes, content_type: str, filename: Optional[str]
    ) -> dict:
        ext = validate_upload(category, content_type, filename, len(data))
        key = build_key(business_id, category, ext)
        try:
            self.backend.save(key, data, content_type)
            url = self.backend.url(key)
        except StorageError as e:
            logger.error(f"❌ Upload failed: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}") from e
        return {"key": key, "url": url}

    def presign(
        self, business_id: int, category: str, content_type: str, filename: Optional[str], size: int
    ) -> dict:
        ext = validate_upload(category, content_type, filename, size)
        key = build_key(business_id, category, ext)
        try:
            return self.backend.presign_upload(key, content_type)
        except StorageError as e:
            logger.error(f"❌ Failed to presign upload: {str(e)}")
            raise HTTPException(status_code=500, detail=f"Upload failed: {str(e)}") from e

    def url(self, key: Optional[str]) -> Optional[str]:
        """Resolve a stored key to a URL; None stays None and failures are logged"""
        if not key:
            return None
        if key.startswith(("http://", "https://", "/")):
            return key
        try:
            return self.backend.url(key)
        except StorageError as e:
            logger.error(f"❌ Failed to resolve URL for key {key}: {e}")
            return None

    def delete(self, key: Optional[str]) -> None:
        """Best effort removal; a missing object is not an error"""
        if not key or key.startswith(("http://", "https://", "/")):
            return
        try:
            self.backend.delete(key)
            logger.info(f"🗑️ Deleted stored object {key}")
        except StorageError as e:
            logger.warning(f"⚠️ Failed to delete stored object {key}: {e}")

    def local_path(self, key: str) -> Optional[Path]:
        return self.backend.path(key)


@lru_cache
def get_storage() -> StorageService:
    return StorageService()
