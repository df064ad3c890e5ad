import os
import uuid
from typing import AsyncIterator, Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import undefer

from bloodhub.config import settings
from bloodhub.models.file_model import FileBlob
from bloodhub.utils.generic_id import parse_resource_id
from bloodhub.utils.logging_config import get_logger

logger = get_logger(__name__)

ALLOWED_EXACT_TYPES = {"application/pdf"}
ALLOWED_TYPE_PREFIXES = ("image/",)
STREAM_CHUNK_SIZE = 64 * 1024
MAX_FILENAME_LENGTH = 255
MAX_CONTENT_TYPE_LENGTH = 100


def is_allowed_content_type(content_type: Optional[str]) -> bool:
    if not content_type or len(content_type) > MAX_CONTENT_TYPE_LENGTH:
        return False
    return content_type in ALLOWED_EXACT_TYPES or content_type.startswith(
        ALLOWED_TYPE_PREFIXES
    )


def bounded_filename(filename: str) -> str:
    """Shorten names past the column limit, keeping the extension"""
    if len(filename) <= MAX_FILENAME_LENGTH:
        return filename
    stem, extension = os.path.splitext(filename)
    extension = extension[:16]
    return stem[:MAX_FILENAME_LENGTH - len(extension)] + extension


class FileStorageService:
    """Stores request attachments as blobs addressed by opaque ids"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def store_upload(self, upload: UploadFile) -> FileBlob:
        """Validate and stage an uploaded file; the caller commits."""
        if not is_allowed_content_type(upload.content_type):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Only images and PDF files are allowed!",
            )

        # Read one byte past the limit to detect oversize files without
        # buffering arbitrarily large bodies
        data = await upload.read(settings.max_file_size_bytes + 1)
        if len(data) > settings.max_file_size_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size is {settings.MAX_FILE_SIZE_MB}MB",
            )

        return self.store(
            data, bounded_filename(upload.filename or "upload"), upload.content_type
        )

    def store(self, data: bytes, filename: str, content_type: str) -> FileBlob:
        blob = FileBlob(
            id=uuid.uuid4(),
            filename=filename,
            content_type=content_type,
            size=len(data),
            data=data,
        )
        self.db.add(blob)

        logger.info(
            "File staged for storage",
            extra={
                "event_type": "file_stored",
                "file_name": filename,
                "content_type": content_type,
                "size": len(data),
            },
        )
        return blob

    async def retrieve(self, file_id: str) -> FileBlob:
        blob_id = parse_resource_id(file_id, "File")
        result = await self.db.execute(
            select(FileBlob).options(undefer(FileBlob.data)).where(FileBlob.id == blob_id)
        )
        blob = result.scalar_one_or_none()
        if blob is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="File not found"
            )
        return blob


async def iter_blob(blob: FileBlob) -> AsyncIterator[bytes]:
    """Yield a blob's payload in fixed-size chunks"""
    for start in range(0, len(blob.data), STREAM_CHUNK_SIZE):
        yield blob.data[start:start + STREAM_CHUNK_SIZE]
