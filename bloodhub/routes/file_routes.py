from urllib.parse import quote

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from bloodhub.dependencies import get_db
from bloodhub.schemas.user import TokenPrincipal
from bloodhub.services.file_storage import FileStorageService, iter_blob
from bloodhub.utils.logging_config import get_logger
from bloodhub.utils.security import get_current_user

logger = get_logger(__name__)

router = APIRouter(prefix="/files", tags=["files"])

HEADER_UNSAFE_CHARS = '"\\\r\n'


def content_disposition(filename: str) -> str:
    """
    Inline disposition with an ASCII ``filename`` fallback and the RFC 5987
    ``filename*`` form carrying the UTF-8 name.
    """
    cleaned = "".join(ch for ch in filename if ch not in HEADER_UNSAFE_CHARS)
    fallback = cleaned.encode("ascii", "replace").decode("ascii") or "download"
    return f"inline; filename=\"{fallback}\"; filename*=UTF-8''{quote(cleaned, safe='')}"


@router.get("/{file_id}")
async def get_file(
    file_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: TokenPrincipal = Depends(get_current_user),
):
    """Stream a stored attachment for inline display"""
    blob = await FileStorageService(db).retrieve(file_id)

    logger.info(
        "File served",
        extra={
            "event_type": "file_served",
            "file_id": str(blob.id),
            "size": blob.size,
            "user_id": str(current_user.id),
        },
    )
    return StreamingResponse(
        iter_blob(blob),
        media_type=blob.content_type,
        headers={
            "Content-Disposition": content_disposition(blob.filename),
            "Content-Length": str(blob.size),
        },
    )
