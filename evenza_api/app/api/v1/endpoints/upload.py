"""
File upload endpoint.

Accepts ``multipart/form-data`` with a ``file`` part, the media
``type`` (image or video) and a target ``folder``.  The file is
validated against the allowed MIME types and sizes, then stored in
object storage; the response carries its public URL.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ....core.security import get_current_user
from ....core.states import MediaType
from ....schemas.media import UploadResult
from ....services.storage_service import MAX_FILE_SIZE, StorageError, StorageService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=UploadResult, status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: UploadFile = File(...),
    type: MediaType = Form(MediaType.IMAGE),
    folder: str = Form("uploads"),
    current_user: dict = Depends(get_current_user),
) -> UploadResult:
    limit = MAX_FILE_SIZE[type]
    if file.size is not None and file.size > limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size for {type.value} is {limit // (1024 * 1024)}MB",
        )
    # Read one byte past the limit so oversized bodies fail validation
    # without being buffered whole.
    data = await file.read(limit + 1)
    try:
        stored = StorageService.upload(
            data,
            file.filename or "upload",
            file.content_type or "application/octet-stream",
            type,
            folder,
        )
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info("User %s uploaded %s", current_user["user_id"], stored["key"])
    return UploadResult(**stored)
