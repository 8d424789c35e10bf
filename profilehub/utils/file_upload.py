"""
File Upload Utility - Validate profile image uploads.

Supported formats: JPG, PNG, GIF, WEBP
Max file size: 5MB

The bytes are only checked here; forwarding them to the image host is
services.image_host's job.
"""

from typing import Optional, Tuple
from fastapi import UploadFile, HTTPException


MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.webp'}


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def has_upload(file: Optional[UploadFile]) -> bool:
    """Browsers send an empty part with no filename when no file is picked."""
    return file is not None and bool(file.filename)


async def read_image_upload(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read and validate an uploaded profile image.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (content, filename)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported image type '{ext}'. Allowed: JPG, PNG, GIF, WEBP"
        )

    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Uploaded file is not an image")

    content = await file.read()

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded image is empty")

    return content, file.filename
