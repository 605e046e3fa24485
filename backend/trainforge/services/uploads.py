"""
Upload Service

Accepts uploaded files at the API boundary.

Responsibilities:
- Enforce the MIME type allow-list and size limit
- Map MIME types to file kinds
- Stage accepted files under UPLOAD_DIR with unique names
- Discard staged files when a preview is abandoned
- Verify that file info sent back on commit points at a staged file

UPLOAD_DIR is a staging area: the file written here is what a committed
Document row points at. Rejected uploads never reach the disk.

Usage:
    from trainforge.services.uploads import validate_upload, stage_upload

    file_kind = validate_upload(upload.content_type, len(content))
    file_info = await stage_upload(content, upload.filename, file_kind)
"""

import logging
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from trainforge.config import settings, yaml_config
from trainforge.enums.training import FileKind
from trainforge.middleware.error_handling import (
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)
from trainforge.models.training import FileInfo

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES: dict[str, FileKind] = {
    "application/pdf": FileKind.PDF,
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": FileKind.DOCX,
    "application/msword": FileKind.DOCX,
    "video/mp4": FileKind.VIDEO,
    "video/avi": FileKind.VIDEO,
    "video/quicktime": FileKind.VIDEO,
}

UPLOAD_DIR = Path(settings.UPLOAD_DIR)
UPLOAD_SUBDIRECTORY: str = yaml_config.get("uploads", {}).get("subdirectory", "documents")


def max_upload_bytes() -> int:
    return settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024


def resolve_file_kind(mime_type: Optional[str]) -> FileKind:
    """
    Map an upload's MIME type to a file kind.

    Raises:
        UnsupportedFileTypeError: If the type is not on the allow-list
    """
    base_type = (mime_type or "").split(";")[0].strip().lower()
    file_kind = ALLOWED_MIME_TYPES.get(base_type)
    if file_kind is None:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {mime_type or 'unknown'}",
            details={"allowed": sorted(ALLOWED_MIME_TYPES)},
        )
    return file_kind


def validate_upload(mime_type: Optional[str], size: int) -> FileKind:
    """
    Check an upload against the allow-list and size limit.

    Args:
        mime_type: Content type reported for the upload
        size: Upload size in bytes

    Returns:
        FileKind for the upload

    Raises:
        UnsupportedFileTypeError: Type not allowed
        FileTooLargeError: Larger than MAX_UPLOAD_SIZE_MB
        ValidationError: Empty upload
    """
    file_kind = resolve_file_kind(mime_type)

    if size > max_upload_bytes():
        raise FileTooLargeError(
            f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB upload limit",
            details={"size": size, "max_size": max_upload_bytes()},
        )
    if size <= 0:
        raise ValidationError("Uploaded file is empty")

    return file_kind


async def read_upload(file: UploadFile) -> bytes:
    """
    Read an UploadFile, refusing to buffer more than the size limit.

    Raises:
        FileTooLargeError: If the upload is larger than the limit
    """
    limit = max_upload_bytes()
    content = await file.read(limit + 1)
    if len(content) > limit:
        raise FileTooLargeError(
            f"File exceeds the {settings.MAX_UPLOAD_SIZE_MB}MB upload limit",
            details={"max_size": limit},
        )
    return content


async def stage_upload(
    file_content: bytes,
    original_name: str,
    file_kind: FileKind,
    uploaded_by: Optional[str] = None,
    upload_dir: Optional[Path] = None,
) -> FileInfo:
    """
    Save an accepted upload and describe where it lives.

    Creates a unique filename using UUID to prevent collisions.

    Args:
        file_content: Raw file bytes
        original_name: File name as uploaded
        file_kind: Kind resolved from the MIME type
        uploaded_by: Uploader id
        upload_dir: Override for UPLOAD_DIR/<subdirectory>

    Returns:
        FileInfo for the staged file
    """
    target_dir = upload_dir or UPLOAD_DIR / UPLOAD_SUBDIRECTORY
    target_dir.mkdir(parents=True, exist_ok=True)

    ext = Path(original_name).suffix if original_name else ""
    file_name = f"{uuid.uuid4()}{ext}"
    file_path = target_dir / file_name

    async with aiofiles.open(file_path, "wb") as out_file:
        await out_file.write(file_content)

    logger.info(f"Staged upload: {file_path} ({len(file_content)} bytes)")
    return FileInfo(
        file_name=file_name,
        original_name=original_name,
        file_kind=file_kind,
        file_path=str(file_path),
        file_size=len(file_content),
        uploaded_by=uploaded_by,
    )


async def discard_upload(file_info: FileInfo) -> None:
    """Delete a staged upload. Failures are logged, not raised."""
    try:
        await aiofiles.os.remove(file_info.file_path)
        logger.info(f"Discarded staged upload: {file_info.file_path}")
    except OSError as e:
        logger.warning(f"Could not discard staged upload {file_info.file_path}: {e}")


async def verify_staged_upload(file_info: FileInfo, upload_dir: Optional[Path] = None) -> None:
    """
    Check that file info sent back on commit describes a file staged here.

    The path must resolve inside UPLOAD_DIR/<subdirectory>, name a regular
    file called file_name, and match file_size.

    Raises:
        ValidationError: The file info does not match a staged upload
    """
    staging_dir = (upload_dir or UPLOAD_DIR / UPLOAD_SUBDIRECTORY).resolve()
    path = Path(file_info.file_path).resolve()

    if not path.is_relative_to(staging_dir) or path.name != file_info.file_name:
        logger.warning(f"Rejected file info outside staging area: {file_info.file_path}")
        raise ValidationError(
            "File is not a staged upload", details={"file_path": file_info.file_path}
        )

    if not await aiofiles.os.path.isfile(path):
        raise ValidationError(
            "Staged upload no longer exists", details={"file_path": file_info.file_path}
        )

    size = (await aiofiles.os.stat(path)).st_size
    if size != file_info.file_size:
        raise ValidationError(
            "Staged upload size does not match",
            details={"expected": file_info.file_size, "actual": size},
        )
