"""Приём загружаемых файлов во временный каталог."""
import os
import re
import uuid
from pathlib import Path
from typing import List, Optional

from fastapi import UploadFile

from codix.core.config import get_settings
from codix.utils.exceptions import ValidationError
from codix.utils.logger import get_logger
from codix.utils.storage import remove_local_file

logger = get_logger(__name__)

ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/zip",
    "application/x-zip-compressed",
    "application/x-rar-compressed",
    "application/vnd.rar",
    "text/plain",
    "text/csv",
}

_CHUNK_SIZE = 1024 * 1024


def _safe_name(filename: str) -> str:
    stem, ext = os.path.splitext(os.path.basename(filename or "file"))
    stem = re.sub(r"[^A-Za-z0-9_-]+", "-", stem).strip("-") or "file"
    ext = re.sub(r"[^A-Za-z0-9.]+", "", ext)
    return f"{stem}-{uuid.uuid4().hex}{ext}"


async def save_upload(upload: UploadFile, allowed_types: Optional[set] = None) -> str:
    """
    Сохранить загруженный файл во временный каталог.

    Returns:
        Путь к сохранённому файлу

    Raises:
        ValidationError: Недопустимый тип файла или превышен размер
    """
    settings = get_settings()
    allowed = allowed_types or ALLOWED_MIME_TYPES
    if upload.content_type not in allowed:
        raise ValidationError(f"Invalid file type: {upload.content_type}")

    max_bytes = settings.max_upload_size_mb * 1024 * 1024
    directory = Path(settings.upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / _safe_name(upload.filename)

    written = 0
    with open(path, "wb") as out:
        while True:
            chunk = await upload.read(_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                break
            out.write(chunk)

    if written > max_bytes:
        remove_local_file(str(path))
        raise ValidationError(f"File exceeds the {settings.max_upload_size_mb}MB limit")

    logger.debug("upload_saved", path=str(path), size=written)
    return str(path)


async def save_uploads(uploads: List[UploadFile]) -> List[str]:
    """Сохранить несколько файлов. При ошибке уже сохранённые удаляются."""
    settings = get_settings()
    if len(uploads) > settings.max_upload_files:
        raise ValidationError(f"You can upload at most {settings.max_upload_files} files")
    paths: List[str] = []
    try:
        for upload in uploads:
            paths.append(await save_upload(upload))
    except ValidationError:
        for path in paths:
            remove_local_file(path)
        raise
    return paths
