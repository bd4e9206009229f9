"""Disk backed upload storage."""

import logging
import os
import random
import time
from typing import AsyncIterator

import aiofiles
from fastapi import HTTPException, UploadFile, status

from app.Core.config import Settings
from .schemas import UploadedFileOut

logger = logging.getLogger("files")

CHUNK_SIZE = 64 * 1024


class FileService:
    def __init__(self, settings: Settings):
        dest = settings.upload_dest
        self.upload_root = dest if os.path.isabs(dest) else os.path.join(os.getcwd(), dest)
        self.max_file_size = settings.upload_max_file_size
        self.allowed_mime_types = settings.upload_allowed_mime_types
        os.makedirs(self.upload_root, exist_ok=True)

    def resolve(self, filename: str) -> str:
        """Map a client supplied name into the upload root; directory parts are dropped."""
        return os.path.join(self.upload_root, os.path.basename(filename))

    @staticmethod
    def generate_filename(original_name: str) -> str:
        ext = os.path.splitext(original_name or "")[1]
        return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"

    async def save_upload(self, upload: UploadFile) -> UploadedFileOut:
        mime_type = upload.content_type or "application/octet-stream"
        if mime_type not in self.allowed_mime_types:
            raise HTTPException(
                status.HTTP_400_BAD_REQUEST,
                f"Invalid file type. Allowed: {', '.join(self.allowed_mime_types)}",
            )

        filename = self.generate_filename(upload.filename or "")
        full_path = self.resolve(filename)
        size = 0
        too_large = False
        async with aiofiles.open(full_path, "wb") as out:
            while chunk := await upload.read(CHUNK_SIZE):
                size += len(chunk)
                if size > self.max_file_size:
                    too_large = True
                    break
                await out.write(chunk)

        if too_large:
            self.remove(filename)
            logger.info("files.rejected_too_large original=%s", upload.filename)
            raise HTTPException(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, "File too large")

        logger.info("files.stored filename=%s size=%d", filename, size)
        return UploadedFileOut(
            filename=filename,
            original_name=upload.filename or filename,
            mime_type=mime_type,
            size=size,
            path=os.path.relpath(full_path, os.getcwd()).replace("\\", "/"),
            url=f"/uploads/{filename}",
        )

    def require_existing(self, filename: str) -> str:
        full_path = self.resolve(filename)
        if not os.path.isfile(full_path):
            raise HTTPException(status.HTTP_404_NOT_FOUND, "File not found")
        return full_path

    async def iter_file(self, full_path: str) -> AsyncIterator[bytes]:
        async with aiofiles.open(full_path, "rb") as f:
            while chunk := await f.read(CHUNK_SIZE):
                yield chunk

    def remove(self, filename: str) -> None:
        full_path = self.resolve(filename)
        if os.path.exists(full_path):
            os.remove(full_path)
