from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse

from app.common.deps import get_file_service
from app.common.utils import envelope
from .service import FileService

router = APIRouter(prefix="/files", tags=["files"])


@router.post("/upload", status_code=status.HTTP_201_CREATED)
async def upload_file(
    file: Optional[UploadFile] = File(None),
    files: FileService = Depends(get_file_service),
):
    if file is None or not file.filename:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "A file must be provided")
    stored = await files.save_upload(file)
    return envelope("File uploaded successfully", **stored.model_dump(by_alias=True))


@router.get("/{filename}")
async def get_file(filename: str, files: FileService = Depends(get_file_service)):
    full_path = files.require_existing(filename)
    return StreamingResponse(
        files.iter_file(full_path),
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{quote(filename)}"'},
    )
