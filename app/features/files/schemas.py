from app.common.schemas import CamelModel


class UploadedFileOut(CamelModel):
    filename: str
    original_name: str
    mime_type: str
    size: int
    path: str
    url: str
