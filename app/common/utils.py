import json
from typing import Any, List, Optional
from datetime import datetime, timezone

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, (list, tuple)):
        return [_dump(v) for v in value]
    return jsonable_encoder(value)


def envelope(message: str, **payload: Any) -> dict:
    """Uniform ``{success, message, <payload>}`` response body."""
    body: dict = {"success": True, "message": message}
    for key, value in payload.items():
        body[key] = _dump(value)
    return body


def json_array_or_none(values: List[Optional[Any]]) -> Optional[str]:
    """JSON encode an index aligned list, or None when no entry carries a value."""
    if not any(values):
        return None
    return json.dumps(values, ensure_ascii=False)


def as_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt
