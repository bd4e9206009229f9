from __future__ import annotations
from datetime import datetime
from typing import Optional

from app.common.schemas import CamelModel
from .models import UserRole


class UserOut(CamelModel):
    """User record as returned to clients; credential fields never appear here."""
    id: str
    email: str
    name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: UserRole
    is_active: bool
    is_email_verified: bool
    created_at: datetime
    updated_at: datetime


class ProfileUpdate(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
