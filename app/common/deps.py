"""Shared FastAPI dependencies for authentication, authorization, and app collaborators."""

from __future__ import annotations

import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from app.Auth.deps import get_current_claims
from app.Core.config import Settings
from app.DB.session import get_db
from app.features.profiles.models import UserRole
from app.features.profiles.repository import profile_repository

logger = logging.getLogger("auth.deps")


class CurrentUser(BaseModel):
    """Minimal user identity shared across endpoints."""
    id: str
    email: EmailStr
    role: UserRole


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_judge_gateway(request: Request):
    return request.app.state.judge_gateway


def get_mail_service(request: Request):
    return request.app.state.mail_service


def get_file_service(request: Request):
    return request.app.state.file_service


def get_current_user(
    request: Request,
    claims: dict = Depends(get_current_claims),
    db: Session = Depends(get_db),
) -> CurrentUser:
    """Resolve the token subject to a live, active user row."""
    user = profile_repository.get_by_id(db, claims["sub"])
    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized - User not found")
    if not user.is_active:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized - Account is inactive")

    request.state.user_id = user.id
    return CurrentUser(id=user.id, email=user.email, role=user.role)


def require_role(*allowed: UserRole) -> Callable[..., CurrentUser]:
    def _checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.info("auth.forbidden user_id=%s role=%s", user.id, user.role.value)
            raise HTTPException(status.HTTP_403_FORBIDDEN, "Access denied - Admins only")
        return user

    return _checker


require_admin = require_role(UserRole.admin)
