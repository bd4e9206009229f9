from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from .models import User
from .repository import profile_repository
from .schemas import ProfileUpdate


def display_name(first_name: str | None, last_name: str | None) -> str | None:
    return " ".join(p for p in (first_name, last_name) if p).strip() or None


def require_user(db: Session, user_id: str) -> User:
    user = profile_repository.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")
    return user


def get_profile(db: Session, user_id: str) -> User:
    return require_user(db, user_id)


def update_profile(db: Session, user_id: str, data: ProfileUpdate) -> User:
    user = require_user(db, user_id)
    fields = data.model_dump(exclude_unset=True)
    if not fields:
        return user
    merged_first = fields.get("first_name", user.first_name)
    merged_last = fields.get("last_name", user.last_name)
    fields["name"] = display_name(merged_first, merged_last)
    return profile_repository.update_user(db, user, fields)


def delete_profile(db: Session, user_id: str) -> None:
    user = require_user(db, user_id)
    profile_repository.delete_user(db, user)
