"""Credential handling: hashing, token issuance, registration and password flows."""

import logging
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from fastapi import HTTPException, Response, status
from jose import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.Core.config import Settings
from app.common.utils import as_aware
from app.features.mail.service import MailService
from app.features.profiles.models import User, UserRole
from app.features.profiles.repository import profile_repository
from app.features.profiles.service import display_name, require_user
from .schemas import RegisterRequest, LoginRequest, ResetPasswordRequest, ChangePasswordRequest

logger = logging.getLogger("auth")

INVALID_CREDENTIALS = "Invalid email or password"
FORGOT_PASSWORD_MESSAGE = "If this email exists, a password reset link has been sent"
PASSWORD_TOO_SHORT = "Password must be at least 8 characters"
PASSWORD_TOO_LONG = "Password must be at most 72 bytes"
BCRYPT_MAX_BYTES = 72
PASSWORD_TOO_WEAK = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number, and one special character"
)
_SPECIAL_RE = re.compile(r"[@$!%*?&]")


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def validate_password_strength(password: str) -> None:
    if len(password) < 8:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, PASSWORD_TOO_SHORT)
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, PASSWORD_TOO_LONG)
    checks = (
        re.search(r"[A-Z]", password),
        re.search(r"[a-z]", password),
        re.search(r"\d", password),
        _SPECIAL_RE.search(password),
    )
    if not all(checks):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, PASSWORD_TOO_WEAK)


def create_access_token(user: User, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "email": user.email,
        "sub": user.id,
        "role": user.role.value if isinstance(user.role, UserRole) else user.role,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.jwt_expires_seconds)).timestamp()),
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """Verify signature and expiry; raises jose.JWTError on any failure."""
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def set_auth_cookie(resp: Response, token: str, settings: Settings) -> None:
    resp.set_cookie(
        key=settings.cookie_name,
        value=token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,  # type: ignore[arg-type]
        domain=settings.cookie_domain,
        max_age=settings.jwt_expires_seconds,
        path="/",
    )


def clear_auth_cookie(resp: Response, settings: Settings) -> None:
    resp.delete_cookie(
        key=settings.cookie_name,
        domain=settings.cookie_domain,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,  # type: ignore[arg-type]
    )


class AuthService:
    def __init__(self, settings: Settings, mailer: MailService):
        self.settings = settings
        self.mailer = mailer

    def register(self, db: Session, payload: RegisterRequest) -> tuple[User, str]:
        email = payload.email.lower()
        if profile_repository.get_by_email(db, email):
            raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered")

        validate_password_strength(payload.password)

        try:
            user = profile_repository.create_user(
                db,
                email=email,
                password=hash_password(payload.password, self.settings.bcrypt_rounds),
                name=display_name(payload.first_name, payload.last_name),
                first_name=payload.first_name,
                last_name=payload.last_name,
                phone=payload.phone,
                role=UserRole.member,
                is_active=True,
                is_email_verified=False,
            )
        except IntegrityError as exc:
            db.rollback()
            raise HTTPException(status.HTTP_409_CONFLICT, "Email already registered") from exc

        logger.info("auth.registered user_id=%s", user.id)
        return user, create_access_token(user, self.settings)

    def login(self, db: Session, payload: LoginRequest) -> tuple[User, str]:
        user = profile_repository.get_by_email(db, payload.email.lower())
        # same message for every failure so accounts cannot be enumerated
        if not user or not user.is_active or not verify_password(payload.password, user.password):
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, INVALID_CREDENTIALS)
        logger.info("auth.login user_id=%s", user.id)
        return user, create_access_token(user, self.settings)

    def forgot_password(self, db: Session, email: str) -> str:
        user = profile_repository.get_by_email(db, email.lower())
        if not user:
            return FORGOT_PASSWORD_MESSAGE

        reset_token = secrets.token_hex(32)
        profile_repository.update_user(
            db,
            user,
            {
                "reset_password_token": hash_password(reset_token, self.settings.bcrypt_rounds),
                "reset_password_expires": datetime.now(timezone.utc)
                + timedelta(seconds=self.settings.reset_token_ttl_seconds),
            },
        )

        reset_link = f"{self.settings.app_url}/reset-password?token={reset_token}"
        try:
            self.mailer.send_forgot_password_email(user.email, reset_token, reset_link)
        except Exception:
            logger.exception("Failed to send password reset email user_id=%s", user.id)
        return FORGOT_PASSWORD_MESSAGE

    def reset_password(self, db: Session, payload: ResetPasswordRequest) -> str:
        validate_password_strength(payload.password)

        # Only hashes are stored, so every candidate has to be compared.
        # TODO: move reset tokens to an indexed lookup column to drop the full scan.
        found: User | None = None
        for candidate in profile_repository.list_with_reset_tokens(db):
            if verify_password(payload.token, candidate.reset_password_token):
                expires = as_aware(candidate.reset_password_expires)
                if expires is not None and expires < datetime.now(timezone.utc):
                    raise HTTPException(status.HTTP_400_BAD_REQUEST, "Password reset token has expired")
                found = candidate
                break

        if found is None:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "Invalid reset token")

        profile_repository.update_user(
            db,
            found,
            {
                "password": hash_password(payload.password, self.settings.bcrypt_rounds),
                "reset_password_token": None,
                "reset_password_expires": None,
            },
        )
        logger.info("auth.password_reset user_id=%s", found.id)

        try:
            self.mailer.send_password_reset_confirmation(found.email)
        except Exception:
            logger.exception("Failed to send password reset confirmation user_id=%s", found.id)
        return "Password reset successfully"

    def change_password(self, db: Session, user_id: str, payload: ChangePasswordRequest) -> User:
        user = require_user(db, user_id)
        if not verify_password(payload.current_password, user.password):
            raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Current password is incorrect")

        validate_password_strength(payload.new_password)

        if verify_password(payload.new_password, user.password):
            raise HTTPException(status.HTTP_400_BAD_REQUEST, "New password cannot be same as current password")

        return profile_repository.update_user(
            db, user, {"password": hash_password(payload.new_password, self.settings.bcrypt_rounds)}
        )
