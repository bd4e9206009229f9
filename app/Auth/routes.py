from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.Core.config import Settings
from app.DB.session import get_db
from app.common.deps import CurrentUser, get_current_user, get_mail_service, get_settings_dep
from app.common.utils import envelope
from app.features.mail.service import MailService
from app.features.profiles import service as profile_service
from app.features.profiles.schemas import ProfileUpdate, UserOut
from .schemas import (
    RegisterRequest,
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    ChangePasswordRequest,
)
from .service import AuthService, set_auth_cookie, clear_auth_cookie

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_service(
    settings: Settings = Depends(get_settings_dep),
    mailer: MailService = Depends(get_mail_service),
) -> AuthService:
    return AuthService(settings, mailer)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    resp: Response,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    user, token = auth.register(db, payload)
    set_auth_cookie(resp, token, auth.settings)
    return envelope("User registered successfully", user=UserOut.model_validate(user), token=token)


@router.post("/login")
def login(
    payload: LoginRequest,
    resp: Response,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    """Authenticate with email/password; the token is set as an httpOnly cookie and echoed in the body."""
    user, token = auth.login(db, payload)
    set_auth_cookie(resp, token, auth.settings)
    return envelope("User logged in successfully", user=UserOut.model_validate(user), token=token)


@router.post("/logout")
def logout(resp: Response, settings: Settings = Depends(get_settings_dep)):
    clear_auth_cookie(resp, settings)
    return envelope("User logged out successfully")


@router.get("/check")
def check(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = profile_service.get_profile(db, current_user.id)
    return envelope("User authenticated successfully", user=UserOut.model_validate(user))


@router.get("/me")
def me(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = profile_service.get_profile(db, current_user.id)
    return envelope("User fetched successfully", user=UserOut.model_validate(user))


@router.post("/forgot-password")
def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    return envelope(auth.forgot_password(db, payload.email))


@router.post("/reset-password")
def reset_password(
    payload: ResetPasswordRequest,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    return envelope(auth.reset_password(db, payload))


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    auth.change_password(db, current_user.id, payload)
    return envelope("Password changed successfully")


# Profile

@router.get("/profile")
def read_profile(current_user: CurrentUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = profile_service.get_profile(db, current_user.id)
    return envelope("Profile fetched successfully", user=UserOut.model_validate(user))


@router.put("/profile")
def update_profile(
    payload: ProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = profile_service.update_profile(db, current_user.id, payload)
    return envelope("Profile updated successfully", user=UserOut.model_validate(user))


@router.delete("/profile")
def delete_profile(
    resp: Response,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    profile_service.delete_profile(db, current_user.id)
    clear_auth_cookie(resp, settings)
    return envelope("Profile deleted successfully")
