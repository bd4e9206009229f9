from __future__ import annotations

import os
import re
from functools import lru_cache
from dotenv import load_dotenv, find_dotenv

_env_path = find_dotenv(".env", usecwd=True) or ".env"
load_dotenv(_env_path, override=False)

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.I)
_DURATION_UNITS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def _split_csv(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def parse_duration(value: str) -> int:
    """Parse ``7d`` / ``12h`` / ``30m`` / ``3600`` into seconds."""
    match = _DURATION_RE.match(value or "")
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return int(amount) * _DURATION_UNITS[unit.lower()]


class Settings:
    """Central configuration (env driven). Built once and handed to create_app."""

    def __init__(self) -> None:
        # App meta
        self.app_name: str = os.getenv("APP_NAME", "CodeJudge Backend")
        self.environment: str = os.getenv("ENV", "dev")
        self.debug: bool = _env_bool("DEBUG")
        self.api_prefix: str = "/api/v1"
        # Database
        self.database_url: str = os.getenv("DATABASE_URL", "")
        self.db_auto_create: bool = _env_bool("DB_AUTO_CREATE", "true")
        # Tokens / credentials
        self.jwt_secret: str = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
        self.jwt_algorithm: str = "HS256"
        self.jwt_expires_in: str = os.getenv("JWT_EXPIRATION", "7d")
        self.bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
        self.reset_token_ttl_seconds: int = 60 * 60
        # Cookie configuration
        self.cookie_name: str = os.getenv("AUTH_COOKIE_NAME", "jwt")
        self.cookie_domain: str | None = os.getenv("COOKIE_DOMAIN") or None
        self.cookie_secure: bool = _env_bool(
            "COOKIE_SECURE", "true" if self.environment == "production" else "false"
        )
        self.cookie_samesite: str = os.getenv("COOKIE_SAMESITE", "strict").lower()  # lax|strict|none
        # Judge0 / external
        self.use_real_judge0: bool = _env_bool("USE_REAL_JUDGE0")
        self.judge0_api_url: str = os.getenv("JUDGE0_API_URL", "").rstrip("/")
        self.judge0_api_key: str = os.getenv("JUDGE0_KEY", "")
        self.judge0_host: str = os.getenv("JUDGE0_HOST", "")
        self.judge0_poll_interval_s: float = float(os.getenv("JUDGE0_POLL_INTERVAL", "1.0"))
        self.judge0_timeout_s: float = float(os.getenv("JUDGE0_TIMEOUT", "10"))
        # Mail transport
        self.mail_host: str = os.getenv("MAIL_HOST", "")
        self.mail_port: int = int(os.getenv("MAIL_PORT", "2525"))
        self.mail_username: str = os.getenv("MAIL_USERNAME", "")
        self.mail_password: str = os.getenv("MAIL_PASSWORD", "")
        self.mail_encryption: str = os.getenv("MAIL_ENCRYPTION", "").lower()
        self.mail_from_name: str = os.getenv("MAIL_FROM_NAME", "CodeJudge")
        self.mail_from_address: str = os.getenv("MAIL_FROM_ADDRESS", "no-reply@codejudge.local")
        self.app_url: str = os.getenv("APP_URL", "http://localhost:3000").rstrip("/")
        # Uploads
        self.upload_dest: str = os.getenv("UPLOAD_DEST", "uploads")
        self.upload_max_file_size: int = int(os.getenv("UPLOAD_MAX_FILE_SIZE", "") or 5 * 1024 * 1024)
        self.upload_allowed_mime_types: list[str] = _split_csv(
            os.getenv("UPLOAD_ALLOWED_MIME_TYPES", "image/jpeg,image/png,application/pdf")
        )
        # CORS
        self.cors_origins: list[str] = _split_csv(os.getenv("CORS_ORIGIN", "*")) or ["*"]

    @property
    def jwt_expires_seconds(self) -> int:
        return parse_duration(self.jwt_expires_in)

    @property
    def judge0_enabled(self) -> bool:
        """Real Judge0 backend only when explicitly requested and reachable by URL."""
        return self.use_real_judge0 and bool(self.judge0_api_url)

    def get_database_url(self) -> str:
        return self.database_url


@lru_cache()
def get_settings() -> Settings:
    return Settings()
