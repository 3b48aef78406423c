from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    max_upload_size_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: list[str] = [
        "application/pdf",
        "image/jpeg",
        "image/png",
        "image/gif",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
    ]
    allowed_extensions: list[str] = [
        "pdf", "jpg", "jpeg", "png", "gif", "doc", "docx", "txt",
    ]

    rng_seed: int | None = None
    enforce_blockchain_invariant: bool = True
    analysis_delay_min_seconds: float = 0.0
    analysis_delay_max_seconds: float = 0.0
    profiles_path: Path | None = None

    trend_timezone: str = "UTC"

    session_backend: str = "json"
    session_file_path: Path = Path(".docguard/session.json")
    session_slot: str = "trustseal"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docguard"
    db_username: str = "docguard"
    db_password: str = "secret"

    @field_validator("analysis_delay_min_seconds", "analysis_delay_max_seconds")
    @classmethod
    def delay_not_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("analysis delay must not be negative")
        return v

    @field_validator("max_upload_size_bytes")
    @classmethod
    def size_limit_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_upload_size_bytes must be positive")
        return v

    @field_validator("trend_timezone")
    @classmethod
    def timezone_known(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown trend_timezone: {v!r}") from exc
        return v
