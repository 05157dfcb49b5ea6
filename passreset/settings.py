from datetime import timedelta
from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    app_env: str = "dev"
    log_level: str = "INFO"
    http_host: str = "0.0.0.0"
    http_port: int = Field(default=8000, gt=0)

    # Storage
    database_url: str = "postgresql://app:app@db:5432/app"
    auto_create_schema: bool = True

    # Email transport
    email_transport: Literal["smtp", "http"] = "smtp"
    smtp_server: str = "smtp.example.com"
    smtp_port: int = 465
    smtp_auth: bool = True
    smtp_username: str = "user@example.com"
    smtp_password: str = "secret"
    smtp_use_tls: bool = True  # implicit TLS (SMTPS)
    smtp_start_tls: bool = False
    smtp_timeout_seconds: float = 10.0
    smtp_base_url: str = "http://smtp-mock:8025"

    # Message templates, {code} is replaced by the passcode
    mail_from_address: str = "from@example.com"
    mail_from_name: str = "Mailer"
    mail_subject: str = "Reset token"
    mail_body: str = "Use this token to reset your password: <b>{code}</b>"
    mail_alt_body: str = "Use this token to reset your password: {code}"

    # Passcode / abuse policies
    token_expiry_minutes: int = Field(default=5, gt=0)
    request_log_cleanup_hours: int = Field(default=1, gt=0)
    backoff_window_minutes: int = Field(default=60, gt=0)
    backoff_threshold_count: int = Field(default=3, ge=1)
    code_min: int = Field(default=10000, ge=0)
    code_max: int = 99999

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_code_range(self) -> "Settings":
        if self.code_min > self.code_max:
            raise ValueError("code_min must not be greater than code_max")
        return self

    @property
    def token_expiry(self) -> timedelta:
        return timedelta(minutes=self.token_expiry_minutes)

    @property
    def request_log_cleanup(self) -> timedelta:
        return timedelta(hours=self.request_log_cleanup_hours)

    @property
    def backoff_window(self) -> timedelta:
        return timedelta(minutes=self.backoff_window_minutes)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
