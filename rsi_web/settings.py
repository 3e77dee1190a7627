from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExecutionMode(str, Enum):
    DEVELOPMENT = "development"
    PRODUCTION = "production"


class SMTPConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: int = 587
    user: str = ""
    password: str = ""
    from_email: str = ""
    from_name: str = "RSI Website"
    tls: bool = False
    starttls: bool = True
    # optional internal recipient, also used to observe confirmations in development
    default_to: str = ""
    timeout: float = 30


class RecaptchaConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    sitekey: str = ""
    secret: str = ""
    # reserved for score based (v3) verification
    min_score: float = 0.5
    verify_url: str = "https://www.google.com/recaptcha/api/siteverify"


REQUIRED_SETTINGS = {
    "smtp": ["host", "user", "password"],
    "recaptcha": ["sitekey", "secret"],
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_nested_delimiter="__", extra="ignore")

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000
    root_path: str = ""

    debug: bool = False
    reload: bool = False

    environment: ExecutionMode = ExecutionMode.PRODUCTION
    site_name: str = "RSI"

    smtp: SMTPConfig = SMTPConfig()
    recaptcha: RecaptchaConfig = RecaptchaConfig()

    contact_rate_limit: int = 5
    contact_rate_window: int = 60

    sentry_dsn: str | None = None
    sentry_environment: str = "test"

    @model_validator(mode="after")
    def _check_required(self) -> "Settings":
        missing = [
            f"{group}__{name}".upper()
            for group, names in REQUIRED_SETTINGS.items()
            for name in names
            if not getattr(getattr(self, group), name).strip()
        ]
        if missing:
            raise ValueError(f"Missing required settings: {', '.join(missing)}")
        return self

    @property
    def development(self) -> bool:
        return self.environment == ExecutionMode.DEVELOPMENT


settings = Settings()
