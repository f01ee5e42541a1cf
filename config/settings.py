from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    host: str = "0.0.0.0"
    port: int = 8000

    cache_capacity: int = Field(1024 * 32, ge=1)
    cache_ttl: float = Field(60 * 60, gt=0)

    tld_file: str | None = None
    availability_url: str = "https://archive.org/wayback/available"
    request_timeout: float = 30.0

    log_level: str = "INFO"
    log_format: str = "console"

    @field_validator("log_level")
    @classmethod
    def _validate_level(cls, v: str) -> str:
        valid = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {valid}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def _validate_format(cls, v: str) -> str:
        if v.lower() not in {"json", "console"}:
            raise ValueError("Log format must be 'json' or 'console'")
        return v.lower()

    class Config:
        env_file = ".env"
        env_prefix = "WAYBACKINATOR_"
        case_sensitive = False
