"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Remote proxy service exposing /admin/*
    admin_base_url: str = "http://127.0.0.1:5201"
    credential_header: str = "X-API-Key"
    request_timeout: float = 30.0
    connect_timeout: float = 10.0

    # Save-status feedback
    saved_status_delay: float = 3.0  # Saved -> Idle
    error_status_delay: float = 5.0  # Error -> Idle
    serialize_commits: bool = True  # False = overlapping commits, last response wins

    # Session
    credential_file: str = ""  # Empty = in-memory only

    # Logging
    log_level: str = "INFO"
    audit_log_file: str = ""  # Empty = stdout only

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def admin_url(self) -> str:
        return self.admin_base_url.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
