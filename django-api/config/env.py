"""Deployment settings read from the environment (Pydantic Settings)."""

from pathlib import Path
from typing import Annotated

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# .env next to manage.py
_env_path = Path(__file__).resolve().parent.parent / ".env"


class DeploymentSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=_env_path, extra="ignore")

    secret_key: str = Field(
        default="insecure-dev-key-change-me", validation_alias="DJANGO_SECRET_KEY"
    )
    debug: bool = Field(default=False, validation_alias="DJANGO_DEBUG")
    allowed_hosts: Annotated[list[str], NoDecode] = Field(
        default=["localhost", "127.0.0.1"], validation_alias="DJANGO_ALLOWED_HOSTS"
    )

    # Empty POSTGRES_DB selects the local SQLite file.
    postgres_db: str = ""
    postgres_user: str = "postgres"
    postgres_password: str = ""
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_conn_max_age: int = 60

    booking_log_level: str = "INFO"

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def split_hosts(cls, v):
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("booking_log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.strip().upper()

    @property
    def uses_postgres(self) -> bool:
        return bool(self.postgres_db)
