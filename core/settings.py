from __future__ import annotations

import os
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from core.exceptions import ConfigurationError

# Load .env file from project root
_env_path = Path(__file__).parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


DEFAULT_PREFIX = "users-photo"
DEFAULT_PUBLIC_BASE_URL = "https://storage.googleapis.com"


class OverwritePolicy(str, Enum):
    """What an upload does when its key is already taken."""

    REJECT = "reject"
    REPLACE = "replace"


class StorageSettings(BaseModel):
    backend: Literal["s3", "local"] = "s3"
    bucket: str | None = None
    project_id: str | None = None
    profile: str | None = None
    credentials_file: Path | None = None
    region: str | None = None
    endpoint_url: str | None = DEFAULT_PUBLIC_BASE_URL
    public_base_url: str = DEFAULT_PUBLIC_BASE_URL
    prefix: str = DEFAULT_PREFIX
    local_root: Path = Path("data/storage")
    overwrite_policy: OverwritePolicy = OverwritePolicy.REJECT

    @field_validator("prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        return value.strip().strip("/")

    @field_validator("public_base_url")
    @classmethod
    def _normalize_base_url(cls, value: str) -> str:
        return value.strip().rstrip("/")


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(3000, ge=1, le=65535)


class LoggingSettings(BaseModel):
    level: str = "INFO"
    json_format: bool = False
    log_file: Path | None = None


class Settings(BaseModel):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def load(cls, path: Path | None = None, environ: dict[str, str] | None = None) -> "Settings":
        """Load settings from an optional YAML file, then apply environment overrides.

        Args:
            path: Optional path to a configuration file. If not provided, uses
                the PHOTO_STORE_CONFIG environment variable or config/default.yaml.
                A missing default file is not an error.
            environ: Mapping to read overrides from. Defaults to ``os.environ``.

        Returns:
            Settings instance with loaded configuration.

        Raises:
            ConfigurationError: If an explicit file is missing or the values are invalid.
        """
        env = os.environ if environ is None else environ
        explicit = path or (Path(env["PHOTO_STORE_CONFIG"]) if env.get("PHOTO_STORE_CONFIG") else None)
        config_path = explicit or Path("config/default.yaml")

        payload: dict[str, Any] = {}
        if config_path.exists():
            with config_path.open("r", encoding="utf-8") as fp:
                payload = yaml.safe_load(fp) or {}
        elif explicit is not None:
            raise ConfigurationError(
                f"Configuration file not found: {config_path}",
                {"path": str(config_path)},
            )

        _apply_env_overrides(payload, env)
        try:
            return cls(**payload)
        except Exception as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc


# section, field, environment variables in priority order
_ENV_OVERRIDES: list[tuple[str, str, tuple[str, ...]]] = [
    ("storage", "backend", ("STORAGE_BACKEND",)),
    ("storage", "bucket", ("STORAGE_BUCKET_NAME", "BUCKET_NAME")),
    ("storage", "project_id", ("STORAGE_PROJECT_ID", "PROJECT_ID")),
    ("storage", "profile", ("STORAGE_PROFILE",)),
    ("storage", "credentials_file", ("STORAGE_CREDENTIALS_FILE",)),
    ("storage", "region", ("STORAGE_REGION",)),
    ("storage", "endpoint_url", ("STORAGE_ENDPOINT_URL",)),
    ("storage", "public_base_url", ("STORAGE_PUBLIC_BASE_URL",)),
    ("storage", "local_root", ("STORAGE_LOCAL_ROOT",)),
    ("storage", "overwrite_policy", ("STORAGE_OVERWRITE_POLICY",)),
    ("server", "host", ("HOST",)),
    ("server", "port", ("PORT",)),
    ("logging", "level", ("LOG_LEVEL",)),
    ("logging", "json_format", ("JSON_LOGGING",)),
    ("logging", "log_file", ("LOG_FILE",)),
]


def _apply_env_overrides(payload: dict[str, Any], env: Any) -> None:
    for section, field, names in _ENV_OVERRIDES:
        for name in names:
            value = env.get(name)
            if value:
                section_payload = payload.get(section) or {}
                section_payload[field] = value
                payload[section] = section_payload
                break


@lru_cache(maxsize=1)
def get_settings(path: str | None = None) -> Settings:
    return Settings.load(Path(path) if path else None)


__all__ = [
    "Settings",
    "StorageSettings",
    "ServerSettings",
    "LoggingSettings",
    "OverwritePolicy",
    "DEFAULT_PREFIX",
    "DEFAULT_PUBLIC_BASE_URL",
    "get_settings",
]
