"""Configuration for envpull.

Configuration is loaded from environment variables only. The working
directory's `.env` is a file this tool writes with project variables, so it
is never read back as configuration.

The API token may also come from the `auth.json` file in the global config
directory, which is where a previous login stores it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.vercel.com"


class PullSettings(BaseSettings):
    """Settings for the pull command.

    Environment variables:
    - VERCEL_TOKEN           (optional if `auth.json` holds one)
    - VERCEL_API_URL         (optional)
    - VERCEL_GLOBAL_CONFIG   (optional)
    - LOG_LEVEL              (optional)
    - ENVPULL_HTTP_TIMEOUT   (optional)
    """

    token: str = Field(
        default="",
        validation_alias="VERCEL_TOKEN",
        description="API token used for authentication",
    )
    api_url: str = Field(
        default=DEFAULT_API_URL,
        validation_alias="VERCEL_API_URL",
        description="Base URL of the remote API",
    )
    global_config_dir: Path = Field(
        default_factory=lambda: Path.home() / ".vercel",
        validation_alias="VERCEL_GLOBAL_CONFIG",
        description="Directory holding the global CLI config and credentials",
    )
    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="ENVPULL_HTTP_TIMEOUT",
        description="Timeout applied to every API request",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=None,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value!r}")
        return level

    @model_validator(mode="after")
    def _normalize(self) -> PullSettings:
        self.api_url = self.api_url.rstrip("/")
        return self

    @property
    def auth_file(self) -> Path:
        """Path of the credentials file in the global config directory."""

        return self.global_config_dir / "auth.json"

    def resolve_token(self, override: str | None = None) -> str:
        """Return the token to use, preferring an explicit override.

        Raises:
            ValueError if no token can be found.
        """

        if override and override.strip():
            return override.strip()
        if self.token.strip():
            return self.token.strip()

        stored = _read_auth_token(self.auth_file)
        if stored:
            return stored
        raise ValueError(
            "No API token found. Set VERCEL_TOKEN, pass --token, "
            f"or log in to create {self.auth_file}"
        )


def _read_auth_token(path: Path) -> str | None:
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Auth file is not readable JSON; ignoring", extra={"path": str(path)})
        return None
    if not isinstance(raw, dict):
        return None
    token = raw.get("token")
    if isinstance(token, str) and token.strip():
        return token.strip()
    return None
