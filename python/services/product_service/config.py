"""Process configuration for the product service.

Values come from the environment; an optional ``.env`` file found from the
working directory supplies anything the environment leaves unset.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

DEFAULT_API_KEY = "secret-key1234"
DEFAULT_PORT = 3000


class ConfigurationError(Exception):
    """Raised when an environment value cannot be used."""


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=0, le=65535)
    api_key: str = DEFAULT_API_KEY
    log_level: str = "INFO"


# env var -> Settings field
_ENV_FIELDS = {
    "HOST": "host",
    "PORT": "port",
    "API_KEY": "api_key",
    "LOG_LEVEL": "log_level",
}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build ``Settings`` from ``environ``, or from ``.env`` overlaid by ``os.environ``.

    Unset or empty variables keep their defaults.
    """
    if environ is None:
        environ = {**dotenv_values(find_dotenv(usecwd=True)), **os.environ}

    values = {field: environ[var] for var, field in _ENV_FIELDS.items() if environ.get(var)}
    try:
        settings = Settings(**values)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
    return settings.model_copy(update={"log_level": settings.log_level.upper()})


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
