"""Runtime settings and logging setup.

Settings come from the environment, optionally seeded from a ``.env`` file:

    BOX_DEPLOYER_LOG_LEVEL   logging level name (default WARNING)
    BOX_DEPLOYER_PROVIDER    provider used when none is given (default virtualbox)
    BOX_DEPLOYER_CHUNK_SIZE  checksum read buffer in bytes (default 1 MiB)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .checksum import DEFAULT_CHUNK_SIZE
from .errors import ParameterError
from .models import DEFAULT_PROVIDER

ENV_PREFIX = "BOX_DEPLOYER_"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


class DeployerSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    log_level: str = "WARNING"
    default_provider: str = Field(default=DEFAULT_PROVIDER, min_length=1)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, ge=1)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {v!r}; expected one of {LOG_LEVELS}")
        return level


def load_settings(env_file: str | Path | None = None) -> DeployerSettings:
    """Build settings from ``BOX_DEPLOYER_*`` environment variables.

    ``env_file`` (or ``./.env`` when omitted) is loaded first without
    overriding variables already present in the environment.
    """
    if env_file is not None:
        dotenv.load_dotenv(dotenv_path=env_file)
    else:
        dotenv.load_dotenv(".env")
    values = {
        field: os.environ[ENV_PREFIX + key]
        for field, key in (
            ("log_level", "LOG_LEVEL"),
            ("default_provider", "PROVIDER"),
            ("chunk_size", "CHUNK_SIZE"),
        )
        if os.environ.get(ENV_PREFIX + key)
    }
    try:
        return DeployerSettings(**values)
    except ValidationError as exc:
        raise ParameterError(f"Invalid {ENV_PREFIX}* setting:\n{exc}") from exc


def configure_logging(level: str) -> None:
    """Install the default handler once and apply ``level`` to the root logger."""
    if not getattr(configure_logging, "_done", False):
        logging.basicConfig(format=LOG_FORMAT)
        configure_logging._done = True  # type: ignore[attr-defined]
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


__all__ = [
    "DeployerSettings",
    "LOG_LEVELS",
    "configure_logging",
    "load_settings",
]
