"""
Settings for whoever embeds the engine, and the logging setup that goes with them.

Defaults can be overridden through environment variables:
* FOURCHESS_STARTING_FEN: start new games from this state instead of the standard position
* FOURCHESS_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
"""

import logging
import os
import sys
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidFENError

ENV_PREFIX = "FOURCHESS_"
LOGGER_NAME = "src"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EngineSettings(BaseModel):
    starting_fen: Optional[str] = None
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level {value!r}. Pick one from {','.join(LOG_LEVELS)}")
        return level

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return None

        # imported here: the domain layer imports from src.core, not the other way around
        from src.fourchess.fen import is_valid_fen

        if not is_valid_fen(value.strip()):
            raise InvalidFENError(f"Cannot interpret starting state: {value!r}")
        return value.strip()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> EngineSettings:
    """Defaults, overridden by any FOURCHESS_* environment variables that are set"""
    environ = os.environ if environ is None else environ
    overrides = {
        name: environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in EngineSettings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    return EngineSettings(**overrides)


def configure_logging(settings: EngineSettings) -> logging.Logger:
    """Send the log records of the whole package to stdout"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)

    # clear existing handlers, so calling this twice does not print every line twice
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(settings.log_level)
    handler.setFormatter(logging.Formatter(settings.log_format))
    logger.addHandler(handler)
    return logger
