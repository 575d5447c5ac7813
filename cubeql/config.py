"""
Join resolver configuration.

Options are read from the ``[joins]`` section of an INI file::

    [joins]
    disable_auto_joins = false
    log_level = info
"""

from __future__ import annotations

import os
from configparser import ConfigParser
from configparser import Error as ConfigParserError

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

__all__ = ["ResolverConfig", "load_config", "JOINS_SECTION"]

JOINS_SECTION = "joins"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class ResolverConfig(BaseModel):
    """Options of the join resolver."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    disable_auto_joins: bool = Field(
        False, description="Do not resolve joins of queries without a join clause"
    )
    log_level: str | None = Field(None, description="Level of the cubeql logger")

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        if v is None:
            return v
        level = str(v).strip().lower()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Unknown log level '{v}', expected one of {', '.join(LOG_LEVELS)}"
            )
        return level

    @classmethod
    def from_parser(cls, parser: ConfigParser) -> ResolverConfig:
        """Create a configuration from the ``[joins]`` section of `parser`.
        Missing section or options fall back to the defaults."""
        if not parser.has_section(JOINS_SECTION):
            return cls()

        options = dict(parser.items(JOINS_SECTION))
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid [{JOINS_SECTION}] configuration: {e}") from e


def load_config(path: str) -> ResolverConfig:
    """Read the resolver configuration from the INI file at `path`."""
    if not os.path.exists(path):
        raise ConfigurationError(f"Configuration file '{path}' not found")

    parser = ConfigParser()
    try:
        parser.read(path, encoding="utf-8")
    except ConfigParserError as e:
        raise ConfigurationError(f"Unable to read configuration '{path}': {e}") from e

    return ResolverConfig.from_parser(parser)
