"""
Settings configuration using pydantic-settings.

Loads configuration from:
1. Constructor arguments (highest precedence)
2. Environment variables with HETEROMAP_ prefix

Example:
  HETEROMAP_VERIFY_VALUES=false
  HETEROMAP_COPY_STRATEGY=copy
"""

import functools as _functools
import typing as _typing

import pydantic_settings as _pydantic_settings

import heteromap.constants as constants

CopyStrategy = _typing.Literal["deepcopy", "copy"]


class Settings(_pydantic_settings.BaseSettings):
    """
    heteromap settings.

    All settings can be overridden via environment variables with the
    HETEROMAP_ prefix.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        extra="ignore",
        frozen=True,
    )

    verify_values: bool = True
    """Check values against their declared type when they are written."""

    copy_strategy: CopyStrategy = constants.DEFAULT_COPY_STRATEGY  # type: ignore[assignment]
    """How the default storage policy duplicates values on copy substitution."""


@_functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return the process-wide settings, loaded once from the environment.

    Call ``get_settings.cache_clear()`` to pick up environment changes.
    """
    return Settings()
