"""
Base configuration for structmap.

Shared settings and helper functions for all settings classes.
"""

from __future__ import annotations

import os
import pathlib
from typing import TypeVar

import lazy_object_proxy
import pydantic_settings

T = TypeVar('T', bound='BaseStructMapSettings')


class BaseStructMapSettings(pydantic_settings.BaseSettings):
    """
    Environment loading shared by every structmap settings class.

    Subclasses declare fields only and inherit the STRUCTMAP_ prefix and the
    .env lookup from here.
    """

    model_config = pydantic_settings.SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        env_prefix='STRUCTMAP_',
        case_sensitive=True,  # Fail fast on misconfiguration
        extra='ignore',  # Host applications share the .env file
    )


def get_settings(settings_class: type[T], env_file: str | None = None) -> T:
    """
    Factory for creating settings with dynamic .env file loading.

    STRUCTMAP_ENV_FILE environment variable specifies custom .env file path.
    When unset, loads from environment variables (and ./.env if present) only.

    Args:
        settings_class: Settings class to instantiate
        env_file: Optional path to .env file (overrides STRUCTMAP_ENV_FILE)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If specified .env file doesn't exist
    """
    env_file_path = env_file or os.getenv('STRUCTMAP_ENV_FILE')

    if not env_file_path:
        return settings_class()

    resolved_path = pathlib.Path(env_file_path).resolve()
    if not resolved_path.exists():
        raise FileNotFoundError(f'Environment file not found: {resolved_path}')

    return settings_class(_env_file=resolved_path)


def lazy_settings(settings_class: type[T]) -> T:
    """
    Lazy settings - defers instantiation until first access.

    Args:
        settings_class: Settings class to instantiate

    Returns:
        Proxy that instantiates settings on first access
    """
    return lazy_object_proxy.Proxy(lambda: get_settings(settings_class))
