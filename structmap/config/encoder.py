"""
Encoder configuration.

Extends base configuration with the defaults used by Struct when the caller
does not pass them explicitly.
"""

from __future__ import annotations

from typing import Literal

import pydantic

from structmap.config.base import BaseStructMapSettings, lazy_settings

_FORBIDDEN_TAG_KEY_CHARS = frozenset(' \t\n,"\'')


class EncoderSettings(BaseStructMapSettings):
    """Struct encoder configuration."""

    # Tag key read when Struct(..., tag_key=None)
    DEFAULT_TAG_KEY: str = 'map'

    # Text produced for booleans by the `string` option: 'true' (lower) or 'True' (python)
    STRING_BOOL_STYLE: Literal['lower', 'python'] = 'lower'

    @pydantic.field_validator('DEFAULT_TAG_KEY')
    @classmethod
    def validate_tag_key(cls, v: str) -> str:
        """Validate the tag key is a usable Tags keyword."""
        if not v or any(char in _FORBIDDEN_TAG_KEY_CHARS for char in v):
            raise ValueError('DEFAULT_TAG_KEY must be non-empty and contain no whitespace, quotes or commas')
        return v


# Module-level singleton (lazy-loaded)
settings = lazy_settings(EncoderSettings)
