"""Run options and environment toggles."""

from ktmpl.config.models import (
    ENV_DEBUG,
    ENV_USE_ENV,
    STDIN_MARKER,
    RenderOptions,
    is_debug_enabled,
    is_env_source_enabled,
)

__all__ = [
    "ENV_DEBUG",
    "ENV_USE_ENV",
    "STDIN_MARKER",
    "RenderOptions",
    "is_debug_enabled",
    "is_env_source_enabled",
]
