"""Global configuration for Rosetta.

This module provides centralized configuration management with support for
environment variables and sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class RosettaConfig(BaseSettings):
    """Rosetta configuration settings.

    Values can be overridden via environment variables with ROSETTA_ prefix.
    Example: ROSETTA_MAX_TYPE_DEPTH=128 overrides max_type_depth.
    """

    # Host type system
    root_object_type: str = Field(
        default="java.lang.Object",
        pattern=r"^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*$",
        description="Root object type used as the implicit bound of '?' and for erasure",
    )

    # Parser limits
    max_type_depth: int = Field(
        default=64,
        ge=1,
        le=128,
        description="Maximum nesting depth of type arguments and bounds in a signature",
    )

    # Interning
    intern_types: bool = Field(
        default=True,
        description="Store parsed and resolved references in the interning cache",
    )

    model_config = {
        "env_prefix": "ROSETTA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_config() -> RosettaConfig:
    """Get cached configuration instance.

    Returns:
        RosettaConfig singleton instance.
    """
    return RosettaConfig()


def reload_config() -> RosettaConfig:
    """Reload configuration (clears cache).

    Returns:
        Fresh RosettaConfig instance.
    """
    get_config.cache_clear()
    return get_config()
