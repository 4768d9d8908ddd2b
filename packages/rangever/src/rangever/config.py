# SPDX-License-Identifier: MIT
"""Engine configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Mapping, Optional

DEFAULT_MAX_INPUT_LENGTH = 1024
DEFAULT_MAX_DEPTH = 64

ENV_MAX_INPUT_LENGTH = "RANGEVER_MAX_INPUT_LENGTH"
ENV_MAX_DEPTH = "RANGEVER_MAX_DEPTH"


class ConfigError(Exception):
    """Raised when configuration loading fails."""

    pass


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default

    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class EngineConfig:
    """Configuration shared by the version and range parsers.

    Attributes:
        max_input_length: Longest range expression accepted, in characters
        max_depth: Deepest nesting of groups and negations accepted
    """

    max_input_length: int = DEFAULT_MAX_INPUT_LENGTH
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Load configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Raises:
            ConfigError: If a variable is set to an invalid value
        """
        env = os.environ if environ is None else environ
        return cls(
            max_input_length=_positive_int(env, ENV_MAX_INPUT_LENGTH, DEFAULT_MAX_INPUT_LENGTH),
            max_depth=_positive_int(env, ENV_MAX_DEPTH, DEFAULT_MAX_DEPTH),
        )


@lru_cache(maxsize=1)
def default_config() -> EngineConfig:
    """Return the process-wide configuration, read once from the environment."""
    return EngineConfig.from_env()
