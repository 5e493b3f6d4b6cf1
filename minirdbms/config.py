"""
Runtime settings, read from MINIRDBMS_* environment variables.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "MINIRDBMS_"

_TRUE_WORDS = {"1", "true", "yes", "on"}


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_WORDS


def _env_int(name: str, value: Optional[str], default: Optional[int]) -> Optional[int]:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}")


@dataclass
class Settings:
    """Engine, console and HTTP server settings."""
    strict_updates: bool = False        # reject, instead of skip, invalid UPDATE fields
    history_limit: Optional[int] = None  # None keeps the whole console history
    load_sample: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            strict_updates=_env_bool(env.get(ENV_PREFIX + "STRICT_UPDATES"), defaults.strict_updates),
            history_limit=_env_int("HISTORY_LIMIT", env.get(ENV_PREFIX + "HISTORY_LIMIT"),
                                   defaults.history_limit),
            load_sample=_env_bool(env.get(ENV_PREFIX + "LOAD_SAMPLE"), defaults.load_sample),
            host=env.get(ENV_PREFIX + "HOST", defaults.host),
            port=_env_int("PORT", env.get(ENV_PREFIX + "PORT"), defaults.port),
        )
