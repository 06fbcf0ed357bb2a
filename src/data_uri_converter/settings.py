from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Mapping

from .config import CONFIG_FILE

ENV_PREFIX = "DUC_"

_FLAG_VALUES: dict[str, bool] = {
    **dict.fromkeys(("1", "true", "yes", "on"), True),
    **dict.fromkeys(("0", "false", "no", "off"), False),
}


def env_flag(value: str | None) -> bool | None:
    """Interpret an on/off environment value; anything unrecognised is unset."""
    if value is None:
        return None
    return _FLAG_VALUES.get(value.strip().lower())


@dataclass(frozen=True, slots=True)
class Settings:
    """Overrides taken from ``DUC_*`` environment variables."""

    config_path: Path = CONFIG_FILE
    enable_local_api: bool | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> Settings:
        config_path = environ.get(f"{ENV_PREFIX}CONFIG_PATH")
        return cls(
            config_path=Path(config_path) if config_path else CONFIG_FILE,
            enable_local_api=env_flag(environ.get(f"{ENV_PREFIX}ENABLE_LOCAL_API")),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env(os.environ)


__all__ = ["ENV_PREFIX", "Settings", "env_flag", "get_settings"]
