"""Load config from STRATGEN_CONFIG_PATH or return default.

``load_config()`` is memoised with ``functools.lru_cache`` so the file is read
and parsed at most once per process.  Call ``load_config.cache_clear()`` to
force a re-read (useful in tests and when the environment changes at runtime).
"""

from __future__ import annotations

import functools
import json
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .schema import DEFAULT_CONFIG, StratGenConfig


class _Env(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STRATGEN_", extra="ignore")
    config_path: Optional[str] = None
    api_key: Optional[str] = None


_env: Optional[_Env] = None


def _get_env() -> _Env:
    global _env
    if _env is None:
        _env = _Env()
    return _env


def _apply_api_key(config: StratGenConfig, api_key: str) -> StratGenConfig:
    """Fill every profile that has no api_key with *api_key*."""
    models = {
        name: cfg if cfg.api_key else cfg.model_copy(update={"api_key": api_key})
        for name, cfg in config.models.items()
    }
    return config.model_copy(update={"models": models})


@functools.lru_cache(maxsize=1)
def load_config() -> StratGenConfig:
    """Load config from STRATGEN_CONFIG_PATH if set and valid; else DEFAULT_CONFIG.

    ``STRATGEN_API_KEY``, when set, is used for every model profile whose
    ``api_key`` is empty.  Result is cached for the lifetime of the process.
    """
    env = _get_env()
    config = DEFAULT_CONFIG
    path = env.config_path
    if path and path.strip():
        p = Path(path).expanduser().resolve()
        if p.is_file():
            data = json.loads(p.read_text(encoding="utf-8"))
            config = StratGenConfig.model_validate(data)
    if env.api_key and env.api_key.strip():
        config = _apply_api_key(config, env.api_key.strip())
    return config
