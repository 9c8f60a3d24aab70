"""
Environment lookup for quickroom settings.

Later sources override earlier ones:
1) `env.example` (committed, safe placeholders)
2) `env.local` (optional, MUST NOT be committed)
3) Process environment variables
"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILES = ("env.example", "env.local")


class EnvironConfig:
    """Flat key/value view over the env files and the process environment."""

    def __init__(self, root: Path = PROJECT_ROOT, environ: dict[str, str] | None = None):
        self._values: dict[str, str | None] = {}
        for name in ENV_FILES:
            path = root / name
            if path.exists():
                self._values.update(dotenv_values(path))
                logger.debug("Loaded settings from {}", path)
        self._values.update(os.environ if environ is None else environ)

    def get(self, key, default=None):
        """Value for `key`, or `default` when no source defines it."""
        return self._values.get(key, default)


config = EnvironConfig()
