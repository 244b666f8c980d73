"""Environment variable loading utilities.

Every entry point (HTTP handler, local server, CLI) calls ``load_env``
before reading configuration so that a ``.env`` file behaves the same way
everywhere.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Optional
import logging

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _discover_env_files(start: Path) -> list[Path]:
    """Return ``.env`` files from the filesystem root down to ``start``."""
    found: list[Path] = []
    for directory in [*reversed(start.parents), start]:
        candidate = directory / ".env"
        if candidate.exists() and candidate not in found:
            found.append(candidate)
    return found


def load_env(env_file: Optional[str] = None, override: bool = False) -> None:
    """Load environment variables from .env files.

    Args:
        env_file: Path to .env file. If None, searches for .env in the current
                 directory and its parents; closer files are loaded last.
        override: Whether to override existing environment variables.
    """
    if env_file:
        env_paths = [Path(env_file)] if Path(env_file).exists() else []
    else:
        env_paths = _discover_env_files(Path.cwd())

    if not env_paths:
        logger.debug("No .env file found, using system environment")
        return

    for path in env_paths:
        load_dotenv(path, override=override)
        logger.debug("Loaded environment from %s", path)


def get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with optional default.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        Environment variable value or default
    """
    return os.getenv(key, default)
