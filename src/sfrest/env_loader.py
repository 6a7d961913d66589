from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

_logger = logging.getLogger(__name__)


def load_env_files(
    candidates: Optional[Iterable[Path]] = None,
    *,
    quiet: bool = False,
) -> Optional[Path]:
    """Load the first existing .env file into ``os.environ``.

    Looks for .env / .dotenv in the current working directory unless
    ``candidates`` is given. Variables already set in the environment win.
    Returns the path that was loaded, or None.
    """
    if candidates is None:
        cwd = Path.cwd()
        candidates = (cwd / ".env", cwd / ".dotenv")

    for path in candidates:
        if path.exists():
            load_dotenv(path, override=False)
            if not quiet:
                _logger.debug("Loaded environment variables from %s", path)
            return path

    if not quiet:
        _logger.debug("No .env/.dotenv file found in %s", Path.cwd())
    return None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    """``os.getenv`` that treats empty strings as unset."""
    value = os.getenv(name)
    return value if value else default
