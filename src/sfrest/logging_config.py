from __future__ import annotations

import logging
from typing import Optional, Union

_DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"

_NOISY_LOGGERS = ("urllib3.connection", "urllib3.connectionpool")


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        return logging.WARNING
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        return resolved
    return level


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure root logging once; later calls only adjust the level."""
    lvl = _resolve_level(level)
    root = logging.getLogger()

    if root.handlers:
        root.setLevel(lvl)
    else:
        logging.basicConfig(
            level=lvl,
            format=_DEFAULT_FMT,
            datefmt=_DEFAULT_DATEFMT,
        )

    # urllib3 logs every connection at DEBUG; keep it to errors.
    for name in _NOISY_LOGGERS:
        noisy = logging.getLogger(name)
        if noisy.level == logging.NOTSET or noisy.level < logging.ERROR:
            noisy.setLevel(logging.ERROR)
