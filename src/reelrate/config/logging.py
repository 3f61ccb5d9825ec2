"""Logging setup for the CLI and service entry points."""

from __future__ import annotations

import logging

_NOISY_LOGGERS = ("httpx", "httpcore", "hishel")


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with sensible defaults.

    Parameters mirror ``logging.basicConfig`` with a simplified contract: INFO level
    and a terse format. Output goes to stderr so that ``reelrate resolve`` can keep
    stdout for the JSON response. HTTP client loggers are held at WARNING unless
    ``level`` asks for DEBUG.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
