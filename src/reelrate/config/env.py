"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .errors import InvalidConfigurationError, MissingConfigurationError

if TYPE_CHECKING:
    from collections.abc import Collection, Sequence


def require_env_vars(names: Sequence[str]) -> dict[str, str]:
    """Return the given environment variables or raise if any are missing/blank."""

    missing: list[str] = []
    values: dict[str, str] = {}
    for name in names:
        value = os.getenv(name)
        if value is None or not value.strip():
            missing.append(name)
            continue
        values[name] = value.strip()

    if missing:
        missing_list = ", ".join(sorted(missing))
        raise MissingConfigurationError(f"Missing configuration for: {missing_list}")

    return values


def _optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_str(name: str, default: str) -> str:
    return _optional(name) or default


def env_float(name: str, default: float | None) -> float | None:
    raw = _optional(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise InvalidConfigurationError(name, raw, "a number") from None


def env_int(name: str, default: int) -> int:
    raw = _optional(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfigurationError(name, raw, "an integer") from None


def env_choice(name: str, default: str, choices: Collection[str]) -> str:
    raw = _optional(name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered not in choices:
        raise InvalidConfigurationError(name, raw, "one of " + ", ".join(sorted(choices)))
    return lowered
