"""Lenient conversion of provider and wire values.

The provider reports unknown values as ``"N/A"`` and formats numbers for humans
("1,234,567" votes, "27 Jul 2018" release dates). Nothing here raises: unusable
input collapses to ``0`` / ``None`` so that a single bad field never costs a
whole record.
"""

from __future__ import annotations

import math
import re
from datetime import UTC, datetime

UNKNOWN = "N/A"

_YEAR_PATTERN = re.compile(r"\d{4}")
_RELEASED_FORMATS = ("%d %b %Y", "%Y-%m-%d", "%b %Y", "%Y")


def _is_unknown(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() in {"", UNKNOWN})


def parse_rating(value: object) -> float | None:
    """Return the numeric rating, or ``None`` when the provider has none."""

    if _is_unknown(value):
        return None
    if isinstance(value, int | float) and not isinstance(value, bool):
        rating = float(value)
    else:
        try:
            rating = float(str(value).strip())
        except ValueError:
            return None
    return rating if math.isfinite(rating) else None


def coerce_rating(value: object) -> float:
    return parse_rating(value) or 0.0


def coerce_votes(value: object) -> int:
    if _is_unknown(value):
        return 0
    digits = str(value).replace(",", "").strip()
    try:
        return max(int(digits), 0)
    except ValueError:
        return 0


def coerce_year(value: object) -> int:
    """Leading four-digit year; series report ranges like "2008–2013"."""

    if _is_unknown(value):
        return 0
    match = _YEAR_PATTERN.search(str(value))
    return int(match.group()) if match else 0


def parse_released(value: object) -> datetime | None:
    """Parse the provider's release date ("27 Jul 2018") into an aware datetime."""

    if _is_unknown(value):
        return None
    text = str(value).strip()
    for fmt in _RELEASED_FORMATS:
        try:
            return datetime.strptime(text, fmt).replace(tzinfo=UTC)
        except ValueError:
            continue
    return parse_timestamp(text)


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if not isinstance(value, str) or not value.strip():
        return None
    normalized = value.strip()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_optional_float(value: object) -> float | None:
    """Wire-side float parsing; booleans are not ratings."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float | str):
        return parse_rating(value)
    return None
