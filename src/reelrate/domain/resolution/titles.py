"""Title cleanup and reformulation rules for scraped titles."""

from __future__ import annotations

import re

_DIRECTORS_CUT = re.compile(r"\s*director[’']?s cut\s*$", re.IGNORECASE)
_TRAILING_GROUP = re.compile(r"\s*(?:\([^()]*\)|\[[^\[\]]*\])\s*$")
_AMPERSAND = re.compile(r"\s*(?:&amp;|&)\s*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")
# Checked in this order: "Mission: Impossible - Fallout" splits on the dash.
# A dash only separates when spaced, so "Spider-Man" and "X-Men" stay whole.
SPLIT_SEPARATORS = (
    re.compile(r"\s+[-\u2013\u2014]\s+"),
    re.compile(r":"),
    re.compile(r"&"),
)

MIN_SPLIT_LENGTH = 2


def _strip_if_nonempty(title: str, pattern: re.Pattern[str]) -> str:
    cleaned = pattern.sub("", title).strip()
    return cleaned or title


def normalize_title(title: str) -> str:
    """Apply the one-shot cleanup: "Director's Cut" suffix, then a trailing group.

    Each rule applies only when it matches and leaves something behind, so
    "(500) Days of Summer" keeps its leading group and "[REC]" stays "[REC]".
    """

    cleaned = _WHITESPACE.sub(" ", title).strip()
    cleaned = _strip_if_nonempty(cleaned, _DIRECTORS_CUT)
    return _strip_if_nonempty(cleaned, _TRAILING_GROUP)


def has_ampersand(title: str) -> bool:
    return "&" in title


def replace_ampersand(title: str) -> str:
    """Spell out ampersands, HTML-escaped ones included: "Fast & Furious" -> "Fast and Furious"."""

    return _WHITESPACE.sub(" ", _AMPERSAND.sub(" and ", title)).strip()


def split_on_special_char(title: str, *, reverse: bool) -> str | None:
    """Cut the title at the first occurrence of the highest-priority separator.

    ``reverse`` keeps the text after the separator ("Live Die Repeat: Edge of
    Tomorrow" -> "Edge of Tomorrow"), otherwise the text before it is kept.
    Returns ``None`` when there is no separator or the kept part is too short to
    be a meaningful query.
    """

    found = next(
        (match for match in (sep.search(title) for sep in SPLIT_SEPARATORS) if match),
        None,
    )
    if found is None:
        return None
    part = (title[found.end() :] if reverse else title[: found.start()]).strip()
    if len(part) <= MIN_SPLIT_LENGTH:
        return None
    return part
