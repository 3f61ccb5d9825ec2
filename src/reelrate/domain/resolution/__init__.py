"""Title resolution: normalisation, fallback strategies and the engine."""

from __future__ import annotations

from .builder import build_episode, build_record
from .engine import ResolutionEngine
from .strategies import (
    AMPERSAND,
    DEFAULT_STRATEGIES,
    EXACT_TITLE,
    SEARCH,
    SPECIAL_CHAR_SPLIT,
    LookupMode,
    StrategyContext,
    TitleStrategy,
)
from .titles import normalize_title, replace_ampersand, split_on_special_char
from .validation import is_valid_match, is_verified, ratings_disagree

__all__ = [
    "AMPERSAND",
    "DEFAULT_STRATEGIES",
    "EXACT_TITLE",
    "SEARCH",
    "SPECIAL_CHAR_SPLIT",
    "LookupMode",
    "ResolutionEngine",
    "StrategyContext",
    "TitleStrategy",
    "build_episode",
    "build_record",
    "is_valid_match",
    "is_verified",
    "normalize_title",
    "ratings_disagree",
    "replace_ampersand",
    "split_on_special_char",
]
