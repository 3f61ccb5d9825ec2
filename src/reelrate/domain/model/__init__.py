"""Domain model for rating resolution."""

from __future__ import annotations

from .enums import EntityKind, ResultSource
from .records import EpisodeRating, RatingRecord
from .requests import ResolutionRequest, ResolutionResult, requests_from_wire

__all__ = [
    "EntityKind",
    "EpisodeRating",
    "RatingRecord",
    "ResolutionRequest",
    "ResolutionResult",
    "ResultSource",
    "requests_from_wire",
]
