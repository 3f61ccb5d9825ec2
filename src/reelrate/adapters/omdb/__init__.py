"""Public interface for the OMDb adapter."""

from __future__ import annotations

from .client import OmdbClient, is_found_payload
from .schema import OmdbSearchResponse, OmdbSeasonResponse, OmdbTitle
from .translator import translate_episode, translate_title

__all__ = [
    "OmdbClient",
    "OmdbSearchResponse",
    "OmdbSeasonResponse",
    "OmdbTitle",
    "is_found_payload",
    "translate_episode",
    "translate_title",
]
