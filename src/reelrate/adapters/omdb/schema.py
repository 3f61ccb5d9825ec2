"""Pydantic models describing the OMDb API payloads."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ROTTEN_TOMATOES = "Rotten Tomatoes"


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class OmdbBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class OmdbEnvelope(OmdbBaseModel):
    """Fields every OMDb response carries; ``Response`` is the success flag."""

    response: Literal["True", "False"] = Field(alias="Response")
    error: str | None = Field(default=None, alias="Error")

    @field_validator("response", mode="before")
    @classmethod
    def _normalize_flag(cls, value: object) -> object:
        if isinstance(value, bool):
            return "True" if value else "False"
        if isinstance(value, str):
            return value.strip().capitalize()
        return value

    @property
    def found(self) -> bool:
        return self.response == "True"


class OmdbSourceRating(OmdbBaseModel):
    source: str = Field(alias="Source")
    value: str = Field(alias="Value")


class OmdbTitle(OmdbEnvelope):
    title: str = Field(alias="Title")
    imdb_id: str = Field(alias="imdbID")
    year: str | None = Field(default=None, alias="Year")
    released: str | None = Field(default=None, alias="Released")
    type: str | None = Field(default=None, alias="Type")
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    imdb_votes: str | None = Field(default=None, alias="imdbVotes")
    ratings: list[OmdbSourceRating] = Field(default_factory=list, alias="Ratings")

    _normalize_optional = field_validator(
        "year", "released", "type", "imdb_rating", "imdb_votes", mode="before"
    )(_blank_to_none)

    def source_rating(self, source: str) -> str | None:
        for rating in self.ratings:
            if rating.source == source:
                return rating.value
        return None


class OmdbSearchHit(OmdbBaseModel):
    title: str = Field(alias="Title")
    imdb_id: str = Field(alias="imdbID")
    year: str | None = Field(default=None, alias="Year")
    type: str | None = Field(default=None, alias="Type")


class OmdbSearchResponse(OmdbEnvelope):
    search: list[OmdbSearchHit] = Field(default_factory=list, alias="Search")
    total_results: int = Field(default=0, alias="totalResults")

    @field_validator("total_results", mode="before")
    @classmethod
    def _parse_int(cls, value: int | str | None) -> int:
        try:
            return int(value or 0)
        except ValueError:
            return 0


class OmdbEpisode(OmdbBaseModel):
    title: str = Field(alias="Title")
    episode: str = Field(alias="Episode")
    released: str | None = Field(default=None, alias="Released")
    imdb_rating: str | None = Field(default=None, alias="imdbRating")
    imdb_id: str | None = Field(default=None, alias="imdbID")

    _normalize_optional = field_validator("released", "imdb_rating", "imdb_id", mode="before")(
        _blank_to_none
    )


class OmdbSeasonResponse(OmdbEnvelope):
    title: str | None = Field(default=None, alias="Title")
    season: str | None = Field(default=None, alias="Season")
    total_seasons: str | None = Field(default=None, alias="totalSeasons")
    episodes: list[OmdbEpisode] = Field(default_factory=list, alias="Episodes")
