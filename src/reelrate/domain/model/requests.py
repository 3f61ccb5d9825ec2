"""Ephemeral request/response types exchanged with the batch collaborator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, cast

from reelrate.domain.coercion import parse_optional_float

from .enums import EntityKind, ResultSource

if TYPE_CHECKING:
    from .records import RatingRecord


def _clean_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


@dataclass(slots=True, frozen=True)
class ResolutionRequest:
    key: str
    title: str | None = None
    entity_type: str | None = None
    verification_rating: float | None = None

    @property
    def entity_kind(self) -> EntityKind | None:
        return EntityKind.classify(self.entity_type)

    @classmethod
    def from_wire(cls, item: Mapping[str, object]) -> ResolutionRequest | None:
        """Build a request from a collaborator item; ``None`` when it has no key.

        ``href`` is accepted as an alias of ``key``.
        """

        key = _clean_text(item.get("key")) or _clean_text(item.get("href"))
        if key is None:
            return None
        return cls(
            key=key,
            title=_clean_text(item.get("title")),
            entity_type=_clean_text(item.get("entityType")),
            verification_rating=parse_optional_float(item.get("verificationRating")),
        )


@dataclass(slots=True, frozen=True)
class ResolutionResult:
    key: str
    data: RatingRecord | None = None
    error: str | None = None
    source: ResultSource | None = None

    @classmethod
    def resolved(cls, record: RatingRecord, source: ResultSource) -> ResolutionResult:
        return cls(key=record.key, data=record, source=source)

    @classmethod
    def failed(cls, key: str, error: str) -> ResolutionResult:
        return cls(key=key, error=error)

    @property
    def ok(self) -> bool:
        return self.data is not None

    def to_wire(self) -> dict[str, object]:
        payload: dict[str, object] = {"key": self.key}
        if self.data is not None:
            payload["data"] = self.data.to_wire()
        if self.error is not None:
            payload["error"] = self.error
        if self.source is not None:
            payload["source"] = self.source.value
        return payload


def requests_from_wire(items: object) -> list[ResolutionRequest | None]:
    """Convert raw items; non-mapping items map to ``None`` like key-less ones."""

    converted: list[ResolutionRequest | None] = []
    for item in cast(list[object], items):
        if isinstance(item, ResolutionRequest):
            converted.append(item)
        elif isinstance(item, Mapping):
            converted.append(ResolutionRequest.from_wire(cast(Mapping[str, object], item)))
        else:
            converted.append(None)
    return converted
