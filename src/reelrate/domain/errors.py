"""Failure taxonomy for rating resolution.

Every item-level failure is an instance of :class:`ResolutionError` and is turned
into the ``error`` string of that item's result; none of them aborts sibling
items. Only :class:`InvalidBatchError` is raised at the batch boundary.
"""

from __future__ import annotations


class ResolutionError(RuntimeError):
    """Base class; ``reason`` is what the collaborator sees."""

    reason: str = "resolution failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class MissingKey(ResolutionError):  # noqa: N818
    reason = "missing key"


class MissingTitle(ResolutionError):  # noqa: N818
    reason = "title missing"


class ProviderMismatch(ResolutionError):  # noqa: N818
    """A provider result exists but fails type or rating validation."""

    reason = "provider mismatch"


class NotFound(ResolutionError):  # noqa: N818
    reason = "not found"


class ProviderTransportError(ResolutionError):
    """Network, HTTP status or payload decoding failure talking to the provider."""

    reason = "provider unavailable"


class StoreError(ResolutionError):
    reason = "store unavailable"


class InvalidBatchError(ValueError):
    """Raised when a batch request is structurally malformed (not a list)."""
