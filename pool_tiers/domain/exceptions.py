from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ConfigurationError(DomainError):
    """Settings are missing or inconsistent."""


class SourceUnavailableError(DomainError):
    """The pool source could not be reached or returned an unexpected payload."""


class StoreUnavailableError(DomainError):
    """The tier cache backing store is unreachable."""


class ClassificationDegradedError(DomainError):
    """A single pool could not be valued."""

    def __init__(self, message: str, *, pool_id: str | None = None):
        super().__init__(message)
        self.pool_id = pool_id


class InvalidTierArgumentError(DomainError):
    """Requested tier is not one of the known tiers."""


class PoolNotFoundError(DomainError):
    """No live classification for the requested pool."""
