from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a cast, store or reservation cannot be resolved."""


class ConflictError(DomainError):
    """Raised when the store rejects an entry that collides with an existing one."""

    def __init__(self, message: str, *, cast_id: str | None = None, detail: dict | None = None):
        super().__init__(message)
        self.cast_id = cast_id
        self.detail = detail or {}
