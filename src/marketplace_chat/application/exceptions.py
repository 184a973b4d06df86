from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConflictError(AppError):
    pass


class ValidationError(AppError):
    pass


class NoOpError(AppError):
    """A bulk update matched nothing."""


class PersistenceError(AppError):
    """The store is unreachable or rejected a write for infrastructural reasons."""

    def __init__(self, detail: str = "", *, transient: bool = False) -> None:
        super().__init__(detail)
        self.transient = transient


class NotificationDeliveryError(AppError):
    """A real-time emit or broker publish failed. Never fatal to the caller."""
