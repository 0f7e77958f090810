"""Domain errors raised by the catalog and deal services.

Business-rule rejections derive from :class:`DealError` and carry a
user-facing message, an optional per-field error map and the HTTP status the
API renders them with. Infrastructure failures surface as :class:`StoreError`.
"""

from __future__ import annotations


class DealError(Exception):
    """A business rule rejected the operation; nothing was written."""

    status_code: int = 409

    def __init__(
        self, message: str, *, errors: dict[str, list[str]] | None = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class DealNotFound(DealError):
    status_code = 404


class DealNotJoinable(DealError):
    pass


class DealExpired(DealError):
    status_code = 410


class DealFull(DealError):
    pass


class AlreadyParticipating(DealError):
    pass


class ParticipationNotFound(DealError):
    status_code = 404


class NotDealCreator(DealError):
    status_code = 403


class NotAuthorized(DealError):
    status_code = 403


class InvalidTransition(DealError):
    pass


class ConcurrentUpdate(DealError):
    """The deal kept changing underneath every write attempt."""


class InvalidDealTerms(DealError):
    status_code = 422


class ProductUnavailable(DealError):
    status_code = 404


class CategoryNotFound(DealError):
    status_code = 404


class CategoryInUse(DealError):
    pass


class ProductInUse(DealError):
    pass


class DuplicateName(DealError):
    pass


class StoreError(Exception):
    """The database failed; the transaction was rolled back."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
