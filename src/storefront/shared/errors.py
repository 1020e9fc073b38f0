"""Storefront error taxonomy.

Protean's own exceptions cover validation (``ValidationError``), missing
records (``ObjectNotFoundError``) and lost optimistic-concurrency races
(``ExpectedVersionError``). The classes here add the outcomes the framework
has no name for. Each carries the HTTP status it maps to at the API boundary.
"""

from protean.exceptions import ValidationError


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(StorefrontError):
    status_code = 404


class Conflict(StorefrontError):
    status_code = 409


class Forbidden(StorefrontError):
    status_code = 403


class NotAuthenticated(StorefrontError):
    status_code = 401


class InsufficientStock(ValidationError):
    """Requested quantity exceeds what is on hand. Surfaces as a 400."""

    def __init__(self, message: str, product_id=None, available: int | None = None):
        super().__init__({"stock": [message]})
        self.product_id = product_id
        self.available = available
