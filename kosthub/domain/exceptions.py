"""Error taxonomy shared by the use cases and the HTTP layer.

Every error derives from ``ValueError`` so callers that only care about
"the request was refused" can keep catching that, while the API maps each
subclass to its own status code.
"""

from __future__ import annotations


class DomainError(ValueError):
    """Base class for client-actionable failures that leave no partial state."""


class NotFoundError(DomainError):
    """The referenced receipt, tenancy, notification or user does not exist."""


class ConflictError(DomainError):
    """The requested transition clashes with the current state."""


class ForbiddenError(DomainError):
    """The requester is not allowed to perform the operation."""


class ValidationError(DomainError):
    """The request carries malformed or missing values."""


__all__ = [
    "ConflictError",
    "DomainError",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
]
