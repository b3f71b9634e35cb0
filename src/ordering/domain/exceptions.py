"""Domain-level exceptions.

Every rejected operation on the aggregate is expressed as a subclass of
DomainException so the CLI layer can catch them uniformly and display
user-friendly messages.  A failed operation never leaves partial state.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class InvalidArgumentError(DomainException):
    """Malformed input: empty name, non-positive price or quantity, blank coupon."""


class InvalidStateError(DomainException):
    """The order's current status does not permit the requested operation."""


class NotFoundError(DomainException):
    """A referenced item does not exist in the order."""
