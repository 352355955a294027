# foodcourt/domain/errors.py
"""
Error taxonomy of the service.

Every error raised by the services derives from ``FoodCourtError``; the five
direct subclasses are the categories the HTTP layer maps to status codes,
the named conditions below them are what callers actually catch.
"""


class FoodCourtError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FoodCourtError):
    """Malformed input, caller's fault."""
    status_code = 400


class NotFoundError(FoodCourtError):
    status_code = 404


class AuthorizationError(FoodCourtError):
    status_code = 403


class ConflictError(FoodCourtError):
    """Stock or state conflicts."""
    status_code = 409


class DependencyError(FoodCourtError):
    """Persistence or transport failure (including timeouts)."""
    status_code = 503


# validation
class InvalidQuantity(ValidationError):
    pass


class EmptyCart(ValidationError):
    pass


# not found
class LineNotFound(NotFoundError):
    pass


# authorization
class Unauthorized(AuthorizationError):
    pass


# conflicts
class OutOfStock(ConflictError):
    pass


class InsufficientStock(ConflictError):
    pass


class ItemUnavailable(ConflictError):
    pass


class IllegalTransition(ConflictError):
    pass


class OrderClosed(ConflictError):
    pass
