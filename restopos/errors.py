"""Domain errors raised by the table, ledger, settlement and auth layers.

Each error carries the HTTP status the API layer answers with, so routers
never translate them by hand.
"""


class PosError(Exception):
    status_code = 500

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PosError):
    """Missing or invalid input, e.g. settling a day with no open orders."""

    status_code = 400


class NotFound(PosError):
    status_code = 404


class ConflictError(PosError):
    """Unique constraint violated, e.g. a username already taken."""

    status_code = 409


class AuthError(PosError):
    status_code = 401


class StoreError(PosError):
    """The database call itself failed (constraint, connectivity...)."""

    status_code = 503


__all__ = ["PosError", "ValidationError", "NotFound", "ConflictError", "AuthError", "StoreError"]
