"""Error taxonomy for auth operations; each error carries a stable status and message."""


class AuthServiceError(Exception):
    """Base error raised by auth operations and rendered as {"message": ...}."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class BadRequestError(AuthServiceError):
    """Missing or malformed input."""

    status_code = 400


class ConflictError(AuthServiceError):
    """Email or username already taken."""

    status_code = 400


class NotFoundError(AuthServiceError):
    """No account for the given email."""

    status_code = 404


class InvalidCredentialsError(AuthServiceError):
    """Password does not match the stored hash."""

    status_code = 400


class UnauthorizedError(AuthServiceError):
    """Bearer token missing, invalid, expired, or its user no longer exists."""

    status_code = 401


class AuthFailedError(AuthServiceError):
    """External identity assertion could not be verified."""

    status_code = 500


class InternalError(AuthServiceError):
    """Storage or otherwise unexpected failure."""

    status_code = 500
