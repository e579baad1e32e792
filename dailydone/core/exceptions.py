"""Error taxonomy shared by the credential store, auth service and API layer."""


class AuthServiceError(Exception):
    """Base error surfaced to API callers as an HTTP status plus a readable message."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingFieldsError(AuthServiceError):
    """A required request field is absent or empty."""

    status_code = 400


class InvalidFormatError(AuthServiceError):
    """A field is present but malformed (email, username, role, counters)."""

    status_code = 400


class WeakPasswordError(AuthServiceError):
    status_code = 400


class InvalidCredentialsError(AuthServiceError):
    """Unknown email or wrong password; the two cases are deliberately indistinguishable."""

    status_code = 401


class UnauthenticatedError(AuthServiceError):
    status_code = 401


class InvalidOrExpiredTokenError(AuthServiceError):
    status_code = 403


class ForbiddenError(AuthServiceError):
    """Authenticated, but the role does not allow the operation."""

    status_code = 403


class UserNotFoundError(AuthServiceError):
    status_code = 404


class DuplicateKeyError(AuthServiceError):
    """Email or username already belongs to another user."""

    status_code = 409

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
