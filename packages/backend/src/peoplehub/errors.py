"""Service error taxonomy.

Learn: Services raise these; the app-level exception handler in main.py
renders them as {"detail": ..., "code": ...} with the mapped status.
The code is stable (clients branch on it), the detail is human text.
Anything that is NOT a ServiceError is an infrastructure failure and is
flattened to ServerError after being logged in full.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "service_error"
    status_code = 400
    default_detail = "Request failed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(ServiceError):
    code = "unauthenticated"
    status_code = 401
    default_detail = "Authentication required"


class InvalidCredentials(ServiceError):
    code = "invalid_credentials"
    status_code = 401
    default_detail = "Invalid credentials"


class AccountInactive(ServiceError):
    code = "account_inactive"
    status_code = 401
    default_detail = "Account is inactive"


class InvalidOrExpiredToken(ServiceError):
    code = "invalid_or_expired_token"
    status_code = 400
    default_detail = "Invalid or expired token"


class Forbidden(ServiceError):
    code = "forbidden"
    status_code = 403
    default_detail = "Not authorized"


class NotFound(ServiceError):
    code = "not_found"
    status_code = 404
    default_detail = "Not found"


class AlreadyExists(ServiceError):
    code = "already_exists"
    status_code = 409
    default_detail = "Already exists"


class InvalidStateTransition(ServiceError):
    code = "invalid_state_transition"
    status_code = 409
    default_detail = "Invalid state transition"


class IncorrectPassword(ServiceError):
    code = "incorrect_password"
    status_code = 400
    default_detail = "Current password is incorrect"


class ServerError(ServiceError):
    code = "server_error"
    status_code = 500
    default_detail = "Server error"
