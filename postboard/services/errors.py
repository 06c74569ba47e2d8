"""Service-layer exceptions mapped to HTTP responses.

Each class fixes the status code and the default plain-text message that
clients see. Handlers render ``message`` verbatim as the response body.
"""

from typing import Optional


class ServiceError(Exception):
    """Base class for errors that terminate a request."""

    status_code: int = 400
    default_message: str = "bad request"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInputError(ServiceError):
    """Required request input is absent (400)."""

    status_code = 400
    default_message = "missing input"


class AuthConfigurationError(ServiceError):
    """Server has no signing secret or identity-provider config (400)."""

    status_code = 400
    default_message = "missing auth configuration"


class WrongCredentialsError(ServiceError):
    """Email/password pair did not verify.

    Unknown email and bad password share this one message.
    """

    status_code = 400
    default_message = "wrong email or password"


class DuplicateUserError(ServiceError):
    """A user with this email and account kind already exists (400)."""

    status_code = 400
    default_message = "user already exists"


class MissingTokenError(ServiceError):
    """No bearer token on a protected request (401)."""

    status_code = 401
    default_message = "missing token"


class InvalidTokenError(ServiceError):
    """Token signature, shape or expiry check failed (403)."""

    status_code = 403
    default_message = "invalid token"


class RevokedTokenError(InvalidTokenError):
    """Refresh token verified but is no longer on record (400)."""

    status_code = 400


class InvalidAssertionError(ServiceError):
    """Third-party identity assertion failed verification (400)."""

    status_code = 400
    default_message = "invalid credential"


class NotFoundError(ServiceError):
    """Requested resource does not exist (404)."""

    status_code = 404
    default_message = "item not found"


class UpstreamError(ServiceError):
    """An external service call failed (502)."""

    status_code = 502
    default_message = "upstream service unavailable"
