"""Services package exports."""

from postboard.services.auth_service import AuthService
from postboard.services.logging_service import configure_logging, get_logger
from postboard.services.session_service import SessionService
from postboard.services.token_service import TokenService
from postboard.services.user_service import UserService

__all__ = [
    "AuthService",
    "SessionService",
    "TokenService",
    "UserService",
    "configure_logging",
    "get_logger",
]
