"""
Gateway error taxonomy

Every failure raised by the gateway core carries an ErrorKind tag. The HTTP
layer maps the tag to a status code; message text is for humans only.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Tagged error kinds emitted by the gateway"""
    VALIDATION = "validation_error"
    AUTHENTICATION_FAILED = "authentication_failed"
    INVALID_TOKEN = "invalid_token"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    REMOTE_INTERNAL_ERROR = "remote_internal_error"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    TRANSPORT_ERROR = "transport_error"
    TIMEOUT = "timeout"
    CONNECTION_REFUSED = "connection_refused"
    NETWORK_ERROR = "network_error"
    NOT_FOUND_DOMAIN = "not_found_domain"
    INVALID_DATE = "invalid_date"
    PROPERTY_KEY_COLLISION = "property_key_collision"
    CONFIGURATION_ERROR = "configuration_error"


class GatewayError(Exception):
    """
    Base class for all gateway errors

    Args:
        message: User-safe message
        details: Extra diagnostic context
        remote_message: Message text returned by the remote system, if any
    """

    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR
    default_message: str = "Unexpected gateway error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        remote_message: Optional[str] = None
    ):
        self.message = message or self.default_message
        self.details = details or {}
        self.remote_message = remote_message
        if remote_message:
            self.details.setdefault("remote_message", remote_message)
        super().__init__(self.message)


class ValidationError(GatewayError):
    """Bad caller input; never reaches the remote system"""
    kind = ErrorKind.VALIDATION
    default_message = "Invalid input data"

    def __init__(self, message: Optional[str] = None, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
        if self.errors:
            self.details.setdefault("errors", self.errors)


class AuthenticationFailed(GatewayError):
    kind = ErrorKind.AUTHENTICATION_FAILED
    default_message = "Authentication failed. Check your credentials."


class InvalidToken(GatewayError):
    kind = ErrorKind.INVALID_TOKEN
    default_message = "Invalid or expired token"


class Unauthenticated(GatewayError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Remote session expired or invalid. Please log in again."


class Forbidden(GatewayError):
    kind = ErrorKind.FORBIDDEN
    default_message = "Permission denied by the PLM system"


class NotFound(GatewayError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Resource not found in the PLM system"


class RemoteInternalError(GatewayError):
    kind = ErrorKind.REMOTE_INTERNAL_ERROR
    default_message = "PLM system internal error"


class RemoteUnavailable(GatewayError):
    kind = ErrorKind.REMOTE_UNAVAILABLE
    default_message = "PLM system unavailable. Try again later."


class TransportError(GatewayError):
    kind = ErrorKind.TRANSPORT_ERROR
    default_message = "Error communicating with the PLM system"


class Timeout(TransportError):
    kind = ErrorKind.TIMEOUT
    default_message = "Timed out waiting for the PLM system"


class ConnectionRefused(TransportError):
    kind = ErrorKind.CONNECTION_REFUSED
    default_message = "Connection refused by the PLM system. Check the URL and port."


class NetworkError(TransportError):
    kind = ErrorKind.NETWORK_ERROR
    default_message = "Network error while contacting the PLM system"


class NotFoundDomain(GatewayError):
    """A resource the caller referenced does not exist"""
    kind = ErrorKind.NOT_FOUND_DOMAIN
    default_message = "Resource does not exist"


class InvalidDate(GatewayError):
    kind = ErrorKind.INVALID_DATE
    default_message = "Invalid date value returned by the PLM system"


class PropertyKeyCollision(GatewayError):
    kind = ErrorKind.PROPERTY_KEY_COLLISION
    default_message = "Free-form property collides with a reserved property name"


class ConfigurationError(GatewayError):
    kind = ErrorKind.CONFIGURATION_ERROR
    default_message = "Invalid gateway configuration"
