"""
Security utilities for the PLM gateway

Mints and verifies the local JWT that wraps a remote session id.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from pydantic import ValidationError as PydanticValidationError

from plm_gateway.config import DEFAULT_JWT_SECRET, Settings
from plm_gateway.models.auth import AuthToken, TokenPayload
from plm_gateway.utils.errors import ConfigurationError, InvalidToken

REQUIRED_CLAIMS = ["username", "remote_session_id", "iat", "exp"]


class TokenManager:
    """Signs and verifies local tokens"""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_in: int = 3600, logger=None):
        if not secret or secret == DEFAULT_JWT_SECRET:
            raise ConfigurationError("JWT secret is not set or uses the default value")
        if expires_in <= 0:
            raise ConfigurationError("JWT expiration must be positive")
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in = expires_in
        self.logger = logger or structlog.get_logger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, logger=None) -> "TokenManager":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_in=settings.jwt_expiration,
            logger=logger,
        )

    def issue(self, username: str, remote_session_id: str, now: Optional[datetime] = None) -> AuthToken:
        """
        Generate a local token

        Args:
            username: Gateway user name
            remote_session_id: Remote session id to embed
            now: Issue time (defaults to current UTC time)

        Returns:
            AuthToken with the signed token string
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "username": username,
            "remote_session_id": remote_session_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expires_in),
        }
        token = jwt.encode(payload, self.secret, algorithm=self.algorithm)
        return AuthToken(token=token, expires_in=self.expires_in, token_type="Bearer")

    def decode(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry of a local token

        Raises:
            InvalidToken: for any verification failure; the cause is only logged
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": REQUIRED_CLAIMS},
            )
            return TokenPayload.model_validate(claims)
        except jwt.ExpiredSignatureError:
            self.logger.warning("Token has expired")
        except jwt.InvalidSignatureError:
            self.logger.warning("Token signature verification failed")
        except jwt.MissingRequiredClaimError as e:
            self.logger.warning("Token is missing a required claim", claim=e.claim)
        except jwt.DecodeError as e:
            self.logger.warning("Malformed token", error=str(e))
        except jwt.InvalidTokenError as e:
            self.logger.warning("Invalid token", error=str(e))
        except PydanticValidationError as e:
            self.logger.warning("Token claims have an unexpected shape", error=str(e))
        raise InvalidToken()
