"""PyJWT bearer token codec."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt

from mess_tracker.domain.errors import AuthenticationFailed, TokenExpired
from mess_tracker.services.auth import TokenCodec

logger = logging.getLogger(__name__)


@dataclass
class PyJwtTokenCodec(TokenCodec):
    """Signs tokens with a shared secret."""

    secret: str
    algorithm: str = "HS256"

    def encode(self, claims: dict[str, object], expires_in: timedelta) -> str:
        """Return a signed token that expires after the given duration."""
        now = datetime.now(tz=UTC)
        payload = {**claims, "iat": now, "exp": now + expires_in}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str, verify_exp: bool = True) -> dict[str, object]:
        """Return the verified claims of a token."""
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"verify_exp": verify_exp},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise AuthenticationFailed("Invalid token") from exc
