"""Login-code authentication and bearer tokens."""

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Protocol
from uuid import UUID

from mess_tracker.domain.errors import AuthenticationFailed, TokenExpired
from mess_tracker.domain.models import UserRecord
from mess_tracker.services.users import UserService

logger = logging.getLogger(__name__)


class TokenCodec(Protocol):
    """Signs and verifies bearer tokens."""

    def encode(self, claims: dict[str, object], expires_in: timedelta) -> str:
        """Return a signed token carrying the claims."""

    def decode(self, token: str, verify_exp: bool = True) -> dict[str, object]:
        """Return verified claims; raise AuthenticationFailed when invalid."""


@dataclass
class AuthService:
    """Issues and checks tokens for users identified by login code."""

    user_service: UserService
    codec: TokenCodec
    expires_in: timedelta

    def login(
        self, login_code: str, password: str | None = None
    ) -> tuple[str, UserRecord]:
        """Return a token for an active user holding the login code."""
        user = self.user_service.find_by_login_code(login_code)
        if user is None:
            raise AuthenticationFailed("Invalid login code")
        if password is not None and not self._password_matches(user, password):
            raise AuthenticationFailed("Invalid login code")
        return self.issue_token(user), user

    def authenticate(self, token: str) -> UserRecord:
        """Return the active user a token belongs to."""
        claims = self.codec.decode(token)
        return self._load_active_user(claims)

    def refresh(self, token: str) -> tuple[str, UserRecord]:
        """Return a fresh token; expired but correctly signed tokens are accepted."""
        try:
            claims = self.codec.decode(token)
        except TokenExpired:
            claims = self.codec.decode(token, verify_exp=False)
        user = self._load_active_user(claims, "User not found or deactivated")
        return self.issue_token(user), user

    def issue_token(self, user: UserRecord) -> str:
        """Sign a token for the user."""
        return self.codec.encode(
            {"user_id": str(user.id), "login_code": user.login_code},
            self.expires_in,
        )

    def _load_active_user(
        self,
        claims: dict[str, object],
        message: str = "Invalid token or user not found",
    ) -> UserRecord:
        try:
            user_id = UUID(str(claims.get("user_id")))
        except ValueError as exc:
            raise AuthenticationFailed("Invalid token") from exc
        user = self.user_service.repository.get_user(user_id)
        if user is None or not user.is_active:
            raise AuthenticationFailed(message)
        return user

    def _password_matches(self, user: UserRecord, password: str) -> bool:
        if not user.password_hash:
            return False
        matched = self.user_service.hasher.verify(password, user.password_hash)
        if not matched:
            logger.info("Login secret mismatch", extra={"user_id": str(user.id)})
        return matched
