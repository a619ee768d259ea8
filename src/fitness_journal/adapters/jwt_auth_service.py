"""Signed session tokens backed by PyJWT."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from fitness_journal.domain.errors import AuthError
from fitness_journal.services.auth import AuthService

_ALGORITHM = "HS256"

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class JwtAuthService(AuthService):
    """HS256 tokens carrying the user id as ``sub``."""

    secret: str
    ttl_days: int = 7
    clock: Callable[[], datetime] = _utc_now

    def generate_token(self, user_id: str) -> str:
        now = self.clock()
        payload = {
            "sub": user_id,
            "iat": int(now.timestamp()),
            "exp": int((now + timedelta(days=self.ttl_days)).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=_ALGORITHM)

    def validate_token(self, token: str) -> bool:
        try:
            self._decode(token)
        except AuthError:
            return False
        return True

    def get_current_user_id_from_token(self, token: str) -> str:
        return self._decode(token)["sub"]

    def _decode(self, token: str) -> dict[str, object]:
        if not isinstance(token, str) or not token:
            raise AuthError("Missing session token")
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[_ALGORITHM],
                options={"require": ["sub", "exp"]},
                leeway=0,
            )
        except ExpiredSignatureError as exc:
            raise AuthError("Session token expired") from exc
        except InvalidTokenError as exc:
            logger.info("Rejected session token: %s", exc)
            raise AuthError("Invalid session token") from exc
        if not isinstance(payload.get("sub"), str) or not payload["sub"]:
            raise AuthError("Invalid session token")
        return payload
