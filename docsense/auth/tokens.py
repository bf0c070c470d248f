"""Signed bearer tokens (JWT) for authenticated sessions."""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from docsense.models.users import UserResponse

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


class TokenService:
    """Issues and validates access tokens."""

    def __init__(self, secret: str, expires_days: int = 7, algorithm: str = ALGORITHM) -> None:
        """Initialize token service.

        Args:
            secret: HMAC signing secret (read from settings)
            expires_days: Token lifetime in days
            algorithm: JWT signing algorithm
        """
        self._secret = secret
        self._expires = timedelta(days=expires_days)
        self._algorithm = algorithm

    @property
    def max_age_seconds(self) -> int:
        return int(self._expires.total_seconds())

    def create_access_token(self, user: UserResponse, now: datetime | None = None) -> str:
        """Generate a signed JWT carrying the user id and email."""
        if now is None:
            now = datetime.now(timezone.utc)

        claims = {
            "sub": user.id,
            "email": user.email,
            "iat": now,
            "exp": now + self._expires,
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def decode_user_id(self, token: str) -> str | None:
        """Validate a token and return its user id, or None if invalid/expired."""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except JWTError as e:
            logger.debug(f"Token verification failed: {e}")
            return None

        user_id = claims.get("sub")
        return user_id if isinstance(user_id, str) and user_id else None
