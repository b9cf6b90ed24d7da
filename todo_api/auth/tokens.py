"""
Todo API - Session Tokens

Signed, time-bounded bearer tokens. Verification is stateless: the claims are
trusted once the signature and expiry check out, with no database lookup.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from todo_api.config import settings
from todo_api.auth.models import Identity, User
from todo_api.errors import InvalidToken


class TokenService:
    """Mint and verify JWT session tokens."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        expires_delta: Optional[timedelta] = None,
    ):
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.expires_delta = expires_delta or timedelta(
            minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES
        )

    def create_access_token(self, user: User, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT access token embedding the user's id and username."""
        if expires_delta is None:
            expires_delta = self.expires_delta

        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": user.id,
            "username": user.username,
            "exp": now + expires_delta,
            "iat": now,
        }
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """Decode and validate a token. Raises InvalidToken on any failure."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            raise InvalidToken()

        user_id = payload.get("sub")
        username = payload.get("username")
        if not user_id or not username:
            raise InvalidToken()
        return Identity(user_id=user_id, username=username)
