import logging
from functools import lru_cache
from typing import Optional

import bcrypt
from pymongo.errors import PyMongoError

from todo_api.config import settings
from todo_api.auth.models import User
from todo_api.auth.repository import UserRepositoryInterface
from todo_api.auth.schemas import TokenResponse
from todo_api.auth.tokens import TokenService
from todo_api.errors import (
    DuplicateUsername,
    InvalidCredentials,
    InvalidInput,
    PersistenceError,
)

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_PASSWORD_BYTES = 72

MISSING_CREDENTIALS = "Missing username or password"


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> bytes:
    """Stand-in hash checked when the username is unknown."""
    return bcrypt.hashpw(b"not-a-real-password", bcrypt.gensalt(rounds=rounds))


class AuthService:
    """Authentication service with password hashing and token issuance."""

    def __init__(
        self,
        repository: UserRepositoryInterface,
        tokens: Optional[TokenService] = None,
        bcrypt_rounds: Optional[int] = None,
    ):
        self.repository = repository
        self.tokens = tokens or TokenService()
        self.bcrypt_rounds = bcrypt_rounds or settings.BCRYPT_ROUNDS

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        password_bytes = password.encode("utf-8")
        salt = bcrypt.gensalt(rounds=self.bcrypt_rounds)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        password_bytes = plain_password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_PASSWORD_BYTES:
            return False
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))

    async def register(self, username: Optional[str], password: Optional[str]) -> User:
        """Register a new user. Raises InvalidInput or DuplicateUsername."""
        if not username or not password:
            raise InvalidInput(MISSING_CREDENTIALS)
        if len(password.encode("utf-8")) > BCRYPT_MAX_PASSWORD_BYTES:
            raise InvalidInput("Password is too long")
        if await self.repository.get_by_username(username) is not None:
            raise DuplicateUsername()

        password_hash = self.hash_password(password)
        try:
            user = await self.repository.create(username, password_hash)
        except PyMongoError:
            logger.error(f"Failed to register user {username}", exc_info=True)
            raise PersistenceError("Failed to register user")
        logger.info(f"Registered user id={user.id}")
        return user

    async def login(self, username: Optional[str], password: Optional[str]) -> TokenResponse:
        """Check credentials and mint a session token.

        Unknown usernames and wrong passwords raise the same InvalidCredentials
        so callers cannot tell which usernames exist.
        """
        if not username or not password:
            raise InvalidInput(MISSING_CREDENTIALS)

        user = await self.repository.get_by_username(username)
        if user is None:
            self.verify_password(password, _dummy_hash(self.bcrypt_rounds).decode("utf-8"))
            logger.info("Rejected login attempt")
            raise InvalidCredentials()
        if not self.verify_password(password, user.password_hash):
            logger.info("Rejected login attempt")
            raise InvalidCredentials()

        token = self.tokens.create_access_token(user)
        return TokenResponse(token=token, username=user.username)
