from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader
from motor.motor_asyncio import AsyncIOMotorDatabase

from todo_api.database import get_database
from todo_api.auth.models import Identity
from todo_api.auth.repository import MongoUserRepository, UserRepositoryInterface
from todo_api.auth.service import AuthService
from todo_api.auth.tokens import TokenService
from todo_api.errors import MissingToken


# Raw Authorization header - auto_error=False to handle missing tokens ourselves
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


def get_user_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> UserRepositoryInterface:
    """Dependency to get the MongoDB user repository."""
    return MongoUserRepository(db)


def get_token_service() -> TokenService:
    """Dependency to get the token service configured from settings."""
    return TokenService()


def get_auth_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(repository, tokens)


def extract_token(authorization: Optional[str]) -> Optional[str]:
    """Return the second space-separated word of an Authorization header."""
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2:
        return None
    return parts[1]


async def get_current_identity(
    authorization: Annotated[Optional[str], Depends(authorization_header)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> Identity:
    """Resolve the caller from the bearer token without touching the database.

    The token is the second word of the header (`Bearer <token>`); whatever
    the scheme word says, that token is verified.
    """
    token = extract_token(authorization)
    if not token:
        raise MissingToken()
    return tokens.verify(token)


# Type alias for cleaner dependency injection
CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
