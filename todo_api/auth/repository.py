import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from todo_api.auth.models import User
from todo_api.errors import DuplicateUsername

logger = logging.getLogger(__name__)


class UserRepositoryInterface(ABC):
    """Abstract interface for the credential store.

    This interface allows swapping implementations (in-memory -> MongoDB).
    """

    @abstractmethod
    async def create(self, username: str, password_hash: str) -> User:
        """Create a new user. Raises DuplicateUsername if the name is taken."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_username(self, username: str) -> Optional[User]:
        """Get user by username."""
        pass


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of the user repository."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def create(self, username: str, password_hash: str) -> User:
        if await self.get_by_username(username) is not None:
            raise DuplicateUsername()

        user = User.create(username=username, password_hash=password_hash)
        try:
            await self.collection.insert_one(user.to_dict())
        except DuplicateKeyError:
            # Lost the race against a concurrent registration; the unique index caught it
            logger.info(f"[MongoUserRepository] Unique index rejected username={username}")
            raise DuplicateUsername()
        logger.info(f"[MongoUserRepository] Created user username={user.username}, id={user.id}")
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def get_by_username(self, username: str) -> Optional[User]:
        doc = await self.collection.find_one({"username": username})
        if doc is None:
            return None
        return User.from_dict(doc)


class InMemoryUserRepository(UserRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._users: Dict[str, User] = {}
        self._users_by_username: Dict[str, User] = {}

    def clear(self) -> None:
        self._users.clear()
        self._users_by_username.clear()

    async def create(self, username: str, password_hash: str) -> User:
        if username in self._users_by_username:
            raise DuplicateUsername()
        user = User.create(username=username, password_hash=password_hash)
        self._users[user.id] = user
        self._users_by_username[username] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_username(self, username: str) -> Optional[User]:
        return self._users_by_username.get(username)
