"""
Todo API - Todo Repository

Repository pattern for todo data access.
Includes MongoDB implementation for runtime and an in-memory one for testing.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from todo_api.todos.models import Todo, utcnow

# Fields a caller may change through update_by_id_and_owner
UPDATABLE_FIELDS = frozenset({"text", "completed"})


class TodoRepositoryInterface(ABC):
    """
    Abstract interface for todo repository.

    Every operation takes the owner explicitly; a todo that exists but belongs
    to someone else is indistinguishable from one that does not exist.
    """

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[Todo]:
        pass

    @abstractmethod
    async def create_for_owner(self, owner_id: str, text: str) -> Todo:
        pass

    @abstractmethod
    async def find_one_by_id_and_owner(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        pass

    @abstractmethod
    async def update_by_id_and_owner(self, todo_id: str, owner_id: str, patch: dict) -> Optional[Todo]:
        pass

    @abstractmethod
    async def delete_by_id_and_owner(self, todo_id: str, owner_id: str) -> bool:
        pass


def _clean_patch(patch: dict) -> dict:
    unknown = set(patch) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update todo fields: {sorted(unknown)}")
    return dict(patch)


class MongoTodoRepository(TodoRepositoryInterface):
    """
    MongoDB implementation of the todo repository.

    All queries filter on (_id, owner_id) jointly.
    """

    COLLECTION_NAME = "todos"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def list_by_owner(self, owner_id: str) -> List[Todo]:
        cursor = self.collection.find({"owner_id": owner_id}).sort("created_at", 1)
        todos: List[Todo] = []
        async for doc in cursor:
            todos.append(Todo.from_dict(doc))
        return todos

    async def create_for_owner(self, owner_id: str, text: str) -> Todo:
        todo = Todo.create(owner_id=owner_id, text=text)
        await self.collection.insert_one(todo.to_dict())
        return todo

    async def find_one_by_id_and_owner(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        doc = await self.collection.find_one({"_id": todo_id, "owner_id": owner_id})
        if doc is None:
            return None
        return Todo.from_dict(doc)

    async def update_by_id_and_owner(self, todo_id: str, owner_id: str, patch: dict) -> Optional[Todo]:
        updates = _clean_patch(patch)
        updates["updated_at"] = utcnow()

        result = await self.collection.find_one_and_update(
            {"_id": todo_id, "owner_id": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if result is None:
            return None
        return Todo.from_dict(result)

    async def delete_by_id_and_owner(self, todo_id: str, owner_id: str) -> bool:
        result = await self.collection.delete_one({"_id": todo_id, "owner_id": owner_id})
        return result.deleted_count > 0


class InMemoryTodoRepository(TodoRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._todos: dict[str, Todo] = {}

    def clear(self) -> None:
        self._todos.clear()

    def _get_owned(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        todo = self._todos.get(todo_id)
        if todo is None or todo.owner_id != owner_id:
            return None
        return todo

    async def list_by_owner(self, owner_id: str) -> List[Todo]:
        # dicts keep insertion order
        return [replace(t) for t in self._todos.values() if t.owner_id == owner_id]

    async def create_for_owner(self, owner_id: str, text: str) -> Todo:
        todo = Todo.create(owner_id=owner_id, text=text)
        self._todos[todo.id] = todo
        return replace(todo)

    async def find_one_by_id_and_owner(self, todo_id: str, owner_id: str) -> Optional[Todo]:
        todo = self._get_owned(todo_id, owner_id)
        return replace(todo) if todo else None

    async def update_by_id_and_owner(self, todo_id: str, owner_id: str, patch: dict) -> Optional[Todo]:
        updates = _clean_patch(patch)
        todo = self._get_owned(todo_id, owner_id)
        if todo is None:
            return None

        for key, value in updates.items():
            setattr(todo, key, value)
        todo.updated_at = utcnow()
        return replace(todo)

    async def delete_by_id_and_owner(self, todo_id: str, owner_id: str) -> bool:
        if self._get_owned(todo_id, owner_id) is None:
            return False
        del self._todos[todo_id]
        return True
