"""
Todo API - Todo Service

Ownership-scoped todo operations. Every call takes the caller's verified
identity and only ever touches todos owned by it.
"""

import logging
from typing import List, Optional

from pymongo.errors import PyMongoError

from todo_api.auth.models import Identity
from todo_api.errors import InvalidInput, NotFound, PersistenceError
from todo_api.todos.models import Todo
from todo_api.todos.repository import TodoRepositoryInterface
from todo_api.todos.schemas import TodoDeleteResponse, TodoResponse

logger = logging.getLogger(__name__)

TEXT_REQUIRED = "Text is required"


class TodoService:
    """Service layer for todo business logic."""

    def __init__(self, repository: TodoRepositoryInterface):
        self.repository = repository

    @staticmethod
    def _to_response(todo: Todo) -> TodoResponse:
        return TodoResponse(
            id=todo.id,
            text=todo.text,
            completed=todo.completed,
            owner_id=todo.owner_id,
            created_at=todo.created_at,
            updated_at=todo.updated_at,
        )

    async def list(self, identity: Identity) -> List[TodoResponse]:
        """List all todos owned by the caller."""
        todos = await self.repository.list_by_owner(identity.user_id)
        return [self._to_response(todo) for todo in todos]

    async def add(self, identity: Identity, text: Optional[str]) -> TodoResponse:
        """Create a todo owned by the caller."""
        if not text:
            raise InvalidInput(TEXT_REQUIRED)
        try:
            todo = await self.repository.create_for_owner(identity.user_id, text)
        except PyMongoError:
            logger.error(f"Failed to add todo for user {identity.user_id}", exc_info=True)
            raise PersistenceError("Failed to add todo")
        return self._to_response(todo)

    async def toggle(self, identity: Identity, todo_id: str) -> TodoResponse:
        """Flip the completed flag of one of the caller's todos."""
        try:
            todo = await self.repository.find_one_by_id_and_owner(todo_id, identity.user_id)
            if todo is None:
                raise NotFound()
            updated = await self.repository.update_by_id_and_owner(
                todo_id, identity.user_id, {"completed": not todo.completed}
            )
        except PyMongoError:
            logger.error(f"Failed to toggle todo {todo_id}", exc_info=True)
            raise PersistenceError("Error toggling todo")
        if updated is None:
            # Deleted between the read and the write
            raise NotFound()
        return self._to_response(updated)

    async def rename(self, identity: Identity, todo_id: str, text: Optional[str]) -> TodoResponse:
        """Replace the text of one of the caller's todos."""
        if not text:
            raise InvalidInput(TEXT_REQUIRED)
        try:
            updated = await self.repository.update_by_id_and_owner(
                todo_id, identity.user_id, {"text": text}
            )
        except PyMongoError:
            logger.error(f"Failed to update todo {todo_id}", exc_info=True)
            raise PersistenceError("Error updating todo")
        if updated is None:
            raise NotFound()
        return self._to_response(updated)

    async def remove(self, identity: Identity, todo_id: str) -> TodoDeleteResponse:
        """Delete one of the caller's todos."""
        try:
            deleted = await self.repository.delete_by_id_and_owner(todo_id, identity.user_id)
        except PyMongoError:
            logger.error(f"Failed to delete todo {todo_id}", exc_info=True)
            raise PersistenceError("Error deleting todo")
        if not deleted:
            raise NotFound()
        return TodoDeleteResponse(message="Todo deleted")
