"""
Todo API - Todo Router

CRUD endpoints for todos.
All endpoints are JWT-protected and user-scoped.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase

from todo_api.database import get_database
from todo_api.auth.dependencies import CurrentIdentity
from todo_api.todos.repository import MongoTodoRepository, TodoRepositoryInterface
from todo_api.todos.schemas import TodoTextRequest, TodoResponse, TodoDeleteResponse
from todo_api.todos.service import TodoService


router = APIRouter(prefix="/todos", tags=["Todos"])


async def get_todo_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> TodoRepositoryInterface:
    """Dependency to get todo repository instance."""
    return MongoTodoRepository(db)


async def get_todo_service(
    repository: Annotated[TodoRepositoryInterface, Depends(get_todo_repository)]
) -> TodoService:
    """Dependency to get todo service instance."""
    return TodoService(repository)


@router.get(
    "",
    response_model=List[TodoResponse],
    summary="List todos",
)
async def list_todos(
    identity: CurrentIdentity,
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> List[TodoResponse]:
    """List the authenticated user's todos in creation order."""
    return await service.list(identity)


@router.post(
    "",
    response_model=TodoResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a todo",
)
async def create_todo(
    request: TodoTextRequest,
    identity: CurrentIdentity,
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """
    Create a new todo for the authenticated user.

    The todo starts out not completed.
    """
    return await service.add(identity, request.text)


@router.patch(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Toggle a todo",
)
async def toggle_todo(
    todo_id: str,
    identity: CurrentIdentity,
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """
    Flip the completed flag of a todo.

    Returns 404 if the todo doesn't exist or belongs to another user.
    """
    return await service.toggle(identity, todo_id)


@router.put(
    "/{todo_id}",
    response_model=TodoResponse,
    summary="Update todo text",
)
async def update_todo(
    todo_id: str,
    request: TodoTextRequest,
    identity: CurrentIdentity,
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoResponse:
    """
    Replace the text of a todo. The completed flag is left as is.

    Returns 404 if the todo doesn't exist or belongs to another user.
    """
    return await service.rename(identity, todo_id, request.text)


@router.delete(
    "/{todo_id}",
    response_model=TodoDeleteResponse,
    summary="Delete a todo",
)
async def delete_todo(
    todo_id: str,
    identity: CurrentIdentity,
    service: Annotated[TodoService, Depends(get_todo_service)],
) -> TodoDeleteResponse:
    """
    Delete a todo.

    Returns 404 if the todo doesn't exist or belongs to another user.
    """
    return await service.remove(identity, todo_id)
