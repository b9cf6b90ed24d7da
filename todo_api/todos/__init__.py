"""
Todo API - Todos Module

Ownership-scoped CRUD for personal todos.
"""

from todo_api.todos.router import router as todos_router

__all__ = ["todos_router"]
