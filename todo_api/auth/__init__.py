"""
Todo API - Authentication Module

Register/login with JWT authentication.
"""

from todo_api.auth.router import router as auth_router
from todo_api.auth.dependencies import get_current_identity, CurrentIdentity

__all__ = ["auth_router", "get_current_identity", "CurrentIdentity"]
