"""
Todo API - Authentication Schemas

Pydantic models for authentication requests and responses.
"""

from typing import Optional

from pydantic import BaseModel


class UserRegisterRequest(BaseModel):
    """Request schema for user registration.

    Fields are optional here so that missing values reach the service and are
    reported as a 400 with a readable message.
    """

    username: Optional[str] = None
    password: Optional[str] = None


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    username: Optional[str] = None
    password: Optional[str] = None


class TokenResponse(BaseModel):
    """Response schema for successful authentication."""

    token: str
    username: str


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
