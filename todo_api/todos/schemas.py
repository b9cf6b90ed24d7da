"""
Todo API - Todo Schemas

Pydantic models for todo API requests and responses.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class TodoTextRequest(BaseModel):
    """Request model for creating a todo or replacing its text."""

    text: Optional[str] = Field(default=None, description="Todo text")


class TodoResponse(BaseModel):
    """Response model for a single todo."""

    id: str = Field(description="Todo ID")
    text: str = Field(description="Todo text")
    completed: bool = Field(description="Whether the todo is done")
    owner_id: str = Field(description="Owner user ID")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class TodoDeleteResponse(BaseModel):
    """Response model for todo deletion."""

    message: str = Field(description="Success message")
