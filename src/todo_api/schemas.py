from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.

    Only the title and description are taken from the request; the id,
    completion flag and creation timestamp are always assigned by the server.
    A missing title is accepted; the stored record then has no title key.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="The title of the todo")
    description: Optional[str] = Field(default=None, description="Detailed description of the todo")


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated. Any other
    keys in the body, including 'id' and 'createdAt', are ignored.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "completed": True,
            }
        },
    )

    title: Optional[str] = Field(default=None, description="The title of the todo")
    description: Optional[str] = Field(default=None, description="Detailed description of the todo")
    completed: Optional[bool] = Field(default=None, description="Whether the todo is completed")

    def changes(self) -> dict:
        """Return only the fields the client actually sent with a non-null value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "createdAt": "2025-01-25T10:15:30.123Z",
            }
        },
    )

    id: int = Field(..., description="The auto-generated id of the todo")
    title: Optional[str] = Field(default=None, description="The title of the todo")
    description: Optional[str] = Field(default="", description="Detailed description of the todo")
    completed: bool = Field(default=False, description="Whether the todo is completed")
    created_at: str = Field(
        ..., alias="createdAt", description="The date the todo was created (ISO8601)"
    )


class ErrorOut(BaseModel):
    """Body of every non-validation error response."""

    error: str = Field(..., description="Human readable error message")
