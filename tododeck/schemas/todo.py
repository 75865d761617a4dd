from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
from tododeck.models.todo import Todo
from tododeck.queries.status import as_utc
from tododeck.schemas.jsonapi import check_attribute_map

# Column name -> wire attribute name, for every attribute a todo exposes
TODO_ATTRIBUTES = {
    "name": "name",
    "notes": "notes",
    "completed_at": "completed-at",
    "deleted_at": "deleted-at",
    "deferred_until": "deferred-until",
    "deferred_at": "deferred-at",
    "created_at": "created-at",
    "updated_at": "updated-at",
}
TODO_TIMESTAMPS = {"completed_at", "deleted_at", "deferred_until", "deferred_at", "created_at", "updated_at"}

check_attribute_map(Todo, TODO_ATTRIBUTES)

class TodoAttributes(BaseModel):
    """Writable todo attributes; created-at and updated-at are ignored"""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    notes: Optional[str] = None
    completed_at: Optional[datetime] = Field(default=None, alias=TODO_ATTRIBUTES["completed_at"])
    deleted_at: Optional[datetime] = Field(default=None, alias=TODO_ATTRIBUTES["deleted_at"])
    deferred_until: Optional[datetime] = Field(default=None, alias=TODO_ATTRIBUTES["deferred_until"])
    deferred_at: Optional[datetime] = Field(default=None, alias=TODO_ATTRIBUTES["deferred_at"])

    @field_validator("completed_at", "deleted_at", "deferred_until", "deferred_at")
    @classmethod
    def normalize_timestamp(cls, v):
        return as_utc(v)

class TodoCreate(TodoAttributes):
    """Schema for creating a new todo"""
    name: Optional[str]

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("can't be blank")
        return v

class TodoUpdate(TodoAttributes):
    """Schema for updating a todo"""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        # Only runs when name was supplied
        if v is None or not v.strip():
            raise ValueError("can't be blank")
        return v
