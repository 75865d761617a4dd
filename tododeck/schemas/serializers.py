"""
Render domain records as JSON:API resource objects.

Attribute keys come from the static tables in the todo and category schema
modules; timestamps are rendered in UTC with millisecond precision.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from tododeck.queries.status import as_utc
from tododeck.schemas.category import CATEGORY_ATTRIBUTES
from tododeck.schemas.todo import TODO_ATTRIBUTES, TODO_TIMESTAMPS

def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """2026-10-19T08:30:00.000Z style timestamps, or None"""
    value = as_utc(value)
    if value is None:
        return None
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def resource_identifier(resource_type: str, resource_id) -> Dict[str, str]:
    return {"type": resource_type, "id": str(resource_id)}

def serialize_todo(todo) -> Dict[str, Any]:
    attributes = {}
    for column, key in TODO_ATTRIBUTES.items():
        value = getattr(todo, column)
        attributes[key] = format_timestamp(value) if column in TODO_TIMESTAMPS else value

    category = None
    if todo.category_id is not None:
        category = resource_identifier("categories", todo.category_id)

    return {
        "type": "todos",
        "id": str(todo.id),
        "attributes": attributes,
        "relationships": {
            "category": {"data": category}
        }
    }

def serialize_category(category) -> Dict[str, Any]:
    return {
        "type": "categories",
        "id": str(category.id),
        "attributes": {
            key: getattr(category, column) for column, key in CATEGORY_ATTRIBUTES.items()
        }
    }

def serialize_user(user) -> Dict[str, Any]:
    # The password is write-only
    return {
        "type": "users",
        "id": str(user.id),
        "attributes": {
            "email": user.email,
            "password": None
        }
    }

def document(data, included: Optional[List[Dict[str, Any]]] = None, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Top-level document; included and meta are omitted when None"""
    body = {"data": data}
    if included is not None:
        body["included"] = included
    if meta is not None:
        body["meta"] = meta
    return body
