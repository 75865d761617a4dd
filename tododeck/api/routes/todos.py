from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session, selectinload
from typing import Any, Optional
from tododeck.api.dependencies import request_body
from tododeck.api.errors import JsonApiResponse, ValidationFailed
from tododeck.auth.dependencies import RequestContext, get_request_context
from tododeck.config.helpers import commit_or_raise, find_owned_category, get_todo_or_404
from tododeck.database.connection import get_db
from tododeck.models.todo import Todo
from tododeck.queries.builder import build_todo_query, parse_sort
from tododeck.queries.includes import include_categories, parse_include
from tododeck.queries.pagination import paginate
from tododeck.queries.status import parse_statuses
from tododeck.schemas.jsonapi import parse_document, relationship_id, validate_attributes
from tododeck.schemas.serializers import document, serialize_category, serialize_todo
from tododeck.schemas.todo import TodoCreate, TodoUpdate
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/todos", tags=["Todos"], default_response_class=JsonApiResponse)

def apply_category(db: Session, context: RequestContext, todo: Todo, relationships: Any) -> None:
    """Point ``todo`` at the category named in the request, if one was named"""
    supplied, category_id = relationship_id(relationships, "category")
    if not supplied:
        return
    if category_id is None:
        todo.category_id = None
        return

    category = find_owned_category(db, context, category_id)
    if category is None:
        raise ValidationFailed(["Category must exist"])
    todo.category_id = category.id

@router.get("")
def get_todos(
    status_filter: Optional[str] = Query(None, alias="filter[status]"),
    search: Optional[str] = Query(None, alias="filter[search]"),
    sort: Optional[str] = None,
    include: Optional[str] = None,
    page_number: Optional[int] = Query(None, alias="page[number]"),
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    List the caller's todos
    - **filter[status]**: comma separated statuses, results are their union
    - **filter[search]**: case-insensitive substring of the name
    - **sort**: name, completedAt or deletedAt, prefix with - for descending
    - **include**: category
    - **page[number]**: page of a completed or deleted listing (starts from 1)
    """
    statuses = parse_statuses(status_filter)
    include_category = "category" in parse_include(include)

    query = build_todo_query(db, context, statuses, search, parse_sort(sort))
    if include_category:
        query = query.options(selectinload(Todo.category))

    todos, page_count = paginate(query, statuses, page_number)

    included = None
    if include_category:
        # An include that matches no categories leaves the section out
        included = [serialize_category(category) for category in include_categories(todos)] or None
    meta = {"page-count": page_count} if page_count is not None else None

    return document([serialize_todo(todo) for todo in todos], included, meta)

@router.post("", status_code=status.HTTP_201_CREATED)
def create_todo(
    body: bytes = Depends(request_body),
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    Create a new todo
    - **name**: required, cannot be blank
    - **relationships.category**: optional category of the caller
    """
    payload = parse_document(body, "todos")
    attributes = validate_attributes(TodoCreate, payload.attributes)

    todo = Todo(user_id=context.user_id, **attributes.model_dump())
    apply_category(db, context, todo, payload.relationships)

    db.add(todo)
    commit_or_raise(db)
    db.refresh(todo)
    logger.info(f"User {context.user_id} created todo {todo.id}")
    return document(serialize_todo(todo))

@router.get("/{todo_id}")
def get_todo(
    todo_id: str,
    include: Optional[str] = None,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    Get a specific todo by ID
    - **include**: category
    """
    todo = get_todo_or_404(db, context, todo_id)

    included = None
    if "category" in parse_include(include):
        included = [serialize_category(category) for category in include_categories([todo])] or None

    return document(serialize_todo(todo), included)

@router.patch("/{todo_id}")
def update_todo(
    todo_id: str,
    body: bytes = Depends(request_body),
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    Update a todo (partial update allowed)
    - **data.id**: must match the id in the path
    """
    todo = get_todo_or_404(db, context, todo_id)
    payload = parse_document(body, "todos", expected_id=todo_id)
    attributes = validate_attributes(TodoUpdate, payload.attributes)

    update_data = attributes.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(todo, field, value)
    apply_category(db, context, todo, payload.relationships)

    commit_or_raise(db)
    db.refresh(todo)
    logger.info(f"User {context.user_id} updated todo {todo.id}: {sorted(update_data)}")
    return document(serialize_todo(todo))

@router.delete("/{todo_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_todo(
    todo_id: str,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    Delete a todo permanently

    Soft deletion is a PATCH setting deleted-at.
    """
    todo = get_todo_or_404(db, context, todo_id)

    db.delete(todo)
    db.commit()
    logger.info(f"User {context.user_id} deleted todo {todo_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
