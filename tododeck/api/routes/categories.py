from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from tododeck.api.dependencies import request_body
from tododeck.api.errors import JsonApiResponse
from tododeck.auth.dependencies import RequestContext, get_request_context
from tododeck.config.helpers import commit_or_raise, get_category_or_404, next_sort_order
from tododeck.database.connection import get_db
from tododeck.models.category import Category
from tododeck.models.todo import Todo
from tododeck.schemas.category import CategoryAttributes
from tododeck.schemas.jsonapi import parse_document, validate_attributes
from tododeck.schemas.serializers import document, serialize_category
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"], default_response_class=JsonApiResponse)

@router.get("")
def get_categories(
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """List the caller's categories by sort order"""
    categories = db.query(Category)\
                   .filter(Category.user_id == context.user_id)\
                   .order_by(Category.sort_order.asc(), Category.id.asc())\
                   .all()
    return document([serialize_category(category) for category in categories])

@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(
    body: bytes = Depends(request_body),
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """
    Create a new category
    - **name**: category name
    - **sort-order**: optional, defaults to one past the highest existing
    """
    payload = parse_document(body, "categories")
    attributes = validate_attributes(CategoryAttributes, payload.attributes)

    sort_order = attributes.sort_order
    if sort_order is None:
        sort_order = next_sort_order(db, context.user_id)

    category = Category(
        user_id=context.user_id,
        name=attributes.name,
        sort_order=sort_order
    )
    db.add(category)
    commit_or_raise(db)
    db.refresh(category)
    logger.info(f"User {context.user_id} created category {category.id}")
    return document(serialize_category(category))

@router.get("/{category_id}")
def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """Get a specific category by ID"""
    category = get_category_or_404(db, context, category_id)
    return document(serialize_category(category))

@router.patch("/{category_id}")
def update_category(
    category_id: str,
    body: bytes = Depends(request_body),
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """Update a category (partial update allowed)"""
    category = get_category_or_404(db, context, category_id)
    payload = parse_document(body, "categories", expected_id=category_id)
    attributes = validate_attributes(CategoryAttributes, payload.attributes)

    update_data = attributes.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(category, field, value)

    commit_or_raise(db)
    db.refresh(category)
    logger.info(f"User {context.user_id} updated category {category.id}: {sorted(update_data)}")
    return document(serialize_category(category))

@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    context: RequestContext = Depends(get_request_context)
):
    """Delete a category; its todos keep existing without one"""
    category = get_category_or_404(db, context, category_id)

    db.query(Todo)\
      .filter(Todo.user_id == context.user_id, Todo.category_id == category.id)\
      .update({Todo.category_id: None}, synchronize_session=False)
    db.delete(category)
    db.commit()
    logger.info(f"User {context.user_id} deleted category {category_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
