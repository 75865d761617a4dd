from typing import Optional
from sqlalchemy import func
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.orm import Session
from tododeck.api.errors import ConstraintViolation, NotFound
from tododeck.auth.dependencies import RequestContext
from tododeck.models.category import Category
from tododeck.models.todo import Todo
from tododeck.schemas.category import MAX_SORT_ORDER
import logging

logger = logging.getLogger(__name__)

def parse_id(raw_id: str) -> Optional[int]:
    """Path ids are strings on the wire; anything non-numeric matches nothing"""
    try:
        return int(raw_id)
    except (TypeError, ValueError):
        return None

def get_todo_or_404(db: Session, context: RequestContext, todo_id: str) -> Todo:
    """
    Get one of the caller's todos or raise 404.

    Args:
        db: Database session
        context: Authenticated request context
        todo_id: Id taken from the URL path

    Returns:
        Todo: Todo object if found and owned by the caller

    Raises:
        NotFound: todo is absent or belongs to another user
    """
    todo = db.query(Todo).filter(
        Todo.id == parse_id(todo_id),
        Todo.user_id == context.user_id
    ).first()
    if not todo:
        raise NotFound()
    return todo

def get_category_or_404(db: Session, context: RequestContext, category_id: str) -> Category:
    """Get one of the caller's categories or raise 404"""
    category = find_owned_category(db, context, category_id)
    if not category:
        raise NotFound()
    return category

def find_owned_category(db: Session, context: RequestContext, category_id: str) -> Optional[Category]:
    return db.query(Category).filter(
        Category.id == parse_id(category_id),
        Category.user_id == context.user_id
    ).first()

def next_sort_order(db: Session, user_id: int) -> int:
    """One past the user's highest category sort order, 1 for the first

    Capped at MAX_SORT_ORDER, so a full range repeats the last position.
    """
    max_sort_order = db.query(func.max(Category.sort_order)).filter(
        Category.user_id == user_id
    ).scalar()
    return min((max_sort_order or 0) + 1, MAX_SORT_ORDER)

def commit_or_raise(db: Session) -> None:
    """Commit, turning store constraint failures into ConstraintViolation"""
    try:
        db.commit()
    except (IntegrityError, DataError) as e:
        db.rollback()
        logger.warning(f"Database constraint violation: {e.orig}")
        raise ConstraintViolation()
