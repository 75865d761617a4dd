"""
Translate todo listing parameters into a single scoped SQLAlchemy query.
"""
from dataclasses import dataclass
from typing import Optional, Set
from sqlalchemy.orm import Query, Session
from tododeck.auth.dependencies import RequestContext
from tododeck.models.todo import Todo
from tododeck.queries.status import TodoStatus, statuses_condition
import logging

logger = logging.getLogger(__name__)

# Public sort names mapped onto columns
SORT_FIELDS = {
    "name": Todo.name,
    "completedAt": Todo.completed_at,
    "deletedAt": Todo.deleted_at,
}

@dataclass(frozen=True)
class SortSpec:
    field: str
    descending: bool = False

def parse_sort(raw: Optional[str]) -> Optional[SortSpec]:
    """Parse a sort parameter such as ``name`` or ``-completedAt``"""
    if not raw or not raw.strip():
        return None
    raw = raw.strip()
    if raw.startswith("-"):
        return SortSpec(field=raw[1:], descending=True)
    return SortSpec(field=raw)

def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

def build_todo_query(
    db: Session,
    context: RequestContext,
    statuses: Set[TodoStatus],
    search: Optional[str] = None,
    sort: Optional[SortSpec] = None
) -> Query:
    """Build the ordered, filtered query behind GET /todos.

    Rows are always restricted to the caller. A non-empty ``statuses`` set
    keeps rows matching any of the statuses; ``search`` narrows further on a
    case-insensitive substring of the name. Every ordering ends with
    created_at and id so consecutive pages never overlap.
    """
    query = db.query(Todo).filter(Todo.user_id == context.user_id)

    if statuses:
        query = query.filter(statuses_condition(statuses, context.now))

    if search and search.strip():
        query = query.filter(Todo.name.ilike(f"%{escape_like(search)}%", escape="\\"))

    order_by = []
    if sort is not None:
        column = SORT_FIELDS.get(sort.field)
        if column is None:
            logger.debug(f"Ignoring unsupported sort field {sort.field!r}")
        else:
            order_by.append(column.desc() if sort.descending else column.asc())
    order_by.extend([Todo.created_at.asc(), Todo.id.asc()])

    logger.debug(
        f"Todo query for user {context.user_id}: statuses={sorted(statuses)} "
        f"search={search!r} sort={sort}"
    )
    return query.order_by(*order_by)
