"""
Todo status classification.

A todo's status is never stored. It is derived from three nullable
timestamps relative to "now":

    completed   completed_at is set
    deleted     deleted_at is set
    open        neither completed_at nor deleted_at is set
    available   open, and not deferred past now
    future      open, and deferred past now
    tomorrow    future, and deferred less than one day past now

completed and deleted are independent of each other and of deferral.
tomorrow is a strict subset of future.

The same rules are expressed twice: as plain Python predicates over a todo
(classify) and as SQL conditions over the todos table (status_condition).
"""
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Optional, Set
from sqlalchemy import and_, false, or_
from tododeck.models.todo import Todo

TOMORROW_WINDOW = timedelta(days=1)

class TodoStatus(str, Enum):
    OPEN = "open"
    AVAILABLE = "available"
    FUTURE = "future"
    TOMORROW = "tomorrow"
    COMPLETED = "completed"
    DELETED = "deleted"

def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize a timestamp to aware UTC; naive values are taken as UTC"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

def classify(todo, now: datetime) -> Set[TodoStatus]:
    """Return every status that applies to ``todo`` at ``now``.

    ``todo`` is anything exposing completed_at, deleted_at and deferred_until.
    """
    now = as_utc(now)
    completed_at = as_utc(todo.completed_at)
    deleted_at = as_utc(todo.deleted_at)
    deferred_until = as_utc(todo.deferred_until)

    statuses = set()
    if completed_at is not None:
        statuses.add(TodoStatus.COMPLETED)
    if deleted_at is not None:
        statuses.add(TodoStatus.DELETED)

    if completed_at is None and deleted_at is None:
        statuses.add(TodoStatus.OPEN)
        if deferred_until is None or deferred_until <= now:
            statuses.add(TodoStatus.AVAILABLE)
        else:
            statuses.add(TodoStatus.FUTURE)
            if deferred_until < now + TOMORROW_WINDOW:
                statuses.add(TodoStatus.TOMORROW)

    return statuses

def status_condition(todo_status: TodoStatus, now: datetime):
    """SQL condition selecting todos that have ``todo_status`` at ``now``"""
    now = as_utc(now)
    is_open = and_(Todo.completed_at.is_(None), Todo.deleted_at.is_(None))

    if todo_status == TodoStatus.COMPLETED:
        return Todo.completed_at.isnot(None)
    if todo_status == TodoStatus.DELETED:
        return Todo.deleted_at.isnot(None)
    if todo_status == TodoStatus.OPEN:
        return is_open
    if todo_status == TodoStatus.AVAILABLE:
        return and_(is_open, or_(Todo.deferred_until.is_(None), Todo.deferred_until <= now))
    if todo_status == TodoStatus.FUTURE:
        return and_(is_open, Todo.deferred_until > now)
    if todo_status == TodoStatus.TOMORROW:
        return and_(
            is_open,
            Todo.deferred_until > now,
            Todo.deferred_until < now + TOMORROW_WINDOW
        )
    raise ValueError(f"Unknown todo status: {todo_status}")

def statuses_condition(statuses: Iterable[TodoStatus], now: datetime):
    """Union (OR) of the conditions of every requested status"""
    conditions = [status_condition(todo_status, now) for todo_status in sorted(statuses)]
    if not conditions:
        return false()
    return or_(*conditions)

def parse_statuses(raw: Optional[str]) -> Set[TodoStatus]:
    """Parse a comma separated filter[status] value.

    Blank entries and unknown names are dropped.
    """
    if not raw:
        return set()

    statuses = set()
    for name in raw.split(","):
        name = name.strip().lower()
        try:
            statuses.add(TodoStatus(name))
        except ValueError:
            continue
    return statuses
