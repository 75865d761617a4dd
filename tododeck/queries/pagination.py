from typing import List, Optional, Set, Tuple
from sqlalchemy.orm import Query
from tododeck.config.settings import settings
from tododeck.queries.status import TodoStatus
import logging

logger = logging.getLogger(__name__)

# Only single-status views of archived todos are paged
PAGINATED_STATUSES = {TodoStatus.COMPLETED, TodoStatus.DELETED}

def should_paginate(statuses: Set[TodoStatus]) -> bool:
    return len(statuses) == 1 and next(iter(statuses)) in PAGINATED_STATUSES

def page_count(total_count: int, per_page: int) -> int:
    return (total_count + per_page - 1) // per_page

def paginate(
    query: Query,
    statuses: Set[TodoStatus],
    page_number: Optional[int] = None,
    per_page: Optional[int] = None
) -> Tuple[List, Optional[int]]:
    """
    Apply the listing page policy to an ordered query.

    Returns the rows to render and the total page count, or None for the
    page count when the status set is not paged.
    """
    if not should_paginate(statuses):
        return query.all(), None

    per_page = per_page or settings.PAGE_SIZE
    page_number = max(page_number or 1, 1)

    total_count = query.count()
    pages = page_count(total_count, per_page)
    if page_number > pages:
        # Past the last page; never hand the store an out-of-range offset
        logger.debug(f"Page {page_number} is past the last of {pages} pages")
        return [], pages

    items = query.offset((page_number - 1) * per_page).limit(per_page).all()
    logger.debug(f"Page {page_number} of {pages} ({total_count} todos)")
    return items, pages
