from typing import Iterable, List, Optional, Set
from tododeck.models.category import Category

SUPPORTED_INCLUDES = {"category"}

def parse_include(raw: Optional[str]) -> Set[str]:
    """Parse the include parameter, keeping only supported relationship paths"""
    if not raw:
        return set()
    return {path.strip() for path in raw.split(",")} & SUPPORTED_INCLUDES

def include_categories(todos: Iterable) -> List[Category]:
    """Categories referenced by ``todos``, deduplicated in first-seen order"""
    seen = set()
    categories = []
    for todo in todos:
        category = todo.category
        if category is None or category.id in seen:
            continue
        seen.add(category.id)
        categories.append(category)
    return categories
