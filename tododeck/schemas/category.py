from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from tododeck.models.category import Category
from tododeck.schemas.jsonapi import check_attribute_map

CATEGORY_ATTRIBUTES = {
    "name": "name",
    "sort_order": "sort-order",
}

check_attribute_map(Category, CATEGORY_ATTRIBUTES)

# sort_order is a 32-bit integer column
MIN_SORT_ORDER = -2**31
MAX_SORT_ORDER = 2**31 - 1

class CategoryAttributes(BaseModel):
    """
    Schema for creating or updating a category

    A missing name is left for the database to reject; a blank one is allowed.
    """
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    sort_order: Optional[int] = Field(
        default=None,
        alias=CATEGORY_ATTRIBUTES["sort_order"],
        ge=MIN_SORT_ORDER,
        le=MAX_SORT_ORDER
    )
