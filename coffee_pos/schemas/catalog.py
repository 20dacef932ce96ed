from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field

from .types import Money


class ProductSnapshot(BaseModel):
    """the catalog fields a cart line captures at add time."""
    id: int
    name: str
    image: Optional[str] = None
    price: Money
    discount: Money = Decimal("0")  # percent

    class Config:
        from_attributes = True


class ProductOptions(BaseModel):
    """option sets a product offers, used by checkout validation."""
    product_id: int
    size_ids: List[int] = Field(default_factory=list)
    sugar_ids: List[int] = Field(default_factory=list)

    @property
    def has_sizes(self) -> bool:
        return bool(self.size_ids)

    @property
    def has_sugars(self) -> bool:
        return bool(self.sugar_ids)
