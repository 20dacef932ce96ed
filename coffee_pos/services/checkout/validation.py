from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Protocol

from coffee_pos.schemas.cart import CartLineItem
from coffee_pos.schemas.catalog import ProductOptions

from .exceptions import CheckoutValidationError, UnavailableProductError

SIZE = "size"
SUGAR_LEVEL = "sugar level"


class ProductOptionsProvider(Protocol):
    def get_product_options(self, product_ids: Iterable[int]) -> Dict[int, ProductOptions]:
        ...


@dataclass
class MissingSelection:
    cart_item_id: str
    product_name: str
    fields: List[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"{self.product_name}: {' and '.join(self.fields)}"


def find_missing_selections(
    items: Iterable[CartLineItem],
    options: Dict[int, ProductOptions],
) -> List[MissingSelection]:
    """lines whose product offers sizes/sugars but that have none picked."""
    missing: List[MissingSelection] = []
    for item in items:
        product_options = options.get(item.product_id)
        if product_options is None:
            continue

        fields: List[str] = []
        if product_options.has_sizes and item.size is None:
            fields.append(SIZE)
        if product_options.has_sugars and item.sugar_id is None and not item.sugar:
            fields.append(SUGAR_LEVEL)
        if fields:
            missing.append(MissingSelection(item.cart_item_id, item.name, fields))
    return missing


def validate_cart_for_checkout(items: Iterable[CartLineItem], provider: ProductOptionsProvider) -> None:
    """Block checkout on unknown products or missing required options.

    The provider only returns products the catalog still sells, so any
    line without an entry is unavailable.
    """
    items = list(items)
    options = provider.get_product_options({item.product_id for item in items})

    unavailable = [item for item in items if item.product_id not in options]
    if unavailable:
        raise UnavailableProductError(
            [item.cart_item_id for item in unavailable],
            [item.name for item in unavailable],
        )

    missing = find_missing_selections(items, options)
    if missing:
        raise CheckoutValidationError(missing)
