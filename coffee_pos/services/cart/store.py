"""
Session cart store.

One ``CartStore`` is the single-writer cart state of one cashier session:
line items, the manual discount, the order note and the promotion
catalog injected for this session. Mutations change the owned state in
place; every total is recomputed from that state on each read, so there
is nothing cached that could go stale.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from functools import singledispatchmethod
from typing import Any, Callable, Iterable, List, Optional, Tuple
from uuid import uuid4

from coffee_pos.core.config import settings
from coffee_pos.schemas.cart import (
    CartLineItem,
    CartSummary,
    DiscountType,
    ExtraShotSelection,
    ItemCustomization,
    ManualDiscount,
    SizeSelection,
)
from coffee_pos.schemas.catalog import ProductSnapshot
from coffee_pos.schemas.commands import (
    AddItemCommand,
    ClearCartCommand,
    RemoveDiscountCommand,
    RemoveExtraShotCommand,
    RemoveItemCommand,
    RemoveNoteCommand,
    SetDiscountCommand,
    SetIceCommand,
    SetItemNoteCommand,
    SetNoteCommand,
    SetPromotionsCommand,
    SetSizeCommand,
    SetSugarCommand,
    ToggleExtraShotCommand,
    UpdateQuantityCommand,
)
from coffee_pos.schemas.promotions import AppliedPromotion, Promotion, PromotionResult
from coffee_pos.services.pricing.line_item import (
    cart_subtotal,
    cart_subtotal_before_product_discounts,
    discounted_unit_price,
    unit_price,
)
from coffee_pos.services.pricing.money import ZERO, to_quantity
from coffee_pos.services.promo.display import visible_promotions
from coffee_pos.services.promo.evaluator import evaluate_promotions
from coffee_pos.services.promo.manual import manual_discount_amount, parse_manual_discount

from .exceptions import InvalidNoteError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ItemListener = Callable[[CartLineItem], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_cart_item_id() -> str:
    return f"cart_{uuid4().hex[:12]}"


def _line_key(product_id: int, size, sugar_id, sugar, ice_id, ice, extra_shot) -> Tuple:
    # ids win over labels; a label alone still keeps two choices apart
    return (
        product_id,
        size.id if size is not None else None,
        sugar_id if sugar_id is not None else sugar,
        ice_id if ice_id is not None else ice,
        extra_shot.id if extra_shot is not None else None,
    )


def _item_key(item: CartLineItem) -> Tuple:
    return _line_key(item.product_id, item.size, item.sugar_id, item.sugar, item.ice_id, item.ice, item.extra_shot)


def _clean_note(note: Optional[str], required: bool = False) -> Optional[str]:
    text = (note or "").strip()
    if not text:
        if required:
            raise InvalidNoteError("Please enter a valid note")
        return None
    if len(text) > settings.NOTE_MAX_LENGTH:
        raise InvalidNoteError(f"Note cannot exceed {settings.NOTE_MAX_LENGTH} characters")
    return text


class CartStore:
    """Cart state for one cashier session plus its derived totals."""

    def __init__(
        self,
        promotions: Optional[Iterable[Promotion]] = None,
        clock: Optional[Clock] = None,
        on_item_added: Optional[ItemListener] = None,
    ):
        self._items: List[CartLineItem] = []
        self.discount: Optional[ManualDiscount] = None
        self.note: Optional[str] = None
        self._promotions: List[Promotion] = list(promotions or [])
        self._clock: Clock = clock or utc_now
        self._listeners: List[ItemListener] = []
        if on_item_added is not None:
            self._listeners.append(on_item_added)

    # ------------------------------------------------------------------
    # state access
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[CartLineItem]:
        return list(self._items)

    @property
    def promotions(self) -> List[Promotion]:
        return list(self._promotions)

    def get_item(self, cart_item_id: str) -> Optional[CartLineItem]:
        for item in self._items:
            if item.cart_item_id == cart_item_id:
                return item
        return None

    def subscribe(self, listener: ItemListener) -> None:
        """register a callback fired with the line that was added or incremented."""
        self._listeners.append(listener)

    def _notify_item_added(self, item: CartLineItem) -> None:
        for listener in self._listeners:
            listener(item)

    def _replace_item(self, cart_item_id: str, **changes: Any) -> Optional[CartLineItem]:
        for index, item in enumerate(self._items):
            if item.cart_item_id == cart_item_id:
                updated = item.model_copy(update=changes)
                self._items[index] = updated
                return updated
        logger.debug("cart item %s not found, nothing updated", cart_item_id)
        return None

    # ------------------------------------------------------------------
    # line item mutations
    # ------------------------------------------------------------------

    def add_item(self, product: ProductSnapshot, customization: Optional[ItemCustomization] = None) -> CartLineItem:
        """Add one customized unit of ``product``.

        A line with the same product, size, sugar, ice and extra shot is
        incremented instead of duplicated. A full customization carries
        its own quantity (defaults to 1). New lines snapshot the product's
        price and discount.
        """
        options = customization or ItemCustomization()
        key = _line_key(
            product.id, options.size, options.sugar_id, options.sugar,
            options.ice_id, options.ice, options.extra_shot,
        )

        for index, existing in enumerate(self._items):
            if _item_key(existing) == key:
                updated = existing.model_copy(update={"quantity": existing.quantity + options.quantity})
                self._items[index] = updated
                logger.debug("incremented %s to %d", updated.cart_item_id, updated.quantity)
                self._notify_item_added(updated)
                return updated

        item = CartLineItem(
            cart_item_id=_new_cart_item_id(),
            product_id=product.id,
            name=product.name,
            image=product.image,
            quantity=options.quantity,
            base_price=product.price,
            discount=product.discount,
            size=options.size,
            sugar=options.sugar,
            sugar_id=options.sugar_id,
            ice=options.ice,
            ice_id=options.ice_id,
            extra_shot=options.extra_shot,
            note=_clean_note(options.note),
        )
        self._items.append(item)
        logger.info("added %s (%s) x%d to cart", product.name, item.cart_item_id, item.quantity)
        self._notify_item_added(item)
        return item

    def remove_item(self, cart_item_id: str) -> None:
        before = len(self._items)
        self._items = [item for item in self._items if item.cart_item_id != cart_item_id]
        if len(self._items) != before:
            logger.info("removed %s from cart", cart_item_id)

    def update_item_quantity(self, cart_item_id: str, quantity: Any) -> Optional[CartLineItem]:
        """set the line quantity; zero, negative or unparseable removes the line.

        Fractions are truncated first, so 0.5 also removes the line.
        """
        qty = to_quantity(quantity)
        if qty <= 0:
            self.remove_item(cart_item_id)
            return None
        return self._replace_item(cart_item_id, quantity=qty)

    def update_item_size(self, cart_item_id: str, size: Optional[SizeSelection]) -> Optional[CartLineItem]:
        return self._replace_item(cart_item_id, size=size)

    def update_item_sugar(self, cart_item_id: str, sugar: Optional[str], sugar_id: Optional[int] = None) -> Optional[CartLineItem]:
        return self._replace_item(cart_item_id, sugar=sugar, sugar_id=sugar_id)

    def update_item_ice(self, cart_item_id: str, ice: Optional[str], ice_id: Optional[int] = None) -> Optional[CartLineItem]:
        return self._replace_item(cart_item_id, ice=ice, ice_id=ice_id)

    def toggle_extra_shot(self, cart_item_id: str, extra_shot: ExtraShotSelection) -> Optional[CartLineItem]:
        """Select ``extra_shot`` on the line, or clear it if it is already the selected one.

        A line carries at most one extra shot, so picking a different
        shot replaces the current one.
        """
        item = self.get_item(cart_item_id)
        if item is None:
            return None
        if item.extra_shot is not None and item.extra_shot.id == extra_shot.id:
            return self._replace_item(cart_item_id, extra_shot=None)
        return self._replace_item(cart_item_id, extra_shot=extra_shot)

    update_item_extra_shot = toggle_extra_shot

    def remove_item_extra_shot(self, cart_item_id: str) -> Optional[CartLineItem]:
        return self._replace_item(cart_item_id, extra_shot=None)

    def update_item_note(self, cart_item_id: str, note: Optional[str]) -> Optional[CartLineItem]:
        return self._replace_item(cart_item_id, note=_clean_note(note))

    def remove_all_items(self) -> None:
        self._items = []
        logger.info("all items removed from cart")

    # ------------------------------------------------------------------
    # order-level mutations
    # ------------------------------------------------------------------

    def set_discount(self, discount_type: DiscountType, value: Any) -> ManualDiscount:
        """replace the manual discount; raises InvalidDiscountError for junk input."""
        self.discount = parse_manual_discount(discount_type, value)
        logger.info("%s cart discount set to %s", discount_type, self.discount.value)
        return self.discount

    def remove_discount(self) -> None:
        self.discount = None

    def set_note(self, note: str) -> str:
        self.note = _clean_note(note, required=True)
        return self.note

    def remove_note(self) -> None:
        self.note = None

    def set_promotions(self, promotions: Optional[Iterable[Promotion]]) -> None:
        self._promotions = list(promotions or [])
        logger.debug("promotion catalog replaced (%d promotions)", len(self._promotions))

    def remove_all(self) -> None:
        """clear the sale: items, manual discount and note. Promotions stay."""
        self._items = []
        self.discount = None
        self.note = None
        logger.info("cart cleared")

    # ------------------------------------------------------------------
    # tagged commands
    # ------------------------------------------------------------------

    @singledispatchmethod
    def dispatch(self, command):
        raise TypeError(f"Unknown cart command: {type(command).__name__}")

    @dispatch.register
    def _(self, command: AddItemCommand):
        return self.add_item(command.product, command.customization)

    @dispatch.register
    def _(self, command: RemoveItemCommand):
        return self.remove_item(command.cart_item_id)

    @dispatch.register
    def _(self, command: UpdateQuantityCommand):
        return self.update_item_quantity(command.cart_item_id, command.quantity)

    @dispatch.register
    def _(self, command: SetSizeCommand):
        return self.update_item_size(command.cart_item_id, command.size)

    @dispatch.register
    def _(self, command: SetSugarCommand):
        return self.update_item_sugar(command.cart_item_id, command.sugar, command.sugar_id)

    @dispatch.register
    def _(self, command: SetIceCommand):
        return self.update_item_ice(command.cart_item_id, command.ice, command.ice_id)

    @dispatch.register
    def _(self, command: ToggleExtraShotCommand):
        return self.toggle_extra_shot(command.cart_item_id, command.extra_shot)

    @dispatch.register
    def _(self, command: RemoveExtraShotCommand):
        return self.remove_item_extra_shot(command.cart_item_id)

    @dispatch.register
    def _(self, command: SetItemNoteCommand):
        return self.update_item_note(command.cart_item_id, command.note)

    @dispatch.register
    def _(self, command: SetDiscountCommand):
        return self.set_discount(command.type, command.value)

    @dispatch.register
    def _(self, command: RemoveDiscountCommand):
        return self.remove_discount()

    @dispatch.register
    def _(self, command: SetNoteCommand):
        return self.set_note(command.note)

    @dispatch.register
    def _(self, command: RemoveNoteCommand):
        return self.remove_note()

    @dispatch.register
    def _(self, command: SetPromotionsCommand):
        return self.set_promotions(command.promotions)

    @dispatch.register
    def _(self, command: ClearCartCommand):
        return self.remove_all()

    # ------------------------------------------------------------------
    # derived reads
    # ------------------------------------------------------------------

    def _resolve_now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else self._clock()

    def calculate_item_price(self, item: CartLineItem) -> Decimal:
        """per-unit price with modifiers, before the product discount."""
        return unit_price(item)

    def calculate_item_price_with_product_discount(self, item: CartLineItem) -> Decimal:
        return discounted_unit_price(item)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self._items)

    def get_cart_subtotal(self) -> Decimal:
        return cart_subtotal(self._items)

    def get_cart_subtotal_before_product_discounts(self) -> Decimal:
        return cart_subtotal_before_product_discounts(self._items)

    def get_total_product_discounts(self) -> Decimal:
        return self.get_cart_subtotal_before_product_discounts() - self.get_cart_subtotal()

    def evaluate_promotions(self, now: Optional[datetime] = None) -> PromotionResult:
        return evaluate_promotions(
            self._items,
            self._promotions,
            self._resolve_now(now),
            subtotal=self.get_cart_subtotal(),
        )

    def get_promotion_discount(self, now: Optional[datetime] = None) -> Decimal:
        return self.evaluate_promotions(now).promotion_discount

    def get_applied_promotions(self, now: Optional[datetime] = None) -> List[AppliedPromotion]:
        return self.evaluate_promotions(now).applied_promotions

    def get_discount_amount(self, now: Optional[datetime] = None) -> Decimal:
        """the manual cashier discount only, after promotions."""
        base = self.get_cart_subtotal() - self.get_promotion_discount(now)
        return manual_discount_amount(self.discount, base)

    def get_cart_total(self, now: Optional[datetime] = None) -> Decimal:
        at = self._resolve_now(now)
        subtotal = self.get_cart_subtotal()
        promotion_discount = self.get_promotion_discount(at)
        manual = manual_discount_amount(self.discount, subtotal - promotion_discount)
        return max(ZERO, subtotal - promotion_discount - manual)

    def summary(self, now: Optional[datetime] = None) -> CartSummary:
        """every derived figure evaluated at one instant."""
        at = self._resolve_now(now)
        subtotal = self.get_cart_subtotal()
        before_discounts = self.get_cart_subtotal_before_product_discounts()
        promotions = self.evaluate_promotions(at)
        manual = manual_discount_amount(self.discount, subtotal - promotions.promotion_discount)
        return CartSummary(
            subtotal=subtotal,
            subtotal_before_product_discounts=before_discounts,
            product_discounts=before_discounts - subtotal,
            promotion_discount=promotions.promotion_discount,
            applied_promotions=visible_promotions(promotions.applied_promotions),
            discount_amount=manual,
            total=max(ZERO, subtotal - promotions.promotion_discount - manual),
            item_count=self.get_item_count(),
            evaluated_at=at,
        )
