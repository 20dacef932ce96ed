import logging

from fastapi import APIRouter, Depends, HTTPException

from coffee_pos.api.v1.deps import get_cart, get_cart_registry, get_catalog, get_order_gateway
from coffee_pos.schemas.cart import (
    AddToCartRequest,
    CartLineItemOut,
    CartOut,
    CartSessionOut,
    ItemCustomization,
)
from coffee_pos.schemas.commands import (
    CartCommandRequest,
    SelectExtraShotCommand,
    SelectIceCommand,
    SelectSizeCommand,
    SelectSugarCommand,
    SetIceCommand,
    SetSizeCommand,
    SetSugarCommand,
    ToggleExtraShotCommand,
)
from coffee_pos.schemas.orders import CheckoutRequest, MissingSelectionOut, SubmissionResult
from coffee_pos.services.cart.exceptions import CartSessionNotFoundError, CartValidationError
from coffee_pos.services.cart.registry import CartRegistry
from coffee_pos.services.cart.store import CartStore
from coffee_pos.services.catalog.repository import CatalogRepository
from coffee_pos.services.checkout import (
    CheckoutValidationError,
    EmptyCartError,
    OrderSubmissionService,
    PartialOrderSubmissionError,
    UnavailableProductError,
)
from coffee_pos.services.orders.base import OrderGateway, OrderGatewayError
from coffee_pos.services.pricing.line_item import discounted_unit_price, line_total, unit_price

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])

# option commands that arrive as catalog ids
SELECTION_COMMANDS = (SelectSizeCommand, SelectSugarCommand, SelectIceCommand, SelectExtraShotCommand)


def build_cart_out(session_id: str, store: CartStore) -> CartOut:
    """cart lines plus one summary evaluated at a single instant."""
    items = [
        CartLineItemOut(
            **item.model_dump(),
            unit_price=unit_price(item),
            discounted_unit_price=discounted_unit_price(item),
            line_total=line_total(item),
        )
        for item in store.items
    ]
    return CartOut(
        session_id=session_id,
        items=items,
        discount=store.discount,
        note=store.note,
        summary=store.summary(),
    )


@router.post("/sessions", response_model=CartSessionOut)
def open_session(
    registry: CartRegistry = Depends(get_cart_registry),
    catalog: CatalogRepository = Depends(get_catalog),
):
    """start a new till session with the current promotion catalog."""
    session_id, store = registry.create(catalog.list_promotions())
    return CartSessionOut(session_id=session_id, cart=build_cart_out(session_id, store))


@router.get("/{session_id}", response_model=CartOut)
def read_cart(session_id: str, store: CartStore = Depends(get_cart)):
    return build_cart_out(session_id, store)


@router.post("/{session_id}/items", response_model=CartOut)
def add_item(
    session_id: str,
    payload: AddToCartRequest,
    store: CartStore = Depends(get_cart),
    catalog: CatalogRepository = Depends(get_catalog),
):
    """add a product by catalog ids; every option must belong to the product."""
    product = catalog.get_product_snapshot(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")

    size = None
    if payload.size_id is not None:
        size = catalog.get_size(product.id, payload.size_id)
        if size is None:
            raise HTTPException(status_code=400, detail="Size not available for this product")

    sugar = None
    if payload.sugar_id is not None:
        sugar = catalog.get_sugar(product.id, payload.sugar_id)
        if sugar is None:
            raise HTTPException(status_code=400, detail="Sugar level not available for this product")

    ice = None
    if payload.ice_id is not None:
        ice = catalog.get_ice(product.id, payload.ice_id)
        if ice is None:
            raise HTTPException(status_code=400, detail="Ice level not available for this product")

    extra_shot = None
    if payload.extra_shot_id is not None:
        extra_shot = catalog.get_extra_shot(product.id, payload.extra_shot_id)
        if extra_shot is None:
            raise HTTPException(status_code=400, detail="Extra shot not available for this product")

    customization = ItemCustomization(
        size=size,
        sugar=sugar,
        sugar_id=payload.sugar_id,
        ice=ice,
        ice_id=payload.ice_id,
        extra_shot=extra_shot,
        note=payload.note,
        quantity=payload.quantity,
    )
    try:
        store.add_item(product, customization)
    except CartValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return build_cart_out(session_id, store)


def resolve_selection(command, store: CartStore, catalog: CatalogRepository):
    """turn an id-based option command into a store command; None when the line is gone."""
    item = store.get_item(command.cart_item_id)
    if item is None:
        return None

    if isinstance(command, SelectSizeCommand):
        size = None
        if command.size_id is not None:
            size = catalog.get_size(item.product_id, command.size_id)
            if size is None:
                raise HTTPException(status_code=400, detail="Size not available for this product")
        return SetSizeCommand(cart_item_id=item.cart_item_id, size=size)

    if isinstance(command, SelectSugarCommand):
        sugar = None
        if command.sugar_id is not None:
            sugar = catalog.get_sugar(item.product_id, command.sugar_id)
            if sugar is None:
                raise HTTPException(status_code=400, detail="Sugar level not available for this product")
        return SetSugarCommand(cart_item_id=item.cart_item_id, sugar=sugar, sugar_id=command.sugar_id)

    if isinstance(command, SelectIceCommand):
        ice = None
        if command.ice_id is not None:
            ice = catalog.get_ice(item.product_id, command.ice_id)
            if ice is None:
                raise HTTPException(status_code=400, detail="Ice level not available for this product")
        return SetIceCommand(cart_item_id=item.cart_item_id, ice=ice, ice_id=command.ice_id)

    extra_shot = catalog.get_extra_shot(item.product_id, command.extra_shot_id)
    if extra_shot is None:
        raise HTTPException(status_code=400, detail="Extra shot not available for this product")
    return ToggleExtraShotCommand(cart_item_id=item.cart_item_id, extra_shot=extra_shot)


@router.post("/{session_id}/commands", response_model=CartOut)
def run_command(
    session_id: str,
    payload: CartCommandRequest,
    store: CartStore = Depends(get_cart),
    catalog: CatalogRepository = Depends(get_catalog),
):
    command = payload.command
    if isinstance(command, SELECTION_COMMANDS):
        command = resolve_selection(command, store, catalog)
        if command is None:
            return build_cart_out(session_id, store)
    try:
        store.dispatch(command)
    except CartValidationError as e:
        logger.warning("cart %s rejected %s: %s", session_id, payload.command.kind, e)
        raise HTTPException(status_code=400, detail=str(e))
    return build_cart_out(session_id, store)


@router.post("/{session_id}/promotions/sync", response_model=CartOut)
def sync_promotions(
    session_id: str,
    store: CartStore = Depends(get_cart),
    catalog: CatalogRepository = Depends(get_catalog),
):
    store.set_promotions(catalog.list_promotions())
    return build_cart_out(session_id, store)


@router.post("/{session_id}/checkout", response_model=SubmissionResult)
def checkout(
    session_id: str,
    payload: CheckoutRequest,
    store: CartStore = Depends(get_cart),
    catalog: CatalogRepository = Depends(get_catalog),
    gateway: OrderGateway = Depends(get_order_gateway),
):
    service = OrderSubmissionService(gateway, catalog)
    try:
        return service.submit(
            store,
            payment_method=payload.payment_method,
            amount_paid=payload.amount_paid,
            order_status=payload.order_status,
        )
    except (EmptyCartError, UnavailableProductError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except CheckoutValidationError as e:
        missing = [
            MissingSelectionOut(cart_item_id=m.cart_item_id, product_name=m.product_name, fields=m.fields).model_dump()
            for m in e.missing
        ]
        raise HTTPException(status_code=400, detail={"message": str(e), "missing": missing})
    except PartialOrderSubmissionError as e:
        raise HTTPException(
            status_code=502,
            detail={"message": str(e), "order_id": e.order_id, "failed_cart_item_ids": e.failed_cart_item_ids},
        )
    except OrderGatewayError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.delete("/{session_id}")
def close_session(session_id: str, registry: CartRegistry = Depends(get_cart_registry)):
    try:
        registry.drop(session_id)
    except CartSessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"status": "ok"}
