from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from coffee_pos.db.session import get_db
from coffee_pos.services.cart.exceptions import CartSessionNotFoundError
from coffee_pos.services.cart.registry import CartRegistry
from coffee_pos.services.cart.store import CartStore
from coffee_pos.services.catalog.repository import CatalogRepository
from coffee_pos.services.orders.base import OrderGateway


def get_cart_registry(request: Request) -> CartRegistry:
    return request.app.state.cart_registry


def get_order_gateway(request: Request) -> OrderGateway:
    return request.app.state.order_gateway


def get_catalog(db: Session = Depends(get_db)) -> CatalogRepository:
    return CatalogRepository(db)


def get_cart(session_id: str, registry: CartRegistry = Depends(get_cart_registry)) -> CartStore:
    """resolve the session cart or 404."""
    try:
        return registry.get(session_id)
    except CartSessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
