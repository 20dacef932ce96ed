from fastapi import APIRouter

from coffee_pos.api.v1.routers import cart as cart_router
from coffee_pos.api.v1.routers import promotions as promotions_router

router = APIRouter()

router.include_router(cart_router.router)
router.include_router(promotions_router.router)
