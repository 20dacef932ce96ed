import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coffee_pos.core.config import settings
from coffee_pos.api.v1.api import router as api_v1_router
from coffee_pos.services.cart.registry import CartRegistry
from coffee_pos.services.orders.factory import get_order_gateway

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
)

app = FastAPI(title="Coffee POS API", version="0.1.0")

# set up CORS so the till frontend can talk to us
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# carts live in process memory, one per till session
app.state.cart_registry = CartRegistry()
app.state.order_gateway = get_order_gateway()

# mount our API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.on_event("shutdown")
def close_order_gateway():
    app.state.order_gateway.close()


@app.get("/health")
def health():
    return {"status": "ok", "env": settings.APP_ENV}
