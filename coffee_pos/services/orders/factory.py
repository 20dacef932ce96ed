import logging
from typing import Optional

from coffee_pos.core.config import settings

from .base import OrderGateway
from .http import HttpOrderGateway
from .mock import MockOrderGateway

logger = logging.getLogger(__name__)


def get_order_gateway(provider: Optional[str] = None) -> OrderGateway:
    provider = (provider or settings.ORDER_API_PROVIDER).lower()
    if provider == "mock":
        return MockOrderGateway()
    if provider == "http":
        return HttpOrderGateway()
    logger.warning("unknown ORDER_API_PROVIDER %r, falling back to mock", provider)
    return MockOrderGateway()
