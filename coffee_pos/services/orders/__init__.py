from .base import OrderGateway, OrderGatewayError
from .mock import MockOrderGateway
from .http import HttpOrderGateway
from .factory import get_order_gateway

__all__ = [
    'OrderGateway',
    'OrderGatewayError',
    'MockOrderGateway',
    'HttpOrderGateway',
    'get_order_gateway',
]
