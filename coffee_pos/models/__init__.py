from .models import Product, Size, Sugar, Ice, ExtraShot, Promotion

__all__ = [
    "Product",
    "Size",
    "Sugar",
    "Ice",
    "ExtraShot",
    "Promotion",
]
