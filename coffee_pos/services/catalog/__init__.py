from .repository import CatalogRepository

__all__ = ['CatalogRepository']
