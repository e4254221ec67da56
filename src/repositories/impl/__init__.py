"""Repositories implementation package."""

from .catalog_repository import CatalogRepository
from .product_repository import ProductRepository, TextIndexProbe

__all__ = ["CatalogRepository", "ProductRepository", "TextIndexProbe"]
