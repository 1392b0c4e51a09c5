from .catalog import Product, ReportedProduct
from .category import Category


__all__ = [
    "Product",
    "Category",
    "ReportedProduct",
]
