from storefront.domain.catalog.models import (
    CatalogQuery,
    CatalogQueryResult,
    Product,
    ProductCategory,
    Review,
    SortOption,
)
from storefront.domain.catalog.store import CatalogStore

__all__ = [
    "CatalogQuery",
    "CatalogQueryResult",
    "CatalogStore",
    "Product",
    "ProductCategory",
    "Review",
    "SortOption",
]
