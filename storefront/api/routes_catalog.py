from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from storefront.api.utils import get_storefront
from storefront.domain.catalog.models import CatalogQuery, ProductCategory, SortOption
from storefront.session import StorefrontSession

router = APIRouter(tags=["catalog"])


@router.get("/catalog/products")
def list_products(
    q: str = Query(default=""),
    category: ProductCategory | None = Query(default=None),
    min_price: int | None = Query(default=None, ge=0, description="int cents"),
    max_price: int | None = Query(default=None, ge=0, description="int cents"),
    sort: SortOption = Query(default=SortOption.FEATURED),
    storefront: StorefrontSession = Depends(get_storefront),
):
    result = storefront.catalog.query(
        CatalogQuery(text=q, category=category, min_price=min_price, max_price=max_price, sort=sort)
    )
    return result.model_dump(mode="json")


@router.get("/catalog/featured")
def list_featured(storefront: StorefrontSession = Depends(get_storefront)):
    products = storefront.catalog.featured()
    return {"count": len(products), "products": [p.model_dump(mode="json") for p in products]}


@router.get("/catalog/categories")
def list_categories(storefront: StorefrontSession = Depends(get_storefront)):
    return {"categories": [c.value for c in storefront.catalog.categories()]}


@router.get("/catalog/products/{product_id}")
def get_product(product_id: str, storefront: StorefrontSession = Depends(get_storefront)):
    product = storefront.catalog.get(product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="product not found")
    return product.model_dump(mode="json")
