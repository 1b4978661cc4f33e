from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Sequence

from pydantic import TypeAdapter, ValidationError

from storefront.domain.catalog.models import (
    CatalogQuery,
    CatalogQueryResult,
    Product,
    ProductCategory,
    SortOption,
)
from storefront.faults import NewestSortPolicy, SearchDropoutPolicy

logger = logging.getLogger(__name__)

_PRODUCT_LIST = TypeAdapter(list[Product])


class CatalogStore:
    def __init__(
        self,
        products: Iterable[Product] = (),
        newest_sort: NewestSortPolicy | None = None,
        search_dropout: SearchDropoutPolicy | None = None,
    ):
        self._products: tuple[Product, ...] = tuple(products)
        self._by_id = {p.id: p for p in self._products}
        if len(self._by_id) != len(self._products):
            logger.warning("catalog contains duplicate product ids; lookups resolve to the last record")
        self.newest_sort = newest_sort or NewestSortPolicy()
        self.search_dropout = search_dropout or SearchDropoutPolicy()

    @classmethod
    def load(
        cls,
        path: Path,
        newest_sort: NewestSortPolicy | None = None,
        search_dropout: SearchDropoutPolicy | None = None,
    ) -> "CatalogStore":
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            products = _PRODUCT_LIST.validate_python(raw)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("catalog unavailable at %s, starting empty: %s", path, exc)
            products = []
        return cls(products, newest_sort=newest_sort, search_dropout=search_dropout)

    def __len__(self) -> int:
        return len(self._products)

    def all(self) -> list[Product]:
        return list(self._products)

    def get(self, product_id: str) -> Product | None:
        return self._by_id.get(product_id)

    def featured(self) -> list[Product]:
        return [p for p in self._products if p.is_featured]

    def categories(self) -> list[ProductCategory]:
        seen: dict[ProductCategory, None] = {}
        for product in self._products:
            seen.setdefault(product.category, None)
        return list(seen)

    def by_category(self, category: ProductCategory, products: Sequence[Product] | None = None) -> list[Product]:
        source = self._products if products is None else products
        return [p for p in source if p.category == category]

    def search(self, text: str) -> list[Product]:
        if not text.strip():
            return list(self._products)
        needle = text.casefold()
        matches = [
            p
            for p in self._products
            if needle in p.name.casefold() or needle in p.brand.casefold() or needle in p.description.casefold()
        ]
        return self.search_dropout.apply(needle, matches)

    def sort(self, products: Sequence[Product], option: SortOption) -> list[Product]:
        # sorted() is stable, so equal keys keep catalog order.
        if option == SortOption.FEATURED:
            return sorted(products, key=lambda p: not p.is_featured)
        if option == SortOption.PRICE_ASC:
            return sorted(products, key=lambda p: p.price)
        if option == SortOption.PRICE_DESC:
            return sorted(products, key=lambda p: -p.price)
        if option == SortOption.RATING_DESC:
            return sorted(products, key=lambda p: -p.rating)
        if option == SortOption.NEWEST:
            return self.newest_sort.apply(products)
        raise ValueError(f"unsupported sort option: {option}")

    @staticmethod
    def price_range(products: Sequence[Product], min_price: int | None = None, max_price: int | None = None) -> list[Product]:
        return [
            p
            for p in products
            if (min_price is None or p.price >= min_price) and (max_price is None or p.price <= max_price)
        ]

    def query(self, query: CatalogQuery) -> CatalogQueryResult:
        products = self.search(query.text)
        if query.category is not None:
            products = self.by_category(query.category, products)
        products = self.price_range(products, query.min_price, query.max_price)
        products = self.sort(products, query.sort)
        return CatalogQueryResult(count=len(products), products=products)
