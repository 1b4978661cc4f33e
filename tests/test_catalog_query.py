from __future__ import annotations

import json
import logging
import random

from storefront.domain.catalog.models import CatalogQuery, ProductCategory, SortOption
from storefront.domain.catalog.store import CatalogStore
from storefront.faults import NewestSortPolicy, SearchDropoutPolicy


def _ids(products):
    return [p.id for p in products]


def test_empty_search_returns_full_catalog(catalog, products):
    assert catalog.search("") == products
    assert catalog.search("   ") == products


def test_search_is_case_insensitive_over_name_brand_description(catalog):
    assert _ids(catalog.search("ultrabook")) == ["lap-1"]
    assert _ids(catalog.search("LUMEN")) == ["tv-1", "sh-1"]
    assert _ids(catalog.search("camera")) == ["ph-1"]
    assert catalog.search("no such thing") == []


def test_search_matches_raw_query_text(catalog):
    assert _ids(catalog.search("vivid")) == ["tv-1"]
    assert catalog.search(" vivid") == []
    assert _ids(catalog.search("4k ")) == ["tv-1"]


def test_search_is_deterministic_without_faults(catalog):
    first = catalog.search("smart")
    assert all(catalog.search("smart") == first for _ in range(50))


def test_by_category_keeps_load_order(catalog):
    assert _ids(catalog.by_category(ProductCategory.SMART_HOME)) == ["sh-1", "sh-2"]
    assert catalog.by_category(ProductCategory.LAPTOPS)[0].id == "lap-1"


def test_sort_featured_puts_featured_first_and_is_stable(catalog, products):
    assert _ids(catalog.sort(products, SortOption.FEATURED)) == ["lap-1", "ph-1", "tv-1", "gm-1", "sh-1", "sh-2"]


def test_sort_by_price(catalog, products):
    assert _ids(catalog.sort(products, SortOption.PRICE_ASC)) == ["sh-2", "sh-1", "gm-1", "tv-1", "ph-1", "lap-1"]
    assert _ids(catalog.sort(products, SortOption.PRICE_DESC)) == ["lap-1", "ph-1", "tv-1", "gm-1", "sh-1", "sh-2"]


def test_sort_by_rating_is_stable_for_ties(catalog, products):
    assert _ids(catalog.sort(products, SortOption.RATING_DESC)) == ["ph-1", "lap-1", "gm-1", "tv-1", "sh-1", "sh-2"]


def test_sort_newest_keeps_order_without_faults(catalog, products):
    assert catalog.sort(products, SortOption.NEWEST) == products


def test_sort_newest_reverses_when_fault_fires(products):
    store = CatalogStore(products, newest_sort=NewestSortPolicy(probability=1.0))
    assert store.sort(products, SortOption.NEWEST) == list(reversed(products))


def test_price_range_is_inclusive(catalog, products):
    assert _ids(catalog.price_range(products, 1999, 29999)) == ["gm-1", "sh-1", "sh-2"]
    assert _ids(catalog.price_range(products, min_price=79900)) == ["lap-1", "ph-1"]
    assert _ids(catalog.price_range(products, max_price=1999)) == ["sh-2"]


def test_query_pipeline_search_filter_range_sort(catalog):
    result = catalog.query(
        CatalogQuery(
            text="smart",
            category=ProductCategory.SMART_HOME,
            min_price=1000,
            max_price=2500,
            sort=SortOption.PRICE_ASC,
        )
    )
    assert result.count == len(result.products) == 1
    assert result.products[0].id == "sh-2"


def test_query_count_matches_products(catalog):
    result = catalog.query(CatalogQuery(sort=SortOption.PRICE_DESC))
    assert result.count == 6
    assert _ids(result.products)[0] == "lap-1"


def test_search_dropout_only_applies_to_long_queries(products):
    store = CatalogStore(products, search_dropout=SearchDropoutPolicy(probability=1.0, min_query_length=4))
    assert _ids(store.search("pro")) == ["lap-1"]
    assert store.search("smart") == []
    assert store.search("") == products


def test_featured_and_categories(catalog):
    assert _ids(catalog.featured()) == ["lap-1", "ph-1"]
    assert catalog.categories() == [
        ProductCategory.LAPTOPS,
        ProductCategory.TVS,
        ProductCategory.PHONES,
        ProductCategory.GAMING,
        ProductCategory.SMART_HOME,
    ]


def test_load_missing_file_gives_empty_catalog(tmp_path, caplog):
    with caplog.at_level(logging.WARNING):
        store = CatalogStore.load(tmp_path / "missing.json")
    assert len(store) == 0
    assert "catalog unavailable" in caplog.text


def test_load_corrupt_file_gives_empty_catalog(tmp_path):
    path = tmp_path / "products.json"
    path.write_text("[{\"id\": \"x\"", encoding="utf-8")
    assert CatalogStore.load(path).all() == []


def test_load_rejects_original_price_below_price(tmp_path, products):
    records = [p.model_dump(mode="json") for p in products[:2]]
    records[1]["original_price"] = 1
    path = tmp_path / "products.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    assert len(CatalogStore.load(path)) == 0


def test_load_valid_file(tmp_path, products):
    path = tmp_path / "products.json"
    path.write_text(json.dumps([p.model_dump(mode="json") for p in products]), encoding="utf-8")
    store = CatalogStore.load(path)
    assert store.all() == products
    assert store.get("tv-1").name == "Vivid 55"
    assert store.get("missing") is None


def test_bundled_catalog_loads(configure_test_engine):
    from storefront.core.config import get_settings

    store = CatalogStore.load(get_settings().catalog_path)
    assert len(store) > 0
    assert all(p.original_price is None or p.original_price >= p.price for p in store.all())


def test_seeded_newest_fault_is_reproducible(products):
    runs = []
    for _ in range(2):
        store = CatalogStore(products, newest_sort=NewestSortPolicy(probability=0.5, rng=random.Random(99)))
        runs.append([_ids(store.sort(products, SortOption.NEWEST)) for _ in range(20)])
    assert runs[0] == runs[1]
