from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProductCategory(str, Enum):
    LAPTOPS = "Laptops"
    TVS = "TVs"
    PHONES = "Phones"
    GAMING = "Gaming Consoles"
    SMART_HOME = "Smart Home Devices"


class SortOption(str, Enum):
    FEATURED = "featured"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    RATING_DESC = "rating_desc"
    NEWEST = "newest"


class Review(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    author: str
    rating: int = Field(ge=1, le=5)
    title: str
    comment: str
    date: str


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str
    brand: str
    category: ProductCategory
    description: str = ""
    image_url: str = ""
    price: int = Field(ge=0, description="int cents")
    original_price: int | None = Field(default=None, ge=0, description="int cents")
    in_stock: bool = True
    is_featured: bool = False
    rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    reviews: tuple[Review, ...] = ()
    specifications: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _original_price_not_below_price(self) -> "Product":
        if self.original_price is not None and self.original_price < self.price:
            raise ValueError(f"original_price={self.original_price} is below price={self.price}")
        return self

    @property
    def discount_cents(self) -> int:
        if self.original_price is None:
            return 0
        return self.original_price - self.price


class CatalogQuery(BaseModel):
    text: str = ""
    category: ProductCategory | None = None
    min_price: int | None = Field(default=None, ge=0, description="int cents, inclusive")
    max_price: int | None = Field(default=None, ge=0, description="int cents, inclusive")
    sort: SortOption = SortOption.FEATURED


class CatalogQueryResult(BaseModel):
    count: int
    products: list[Product]
