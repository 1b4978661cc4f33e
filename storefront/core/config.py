from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[1] / "data" / "products.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SF_", extra="ignore")

    app_name: str = "Storefront Core"
    env: str = "dev"
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    database_url: str = "sqlite+pysqlite:///./storefront.db"
    catalog_path: Path = DEFAULT_CATALOG_PATH
    cart_storage_key: str = "shopping_cart"

    free_shipping_threshold_cents: int = Field(default=5000, ge=0, description="int cents, exclusive")
    flat_shipping_fee_cents: int = Field(default=999, ge=0, description="int cents")
    estimated_delivery_days: int = Field(default=3, ge=0)

    order_number_prefix: str = "WB"
    order_collision_value: str = "WB12345"

    # Fault injection: every probability defaults to disabled.
    allow_fault_injection: bool = False
    fault_seed: int | None = None
    fault_price_surcharge_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    fault_surcharge_min_cents: int = Field(default=500, ge=0)
    fault_surcharge_max_cents: int = Field(default=2500, ge=0)
    fault_order_id_collision_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    fault_newest_sort_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    fault_search_dropout_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    fault_search_dropout_min_length: int = Field(default=4, ge=0)

    def faults_enabled(self) -> bool:
        return any(
            p > 0
            for p in (
                self.fault_price_surcharge_probability,
                self.fault_order_id_collision_probability,
                self.fault_newest_sort_probability,
                self.fault_search_dropout_probability,
            )
        )

    def model_post_init(self, __context) -> None:
        if self.fault_surcharge_min_cents > self.fault_surcharge_max_cents:
            raise ValueError("SF_FAULT_SURCHARGE_MIN_CENTS must not exceed SF_FAULT_SURCHARGE_MAX_CENTS")

        if self.env.lower() == "dev":
            return

        if self.faults_enabled() and not self.allow_fault_injection:
            raise ValueError(
                "fault injection is not allowed outside dev mode; set SF_ALLOW_FAULT_INJECTION=true "
                "or zero the SF_FAULT_*_PROBABILITY settings"
            )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
