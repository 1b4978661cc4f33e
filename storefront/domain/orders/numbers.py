from __future__ import annotations

import threading
import time
from typing import Callable

from storefront.core.config import Settings, get_settings
from storefront.faults import OrderIdCollisionPolicy


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


class OrderNumberGenerator:
    def __init__(
        self,
        prefix: str = "WB",
        collision_policy: OrderIdCollisionPolicy | None = None,
        clock: Callable[[], int] = _wall_clock_ms,
    ):
        self.prefix = prefix
        self.collision_policy = collision_policy or OrderIdCollisionPolicy()
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        collision_policy: OrderIdCollisionPolicy | None = None,
    ) -> "OrderNumberGenerator":
        settings = settings or get_settings()
        return cls(prefix=settings.order_number_prefix, collision_policy=collision_policy)

    def _next_stamp(self) -> int:
        with self._lock:
            # Clamp to last+1 so equal or backwards clock readings still advance.
            stamp = max(self._clock(), self._last + 1)
            self._last = stamp
            return stamp

    def generate(self) -> str:
        return self.collision_policy.apply(f"{self.prefix}{self._next_stamp()}")
