from __future__ import annotations

import copy
from dataclasses import dataclass, field
from uuid import uuid4

from storefront.domain.catalog.models import Product


def new_line_id() -> str:
    return uuid4().hex


@dataclass
class CartLine:
    line_id: str
    product: Product
    quantity: int

    @property
    def product_id(self) -> str:
        return self.product.id

    @property
    def line_total(self) -> int:
        return self.product.price * self.quantity


@dataclass
class Cart:
    lines: list[CartLine] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def find(self, line_id: str) -> CartLine | None:
        for line in self.lines:
            if line.line_id == line_id:
                return line
        return None

    def find_product(self, product_id: str) -> CartLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def violations(self) -> list[str]:
        problems: list[str] = []
        seen_products: set[str] = set()
        seen_lines: set[str] = set()
        for line in self.lines:
            if line.quantity <= 0:
                problems.append(f"line={line.line_id} has quantity={line.quantity}")
            if line.product_id in seen_products:
                problems.append(f"product={line.product_id} appears on more than one line")
            if line.line_id in seen_lines:
                problems.append(f"line id {line.line_id} is duplicated")
            seen_products.add(line.product_id)
            seen_lines.add(line.line_id)
        return problems

    def copy(self) -> "Cart":
        return copy.deepcopy(self)
