from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from storefront.core.config import get_settings
from storefront.core.logging import configure_logging
from storefront.domain.catalog.models import CatalogQuery, ProductCategory, SortOption
from storefront.domain.errors import ProductNotFoundError, StorefrontError
from storefront.domain.orders.models import ADDRESS_FIELDS, PaymentMethod
from storefront.persistence.db import init_db
from storefront.session import StorefrontSession, build_session


def _print(payload: Any) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _cart_payload(storefront: StorefrontSession) -> dict[str, Any]:
    lines = storefront.cart.lines()
    return {
        "lines": [
            {
                "line_id": line.line_id,
                "product_id": line.product_id,
                "name": line.product.name,
                "quantity": line.quantity,
                "line_total": line.line_total,
            }
            for line in lines
        ],
        "item_count": storefront.cart.subtotal_quantity(),
        "pricing": storefront.pricing.breakdown(lines).to_dict(),
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storefront CLI")
    top = parser.add_subparsers(dest="command", required=True)

    catalog = top.add_parser("catalog", help="Browse the product catalog")
    catalog_sub = catalog.add_subparsers(dest="catalog_command", required=True)
    catalog_sub.add_parser("list", help="List every product")
    search = catalog_sub.add_parser("search", help="Search, filter and sort products")
    search.add_argument("text", nargs="?", default="")
    search.add_argument("--category", choices=[c.value for c in ProductCategory], default=None)
    search.add_argument("--min-price", type=int, default=None, help="int cents, inclusive")
    search.add_argument("--max-price", type=int, default=None, help="int cents, inclusive")
    search.add_argument("--sort", choices=[s.value for s in SortOption], default=SortOption.FEATURED.value)

    cart = top.add_parser("cart", help="Inspect or change the persisted cart")
    cart_sub = cart.add_subparsers(dest="cart_command", required=True)
    cart_sub.add_parser("show", help="Show cart lines and pricing")
    add = cart_sub.add_parser("add", help="Add a product to the cart")
    add.add_argument("product_id")
    add.add_argument("--quantity", type=int, default=1)
    set_qty = cart_sub.add_parser("set", help="Set a line quantity (0 removes it)")
    set_qty.add_argument("line_id")
    set_qty.add_argument("quantity", type=int)
    remove = cart_sub.add_parser("remove", help="Remove a cart line")
    remove.add_argument("line_id")
    cart_sub.add_parser("clear", help="Empty the cart")

    checkout = top.add_parser("checkout", help="Run checkout for the current cart and place the order")
    for field in ADDRESS_FIELDS:
        checkout.add_argument(f"--{field.replace('_', '-')}", dest=field, default=None)
    checkout.add_argument("--preset", choices=["home", "work", "demo"], default=None)
    checkout.add_argument("--payment", choices=[m.value for m in PaymentMethod], default=PaymentMethod.CREDIT_CARD.value)

    serve = top.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    return parser


def _run_catalog(storefront: StorefrontSession, args: argparse.Namespace) -> int:
    if args.catalog_command == "list":
        products = storefront.catalog.all()
        _print({"count": len(products), "products": [p.model_dump(mode="json") for p in products]})
        return 0
    query = CatalogQuery(
        text=args.text,
        category=args.category,
        min_price=args.min_price,
        max_price=args.max_price,
        sort=args.sort,
    )
    _print(storefront.catalog.query(query).model_dump(mode="json"))
    return 0


def _run_cart(storefront: StorefrontSession, args: argparse.Namespace) -> int:
    command = args.cart_command
    if command == "add":
        product = storefront.catalog.get(args.product_id)
        if product is None:
            raise ProductNotFoundError(args.product_id)
        storefront.cart.add(product, args.quantity)
    elif command == "set":
        storefront.cart.set_quantity(args.line_id, args.quantity)
    elif command == "remove":
        storefront.cart.remove(args.line_id)
    elif command == "clear":
        storefront.cart.clear()
    _print(_cart_payload(storefront))
    return 0


def _run_checkout(storefront: StorefrontSession, args: argparse.Namespace) -> int:
    checkout = storefront.checkout
    if args.preset:
        checkout.fill_address_preset(args.preset)
    overrides = {field: getattr(args, field) for field in ADDRESS_FIELDS if getattr(args, field) is not None}
    if overrides:
        checkout.update_address(**overrides)
    checkout.advance()
    checkout.select_payment(args.payment)
    checkout.advance()
    order = checkout.place_order()
    _print(
        {
            "order": order.model_dump(mode="json"),
            "estimated_delivery": order.estimated_delivery.isoformat().replace("+00:00", "Z"),
        }
    )
    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run("storefront.main:app", host=args.host or settings.api_host, port=args.port or settings.api_port)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "serve":
        return _serve(args)

    configure_logging()
    init_db()
    storefront = build_session(get_settings())

    try:
        if args.command == "catalog":
            return _run_catalog(storefront, args)
        if args.command == "cart":
            return _run_cart(storefront, args)
        if args.command == "checkout":
            return _run_checkout(storefront, args)
    except StorefrontError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.error("unsupported command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
