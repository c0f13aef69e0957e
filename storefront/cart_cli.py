#!/usr/bin/env python3
"""Command-line interface for inspecting and editing a stored cart.

Works on a JSON file holding the same ``cart`` / ``savedItems`` documents the
browser keeps in localStorage, which makes it handy for reproducing a
customer's cart from an exported localStorage dump.

Usage:
    python cart_cli.py show
    python cart_cli.py add 42 --quantity 2
    python cart_cli.py set 42 5
    python cart_cli.py save 17
    python cart_cli.py move-all
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from cart_store import CartStore, JsonFileStorage
    from catalog import Catalog
    from config import CATALOG_PATH
    from pricing import effective_price, format_price_number
else:
    from .cart_store import CartStore, JsonFileStorage
    from .catalog import Catalog
    from .config import CATALOG_PATH
    from .pricing import effective_price, format_price_number

__all__ = ["main", "parse_args", "show_cart"]

DEFAULT_STORAGE_PATH = "data/cart_storage.json"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Inspect or edit a stored storefront cart and wishlist",
    )
    parser.add_argument(
        "--storage",
        default=DEFAULT_STORAGE_PATH,
        help=f"JSON file holding the cart/savedItems keys (default: {DEFAULT_STORAGE_PATH})",
    )
    parser.add_argument(
        "--catalog",
        default=CATALOG_PATH,
        help="Catalog JSON used for names and totals",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("show", help="Print cart, totals and saved items")

    add = sub.add_parser("add", help="Add a product to the cart")
    add.add_argument("product_id")
    add.add_argument("--quantity", type=int, default=1)

    remove = sub.add_parser("remove", help="Remove a product from the cart")
    remove.add_argument("product_id")

    set_qty = sub.add_parser("set", help="Set a product's quantity (0 removes it)")
    set_qty.add_argument("product_id")
    set_qty.add_argument("quantity", type=int)

    save = sub.add_parser("save", help="Add a product to the saved items")
    save.add_argument("product_id")

    unsave = sub.add_parser("unsave", help="Remove a product from the saved items")
    unsave.add_argument("product_id")

    move = sub.add_parser("move", help="Move one saved product into the cart")
    move.add_argument("product_id")

    sub.add_parser("move-all", help="Move every saved product into the cart")
    sub.add_parser("clear", help="Empty the cart")

    return parser.parse_args(argv)


def show_cart(store: CartStore, catalog: Catalog) -> None:
    """Print cart lines, totals and saved products."""
    lines = store.valid_cart_entries(catalog)
    stale = len(store.get_cart()) - len(lines)

    print(f"\n{'='*50}")
    print("Cart")
    print(f"{'='*50}")
    if not lines:
        print("  (empty)")
    for entry, product in lines:
        line_total = effective_price(product) * entry.quantity
        print(f"  {entry.quantity} x {product.title} [{product.id}]  {format_price_number(line_total)} RSD")
    if stale:
        print(f"  ({stale} entries no longer in the catalog)")

    totals = store.cart_totals(catalog)
    print(f"\nProducts: {totals.product_count}  Items: {totals.item_count}")
    print(f"Total: {format_price_number(totals.total)} RSD")

    print("\nSaved items:")
    saved = store.saved_products(catalog)
    if not saved:
        print("  (none)")
    for product in saved:
        print(f"  {product.title} [{product.id}]")
    print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    store = CartStore(JsonFileStorage(args.storage))

    if args.command == "show":
        show_cart(store, Catalog.load(args.catalog))
        return 0

    if args.command == "add":
        try:
            store.add_to_cart(args.product_id, args.quantity)
        except ValueError as e:
            print(f"Error: {e}")
            return 1
        print(f"Cart now holds {store.get_item_quantity(args.product_id)} x {args.product_id}")
        return 0

    if args.command == "clear":
        store.clear_cart()
        print("Cart cleared")
        return 0

    if args.command == "move-all":
        moved = store.move_all_saved_to_cart()
        print(f"Moved {len(moved)} saved items to the cart")
        return 0

    actions = {
        "remove": lambda: store.remove_from_cart(args.product_id),
        "set": lambda: store.update_quantity(args.product_id, args.quantity),
        "save": lambda: store.add_to_saved(args.product_id),
        "unsave": lambda: store.remove_from_saved(args.product_id),
        "move": lambda: store.move_saved_to_cart(args.product_id),
    }
    changed = actions[args.command]()
    print(f"{args.command} {args.product_id}: {'done' if changed else 'no change'}")
    return 0 if changed else 1


if __name__ == "__main__":
    sys.exit(main())
