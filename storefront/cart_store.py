"""Cart and wishlist state over a string key/value store.

Mirrors what the browser client keeps in localStorage, with the same keys
and JSON layout so data written by either side reads on the other:

    cart        -> [{"id": "p1", "quantity": 2}, ...]
    savedItems  -> ["p7", "p9", ...]

Every operation is a synchronous read-modify-write. Nothing here checks ids
against the catalog; stale entries stay in storage and are filtered out by
the catalog-aware helpers (cart_totals, valid_cart_entries, saved_products).
"""

import json
import sys
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from catalog import Catalog
    from logging_config import get_logger
    from models import Product
    from pricing import effective_price
else:
    from .catalog import Catalog
    from .logging_config import get_logger
    from .models import Product
    from .pricing import effective_price

__all__ = [
    "CART_KEY",
    "SAVED_KEY",
    "CartEntry",
    "CartTotals",
    "CartStore",
    "KeyValueStorage",
    "MemoryStorage",
    "JsonFileStorage",
    "migrate_legacy_cart",
]

logger = get_logger("cart_store")

CART_KEY = "cart"
SAVED_KEY = "savedItems"

SavedChangeHook = Callable[[str, bool], None]


# ---------- STORAGE BACKENDS ----------


class KeyValueStorage:
    """Minimal localStorage-like interface: string keys to string values."""

    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """All keys in one JSON object on disk, rewritten on every set.

    A missing or unreadable file reads as empty.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Could not read storage file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove_item(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)


# ---------- DATA ----------


@dataclass
class CartEntry:
    id: str
    quantity: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "quantity": self.quantity}


@dataclass
class CartTotals:
    item_count: int = 0
    total: Decimal = Decimal("0")
    product_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itemCount": self.item_count,
            "total": str(self.total),
            "productCount": self.product_count,
        }


def migrate_legacy_cart(parsed: Any) -> Tuple[Any, bool]:
    """Convert the old cart layout (a list of bare ids) to entry objects.

    The old layout is recognised by its first element being a string. Data
    already in the new layout is returned unchanged.

    Returns:
        (cart, migrated) where migrated tells the caller to persist the result.
    """
    if isinstance(parsed, list) and parsed and isinstance(parsed[0], str):
        return [{"id": product_id, "quantity": 1} for product_id in parsed], True
    return parsed, False


def _entry_from_raw(raw: Any) -> Optional[CartEntry]:
    if not isinstance(raw, dict) or raw.get("id") is None:
        return None
    try:
        quantity = int(raw.get("quantity") or 1)
    except (TypeError, ValueError):
        quantity = 1
    return CartEntry(id=str(raw["id"]), quantity=max(quantity, 1))


# ---------- STORE ----------


class CartStore:
    """Cart and saved-items operations over a KeyValueStorage.

    Args:
        storage: Where the two JSON documents live.
        on_saved_change: Called as ``hook(product_id, is_saved)`` after each
            change to the saved list, so views can refresh indicators bound
            to that product.
    """

    def __init__(
        self,
        storage: Optional[KeyValueStorage] = None,
        on_saved_change: Optional[SavedChangeHook] = None,
    ):
        self.storage = storage if storage is not None else MemoryStorage()
        self.on_saved_change = on_saved_change

    def _read_json(self, key: str) -> Any:
        raw = self.storage.get_item(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.error(f"Error reading {key} from storage: {e}")
            return None

    def _write_json(self, key: str, value: Any) -> None:
        self.storage.set_item(key, json.dumps(value, ensure_ascii=False))

    # ----- cart -----

    def get_cart(self) -> List[CartEntry]:
        """Cart entries in insertion order; migrates the legacy layout once."""
        parsed = self._read_json(CART_KEY)
        if parsed is None:
            return []

        parsed, migrated = migrate_legacy_cart(parsed)
        if migrated:
            logger.info(f"Migrated legacy cart with {len(parsed)} entries")
            self._write_json(CART_KEY, parsed)

        if not isinstance(parsed, list):
            logger.error(f"Stored cart is not a list (got {type(parsed).__name__}); treating as empty")
            return []

        entries = []
        for raw in parsed:
            entry = _entry_from_raw(raw)
            if entry is None:
                logger.warning(f"Skipping malformed cart entry: {raw!r}")
                continue
            entries.append(entry)
        return entries

    def _save_cart(self, entries: List[CartEntry]) -> None:
        self._write_json(CART_KEY, [e.to_dict() for e in entries])

    def add_to_cart(self, product_id: str, quantity: int = 1) -> bool:
        """Add ``quantity`` of a product, merging with an existing entry.

        Raises:
            ValueError: If quantity is below 1.
        """
        if quantity < 1:
            raise ValueError(f"quantity must be at least 1, got {quantity}")
        cart = self.get_cart()
        for entry in cart:
            if entry.id == product_id:
                entry.quantity += quantity
                break
        else:
            cart.append(CartEntry(id=product_id, quantity=quantity))
        self._save_cart(cart)
        return True

    def remove_from_cart(self, product_id: str) -> bool:
        """Delete a product's entry; False if it was not in the cart."""
        cart = self.get_cart()
        remaining = [e for e in cart if e.id != product_id]
        if len(remaining) == len(cart):
            return False
        self._save_cart(remaining)
        return True

    def update_quantity(self, product_id: str, quantity: int) -> bool:
        """Set a product's quantity exactly; 0 or less removes the entry.

        Returns False when the product is not in the cart.
        """
        cart = self.get_cart()
        for entry in cart:
            if entry.id == product_id:
                break
        else:
            return False

        if quantity <= 0:
            return self.remove_from_cart(product_id)
        entry.quantity = quantity
        self._save_cart(cart)
        return True

    def get_item_quantity(self, product_id: str) -> int:
        for entry in self.get_cart():
            if entry.id == product_id:
                return entry.quantity
        return 0

    def clear_cart(self) -> None:
        self._write_json(CART_KEY, [])

    # ----- saved items -----

    def get_saved(self) -> List[str]:
        """Saved product ids, oldest first, without duplicates."""
        parsed = self._read_json(SAVED_KEY)
        if parsed is None:
            return []
        if not isinstance(parsed, list):
            logger.error(f"Stored savedItems is not a list (got {type(parsed).__name__}); treating as empty")
            return []
        return list(dict.fromkeys(str(pid) for pid in parsed if pid is not None))

    def is_saved(self, product_id: str) -> bool:
        return product_id in self.get_saved()

    def _notify_saved(self, product_id: str) -> None:
        if self.on_saved_change is not None:
            self.on_saved_change(product_id, self.is_saved(product_id))

    def add_to_saved(self, product_id: str) -> bool:
        """Save a product; False (and no write) if it is already saved."""
        saved = self.get_saved()
        if product_id in saved:
            return False
        saved.append(product_id)
        self._write_json(SAVED_KEY, saved)
        self._notify_saved(product_id)
        return True

    def remove_from_saved(self, product_id: str) -> bool:
        saved = self.get_saved()
        if product_id not in saved:
            return False
        saved.remove(product_id)
        self._write_json(SAVED_KEY, saved)
        self._notify_saved(product_id)
        return True

    def move_saved_to_cart(self, product_id: str) -> bool:
        """Add a saved product to the cart and drop it from the saved list."""
        if not self.is_saved(product_id):
            return False
        self.add_to_cart(product_id)
        return self.remove_from_saved(product_id)

    def move_all_saved_to_cart(self) -> List[str]:
        """Move every saved product into the cart (quantity 1 each).

        Returns:
            The ids that were moved, in saved order.
        """
        saved = self.get_saved()
        if not saved:
            return []
        for product_id in saved:
            self.add_to_cart(product_id, 1)
        self._write_json(SAVED_KEY, [])
        for product_id in saved:
            self._notify_saved(product_id)
        return saved

    # ----- catalog-aware views -----

    def valid_cart_entries(self, catalog: Catalog) -> List[Tuple[CartEntry, Product]]:
        """Cart entries whose product is still in the catalog, with the product."""
        valid = []
        for entry in self.get_cart():
            product = catalog.by_id(entry.id)
            if product is None:
                logger.debug(f"Cart product {entry.id} not in catalog; skipping")
                continue
            valid.append((entry, product))
        return valid

    def saved_products(self, catalog: Catalog) -> List[Product]:
        """Saved products still in the catalog, in catalog order."""
        saved = set(self.get_saved())
        return [p for p in catalog.all() if p.id in saved]

    def cart_totals(self, catalog: Catalog) -> CartTotals:
        """Quantity and money totals over entries the catalog still knows."""
        totals = CartTotals()
        for entry, product in self.valid_cart_entries(catalog):
            totals.item_count += entry.quantity
            totals.total += effective_price(product) * entry.quantity
            totals.product_count += 1
        return totals
