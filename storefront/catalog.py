"""JSON-file product catalog.

The catalog is a flat JSON list that the shop edits by hand, so it is read
fresh on every request rather than cached. Reading never raises: a missing
or broken file yields an empty catalog and the storefront renders its empty
state.

Category hierarchy queries go through a pandas frame with one row per
product and the slug of each hierarchy label precomputed.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

# Handle imports for both direct execution and package import
if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from logging_config import get_logger, log_event
    from models import Product
    from slugs import slugify
else:
    from .logging_config import get_logger, log_event
    from .models import Product
    from .slugs import slugify

__all__ = ["Catalog", "load_products", "CATEGORY_ICONS", "CATEGORY_DATA_ATTRS"]

logger = get_logger("catalog")

# Navigation icons for the shop's top-level categories (Material Symbols names)
CATEGORY_ICONS: Dict[str, str] = {
    "Hrana za kućne ljubimce": "restaurant",
    "Igračke za kućne ljubimce": "toys",
    "Nega kućnih ljubimaca": "spa",
    "Oprema za kućne ljubimce": "pets",
}

CATEGORY_DATA_ATTRS: Dict[str, str] = {
    "Hrana za kućne ljubimce": "hrana",
    "Igračke za kućne ljubimce": "igracke",
    "Nega kućnih ljubimaca": "higijena",
    "Oprema za kućne ljubimce": "oprema",
}

HIERARCHY_COLUMNS = ["category", "subcategory", "type"]
SLUG_COLUMNS = ["category_slug", "subcategory_slug", "type_slug"]


def load_products(path: Union[str, Path]) -> List[Product]:
    """Read and parse the catalog file.

    Args:
        path: Path to the catalog JSON (a list of product objects).

    Returns:
        Products in file order, or an empty list if the file cannot be read
        or parsed for any reason, or does not hold a list.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as e:
        # json raises RecursionError, not ValueError, on very deeply nested input
        logger.exception("Error loading products data")
        log_event(
            "catalog_load_error",
            {"message": "Catalog could not be loaded", "path": str(path), "error": str(e)},
        )
        return []

    if not isinstance(data, list):
        logger.warning(f"Catalog {path} is not a JSON list (got {type(data).__name__})")
        return []

    products = []
    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning(f"Skipping catalog entry {i}: not an object")
            continue
        products.append(Product.from_dict(entry))
    return products


class Catalog:
    """Read-only view over one snapshot of the product list."""

    def __init__(self, products: Optional[Sequence[Product]] = None):
        self._products: List[Product] = list(products or [])
        self._frame: Optional[pd.DataFrame] = None

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Catalog":
        """Load a fresh snapshot from disk (empty on any failure)."""
        return cls(load_products(path))

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self):
        return iter(self._products)

    def all(self) -> List[Product]:
        return list(self._products)

    def by_id(self, product_id: Any) -> Optional[Product]:
        if product_id is None:
            return None
        wanted = str(product_id)
        for product in self._products:
            if product.id == wanted:
                return product
        return None

    def find_by_slug(self, slug: str) -> Optional[Product]:
        """Return the first product whose title slugifies to ``slug``.

        Titles are not unique; catalog order decides between collisions.
        The slug is compared as given, so uppercase input never matches.
        """
        if not slug:
            return None
        for product in self._products:
            if slugify(product.title) == slug:
                return product
        return None

    def recommendations_for(self, product: Product, limit: int) -> List[Product]:
        """Products in the same category, excluding ``product``, in catalog order."""
        if limit <= 0:
            return []
        matches = [
            p for p in self._products
            if p.category == product.category and p.id != product.id
        ]
        return matches[:limit]

    # ---------- CATEGORY HIERARCHY ----------

    def _hierarchy_frame(self) -> pd.DataFrame:
        """One row per product: hierarchy labels and their lowercased slugs."""
        if self._frame is None:
            rows = [
                {
                    "category": p.category or "",
                    "subcategory": p.subcategory or "",
                    "type": p.product_type or "",
                }
                for p in self._products
            ]
            frame = pd.DataFrame(rows, columns=HIERARCHY_COLUMNS)
            for label_col, slug_col in zip(HIERARCHY_COLUMNS, SLUG_COLUMNS):
                frame[slug_col] = frame[label_col].map(lambda v: slugify(v).lower())
            self._frame = frame
        return self._frame

    def category_nodes(self) -> pd.DataFrame:
        """Distinct (category, subcategory, type) triples with their slugs."""
        frame = self._hierarchy_frame()
        return frame.drop_duplicates(subset=HIERARCHY_COLUMNS).reset_index(drop=True)

    def _path_mask(self, segments: Sequence[str]) -> Optional[pd.Series]:
        if not segments or len(segments) > len(SLUG_COLUMNS):
            return None
        frame = self._hierarchy_frame()
        mask = pd.Series(True, index=frame.index)
        for slug_col, segment in zip(SLUG_COLUMNS, segments):
            mask &= frame[slug_col] == segment.lower()
        return mask

    def has_category_path(self, segments: Sequence[str]) -> bool:
        """True if some product sits under the category/subcategory/type path.

        Segments are lowercased and compared against lowercased label slugs.
        Distinct labels that slugify the same are one target.
        """
        mask = self._path_mask(segments)
        if mask is None or mask.empty:
            return False
        return bool(mask.any())

    def products_in(self, segments: Sequence[str]) -> List[Product]:
        """Products under a category path, in catalog order."""
        mask = self._path_mask(segments)
        if mask is None or mask.empty:
            return []
        return [self._products[i] for i in mask[mask].index]

    def category_tree(self) -> List[Dict[str, Any]]:
        """Navigation tree: categories, their subcategories, and sorted types.

        Categories and subcategories keep first-seen catalog order.
        """
        nodes = self.category_nodes()
        nodes = nodes[nodes["category"] != ""]

        tree: List[Dict[str, Any]] = []
        for category, group in nodes.groupby("category", sort=False):
            cat_slug = slugify(category)
            subcategories = []
            subs = group[group["subcategory"] != ""]
            for subcategory, sub_group in subs.groupby("subcategory", sort=False):
                sub_slug = slugify(subcategory)
                types = sorted(t for t in sub_group["type"].unique() if t)
                subcategories.append(
                    {
                        "name": subcategory,
                        "slug": sub_slug,
                        "href": f"/{cat_slug}/{sub_slug}",
                        "types": [
                            {
                                "name": t,
                                "slug": slugify(t),
                                "href": f"/{cat_slug}/{sub_slug}/{slugify(t)}",
                            }
                            for t in types
                        ],
                    }
                )
            tree.append(
                {
                    "name": category,
                    "slug": cat_slug,
                    "href": f"/{cat_slug}",
                    "icon": CATEGORY_ICONS.get(category, "category"),
                    "data_attr": CATEGORY_DATA_ATTRS.get(
                        category, "".join(category.lower().split())
                    ),
                    "subcategories": subcategories,
                }
            )
        return tree
