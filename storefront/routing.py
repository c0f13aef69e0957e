"""Resolve storefront URL paths to products, category pages, or 404.

Matchers are tried in a fixed order:

1. Reserved first segment (static pages and asset prefixes): handed back to
   the dedicated handlers; the catalog is never consulted.
2. Empty path: home page.
3. One segment: product whose slugified title equals the segment exactly,
   otherwise a category whose slug equals the lowercased segment.
4. Two or three segments: category/subcategory[/type] match, lowercased.
5. Anything deeper: not found.

A product slug therefore shadows a category with the same slug. Product
slugs are matched case-sensitively while category segments are lowercased
first; existing links rely on both behaviours.
"""

import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from catalog import Catalog
    from config import LEGACY_RECOMMENDATION_LIMIT, RECOMMENDATION_LIMIT
    from logging_config import get_logger
    from models import Product
else:
    from .catalog import Catalog
    from .config import LEGACY_RECOMMENDATION_LIMIT, RECOMMENDATION_LIMIT
    from .logging_config import get_logger
    from .models import Product

__all__ = [
    "RouteKind",
    "RouteMatch",
    "RESERVED_SEGMENTS",
    "STATIC_PREFIXES",
    "split_path",
    "resolve_path",
    "resolve_legacy_product",
]

logger = get_logger("routing")

# Asset directories served straight from static/
STATIC_PREFIXES: FrozenSet[str] = frozenset({"css", "js", "img", "json", "api"})

# Top-level segments owned by dedicated page handlers
RESERVED_SEGMENTS: FrozenSet[str] = frozenset({
    "about",
    "gallery",
    "legal",
    "custom-page",
    "shopping-cart",
    "product",
    "all-products",
}) | STATIC_PREFIXES

MAX_CATEGORY_DEPTH = 3


class RouteKind(str, Enum):
    RESERVED = "reserved"
    HOME = "home"
    PRODUCT = "product"
    CATEGORY = "category"
    NOT_FOUND = "not_found"


@dataclass
class RouteMatch:
    """Outcome of resolving one request path."""

    kind: RouteKind
    segments: Tuple[str, ...] = ()
    product: Optional[Product] = None
    recommendations: List[Product] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.kind is not RouteKind.NOT_FOUND

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "segments": list(self.segments),
            "product_id": self.product.id if self.product else None,
            "recommendation_ids": [p.id for p in self.recommendations],
        }


def split_path(path: Optional[str]) -> Tuple[str, ...]:
    """Split a URL path into segments, dropping empty ones."""
    if not path:
        return ()
    return tuple(part for part in path.split("/") if part)


def _product_match(
    catalog: Catalog, product: Product, segments: Tuple[str, ...], limit: int
) -> RouteMatch:
    return RouteMatch(
        kind=RouteKind.PRODUCT,
        segments=segments,
        product=product,
        recommendations=catalog.recommendations_for(product, limit),
    )


def resolve_path(
    path: Optional[str],
    catalog: Catalog,
    recommendation_limit: int = RECOMMENDATION_LIMIT,
) -> RouteMatch:
    """Decide what a request path denotes.

    Args:
        path: Request path, e.g. "/hrana-za-pse/suva-hrana".
        catalog: Snapshot of the product list for this request.
        recommendation_limit: Cap on same-category products for a product page.

    Returns:
        RouteMatch; RouteKind.NOT_FOUND when nothing matches.
    """
    segments = split_path(path)

    if segments and segments[0] in RESERVED_SEGMENTS:
        return RouteMatch(kind=RouteKind.RESERVED, segments=segments)

    if not segments:
        return RouteMatch(kind=RouteKind.HOME)

    if len(segments) > MAX_CATEGORY_DEPTH:
        return RouteMatch(kind=RouteKind.NOT_FOUND, segments=segments)

    try:
        if len(segments) == 1:
            product = catalog.find_by_slug(segments[0])
            if product is not None:
                return _product_match(catalog, product, segments, recommendation_limit)

        if catalog.has_category_path(segments):
            return RouteMatch(kind=RouteKind.CATEGORY, segments=segments)
    except Exception:
        logger.exception(f"Route resolution failed for {path!r}; treating as not found")

    return RouteMatch(kind=RouteKind.NOT_FOUND, segments=segments)


def resolve_legacy_product(
    catalog: Catalog,
    slug: Optional[str] = None,
    product_id: Optional[str] = None,
    recommendation_limit: int = LEGACY_RECOMMENDATION_LIMIT,
) -> RouteMatch:
    """Resolve the old /product/<slug> and /product?id=<id> URLs.

    No reserved-word guard and no category fallback apply here.
    """
    product = None
    if slug:
        product = catalog.find_by_slug(slug)
    elif product_id:
        product = catalog.by_id(product_id)

    segments = tuple(s for s in ("product", slug) if s)
    if product is None:
        return RouteMatch(kind=RouteKind.NOT_FOUND, segments=segments)
    return _product_match(catalog, product, segments, recommendation_limit)
