"""Pet shop storefront: slug routing, catalog access, cart and image lookups."""

__version__ = "0.1.0"

# Re-export main components for convenient imports
from storefront.cart_store import CartEntry, CartStore, JsonFileStorage, MemoryStorage
from storefront.catalog import Catalog, load_products
from storefront.images import ImageGateway, ImageGatewayConfig
from storefront.models import Product
from storefront.pricing import effective_price
from storefront.routing import RouteKind, RouteMatch, resolve_legacy_product, resolve_path
from storefront.slugs import slugify

__all__ = [
    # Version
    "__version__",
    # Models
    "Product",
    "CartEntry",
    # Core functions
    "slugify",
    "load_products",
    "Catalog",
    "resolve_path",
    "resolve_legacy_product",
    "RouteKind",
    "RouteMatch",
    "effective_price",
    # Collaborators
    "CartStore",
    "MemoryStorage",
    "JsonFileStorage",
    "ImageGateway",
    "ImageGatewayConfig",
]
