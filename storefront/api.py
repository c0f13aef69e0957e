"""JSON API endpoints.

- GET  /api/product-images/<productId>: images for one product
- POST /api/product-images/batch: images for many products at once
- GET  /api/categories: category navigation tree from the catalog

Image endpoints never fail because of the image host: an unconfigured or
failing gateway yields empty lists with status 200.
"""

import sys
from pathlib import Path
from typing import Any, Dict, List

from flask import Blueprint, Response, current_app, jsonify, request

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from catalog import Catalog
    from images import ImageGateway, ImageRef
    from logging_config import get_logger
else:
    from .catalog import Catalog
    from .images import ImageGateway, ImageRef
    from .logging_config import get_logger

__all__ = ["api"]

logger = get_logger("api")

# Create blueprint for API
api = Blueprint("api", __name__, url_prefix="/api")


def _gateway() -> ImageGateway:
    return current_app.extensions["image_gateway"]


def _serialize(images: List[ImageRef]) -> List[Dict[str, Any]]:
    return [image.to_dict() for image in images]


@api.route("/product-images/<product_id>", methods=["GET"])
def product_images(product_id: str) -> Response:
    """Images for a single product; {"images": []} when none can be found."""
    images = _gateway().fetch_images(product_id)
    return jsonify({"images": _serialize(images)})


@api.route("/product-images/batch", methods=["POST"])
def product_images_batch():
    """Images for several products.

    Body: {"productIds": ["1", "2", ...]}. Every id appears in the results,
    mapped to [] when its lookup fails.
    """
    data = request.get_json(silent=True)
    product_ids = data.get("productIds") if isinstance(data, dict) else None

    if not isinstance(product_ids, list) or not product_ids:
        return jsonify({"error": "Product IDs array is required"}), 400

    logger.debug(f"Batch image lookup for {len(product_ids)} products")
    results = _gateway().fetch_images_batch(product_ids)
    return jsonify({"results": {pid: _serialize(images) for pid, images in results.items()}})


@api.route("/categories", methods=["GET"])
def categories() -> Response:
    """Category navigation tree (categories, subcategories, types)."""
    catalog = Catalog.load(current_app.config["CATALOG_PATH"])
    return jsonify({"categories": catalog.category_tree()})
