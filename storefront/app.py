"""Flask web app for the pet shop storefront.

Serves the static pages and assets, renders product pages from the JSON
catalog, and resolves slug URLs to products or category listings. The
catalog is re-read on every request so edits to the JSON file show up
immediately.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from flask import Flask, Response, render_template, request, send_file, send_from_directory
from werkzeug.exceptions import NotFound

# Load environment variables from .env file (explicitly specify path)
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# Handle imports for both direct execution and package import
# When run directly (python storefront/app.py), __package__ is None
# When imported as module (from storefront.app import app), __package__ is "storefront"
if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from api import api
    from catalog import Catalog
    from config import (
        CATALOG_PATH,
        FLASK_DEBUG,
        FLASK_HOST,
        FLASK_PORT,
        LOG_LEVEL,
        NO_CACHE_HEADERS,
        STATIC_DIR,
        TEMPLATES_DIR,
    )
    from images import REQUIRED_ENV_VARS, ImageGateway, ImageGatewayConfig
    from logging_config import get_logger, setup_logging
    from models import Product
    from pricing import format_price_string
    from routing import STATIC_PREFIXES, RouteKind, RouteMatch, resolve_legacy_product, resolve_path
    from slugs import slugify
else:
    from .api import api
    from .catalog import Catalog
    from .config import (
        CATALOG_PATH,
        FLASK_DEBUG,
        FLASK_HOST,
        FLASK_PORT,
        LOG_LEVEL,
        NO_CACHE_HEADERS,
        STATIC_DIR,
        TEMPLATES_DIR,
    )
    from .images import REQUIRED_ENV_VARS, ImageGateway, ImageGatewayConfig
    from .logging_config import get_logger, setup_logging
    from .models import Product
    from .pricing import format_price_string
    from .routing import STATIC_PREFIXES, RouteKind, RouteMatch, resolve_legacy_product, resolve_path
    from .slugs import slugify

setup_logging(level=getattr(logging, LOG_LEVEL, logging.INFO))
logger = get_logger("app")

app = Flask(__name__, static_folder=None, template_folder=str(TEMPLATES_DIR))
app.url_map.strict_slashes = False
app.config["CATALOG_PATH"] = CATALOG_PATH
app.config["STATIC_DIR"] = str(STATIC_DIR)

# Image gateway is configured once here and shared by all requests
_image_config = ImageGatewayConfig.from_env()
if _image_config.configured:
    logger.info("Cloudinary configured successfully")
else:
    logger.warning(
        "Cloudinary credentials not found; product images will be empty. "
        f"Set the environment variables: {', '.join(REQUIRED_ENV_VARS)}"
    )
app.extensions["image_gateway"] = ImageGateway(_image_config)

app.register_blueprint(api)


# ---------- HELPERS ----------


def _no_cache(response: Response) -> Response:
    response.headers.update(NO_CACHE_HEADERS)
    return response


def _static_dir() -> Path:
    return Path(app.config["STATIC_DIR"])


def _send_page(filename: str, status: int = 200) -> Response:
    """Send one of the static HTML pages."""
    response = send_from_directory(_static_dir(), filename, max_age=0, etag=False)
    response.status_code = status
    return _no_cache(response)


def _load_catalog() -> Catalog:
    return Catalog.load(app.config["CATALOG_PATH"])


def _product_context(match: Optional[RouteMatch]) -> Dict[str, Any]:
    """Template variables for product.html."""
    product: Optional[Product] = match.product if match else None
    recommended: List[Dict[str, Any]] = []
    if match is not None:
        for p in match.recommendations:
            recommended.append({**p.to_dict(), "slug": slugify(p.title), "on_sale": p.on_sale})
    return {
        "product": {**product.to_dict(), "on_sale": product.on_sale} if product else None,
        "recommended_products": recommended,
        "slugify": slugify,
        "format_price_string": format_price_string,
    }


def _render_product(match: Optional[RouteMatch]) -> str:
    return render_template("product.html", **_product_context(match))


def _not_found_page() -> Response:
    return _send_page("404.html", status=404)


# ---------- STATIC PAGES ----------


@app.route("/", methods=["GET"])
def index() -> Response:
    return _send_page("index.html")


@app.route("/about", methods=["GET"])
def about() -> Response:
    return _send_page("about.html")


@app.route("/gallery", methods=["GET"])
def gallery() -> Response:
    return _send_page("galery.html")


@app.route("/legal", methods=["GET"])
def legal() -> Response:
    return _send_page("legal.html")


@app.route("/custom-page", methods=["GET"])
@app.route("/custom-page/<path:subpath>", methods=["GET"])
@app.route("/all-products", methods=["GET"])
def custom_page(subpath: Optional[str] = None) -> Response:
    """Product listing page; the client filters by the URL it was opened with."""
    return _send_page("custom-page.html")


@app.route("/shopping-cart", methods=["GET"])
def shopping_cart() -> Response:
    return _send_page("shopping-cart.html")


@app.route("/<any(css, js, img):folder>/<path:filename>", methods=["GET"])
def assets(folder: str, filename: str):
    try:
        response = send_from_directory(_static_dir() / folder, filename, max_age=0, etag=False)
    except NotFound:
        return "Not Found", 404
    return _no_cache(response)


@app.route("/json/product.json", methods=["GET"])
def catalog_json():
    """The catalog file exactly as stored, never cached."""
    path = Path(app.config["CATALOG_PATH"])
    if not path.is_file():
        return "Not Found", 404
    response = send_file(path, mimetype="application/json", max_age=0, etag=False, last_modified=None)
    return _no_cache(response)


# ---------- PRODUCTS & CATEGORIES ----------


@app.route("/product/<slug>", methods=["GET"])
def legacy_product_by_slug(slug: str) -> str:
    """Old product URL; kept so shared links keep working."""
    match = resolve_legacy_product(_load_catalog(), slug=slug)
    return _render_product(match if match.found else None)


@app.route("/product", methods=["GET"])
def legacy_product_by_id() -> str:
    """Oldest product URL: /product?id=<id>."""
    product_id = request.args.get("id")
    match = resolve_legacy_product(_load_catalog(), product_id=product_id)
    return _render_product(match if match.found else None)


@app.route("/<path:path>", methods=["GET"])
def resolve(path: str):
    """Product slug or category path; everything else is a 404."""
    match = resolve_path(path, _load_catalog())
    logger.debug(f"Resolved /{path} -> {match.kind.value}")

    if match.kind is RouteKind.PRODUCT:
        return _render_product(match)
    if match.kind is RouteKind.CATEGORY:
        return _send_page("custom-page.html")
    if match.kind is RouteKind.HOME:
        return _send_page("index.html")
    if match.kind is RouteKind.RESERVED and match.segments[0] in STATIC_PREFIXES:
        return "Not Found", 404
    return _not_found_page()


@app.errorhandler(404)
def page_not_found(error):
    return _not_found_page()


if __name__ == "__main__":
    app.run(host=FLASK_HOST, port=FLASK_PORT, debug=FLASK_DEBUG)
