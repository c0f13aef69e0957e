"""Centralized configuration for the storefront app."""

import os
from pathlib import Path

# Determine package directory (static files and templates live beside it)
_THIS_DIR = Path(__file__).parent
_PROJECT_ROOT = _THIS_DIR.parent

STATIC_DIR = _THIS_DIR / "static"
TEMPLATES_DIR = _THIS_DIR / "templates"

# Catalog - re-read on every request, never cached
CATALOG_PATH = os.getenv("CATALOG_PATH", str(STATIC_DIR / "json" / "product.json"))

# Flask app settings (allow env overrides; default debug off for safety)
# Hosting platforms set PORT dynamically; fall back to FLASK_PORT or 3000 for local.
FLASK_HOST = os.getenv("FLASK_HOST", "0.0.0.0")
FLASK_PORT = int(os.getenv("FLASK_PORT", os.getenv("PORT", "3000")))
FLASK_DEBUG = os.getenv("FLASK_DEBUG", "False").lower() == "true"

# Product page recommendations
RECOMMENDATION_LIMIT = 20
# /product/<slug> and /product?id= kept the smaller carousel
LEGACY_RECOMMENDATION_LIMIT = 8

# Cloudinary credentials (names match the existing deployment's .env)
CLOUDINARY_CLOUD_NAME = os.getenv("cloud_name")
CLOUDINARY_API_KEY = os.getenv("cloudinary_api_key")
CLOUDINARY_API_SECRET = os.getenv("cloudinary_api_secret")
CLOUDINARY_API_BASE = os.getenv("CLOUDINARY_API_BASE", "https://api.cloudinary.com/v1_1")

# Image lookups
IMAGE_MAX_RESULTS = int(os.getenv("IMAGE_MAX_RESULTS", "10"))
IMAGE_REQUEST_TIMEOUT = float(os.getenv("IMAGE_REQUEST_TIMEOUT", "10"))

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = _PROJECT_ROOT / "logs"

# Headers applied to every static response and the catalog endpoint
NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, private",
    "Pragma": "no-cache",
    "Expires": "0",
}
