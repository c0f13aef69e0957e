"""Product image lookups against the Cloudinary search API.

Each product's photos live in a Cloudinary folder named after its id. The
gateway searches that folder and returns plain image references. Lookups
never raise to callers: missing credentials or a failed request give an
empty list, so a page always renders, with or without photos.
"""

import sys
from concurrent.futures import ThreadPoolExecutor
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

import requests  # type: ignore[import-untyped]

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from config import (
        CLOUDINARY_API_BASE,
        CLOUDINARY_API_KEY,
        CLOUDINARY_API_SECRET,
        CLOUDINARY_CLOUD_NAME,
        IMAGE_MAX_RESULTS,
        IMAGE_REQUEST_TIMEOUT,
    )
    from logging_config import get_logger, log_event
else:
    from .config import (
        CLOUDINARY_API_BASE,
        CLOUDINARY_API_KEY,
        CLOUDINARY_API_SECRET,
        CLOUDINARY_CLOUD_NAME,
        IMAGE_MAX_RESULTS,
        IMAGE_REQUEST_TIMEOUT,
    )
    from .logging_config import get_logger, log_event

__all__ = [
    "ImageGatewayConfig",
    "ImageRef",
    "ImageGateway",
    "ImageLookupError",
    "REQUIRED_ENV_VARS",
    "folder_expression",
]

logger = get_logger("images")

REQUIRED_ENV_VARS = ("cloud_name", "cloudinary_api_key", "cloudinary_api_secret")


def folder_expression(product_id: str) -> str:
    """Search expression matching exactly one folder.

    The id comes straight from the URL, so it is quoted; otherwise a value
    such as ``x OR resource_type:image`` would widen the search.
    """
    escaped = str(product_id).replace("\\", "\\\\").replace('"', '\\"')
    return f'folder:"{escaped}"'


class ImageLookupError(Exception):
    """Raised when a Cloudinary search request fails or returns garbage."""
    pass


@dataclass(frozen=True)
class ImageGatewayConfig:
    """Cloudinary credentials and lookup limits, built once at startup."""

    cloud_name: Optional[str] = None
    api_key: Optional[str] = None
    api_secret: Optional[str] = None
    api_base: str = CLOUDINARY_API_BASE
    max_results: int = IMAGE_MAX_RESULTS
    timeout: float = IMAGE_REQUEST_TIMEOUT

    @property
    def configured(self) -> bool:
        return bool(self.cloud_name and self.api_key and self.api_secret)

    @property
    def search_url(self) -> str:
        return f"{self.api_base.rstrip('/')}/{self.cloud_name}/resources/search"

    @classmethod
    def from_env(cls) -> "ImageGatewayConfig":
        return cls(
            cloud_name=CLOUDINARY_CLOUD_NAME,
            api_key=CLOUDINARY_API_KEY,
            api_secret=CLOUDINARY_API_SECRET,
        )


@dataclass
class ImageRef:
    url: str
    id: str
    width: Optional[int] = None
    height: Optional[int] = None

    @classmethod
    def from_resource(cls, resource: Dict[str, Any]) -> "ImageRef":
        return cls(
            url=resource.get("secure_url") or resource.get("url") or "",
            id=resource.get("public_id", ""),
            width=resource.get("width"),
            height=resource.get("height"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ImageGateway:
    """Folder-per-product image search with fail-soft results."""

    def __init__(
        self,
        config: ImageGatewayConfig,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        # Created up front: batch lookups share it across worker threads
        self._session = session if session is not None else requests.Session()

    @property
    def configured(self) -> bool:
        return self.config.configured

    def search_folder(self, product_id: str) -> List[ImageRef]:
        """Search the product's folder, newest upload first.

        Raises:
            ImageLookupError: On transport errors, non-2xx responses, or a
                response without a resources list.
        """
        payload = {
            "expression": folder_expression(product_id),
            "sort_by": [{"created_at": "desc"}],
            "max_results": self.config.max_results,
        }
        try:
            response = self._session.post(
                self.config.search_url,
                json=payload,
                auth=(self.config.api_key, self.config.api_secret),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as e:
            raise ImageLookupError(f"Search for folder {product_id} failed: {e}") from e
        except ValueError as e:
            raise ImageLookupError(f"Search for folder {product_id} returned invalid JSON") from e

        resources = data.get("resources") if isinstance(data, dict) else None
        if not isinstance(resources, list):
            raise ImageLookupError(f"Search for folder {product_id} returned no resources list")
        return [ImageRef.from_resource(r) for r in resources if isinstance(r, dict)]

    def fetch_images(self, product_id: str) -> List[ImageRef]:
        """Images for one product; [] when unconfigured or on any failure."""
        if not product_id or not self.configured:
            return []
        try:
            return self.search_folder(str(product_id))
        except ImageLookupError as e:
            logger.error(f"Error fetching images for product {product_id}: {e}")
            log_event(
                "image_lookup_error",
                {"message": "Image lookup failed", "product_id": str(product_id), "error": str(e)},
            )
            return []
        except Exception:
            logger.exception(f"Unexpected error fetching images for product {product_id}")
            return []

    def fetch_images_batch(self, product_ids: Iterable[Any]) -> Dict[str, List[ImageRef]]:
        """Images for many products, looked up concurrently.

        Every requested id is present in the result; a failed lookup maps to
        an empty list without affecting the others. One worker per id, so
        callers should keep batches small.
        """
        ids = list(dict.fromkeys(str(pid) for pid in product_ids))
        if not ids:
            return {}
        if not self.configured:
            return {pid: [] for pid in ids}

        with ThreadPoolExecutor(max_workers=len(ids), thread_name_prefix="image-lookup") as pool:
            found = pool.map(self.fetch_images, ids)
            return dict(zip(ids, found))
