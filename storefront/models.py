"""Data models for catalog products."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

__all__ = ["Product", "NOT_ON_SALE"]

# Sentinel the catalog uses in salePrice/percentage for "no discount"
NOT_ON_SALE = "/"


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class Product:
    """A single product from the catalog JSON file.

    Only the fields routing and pricing need are lifted out; the full JSON
    object stays in ``raw`` so templates can render anything else it carries.
    """

    id: str
    title: str
    category: Optional[str] = None
    subcategory: Optional[str] = None
    product_type: Optional[str] = None
    price: Any = None
    sale_price: Any = None
    percentage: Any = None
    brand: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def on_sale(self) -> bool:
        return self.sale_price not in (None, "", NOT_ON_SALE)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        """Build a product from one catalog entry.

        IDs are normalised to str since older catalog files used numbers.
        """
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title") or ""),
            category=_optional_text(data.get("category")),
            subcategory=_optional_text(data.get("subcategory")),
            product_type=_optional_text(data.get("type")),
            price=data.get("price"),
            sale_price=data.get("salePrice"),
            percentage=data.get("percentage"),
            brand=_optional_text(data.get("brand")),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the catalog entry with the normalised id."""
        out = dict(self.raw)
        out["id"] = self.id
        return out
