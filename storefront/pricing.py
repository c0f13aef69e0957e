"""Price parsing and display helpers.

Catalog prices are free-form strings typed by the shop ("1,299", "2.499 RSD",
"/"), so parsing keeps only the digits. Anything without digits counts as 0
and is logged instead of poisoning cart totals.
"""

import re
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional, Union

if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).parent))
    from logging_config import get_logger
    from models import NOT_ON_SALE, Product
else:
    from .logging_config import get_logger
    from .models import NOT_ON_SALE, Product

__all__ = [
    "parse_price",
    "effective_price",
    "format_price_number",
    "format_price_string",
]

logger = get_logger("pricing")

_NON_DIGITS_RE = re.compile(r"[^\d]")
_THOUSANDS_RE = re.compile(r"\B(?=(\d{3})+(?!\d))")


def parse_price(value: Any) -> Optional[Decimal]:
    """Parse a catalog price into a Decimal.

    Numbers are taken as-is; strings keep only their digits, so "1,299 RSD"
    reads as 1299. Returns None when there is nothing to parse.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        try:
            parsed = Decimal(str(value))
        except InvalidOperation:
            return None
        return parsed if parsed.is_finite() else None
    digits = _NON_DIGITS_RE.sub("", str(value))
    if not digits:
        return None
    return Decimal(digits)


def effective_price(product: Product) -> Decimal:
    """Price a customer pays: the sale price when set, otherwise the price.

    Unparseable prices count as 0 so one broken entry cannot break totals.
    """
    raw = product.sale_price if product.on_sale else product.price
    parsed = parse_price(raw)
    if parsed is None:
        logger.warning(f"Unparseable price {raw!r} for product {product.id}; counting as 0")
        return Decimal("0")
    return parsed


def format_price_number(value: Union[int, float, Decimal]) -> str:
    """Format with two decimals and comma thousands: 1234.5 -> "1,234.50"."""
    amount = Decimal(str(value)).quantize(Decimal("0.01"))
    return f"{amount:,.2f}"


def format_price_string(price: Any) -> Any:
    """Add comma thousands separators to a whole-number price.

    Empty values and the "/" sentinel come back unchanged, as does anything
    without digits.
    """
    if price is None or price == "" or price == NOT_ON_SALE:
        return price
    parsed = parse_price(price)
    if parsed is None:
        return price
    if parsed == parsed.to_integral_value():
        return _THOUSANDS_RE.sub(",", str(int(parsed)))
    return _THOUSANDS_RE.sub(",", format(parsed.normalize(), "f"))
