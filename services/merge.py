"""Merging of partial deal fragments into canonical deal records.

The browser extension and the frontend each submit part of a deal (title and
price from the product page, a discount code from elsewhere). Fragments are
merged by ASIN: a field supplied by the incoming fragment wins, a field it
leaves out keeps whatever was stored before. Nothing here touches the disk.
"""

import time

from services.errors import ValidationError

OPTIONAL_FIELDS = ("title", "price", "code", "discount", "imageUrl", "affiliateLink")

STATUS_READY = "Ready"
STATUS_INCOMPLETE = "Incomplete"

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/seed/{asin}/400/400"


def now_ms() -> int:
    return int(time.time() * 1000)


def is_present(value) -> bool:
    # 0 is a real price or discount, only missing and blank values are absent
    return value is not None and value != ""


def placeholder_image_url(asin: str) -> str:
    return PLACEHOLDER_IMAGE_URL.format(asin=asin)


def derive_status(deal: dict) -> str:
    """Ready once a deal has a title, a price and either a code or a discount."""
    if (
        is_present(deal.get("title"))
        and is_present(deal.get("price"))
        and (is_present(deal.get("code")) or is_present(deal.get("discount")))
    ):
        return STATUS_READY
    return STATUS_INCOMPLETE


def find_index(deals: list, asin: str) -> int:
    for i, deal in enumerate(deals):
        if isinstance(deal, dict) and deal.get("asin") == asin:
            return i
    return -1


def ingest(partial: dict, current: list, now: int | None = None):
    """Merge ``partial`` into ``current``.

    Returns ``(merged, next_deals)``. An ASIN seen before is updated in place,
    a new one is prepended. ``current`` itself is left untouched.
    """
    asin = partial.get("asin")
    if not isinstance(asin, str) or not asin.strip():
        raise ValidationError("ASIN is required")

    index = find_index(current, asin)
    existing = current[index] if index > -1 else {}

    merged = {"asin": asin}
    for field in OPTIONAL_FIELDS:
        value = partial.get(field)
        if not is_present(value):
            value = existing.get(field)
        if is_present(value):
            merged[field] = value

    if "imageUrl" not in merged:
        merged["imageUrl"] = placeholder_image_url(asin)

    merged["lastUpdated"] = now if now is not None else now_ms()
    merged["status"] = derive_status(merged)

    next_deals = list(current)
    if index > -1:
        next_deals[index] = merged
    else:
        next_deals.insert(0, merged)
    return merged, next_deals


def replace_all(deals) -> list:
    """Check a candidate collection for bulk replacement and hand it back as is.

    Records are trusted wholesale: no merge and no status recomputation.
    """
    if not isinstance(deals, list):
        raise ValidationError("Deals must be an array")

    seen = set()
    for i, deal in enumerate(deals):
        if not isinstance(deal, dict):
            raise ValidationError(f"Deal at index {i} must be an object")
        asin = deal.get("asin")
        if not isinstance(asin, str) or not asin.strip():
            raise ValidationError(f"Deal at index {i} is missing an ASIN")
        if asin in seen:
            raise ValidationError(f"Duplicate ASIN {asin} at index {i}")
        seen.add(asin)
    return deals
