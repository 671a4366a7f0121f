"""Record references and input validation shared by the views and the form.

Nothing here touches the database, so the form controller can use it without
a configured Django project.
"""
import re
from dataclasses import dataclass

NEW_ID = "new"

VARIANT_ID_PATTERN = re.compile(r"gid://shopify/ProductVariant/([0-9]+)")

DESTINATION_PRODUCT = "product"
DESTINATION_CART = "cart"
DESTINATIONS = (DESTINATION_PRODUCT, DESTINATION_CART)

FORM_FIELDS = ("title", "productId", "productVariantId", "productHandle", "destination")


@dataclass(frozen=True)
class Draft:
    """A QR code that has not been saved yet."""

    @property
    def route_id(self):
        return NEW_ID


@dataclass(frozen=True)
class Existing:
    id: int

    @property
    def route_id(self):
        return str(self.id)


def parse_record_ref(raw):
    if isinstance(raw, (Draft, Existing)):
        return raw

    value = str(raw).strip()
    if value == NEW_ID:
        return Draft()
    if value.isascii() and value.isdigit() and int(value) > 0:
        return Existing(int(value))

    raise ValueError(f"Invalid QR code id: {raw!r}")


def validate_qr_code(data):
    """Return a ``{field: message}`` mapping, or ``None`` when the input is valid."""
    errors = {}

    if not (data.get("title") or "").strip():
        errors["title"] = "Title is required"

    if not (data.get("productId") or "").strip():
        errors["productId"] = "Product is required"

    destination = data.get("destination")
    if destination and destination not in DESTINATIONS:
        errors["destination"] = "Destination must be product or cart"

    if errors:
        return errors
    return None
