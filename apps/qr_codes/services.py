import base64
import logging
from io import BytesIO

import qrcode
from django.conf import settings
from django.db.models import F
from django.http import Http404
from django.shortcuts import get_object_or_404

from .models import QRCode
from .records import DESTINATION_PRODUCT, VARIANT_ID_PATTERN, Draft, validate_qr_code

logger = logging.getLogger(__name__)

QR_VERSION = 1
QR_BOX_SIZE = 10
QR_BORDER = 4
QR_IMAGE_FORMAT = "PNG"

PRODUCT_QUERY = """
query supplementQRCode($id: ID!) {
  product(id: $id) {
    title
    images(first: 1) {
      nodes {
        altText
        url
      }
    }
  }
}
"""


def serialize_qr_code(qr_code):
    return {
        "id": qr_code.id,
        "shop": qr_code.shop,
        "title": qr_code.title,
        "productId": qr_code.product_id,
        "productVariantId": qr_code.product_variant_id,
        "productHandle": qr_code.product_handle,
        "destination": qr_code.destination,
        "scans": qr_code.scans,
        "createdAt": qr_code.created_at.isoformat() if qr_code.created_at else None,
    }


def get_scan_url(qr_id):
    return f"{settings.SHOPIFY_APP_URL}/qrcodes/{qr_id}/scan/"


def get_qr_code_image(qr_id):
    qr = qrcode.QRCode(
        version=QR_VERSION,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(get_scan_url(qr_id))
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = BytesIO()
    img.save(buffer, format=QR_IMAGE_FORMAT)
    img_str = base64.b64encode(buffer.getvalue()).decode()
    return f"data:image/png;base64,{img_str}"


def get_destination_url(qr_code):
    if qr_code.destination == DESTINATION_PRODUCT:
        return f"https://{qr_code.shop}/products/{qr_code.product_handle}"

    match = VARIANT_ID_PATTERN.search(qr_code.product_variant_id or "")
    if not match:
        raise ValueError("Unrecognized product variant ID")

    return f"https://{qr_code.shop}/cart/{match.group(1)}:1"


def get_public_qr_code(qr_id):
    qr_code = get_object_or_404(QRCode, pk=qr_id)
    return {
        "id": qr_code.id,
        "title": qr_code.title,
        "image": get_qr_code_image(qr_code.id),
    }


def record_scan(qr_id):
    """Count a scan and return where the customer should be sent."""
    qr_code = get_object_or_404(QRCode, pk=qr_id)
    try:
        destination_url = get_destination_url(qr_code)
    except ValueError:
        logger.warning("Scan of QR code #%s without a destination", qr_code.pk)
        raise Http404("QR code has no destination")

    QRCode.objects.filter(pk=qr_code.pk).update(scans=F("scans") + 1)
    logger.info("Scan of QR code #%s redirected to %s", qr_code.pk, destination_url)
    return destination_url


class QRCodeService:
    def __init__(self, shop, admin_api=None):
        self.shop = shop
        self.admin = admin_api

    def read(self, ref):
        if isinstance(ref, Draft):
            return {"destination": DESTINATION_PRODUCT, "title": ""}

        return self.supplement(self._get(ref))

    def list(self):
        return [self.supplement(qr_code) for qr_code in QRCode.objects.filter(shop=self.shop)]

    def upsert(self, ref, data):
        errors = validate_qr_code(data)
        if errors:
            logger.info("QR code %s rejected for %s: %s", ref.route_id, self.shop, errors)
            return {"errors": errors}

        values = {
            "title": data["title"].strip(),
            "product_id": data["productId"].strip(),
            "product_variant_id": data.get("productVariantId") or "",
            "product_handle": data.get("productHandle") or "",
            "destination": data.get("destination") or DESTINATION_PRODUCT,
            "shop": self.shop,
        }

        if isinstance(ref, Draft):
            qr_code = QRCode.objects.create(**values)
            logger.info("Created QR code #%s for %s", qr_code.pk, self.shop)
        else:
            qr_code = self._get(ref)
            for field, value in values.items():
                setattr(qr_code, field, value)
            qr_code.save(update_fields=list(values))
            logger.info("Updated QR code #%s for %s", qr_code.pk, self.shop)

        return {"qrCode": serialize_qr_code(qr_code)}

    def delete(self, ref):
        if isinstance(ref, Draft):
            raise Http404("A draft QR code cannot be deleted")

        qr_code = self._get(ref)
        qr_code.delete()
        logger.info("Deleted QR code #%s for %s", ref.id, self.shop)
        return {"deletedId": ref.route_id}

    def supplement(self, qr_code):
        response = self.admin.graphql(PRODUCT_QUERY, {"id": qr_code.product_id})

        product = (response.get("data") or {}).get("product") or {}
        images = (product.get("images") or {}).get("nodes") or []
        image = images[0] if images else {}

        try:
            destination_url = get_destination_url(qr_code)
        except ValueError as e:
            logger.warning("QR code #%s has no destination: %s", qr_code.pk, str(e))
            destination_url = None

        record = serialize_qr_code(qr_code)
        record.update(
            {
                "productDeleted": not product.get("title"),
                "productTitle": product.get("title"),
                "productImage": image.get("url"),
                "productAlt": image.get("altText"),
                "destinationUrl": destination_url,
                "image": get_qr_code_image(qr_code.id),
            }
        )
        return record

    def _get(self, ref):
        return get_object_or_404(QRCode, pk=ref.id, shop=self.shop)
