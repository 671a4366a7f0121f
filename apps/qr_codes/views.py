import logging

import requests
from django.http import Http404, JsonResponse
from django.shortcuts import redirect
from django.views.decorators.http import require_GET, require_http_methods

from apps.core.decorators import shop_auth
from apps.core.shopify import ShopifyAdminError

from .records import FORM_FIELDS, parse_record_ref
from .services import QRCodeService, get_public_qr_code, record_scan

logger = logging.getLogger(__name__)

ADMIN_API_ERROR = "Could not load product data from the store. Try reloading the page."


@shop_auth
@require_GET
def index(request):
    service = QRCodeService(request.shop_session.shop, request.admin_api)

    try:
        qr_codes = service.list()
    except (requests.RequestException, ShopifyAdminError) as e:
        logger.error("Error loading QR codes for %s: %s", service.shop, str(e))
        return JsonResponse({"error": ADMIN_API_ERROR}, status=502)

    return JsonResponse({"qrCodes": qr_codes})


@shop_auth
@require_http_methods(["GET", "POST"])
def qr_code_detail(request, qr_id):
    try:
        ref = parse_record_ref(qr_id)
    except ValueError:
        raise Http404("QR code not found")

    service = QRCodeService(request.shop_session.shop, request.admin_api)

    if request.method == "POST":
        return JsonResponse(run_action(service, ref, request.POST))

    try:
        qr_code = service.read(ref)
    except (requests.RequestException, ShopifyAdminError) as e:
        logger.error("Error loading QR code %s: %s", qr_id, str(e))
        return JsonResponse({"error": ADMIN_API_ERROR}, status=502)

    return JsonResponse(qr_code)


def run_action(service, ref, form):
    if form.get("action") == "delete":
        return service.delete(ref)

    data = {field: form.get(field, "") for field in FORM_FIELDS}
    return service.upsert(ref, data)


@require_GET
def public_qr_code(request, qr_id):
    return JsonResponse(get_public_qr_code(qr_id))


@require_GET
def scan(request, qr_id):
    return redirect(record_scan(qr_id))
