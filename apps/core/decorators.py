import logging
from functools import wraps

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .models import ShopSession
from .shopify import ShopifyAdminClient

logger = logging.getLogger(__name__)


def shop_auth(func):
    """Resolve the shop for an embedded admin request.

    The platform opens the app with ``?shop=<domain>``; the shop is then kept
    in the Django session so that follow-up requests from the app frame do
    not need to repeat it. The view receives ``request.shop_session`` and an
    authenticated ``request.admin_api`` client.
    """

    @csrf_exempt
    @wraps(func)
    def wrapper(request, *args, **kwargs):
        shop = request.GET.get("shop") or request.POST.get("shop") or request.session.get("shop")

        if not shop:
            return JsonResponse({"error": "Shop is not specified"}, status=401)

        shop_session = ShopSession.objects.filter(shop=shop).first()
        if shop_session is None:
            logger.warning("No session stored for shop %s", shop)
            return JsonResponse({"error": "App is not installed for this shop"}, status=401)

        request.session["shop"] = shop_session.shop
        request.shop_session = shop_session
        request.admin_api = ShopifyAdminClient(shop_session.shop, shop_session.access_token)
        return func(request, *args, **kwargs)

    return wrapper
